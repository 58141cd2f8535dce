from __future__ import annotations

import dataclasses
import os
import stat


class FinderError(Exception):
    """Base for every recoverable error raised while finding files."""

    action = "find"

    def __init__(self, path: str, cause: BaseException) -> None:
        self.path = path
        self.cause = cause
        super().__init__(str(self))

    def __str__(self) -> str:
        return f"{self.action} {self.path}: {self.cause}"


class MetadataError(FinderError):
    """Metadata for a path could not be read."""

    action = "get metadata for"


class DirectoryListingError(FinderError):
    """A directory could not be opened for listing."""

    action = "read dir"


class DirectoryEntryError(FinderError):
    """An entry could not be read from an otherwise open directory."""

    action = "read dir"


class PatternCompilationError(FinderError):
    """A pattern string is not a valid regular expression."""

    action = "compile pattern"

    def __str__(self) -> str:
        return f"{self.action} {self.path!r}: {self.cause}"


@dataclasses.dataclass(frozen=True)
class FileInfo:
    """Snapshot of a single filesystem entry at the moment it was read."""

    path: str
    size: int
    is_dir: bool
    device: int = dataclasses.field(default=0, compare=False, repr=False)
    inode: int = dataclasses.field(default=0, compare=False, repr=False)

    @classmethod
    def from_path(cls, path: str | os.PathLike[str]) -> FileInfo:
        """
        Build a FileInfo from the metadata of the given path.

        The path is kept exactly as given, it is never normalized or resolved.
        Symbolic links are followed.

        Raises:
            MetadataError
        """
        filepath = os.fspath(path)
        try:
            file_stat = os.stat(filepath)

        except OSError as error:
            raise MetadataError(filepath, error) from error

        return cls(
            path=filepath,
            size=file_stat.st_size,
            is_dir=stat.S_ISDIR(file_stat.st_mode),
            device=file_stat.st_dev,
            inode=file_stat.st_ino,
        )

    @property
    def identity(self) -> tuple[int, int] | None:
        """Return (device, inode) when the filesystem reports one."""
        if not self.device and not self.inode:
            return None
        return self.device, self.inode
