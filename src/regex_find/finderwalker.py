from __future__ import annotations

import logging
import os
import re
from collections.abc import Callable
from collections.abc import Iterable
from collections.abc import Iterator

from .findermodel import DirectoryEntryError
from .findermodel import DirectoryListingError
from .findermodel import FileInfo
from .findermodel import FinderError
from .findermodel import MetadataError
from .findermodel import PatternCompilationError

ErrorSink = Callable[[FinderError], None]

logger = logging.getLogger(__name__)


def _log_error(error: FinderError) -> None:
    """Default sink, used when the caller does not collect errors itself."""
    logger.warning("%s", error)


def compile_patterns(
    patterns: Iterable[str],
    *,
    strict: bool = False,
    on_error: ErrorSink | None = None,
) -> list[re.Pattern[str]]:
    """
    Compile each pattern string into a regular expression.

    An invalid pattern is replaced by the empty pattern, which matches any
    path, and the failure is reported to `on_error`.

    Args:
        patterns: The pattern strings, in order.

    Keyword Args:
        strict: Raise on the first invalid pattern instead of replacing it.
        on_error: Receives a PatternCompilationError for each invalid pattern.
            Defaults to logging a warning.

    Raises:
        PatternCompilationError: Only when `strict` is set.
    """
    report = on_error or _log_error
    compiled: list[re.Pattern[str]] = []

    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))

        except re.error as error:
            if strict:
                raise PatternCompilationError(pattern, error) from error

            report(PatternCompilationError(pattern, error))
            compiled.append(re.compile(""))

    return compiled


def matches_all(path: str, patterns: Iterable[re.Pattern[str]]) -> bool:
    """True if every pattern is found somewhere in the path."""
    return all(pattern.search(path) for pattern in patterns)


def exceeds_size(file: FileInfo, min_size: int) -> bool:
    """True if the file is strictly larger than min_size bytes."""
    return file.size > min_size


class FinderWalker:
    """Depth-first walk of a file tree, yielding the entries that pass the filter."""

    logger = logging.getLogger(__name__)

    def __init__(
        self,
        patterns: Iterable[re.Pattern[str]],
        min_size: int = 0,
        *,
        on_error: ErrorSink | None = None,
    ) -> None:
        """
        Initialize a new FinderWalker.

        Args:
            patterns: Compiled patterns, all of which must match a path.
            min_size: Entries must be larger than this many bytes.

        Keyword Args:
            on_error: Receives every recoverable error met during a walk.
                Defaults to logging a warning.
        """
        self._patterns = list(patterns)
        self._min_size = min_size
        self._on_error = on_error or _log_error

    def matches(self, file: FileInfo) -> bool:
        """True if the file passes both the path and the size filter."""
        return matches_all(file.path, self._patterns) and exceeds_size(
            file, self._min_size
        )

    def traverse(self, root: FileInfo) -> list[FileInfo]:
        """Walk the tree under root and return every matching entry."""
        return list(self.iter_matches(root))

    def iter_matches(self, root: FileInfo) -> Iterator[FileInfo]:
        """
        Lazily walk the tree under root in pre-order, yielding matches.

        A parent is yielded before any of its descendants and the entries of
        one subtree are yielded before those of the next sibling. Siblings
        follow the order the filesystem lists them in.

        Directories are descended into once per walk, keyed on device and
        inode, so symbolic link cycles terminate.
        """
        visited: set[tuple[int, int]] = set()
        pending: list[FileInfo | str] = [root]

        while pending:
            item = pending.pop()
            node = item if isinstance(item, FileInfo) else self._read_entry(item)
            if node is None:
                continue

            if self.matches(node):
                yield node

            if not node.is_dir or not self._mark_visited(node, visited):
                continue

            # Reversed so the first listed entry is popped first
            pending.extend(reversed(self._list_directory(node)))

    def _read_entry(self, path: str) -> FileInfo | None:
        """Build the FileInfo for a listed entry, None if it cannot be read."""
        try:
            return FileInfo.from_path(path)

        except MetadataError as error:
            self._on_error(error)
            return None

    def _mark_visited(
        self,
        directory: FileInfo,
        visited: set[tuple[int, int]],
    ) -> bool:
        """Record the directory as visited, False if it already was."""
        identity = directory.identity
        if identity is None:
            return True

        if identity in visited:
            self.logger.debug("Skipping already visited directory '%s'", directory.path)
            return False

        visited.add(identity)
        return True

    def _list_directory(self, directory: FileInfo) -> list[str]:
        """
        Return the paths of the immediate entries of a directory.

        The directory handle is closed before returning. Failures are reported
        and whatever was read before the failure is returned.
        """
        try:
            scanner = os.scandir(directory.path)

        except OSError as error:
            self._on_error(DirectoryListingError(directory.path, error))
            return []

        entry_paths: list[str] = []
        with scanner as entries:
            while True:
                try:
                    entry = next(entries)

                except StopIteration:
                    break

                except OSError as error:
                    # A failed read cannot be resumed, keep what was listed
                    self._on_error(DirectoryEntryError(directory.path, error))
                    break

                entry_paths.append(entry.path)

        self.logger.debug("Listed %s entries in '%s'", len(entry_paths), directory.path)

        return entry_paths


def traverse(
    root: FileInfo,
    patterns: Iterable[re.Pattern[str]],
    min_size: int = 0,
    *,
    on_error: ErrorSink | None = None,
) -> list[FileInfo]:
    """Return every entry under root, root included, that passes the filter."""
    return FinderWalker(patterns, min_size, on_error=on_error).traverse(root)
