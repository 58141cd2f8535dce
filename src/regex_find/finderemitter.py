from __future__ import annotations

import logging
import os
import sys
from collections import deque
from typing import TYPE_CHECKING

from .findermodel import FileInfo
from .findermodel import FinderError

if TYPE_CHECKING:
    from typing import Protocol

    class _FinderConfig(Protocol):
        @property
        def emit_stdout(self) -> bool:
            ...

        @property
        def output_file(self) -> str | None:
            ...


def _lossy(text: str) -> str:
    """Replace undecodable filename bytes with U+FFFD so the text is printable."""
    return os.fsencode(text).decode("utf-8", errors="replace")


class FinderEmitter:
    """Emit matched paths to the result channels and errors to stderr."""

    logger = logging.getLogger(__name__)

    def __init__(self, config: _FinderConfig) -> None:
        """Initialize the emitter."""
        self._config = config
        self._paths: deque[str] = deque()
        self.error_count = 0

    def add_result(self, file: FileInfo) -> None:
        """Queue a matched entry to be emitted."""
        self._paths.append(file.path)

    def add_results(self, files: list[FileInfo]) -> None:
        """Queue matched entries to be emitted, keeping their order."""
        self._paths.extend(file.path for file in files)

    def emit(self, *, batch_size: int = 500) -> None:
        """
        Emit all queued paths to the configured targets. Empties the queue.

        Keyword Args:
            batch_size: The number of paths to emit at a time. Defaults to 500.
        """
        count = 0
        while self._paths:
            lines = self._get_lines(batch_size)

            self.to_stdout(lines)
            self.to_file(lines)

            count += len(lines)

        self.logger.info("Emitted %d paths.", count)

    def report(self, error: FinderError) -> None:
        """Write one diagnostic line for a recoverable error to stderr."""
        self.error_count += 1
        self.logger.debug("Recoverable error: %r", error)
        print(_lossy(str(error)), file=sys.stderr)

    def _get_lines(self, max_lines: int) -> list[str]:
        """Build a list of lines to emit, removing them from the emitter."""
        lines: list[str] = []
        while self._paths and len(lines) < max_lines:
            lines.append(self._paths.popleft())

        return lines

    def to_file(self, lines: list[str]) -> None:
        """
        Append paths to the configured output file, one per line.

        Args:
            lines: A list of paths to emit.
        """
        filename = self._config.output_file
        if not filename or not lines:
            return

        with open(
            filename, "a", encoding="utf-8", errors="surrogateescape"
        ) as file_out:
            file_out.write("\n".join(lines) + "\n")

        self.logger.debug("Emitted %d lines to %s", len(lines), filename)

    def to_stdout(self, lines: list[str]) -> None:
        """
        Emit paths to stdout, one per line.

        Args:
            lines: A list of paths to emit.
        """
        if not self._config.emit_stdout or not lines:
            return

        print("\n".join(_lossy(line) for line in lines))

        self.logger.debug("Emitted %d lines to stdout", len(lines))
