from __future__ import annotations

import logging
import time

from .finderconfig import FinderConfig
from .finderemitter import FinderEmitter
from .findermodel import FileInfo
from .findermodel import MetadataError
from .finderwalker import FinderWalker
from .finderwalker import compile_patterns


class Finder:
    """Search root directories for entries matching every pattern and a size."""

    logger = logging.getLogger(__name__)

    def __init__(
        self,
        config: FinderConfig,
        emitter: FinderEmitter | None = None,
    ) -> None:
        """
        Initialize a new Finder.

        Patterns are compiled here, before any directory is walked.

        Args:
            config: The configuration to use for this finder.
            emitter: Where results and errors are sent. Defaults to a new
                FinderEmitter built from the config.

        Raises:
            PatternCompilationError: When strict_patterns is set and a pattern
                is invalid.
        """
        self._config = config
        self._emitter = emitter or FinderEmitter(config)

        patterns = compile_patterns(
            config.patterns,
            strict=config.strict_patterns,
            on_error=self._emitter.report,
        )
        self._walker = FinderWalker(
            patterns,
            config.min_size,
            on_error=self._emitter.report,
        )

    def run(self) -> int:
        """Search every root directory, emitting per root. Return the match count."""
        self.logger.info("Running finder...")
        tic = time.perf_counter()
        total = 0

        for directory in self._config.root_directories:
            matches = self.find_root(directory)
            total += len(matches)

            self._emitter.add_results(matches)
            self._emitter.emit()

        toc = time.perf_counter()
        self.logger.info("Finder finished in %s seconds", toc - tic)
        self.logger.info("Matched %s entries", total)
        self.logger.info("Reported %s errors", self._emitter.error_count)

        return total

    def find_root(self, directory: str) -> list[FileInfo]:
        """Return the matches under one root directory, empty if it cannot be read."""
        self.logger.debug("Searching directory: %s", directory)

        try:
            root = FileInfo.from_path(directory)

        except MetadataError as error:
            self._emitter.report(error)
            return []

        return self._walker.traverse(root)
