from __future__ import annotations

import argparse
import logging
import os
from configparser import ConfigParser

NEW_CONFIG = """\
[finder]
# One root directory per line.
root_directories = .

# One regular expression per line, all of which must match the full path.
# Patterns are searched for anywhere in the path, anchor with ^ and $ as needed.
# Leading and trailing whitespace of each line is dropped.
patterns = \\.py$

# Only report entries larger than this many bytes.
min_size = 0

# Refuse to run when a pattern is not a valid regular expression.
strict_patterns = false

[emit]
stdout = true
# Append matched paths to this file as well. Leave empty to disable.
output_file =

    """


class FinderConfig:
    """Configuration for the Finder."""

    logger = logging.getLogger("regex_find.FinderConfig")

    def __init__(self, filepath: str | None = None) -> None:
        """Load the configuration from the given file, if one is given."""
        self._config = ConfigParser(interpolation=None)
        # Values given on the command line are used verbatim
        self._root_directories: list[str] | None = None
        self._patterns: list[str] | None = None

        if filepath is None:
            return

        success = self._config.read(filepath)

        if not success:
            raise ValueError(f"Could not read config file at {filepath}")

        self.logger.debug("Loaded config from %s", filepath)

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> FinderConfig:
        """Build a config from parsed arguments, layered over any config file."""
        config = cls(getattr(args, "config", None))

        if args.dirs:
            config._root_directories = list(args.dirs)
        if args.patterns:
            config._patterns = list(args.patterns)

        finder: dict[str, str] = {}
        if args.size is not None:
            finder["min_size"] = str(args.size)
        if args.strict_patterns:
            finder["strict_patterns"] = "true"

        emit: dict[str, str] = {}
        if args.output_file:
            emit["output_file"] = args.output_file

        config._config.read_dict({"finder": finder, "emit": emit})
        return config

    @property
    def root_directories(self) -> list[str]:
        """Return the root directories to search, one per line."""
        if self._root_directories is not None:
            return list(self._root_directories)
        return self._get_lines("finder", "root_directories")

    @property
    def patterns(self) -> list[str]:
        """Return the pattern strings, one per line, in order."""
        if self._patterns is not None:
            return list(self._patterns)
        return self._get_lines("finder", "patterns")

    @property
    def min_size(self) -> int:
        """Return the size in bytes an entry must exceed. Raises if negative."""
        min_size = self._config.getint("finder", "min_size", fallback=0)
        if min_size < 0:
            raise ValueError(f"min_size must not be negative, got {min_size}")
        return min_size

    @property
    def strict_patterns(self) -> bool:
        """Return whether an invalid pattern should stop the run."""
        return self._config.getboolean("finder", "strict_patterns", fallback=False)

    @property
    def emit_stdout(self) -> bool:
        """Return whether to emit matched paths to stdout."""
        return self._config.getboolean("emit", "stdout", fallback=True)

    @property
    def output_file(self) -> str | None:
        """Return the file to append matched paths to, or None if not set."""
        return self._config.get("emit", "output_file", fallback="") or None

    def _get_lines(self, section: str, option: str) -> list[str]:
        """Return the non-empty, stripped lines of a multiline value."""
        config_line = self._config.get(section, option, fallback="")
        return [line.strip() for line in config_line.splitlines() if line.strip()]


def write_new_config(filename: str) -> None:
    """Write a new config file if one does not exist."""
    if os.path.exists(filename):
        return

    with open(filename, "w") as config_file:
        config_file.write(NEW_CONFIG)
