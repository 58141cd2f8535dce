from __future__ import annotations

import argparse
import logging
from pathlib import Path

from regex_find.finder import Finder
from regex_find.finderconfig import FinderConfig
from regex_find.finderconfig import write_new_config
from regex_find.findermodel import PatternCompilationError

LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_LOG_FILE = "regex_find.log"

logger = logging.getLogger("regex_find")


def _non_negative_int(value: str) -> int:
    """Parse a byte count, rejecting negative values."""
    try:
        size = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid size: {value!r}") from None

    if size < 0:
        raise argparse.ArgumentTypeError(f"size must not be negative: {value}")

    return size


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="regex-find",
        description="A command line utility for searching for files with regexes.",
    )
    parser.add_argument(
        "-d",
        "--dirs",
        help="List of directories to search in.",
        nargs="+",
        action="extend",
        default=[],
    )
    parser.add_argument(
        "-p",
        "--patterns",
        help="List of patterns to use. All patterns must match the path.",
        nargs="+",
        action="extend",
        default=[],
    )
    parser.add_argument(
        "-s",
        "--size",
        help="Match files above size <size> in bytes. Default: 0",
        type=_non_negative_int,
        default=None,
    )
    parser.add_argument(
        "--strict-patterns",
        help="Exit with an error if any pattern is not a valid regex.",
        default=False,
        action="store_true",
    )
    parser.add_argument(
        "--output-file",
        help="Also append matched paths to this file.",
        default=None,
    )
    parser.add_argument(
        "--config",
        help="Read defaults from this configuration file.",
        default=None,
    )
    parser.add_argument(
        "--make-config",
        help="Create a default configuration file at the --config path.",
        default=False,
        action="store_true",
    )
    parser.add_argument(
        "--debug",
        help="Enable debug logging.",
        default=False,
        action="store_true",
    )
    parser.add_argument(
        "--log-file",
        help="Enable logging to a file next to the config file.",
        default=False,
        action="store_true",
    )
    parsed = parser.parse_args(args)

    if parsed.make_config and not parsed.config:
        parser.error("--make-config requires --config")

    if not parsed.config and not parsed.make_config:
        required = (("-d/--dirs", parsed.dirs), ("-p/--patterns", parsed.patterns))
        missing = [flag for flag, value in required if not value]
        if missing:
            parser.error(f"the following arguments are required: {', '.join(missing)}")

    return parsed


def add_file_handler_to_logging(config_filepath: str | None) -> None:
    """Add a file handler to the root logger next to the config file provided."""
    if config_filepath:
        filepath = Path(config_filepath).absolute()
        log_filepath = filepath.parent / f"{filepath.stem}.log"
    else:
        log_filepath = Path(DEFAULT_LOG_FILE).absolute()

    file_handler = logging.FileHandler(log_filepath)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logging.getLogger().addHandler(file_handler)


def main(*, cli_args: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(cli_args)

    if args.make_config:
        write_new_config(args.config)
        return 0

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
    )

    if args.log_file:
        add_file_handler_to_logging(args.config)

    config = FinderConfig.from_args(args)

    if not config.root_directories or not config.patterns:
        logger.error("No directories or no patterns configured, nothing to search")
        return 2

    try:
        finder = Finder(config)

    except PatternCompilationError as error:
        logger.error("Invalid pattern: %s", error)
        return 2

    finder.run()

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
