"""Console entry point for Open Watermark."""

from typing import List, Optional
import argparse
import logging
import sys

from OW_Libs.config import AppConfig
from OW_Libs.constants import HISTORY_FILE_NAME, LOG_FORMAT
from OW_Libs.ShellLib import AppContext, ConsoleShell, build_default_registry


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Convert images to grayscale and tile a watermark across them."
    )
    parser.add_argument(
        "--history",
        default=HISTORY_FILE_NAME,
        help=f"operation history file (default: {HISTORY_FILE_NAME})",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="log debug output")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    config = AppConfig(
        history_path=args.history,
        log_level="DEBUG" if args.verbose else "WARNING",
    )
    logging.basicConfig(level=config.numeric_log_level, format=LOG_FORMAT)

    context = AppContext.create(config)
    shell = ConsoleShell(build_default_registry(), context)
    try:
        return shell.run()
    except (EOFError, KeyboardInterrupt):
        # Input closed without Exit: history is not flushed
        print()
        return 1


if __name__ == "__main__":
    sys.exit(main())
