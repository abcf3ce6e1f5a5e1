"""Entry point running the StudentDB bootstrap sequence."""

from __future__ import annotations

import argparse
import logging
import sys

from studentdb.app.launcher import StudentLauncher
from studentdb.core.config import load_config
from studentdb.core.logging_config import setup_logging
from studentdb.storage.store import StudentStore

log = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        "studentdb",
        description="Seed the student store and list its contents.",
    )
    parser.add_argument(
        "location",
        nargs="?",
        help="Directory holding the database file (default: platform data directory)",
    )
    parser.add_argument("--log-dir", default=None, help="Directory for rotating log files")
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Only print warnings and errors to the console",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    console_level = logging.WARNING if args.quiet else logging.INFO

    try:
        setup_logging(app_name="StudentDB", console_level=console_level, log_dir=args.log_dir)
    except OSError as e:
        logging.basicConfig(level=console_level)
        log.error(f"Failed to setup logging: {e}", exc_info=True)

    config = load_config()
    log.info(f"Starting StudentDB at {config.database_path(args.location)}")
    try:
        return StudentLauncher(args.location, config=config).run()
    finally:
        StudentStore.reset_instance()


if __name__ == "__main__":  # pragma: no cover - import guard
    sys.exit(main(sys.argv[1:]))
