"""
Command-line entry point.

  checkin -scan
  checkin -export -start=2024-10-25
  checkin -export -start=2024-10-24 -end=2024-10-26
  checkin -summary
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from checkin.config import resolve_settings, setup_logger
from checkin.export import run_export
from checkin.report import run_summary
from checkin.scan import run_scan_mode

HELP_TEXT = """\
Barcode Check-in Logger
Usage:
  -scan                  : Start barcode scanning mode.
  -export                : Export records within a date or date range.
  -summary               : Print scan counts per day (accepts -start / -end).
  -start=<YYYY-MM-DD>    : Specify the start date for export (required if using export mode).
  -end=<YYYY-MM-DD>      : Specify the end date for export (optional, for a date range).
  -store=<path>          : CSV store to read and write (default: scans.csv).
  -out-dir=<dir>         : Directory for export files (default: current directory).
  -config=<path>         : JSON config file. Flags override env, env overrides config.
  -verbose               : Show diagnostic logging on stderr.
  -help                  : Display this help message.

Examples:
  checkin -scan
  checkin -export -start=2024-10-25
  checkin -export -start=2024-10-24 -end=2024-10-26
  checkin -help
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="checkin", add_help=False, allow_abbrev=False)

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("-scan", "--scan", action="store_true", help="Start barcode scanning mode")
    mode.add_argument("-export", "--export", action="store_true", help="Export records within a date or date range")
    mode.add_argument("-summary", "--summary", action="store_true", help="Print scan counts per day")

    parser.add_argument("-start", "--start", default="", help="Start date (YYYY-MM-DD)")
    parser.add_argument("-end", "--end", default="", help="End date (YYYY-MM-DD)")

    parser.add_argument("-store", "--store", type=Path, default=None)
    parser.add_argument("-out-dir", "--out-dir", dest="out_dir", type=Path, default=None)
    parser.add_argument("-config", "--config", type=Path, default=None)
    parser.add_argument("-verbose", "--verbose", action="store_true")
    parser.add_argument("-help", "--help", "-h", dest="help", action="store_true")
    return parser


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    parser = build_parser()
    args, extra = parser.parse_known_args(argv)
    unknown = [a for a in extra if a.startswith("-")]
    if unknown:
        parser.error(f"unrecognized arguments: {' '.join(unknown)}")

    # bare words are not flags; with no flags at all, show usage
    if args.help or not any(a.startswith("-") for a in argv):
        print(HELP_TEXT, end="")
        return 0

    try:
        settings = resolve_settings(
            config_path=args.config,
            store=args.store,
            export_dir=args.out_dir,
            verbose=args.verbose,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    logger = setup_logger(settings.verbose)
    logger.info("store=%s export_dir=%s window=%sh", settings.store_path, settings.export_dir, settings.duplicate_window_hours)
    if extra:
        logger.warning("ignoring extra arguments: %s", " ".join(extra))

    if args.scan:
        return run_scan_mode(settings)
    if args.export:
        if not args.start:
            print("Error: Start date is required for export mode.")
            return 0
        return run_export(settings, args.start, args.end or None)
    if args.summary:
        if args.end and not args.start:
            print("Error: Start date is required when -end is given.")
            return 0
        return run_summary(settings, args.start or None, args.end or None)

    print("Error: Please specify either -scan or -export.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
