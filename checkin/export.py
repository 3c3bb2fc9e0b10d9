"""
Export mode: copy the records of a date or date range into a new CSV.

Output names:
  export_<start>_<count>_records.csv
  export_<start>_to_<end>_<count>_records.csv
"""

from __future__ import annotations

import csv
import io
import logging
import re
import sys
from datetime import date, datetime, time, timedelta, tzinfo
from pathlib import Path
from typing import Iterable

from dateutil import tz

from checkin.config import Settings
from checkin.records import ScanRecord
from checkin.store import StoreError, open_existing

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"
DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
NO_RECORDS = "No records found for the specified date range."


def parse_date(text: str) -> date:
    text = text.strip()
    # strptime alone would take 2024-1-5
    if not DATE_RE.fullmatch(text):
        raise ValueError(f"date {text!r} does not match YYYY-MM-DD")
    return datetime.strptime(text, DATE_FORMAT).date()


def export_window(start: date, end: date | None = None, tzinfo: tzinfo | None = None) -> tuple[datetime, datetime]:
    """
    Return [lower, upper) for the given days in local time.

    lower is midnight at the start of `start`; upper is midnight after
    `end` (or `start`), so every second of the last day is included.
    """
    zone = tzinfo or tz.tzlocal()
    last = end or start
    lower = datetime.combine(start, time(), tzinfo=zone)
    upper = datetime.combine(last + timedelta(days=1), time(), tzinfo=zone)
    return lower, upper


def filter_records(records: Iterable[ScanRecord], lower: datetime, upper: datetime) -> list[ScanRecord]:
    return [r for r in records if lower <= r.timestamp < upper]


def export_filename(start: str, end: str | None, count: int) -> str:
    if end:
        return f"export_{start}_to_{end}_{count}_records.csv"
    return f"export_{start}_{count}_records.csv"


def export_csv_text(records: Iterable[ScanRecord]) -> str:
    buf = io.StringIO()
    csv.writer(buf, lineterminator="\n").writerows(r.to_row() for r in records)
    return buf.getvalue()


def write_export(path: Path, records: list[ScanRecord]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(export_csv_text(records), encoding="utf-8", newline="")
    return path


def run_export(settings: Settings, start_text: str, end_text: str | None = None, tzinfo: tzinfo | None = None) -> int:
    try:
        start = parse_date(start_text)
    except ValueError as e:
        print(f"Error parsing start date: {e}", file=sys.stderr)
        return 1

    end = None
    if end_text:
        try:
            end = parse_date(end_text)
        except ValueError as e:
            print(f"Error parsing end date: {e}", file=sys.stderr)
            return 1

    try:
        records = open_existing(settings.store_path).load()
    except StoreError as e:
        print(e, file=sys.stderr)
        return 1

    lower, upper = export_window(start, end, tzinfo=tzinfo)
    matched = filter_records(records, lower, upper)
    logger.info("export window %s .. %s matched %d of %d", lower, upper, len(matched), len(records))

    if not matched:
        print(NO_RECORDS)
        return 0

    filename = export_filename(start.strftime(DATE_FORMAT), end.strftime(DATE_FORMAT) if end else None, len(matched))
    out_path = Path(settings.export_dir) / filename
    try:
        write_export(out_path, matched)
    except OSError as e:
        print(f"Error writing to export file: {e}", file=sys.stderr)
        return 1

    print(f"Exported {len(matched)} records to {out_path}")
    return 0
