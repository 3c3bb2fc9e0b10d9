"""
Per-day summary of the store, built with pandas.

Used by `-summary` on the command line and by the dashboard.
"""

from __future__ import annotations

import sys
from typing import Iterable

import pandas as pd

from checkin.config import Settings
from checkin.export import NO_RECORDS, export_window, filter_records, parse_date
from checkin.records import ScanRecord
from checkin.store import StoreError, open_existing

RECORD_COLUMNS = ["timestamp", "date", "time", "barcode_id", "sequence"]
SUMMARY_COLUMNS = ["date", "scans", "unique_ids", "max_sequence", "first_scan", "last_scan"]


def records_frame(records: Iterable[ScanRecord]) -> pd.DataFrame:
    rows = [
        {
            "timestamp": r.timestamp,
            "date": r.day,
            "time": r.timestamp.strftime("%H:%M:%S"),
            "barcode_id": r.barcode_id,
            "sequence": r.sequence,
        }
        for r in records
    ]
    if not rows:
        return pd.DataFrame(columns=RECORD_COLUMNS)
    return pd.DataFrame(rows, columns=RECORD_COLUMNS)


def daily_summary(records: Iterable[ScanRecord]) -> pd.DataFrame:
    df = records_frame(records)
    if df.empty:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)

    out = (
        df.groupby("date", sort=True)
        .agg(
            scans=("barcode_id", "size"),
            unique_ids=("barcode_id", "nunique"),
            max_sequence=("sequence", "max"),
            first_scan=("time", "min"),
            last_scan=("time", "max"),
        )
        .reset_index()
    )
    return out[SUMMARY_COLUMNS]


def run_summary(settings: Settings, start_text: str | None = None, end_text: str | None = None) -> int:
    try:
        records = open_existing(settings.store_path).load()
    except StoreError as e:
        print(e, file=sys.stderr)
        return 1

    if start_text:
        try:
            start = parse_date(start_text)
            end = parse_date(end_text) if end_text else None
        except ValueError as e:
            print(f"Error parsing date: {e}", file=sys.stderr)
            return 1
        lower, upper = export_window(start, end)
        records = filter_records(records, lower, upper)

    summary = daily_summary(records)
    if summary.empty:
        print(NO_RECORDS)
        return 0

    print(summary.to_string(index=False))
    print(f"\nTotal scans: {int(summary['scans'].sum()):,} over {len(summary):,} day(s)")
    return 0
