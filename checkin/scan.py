"""
Scan mode: read barcode IDs from the operator and append check-in records.

Each accepted ID gets the current local timestamp and the next sequence
number for today. An ID seen within the duplicate window is skipped.
"""

from __future__ import annotations

import enum
import logging
import sys
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable

from checkin.config import Settings
from checkin.index import ScanIndex
from checkin.records import ScanRecord, is_valid_barcode, local_now
from checkin.store import ScanStore, StoreError

logger = logging.getLogger(__name__)

EXIT_TOKEN = "exit"
PROMPT = "Barcode ID: "


class ScanStatus(enum.Enum):
    RECORDED = "recorded"
    DUPLICATE = "duplicate"
    INVALID = "invalid"
    FAILED = "failed"


@dataclass
class ScanResult:
    status: ScanStatus
    record: ScanRecord | None = None
    error: str = ""


class ScanSession:
    def __init__(
        self,
        store: ScanStore,
        index: ScanIndex,
        window: timedelta = timedelta(hours=2),
        clock: Callable[[], datetime] = local_now,
    ):
        self.store = store
        self.index = index
        self.window = window
        self.clock = clock

    @classmethod
    def open(cls, store: ScanStore, window: timedelta = timedelta(hours=2), clock: Callable[[], datetime] = local_now) -> "ScanSession":
        """Create the store if needed and index what is already in it."""
        store.ensure()
        return cls(store, ScanIndex.from_records(store.load()), window=window, clock=clock)

    def submit(self, raw: str) -> ScanResult:
        barcode_id = raw.strip()
        if not is_valid_barcode(barcode_id):
            return ScanResult(ScanStatus.INVALID)

        now = self.clock()
        if self.index.is_recent_duplicate(barcode_id, now, self.window):
            logger.info("duplicate within %s: %s", self.window, barcode_id)
            return ScanResult(ScanStatus.DUPLICATE)

        day = now.strftime("%Y-%m-%d")
        record = ScanRecord(timestamp=now, barcode_id=barcode_id, sequence=self.index.next_sequence(day))
        try:
            self.store.append(record)
        except StoreError as e:
            logger.info("append failed: %s", e)
            return ScanResult(ScanStatus.FAILED, record=record, error=str(e))

        self.index.observe(record)
        return ScanResult(ScanStatus.RECORDED, record=record)


def _window_label(window: timedelta) -> str:
    hours = window.total_seconds() / 3600
    if hours == int(hours):
        n = int(hours)
        return f"{n} hour" if n == 1 else f"{n} hours"
    return f"{hours:g} hours"


def run_scan_mode(
    settings: Settings,
    read_line: Callable[[str], str] | None = None,
    clock: Callable[[], datetime] = local_now,
) -> int:
    if read_line is None:
        read_line = input
    window = timedelta(hours=settings.duplicate_window_hours)
    try:
        session = ScanSession.open(ScanStore(settings.store_path), window=window, clock=clock)
    except StoreError as e:
        print(e, file=sys.stderr)
        return 1

    print("Barcode scanner ready. Type 'exit' to quit.")
    while True:
        try:
            line = read_line(PROMPT)
        except EOFError:
            print()
            print("Exiting scan mode.")
            break

        if line.strip() == EXIT_TOKEN:
            print("Exiting scan mode.")
            break

        result = session.submit(line)
        if result.status is ScanStatus.INVALID:
            print("Invalid input. Please enter a numeric barcode ID.")
        elif result.status is ScanStatus.DUPLICATE:
            print(f"Duplicate entry within {_window_label(window)} detected. Skipping entry.")
        elif result.status is ScanStatus.FAILED:
            print(f"Error writing to CSV: {result.error}", file=sys.stderr)
        else:
            print("Recorded:", result.record.to_row())
    return 0
