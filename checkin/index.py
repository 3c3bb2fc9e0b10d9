"""
In-memory lookup tables for duplicate checks and daily sequence numbers.

Built once from the store and kept current as records are appended, which
gives the same answers as rescanning the whole file before each scan.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Iterable

from checkin.records import ScanRecord


@dataclass
class ScanIndex:
    last_seen: dict[str, datetime] = field(default_factory=dict)
    max_sequence: dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_records(cls, records: Iterable[ScanRecord]) -> "ScanIndex":
        index = cls()
        for r in records:
            index.observe(r)
        return index

    def observe(self, record: ScanRecord) -> None:
        seen = self.last_seen.get(record.barcode_id)
        if seen is None or record.timestamp > seen:
            self.last_seen[record.barcode_id] = record.timestamp

        day = record.day
        if record.sequence > self.max_sequence.get(day, 0):
            self.max_sequence[day] = record.sequence

    def is_recent_duplicate(self, barcode_id: str, now: datetime, window: timedelta) -> bool:
        # strictly later than now - window
        seen = self.last_seen.get(barcode_id)
        return seen is not None and seen > now - window

    def next_sequence(self, day: str) -> int:
        return self.max_sequence.get(day, 0) + 1
