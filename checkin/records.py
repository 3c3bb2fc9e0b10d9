"""
Scan records and the timestamp format used in the store.

A stored row looks like:

    2024-10-25T09:14:03+02:00,4006381333931,7
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime

from dateutil import parser as dateparser
from dateutil import tz

BARCODE_RE = re.compile(r"[0-9]+")


def local_now() -> datetime:
    return datetime.now(tz.tzlocal()).replace(microsecond=0)


def format_timestamp(dt: datetime) -> str:
    # YYYY-MM-DDTHH:MM:SS+HH:MM
    return dt.isoformat(timespec="seconds")


def parse_timestamp(text: str) -> datetime:
    """Parse a store timestamp. Naive timestamps are rejected."""
    dt = dateparser.isoparse(text.strip())
    if dt.tzinfo is None:
        raise ValueError(f"timestamp has no UTC offset: {text!r}")
    return dt


def is_valid_barcode(text: str) -> bool:
    return BARCODE_RE.fullmatch(text) is not None


@dataclass(frozen=True)
class ScanRecord:
    timestamp: datetime
    barcode_id: str
    sequence: int

    @property
    def day(self) -> str:
        """Calendar date of the scan in the offset it was written with."""
        return self.timestamp.strftime("%Y-%m-%d")

    def to_row(self) -> list[str]:
        return [format_timestamp(self.timestamp), self.barcode_id, str(self.sequence)]

    @classmethod
    def from_row(cls, row: list[str]) -> "ScanRecord":
        if len(row) < 3:
            raise ValueError(f"expected 3 fields, got {len(row)}")
        timestamp = parse_timestamp(row[0])
        try:
            sequence = int(row[2])
        except ValueError:
            raise ValueError(f"bad sequence: {row[2]!r}") from None
        return cls(timestamp=timestamp, barcode_id=row[1].strip(), sequence=sequence)
