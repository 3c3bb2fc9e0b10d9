"""
Flat-file CSV store for scan records.

No header row, one record per line, append-only. Every call opens and
closes the file; nothing is cached between calls.
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path

from checkin.records import ScanRecord

logger = logging.getLogger(__name__)

LEGACY_STORE_NAME = "scanned_barcodes.csv"


class StoreError(Exception):
    """The store could not be opened, read or written."""


class ScanStore:
    def __init__(self, path: str | Path):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def ensure(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.touch(exist_ok=True)
        except OSError as e:
            raise StoreError(f"Error opening/creating file {self.path}: {e}") from e

    def load(self) -> list[ScanRecord]:
        records: list[ScanRecord] = []
        skipped = 0
        try:
            # undecodable bytes become U+FFFD so only that row fails to parse
            with self.path.open("r", encoding="utf-8", errors="replace", newline="") as f:
                reader = csv.reader(f)
                for row in reader:
                    if not row:
                        continue
                    try:
                        records.append(ScanRecord.from_row(row))
                    except ValueError as e:
                        skipped += 1
                        logger.warning("skipping malformed row %d in %s: %s", reader.line_num, self.path, e)
        except (OSError, csv.Error) as e:
            raise StoreError(f"Error reading {self.path}: {e}") from e

        logger.info("loaded %d records from %s (%d skipped)", len(records), self.path, skipped)
        return records

    def append(self, record: ScanRecord) -> None:
        try:
            with self.path.open("a", encoding="utf-8", newline="") as f:
                writer = csv.writer(f, lineterminator="\n")
                writer.writerow(record.to_row())
        except OSError as e:
            raise StoreError(f"Error writing to {self.path}: {e}") from e

    def legacy_path(self) -> Path | None:
        """Return the old export-side store file if it sits next to this one."""
        candidate = self.path.with_name(LEGACY_STORE_NAME)
        if candidate != self.path and candidate.is_file():
            return candidate
        return None


def open_existing(path: str | Path) -> ScanStore:
    """
    Return a store that must already exist (export / summary side).

    Raises StoreError when it is missing, and warns when a file under the
    legacy export-side name is sitting beside it.
    """
    store = ScanStore(path)
    if not store.exists():
        legacy = store.legacy_path()
        if legacy is not None:
            logger.warning(
                "store %s not found, but %s exists; scan mode writes to %s, "
                "pass -store=%s to read the old file",
                store.path, legacy, store.path.name, legacy,
            )
        raise StoreError(f"Error opening file: {store.path} does not exist")
    return store
