from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from checkin.config import Settings

CEST = timezone(timedelta(hours=2))


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 10, 25, 9, 0, 0, tzinfo=CEST))


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "scans.csv"


@pytest.fixture
def settings(tmp_path: Path, store_path: Path) -> Settings:
    out = tmp_path / "exports"
    return Settings(store_path=store_path, export_dir=out)


@pytest.fixture
def write_store(store_path: Path):
    def write(rows: list[str]) -> Path:
        store_path.write_text("".join(line + "\n" for line in rows), encoding="utf-8")
        return store_path

    return write


@pytest.fixture(autouse=True)
def reset_checkin_logger():
    # cli.main() detaches the package logger from root; caplog needs it back
    yield
    log = logging.getLogger("checkin")
    log.handlers.clear()
    log.propagate = True
    log.setLevel(logging.NOTSET)
