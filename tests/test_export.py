from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from pathlib import Path

import pytest

from checkin.config import Settings
from checkin.export import export_csv_text, export_filename, export_window, parse_date, run_export
from checkin.records import ScanRecord

CEST = timezone(timedelta(hours=2))

ROWS = [
    "2024-10-23T23:59:59+02:00,100,9",
    "2024-10-24T00:00:00+02:00,101,1",
    "2024-10-25T12:00:00+02:00,102,1",
    "this,row,is broken",
    "2024-10-25T23:59:59+02:00,103,2",
    "2024-10-26T23:59:59+02:00,104,1",
    "2024-10-27T00:00:00+02:00,105,1",
]


def exported(settings: Settings) -> list[Path]:
    if not settings.export_dir.exists():
        return []
    return sorted(settings.export_dir.iterdir())


def test_parse_date_is_strict() -> None:
    assert parse_date("2024-10-25") == date(2024, 10, 25)
    for bad in ["2024/10/25", "25-10-2024", "2024-02-30", "", "2024-1-5", "2024-10-5", "20241-10-25"]:
        with pytest.raises(ValueError):
            parse_date(bad)


def test_export_window_covers_whole_days() -> None:
    lower, upper = export_window(date(2024, 10, 24), date(2024, 10, 26), tzinfo=CEST)
    assert lower == datetime(2024, 10, 24, tzinfo=CEST)
    assert upper == datetime(2024, 10, 27, tzinfo=CEST)

    lower, upper = export_window(date(2024, 10, 25), tzinfo=CEST)
    assert (lower, upper) == (datetime(2024, 10, 25, tzinfo=CEST), datetime(2024, 10, 26, tzinfo=CEST))


def test_export_filename() -> None:
    assert export_filename("2024-10-25", None, 3) == "export_2024-10-25_3_records.csv"
    assert export_filename("2024-10-24", "2024-10-26", 12) == "export_2024-10-24_to_2024-10-26_12_records.csv"


def test_single_day_export(settings: Settings, write_store, capsys: pytest.CaptureFixture[str]) -> None:
    write_store(ROWS)
    assert run_export(settings, "2024-10-25", tzinfo=CEST) == 0

    out_file = settings.export_dir / "export_2024-10-25_2_records.csv"
    assert exported(settings) == [out_file]
    assert out_file.read_text(encoding="utf-8") == (
        "2024-10-25T12:00:00+02:00,102,1\n"
        "2024-10-25T23:59:59+02:00,103,2\n"
    )
    assert f"Exported 2 records to {out_file}" in capsys.readouterr().out


def test_range_export_includes_both_boundary_days(settings: Settings, write_store) -> None:
    write_store(ROWS)
    assert run_export(settings, "2024-10-24", "2024-10-26", tzinfo=CEST) == 0

    out_file = settings.export_dir / "export_2024-10-24_to_2024-10-26_4_records.csv"
    assert exported(settings) == [out_file]
    ids = [line.split(",")[1] for line in out_file.read_text(encoding="utf-8").splitlines()]
    assert ids == ["101", "102", "103", "104"]


def test_export_compares_instants_not_wall_clock(settings: Settings, write_store) -> None:
    # 23:30 UTC on the 25th is 01:30 on the 26th in CEST
    write_store(["2024-10-25T23:30:00+00:00,7,1"])
    run_export(settings, "2024-10-25", tzinfo=CEST)
    assert exported(settings) == []
    run_export(settings, "2024-10-26", tzinfo=CEST)
    assert [p.name for p in exported(settings)] == ["export_2024-10-26_1_records.csv"]


def test_no_matches_writes_no_file(settings: Settings, write_store, capsys: pytest.CaptureFixture[str]) -> None:
    write_store(ROWS)
    assert run_export(settings, "2023-01-01", "2023-01-31", tzinfo=CEST) == 0
    assert "No records found" in capsys.readouterr().out
    assert exported(settings) == []


def test_existing_export_is_overwritten(settings: Settings, write_store) -> None:
    write_store(ROWS)
    settings.export_dir.mkdir(parents=True)
    target = settings.export_dir / "export_2024-10-25_2_records.csv"
    target.write_text("old,content,here\n" * 10, encoding="utf-8")

    run_export(settings, "2024-10-25", tzinfo=CEST)
    assert len(target.read_text(encoding="utf-8").splitlines()) == 2


def test_bad_dates_abort(settings: Settings, write_store, capsys: pytest.CaptureFixture[str]) -> None:
    write_store(ROWS)
    assert run_export(settings, "25/10/2024") == 1
    assert "Error parsing start date" in capsys.readouterr().err
    assert run_export(settings, "2024-10-25", "tomorrow") == 1
    assert "Error parsing end date" in capsys.readouterr().err
    assert exported(settings) == []


def test_missing_store(settings: Settings, capsys: pytest.CaptureFixture[str]) -> None:
    assert run_export(settings, "2024-10-25") == 1
    assert "Error opening file" in capsys.readouterr().err


def test_export_csv_text_matches_store_format() -> None:
    records = [
        ScanRecord(datetime(2024, 10, 25, 9, 0, tzinfo=CEST), "0042", 1),
        ScanRecord(datetime(2024, 10, 25, 9, 1, tzinfo=CEST), "7", 2),
    ]
    assert export_csv_text(records) == "2024-10-25T09:00:00+02:00,0042,1\n2024-10-25T09:01:00+02:00,7,2\n"


def test_unpadded_date_flag_is_rejected(settings: Settings, write_store, capsys: pytest.CaptureFixture[str]) -> None:
    write_store(["2024-01-05T09:00:00+02:00,1,1"])
    assert run_export(settings, "2024-1-5", tzinfo=CEST) == 1
    assert "Error parsing start date" in capsys.readouterr().err
    assert exported(settings) == []
