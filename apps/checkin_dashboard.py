# apps/checkin_dashboard.py
#
# Check-in dashboard (local-first). Reads the same CSV store as the
# `checkin` command and offers the export window as a download.
#
#   streamlit run apps/checkin_dashboard.py

from __future__ import annotations

import sys
from datetime import date
from pathlib import Path

import plotly.express as px
import streamlit as st

# Ensure repo root is importable no matter how Streamlit is launched
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from checkin.config import resolve_settings  # noqa: E402
from checkin.export import NO_RECORDS, export_csv_text, export_filename, export_window, filter_records  # noqa: E402
from checkin.report import daily_summary, records_frame  # noqa: E402
from checkin.store import ScanStore, StoreError  # noqa: E402


def picked_range(picked) -> tuple[date, date | None] | None:
    """
    Normalise st.date_input output: a single date, a 1- or 2-tuple while the
    user is choosing, or an empty tuple once the field is cleared.
    """
    if isinstance(picked, (tuple, list)):
        if not picked:
            return None
        return picked[0], (picked[1] if len(picked) > 1 else None)
    if picked is None:
        return None
    return picked, None


def main():
    st.set_page_config(page_title="Check-in Dashboard", layout="wide")
    st.title("Check-in Dashboard")
    st.caption("Local barcode check-ins. Nothing leaves your computer.")

    settings = resolve_settings()

    # --------------------------------------------------
    # Sidebar
    # --------------------------------------------------
    with st.sidebar:
        st.header("Store")
        store_path = st.text_input("CSV store", value=str(settings.store_path))
        if st.button("Reload", use_container_width=True):
            st.rerun()

    store = ScanStore(store_path)
    if not store.exists():
        st.warning(f"No store found at `{store.path}` yet. Run `checkin -scan` first.")
        st.stop()

    try:
        records = store.load()
    except StoreError as e:
        st.error("Could not read the store")
        st.exception(e)
        st.stop()

    if not records:
        st.info("The store is empty.")
        st.stop()

    all_days = sorted({r.day for r in records})
    first_day = date.fromisoformat(all_days[0])
    last_day = date.fromisoformat(all_days[-1])

    with st.sidebar:
        st.header("Date range")
        picked = st.date_input(
            "Start / end",
            value=(last_day, last_day),
            min_value=first_day,
            max_value=last_day,
        )

    window = picked_range(picked)
    if window is None:
        st.info("Pick a start date.")
        st.stop()
    start, end = window

    lower, upper = export_window(start, end)
    matched = filter_records(records, lower, upper)

    # --------------------------------------------------
    # Overview
    # --------------------------------------------------
    st.subheader("Overview")
    col1, col2, col3 = st.columns(3)
    col1.metric("Records in store", f"{len(records):,}")
    col2.metric("Records in range", f"{len(matched):,}")
    col3.metric("Distinct IDs in range", f"{len({r.barcode_id for r in matched}):,}")

    if not matched:
        st.info(NO_RECORDS)
        return

    summary = daily_summary(matched)
    fig = px.bar(summary, x="date", y="scans", hover_data=["unique_ids", "first_scan", "last_scan"])
    fig.update_layout(height=320, margin=dict(l=10, r=10, t=10, b=10))
    st.plotly_chart(fig, use_container_width=True)

    st.subheader("Per day")
    st.dataframe(summary, use_container_width=True, hide_index=True)

    st.subheader("Records")
    st.dataframe(records_frame(matched), use_container_width=True, hide_index=True)

    start_text = start.isoformat()
    end_text = end.isoformat() if end and end != start else None
    st.download_button(
        "Download this range as CSV",
        data=export_csv_text(matched),
        file_name=export_filename(start_text, end_text, len(matched)),
        mime="text/csv",
    )


if __name__ == "__main__":
    main()
