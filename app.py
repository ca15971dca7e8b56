import datetime as dt
from contextlib import contextmanager
from typing import Optional

import altair as alt
import pandas as pd
import streamlit as st

from core.charts import breakdown_bar_chart, monthly_trend_chart
from core.data import (
    DataSourceNotFoundError,
    clear_cache,
    get_source_file,
    load_dashboard_data,
    prepare_context,
    summarize_sources,
)
from core.filters import DateRange, normalize_date_range
from core.metrics_summary import compute_dashboard

alt.data_transformers.disable_max_rows()


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .app-top-bar {padding: 6px 0 4px;border-bottom: 1px solid #e5e7eb;margin-bottom: 10px;}
        .app-top-bar .page-title {font-size: 1.4rem;font-weight: 700;color: #111827;}
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #111827;margin-bottom: 8px;}
        .chip-row {display: flex;flex-wrap: wrap;gap: 6px;margin-top: 6px;}
        .chip {background: #f3f4f6;border: 1px solid #e5e7eb;border-radius: 14px;padding: 4px 10px;font-size: 0.85rem;color: #374151;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str):
    container = st.container()
    container.markdown(f"<div class='card'><div class='card-title'>{title}</div>", unsafe_allow_html=True)
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def format_range_chip(date_range: DateRange) -> str:
    start = date_range.start.date().isoformat() if date_range.start is not None else "…"
    end = date_range.end.date().isoformat() if date_range.end is not None else "…"
    label = "Dates: All" if date_range.start is None and date_range.end is None else f"Dates: {start} – {end}"
    return f"<span class='chip'>{label}</span>"


def format_currency_0(value: Optional[float]) -> str:
    if value is None or pd.isna(value):
        return "N/A"
    return f"${float(value):,.0f}"


# ---------- UI setup ----------
st.set_page_config(page_title="Bookings, Billings & Backlog", layout="wide")
inject_base_styles()
st.title("Bookings, Billings & Backlog")
st.caption("Book-to-bill summary by customer, region and product.")

try:
    data_ctx = load_dashboard_data()
except DataSourceNotFoundError:
    st.error(f"Excel file not found. Place the workbook at {get_source_file()}.")
    st.stop()

with st.sidebar:
    st.markdown("### Date range")
    use_start = st.checkbox("Filter from", value=False)
    start_value = st.date_input("Start date", value=dt.date.today().replace(month=1, day=1), disabled=not use_start)
    use_end = st.checkbox("Filter to", value=False)
    end_value = st.date_input("End date", value=dt.date.today(), disabled=not use_end)
    st.markdown("---")
    if st.button("Reload workbook"):
        clear_cache()
        st.rerun()

date_range = normalize_date_range(
    start_value.isoformat() if use_start else None,
    end_value.isoformat() if use_end else None,
)
ctx = prepare_context(date_range, data_ctx)
payload = compute_dashboard(ctx)
table = pd.DataFrame(payload["tableRows"])

st.markdown(f"<div class='chip-row'>{format_range_chip(date_range)}</div>", unsafe_allow_html=True)

total_bookings = float(table["totalBookings"].sum()) if not table.empty else 0.0
total_billings = float(table["totalBillings"].sum()) if not table.empty else 0.0
total_backlog = float(table["backlog"].sum()) if not table.empty else 0.0
k1, k2, k3, k4 = st.columns(4)
k1.metric("Bookings", format_currency_0(total_bookings))
k2.metric("Billings", format_currency_0(total_billings))
k3.metric("Backlog", format_currency_0(total_backlog))
k4.metric("Book-to-bill", f"{total_bookings / total_billings:.2f}" if total_billings else "N/A")

with card("Monthly bookings vs billings"):
    trend = monthly_trend_chart(payload["bookingsMonthly"], payload["billingsMonthly"])
    if trend is None:
        st.info("No dated bookings or billings in this range.")
    else:
        st.altair_chart(trend, use_container_width=True)

c1, c2 = st.columns(2)
with c1:
    with card("Backlog by region"):
        chart = breakdown_bar_chart(payload["backlogByRegion"], "region", "Backlog")
        if chart is None:
            st.info("No backlog attached to activity in this range.")
        else:
            st.altair_chart(chart, use_container_width=True)
with c2:
    with card("Bookings by product"):
        chart = breakdown_bar_chart(payload["bookingsByProduct"], "product", "Bookings")
        if chart is None:
            st.info("No bookings in this range.")
        else:
            st.altair_chart(chart, use_container_width=True)

with card("Summary table"):
    if table.empty:
        st.info("No rows for this range.")
    else:
        st.dataframe(table, use_container_width=True, hide_index=True)
        st.download_button(
            "Export CSV",
            data=table.to_csv(index=False).encode("utf-8"),
            file_name="summary_table.csv",
            mime="text/csv",
        )

with st.expander("Data sources", expanded=False):
    st.caption(f"Workbook: {data_ctx.get('file')}")
    st.dataframe(pd.DataFrame(summarize_sources(data_ctx)), hide_index=True)
