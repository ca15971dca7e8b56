from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

import altair as alt
import pandas as pd

alt.data_transformers.disable_max_rows()


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def monthly_trend_chart(
    bookings_monthly: List[Dict[str, Any]],
    billings_monthly: List[Dict[str, Any]],
) -> Optional[alt.Chart]:
    frames = []
    for label, series in [("Bookings", bookings_monthly), ("Billings", billings_monthly)]:
        if series:
            frames.append(pd.DataFrame(series).assign(metric=label))
    if not frames:
        return None
    long_df = pd.concat(frames, ignore_index=True)
    hover = alt.selection_point(fields=["metric"], on="mouseover", empty="all")
    return (
        alt.Chart(long_df)
        .mark_line(point={"filled": True})
        .encode(
            x=alt.X("month:O", title="Month", sort="ascending", axis=alt.Axis(grid=False)),
            y=alt.Y("value:Q", title="Amount", axis=alt.Axis(format="$,.0f", gridDash=[4, 4], domain=False, ticks=False)),
            color=alt.Color("metric:N", title="Metric"),
            opacity=alt.condition(hover, alt.value(1), alt.value(0.2)),
            tooltip=[
                alt.Tooltip("month:O", title="Month"),
                alt.Tooltip("metric:N", title="Metric"),
                alt.Tooltip("value:Q", title="Amount", format="$,.0f"),
            ],
        )
        .add_params(hover)
    )


def breakdown_bar_chart(totals: Mapping[str, float], label: str, title: str = "Amount") -> Optional[alt.Chart]:
    if not totals:
        return None
    df = pd.DataFrame({label: list(totals.keys()), "value": list(totals.values())})
    return (
        alt.Chart(df)
        .mark_bar()
        .encode(
            y=alt.Y(f"{label}:N", sort="-x", title=label.title()),
            x=alt.X("value:Q", title=title, axis=alt.Axis(format="$,.0f")),
            tooltip=[alt.Tooltip(f"{label}:N"), alt.Tooltip("value:Q", title=title, format="$,.0f")],
        )
    )
