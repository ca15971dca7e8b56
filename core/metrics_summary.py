from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import pandas as pd

from core.coerce import UNDEFINED, is_missing
from core.keys import JoinKey, cell_text, iter_keys, key_set


UNKNOWN_BUCKET = "Unknown"


def _plain(value: Any) -> Any:
    return None if value is UNDEFINED else value


@dataclass
class SummaryRow:
    customer: Any
    region: Any
    product: Any
    total_bookings: float = 0.0
    total_billings: float = 0.0
    backlog: float = 0.0
    book_to_bill_ratio: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "customer": _plain(self.customer),
            "region": _plain(self.region),
            "product": _plain(self.product),
            "totalBookings": self.total_bookings,
            "totalBillings": self.total_billings,
            "backlog": self.backlog,
            "bookToBillRatio": self.book_to_bill_ratio,
        }


def monthly_aggregate(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """Sum amounts per calendar month, ascending by ``YYYY-MM``; undated rows are skipped."""
    if df.empty or "date" not in df.columns:
        return []
    dated = df[df["date"].notna()]
    if dated.empty:
        return []
    dates = pd.to_datetime(dated["date"])
    month = dates.dt.year.astype(str) + "-" + dates.dt.month.map("{:02d}".format)
    totals = dated["amount"].groupby(month).sum().sort_index()
    return [{"month": str(m), "value": float(v)} for m, v in totals.items()]


def _bucket_label(value: object) -> str:
    if is_missing(value) or not value:
        return UNKNOWN_BUCKET
    return cell_text(value)


def aggregate(df: pd.DataFrame, key: str) -> Dict[str, float]:
    """Sum amounts per value of ``key``; empty or falsy values land in ``Unknown``."""
    if df.empty:
        return {}
    labels = df[key].map(_bucket_label) if key in df.columns else pd.Series(UNKNOWN_BUCKET, index=df.index)
    totals = df["amount"].groupby(labels, sort=False).sum()
    return {str(k): float(v) for k, v in totals.items()}


def _accumulate(table: Dict[JoinKey, SummaryRow], df: pd.DataFrame, field: str) -> None:
    for key, customer, region, product, amount in zip(
        iter_keys(df), df["customer"], df["region"], df["product"], df["amount"]
    ):
        row = table.get(key)
        if row is None:
            row = table[key] = SummaryRow(customer=customer, region=region, product=product)
        setattr(row, field, getattr(row, field) + float(amount))


def filter_backlog(backlogs: pd.DataFrame, bookings: pd.DataFrame, billings: pd.DataFrame) -> pd.DataFrame:
    """Backlog rows whose key has booking or billing activity in the filtered sets."""
    if backlogs.empty:
        return backlogs.copy()
    valid = key_set(bookings, billings)
    mask = [k in valid for k in iter_keys(backlogs)]
    return backlogs[pd.Series(mask, index=backlogs.index, dtype=bool)].copy()


def build_summary_table(
    bookings: pd.DataFrame,
    billings: pd.DataFrame,
    backlogs: pd.DataFrame,
    attached_backlog: Optional[pd.DataFrame] = None,
) -> List[SummaryRow]:
    """Join the three record sets into summary rows.

    ``attached_backlog`` is backlog already passed through ``filter_backlog``;
    when omitted it is computed here from ``backlogs``.
    """
    table: Dict[JoinKey, SummaryRow] = {}
    if not bookings.empty:
        _accumulate(table, bookings, "total_bookings")
    if not billings.empty:
        _accumulate(table, billings, "total_billings")

    if attached_backlog is None:
        attached_backlog = filter_backlog(backlogs, bookings, billings)
    if not attached_backlog.empty:
        _accumulate(table, attached_backlog, "backlog")

    rows = list(table.values())
    for row in rows:
        row.book_to_bill_ratio = row.total_bookings / row.total_billings if row.total_billings else None
    return rows


def compute_dashboard(ctx: Dict[str, Any]) -> Dict[str, Any]:
    bookings: pd.DataFrame = ctx.get("filtered_bookings", pd.DataFrame())
    billings: pd.DataFrame = ctx.get("filtered_billings", pd.DataFrame())
    backlogs: pd.DataFrame = ctx.get("backlogs", pd.DataFrame())

    attached_backlog = filter_backlog(backlogs, bookings, billings)
    table = build_summary_table(bookings, billings, backlogs, attached_backlog=attached_backlog)

    return {
        "bookingsMonthly": monthly_aggregate(bookings),
        "billingsMonthly": monthly_aggregate(billings),
        "backlogByRegion": aggregate(attached_backlog, "region"),
        "bookingsByProduct": aggregate(bookings, "product"),
        "tableRows": [row.to_dict() for row in table],
    }
