from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Tuple

import pandas as pd

from core.coerce import UNDEFINED, parse_date, to_number
from core.filters import DateRange, filter_by_date, normalize_date_range


logger = logging.getLogger(__name__)

DATA_DIR = Path(os.environ.get("DASHBOARD_DATA_DIR", str(Path(__file__).resolve().parents[1] / "data")))
DATA_FILE_NAME = os.environ.get("DASHBOARD_DATA_FILE", "FullStack_Summary_Dashboard_Data.xlsx")

# sheet name -> (raw column -> record field)
SHEET_COLUMNS: Dict[str, Dict[str, str]] = {
    "Bookings": {
        "Customer": "customer",
        "Region": "region",
        "Product": "product",
        "Booking_Amount": "amount",
        "Booking_Date": "date",
    },
    "Billings": {
        "Customer": "customer",
        "Region": "region",
        "Product": "product",
        "Billed_Amount": "amount",
        "Billing_Date": "date",
    },
    "Backlogs": {
        "Customer": "customer",
        "Region": "region",
        "Product": "product",
        "Backlog_Amount": "amount",
    },
}

DATED_COLUMNS = ["customer", "region", "product", "amount", "date"]
BACKLOG_COLUMNS = ["customer", "region", "product", "amount"]


class DataSourceNotFoundError(FileNotFoundError):
    """The dashboard workbook is not where the loader expects it."""


# ---------------- Loaders ----------------
def get_source_file() -> Path:
    return DATA_DIR / DATA_FILE_NAME


def file_signature(path: Path) -> Tuple[str, float]:
    return str(path), path.stat().st_mtime


def read_sheet(xls: pd.ExcelFile, name: str) -> pd.DataFrame:
    """Read one sheet, projected onto the declared columns.

    Empty cells become None; fields whose column is missing become UNDEFINED.
    """
    mapping = SHEET_COLUMNS[name]
    if name not in xls.sheet_names:
        logger.warning("Sheet %r not found in workbook, treating it as empty", name)
        return pd.DataFrame(columns=list(mapping.values()), dtype=object)
    raw = xls.parse(sheet_name=name, dtype=object)
    raw.columns = [str(c).strip() for c in raw.columns]
    df = pd.DataFrame(index=raw.index)
    for col, field in mapping.items():
        if col in raw.columns:
            series = raw[col]
            if isinstance(series, pd.DataFrame):
                series = series.iloc[:, 0]
            df[field] = series.astype(object).where(series.notna(), None)
        else:
            df[field] = UNDEFINED
    return df.reset_index(drop=True)


def load_records(df: pd.DataFrame, *, dated: bool = True) -> pd.DataFrame:
    """Turn a projected sheet into typed records (float amounts, optional dates)."""
    columns = DATED_COLUMNS if dated else BACKLOG_COLUMNS
    out = pd.DataFrame(index=df.index)
    for c in ["customer", "region", "product"]:
        out[c] = df[c].astype(object) if c in df.columns else UNDEFINED
    amounts = df["amount"] if "amount" in df.columns else pd.Series([None] * len(df), index=df.index, dtype=object)
    out["amount"] = pd.Series([to_number(v) for v in amounts], index=df.index, dtype=float)
    if dated:
        dates = df["date"] if "date" in df.columns else pd.Series([None] * len(df), index=df.index, dtype=object)
        out["date"] = pd.to_datetime(pd.Series([parse_date(v) for v in dates], index=df.index, dtype=object))
    return out[columns].reset_index(drop=True)


@lru_cache(maxsize=4)
def _load_dashboard_data_cached(files_sig: Tuple[str, float]) -> Dict[str, object]:
    path = Path(files_sig[0])
    with pd.ExcelFile(path) as xls:
        bookings = load_records(read_sheet(xls, "Bookings"))
        billings = load_records(read_sheet(xls, "Billings"))
        backlogs = load_records(read_sheet(xls, "Backlogs"), dated=False)
    logger.info(
        "Loaded %s: %d bookings, %d billings, %d backlog rows",
        path.name,
        len(bookings),
        len(billings),
        len(backlogs),
    )
    return {
        "file": path.name,
        "bookings": bookings,
        "billings": billings,
        "backlogs": backlogs,
    }


def load_dashboard_data() -> Dict[str, object]:
    path = get_source_file()
    if not path.is_file():
        raise DataSourceNotFoundError("Excel file not found")
    return _load_dashboard_data_cached(file_signature(path))


def clear_cache() -> None:
    _load_dashboard_data_cached.cache_clear()


def prepare_context(date_range: dict | DateRange, data_ctx: Dict[str, object]) -> Dict[str, object]:
    """Apply the date range to bookings and billings; backlog is passed through undated."""
    if isinstance(date_range, DateRange):
        rng = date_range
    else:
        rng = normalize_date_range(date_range.get("start_date"), date_range.get("end_date"))

    bookings: pd.DataFrame = data_ctx.get("bookings", pd.DataFrame(columns=DATED_COLUMNS))
    billings: pd.DataFrame = data_ctx.get("billings", pd.DataFrame(columns=DATED_COLUMNS))
    backlogs: pd.DataFrame = data_ctx.get("backlogs", pd.DataFrame(columns=BACKLOG_COLUMNS))

    return {
        "date_range": rng,
        "filtered_bookings": filter_by_date(bookings, rng),
        "filtered_billings": filter_by_date(billings, rng),
        "backlogs": backlogs.copy(),
    }


def summarize_sources(data_ctx: Dict[str, object]) -> List[Dict[str, object]]:
    """Row counts and date coverage per sheet, for the UI's data panel."""
    out: List[Dict[str, object]] = []
    for name, key in [("Bookings", "bookings"), ("Billings", "billings"), ("Backlogs", "backlogs")]:
        df: pd.DataFrame = data_ctx.get(key, pd.DataFrame())
        dates = df["date"].dropna() if "date" in df.columns else pd.Series(dtype="datetime64[ns]")
        out.append(
            {
                "sheet": name,
                "rows": int(len(df)),
                "undated_rows": int(df["date"].isna().sum()) if "date" in df.columns else None,
                "first_date": dates.min().date().isoformat() if not dates.empty else None,
                "last_date": dates.max().date().isoformat() if not dates.empty else None,
            }
        )
    return out
