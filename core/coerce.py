from __future__ import annotations

import datetime as dt
import re
from typing import Optional

import numpy as np
import pandas as pd


EXCEL_EPOCH = pd.Timestamp(1899, 12, 30)
MS_PER_DAY = 86_400_000


class _Undefined:
    """Value of a field whose column is absent from the sheet.

    Kept apart from ``None`` (an empty cell) so the two key differently.
    """

    __slots__ = ()

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __reduce__(self) -> str:
        return "UNDEFINED"


UNDEFINED = _Undefined()


# Plain decimal text with an optional exponent; integer literals in 0x, 0o or 0b form.
_DECIMAL_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|[+-]?Infinity", re.ASCII)
_RADIX_RE = re.compile(r"0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+", re.ASCII)


def is_missing(value: object) -> bool:
    if value is None or value is UNDEFINED:
        return True
    if isinstance(value, (list, tuple, dict, set)):
        return False
    return bool(pd.isna(value))


def to_number(value: object) -> float:
    """Coerce a cell to a float; thousands separators are ignored, junk becomes 0.

    Only ASCII decimal text is accepted (``1_000``, ``inf`` or non-Latin digits
    are junk). ``Infinity`` is the one spelling of an infinite value.
    """
    if is_missing(value):
        return 0.0
    if isinstance(value, (int, float, np.integer, np.floating)) and not isinstance(value, (bool, np.bool_)):
        return float(value)
    text = str(value).replace(",", "").strip()
    if not text:
        return 0.0
    if _DECIMAL_RE.fullmatch(text):
        return float(text)
    if _RADIX_RE.fullmatch(text):
        return float(int(text, 0))
    return 0.0


def _naive(ts: pd.Timestamp) -> pd.Timestamp:
    if ts.tzinfo is not None:
        return ts.tz_convert(None)
    return ts


def parse_date(value: object) -> Optional[pd.Timestamp]:
    """Coerce a cell to a naive Timestamp.

    Numbers are spreadsheet serial days counted from 1899-12-30. Strings go
    through pandas' general parser. Anything that cannot be read as a date
    comes back as ``None``.
    """
    if is_missing(value) or isinstance(value, (bool, np.bool_)):
        return None
    if isinstance(value, (pd.Timestamp, dt.datetime, dt.date, np.datetime64)):
        return _naive(pd.Timestamp(value))
    if isinstance(value, (int, float, np.integer, np.floating)):
        if value == 0:
            return None
        try:
            return EXCEL_EPOCH + pd.to_timedelta(float(value) * MS_PER_DAY, unit="ms")
        except (OverflowError, ValueError):
            return None
    text = str(value).strip()
    if not text:
        return None
    try:
        ts = pd.to_datetime(text, errors="coerce")
    except (OverflowError, TypeError, ValueError):
        return None
    if ts is None or pd.isna(ts):
        return None
    return _naive(ts)
