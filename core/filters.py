from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import pandas as pd

from core.coerce import parse_date


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DateRange:
    start: Optional[pd.Timestamp] = None
    end: Optional[pd.Timestamp] = None
    # A bound was given but could not be read; no dated record satisfies it.
    invalid: bool = False

    def contains(self, value: Optional[pd.Timestamp]) -> bool:
        # Undated records pass every range.
        if value is None or pd.isna(value):
            return True
        if self.invalid:
            return False
        if self.start is not None and value < self.start:
            return False
        if self.end is not None and value > self.end:
            return False
        return True


def _parse_bound(raw: object, name: str) -> Tuple[Optional[pd.Timestamp], bool]:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None, False
    ts = parse_date(raw)
    if ts is None:
        logger.warning("Unparseable %s %r, only undated records will match", name, raw)
        return None, True
    return ts, False


def normalize_date_range(start_date: object = None, end_date: object = None) -> DateRange:
    start, bad_start = _parse_bound(start_date, "startDate")
    end, bad_end = _parse_bound(end_date, "endDate")
    return DateRange(start=start, end=end, invalid=bad_start or bad_end)


def filter_by_date(df: pd.DataFrame, date_range: DateRange, date_col: str = "date") -> pd.DataFrame:
    """Keep rows whose date falls inside the inclusive range; undated rows always stay."""
    if df.empty or date_col not in df.columns:
        return df.copy()
    dates = df[date_col]
    mask = dates.isna()
    if date_range.invalid:
        return df[mask].copy()
    in_range = pd.Series(True, index=df.index)
    if date_range.start is not None:
        in_range &= dates >= date_range.start
    if date_range.end is not None:
        in_range &= dates <= date_range.end
    return df[mask | in_range].copy()
