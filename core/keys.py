from __future__ import annotations

import math
from typing import Iterable, NamedTuple, Set

import pandas as pd

from core.coerce import UNDEFINED, is_missing


MISSING_TOKEN = "null"
UNDEFINED_TOKEN = "undefined"


class JoinKey(NamedTuple):
    customer: str
    region: str
    product: str


def cell_text(value: object) -> str:
    """Text identity of a cell.

    Empty cells read as the literal ``"null"`` and compare equal to any other
    empty cell (and to a cell that literally says ``null``). A field from a
    missing column reads as ``"undefined"`` instead.
    """
    if value is UNDEFINED:
        return UNDEFINED_TOKEN
    if is_missing(value):
        return MISSING_TOKEN
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))
    if isinstance(value, pd.Timestamp):
        return value.isoformat()
    return str(value)


def join_key(customer: object, region: object, product: object) -> JoinKey:
    return JoinKey(cell_text(customer), cell_text(region), cell_text(product))


def key_set(*frames: pd.DataFrame) -> Set[JoinKey]:
    """Every join key that appears in any of the given record frames."""
    keys: Set[JoinKey] = set()
    for df in frames:
        if df.empty:
            continue
        keys.update(iter_keys(df))
    return keys


def iter_keys(df: pd.DataFrame) -> Iterable[JoinKey]:
    for customer, region, product in zip(df["customer"], df["region"], df["product"]):
        yield join_key(customer, region, product)
