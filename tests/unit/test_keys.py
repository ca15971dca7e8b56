import numpy as np
import pandas as pd

from core.coerce import UNDEFINED
from core.keys import JoinKey, cell_text, join_key, key_set
from tests.helpers import make_records


def test_cell_text():
    assert cell_text("Acme") == "Acme"
    assert cell_text(None) == "null"
    assert cell_text(np.nan) == "null"
    assert cell_text(7.0) == "7"
    assert cell_text(7.25) == "7.25"
    assert cell_text(12) == "12"
    assert cell_text(True) == "true"


def test_join_key_is_a_tuple_of_text():
    key = join_key("Acme", "West", 101.0)
    assert key == JoinKey("Acme", "West", "101")
    assert key == ("Acme", "West", "101")


def test_missing_components_match_as_placeholder_text():
    assert join_key(None, "West", "Widget") == join_key(np.nan, "West", "Widget")
    assert join_key(None, "West", "Widget") == join_key("null", "West", "Widget")
    assert join_key(None, "West", "Widget") != join_key("", "West", "Widget")


def test_key_set_spans_frames():
    bookings = make_records([{"customer": "A", "region": "R", "product": "P", "amount": 1, "date": None}])
    billings = make_records([{"customer": "B", "region": "R", "product": "P", "amount": 1, "date": None}])
    assert key_set(bookings, billings, pd.DataFrame()) == {JoinKey("A", "R", "P"), JoinKey("B", "R", "P")}


def test_missing_column_keys_apart_from_empty_cell():
    assert cell_text(UNDEFINED) == "undefined"
    assert join_key("Acme", UNDEFINED, "Widget") == JoinKey("Acme", "undefined", "Widget")
    assert join_key("Acme", UNDEFINED, "Widget") != join_key("Acme", None, "Widget")
    assert join_key("Acme", UNDEFINED, "Widget") == join_key("Acme", "undefined", "Widget")
