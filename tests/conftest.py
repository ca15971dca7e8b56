"""
Shared fixtures: a clean loader cache and real workbooks written to tmp_path.
"""
import datetime as dt

import pytest

import core.data as data_module
from core.data import DATA_FILE_NAME
from tests.helpers import write_workbook


@pytest.fixture(autouse=True)
def fresh_cache():
    data_module.clear_cache()
    yield
    data_module.clear_cache()


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    """Point the loader at an empty temporary directory."""
    monkeypatch.setattr(data_module, "DATA_DIR", tmp_path)
    return tmp_path


@pytest.fixture
def sample_workbook(data_dir):
    """A small workbook covering two keys, a dangling backlog and a few dirty cells."""
    bookings = [
        ["Acme", "West", "Widget", "1,000", dt.datetime(2024, 1, 15)],
        ["Acme", "West", "Widget", 500, dt.datetime(2024, 3, 1)],
        ["Beta", "East", "Gadget", 250.5, dt.datetime(2023, 11, 20)],
        ["Beta", "East", None, "abc", dt.datetime(2024, 1, 31)],
    ]
    billings = [
        ["Acme", "West", "Widget", 750, dt.datetime(2024, 2, 10)],
        ["Beta", "East", "Gadget", "100", dt.datetime(2023, 12, 5)],
    ]
    backlogs = [
        ["Acme", "West", "Widget", 300],
        ["Beta", "East", "Gadget", 40],
        ["Gamma", "North", "Gizmo", 999],
    ]
    return write_workbook(data_dir / DATA_FILE_NAME, bookings, billings, backlogs)
