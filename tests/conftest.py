"""Shared fixtures for grid engine tests."""

import pytest

from gridscope.data.grid_store import GridStore
from gridscope.settings import GridSettings


def make_columns():
    return [
        {"objectId": "Obj", "fieldId": "Name", "label": "Name", "dataType": "text", "values": None},
        {"objectId": "Obj", "fieldId": "Amount", "label": "Amount", "dataType": "number"},
        {
            "objectId": "Obj",
            "fieldId": "Status",
            "label": "Status",
            "dataType": "picklist",
            "values": "'Open','Closed'",
        },
        {"objectId": "Obj", "fieldId": "Due", "label": "Due", "dataType": "date"},
        {"objectId": "Obj", "fieldId": "Active", "label": "Active", "dataType": "boolean"},
    ]


def make_rows():
    return [
        {"id": "A", "Name": "Alpha", "Amount": 100, "Status": "Open", "Due": "2024-03-05",
         "Active": True},
        {"id": "B", "Name": "Bravo", "Amount": 2500.5, "Status": "Closed", "Due": "2024-12-31",
         "Active": False},
        {"id": "C", "Name": "Charlie", "Amount": 7, "Status": "Open", "Due": "2025-01-15",
         "Active": True},
    ]  # fmt: skip


@pytest.fixture
def table_data():
    return {"columns": make_columns(), "rows": make_rows()}


@pytest.fixture
def store(table_data):
    """GridStore loaded with rows A, B, C, inline editing on and no scheduler."""
    s = GridStore(GridSettings(inline_edit_mode=True))
    s.load(table_data)
    return s
