"""Tests for RowStore and inbound row/column parsing."""

import pytest

from gridscope.data.row_store import MISSING, LoadError, RowStore, build_columns, build_rows
from gridscope.models.column import Column
from gridscope.models.constants import DataType


def _columns():
    return [
        Column("Obj", "Name", "Name", DataType.TEXT),
        Column("Obj", "Amount", "Amount", DataType.NUMBER),
    ]


@pytest.fixture
def rows():
    return build_rows(
        [
            {"id": "A", "Name": "Alpha", "Amount": 1},
            {"id": "B", "Name": "Bravo", "Amount": 2},
        ],
        "id",
    )


@pytest.fixture
def store(rows):
    s = RowStore()
    s.load(rows, _columns())
    return s


class TestBuildRows:
    def test_id_is_split_from_fields(self):
        (row,) = build_rows([{"id": "A", "Name": "Alpha"}], "id")
        assert row.id == "A"
        assert row.fields == {"Name": "Alpha"}

    def test_legacy_id_key(self):
        (row,) = build_rows([{"Id": "a00X", "Name": "Alpha"}], "id")
        assert row.id == "a00X"
        assert row.to_dict() == {"Id": "a00X", "Name": "Alpha"}

    def test_missing_identifier(self):
        with pytest.raises(LoadError, match="row 1 is missing identifier"):
            build_rows([{"id": "A"}, {"Name": "no id"}], "id")

    def test_duplicate_identifier(self):
        with pytest.raises(LoadError, match="duplicate row id"):
            build_rows([{"id": "A"}, {"id": "A"}], "id")

    def test_row_not_mapping(self):
        with pytest.raises(LoadError, match="not a mapping"):
            build_rows([["A", "Alpha"]], "id")


class TestBuildColumns:
    def test_duplicate_field_id(self):
        raw = [{"fieldId": "Name", "dataType": "text"}, {"fieldId": "Name", "dataType": "text"}]
        with pytest.raises(LoadError, match="duplicate column"):
            build_columns(raw)

    def test_bad_data_type_is_load_error(self):
        with pytest.raises(LoadError):
            build_columns([{"fieldId": "Name", "dataType": "blob"}])


class TestRowStore:
    def test_get_returns_working_row(self, store):
        assert store.get("A").fields["Name"] == "Alpha"

    def test_get_unknown_is_missing(self, store):
        assert store.get("Z") is MISSING
        assert not store.get("Z")

    def test_collections_are_independent(self, store, rows):
        """Loading copies rows; mutating the caller's rows changes nothing."""
        rows[0].fields["Name"] = "Changed"
        assert store.get("A").fields["Name"] == "Alpha"
        assert store.original_rows[0].fields["Name"] == "Alpha"

    def test_set_value_returns_previous(self, store):
        assert store.set_value("A", "Amount", 10) == 1
        assert store.get("A").fields["Amount"] == 10
        assert store.original_rows[0].fields["Amount"] == 1

    def test_set_value_records_dirty_cell(self, store):
        store.set_value("A", "Amount", 10)
        assert store.is_cell_dirty("A", "Amount")
        assert not store.is_cell_dirty("A", "Name")
        assert store.is_dirty("A")
        assert not store.is_dirty("B")

    def test_set_value_unknown_row_is_noop(self, store):
        assert store.set_value("Z", "Amount", 10) is MISSING
        assert store.dirty_keys() == []

    def test_set_value_unknown_field_is_noop(self, store):
        assert store.set_value("A", "Bogus", 10) is MISSING
        assert "Bogus" not in store.get("A").fields
        assert not store.has_unsaved_changes()

    def test_dirty_keys_keep_first_edit_order(self, store):
        store.set_value("B", "Name", "x")
        store.set_value("A", "Amount", 5)
        store.set_value("B", "Name", "y")
        assert store.dirty_keys() == [("B", "Name"), ("A", "Amount")]

    def test_modified_rows_deduplicated(self, store):
        store.set_value("A", "Name", "x")
        store.set_value("A", "Amount", 5)
        modified = store.modified_rows()
        assert [row.id for row in modified] == ["A"]
        assert modified[0].fields == {"Name": "x", "Amount": 5}

    def test_modified_rows_are_copies(self, store):
        store.set_value("A", "Name", "x")
        store.modified_rows()[0].fields["Name"] = "mutated"
        assert store.get("A").fields["Name"] == "x"

    def test_reset_to_original(self, store):
        store.set_value("A", "Name", "x")
        stale = store.get("A")
        store.reset_to_original()

        assert store.get("A").fields["Name"] == "Alpha"
        assert store.get("A") is not stale
        assert store.dirty_keys() == []
        assert [r.fields for r in store.working_rows] == [r.fields for r in store.original_rows]

    def test_reload_clears_ledger(self, store, rows):
        store.set_value("A", "Name", "x")
        store.load(rows, _columns())
        assert not store.has_unsaved_changes()


class TestIdentifierTypes:
    def test_integer_id_is_stringified(self):
        (row,) = build_rows([{"id": 7, "Name": "Alpha"}], "id")
        assert row.id == "7"

    def test_unhashable_id(self):
        with pytest.raises(LoadError, match="identifier must be a string"):
            build_rows([{"id": ["x"]}], "id")

    def test_int_and_string_ids_collide(self):
        with pytest.raises(LoadError, match="duplicate row id"):
            build_rows([{"id": 1}, {"id": "1"}], "id")

    def test_column_using_id_key(self):
        with pytest.raises(LoadError, match="reserved"):
            build_columns([{"fieldId": "key", "dataType": "text"}], id_field="key")
