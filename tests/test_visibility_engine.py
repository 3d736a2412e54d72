"""Tests for VisibilityEngine row-scoping and search."""

import pytest

from gridscope.models.column import Column
from gridscope.models.constants import DataType
from gridscope.models.grid_row import GridRow
from gridscope.services.visibility_engine import VisibilityEngine


@pytest.fixture
def rows():
    return [
        GridRow("A", {"Name": "Alpha", "Amount": 1500, "Active": True}),
        GridRow("B", {"Name": "Bravo", "Amount": 2, "Active": False}),
        GridRow("C", {"Name": "Charlie", "Amount": None, "Active": True}),
    ]


@pytest.fixture
def engine(rows):
    columns = [
        Column("Obj", "Name", "Name", DataType.TEXT),
        Column("Obj", "Amount", "Amount", DataType.NUMBER),
        Column("Obj", "Active", "Active", DataType.BOOLEAN),
    ]
    e = VisibilityEngine()
    e.reset([row.id for row in rows], columns)
    return e


def _ids(rows):
    return [row.id for row in rows]


class TestRowScoping:
    def test_all_visible_after_reset(self, engine, rows):
        assert _ids(engine.visible_rows(rows)) == ["A", "B", "C"]
        assert engine.hidden_count == 0

    def test_hide_memorises_selection_flag(self, engine, rows):
        hidden = engine.hide(["A", "C"], lambda row_id: row_id == "A")
        assert hidden == ["A", "C"]
        assert engine.was_selected_when_hidden("A") is True
        assert engine.was_selected_when_hidden("C") is False
        assert engine.was_selected_when_hidden("B") is None
        assert _ids(engine.visible_rows(rows)) == ["B"]

    def test_hide_skips_hidden_and_unknown(self, engine):
        engine.hide(["A"], lambda _r: True)
        assert engine.hide(["A", "Z"], lambda _r: False) == []
        assert engine.was_selected_when_hidden("A") is True

    def test_each_row_visible_or_hidden(self, engine):
        engine.hide(["B"], lambda _r: False)
        for row_id in ("A", "B", "C"):
            assert engine.is_in_scope(row_id) != engine.is_hidden(row_id)

    def test_unhide_all_returns_selected(self, engine, rows):
        engine.hide(["A", "B"], lambda row_id: row_id == "B")
        engine.set_search_term("alp")

        assert engine.unhide_all() == {"B"}
        assert engine.hidden_count == 0
        assert engine.search_term == ""
        assert _ids(engine.visible_rows(rows)) == ["A", "B", "C"]


class TestSearch:
    def test_case_insensitive(self, engine, rows):
        engine.set_search_term("BRA")
        assert _ids(engine.visible_rows(rows)) == ["B"]

    def test_matches_formatted_values(self, engine, rows):
        """Numbers are matched as displayed, with grouping."""
        engine.set_search_term("1,500")
        assert _ids(engine.visible_rows(rows)) == ["A"]

    def test_boolean_glyph(self, engine, rows):
        engine.set_search_term("✗")
        assert _ids(engine.visible_rows(rows)) == ["B"]

    def test_empty_term_matches_all(self, engine, rows):
        engine.set_search_term("")
        assert _ids(engine.visible_rows(rows)) == ["A", "B", "C"]

    def test_hidden_rows_never_match(self, engine, rows):
        engine.hide(["A"], lambda _r: False)
        engine.set_search_term("alpha")
        assert engine.visible_rows(rows) == []

    def test_search_and_scope_intersect(self, engine, rows):
        engine.hide(["B"], lambda _r: False)
        engine.set_search_term("a")
        assert _ids(engine.visible_rows(rows)) == ["A", "C"]

    def test_scope_cache_follows_new_rows_list(self, engine, rows):
        engine.visible_rows(rows)
        replaced = [GridRow("A", {"Name": "Zulu"}), *rows[1:]]
        engine.set_search_term("zulu")
        assert _ids(engine.visible_rows(replaced)) == ["A"]
