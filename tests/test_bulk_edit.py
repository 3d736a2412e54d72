"""Tests for header bulk edits."""

from unittest.mock import MagicMock

import pytest

from gridscope.data.row_store import RowStore, build_columns, build_rows
from gridscope.services.bulk_edit import (
    BulkEditApplier,
    CellChange,
    HeaderEditState,
    resolve_edit_scope,
)
from gridscope.services.selection_tracker import SelectionTracker
from gridscope.services.visibility_engine import VisibilityEngine


@pytest.fixture
def parts(table_data):
    rows = RowStore()
    rows.load(build_rows(table_data["rows"], "id"), build_columns(table_data["columns"]))
    selection = SelectionTracker()
    visibility = VisibilityEngine()
    visibility.reset(rows.row_ids, rows.columns)
    return rows, selection, visibility


@pytest.fixture
def applier(parts):
    rows, selection, visibility = parts
    callback = MagicMock()
    a = BulkEditApplier(
        rows, selection, lambda: visibility.visible_rows(rows.working_rows), callback
    )
    a.callback = callback
    return a


class TestResolveEditScope:
    def test_no_selection_means_all_visible(self, parts):
        rows, selection, _ = parts
        assert [r.id for r in resolve_edit_scope(rows.working_rows, selection)] == ["A", "B", "C"]

    def test_selection_intersects_visible(self, parts):
        rows, selection, _ = parts
        selection.select_all(["C", "Z"])
        assert [r.id for r in resolve_edit_scope(rows.working_rows, selection)] == ["C"]


class TestStateMachine:
    def test_begin_sets_zero_draft(self, applier):
        assert applier.begin("Active")
        assert applier.state is HeaderEditState.EDITING
        assert applier.field_id == "Active"
        assert applier.draft_value is False

        applier.begin("Name")
        assert applier.draft_value == ""

    def test_begin_unknown_field(self, applier):
        applier.begin("Name")
        assert applier.begin("Bogus") is False
        assert applier.state is HeaderEditState.IDLE
        assert applier.field_id is None

    def test_update_draft_ignored_when_idle(self, applier):
        applier.update_draft("x")
        assert applier.draft_value is None

    def test_cancel_leaves_rows_untouched(self, applier, parts):
        rows, _, _ = parts
        applier.begin("Name")
        applier.update_draft("Zulu")
        applier.cancel()

        assert applier.state is HeaderEditState.IDLE
        assert rows.get("A").fields["Name"] == "Alpha"
        applier.callback.assert_not_called()

    def test_confirm_when_idle_does_nothing(self, applier, parts):
        assert applier.confirm() == []
        assert not parts[0].has_unsaved_changes()

    def test_confirm_none_draft_cancels(self, applier, parts):
        applier.begin("Name")
        applier.update_draft(None)
        assert applier.confirm() == []
        assert applier.state is HeaderEditState.IDLE
        assert not parts[0].has_unsaved_changes()


class TestConfirm:
    def test_no_selection_edits_all_visible(self, applier, parts):
        rows, _, _ = parts
        applier.begin("Status")
        applier.update_draft("Closed")
        changes = applier.confirm()

        assert [c.row_id for c in changes] == ["A", "B", "C"]
        assert all(rows.get(r).fields["Status"] == "Closed" for r in ("A", "B", "C"))
        assert applier.state is HeaderEditState.IDLE

    def test_selected_visible_rows_only(self, applier, parts):
        rows, selection, _ = parts
        selection.select("B")
        applier.begin("Name")
        applier.update_draft("Zulu")
        applier.confirm()

        assert rows.get("B").fields["Name"] == "Zulu"
        assert rows.get("A").fields["Name"] == "Alpha"
        assert rows.dirty_keys() == [("B", "Name")]

    def test_hidden_selected_rows_are_skipped(self, applier, parts):
        rows, selection, visibility = parts
        selection.select_all(["A", "B"])
        visibility.hide(["A"], selection.is_selected)
        applier.begin("Name")
        applier.update_draft("Zulu")
        applier.confirm()

        assert rows.get("A").fields["Name"] == "Alpha"
        assert rows.get("B").fields["Name"] == "Zulu"

    def test_value_is_coerced(self, applier, parts):
        rows, _, _ = parts
        applier.begin("Amount")
        applier.update_draft("1,250")
        applier.confirm()
        assert rows.get("A").fields["Amount"] == 1250

    def test_observer_receives_each_change(self, applier):
        applier.begin("Active")
        applier.update_draft("yes")
        applier.confirm()

        applier.callback.assert_any_call(CellChange("B", "Active", False, True))
        assert applier.callback.call_count == 3
