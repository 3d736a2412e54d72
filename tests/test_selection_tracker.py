"""Tests for SelectionTracker."""

from gridscope.models.grid_row import GridRow
from gridscope.services.selection_tracker import SelectAllState, SelectionTracker


def _rows(*ids):
    return [GridRow(row_id, {}) for row_id in ids]


class TestSelectionTracker:
    def test_select_and_deselect(self):
        tracker = SelectionTracker()
        tracker.select("A")
        assert tracker.is_selected("A")
        assert "A" in tracker
        tracker.deselect("A")
        assert not tracker.is_selected("A")
        assert len(tracker) == 0

    def test_deselect_unknown_is_noop(self):
        tracker = SelectionTracker()
        tracker.deselect("Z")
        assert len(tracker) == 0

    def test_snapshot_keeps_selection_order(self):
        tracker = SelectionTracker()
        tracker.select_all(["C", "A"])
        tracker.select("B")
        assert tracker.snapshot() == ["C", "A", "B"]

    def test_snapshot_is_a_copy(self):
        tracker = SelectionTracker()
        tracker.select("A")
        tracker.snapshot().append("B")
        assert tracker.snapshot() == ["A"]

    def test_deselect_all_subset(self):
        tracker = SelectionTracker()
        tracker.select_all(["A", "B", "C"])
        tracker.deselect_all(["A", "C"])
        assert tracker.snapshot() == ["B"]

    def test_deselect_all_everything(self):
        tracker = SelectionTracker()
        tracker.select_all(["A", "B"])
        tracker.deselect_all()
        assert tracker.snapshot() == []


class TestSelectAllState:
    def test_empty_visible_is_unchecked(self):
        tracker = SelectionTracker()
        tracker.select("A")
        assert tracker.select_all_state([]) == SelectAllState(checked=False, indeterminate=False)

    def test_all_visible_selected(self):
        tracker = SelectionTracker()
        tracker.select_all(["A", "B"])
        assert tracker.select_all_state(_rows("A", "B")) == SelectAllState(True, False)

    def test_partial_is_indeterminate(self):
        tracker = SelectionTracker()
        tracker.select("A")
        assert tracker.select_all_state(_rows("A", "B")) == SelectAllState(False, True)

    def test_hidden_selection_is_ignored(self):
        """Only visible rows count toward the header state."""
        tracker = SelectionTracker()
        tracker.select_all(["A", "Z"])
        assert tracker.select_all_state(_rows("A")) == SelectAllState(True, False)
