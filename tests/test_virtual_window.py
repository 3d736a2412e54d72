"""Tests for the virtual scroll window."""

from gridscope.services.virtual_window import VirtualWindow, WindowRange, compute_window


class TestComputeWindow:
    def test_middle_of_list(self):
        assert compute_window(3200, 640, 32, 1000, 20) == WindowRange(80, 140)

    def test_top_is_not_negative(self):
        assert compute_window(0, 640, 32, 1000, 20) == WindowRange(0, 60)

    def test_bottom_is_clamped(self):
        rng = compute_window(31900, 640, 32, 1000, 20)
        assert rng.end_index == 1000
        assert rng.start_index <= rng.end_index

    def test_offset_past_end(self):
        rng = compute_window(1_000_000, 640, 32, 600, 20)
        assert rng == WindowRange(600, 600)
        assert len(rng) == 0


class TestVirtualWindow:
    def test_active_above_threshold(self):
        window = VirtualWindow()
        assert not window.is_active(500)
        assert window.is_active(501)

    def test_reset_to_initial_range(self):
        window = VirtualWindow()
        window.reset(1000)
        assert window.range == WindowRange(0, 70)
        window.reset(30)
        assert window.range == WindowRange(0, 30)

    def test_update_reports_change(self):
        window = VirtualWindow()
        window.reset(1000)
        assert window.update(3200, 640, 1000) is True
        assert (window.start_index, window.end_index) == (80, 140)
        assert window.update(3200, 640, 1000) is False

    def test_effective_range_inactive_covers_all(self):
        window = VirtualWindow()
        window.reset(100)
        assert window.effective_range(100) == WindowRange(0, 100)

    def test_padding(self):
        window = VirtualWindow()
        window.update(3200, 640, 1000)
        assert window.top_padding(1000) == 80 * 32
        assert window.bottom_padding(1000) == (1000 - 140) * 32

    def test_padding_zero_when_inactive(self):
        window = VirtualWindow()
        window.update(3200, 640, 400)
        assert window.top_padding(400) == 0
        assert window.bottom_padding(400) == 0
