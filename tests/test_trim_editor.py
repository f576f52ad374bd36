"""Tests for trim handle dragging."""

import pytest

from conftest import make_window
from vibecut.schemas.timeline import MIN_CLIP_DURATION
from vibecut.services.trim_editor import DragMode, TrimEditor, compute_trim

# 500px track over a 10s source -> 50px per second
TRACK_PX = 500.0


@pytest.fixture
def window():
    return make_window(total=10.0, start=2.0, duration=3.0)


@pytest.fixture
def editor():
    return TrimEditor()


class TestComputeTrim:
    """Tests for the pure drag arithmetic."""

    def test_start_keeps_right_edge(self):
        """Test that moving the start handle keeps the end fixed."""
        update = compute_trim(DragMode.START, 2.0, 3.0, 10.0, 1.0)
        assert update.trim_start == pytest.approx(3.0)
        assert update.trim_duration == pytest.approx(2.0)
        assert update.trim_end == pytest.approx(5.0)

    def test_start_clamped_at_zero(self):
        """Test that the start handle can't go before the source start."""
        update = compute_trim(DragMode.START, 2.0, 3.0, 10.0, -5.0)
        assert update.trim_start == 0
        assert update.trim_duration == pytest.approx(5.0)

    def test_start_clamped_at_minimum_duration(self):
        """Test that the start handle stops half a second before the end."""
        update = compute_trim(DragMode.START, 2.0, 3.0, 10.0, 9.0)
        assert update.trim_start == pytest.approx(5.0 - MIN_CLIP_DURATION)
        assert update.trim_duration == pytest.approx(MIN_CLIP_DURATION)

    def test_end_keeps_left_edge(self):
        """Test that moving the end handle keeps the start fixed."""
        update = compute_trim(DragMode.END, 2.0, 3.0, 10.0, 1.5)
        assert update.trim_start == 2.0
        assert update.trim_duration == pytest.approx(4.5)

    def test_end_clamped_at_source_end(self):
        """Test that the end handle stops at the source duration."""
        update = compute_trim(DragMode.END, 2.0, 3.0, 10.0, 20.0)
        assert update.trim_duration == pytest.approx(8.0)

    def test_end_clamped_at_minimum_duration(self):
        """Test that the end handle can't shrink below the minimum."""
        update = compute_trim(DragMode.END, 2.0, 3.0, 10.0, -20.0)
        assert update.trim_duration == pytest.approx(MIN_CLIP_DURATION)

    @pytest.mark.parametrize(
        "delta, expected_start",
        [(1.0, 3.0), (-1.0, 1.0), (-10.0, 0.0), (10.0, 7.0)],
    )
    def test_move_keeps_duration(self, delta, expected_start):
        """Test that sliding the window keeps its length and stays in range."""
        update = compute_trim(DragMode.MOVE, 2.0, 3.0, 10.0, delta)
        assert update.trim_start == pytest.approx(expected_start)
        assert update.trim_duration == 3.0


class TestTrimEditor:
    """Tests for a full pointer gesture."""

    def test_move_before_begin_returns_none(self, editor):
        """Test that pointer-move without a gesture does nothing."""
        assert editor.move(100) is None
        assert not editor.is_dragging

    def test_drag_start_handle(self, editor, window):
        """Test dragging the left handle right by one second."""
        editor.begin("start", 100, window, TRACK_PX)
        update = editor.move(150)

        assert update.trim_start == pytest.approx(3.0)
        assert update.trim_duration == pytest.approx(2.0)

    def test_moves_computed_against_snapshot(self, editor, window):
        """Test that only the latest pointer position matters."""
        editor.begin(DragMode.END, 0, window, TRACK_PX)
        for x in (10, 80, 30, 60, 25):
            editor.move(x)

        # 25px -> 0.5s past the original end, regardless of the path taken
        update = editor.move(25)
        assert update.trim_start == 2.0
        assert update.trim_duration == pytest.approx(3.5)

    def test_repeated_event_is_idempotent(self, editor, window):
        """Test that a duplicated move event yields the same pair."""
        editor.begin(DragMode.MOVE, 0, window, TRACK_PX)
        first = editor.move(100)
        second = editor.move(100)
        assert first == second
        assert first.trim_start == pytest.approx(4.0)

    def test_snapshot_frozen_for_the_gesture(self, editor, window):
        """Test that the session keeps the pointer-down window."""
        session = editor.begin(DragMode.START, 0, window, TRACK_PX)
        editor.move(50)
        assert session.snapshot is window
        assert editor.session is session

    def test_end_returns_last_update(self, editor, window):
        """Test that pointer-up commits the last emitted pair."""
        editor.begin(DragMode.END, 0, window, TRACK_PX)
        editor.move(50)
        editor.move(100)

        update = editor.end()
        assert update.trim_duration == pytest.approx(5.0)
        assert not editor.is_dragging

    def test_end_without_move(self, editor, window):
        """Test that a click without movement commits nothing."""
        editor.begin(DragMode.END, 0, window, TRACK_PX)
        assert editor.end() is None

    def test_cancel_returns_snapshot(self, editor, window):
        """Test that cancelling restores the pointer-down window."""
        editor.begin(DragMode.START, 0, window, TRACK_PX)
        editor.move(200)

        assert editor.cancel() is window
        assert editor.move(250) is None

    def test_zero_width_track(self, editor, window):
        """Test that an unmeasured track produces no movement."""
        editor.begin(DragMode.MOVE, 0, window, 0)
        update = editor.move(300)
        assert update.trim_start == 2.0

    def test_every_update_is_a_valid_window(self, editor, window):
        """Test that every emitted pair can be applied to the window."""
        for mode in DragMode:
            editor.begin(mode, 250, window, TRACK_PX)
            for x in range(-500, 1100, 37):
                update = editor.move(x)
                trimmed = window.with_trim(update.trim_start, update.trim_duration)
                assert trimmed.trim_end <= window.total_duration + 1e-6
            editor.cancel()
