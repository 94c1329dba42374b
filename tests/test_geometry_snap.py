"""Tests for time/pixel geometry, time formatting and the snap resolver."""

import pytest

from splice.schemas.timeline import SnapConfig
from splice.timeline.geometry import (
    clamp,
    format_time,
    format_time_precise,
    get_pixels_per_second,
    pixels_to_time,
    time_to_pixels,
)
from splice.timeline.snap import SnapTargets, snap_time, snap_to_grid


class TestGeometry:
    """Tests for time <-> pixel conversion."""

    def test_time_to_pixels(self):
        assert time_to_pixels(2.0, 1.0) == 100.0
        assert time_to_pixels(2.0, 2.0) == 200.0
        assert time_to_pixels(2.0, 1.0, base_pixels_per_second=100) == 200.0

    def test_pixels_to_time_is_inverse(self):
        for zoom in (0.1, 1.0, 3.5):
            px = time_to_pixels(7.25, zoom)
            assert pixels_to_time(px, zoom) == pytest.approx(7.25)

    def test_pixels_per_second(self):
        assert get_pixels_per_second(2.0) == 100.0

    def test_clamp(self):
        assert clamp(5, 0, 3) == 3
        assert clamp(-1, 0, 3) == 0
        assert clamp(2, 0, 3) == 2


class TestTimeFormatting:
    def test_format_time_minutes(self):
        assert format_time(65) == "01:05"

    def test_format_time_hours(self):
        assert format_time(3725) == "01:02:05"
        assert format_time(65, include_hours=True) == "00:01:05"

    def test_format_time_precise(self):
        assert format_time_precise(65.25) == "01:05.250"

    def test_format_time_precise_rounds_up_to_next_second(self):
        assert format_time_precise(59.9996) == "01:00.000"


class TestSnapTime:
    """Tests for snap_time priority and threshold rules."""

    def test_disabled_returns_input(self):
        config = SnapConfig(enabled=False)
        result = snap_time(3.02, config, SnapTargets(playhead_time=3.0))
        assert result.snapped_time == 3.02
        assert result.snapped_to is None

    def test_nothing_in_range(self):
        config = SnapConfig(threshold=5, to_grid=False)
        result = snap_time(3.5, config, SnapTargets(playhead_time=10.0, clip_edges=[1.0]))
        assert result.snapped_time == 3.5
        assert result.snapped_to is None

    def test_snaps_to_playhead(self):
        config = SnapConfig(threshold=10, to_grid=False)
        result = snap_time(4.9, config, SnapTargets(playhead_time=5.0))
        assert result.snapped_time == 5.0
        assert result.snapped_to == "playhead"

    def test_strictly_nearer_clip_edge_beats_playhead(self):
        """Playhead 10.00, edge 10.05, 5px (0.1s) threshold, drag at 10.04: the edge is nearer."""
        config = SnapConfig(threshold=5, grid_size=1.0)
        targets = SnapTargets(playhead_time=10.0, clip_edges=[10.05])
        result = snap_time(10.04, config, targets)
        assert result.snapped_time == 10.05
        assert result.snapped_to == "clip-edge-0"

    def test_playhead_wins_ties(self):
        config = SnapConfig(threshold=10, to_grid=False)
        targets = SnapTargets(playhead_time=5.0, clip_edges=[5.0])
        assert snap_time(5.05, config, targets).snapped_to == "playhead"

    def test_clip_edge_label_uses_index(self):
        config = SnapConfig(threshold=10, to_grid=False, to_playhead=False)
        targets = SnapTargets(clip_edges=[1.0, 4.0, 8.0])
        result = snap_time(4.1, config, targets)
        assert result.snapped_time == 4.0
        assert result.snapped_to == "clip-edge-1"

    def test_snaps_to_grid(self):
        config = SnapConfig(threshold=10, grid_size=0.5, to_playhead=False, to_clips=False)
        result = snap_time(2.45, config, SnapTargets())
        assert result.snapped_time == 2.5
        assert result.snapped_to == "grid"

    def test_threshold_is_exclusive(self):
        """A target exactly one threshold away does not snap."""
        config = SnapConfig(threshold=50, to_grid=False)  # 1s at zoom 1
        result = snap_time(3.0, config, SnapTargets(playhead_time=4.0))
        assert result.snapped_to is None

    def test_threshold_follows_base_pixels_per_second(self):
        """10px is 0.2s at 50px/s but only 0.1s at 100px/s."""
        config = SnapConfig(threshold=10, to_grid=False)
        targets = SnapTargets(playhead_time=5.0)
        assert snap_time(4.85, config, targets).snapped_to == "playhead"
        assert snap_time(4.85, config, targets, base_pixels_per_second=100).snapped_to is None

    @pytest.mark.parametrize("time", [0.97, 4.02, 9.96, 10.04, 12.3])
    def test_idempotent(self, time):
        config = SnapConfig(threshold=5)
        targets = SnapTargets(playhead_time=10.0, clip_edges=[4.0, 10.05])
        first = snap_time(time, config, targets)
        second = snap_time(first.snapped_time, config, targets)
        assert second.snapped_time == first.snapped_time

    def test_snap_to_grid_ignores_non_positive_grid(self):
        assert snap_to_grid(1.3, 0) == 1.3
        assert snap_to_grid(1.3, 1.0) == 1.0
