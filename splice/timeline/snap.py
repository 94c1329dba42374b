"""Snap resolver for interactive drags.

A dragged time is pulled onto the playhead, a clip edge, or the grid when one
of them is within the configured pixel threshold. Candidates are checked in a
fixed order (playhead, clip edges by index, grid) and a later candidate only
wins when it is strictly closer, so the playhead wins ties.

The pixel threshold is converted to seconds at the zoom-1 rate
(base_pixels_per_second), so snapping sensitivity is the same at every zoom
level.
"""

from dataclasses import dataclass, field

from splice.schemas.timeline import SnapConfig
from splice.timeline.geometry import DEFAULT_PIXELS_PER_SECOND


@dataclass(frozen=True)
class SnapTargets:
    """Times a drag may snap to."""

    playhead_time: float | None = None
    clip_edges: list[float] = field(default_factory=list)


@dataclass(frozen=True)
class SnapResult:
    snapped_time: float
    snapped_to: str | None = None  # "playhead", "clip-edge-<i>", "grid"


def snap_to_grid(time: float, grid_size: float) -> float:
    """Round a time to the nearest multiple of grid_size."""
    if grid_size <= 0:
        return time
    return round(time / grid_size) * grid_size


def snap_time(
    time: float,
    config: SnapConfig,
    targets: SnapTargets,
    base_pixels_per_second: float = DEFAULT_PIXELS_PER_SECOND,
) -> SnapResult:
    """Snap a time to the nearest target within the threshold.

    Args:
        time: Candidate time in seconds
        config: Snap configuration (toggles, grid size, pixel threshold)
        targets: Playhead position and clip edges
        base_pixels_per_second: Pixels per second at zoom 1, used to convert
            the pixel threshold to seconds

    Returns:
        SnapResult with the (possibly adjusted) time and the label of the
        target it snapped to, or ``None`` when nothing was close enough
    """
    if not config.enabled:
        return SnapResult(snapped_time=time)

    time_threshold = config.threshold / base_pixels_per_second
    best_time = time
    best_label: str | None = None
    best_distance = float("inf")

    def check(target: float, label: str) -> None:
        nonlocal best_time, best_label, best_distance
        distance = abs(time - target)
        if distance < time_threshold and distance < best_distance:
            best_distance = distance
            best_time = target
            best_label = label

    if config.to_playhead and targets.playhead_time is not None:
        check(targets.playhead_time, "playhead")

    if config.to_clips:
        for i, edge in enumerate(targets.clip_edges):
            check(edge, f"clip-edge-{i}")

    if config.to_grid and config.grid_size > 0:
        check(snap_to_grid(time, config.grid_size), "grid")

    return SnapResult(snapped_time=best_time, snapped_to=best_label)
