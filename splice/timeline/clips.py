"""Clip lookup, overlap, gap and split algorithms for the timeline model.

All functions are pure: they never mutate the clips or tracks they receive.
Operations that do not apply (a split on a clip boundary, no gap large
enough) return ``None`` instead of raising.
"""

import logging
import time
from dataclasses import dataclass
from typing import Iterable, Protocol
from uuid import uuid4

from splice.config import get_settings
from splice.exceptions import ClipNotFoundError, TrackNotFoundError
from splice.schemas.timeline import (
    DragState,
    PlayheadState,
    SnapConfig,
    TimelineClip,
    TimelineSelection,
    TimelineState,
    TimelineTrack,
    TimelineViewState,
)

logger = logging.getLogger(__name__)


class TimedSpan(Protocol):
    """Anything with a placement on the timeline (a clip or a candidate)."""

    start_time: float
    duration: float


@dataclass(frozen=True)
class Gap:
    start_time: float
    end_time: float

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time


# =============================================================================
# Lookup
# =============================================================================


def get_clip_edges(
    tracks: Iterable[TimelineTrack],
    exclude_clip_id: str | None = None,
) -> list[float]:
    """Collect every clip start and end across all tracks, sorted and de-duplicated."""
    edges: set[float] = set()
    for track in tracks:
        for clip in track.clips:
            if clip.id == exclude_clip_id:
                continue
            edges.add(clip.start_time)
            edges.add(clip.start_time + clip.duration)
    return sorted(edges)


def get_clip_at_time(clips: Iterable[TimelineClip], time: float) -> TimelineClip | None:
    """Return the first clip covering ``time`` (end-exclusive)."""
    for clip in clips:
        if clip.start_time <= time < clip.start_time + clip.duration:
            return clip
    return None


def get_clips_in_range(
    clips: Iterable[TimelineClip],
    start_time: float,
    end_time: float,
) -> list[TimelineClip]:
    """Return every clip that intersects the open range (start_time, end_time)."""
    return [
        clip
        for clip in clips
        if clip.start_time < end_time and clip.start_time + clip.duration > start_time
    ]


def find_track(tracks: Iterable[TimelineTrack], track_id: str) -> TimelineTrack:
    for track in tracks:
        if track.id == track_id:
            return track
    raise TrackNotFoundError(track_id)


def find_clip(tracks: Iterable[TimelineTrack], clip_id: str) -> TimelineClip:
    for track in tracks:
        for clip in track.clips:
            if clip.id == clip_id:
                return clip
    raise ClipNotFoundError(clip_id)


# =============================================================================
# Overlap & gaps
# =============================================================================


def detect_overlap(
    clip: TimedSpan,
    other_clips: Iterable[TimelineClip],
) -> TimelineClip | None:
    """Return the first clip that would overlap ``clip``, or None.

    Stops at the first conflict; this is a drag-time check, not an integrity
    scan. A clip never conflicts with itself (matched by id).
    """
    clip_id = getattr(clip, "id", None)
    clip_end = clip.start_time + clip.duration

    for other in other_clips:
        if clip_id and clip_id == other.id:
            continue
        other_end = other.start_time + other.duration
        if clip.start_time < other_end and clip_end > other.start_time:
            return other

    return None


def find_nearest_gap(
    clips: Iterable[TimelineClip],
    target_time: float,
    clip_duration: float,
    timeline_duration: float,
) -> Gap | None:
    """Find the free interval nearest to ``target_time`` that fits ``clip_duration``.

    Candidate gaps are the leading gap from 0, every gap between consecutive
    clips, and the trailing gap up to ``timeline_duration``. Distance is
    measured to the nearer boundary of each gap; on a tie the earlier gap wins.
    """
    sorted_clips = sorted(clips, key=lambda c: c.start_time)
    candidates: list[tuple[float, Gap]] = []

    def consider(start: float, end: float) -> None:
        if end - start >= clip_duration:
            distance = min(abs(target_time - start), abs(target_time - end))
            candidates.append((distance, Gap(start_time=start, end_time=end)))

    if not sorted_clips:
        consider(0.0, timeline_duration)
    else:
        if sorted_clips[0].start_time > 0:
            consider(0.0, sorted_clips[0].start_time)

        for current, following in zip(sorted_clips, sorted_clips[1:]):
            consider(current.start_time + current.duration, following.start_time)

        last_end = max(c.start_time + c.duration for c in sorted_clips)
        if last_end < timeline_duration:
            consider(last_end, timeline_duration)

    if not candidates:
        return None

    # min() keeps the first of equal distances
    return min(candidates, key=lambda item: item[0])[1]


# =============================================================================
# Split & duration
# =============================================================================


def split_clip(
    clip: TimelineClip,
    split_time: float,
) -> tuple[TimelineClip, TimelineClip] | None:
    """Split a clip into two at ``split_time``.

    The source window is divided by the same ratio as the timeline span, so
    the two halves stay linearly mapped onto the source and their source
    windows meet exactly.

    Returns:
        (first, second) clips with ids ``<id>-1`` / ``<id>-2``, or None when
        ``split_time`` is not strictly inside the clip
    """
    clip_end = clip.start_time + clip.duration
    if split_time <= clip.start_time or split_time >= clip_end:
        logger.debug(
            f"[SPLIT] {split_time}s is outside clip {clip.id} "
            f"({clip.start_time}s-{clip_end}s), not splitting"
        )
        return None

    split_offset = split_time - clip.start_time
    split_ratio = split_offset / clip.duration
    source_split = clip.source_start + (clip.source_end - clip.source_start) * split_ratio

    first = clip.model_copy(
        update={
            "id": f"{clip.id}-1",
            "duration": split_offset,
            "source_end": source_split,
        }
    )
    second = clip.model_copy(
        update={
            "id": f"{clip.id}-2",
            "start_time": split_time,
            "duration": clip.duration - split_offset,
            "source_start": source_split,
        }
    )
    return first, second


def calculate_timeline_duration(tracks: Iterable[TimelineTrack]) -> float:
    """Latest clip end across all tracks; 0 for an empty timeline."""
    return max(
        (clip.start_time + clip.duration for track in tracks for clip in track.clips),
        default=0.0,
    )


# =============================================================================
# Factories
# =============================================================================


def _generate_id(prefix: str) -> str:
    return f"{prefix}-{int(time.time() * 1000)}-{uuid4().hex[:9]}"


def generate_clip_id() -> str:
    return _generate_id("clip")


def generate_track_id() -> str:
    return _generate_id("track")


def create_video_track(name: str = "Video") -> TimelineTrack:
    return TimelineTrack(
        id=generate_track_id(),
        type="video",
        name=name,
        height=get_settings().video_track_height,
    )


def create_audio_track(name: str = "Audio") -> TimelineTrack:
    return TimelineTrack(
        id=generate_track_id(),
        type="audio",
        name=name,
        height=get_settings().audio_track_height,
    )


def create_text_track(name: str = "Text") -> TimelineTrack:
    return TimelineTrack(
        id=generate_track_id(),
        type="text",
        name=name,
        height=get_settings().text_track_height,
    )


def create_default_timeline_state() -> TimelineState:
    """Empty timeline at zoom 1 with every snap target enabled."""
    settings = get_settings()
    return TimelineState(
        tracks=[],
        playhead=PlayheadState(),
        view=TimelineViewState(
            zoom=1.0,
            scroll_left=0.0,
            base_pixels_per_second=settings.base_pixels_per_second,
        ),
        selection=TimelineSelection(),
        snap=SnapConfig(
            enabled=True,
            to_playhead=True,
            to_clips=True,
            to_grid=True,
            grid_size=settings.snap_grid_size,
            threshold=settings.snap_threshold_px,
        ),
        drag=DragState(),
        duration=0.0,
    )
