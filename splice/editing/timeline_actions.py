"""Timeline action vocabulary and reducer.

Each action is a frozen dataclass; ``TimelineAction`` is the closed union of
them. ``apply_timeline_action`` returns a new ``TimelineState`` and never
mutates the one it was given. Actions that reference clips or tracks that do
not exist leave the state unchanged.

Drag gestures are driven by ``begin_drag`` / ``update_drag`` / ``end_drag``,
which snap the dragged edge and only commit a drop that does not overlap
another clip on the target track.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Union

from splice.config import get_settings
from splice.schemas.timeline import (
    DragState,
    DragType,
    PlayheadState,
    SnapConfig,
    TimelineClip,
    TimelineSelection,
    TimelineState,
    TimelineTrack,
)
from splice.timeline.clips import (
    calculate_timeline_duration,
    detect_overlap,
    generate_clip_id,
    get_clip_edges,
    split_clip,
)
from splice.timeline.geometry import clamp
from splice.timeline.snap import SnapTargets, snap_time

logger = logging.getLogger(__name__)


# =============================================================================
# Actions
# =============================================================================


@dataclass(frozen=True)
class SetTracks:
    tracks: list[TimelineTrack]


@dataclass(frozen=True)
class AddTrack:
    track: TimelineTrack


@dataclass(frozen=True)
class RemoveTrack:
    track_id: str


@dataclass(frozen=True)
class UpdateTrack:
    track_id: str
    updates: dict[str, Any]


@dataclass(frozen=True)
class AddClip:
    track_id: str
    clip: TimelineClip


@dataclass(frozen=True)
class RemoveClip:
    track_id: str
    clip_id: str


@dataclass(frozen=True)
class UpdateClip:
    track_id: str
    clip_id: str
    updates: dict[str, Any]


@dataclass(frozen=True)
class MoveClip:
    clip_id: str
    from_track_id: str
    to_track_id: str
    new_start_time: float


@dataclass(frozen=True)
class SetPlayhead:
    updates: dict[str, Any]


@dataclass(frozen=True)
class Seek:
    time: float


@dataclass(frozen=True)
class Play:
    pass


@dataclass(frozen=True)
class Pause:
    pass


@dataclass(frozen=True)
class SetPlaybackRate:
    rate: float


@dataclass(frozen=True)
class SetZoom:
    zoom: float


@dataclass(frozen=True)
class SetScroll:
    scroll_left: float


@dataclass(frozen=True)
class SetSelection:
    updates: dict[str, Any]


@dataclass(frozen=True)
class ClearSelection:
    pass


@dataclass(frozen=True)
class SetSnapConfig:
    updates: dict[str, Any]


@dataclass(frozen=True)
class SetDragState:
    updates: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SplitClip:
    track_id: str
    clip_id: str
    split_time: float


@dataclass(frozen=True)
class CutAtPlayhead:
    track_id: str
    clip_id: str


TimelineAction = Union[
    SetTracks,
    AddTrack,
    RemoveTrack,
    UpdateTrack,
    AddClip,
    RemoveClip,
    UpdateClip,
    MoveClip,
    SetPlayhead,
    Seek,
    Play,
    Pause,
    SetPlaybackRate,
    SetZoom,
    SetScroll,
    SetSelection,
    ClearSelection,
    SetSnapConfig,
    SetDragState,
    SplitClip,
    CutAtPlayhead,
]


# =============================================================================
# Handlers
# =============================================================================


def _with_tracks(state: TimelineState, tracks: list[TimelineTrack], **extra: Any) -> TimelineState:
    """Replace tracks and recompute the timeline duration."""
    return state.model_copy(
        update={"tracks": tracks, "duration": calculate_timeline_duration(tracks), **extra}
    )


def _find_clip(state: TimelineState, track_id: str, clip_id: str) -> TimelineClip | None:
    for track in state.tracks:
        if track.id == track_id:
            for clip in track.clips:
                if clip.id == clip_id:
                    return clip
    return None


def _set_tracks(state: TimelineState, action: SetTracks) -> TimelineState:
    return _with_tracks(state, list(action.tracks))


def _add_track(state: TimelineState, action: AddTrack) -> TimelineState:
    return _with_tracks(state, [*state.tracks, action.track])


def _remove_track(state: TimelineState, action: RemoveTrack) -> TimelineState:
    return _with_tracks(state, [t for t in state.tracks if t.id != action.track_id])


def _update_track(state: TimelineState, action: UpdateTrack) -> TimelineState:
    tracks = [
        t.model_copy(update=action.updates) if t.id == action.track_id else t
        for t in state.tracks
    ]
    return state.model_copy(update={"tracks": tracks})


def _add_clip(state: TimelineState, action: AddClip) -> TimelineState:
    tracks = [
        t.model_copy(update={"clips": [*t.clips, action.clip]}) if t.id == action.track_id else t
        for t in state.tracks
    ]
    return _with_tracks(state, tracks)


def _remove_clip(state: TimelineState, action: RemoveClip) -> TimelineState:
    tracks = [
        t.model_copy(update={"clips": [c for c in t.clips if c.id != action.clip_id]})
        if t.id == action.track_id
        else t
        for t in state.tracks
    ]
    selection = state.selection.model_copy(
        update={"clip_ids": [cid for cid in state.selection.clip_ids if cid != action.clip_id]}
    )
    return _with_tracks(state, tracks, selection=selection)


def _update_clip(state: TimelineState, action: UpdateClip) -> TimelineState:
    tracks = [
        t.model_copy(
            update={
                "clips": [
                    c.model_copy(update=action.updates) if c.id == action.clip_id else c
                    for c in t.clips
                ]
            }
        )
        if t.id == action.track_id
        else t
        for t in state.tracks
    ]
    return _with_tracks(state, tracks)


def _move_clip(state: TimelineState, action: MoveClip) -> TimelineState:
    clip = _find_clip(state, action.from_track_id, action.clip_id)
    if clip is None:
        return state
    if not any(t.id == action.to_track_id for t in state.tracks):
        return state

    moved = clip.model_copy(
        update={"start_time": action.new_start_time, "track_id": action.to_track_id}
    )
    same_track = action.from_track_id == action.to_track_id

    tracks: list[TimelineTrack] = []
    for t in state.tracks:
        if t.id == action.from_track_id and not same_track:
            t = t.model_copy(update={"clips": [c for c in t.clips if c.id != action.clip_id]})
        elif t.id == action.to_track_id:
            if same_track:
                clips = [moved if c.id == action.clip_id else c for c in t.clips]
            else:
                clips = [*t.clips, moved]
            t = t.model_copy(update={"clips": clips})
        tracks.append(t)

    return _with_tracks(state, tracks)


def _set_playhead(state: TimelineState, action: SetPlayhead) -> TimelineState:
    return state.model_copy(update={"playhead": state.playhead.model_copy(update=action.updates)})


def _seek(state: TimelineState, action: Seek) -> TimelineState:
    playhead = state.playhead.model_copy(update={"current_time": max(0.0, action.time)})
    return state.model_copy(update={"playhead": playhead})


def _play(state: TimelineState, action: Play) -> TimelineState:
    return state.model_copy(update={"playhead": state.playhead.model_copy(update={"is_playing": True})})


def _pause(state: TimelineState, action: Pause) -> TimelineState:
    return state.model_copy(update={"playhead": state.playhead.model_copy(update={"is_playing": False})})


def _set_playback_rate(state: TimelineState, action: SetPlaybackRate) -> TimelineState:
    playhead = state.playhead.model_copy(update={"playback_rate": action.rate})
    return state.model_copy(update={"playhead": playhead})


def _set_zoom(state: TimelineState, action: SetZoom) -> TimelineState:
    settings = get_settings()
    zoom = clamp(action.zoom, settings.min_zoom, settings.max_zoom)
    return state.model_copy(update={"view": state.view.model_copy(update={"zoom": zoom})})


def _set_scroll(state: TimelineState, action: SetScroll) -> TimelineState:
    view = state.view.model_copy(update={"scroll_left": max(0.0, action.scroll_left)})
    return state.model_copy(update={"view": view})


def _set_selection(state: TimelineState, action: SetSelection) -> TimelineState:
    return state.model_copy(update={"selection": state.selection.model_copy(update=action.updates)})


def _clear_selection(state: TimelineState, action: ClearSelection) -> TimelineState:
    return state.model_copy(update={"selection": TimelineSelection()})


def _set_snap_config(state: TimelineState, action: SetSnapConfig) -> TimelineState:
    return state.model_copy(update={"snap": state.snap.model_copy(update=action.updates)})


def _set_drag_state(state: TimelineState, action: SetDragState) -> TimelineState:
    return state.model_copy(update={"drag": state.drag.model_copy(update=action.updates)})


def _split_clip(state: TimelineState, action: SplitClip) -> TimelineState:
    clip = _find_clip(state, action.track_id, action.clip_id)
    if clip is None:
        return state

    result = split_clip(clip, action.split_time)
    if result is None:
        return state

    first, second = result
    first = first.model_copy(update={"id": generate_clip_id()})
    second = second.model_copy(update={"id": generate_clip_id()})

    tracks = [
        t.model_copy(
            update={"clips": [c for c in t.clips if c.id != action.clip_id] + [first, second]}
        )
        if t.id == action.track_id
        else t
        for t in state.tracks
    ]

    clip_ids = state.selection.clip_ids
    if action.clip_id in clip_ids:
        clip_ids = [first.id, second.id]
    selection = state.selection.model_copy(update={"clip_ids": clip_ids})

    return state.model_copy(update={"tracks": tracks, "selection": selection})


def _cut_at_playhead(state: TimelineState, action: CutAtPlayhead) -> TimelineState:
    return _split_clip(
        state,
        SplitClip(
            track_id=action.track_id,
            clip_id=action.clip_id,
            split_time=state.playhead.current_time,
        ),
    )


_HANDLERS: dict[type, Callable[[TimelineState, Any], TimelineState]] = {
    SetTracks: _set_tracks,
    AddTrack: _add_track,
    RemoveTrack: _remove_track,
    UpdateTrack: _update_track,
    AddClip: _add_clip,
    RemoveClip: _remove_clip,
    UpdateClip: _update_clip,
    MoveClip: _move_clip,
    SetPlayhead: _set_playhead,
    Seek: _seek,
    Play: _play,
    Pause: _pause,
    SetPlaybackRate: _set_playback_rate,
    SetZoom: _set_zoom,
    SetScroll: _set_scroll,
    SetSelection: _set_selection,
    ClearSelection: _clear_selection,
    SetSnapConfig: _set_snap_config,
    SetDragState: _set_drag_state,
    SplitClip: _split_clip,
    CutAtPlayhead: _cut_at_playhead,
}


def apply_timeline_action(state: TimelineState, action: TimelineAction) -> TimelineState:
    """Apply one action and return the resulting state."""
    handler = _HANDLERS.get(type(action))
    if handler is None:
        raise TypeError(f"Unsupported timeline action: {type(action).__name__}")
    return handler(state, action)


# =============================================================================
# Drag gestures
# =============================================================================


def begin_drag(state: TimelineState, clip_id: str, drag_type: DragType) -> TimelineState:
    """Start a move/trim gesture on a clip. Clips on locked tracks cannot be dragged."""
    for track in state.tracks:
        for clip in track.clips:
            if clip.id == clip_id:
                if track.locked:
                    logger.debug(f"[DRAG] Track {track.id} is locked, ignoring drag on {clip_id}")
                    return state
                drag = DragState(
                    is_dragging=True,
                    clip_id=clip_id,
                    target_track_id=track.id,
                    original_start_time=clip.start_time,
                    original_duration=clip.duration,
                    delta_time=0.0,
                    drag_type=drag_type,
                )
                return state.model_copy(update={"drag": drag})
    return state


def _dragged_edge(drag: DragState) -> float:
    """Timeline time of the edge the gesture moves."""
    if drag.drag_type == "trim-end":
        return drag.original_start_time + drag.original_duration
    return drag.original_start_time


def update_drag(
    state: TimelineState,
    delta_time: float,
    target_track_id: str | None = None,
) -> TimelineState:
    """Record the raw pointer delta, snapped against clip edges and the playhead."""
    drag = state.drag
    if not drag.is_dragging or drag.clip_id is None:
        return state

    edge = _dragged_edge(drag)
    result = snap_time(
        edge + delta_time,
        state.snap,
        SnapTargets(
            playhead_time=state.playhead.current_time,
            clip_edges=get_clip_edges(state.tracks, exclude_clip_id=drag.clip_id),
        ),
        state.view.base_pixels_per_second,
    )

    updated = drag.model_copy(
        update={
            "delta_time": result.snapped_time - edge,
            "snapped_to": result.snapped_to,
            "target_track_id": target_track_id or drag.target_track_id,
        }
    )
    return state.model_copy(update={"drag": updated})


def _trimmed_clip(clip: TimelineClip, drag: DragState) -> TimelineClip | None:
    """Apply a trim delta, keeping the source window linearly mapped."""
    rate = (clip.source_end - clip.source_start) / clip.duration
    delta = drag.delta_time

    if drag.drag_type == "trim-start":
        # Extending left stops at the beginning of the source media
        if rate > 0:
            delta = max(delta, -clip.source_start / rate)
        start = drag.original_start_time + delta
        duration = drag.original_duration - delta
        if start < 0 or duration <= 0:
            return None
        return clip.model_copy(
            update={
                "start_time": start,
                "duration": duration,
                "source_start": max(0.0, clip.source_start + delta * rate),
            }
        )

    duration = drag.original_duration + delta
    if duration <= 0:
        return None
    return clip.model_copy(
        update={"duration": duration, "source_end": clip.source_end + delta * rate}
    )


def end_drag(state: TimelineState) -> TimelineState:
    """Commit the gesture if the result fits, then discard the drag state."""
    drag = state.drag
    cleared = state.model_copy(update={"drag": DragState()})
    if not drag.is_dragging or drag.clip_id is None or drag.drag_type is None:
        return cleared

    source_track = next(
        (t for t in state.tracks if any(c.id == drag.clip_id for c in t.clips)), None
    )
    if source_track is None:
        return cleared
    clip = next(c for c in source_track.clips if c.id == drag.clip_id)

    target_track_id = drag.target_track_id or source_track.id
    target_track = next((t for t in state.tracks if t.id == target_track_id), None)
    if target_track is None or target_track.locked:
        return cleared

    if drag.drag_type == "move":
        new_start = max(0.0, drag.original_start_time + drag.delta_time)
        candidate = clip.model_copy(update={"start_time": new_start})
        if detect_overlap(candidate, target_track.clips) is not None:
            logger.debug(f"[DRAG] Move of {clip.id} to {new_start}s overlaps, dropping")
            return cleared
        return apply_timeline_action(
            cleared,
            MoveClip(
                clip_id=clip.id,
                from_track_id=source_track.id,
                to_track_id=target_track.id,
                new_start_time=new_start,
            ),
        )

    trimmed = _trimmed_clip(clip, drag)
    if trimmed is None or detect_overlap(trimmed, source_track.clips) is not None:
        logger.debug(f"[DRAG] Trim of {clip.id} is not applicable, dropping")
        return cleared

    return apply_timeline_action(
        cleared,
        UpdateClip(
            track_id=source_track.id,
            clip_id=clip.id,
            updates={
                "start_time": trimmed.start_time,
                "duration": trimmed.duration,
                "source_start": trimmed.source_start,
                "source_end": trimmed.source_end,
            },
        ),
    )
