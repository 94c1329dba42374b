from typing import Literal

from pydantic import BaseModel, Field, model_validator

# =============================================================================
# Tracks & Clips
# =============================================================================

TrackType = Literal["video", "audio", "text"]
DragType = Literal["move", "trim-start", "trim-end"]


class TimelineClip(BaseModel):
    """A timed reference to a window of source media placed on a track."""

    id: str
    track_id: str
    start_time: float = Field(default=0.0, ge=0)  # Timeline position (s)
    duration: float = Field(gt=0)  # Timeline length (s)
    source_start: float = 0.0  # Window start in source media (s)
    source_end: float  # Window end in source media (s)
    source_url: str = ""
    name: str = ""
    volume: float | None = None
    muted: bool | None = None
    layer: int | None = None

    @model_validator(mode="after")
    def check_source_window(self) -> "TimelineClip":
        if self.source_end <= self.source_start:
            raise ValueError(
                f"source_end ({self.source_end}) must be greater than "
                f"source_start ({self.source_start})"
            )
        return self

    @property
    def end_time(self) -> float:
        return self.start_time + self.duration


class TimelineTrack(BaseModel):
    id: str
    type: TrackType
    name: str = ""
    clips: list[TimelineClip] = Field(default_factory=list)
    muted: bool = False
    locked: bool = False
    visible: bool = True
    height: int = 80  # px


# =============================================================================
# Interactive state
# =============================================================================


class PlayheadState(BaseModel):
    current_time: float = 0.0
    is_playing: bool = False
    playback_rate: float = 1.0


class TimelineViewState(BaseModel):
    zoom: float = Field(default=1.0, ge=0)
    scroll_left: float = 0.0  # px
    base_pixels_per_second: float = 50.0


class TimeRange(BaseModel):
    start: float
    end: float


class TimelineSelection(BaseModel):
    clip_ids: list[str] = Field(default_factory=list)
    track_ids: list[str] = Field(default_factory=list)
    time_range: TimeRange | None = None


class SnapConfig(BaseModel):
    enabled: bool = True
    to_playhead: bool = True
    to_clips: bool = True
    to_grid: bool = True
    grid_size: float = 1.0  # seconds
    threshold: float = 10.0  # pixels


class DragState(BaseModel):
    """Transient state of an in-progress gesture; discarded on drop."""

    is_dragging: bool = False
    clip_id: str | None = None
    target_track_id: str | None = None
    original_start_time: float = 0.0
    original_duration: float = 0.0
    delta_time: float = 0.0
    drag_type: DragType | None = None
    snapped_to: str | None = None


class TimelineState(BaseModel):
    tracks: list[TimelineTrack] = Field(default_factory=list)
    playhead: PlayheadState = Field(default_factory=PlayheadState)
    view: TimelineViewState = Field(default_factory=TimelineViewState)
    selection: TimelineSelection = Field(default_factory=TimelineSelection)
    snap: SnapConfig = Field(default_factory=SnapConfig)
    drag: DragState = Field(default_factory=DragState)
    duration: float = 0.0  # Total timeline length (s)
