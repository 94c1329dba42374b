from typing import Literal

from pydantic import BaseModel, Field

from splice.config import get_settings
from splice.schemas.audio import AudioConfig, AudioMixerState
from splice.schemas.effects import ClipEffect
from splice.schemas.text import TextOverlay
from splice.schemas.timeline import TimelineTrack
from splice.schemas.transform import Transform
from splice.schemas.transition import Transition

ProjectStatus = Literal["draft", "processing", "completed", "failed"]


class Resolution(BaseModel):
    width: int = Field(gt=0)
    height: int = Field(gt=0)


def _default_resolution() -> Resolution:
    settings = get_settings()
    return Resolution(width=settings.render_output_width, height=settings.render_output_height)


def _default_frame_rate() -> int:
    return get_settings().render_fps


def _default_sample_rate() -> int:
    return get_settings().render_audio_sample_rate


class ProjectSettings(BaseModel):
    resolution: Resolution = Field(default_factory=_default_resolution)
    frame_rate: int = Field(default_factory=_default_frame_rate)
    background_color: str = "#000000"
    audio_sample_rate: int = Field(default_factory=_default_sample_rate)


class Project(BaseModel):
    """Persisted shape of an editing project.

    Per-clip data lives in keyed collections next to the tracks rather than
    inside the clips, so clips stay plain timing records.
    """
    id: str
    name: str = ""
    tracks: list[TimelineTrack] = Field(default_factory=list)
    duration: float = 0.0  # seconds
    settings: ProjectSettings = Field(default_factory=ProjectSettings)
    status: ProjectStatus = "draft"
    progress: int = Field(default=0, ge=0, le=100)
    error: str | None = None

    effects: dict[str, list[ClipEffect]] = Field(default_factory=dict)  # by clip id
    transitions: list[Transition] = Field(default_factory=list)
    text_overlays: list[TextOverlay] = Field(default_factory=list)
    audio: dict[str, AudioConfig] = Field(default_factory=dict)  # by clip id
    transforms: dict[str, Transform] = Field(default_factory=dict)  # by clip id
    mixer: AudioMixerState | None = None
