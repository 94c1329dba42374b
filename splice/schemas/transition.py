from typing import Any, Literal

from pydantic import BaseModel, Field

# =============================================================================
# Transitions
# =============================================================================

TransitionType = Literal[
    "fade",
    "crossfade",
    "dissolve",
    "wipe",
    "wipeLeft",
    "wipeRight",
    "wipeUp",
    "wipeDown",
    "slide",
    "slideLeft",
    "slideRight",
    "slideUp",
    "slideDown",
    "zoom",
    "zoomIn",
    "zoomOut",
    "none",
]


class Transition(BaseModel):
    """Blend from the end of one clip into the start of the next."""
    id: str
    project_id: str
    from_clip_id: str
    to_clip_id: str
    type: TransitionType = "fade"
    duration: int = Field(default=500, ge=0)  # milliseconds
    params: dict[str, Any] | None = None


class TransitionConfig(BaseModel):
    type: TransitionType
    name: str
    description: str = ""
    default_duration: int  # ms
    min_duration: int  # ms
    max_duration: int  # ms
    has_direction: bool = False
    ffmpeg_transition: str | None = None  # xfade transition name
    alias_of: TransitionType | None = None  # direction-less alias of a family member
