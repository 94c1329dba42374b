from typing import Literal

from pydantic import BaseModel, Field

# =============================================================================
# Clip effects
# =============================================================================

EffectType = Literal[
    "brightness",
    "contrast",
    "saturation",
    "blur",
    "sharpen",
    "grayscale",
    "sepia",
    "vignette",
    "hue",
    "temperature",
    "shadows",
    "highlights",
    "fade",
]


class ClipEffect(BaseModel):
    """An effect applied to one clip. Effects apply in ascending ``order``."""
    id: str
    clip_id: str
    type: EffectType
    params: dict[str, float] = Field(default_factory=dict)
    enabled: bool = True
    order: int = 0


class EffectParam(BaseModel):
    key: str
    label: str
    min: float
    max: float
    step: float = 1.0
    default: float
    unit: str = ""


class EffectConfig(BaseModel):
    """Static description of one effect type and how it maps to filters."""
    type: EffectType
    name: str
    description: str = ""
    params: list[EffectParam]
    css_filter: str | None = None  # CSS filter function, if the preview has one
    ffmpeg_filter: str  # FFmpeg filter the export stage uses

    def param(self, key: str) -> EffectParam | None:
        for param in self.params:
            if param.key == key:
                return param
        return None


class EffectDefinition(BaseModel):
    type: EffectType
    params: dict[str, float] = Field(default_factory=dict)


class EffectPreset(BaseModel):
    """Ordered bundle of effects applied together."""
    id: str
    name: str
    description: str = ""
    effects: list[EffectDefinition]
    preview: str | None = None  # CSS background for the preset swatch
