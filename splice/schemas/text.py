from typing import Literal

from pydantic import BaseModel, Field

# =============================================================================
# Text overlays
# =============================================================================

TextPresetType = Literal["title", "subtitle", "lower-third", "caption", "watermark", "custom"]
TextAnimationType = Literal["none", "fade", "slide", "scale", "typewriter"]
EasingName = Literal["linear", "ease-in", "ease-out", "ease-in-out"]
SlideDirection = Literal["left", "right", "up", "down"]


class TextPosition(BaseModel):
    """Placement as a percentage of the canvas (0-100)."""
    x: float = 50.0
    y: float = 50.0
    width: float | None = None
    height: float | None = None
    rotation: float = 0.0  # degrees


class TextShadow(BaseModel):
    offset_x: float = 2.0
    offset_y: float = 2.0
    blur: float = 4.0
    color: str = "rgba(0, 0, 0, 0.5)"


class TextStroke(BaseModel):
    width: float
    color: str


class TextPadding(BaseModel):
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0
    left: float = 0.0


class TextStyle(BaseModel):
    font_family: str = "Inter, sans-serif"
    font_size: float = 48.0  # px
    font_weight: str = "bold"
    color: str = "#FFFFFF"
    background_color: str | None = None
    opacity: float = 1.0
    align: Literal["left", "center", "right"] = "center"
    vertical_align: Literal["top", "middle", "bottom"] = "middle"
    bold: bool = True
    italic: bool = False
    underline: bool = False
    letter_spacing: float = 0.0
    line_height: float = 1.2
    shadow: TextShadow | None = Field(default_factory=TextShadow)
    stroke: TextStroke | None = None
    padding: TextPadding | None = None
    border_radius: float = 0.0


class TextAnimation(BaseModel):
    type: TextAnimationType = "fade"
    duration: float = 0.5  # seconds
    delay: float = 0.0  # seconds, entry animations only
    easing: EasingName = "ease-out"
    slide_direction: SlideDirection | None = None


class TextOverlay(BaseModel):
    """Text drawn over the video between start_time and start_time + duration.

    Timing and placement are not constrained here; validate_text_overlay
    reports every problem at once for the editing surface.
    """
    id: str
    track_id: str
    content: str
    start_time: float = 0.0
    duration: float = 3.0
    position: TextPosition = Field(default_factory=TextPosition)
    style: TextStyle = Field(default_factory=TextStyle)
    animation_in: TextAnimation | None = None
    animation_out: TextAnimation | None = None
    preset: TextPresetType | None = None
    visible: bool = True
    locked: bool = False

    @property
    def end_time(self) -> float:
        return self.start_time + self.duration


class TextPreset(BaseModel):
    type: TextPresetType
    name: str
    description: str = ""
    position: TextPosition = Field(default_factory=TextPosition)
    style: TextStyle = Field(default_factory=TextStyle)
    animation_in: TextAnimation | None = None
    animation_out: TextAnimation | None = None
    default_duration: float = 3.0  # -1 = full timeline duration
