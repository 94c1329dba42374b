"""Text overlays: presets, animation timing and drawtext compilation.

Features:
- Named presets (title, subtitle, lower-third, caption, watermark, custom)
- Entry/exit animation progress with quadratic easing
- Percentage <-> pixel placement against a canvas
- FFmpeg drawtext filters with escaped content and time-gated visibility
"""

import logging
import time
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any
from uuid import uuid4

from splice.config import get_settings
from splice.exceptions import UnknownPresetError
from splice.render.filters import Expr, FilterExpr, Text, css_color_to_ffmpeg, format_number
from splice.schemas.text import (
    TextAnimation,
    TextOverlay,
    TextPadding,
    TextPosition,
    TextPreset,
    TextStyle,
)
from splice.timeline.geometry import clamp
from splice.utils.interpolation import get_easing_function, interpolate

logger = logging.getLogger(__name__)

DEFAULT_TEXT_STYLE = TextStyle()
DEFAULT_TEXT_POSITION = TextPosition(x=50, y=50, rotation=0)
DEFAULT_FADE_ANIMATION = TextAnimation(type="fade", duration=0.5, easing="ease-out")

# Distance (px) a sliding overlay travels in the preview
SLIDE_DISTANCE = 50.0


def _style(**overrides: Any) -> TextStyle:
    return DEFAULT_TEXT_STYLE.model_copy(update=overrides)


TEXT_PRESETS: dict[str, TextPreset] = {
    "title": TextPreset(
        type="title",
        name="Title",
        description="Large centered text for titles",
        position=TextPosition(x=50, y=50),
        style=_style(font_size=72, font_weight="bold", align="center", vertical_align="middle"),
        animation_in=TextAnimation(type="fade", duration=0.5, easing="ease-out"),
        animation_out=TextAnimation(type="fade", duration=0.5, easing="ease-in"),
        default_duration=4,
    ),
    "subtitle": TextPreset(
        type="subtitle",
        name="Subtitle",
        description="Medium text below title",
        position=TextPosition(x=50, y=60),
        style=_style(
            font_size=36, font_weight="normal", align="center", vertical_align="middle", bold=False
        ),
        animation_in=TextAnimation(type="fade", duration=0.3, easing="ease-out"),
        animation_out=TextAnimation(type="fade", duration=0.3, easing="ease-in"),
        default_duration=3,
    ),
    "lower-third": TextPreset(
        type="lower-third",
        name="Lower Third",
        description="Name/title bar at bottom left",
        position=TextPosition(x=10, y=80),
        style=_style(
            font_size=32,
            font_weight="bold",
            align="left",
            vertical_align="bottom",
            background_color="rgba(0, 0, 0, 0.7)",
            padding=TextPadding(top=12, right=24, bottom=12, left=24),
            border_radius=4,
        ),
        animation_in=TextAnimation(
            type="slide", duration=0.4, slide_direction="left", easing="ease-out"
        ),
        animation_out=TextAnimation(
            type="slide", duration=0.4, slide_direction="left", easing="ease-in"
        ),
        default_duration=5,
    ),
    "caption": TextPreset(
        type="caption",
        name="Caption",
        description="Subtitle/caption at bottom center",
        position=TextPosition(x=50, y=90),
        style=_style(
            font_size=28,
            font_weight="normal",
            align="center",
            vertical_align="bottom",
            bold=False,
            background_color="rgba(0, 0, 0, 0.6)",
            padding=TextPadding(top=8, right=16, bottom=8, left=16),
            border_radius=4,
        ),
        animation_in=TextAnimation(type="fade", duration=0.2, easing="ease-out"),
        animation_out=TextAnimation(type="fade", duration=0.2, easing="ease-in"),
        default_duration=3,
    ),
    "watermark": TextPreset(
        type="watermark",
        name="Watermark",
        description="Small text in corner",
        position=TextPosition(x=95, y=5),
        style=_style(
            font_size=18,
            font_weight="normal",
            align="right",
            vertical_align="top",
            bold=False,
            opacity=0.6,
            shadow=None,
        ),
        default_duration=-1,  # full timeline duration
    ),
    "custom": TextPreset(
        type="custom",
        name="Custom",
        description="Custom text with default styling",
        position=DEFAULT_TEXT_POSITION,
        style=DEFAULT_TEXT_STYLE,
        default_duration=3,
    ),
}

AVAILABLE_FONTS = [
    "Inter, sans-serif",
    "Arial, sans-serif",
    "Helvetica, sans-serif",
    "Georgia, serif",
    "Times New Roman, serif",
    "Courier New, monospace",
    "Roboto, sans-serif",
    "Open Sans, sans-serif",
    "Lato, sans-serif",
    "Montserrat, sans-serif",
    "Oswald, sans-serif",
    "Playfair Display, serif",
    "Bebas Neue, sans-serif",
    "Impact, sans-serif",
]

COLOR_PRESETS = [
    "#FFFFFF",  # White
    "#000000",  # Black
    "#FF0000",  # Red
    "#00FF00",  # Green
    "#0000FF",  # Blue
    "#FFFF00",  # Yellow
    "#FF00FF",  # Magenta
    "#00FFFF",  # Cyan
    "#FFA500",  # Orange
    "#800080",  # Purple
    "#008000",  # Dark Green
    "#000080",  # Navy
    "#808080",  # Gray
    "#C0C0C0",  # Silver
]


@dataclass(frozen=True)
class AnimationProgress:
    """Raw (un-eased) progress of the entry and exit animations, each 0-1."""

    in_progress: float
    out_progress: float


@dataclass(frozen=True)
class TextAnimationState:
    """Preview properties of an overlay at one instant."""

    opacity: float = 1.0
    translate_x: float = 0.0  # px
    translate_y: float = 0.0  # px
    scale: float = 1.0


@dataclass(frozen=True)
class PixelPosition:
    x: float
    y: float
    width: float | None = None
    height: float | None = None


# =============================================================================
# Creation & visibility
# =============================================================================


def generate_text_id() -> str:
    return f"text-{int(time.time() * 1000)}-{uuid4().hex[:9]}"


def create_text_overlay(
    content: str,
    track_id: str,
    start_time: float,
    preset: str = "custom",
    *,
    position: Mapping[str, Any] | None = None,
    style: Mapping[str, Any] | None = None,
    duration: float | None = None,
    timeline_duration: float | None = None,
) -> TextOverlay:
    """Create an overlay from a preset, overriding individual fields.

    Overrides are merged per field: ``style={"color": "#FF0000"}`` keeps every
    other style field of the preset.

    Args:
        content: Text to display
        track_id: Text track the overlay belongs to
        start_time: Timeline start (s)
        preset: Preset name
        position: Position fields to override
        style: Style fields to override
        duration: Explicit duration (s); defaults to the preset's
        timeline_duration: Resolves the "full duration" default of the
            watermark preset to the remainder of the timeline

    Raises:
        UnknownPresetError: If the preset does not exist
    """
    preset_config = TEXT_PRESETS.get(preset)
    if preset_config is None:
        raise UnknownPresetError(preset)

    resolved_duration = duration if duration is not None else preset_config.default_duration
    if resolved_duration < 0 and timeline_duration is not None:
        resolved_duration = timeline_duration - start_time

    return TextOverlay(
        id=generate_text_id(),
        track_id=track_id,
        content=content,
        start_time=start_time,
        duration=resolved_duration,
        position=TextPosition.model_validate(
            {**preset_config.position.model_dump(), **(position or {})}
        ),
        style=TextStyle.model_validate({**preset_config.style.model_dump(), **(style or {})}),
        animation_in=preset_config.animation_in,
        animation_out=preset_config.animation_out,
        preset=preset_config.type,
        visible=True,
        locked=False,
    )


def is_text_visible_at_time(overlay: TextOverlay, time: float) -> bool:
    if not overlay.visible:
        return False
    return overlay.start_time <= time < overlay.start_time + overlay.duration


def get_visible_texts(overlays: Iterable[TextOverlay], time: float) -> list[TextOverlay]:
    return [overlay for overlay in overlays if is_text_visible_at_time(overlay, time)]


# =============================================================================
# Animation
# =============================================================================


def _is_animated(animation: TextAnimation | None) -> bool:
    return animation is not None and animation.type != "none"


def calculate_animation_progress(overlay: TextOverlay, current_time: float) -> AnimationProgress:
    """Compute entry and exit progress at ``current_time``.

    Entry progress is 0 before ``start + delay``, rises linearly to 1 over the
    animation duration and then holds. Exit progress is 0 until
    ``end - duration``, rises linearly to 1 at ``end`` and holds after it.
    Without an animation (or with type ``none``) entry is 1 and exit is 0.
    """
    overlay_end = overlay.start_time + overlay.duration
    in_progress = 1.0
    out_progress = 0.0

    animation_in = overlay.animation_in
    if _is_animated(animation_in):
        in_start = overlay.start_time + animation_in.delay
        in_end = in_start + animation_in.duration
        if animation_in.duration > 0:
            in_progress = interpolate(current_time, [in_start, in_end], [0.0, 1.0])
        else:
            in_progress = 0.0 if current_time < in_start else 1.0

    animation_out = overlay.animation_out
    if _is_animated(animation_out):
        out_start = overlay_end - animation_out.duration
        if animation_out.duration > 0:
            out_progress = interpolate(current_time, [out_start, overlay_end], [0.0, 1.0])
        else:
            out_progress = 1.0 if current_time >= overlay_end else 0.0

    return AnimationProgress(in_progress=in_progress, out_progress=out_progress)


def apply_easing(progress: float, easing: str | None = "ease-out") -> float:
    """Apply a named easing curve; unknown names are linear."""
    return get_easing_function(easing)(progress)


def _animate(state: dict[str, float], animation: TextAnimation, amount: float) -> None:
    """Apply an animation at ``amount`` (1 = fully shown, 0 = fully hidden)."""
    if animation.type == "fade":
        state["opacity"] = amount
    elif animation.type == "scale":
        state["scale"] = amount
    elif animation.type == "slide":
        offset = SLIDE_DISTANCE * (1 - amount)
        direction = animation.slide_direction or "left"
        if direction == "left":
            state["translate_x"] = -offset
        elif direction == "right":
            state["translate_x"] = offset
        elif direction == "up":
            state["translate_y"] = -offset
        else:
            state["translate_y"] = offset


def get_text_animation_state(overlay: TextOverlay, current_time: float) -> TextAnimationState:
    """Resolve eased animation progress into preview opacity/offset/scale."""
    progress = calculate_animation_progress(overlay, current_time)
    state = {"opacity": 1.0, "translate_x": 0.0, "translate_y": 0.0, "scale": 1.0}

    if _is_animated(overlay.animation_in) and progress.in_progress < 1:
        eased = apply_easing(progress.in_progress, overlay.animation_in.easing)
        _animate(state, overlay.animation_in, eased)

    if _is_animated(overlay.animation_out) and progress.out_progress > 0:
        eased = apply_easing(progress.out_progress, overlay.animation_out.easing)
        _animate(state, overlay.animation_out, 1 - eased)

    return TextAnimationState(**state)


# =============================================================================
# Placement
# =============================================================================


def text_position_to_pixels(
    position: TextPosition,
    canvas_width: float,
    canvas_height: float,
) -> PixelPosition:
    return PixelPosition(
        x=position.x / 100 * canvas_width,
        y=position.y / 100 * canvas_height,
        width=position.width / 100 * canvas_width if position.width else None,
        height=position.height / 100 * canvas_height if position.height else None,
    )


def pixels_to_text_position(
    x: float,
    y: float,
    canvas_width: float,
    canvas_height: float,
) -> TextPosition:
    return TextPosition(
        x=clamp(x / canvas_width * 100, 0, 100),
        y=clamp(y / canvas_height * 100, 0, 100),
    )


# =============================================================================
# FFmpeg compilation
# =============================================================================


def _anchor_expr(pixel: int, alignment: str, text_dim: str) -> int | Expr:
    """Offset the anchor so the overlay sits where the preview draws it."""
    if alignment in ("center", "middle"):
        return Expr(f"{pixel}-{text_dim}/2")
    if alignment in ("right", "bottom"):
        return Expr(f"{pixel}-{text_dim}")
    return pixel


def _alpha_expr(overlay: TextOverlay) -> Expr | None:
    """Fade expression for fade-type animations (linear, clipped to 0-1)."""
    parts: list[str] = []
    animation_in = overlay.animation_in
    animation_out = overlay.animation_out

    if animation_in and animation_in.type == "fade" and animation_in.duration > 0:
        in_start = format_number(overlay.start_time + animation_in.delay)
        parts.append(f"clip((t-{in_start})/{format_number(animation_in.duration)},0,1)")

    if animation_out and animation_out.type == "fade" and animation_out.duration > 0:
        end = format_number(overlay.start_time + overlay.duration)
        parts.append(f"clip(({end}-t)/{format_number(animation_out.duration)},0,1)")

    if not parts:
        return None
    if len(parts) == 2:
        return Expr(f"min({parts[0]},{parts[1]})")
    return Expr(parts[0])


def _font_color(style: TextStyle) -> str:
    color = css_color_to_ffmpeg(style.color)
    if style.opacity < 1 and "@" not in color:
        color = f"{color}@{format_number(style.opacity)}"
    return color


def build_drawtext_expr(overlay: TextOverlay, width: int, height: int) -> FilterExpr:
    """Build the drawtext filter for one overlay on a ``width`` x ``height`` canvas."""
    style = overlay.style
    x = round(overlay.position.x / 100 * width)
    y = round(overlay.position.y / 100 * height)

    expr = (
        FilterExpr("drawtext")
        .arg("text", Text(overlay.content))
        .arg("fontsize", style.font_size)
        .arg("fontcolor", _font_color(style))
        .arg("x", _anchor_expr(x, style.align, "text_w"))
        .arg("y", _anchor_expr(y, style.vertical_align, "text_h"))
    )

    font_name = style.font_family.split(",")[0].strip()
    if font_name and font_name != "sans-serif":
        expr = expr.arg("font", Text(font_name))

    if style.background_color:
        expr = expr.arg("box", 1).arg("boxcolor", css_color_to_ffmpeg(style.background_color))
        if style.padding:
            expr = expr.arg("boxborderw", round(style.padding.top))

    if style.shadow:
        expr = (
            expr.arg("shadowcolor", css_color_to_ffmpeg(style.shadow.color))
            .arg("shadowx", style.shadow.offset_x)
            .arg("shadowy", style.shadow.offset_y)
        )

    if style.stroke and style.stroke.width > 0:
        expr = expr.arg("borderw", style.stroke.width).arg(
            "bordercolor", css_color_to_ffmpeg(style.stroke.color)
        )

    alpha = _alpha_expr(overlay)
    if alpha is not None:
        expr = expr.arg("alpha", alpha)

    start = format_number(overlay.start_time)
    end = format_number(overlay.start_time + overlay.duration)
    return expr.arg("enable", Expr(f"between(t,{start},{end})"))


def generate_drawtext_filter(overlay: TextOverlay, width: int, height: int) -> str:
    """Compile an overlay to an FFmpeg drawtext filter string."""
    return build_drawtext_expr(overlay, width, height).render()


class TextRenderer:
    """Compiles the text overlays of a project against one output canvas."""

    def __init__(self, width: int | None = None, height: int | None = None):
        settings = get_settings()
        self.width = width or settings.render_output_width
        self.height = height or settings.render_output_height

    def generate_drawtext_filter(self, overlay: TextOverlay) -> str:
        return generate_drawtext_filter(overlay, self.width, self.height)

    def build_filters(self, overlays: Iterable[TextOverlay]) -> list[str]:
        """Drawtext filters for every visible, non-empty overlay, by start time."""
        filters = []
        for overlay in sorted(overlays, key=lambda o: o.start_time):
            if not overlay.visible or not overlay.content.strip() or overlay.duration <= 0:
                logger.debug(f"[TEXT] Skipping overlay {overlay.id}")
                continue
            filters.append(self.generate_drawtext_filter(overlay))
        logger.debug(f"[TEXT] Compiled {len(filters)} drawtext filters")
        return filters


# =============================================================================
# Validation
# =============================================================================


def validate_text_overlay(overlay: TextOverlay | Mapping[str, Any]) -> list[str]:
    """Check an overlay (or a partial update) and return every problem found."""
    data = overlay.model_dump() if isinstance(overlay, TextOverlay) else dict(overlay)
    errors: list[str] = []

    content = data.get("content")
    if not content or not str(content).strip():
        errors.append("Text content cannot be empty")

    start_time = data.get("start_time")
    if start_time is not None and start_time < 0:
        errors.append("Start time cannot be negative")

    duration = data.get("duration")
    if duration is not None and duration <= 0:
        errors.append("Duration must be positive")

    position = data.get("position")
    if isinstance(position, TextPosition):
        position = position.model_dump()
    if position:
        if not 0 <= position.get("x", 0) <= 100:
            errors.append("X position must be between 0 and 100")
        if not 0 <= position.get("y", 0) <= 100:
            errors.append("Y position must be between 0 and 100")

    style = data.get("style")
    if isinstance(style, TextStyle):
        style = style.model_dump()
    if style:
        if style.get("font_size", 1) < 1:
            errors.append("Font size must be at least 1")
        if not 0 <= style.get("opacity", 1) <= 1:
            errors.append("Opacity must be between 0 and 1")

    return errors
