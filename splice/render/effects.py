"""Clip effects: parameter schema, preview (CSS) and export (FFmpeg) mappings.

Effect parameters live in one internal domain (e.g. brightness -100..100
around 0). The preview and the export use different filter primitives with
different neutral points, so each has its own mapping:

    brightness  0  ->  CSS brightness(1)   |  FFmpeg eq=brightness=0
    contrast    0  ->  CSS contrast(1)     |  FFmpeg eq=contrast=1

Every default parameter maps to the neutral value of its filter, and
compiled chains omit stages whose value is neutral.
"""

import logging
import math
import time
from collections.abc import Iterable, Mapping
from uuid import uuid4

from splice.exceptions import UnknownEffectTypeError, UnknownPresetError
from splice.render.filters import Expr, FilterExpr, format_number
from splice.schemas.effects import (
    ClipEffect,
    EffectConfig,
    EffectDefinition,
    EffectParam,
    EffectPreset,
    EffectType,
)

logger = logging.getLogger(__name__)


def _percent_param(key: str, label: str, default: float = 0, min_value: float = -100) -> EffectParam:
    return EffectParam(key=key, label=label, min=min_value, max=100, step=1, default=default, unit="%")


EFFECT_CONFIGS: dict[str, EffectConfig] = {
    "brightness": EffectConfig(
        type="brightness",
        name="Brightness",
        description="Adjust overall brightness",
        params=[_percent_param("value", "Brightness")],
        css_filter="brightness",
        ffmpeg_filter="eq",
    ),
    "contrast": EffectConfig(
        type="contrast",
        name="Contrast",
        description="Adjust the difference between light and dark areas",
        params=[_percent_param("value", "Contrast")],
        css_filter="contrast",
        ffmpeg_filter="eq",
    ),
    "saturation": EffectConfig(
        type="saturation",
        name="Saturation",
        description="Adjust color intensity",
        params=[_percent_param("value", "Saturation")],
        css_filter="saturate",
        ffmpeg_filter="eq",
    ),
    "blur": EffectConfig(
        type="blur",
        name="Blur",
        description="Gaussian blur",
        params=[EffectParam(key="radius", label="Radius", min=0, max=20, step=0.5, default=0, unit="px")],
        css_filter="blur",
        ffmpeg_filter="gblur",
    ),
    "sharpen": EffectConfig(
        type="sharpen",
        name="Sharpen",
        description="Enhance edge detail",
        params=[_percent_param("amount", "Amount", min_value=0)],
        ffmpeg_filter="unsharp",
    ),
    "grayscale": EffectConfig(
        type="grayscale",
        name="Grayscale",
        description="Remove color",
        params=[_percent_param("amount", "Amount", min_value=0)],
        css_filter="grayscale",
        ffmpeg_filter="hue",
    ),
    "sepia": EffectConfig(
        type="sepia",
        name="Sepia",
        description="Warm brown vintage tone",
        params=[_percent_param("amount", "Amount", min_value=0)],
        css_filter="sepia",
        ffmpeg_filter="colorchannelmixer",
    ),
    "vignette": EffectConfig(
        type="vignette",
        name="Vignette",
        description="Darken the edges of the frame",
        params=[
            _percent_param("intensity", "Intensity", min_value=0),
            _percent_param("radius", "Radius", default=50, min_value=0),
        ],
        ffmpeg_filter="vignette",
    ),
    "hue": EffectConfig(
        type="hue",
        name="Hue",
        description="Rotate colors around the color wheel",
        params=[EffectParam(key="angle", label="Angle", min=-180, max=180, step=1, default=0, unit="°")],
        css_filter="hue-rotate",
        ffmpeg_filter="hue",
    ),
    "temperature": EffectConfig(
        type="temperature",
        name="Temperature",
        description="Shift toward warm (positive) or cool (negative) tones",
        params=[_percent_param("value", "Temperature")],
        ffmpeg_filter="colorbalance",
    ),
    "shadows": EffectConfig(
        type="shadows",
        name="Shadows",
        description="Lift or crush the dark tones",
        params=[_percent_param("value", "Shadows")],
        ffmpeg_filter="curves",
    ),
    "highlights": EffectConfig(
        type="highlights",
        name="Highlights",
        description="Raise or recover the bright tones",
        params=[_percent_param("value", "Highlights")],
        ffmpeg_filter="curves",
    ),
    "fade": EffectConfig(
        type="fade",
        name="Opacity",
        description="Clip opacity",
        params=[_percent_param("opacity", "Opacity", default=100, min_value=0)],
        css_filter="opacity",
        ffmpeg_filter="colorchannelmixer",
    ),
}

# Neutral (no-op) value of each mapping
CSS_NEUTRAL_VALUES: dict[str, float] = {
    "brightness": 1,
    "contrast": 1,
    "saturation": 1,
    "blur": 0,
    "grayscale": 0,
    "sepia": 0,
    "hue": 0,
    "fade": 1,
}

FFMPEG_NEUTRAL_VALUES: dict[str, float] = {
    "brightness": 0,
    "contrast": 1,
    "saturation": 1,
    "blur": 0,
    "sharpen": 0,
    "grayscale": 0,
    "sepia": 0,
    "vignette": 0,
    "hue": 0,
    "temperature": 0,
    "shadows": 0,
    "highlights": 0,
    "fade": 1,
}

# Applied as one eq= stage ahead of every discrete stage
EQ_EFFECTS = ("brightness", "contrast", "saturation")

# Sepia colour matrix (rows: output r, g, b)
SEPIA_MATRIX = (
    (0.393, 0.769, 0.189),
    (0.349, 0.686, 0.168),
    (0.272, 0.534, 0.131),
)


# =============================================================================
# Registry
# =============================================================================


def get_effect_config(effect_type: str) -> EffectConfig:
    """Look up the config for an effect type.

    Raises:
        UnknownEffectTypeError: If the type has no config
    """
    config = EFFECT_CONFIGS.get(effect_type)
    if config is None:
        raise UnknownEffectTypeError(effect_type)
    return config


def get_available_effects() -> list[EffectConfig]:
    return list(EFFECT_CONFIGS.values())


def _param_value(effect_type: str, params: Mapping[str, float], key: str) -> float:
    """Read a parameter, falling back to its default."""
    value = params.get(key)
    if value is not None:
        return value
    param = get_effect_config(effect_type).param(key)
    return param.default if param else 0.0


def default_effect_params(effect_type: str) -> dict[str, float]:
    return {param.key: param.default for param in get_effect_config(effect_type).params}


def clamp_effect_params(effect_type: str, params: Mapping[str, float]) -> dict[str, float]:
    """Clamp known parameters to their bounds; unknown keys are dropped."""
    clamped = {}
    for param in get_effect_config(effect_type).params:
        if param.key in params:
            clamped[param.key] = max(param.min, min(param.max, params[param.key]))
    return clamped


# =============================================================================
# Value mappings
# =============================================================================


def effect_value_to_css(effect_type: EffectType, params: Mapping[str, float]) -> float | None:
    """Map internal parameters to the preview CSS filter argument.

    Returns None for effects CSS has no filter function for.
    """
    if effect_type in ("brightness", "contrast", "saturation"):
        return 1 + _param_value(effect_type, params, "value") / 100
    if effect_type == "blur":
        return _param_value(effect_type, params, "radius")
    if effect_type in ("grayscale", "sepia"):
        return _param_value(effect_type, params, "amount") / 100
    if effect_type == "hue":
        return _param_value(effect_type, params, "angle")
    if effect_type == "fade":
        return _param_value(effect_type, params, "opacity") / 100
    if effect_type not in EFFECT_CONFIGS:
        raise UnknownEffectTypeError(effect_type)
    return None


def effect_value_to_ffmpeg(effect_type: EffectType, params: Mapping[str, float]) -> float:
    """Map internal parameters to the value of the export filter stage."""
    if effect_type == "brightness":
        return _param_value(effect_type, params, "value") / 100
    if effect_type in ("contrast", "saturation"):
        return 1 + _param_value(effect_type, params, "value") / 100
    if effect_type == "blur":
        return _param_value(effect_type, params, "radius") / 2
    if effect_type == "sharpen":
        return _param_value(effect_type, params, "amount") / 100 * 1.5
    if effect_type in ("grayscale", "sepia"):
        return _param_value(effect_type, params, "amount") / 100
    if effect_type == "vignette":
        return _param_value(effect_type, params, "intensity") / 100 * math.pi / 2
    if effect_type == "hue":
        return _param_value(effect_type, params, "angle")
    if effect_type == "temperature":
        return _param_value(effect_type, params, "value") / 100 * 0.3
    if effect_type in ("shadows", "highlights"):
        return _param_value(effect_type, params, "value") / 100 * 0.2
    if effect_type == "fade":
        return _param_value(effect_type, params, "opacity") / 100
    raise UnknownEffectTypeError(effect_type)


# =============================================================================
# Preview (CSS)
# =============================================================================


def css_filter_function(effect: ClipEffect) -> str | None:
    """Render one effect as a CSS filter function, or None when it is a no-op."""
    value = effect_value_to_css(effect.type, effect.params)
    if value is None or math.isclose(value, CSS_NEUTRAL_VALUES[effect.type], abs_tol=1e-9):
        return None

    css_name = EFFECT_CONFIGS[effect.type].css_filter
    if effect.type == "blur":
        return f"{css_name}({format_number(value)}px)"
    if effect.type in ("grayscale", "sepia"):
        return f"{css_name}({format_number(value * 100)}%)"
    if effect.type == "hue":
        return f"{css_name}({format_number(value)}deg)"
    return f"{css_name}({format_number(value)})"


def _active(effects: Iterable[ClipEffect]) -> list[ClipEffect]:
    """Enabled effects in application order."""
    return sorted((e for e in effects if e.enabled), key=lambda e: e.order)


def generate_css_filter(effects: Iterable[ClipEffect]) -> str:
    """Space-separated CSS filter list for the preview element."""
    functions = [css_filter_function(effect) for effect in _active(effects)]
    return " ".join(f for f in functions if f)


def get_vignette_overlay_css(effects: Iterable[ClipEffect]) -> str | None:
    """Radial-gradient background emulating the vignette in the preview."""
    vignette = next((e for e in _active(effects) if e.type == "vignette"), None)
    if vignette is None:
        return None

    intensity = _param_value("vignette", vignette.params, "intensity") / 100
    if intensity <= 0:
        return None
    radius = _param_value("vignette", vignette.params, "radius") / 100
    inner = max(0.1, radius - intensity * 0.3)
    outer = min(1.0, radius + 0.2)

    return (
        "radial-gradient(ellipse at center, "
        f"transparent {format_number(inner * 100)}%, "
        f"rgba(0,0,0,{format_number(intensity * 0.8)}) {format_number(outer * 100)}%)"
    )


# =============================================================================
# Export (FFmpeg)
# =============================================================================


def _sepia_mixer(amount: float) -> FilterExpr:
    """colorchannelmixer blending the identity matrix toward sepia by ``amount``."""
    expr = FilterExpr("colorchannelmixer")
    for row, out in enumerate("rgb"):
        for col, src in enumerate("rgb"):
            identity = 1.0 if row == col else 0.0
            coefficient = identity * (1 - amount) + SEPIA_MATRIX[row][col] * amount
            expr = expr.arg(f"{out}{src}", round(coefficient, 4))
    return expr


def _discrete_stage(effect: ClipEffect) -> FilterExpr | None:
    """Compile a non-eq effect; None when its value is neutral."""
    value = effect_value_to_ffmpeg(effect.type, effect.params)
    if math.isclose(value, FFMPEG_NEUTRAL_VALUES[effect.type], abs_tol=1e-9):
        return None

    if effect.type == "blur":
        return FilterExpr("gblur").arg("sigma", value)
    if effect.type == "sharpen":
        return FilterExpr("unsharp").arg(None, 5).arg(None, 5).arg(None, round(value, 4))
    if effect.type == "grayscale":
        return FilterExpr("hue").arg("s", round(1 - value, 4))
    if effect.type == "sepia":
        return _sepia_mixer(value)
    if effect.type == "vignette":
        return FilterExpr("vignette").arg("angle", round(value, 4))
    if effect.type == "hue":
        return FilterExpr("hue").arg("h", value)
    if effect.type == "temperature":
        return FilterExpr("colorbalance").arg("rm", round(value, 4)).arg("bm", round(-value, 4))
    if effect.type in ("shadows", "highlights"):
        anchor = 0.25 if effect.type == "shadows" else 0.75
        point = f"{format_number(anchor)}/{format_number(round(anchor + value, 4))}"
        return FilterExpr("curves").arg("all", Expr(f"0/0 {point} 1/1"))
    if effect.type == "fade":
        return FilterExpr("colorchannelmixer").arg("aa", value)
    return None


def build_effect_filters(effects: Iterable[ClipEffect]) -> list[FilterExpr]:
    """Compile a clip's effects to filter expressions.

    Enabled effects are applied in ascending ``order``. Brightness, contrast
    and saturation are merged into a single ``eq`` stage placed first; a
    later effect of the same kind replaces an earlier one. Every other effect
    becomes its own stage in order. Neutral stages are omitted.
    """
    active = _active(effects)

    eq_values: dict[str, float] = {}
    stages: list[FilterExpr] = []
    for effect in active:
        if effect.type in EQ_EFFECTS:
            eq_values[effect.type] = effect_value_to_ffmpeg(effect.type, effect.params)
            continue
        stage = _discrete_stage(effect)
        if stage is not None:
            stages.append(stage)

    eq = FilterExpr("eq")
    for key in EQ_EFFECTS:
        if key not in eq_values:
            continue
        if not math.isclose(eq_values[key], FFMPEG_NEUTRAL_VALUES[key], abs_tol=1e-9):
            eq = eq.arg(key, round(eq_values[key], 4))
    if eq.args:
        stages.insert(0, eq)

    return stages


def generate_ffmpeg_filters(effects: Iterable[ClipEffect]) -> list[str]:
    """Ordered FFmpeg filter stages for a clip's effects."""
    filters = [stage.render() for stage in build_effect_filters(effects)]
    logger.debug(f"[EFFECTS] Compiled {len(filters)} stages: {filters}")
    return filters


def generate_ffmpeg_filter_chain(effects: Iterable[ClipEffect]) -> str:
    return ",".join(generate_ffmpeg_filters(effects))


# =============================================================================
# Effect records
# =============================================================================


def generate_effect_id() -> str:
    return f"effect-{int(time.time() * 1000)}-{uuid4().hex[:9]}"


def create_effect(
    clip_id: str,
    effect_type: EffectType,
    order: int = 0,
    params: Mapping[str, float] | None = None,
) -> ClipEffect:
    """Create an enabled effect with default parameters, overridden by ``params``."""
    merged = {**default_effect_params(effect_type), **clamp_effect_params(effect_type, params or {})}
    return ClipEffect(
        id=generate_effect_id(),
        clip_id=clip_id,
        type=effect_type,
        params=merged,
        enabled=True,
        order=order,
    )


def reset_effect_params(effect: ClipEffect) -> ClipEffect:
    return effect.model_copy(update={"params": default_effect_params(effect.type)})


def is_effect_modified(effect: ClipEffect) -> bool:
    """Whether any parameter differs from its default."""
    return any(
        _param_value(effect.type, effect.params, param.key) != param.default
        for param in get_effect_config(effect.type).params
    )


def calculate_effect_intensity(effects: Iterable[ClipEffect]) -> float:
    """Mean normalized deviation from defaults over enabled effect parameters (0-1)."""
    total = 0.0
    count = 0
    for effect in effects:
        if not effect.enabled:
            continue
        for param in get_effect_config(effect.type).params:
            value = _param_value(effect.type, effect.params, param.key)
            half_range = (param.max - param.min) / 2
            total += min(1.0, abs(value - param.default) / half_range)
            count += 1
    return total / count if count else 0.0


# =============================================================================
# Presets
# =============================================================================


def _preset_effect(effect_type: EffectType, **params: float) -> EffectDefinition:
    return EffectDefinition(type=effect_type, params=params)


EFFECT_PRESETS: list[EffectPreset] = [
    EffectPreset(
        id="cinematic",
        name="Cinematic",
        description="Film-like contrast with cool tones",
        effects=[
            _preset_effect("contrast", value=20),
            _preset_effect("saturation", value=-10),
            _preset_effect("temperature", value=-10),
            _preset_effect("vignette", intensity=40, radius=60),
        ],
        preview="linear-gradient(135deg, #1a2a3a, #4a5a6a)",
    ),
    EffectPreset(
        id="vintage",
        name="Vintage",
        description="Warm faded film look",
        effects=[
            _preset_effect("sepia", amount=40),
            _preset_effect("saturation", value=-20),
            _preset_effect("temperature", value=20),
            _preset_effect("vignette", intensity=50, radius=50),
        ],
        preview="linear-gradient(135deg, #8b6f47, #d4a574)",
    ),
    EffectPreset(
        id="black-white",
        name="Black & White",
        description="Classic monochrome",
        effects=[
            _preset_effect("grayscale", amount=100),
            _preset_effect("contrast", value=15),
        ],
        preview="linear-gradient(135deg, #000000, #ffffff)",
    ),
    EffectPreset(
        id="vivid",
        name="Vivid",
        description="Punchy saturated colors",
        effects=[
            _preset_effect("saturation", value=40),
            _preset_effect("contrast", value=15),
            _preset_effect("brightness", value=5),
        ],
        preview="linear-gradient(135deg, #ff0080, #00d4ff)",
    ),
    EffectPreset(
        id="dreamy",
        name="Dreamy",
        description="Soft glow with lifted highlights",
        effects=[
            _preset_effect("blur", radius=1.5),
            _preset_effect("brightness", value=10),
            _preset_effect("saturation", value=-15),
            _preset_effect("highlights", value=20),
        ],
        preview="linear-gradient(135deg, #f8c8dc, #c8d8f8)",
    ),
    EffectPreset(
        id="noir",
        name="Noir",
        description="High-contrast monochrome with deep shadows",
        effects=[
            _preset_effect("grayscale", amount=100),
            _preset_effect("contrast", value=40),
            _preset_effect("shadows", value=-20),
            _preset_effect("vignette", intensity=60, radius=40),
        ],
        preview="linear-gradient(135deg, #000000, #333333)",
    ),
]


def get_effect_preset(preset_id: str) -> EffectPreset:
    for preset in EFFECT_PRESETS:
        if preset.id == preset_id:
            return preset
    raise UnknownPresetError(preset_id)


def apply_effect_preset(
    clip_id: str,
    preset: EffectPreset | str,
    start_order: int = 0,
) -> list[ClipEffect]:
    """Create the preset's effects with consecutive orders from ``start_order``."""
    if isinstance(preset, str):
        preset = get_effect_preset(preset)
    return [
        create_effect(clip_id, definition.type, order=start_order + i, params=definition.params)
        for i, definition in enumerate(preset.effects)
    ]
