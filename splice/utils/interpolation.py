"""Easing curves and value interpolation for overlay animations.

The four named curves are the ones an overlay animation can request
(``linear``, ``ease-in``, ``ease-out``, ``ease-in-out``). They are all
quadratic, so preview and export agree on the shape of a fade or slide.

Usage:
    from splice.utils.interpolation import interpolate, get_easing_function

    # Opacity halfway through a 1 s fade starting at t=2
    value = interpolate(2.5, [2.0, 3.0], [0.0, 1.0])

    # With easing
    value = interpolate(2.5, [2.0, 3.0], [0.0, 1.0], easing=get_easing_function("ease-out"))
"""

from enum import Enum
from typing import Callable


# =============================================================================
# Easing Functions
# =============================================================================


def linear(t: float) -> float:
    """Linear easing (no easing)."""
    return t


def ease_in(t: float) -> float:
    """Ease in (quadratic)."""
    return t * t


def ease_out(t: float) -> float:
    """Ease out (quadratic)."""
    return 1 - (1 - t) * (1 - t)


def ease_in_out(t: float) -> float:
    """Ease in-out (quadratic, symmetric around 0.5)."""
    if t < 0.5:
        return 2 * t * t
    else:
        return 1 - (-2 * t + 2) ** 2 / 2


# Easing name -> function lookup for overlay animation records
EASING_FUNCTIONS: dict[str, Callable[[float], float]] = {
    "linear": linear,
    "ease-in": ease_in,
    "ease-out": ease_out,
    "ease-in-out": ease_in_out,
}


def get_easing_function(name: str | None) -> Callable[[float], float]:
    """Get an easing function by name.

    Unknown or missing names fall back to linear so a bad record degrades
    to an un-eased animation instead of failing the render.
    """
    if name is None:
        return linear
    return EASING_FUNCTIONS.get(name, linear)


# =============================================================================
# Core Interpolation
# =============================================================================


class ExtrapolateType(Enum):
    """How to handle values outside the input range."""

    CLAMP = "clamp"
    EXTEND = "extend"


def interpolate(
    value: float,
    input_range: list[float],
    output_range: list[float],
    *,
    easing: Callable[[float], float] = linear,
    extrapolate: ExtrapolateType = ExtrapolateType.CLAMP,
) -> float:
    """Map ``value`` from a piecewise-linear input range onto an output range.

    Args:
        value: Current time or progress value
        input_range: Strictly increasing breakpoints [a, b, ...]
        output_range: Output values matching input_range length
        easing: Easing applied within each segment
        extrapolate: Whether values outside the range clamp or extend

    Returns:
        Interpolated output value

    Raises:
        ValueError: If the ranges are mismatched, too short, or not increasing
    """
    if len(input_range) != len(output_range):
        raise ValueError("input_range and output_range must have the same length")
    if len(input_range) < 2:
        raise ValueError("input_range must have at least 2 values")
    for i in range(1, len(input_range)):
        if input_range[i] <= input_range[i - 1]:
            raise ValueError("input_range must be monotonically increasing")

    if extrapolate == ExtrapolateType.CLAMP:
        if value <= input_range[0]:
            return output_range[0]
        if value >= input_range[-1]:
            return output_range[-1]

    # Find the segment; EXTEND reuses the first/last segment outside the range
    segment_idx = len(input_range) - 2
    for i in range(1, len(input_range)):
        if value <= input_range[i]:
            segment_idx = i - 1
            break

    seg_start = input_range[segment_idx]
    seg_end = input_range[segment_idx + 1]
    t = (value - seg_start) / (seg_end - seg_start)

    out_start = output_range[segment_idx]
    out_end = output_range[segment_idx + 1]
    return out_start + (out_end - out_start) * easing(t)
