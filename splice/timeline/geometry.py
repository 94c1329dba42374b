"""Time <-> pixel conversion and time formatting for the timeline view."""

import math

DEFAULT_PIXELS_PER_SECOND = 50.0


def time_to_pixels(
    time: float,
    zoom: float,
    base_pixels_per_second: float = DEFAULT_PIXELS_PER_SECOND,
) -> float:
    """Convert a timeline time (s) to a horizontal offset (px)."""
    return time * base_pixels_per_second * zoom


def pixels_to_time(
    pixels: float,
    zoom: float,
    base_pixels_per_second: float = DEFAULT_PIXELS_PER_SECOND,
) -> float:
    """Convert a horizontal offset (px) back to a timeline time (s)."""
    return pixels / (base_pixels_per_second * zoom)


def get_pixels_per_second(
    zoom: float,
    base_pixels_per_second: float = DEFAULT_PIXELS_PER_SECOND,
) -> float:
    return base_pixels_per_second * zoom


def clamp(value: float, min_value: float, max_value: float) -> float:
    return max(min_value, min(max_value, value))


def format_time(seconds: float, include_hours: bool = False) -> str:
    """Format seconds as MM:SS, or HH:MM:SS when hours are present or requested."""
    if math.isnan(seconds) or math.isinf(seconds):
        return "00:00:00" if include_hours else "00:00"

    sign = "-" if seconds < 0 else ""
    total = abs(seconds)
    hours = int(total // 3600)
    minutes = int((total % 3600) // 60)
    secs = int(total % 60)

    if include_hours or hours > 0:
        return f"{sign}{hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{sign}{minutes:02d}:{secs:02d}"


def format_time_precise(seconds: float) -> str:
    """Format seconds as MM:SS.mmm."""
    if math.isnan(seconds) or math.isinf(seconds):
        return "00:00.000"

    sign = "-" if seconds < 0 else ""
    total = abs(seconds)
    minutes = int(total // 60)
    secs = int(total % 60)
    ms = round((total % 1) * 1000)
    # 59.9996 rounds up to a full second
    if ms == 1000:
        ms = 0
        secs += 1
        if secs == 60:
            secs = 0
            minutes += 1

    return f"{sign}{minutes:02d}:{secs:02d}.{ms:03d}"
