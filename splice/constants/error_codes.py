"""Error codes dictionary for the timeline core.

Single source of truth for error codes raised by the lookup seams
(effect/transition/preset registries, render job status) and for whether a
caller can recover by retrying with corrected input.
"""

from typing import TypedDict


class ErrorCodeSpec(TypedDict, total=False):
    """Specification for an error code."""

    retryable: bool
    suggested_fix: str


ERROR_CODES: dict[str, ErrorCodeSpec] = {
    # ==========================================================================
    # Registry lookups
    # ==========================================================================
    "UNKNOWN_EFFECT_TYPE": {
        "retryable": False,
        "suggested_fix": "Use one of the types returned by get_available_effects()",
    },
    "UNKNOWN_TRANSITION_TYPE": {
        "retryable": False,
        "suggested_fix": "Use one of the keys of TRANSITION_CONFIGS",
    },
    "UNKNOWN_PRESET": {
        "retryable": False,
        "suggested_fix": "Use a key of TEXT_PRESETS or the id of an entry in EFFECT_PRESETS",
    },
    # ==========================================================================
    # Timeline lookups
    # ==========================================================================
    "TRACK_NOT_FOUND": {
        "retryable": True,
        "suggested_fix": "Refresh the track list and retry with a current track id",
    },
    "CLIP_NOT_FOUND": {
        "retryable": True,
        "suggested_fix": "Refresh the timeline and retry with a current clip id",
    },
    # ==========================================================================
    # Render job
    # ==========================================================================
    "INVALID_STATUS_TRANSITION": {
        "retryable": False,
        "suggested_fix": "Render jobs move draft -> processing -> completed | failed",
    },
    "INTERNAL_ERROR": {
        "retryable": False,
    },
}


def get_error_spec(code: str) -> ErrorCodeSpec:
    """Get the specification for an error code.

    Unknown codes fall back to INTERNAL_ERROR.
    """
    return ERROR_CODES.get(code, ERROR_CODES["INTERNAL_ERROR"])
