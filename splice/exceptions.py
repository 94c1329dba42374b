"""Custom exceptions for the splice timeline core.

Compilation and validation functions report problems as values (lists of
messages, ``None`` for "not applicable"). Exceptions are raised only at
lookup seams, where an unknown key means the caller passed something that
was never valid.
"""

from splice.constants.error_codes import get_error_spec
from splice.schemas.envelope import ErrorInfo, ErrorLocation


class SpliceError(Exception):
    """Base exception for all splice errors.

    Carries a machine-readable code so callers can map it to a response.
    """

    code: str = "INTERNAL_ERROR"
    message: str = "An unexpected error occurred"

    def __init__(
        self,
        message: str | None = None,
        *,
        code: str | None = None,
        location: ErrorLocation | None = None,
        suggested_fix: str | None = None,
    ):
        self.message = message or self.__class__.message
        if code:
            self.code = code
        self.location = location
        self.suggested_fix = suggested_fix
        super().__init__(self.message)

    def to_error_info(self) -> ErrorInfo:
        """Convert exception to ErrorInfo."""
        spec = get_error_spec(self.code)
        return ErrorInfo(
            code=self.code,
            message=self.message,
            location=self.location,
            retryable=spec.get("retryable", False),
            suggested_fix=self.suggested_fix or spec.get("suggested_fix"),
        )


# =============================================================================
# Registry lookups
# =============================================================================


class UnknownTypeError(SpliceError, KeyError):
    """Base class for unknown registry keys."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return self.message


class UnknownEffectTypeError(UnknownTypeError):
    """Effect type has no EffectConfig."""

    code = "UNKNOWN_EFFECT_TYPE"
    message = "Unknown effect type"

    def __init__(self, effect_type: str | None = None):
        message = f"Unknown effect type: {effect_type}" if effect_type else self.message
        super().__init__(message, location=ErrorLocation(field="type"))


class UnknownTransitionTypeError(UnknownTypeError):
    """Transition type has no TransitionConfig."""

    code = "UNKNOWN_TRANSITION_TYPE"
    message = "Unknown transition type"

    def __init__(self, transition_type: str | None = None):
        message = (
            f"Unknown transition type: {transition_type}" if transition_type else self.message
        )
        super().__init__(message, location=ErrorLocation(field="type"))


class UnknownPresetError(UnknownTypeError):
    """Text or effect preset does not exist."""

    code = "UNKNOWN_PRESET"
    message = "Unknown preset"

    def __init__(self, preset: str | None = None):
        message = f"Unknown preset: {preset}" if preset else self.message
        super().__init__(message, location=ErrorLocation(field="preset"))


# =============================================================================
# Timeline lookups
# =============================================================================


class ResourceNotFoundError(SpliceError):
    """Base class for lookups of timeline entities by id."""


class TrackNotFoundError(ResourceNotFoundError):
    """Track not found."""

    code = "TRACK_NOT_FOUND"
    message = "Track not found"

    def __init__(self, track_id: str | None = None):
        message = f"Track not found: {track_id}" if track_id else self.message
        location = ErrorLocation(track_id=track_id) if track_id else None
        super().__init__(message, location=location)


class ClipNotFoundError(ResourceNotFoundError):
    """Clip not found."""

    code = "CLIP_NOT_FOUND"
    message = "Clip not found"

    def __init__(self, clip_id: str | None = None, track_id: str | None = None):
        message = f"Clip not found: {clip_id}" if clip_id else self.message
        location = ErrorLocation(clip_id=clip_id, track_id=track_id) if clip_id else None
        super().__init__(message, location=location)


# =============================================================================
# Render job
# =============================================================================


class InvalidStatusTransitionError(SpliceError):
    """Render job status change not allowed by the state machine."""

    code = "INVALID_STATUS_TRANSITION"
    message = "Invalid render status transition"

    def __init__(self, current: str | None = None, requested: str | None = None):
        message = self.message
        if current and requested:
            message = f"Cannot move render job from {current} to {requested}"
        super().__init__(message, location=ErrorLocation(field="status"))
