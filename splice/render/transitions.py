"""Transitions between consecutive clips, compiled to FFmpeg xfade graphs.

Durations on ``Transition`` records are integer milliseconds; filter
arguments are seconds.

A chain over N clips walks consecutive pairs, keeping a running offset:

    offset_k = offset_(k-1) + duration(clip_k) - transition_k

Each stage writes a fresh label (v0, v1, ...) that only the next stage
reads; the last stage writes ``vout``.
"""

import logging
import time
from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any
from uuid import uuid4

from splice.exceptions import UnknownTransitionTypeError
from splice.render.filters import FilterExpr, FilterNode
from splice.schemas.timeline import TimelineClip
from splice.schemas.transition import Transition, TransitionConfig, TransitionType

logger = logging.getLogger(__name__)

DEFAULT_TRANSITION_DURATION = 500  # ms
MIN_TRANSITION_DURATION = 100  # ms
MAX_TRANSITION_DURATION = 5000  # ms

TERMINAL_VIDEO_LABEL = "vout"


def _config(
    type: TransitionType,
    name: str,
    description: str,
    ffmpeg_transition: str | None,
    *,
    has_direction: bool = False,
    alias_of: TransitionType | None = None,
) -> TransitionConfig:
    return TransitionConfig(
        type=type,
        name=name,
        description=description,
        default_duration=DEFAULT_TRANSITION_DURATION,
        min_duration=MIN_TRANSITION_DURATION,
        max_duration=MAX_TRANSITION_DURATION,
        has_direction=has_direction,
        ffmpeg_transition=ffmpeg_transition,
        alias_of=alias_of,
    )


TRANSITION_CONFIGS: dict[str, TransitionConfig] = {
    "fade": _config("fade", "Fade", "Fade through the frames", "fade"),
    "crossfade": _config(
        "crossfade", "Crossfade", "Blend one clip into the next", "fade", alias_of="fade"
    ),
    "dissolve": _config("dissolve", "Dissolve", "Pixel dissolve into the next clip", "dissolve"),
    "wipe": _config(
        "wipe", "Wipe", "Wipe to the next clip", "wipeleft", has_direction=True, alias_of="wipeLeft"
    ),
    "wipeLeft": _config("wipeLeft", "Wipe Left", "Wipe from right to left", "wipeleft", has_direction=True),
    "wipeRight": _config("wipeRight", "Wipe Right", "Wipe from left to right", "wiperight", has_direction=True),
    "wipeUp": _config("wipeUp", "Wipe Up", "Wipe from bottom to top", "wipeup", has_direction=True),
    "wipeDown": _config("wipeDown", "Wipe Down", "Wipe from top to bottom", "wipedown", has_direction=True),
    "slide": _config(
        "slide", "Slide", "Slide the next clip in", "slideleft", has_direction=True, alias_of="slideLeft"
    ),
    "slideLeft": _config("slideLeft", "Slide Left", "Slide in from the right", "slideleft", has_direction=True),
    "slideRight": _config("slideRight", "Slide Right", "Slide in from the left", "slideright", has_direction=True),
    "slideUp": _config("slideUp", "Slide Up", "Slide in from the bottom", "slideup", has_direction=True),
    "slideDown": _config("slideDown", "Slide Down", "Slide in from the top", "slidedown", has_direction=True),
    "zoom": _config("zoom", "Zoom", "Zoom into the next clip", "zoomin", alias_of="zoomIn"),
    "zoomIn": _config("zoomIn", "Zoom In", "Zoom into the next clip", "zoomin"),
    "zoomOut": _config("zoomOut", "Zoom Out", "Close a circle onto the next clip", "circleclose"),
    "none": TransitionConfig(
        type="none",
        name="None",
        description="Hard cut",
        default_duration=0,
        min_duration=0,
        max_duration=0,
        ffmpeg_transition=None,
    ),
}

# Direction-less family name -> its variants
TRANSITION_FAMILIES: dict[str, list[str]] = {
    "wipe": ["wipeLeft", "wipeRight", "wipeUp", "wipeDown"],
    "slide": ["slideLeft", "slideRight", "slideUp", "slideDown"],
    "zoom": ["zoomIn", "zoomOut"],
}


@dataclass(frozen=True)
class DurationValidation:
    valid: bool
    message: str | None = None
    max_duration: int = 0  # ms


@dataclass
class TransitionGraph:
    """Compiled xfade chain for one sequence of clips."""

    filters: list[str] = field(default_factory=list)
    output_label: str = TERMINAL_VIDEO_LABEL
    offsets: list[float] = field(default_factory=list)  # seconds, one per stage
    duration: float = 0.0  # seconds, length of the output stream


# =============================================================================
# Registry
# =============================================================================


def get_transition_config(transition_type: str) -> TransitionConfig:
    """Look up a transition config.

    Raises:
        UnknownTransitionTypeError: If the type has no config
    """
    config = TRANSITION_CONFIGS.get(transition_type)
    if config is None:
        raise UnknownTransitionTypeError(transition_type)
    return config


def get_basic_transitions() -> list[TransitionConfig]:
    """Configs for the transition picker: families, not their directional variants."""
    variants = {member for members in TRANSITION_FAMILIES.values() for member in members}
    return [config for key, config in TRANSITION_CONFIGS.items() if key not in variants]


def get_transition_variants(family: str) -> list[TransitionConfig]:
    return [TRANSITION_CONFIGS[key] for key in TRANSITION_FAMILIES.get(family, [])]


def generate_transition_id() -> str:
    return f"transition-{int(time.time() * 1000)}-{uuid4().hex[:9]}"


def create_transition(
    project_id: str,
    from_clip_id: str,
    to_clip_id: str,
    transition_type: TransitionType = "fade",
    duration: int | None = None,
    params: dict[str, Any] | None = None,
) -> Transition:
    config = get_transition_config(transition_type)
    return Transition(
        id=generate_transition_id(),
        project_id=project_id,
        from_clip_id=from_clip_id,
        to_clip_id=to_clip_id,
        type=transition_type,
        duration=duration if duration is not None else config.default_duration,
        params=params,
    )


def get_transition_between_clips(
    transitions: Iterable[Transition],
    from_clip_id: str,
    to_clip_id: str,
) -> Transition | None:
    for transition in transitions:
        if transition.from_clip_id == from_clip_id and transition.to_clip_id == to_clip_id:
            return transition
    return None


def has_transition_between_clips(
    transitions: Iterable[Transition],
    from_clip_id: str,
    to_clip_id: str,
) -> bool:
    return get_transition_between_clips(transitions, from_clip_id, to_clip_id) is not None


# =============================================================================
# Validation
# =============================================================================


def validate_transition_duration(
    duration: int,
    from_clip_duration: float,
    to_clip_duration: float,
    transition_type: TransitionType | None = None,
) -> DurationValidation:
    """Check a transition duration (ms) against both clips (s).

    The transition cannot be longer than the shorter clip, nor outside the
    bounds of its type. Never raises; unknown types use the common bounds.
    """
    config = TRANSITION_CONFIGS.get(transition_type) if transition_type else None
    if config is not None and config.ffmpeg_transition is None:
        return DurationValidation(valid=True, max_duration=0)

    min_duration = config.min_duration if config else MIN_TRANSITION_DURATION
    type_max = config.max_duration if config else MAX_TRANSITION_DURATION
    max_duration = min(round(min(from_clip_duration, to_clip_duration) * 1000), type_max)

    if duration < min_duration:
        return DurationValidation(
            valid=False,
            message=f"Transition duration must be at least {min_duration}ms",
            max_duration=max_duration,
        )
    if duration > max_duration:
        return DurationValidation(
            valid=False,
            message=f"Transition duration cannot exceed {max_duration}ms",
            max_duration=max_duration,
        )
    return DurationValidation(valid=True, max_duration=max_duration)


def validate_transition_chain(
    transitions: Sequence[Transition],
    clip_ids: Sequence[str] | None = None,
) -> list[str]:
    """Check that transitions form a single forward chain.

    A clip may start at most one transition and end at most one, and no
    transition may join a clip to itself. Given the clip order, every
    transition must join a clip to the clip right after it. Without it,
    each transition must start on the clip the previous one ended on.
    """
    errors: list[str] = []

    for transition in transitions:
        if transition.from_clip_id == transition.to_clip_id:
            errors.append(f"Transition {transition.id} starts and ends on clip {transition.from_clip_id}")

    outgoing = Counter(t.from_clip_id for t in transitions)
    incoming = Counter(t.to_clip_id for t in transitions)
    for clip_id, count in outgoing.items():
        if count > 1:
            errors.append(f"Clip {clip_id} has {count} outgoing transitions")
    for clip_id, count in incoming.items():
        if count > 1:
            errors.append(f"Clip {clip_id} has {count} incoming transitions")

    if clip_ids is not None:
        position = {clip_id: i for i, clip_id in enumerate(clip_ids)}
        for transition in transitions:
            from_index = position.get(transition.from_clip_id)
            to_index = position.get(transition.to_clip_id)
            if from_index is None or to_index is None:
                errors.append(f"Transition {transition.id} references a clip outside the sequence")
            elif to_index != from_index + 1:
                errors.append(f"Transition {transition.id} does not join adjacent clips")
    else:
        for previous, current in zip(transitions, transitions[1:]):
            if current.from_clip_id != previous.to_clip_id:
                errors.append(
                    f"Transition {current.id} starts on clip {current.from_clip_id}, "
                    f"expected {previous.to_clip_id}"
                )

    return errors


# =============================================================================
# Filter graph
# =============================================================================


def _pair_node(
    transition: Transition | None,
    duration: float,
    offset: float,
    inputs: tuple[str, str],
    output: str,
) -> FilterNode:
    config = TRANSITION_CONFIGS.get(transition.type) if transition else None
    if config is None or config.ffmpeg_transition is None or duration <= 0:
        expr = FilterExpr("concat").arg("n", 2).arg("v", 1).arg("a", 0)
    else:
        expr = (
            FilterExpr("xfade")
            .arg("transition", config.ffmpeg_transition)
            .arg("duration", duration)
            .arg("offset", offset)
        )
    return FilterNode(expr, inputs=inputs, outputs=(output,))


def build_xfade_filter(
    transition: Transition,
    offset: float,
    inputs: tuple[str, str],
    output: str,
) -> str:
    """Single-pair transition: ``[a][b]xfade=...[out]`` (a hard cut concatenates)."""
    return _pair_node(transition, transition.duration / 1000, offset, inputs, output).render()


def build_transition_chain(
    clips: Sequence[TimelineClip],
    transitions: Sequence[Transition],
    input_labels: Sequence[str] | None = None,
    label_prefix: str = "v",
    output_label: str = TERMINAL_VIDEO_LABEL,
) -> TransitionGraph | None:
    """Join a sequence of clips, blending where a transition joins a pair.

    Args:
        clips: Clips in playback order
        transitions: Transitions between consecutive clips
        input_labels: Stream label of each clip (default ``<i>:v``)
        label_prefix: Prefix of the intermediate labels (``v0``, ``v1``, ...)
        output_label: Label of the final stage

    Returns:
        The compiled graph, or None when there are no clips or the
        transitions do not form a valid chain
    """
    if not clips:
        return None

    errors = validate_transition_chain(transitions, [clip.id for clip in clips])
    if errors:
        logger.warning(f"[TRANSITIONS] Invalid transition chain: {errors}")
        return None

    labels = list(input_labels) if input_labels is not None else [f"{i}:v" for i in range(len(clips))]
    if len(clips) == 1:
        return TransitionGraph(output_label=labels[0], duration=clips[0].duration)

    graph = TransitionGraph()
    current_label = labels[0]
    cumulative = 0.0
    output_duration = clips[0].duration

    for i in range(1, len(clips)):
        previous_clip = clips[i - 1]
        next_clip = clips[i]
        transition = get_transition_between_clips(transitions, previous_clip.id, next_clip.id)

        transition_duration = 0.0
        if transition is not None:
            transition_duration = transition.duration / 1000
            limit = min(previous_clip.duration, next_clip.duration)
            if transition_duration > limit:
                logger.warning(
                    f"[TRANSITIONS] {transition.id} is longer than its clips, "
                    f"clamping {transition_duration}s to {limit}s"
                )
                transition_duration = limit
            if TRANSITION_CONFIGS[transition.type].ffmpeg_transition is None:
                transition_duration = 0.0

        offset = cumulative + previous_clip.duration - transition_duration
        output = output_label if i == len(clips) - 1 else f"{label_prefix}{i - 1}"
        node = _pair_node(transition, transition_duration, offset, (current_label, labels[i]), output)

        graph.filters.append(node.render())
        graph.offsets.append(offset)
        cumulative = offset
        output_duration += next_clip.duration - transition_duration
        current_label = output

    graph.output_label = current_label
    graph.duration = output_duration
    logger.debug(f"[TRANSITIONS] Built {len(graph.filters)} stages, offsets={graph.offsets}")
    return graph
