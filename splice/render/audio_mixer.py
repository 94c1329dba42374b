"""
Audio mixing: per-clip volume/fade/pan chains and track-level mixing.

This module handles:
- Per-clip filter chains (volume, fade in/out, stereo pan)
- Effective track volume under master mute, track mute and solo
- The multi-track amix graph handed to the render stage
- Volume display helpers (dB, percent)
"""

import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from splice.config import get_settings
from splice.render.filters import FilterExpr, FilterNode
from splice.schemas.audio import AudioConfig, AudioMixerState, AudioMixerTrack
from splice.schemas.timeline import TimelineClip, TimelineTrack
from splice.timeline.geometry import clamp

logger = logging.getLogger(__name__)

MIN_VOLUME = 0.0
MAX_VOLUME = 2.0
TERMINAL_AUDIO_LABEL = "aout"


# =============================================================================
# Levels
# =============================================================================


def clamp_volume(volume: float) -> float:
    return clamp(volume, MIN_VOLUME, MAX_VOLUME)


def clamp_pan(pan: float) -> float:
    return clamp(pan, -1.0, 1.0)


def volume_to_db(volume: float) -> float:
    """Linear gain to decibels; silence is -inf."""
    if volume <= 0:
        return -math.inf
    return 20 * math.log10(volume)


def format_volume_db(volume: float) -> str:
    db = volume_to_db(volume)
    if db == -math.inf:
        return "-∞ dB"
    if db > 0:
        return f"+{db:.1f} dB"
    return f"{db:.1f} dB"


def format_volume_percent(volume: float) -> str:
    return f"{round(volume * 100)}%"


def pan_to_gains(pan: float) -> tuple[float, float]:
    """Convert pan (-1 left .. 1 right) to (left, right) channel gains."""
    left = 1.0 if pan <= 0 else 1.0 - pan
    right = 1.0 if pan >= 0 else 1.0 + pan
    return left, right


# =============================================================================
# Clip chains
# =============================================================================


def create_default_audio_config(clip_id: str) -> AudioConfig:
    return AudioConfig(clip_id=clip_id, volume=1.0, fade_in=0.0, fade_out=0.0, muted=False, pan=0.0)


def _pan_expr(pan: float) -> FilterExpr:
    left, right = pan_to_gains(pan)
    return FilterExpr("pan").arg(None, f"stereo|c0={left:g}*c0|c1={right:g}*c1")


def build_clip_audio_exprs(config: AudioConfig, clip_duration: float) -> list[FilterExpr]:
    if config.muted:
        return [FilterExpr("volume").arg(None, 0)]

    exprs: list[FilterExpr] = []
    if config.volume != 1:
        exprs.append(FilterExpr("volume").arg(None, config.volume))
    if config.fade_in > 0:
        exprs.append(FilterExpr("afade").arg("t", "in").arg("st", 0).arg("d", config.fade_in))
    if config.fade_out > 0:
        fade_start = max(0.0, clip_duration - config.fade_out)
        exprs.append(
            FilterExpr("afade").arg("t", "out").arg("st", fade_start).arg("d", config.fade_out)
        )
    if config.pan != 0:
        exprs.append(_pan_expr(config.pan))
    return exprs


def build_clip_audio_filters(config: AudioConfig, clip_duration: float) -> list[str]:
    """Compile a clip's audio settings to filter stages.

    Identity settings emit nothing: no volume stage at unity gain, no fades of
    zero length, no pan stage when centred. A muted clip compiles to a single
    ``volume=0`` stage.
    """
    return [expr.render() for expr in build_clip_audio_exprs(config, clip_duration)]


def validate_audio_config(
    config: AudioConfig | Mapping[str, Any],
    clip_duration: float | None = None,
) -> list[str]:
    """Check audio settings (or a partial update) and return every problem found."""
    data = config.model_dump() if isinstance(config, AudioConfig) else dict(config)
    errors: list[str] = []

    volume = data.get("volume")
    if volume is not None and not MIN_VOLUME <= volume <= MAX_VOLUME:
        errors.append(f"Volume must be between {MIN_VOLUME:g} and {MAX_VOLUME:g}")

    fade_in = data.get("fade_in")
    if fade_in is not None and fade_in < 0:
        errors.append("Fade in cannot be negative")

    fade_out = data.get("fade_out")
    if fade_out is not None and fade_out < 0:
        errors.append("Fade out cannot be negative")

    pan = data.get("pan")
    if pan is not None and not -1 <= pan <= 1:
        errors.append("Pan must be between -1 and 1")

    if clip_duration is not None and (fade_in or 0) + (fade_out or 0) > clip_duration:
        errors.append("Fade in and fade out together cannot exceed the clip duration")

    return errors


# =============================================================================
# Mixer state
# =============================================================================


def with_solo_state(state: AudioMixerState) -> AudioMixerState:
    """Recompute the derived ``has_solo`` flag."""
    return state.model_copy(update={"has_solo": any(t.solo for t in state.tracks)})


def get_effective_volume(track: AudioMixerTrack, state: AudioMixerState) -> float:
    """Resolve a track's audible volume.

    Precedence, strictly in this order:
      1. master mute silences everything
      2. a muted track is silent
      3. while any track is soloed, every non-solo track is silent
      4. otherwise track volume x master volume
    """
    if state.master_mute:
        return 0.0
    if track.muted:
        return 0.0
    if any(t.solo for t in state.tracks) and not track.solo:
        return 0.0
    return track.volume * state.master_volume


def get_effective_volumes(state: AudioMixerState) -> dict[str, float]:
    return {track.track_id: get_effective_volume(track, state) for track in state.tracks}


# =============================================================================
# Mix graph
# =============================================================================


@dataclass
class AudioMixGraph:
    """Compiled audio graph: input sources, filter stages and the output label."""

    inputs: list[str] = field(default_factory=list)  # source URL per FFmpeg input
    filters: list[str] = field(default_factory=list)
    output_label: str = TERMINAL_AUDIO_LABEL


class AudioMixer:
    """
    Builds the FFmpeg audio graph for a set of tracks.

    Supports:
    - Per-clip trim, volume, fades and pan
    - Placement on the timeline with adelay
    - Track volume from the mixer (mute/solo/master aware)
    - Final amix of all audible tracks
    """

    def __init__(self, sample_rate: int | None = None):
        self.sample_rate = sample_rate or get_settings().render_audio_sample_rate

    def build_mix_graph(
        self,
        tracks: Sequence[TimelineTrack],
        configs: Mapping[str, AudioConfig] | None = None,
        mixer: AudioMixerState | None = None,
        input_offset: int = 0,
    ) -> AudioMixGraph:
        """
        Build the mix graph for ``tracks``.

        Args:
            tracks: Tracks whose clips carry audio
            configs: Audio settings by clip id (defaults when missing)
            mixer: Mixer state; tracks without an entry play at unity gain
            input_offset: Index of the first FFmpeg input this graph may use

        Returns:
            AudioMixGraph whose output is labelled ``aout``
        """
        configs = configs or {}
        mixer = mixer or AudioMixerState()
        graph = AudioMixGraph()
        track_outputs: list[str] = []

        for idx, track in enumerate(tracks):
            if not track.clips:
                continue
            gain, pan = self._track_levels(track, mixer)
            if gain == 0:
                logger.debug(f"[AUDIO MIX] Track {track.id} is silent, skipping")
                continue
            track_outputs.append(
                self._build_track_filter(track, f"track{idx}", gain, pan, configs, graph, input_offset)
            )

        logger.debug(f"[AUDIO MIX] Mixing {len(track_outputs)} audible tracks")

        if not track_outputs:
            silence = FilterExpr("anullsrc").arg("r", self.sample_rate).arg("cl", "stereo")
            graph.filters.append(FilterNode(silence, outputs=(TERMINAL_AUDIO_LABEL,)).render())
        elif len(track_outputs) == 1:
            graph.filters.append(
                FilterNode(FilterExpr("anull"), (track_outputs[0],), (TERMINAL_AUDIO_LABEL,)).render()
            )
        else:
            graph.filters.append(
                FilterNode(self._amix(len(track_outputs)), tuple(track_outputs), (TERMINAL_AUDIO_LABEL,)).render()
            )

        return graph

    def _track_levels(self, track: TimelineTrack, mixer: AudioMixerState) -> tuple[float, float]:
        """Effective gain and pan for a timeline track, including its own mute flag."""
        entry = next((t for t in mixer.tracks if t.track_id == track.id), None)
        if entry is None:
            entry = AudioMixerTrack(track_id=track.id, name=track.name)
        if track.muted:
            entry = entry.model_copy(update={"muted": True})
        return get_effective_volume(entry, mixer), entry.pan

    def _amix(self, count: int) -> FilterExpr:
        return (
            FilterExpr("amix")
            .arg("inputs", count)
            .arg("duration", "longest")
            .arg("normalize", 0)
        )

    def _build_clip_filter(
        self,
        clip: TimelineClip,
        config: AudioConfig,
        input_index: int,
        output: str,
    ) -> str:
        """Trim the source window, apply the clip chain and place it on the timeline."""
        if clip.muted:
            config = config.model_copy(update={"muted": True})

        exprs = [
            FilterExpr("atrim").arg("start", clip.source_start).arg("end", clip.source_end),
            FilterExpr("asetpts").arg(None, "PTS-STARTPTS"),
            *build_clip_audio_exprs(config, clip.duration),
        ]
        if clip.start_time > 0:
            delay_samples = int(clip.start_time * self.sample_rate)
            exprs.append(FilterExpr("adelay").arg(None, f"{delay_samples}S").arg("all", 1))

        chain = ",".join(expr.render() for expr in exprs)
        return f"[{input_index}:a]{chain}[{output}]"

    def _build_track_filter(
        self,
        track: TimelineTrack,
        track_name: str,
        gain: float,
        pan: float,
        configs: Mapping[str, AudioConfig],
        graph: AudioMixGraph,
        input_offset: int,
    ) -> str:
        """Append the filters for one track and return its output label."""
        clip_outputs = []
        for i, clip in enumerate(sorted(track.clips, key=lambda c: c.start_time)):
            input_index = input_offset + len(graph.inputs)
            graph.inputs.append(clip.source_url)
            clip_output = f"{track_name}_clip{i}"
            config = configs.get(clip.id) or create_default_audio_config(clip.id)
            graph.filters.append(self._build_clip_filter(clip, config, input_index, clip_output))
            clip_outputs.append(clip_output)

        current = clip_outputs[0]
        if len(clip_outputs) > 1:
            current = f"{track_name}_combined"
            graph.filters.append(
                FilterNode(self._amix(len(clip_outputs)), tuple(clip_outputs), (current,)).render()
            )

        track_stages: list[FilterExpr] = []
        if gain != 1:
            track_stages.append(FilterExpr("volume").arg(None, gain))
        if pan != 0:
            track_stages.append(_pan_expr(pan))

        if track_stages:
            output = f"{track_name}_out"
            chain = ",".join(stage.render() for stage in track_stages)
            graph.filters.append(f"[{current}]{chain}[{output}]")
            current = output

        return current
