"""Reducers for per-clip audio settings and the track mixer.

Values are clamped on the way in (volume 0-2, pan -1..1, fades >= 0), so
dispatching an out-of-range value never produces an invalid config.
"""

from dataclasses import dataclass
from typing import Any, Callable, Union

from pydantic import BaseModel

from splice.render.audio_mixer import (
    clamp_pan,
    clamp_volume,
    create_default_audio_config,
    with_solo_state,
)
from splice.schemas.audio import AudioConfig, AudioMixerState, AudioMixerTrack, WaveformData


class AudioState(BaseModel):
    config: AudioConfig
    waveform: WaveformData | None = None
    loading: bool = False
    error: str | None = None


def create_initial_audio_state(clip_id: str) -> AudioState:
    return AudioState(config=create_default_audio_config(clip_id))


# =============================================================================
# Clip audio actions
# =============================================================================


@dataclass(frozen=True)
class SetConfig:
    config: AudioConfig


@dataclass(frozen=True)
class SetVolume:
    volume: float


@dataclass(frozen=True)
class SetFadeIn:
    fade_in: float


@dataclass(frozen=True)
class SetFadeOut:
    fade_out: float


@dataclass(frozen=True)
class ToggleMute:
    pass


@dataclass(frozen=True)
class SetPan:
    pan: float


@dataclass(frozen=True)
class SetWaveform:
    waveform: WaveformData | None


@dataclass(frozen=True)
class SetLoading:
    loading: bool


@dataclass(frozen=True)
class SetError:
    error: str | None


AudioAction = Union[
    SetConfig,
    SetVolume,
    SetFadeIn,
    SetFadeOut,
    ToggleMute,
    SetPan,
    SetWaveform,
    SetLoading,
    SetError,
]


def _with_config(state: AudioState, **updates: Any) -> AudioState:
    return state.model_copy(update={"config": state.config.model_copy(update=updates)})


_AUDIO_HANDLERS: dict[type, Callable[[AudioState, Any], AudioState]] = {
    SetConfig: lambda s, a: s.model_copy(update={"config": a.config, "loading": False, "error": None}),
    SetVolume: lambda s, a: _with_config(s, volume=clamp_volume(a.volume)),
    SetFadeIn: lambda s, a: _with_config(s, fade_in=max(0.0, a.fade_in)),
    SetFadeOut: lambda s, a: _with_config(s, fade_out=max(0.0, a.fade_out)),
    ToggleMute: lambda s, a: _with_config(s, muted=not s.config.muted),
    SetPan: lambda s, a: _with_config(s, pan=clamp_pan(a.pan)),
    SetWaveform: lambda s, a: s.model_copy(update={"waveform": a.waveform}),
    SetLoading: lambda s, a: s.model_copy(update={"loading": a.loading}),
    SetError: lambda s, a: s.model_copy(update={"error": a.error, "loading": False}),
}


def apply_audio_action(state: AudioState, action: AudioAction) -> AudioState:
    """Apply one action and return the resulting state."""
    handler = _AUDIO_HANDLERS.get(type(action))
    if handler is None:
        raise TypeError(f"Unsupported audio action: {type(action).__name__}")
    return handler(state, action)


# =============================================================================
# Mixer actions
# =============================================================================


@dataclass(frozen=True)
class SetTrackVolume:
    track_id: str
    volume: float


@dataclass(frozen=True)
class ToggleTrackMute:
    track_id: str


@dataclass(frozen=True)
class ToggleTrackSolo:
    track_id: str


@dataclass(frozen=True)
class SetMasterVolume:
    volume: float


@dataclass(frozen=True)
class ToggleMasterMute:
    pass


MixerAction = Union[
    SetTrackVolume,
    ToggleTrackMute,
    ToggleTrackSolo,
    SetMasterVolume,
    ToggleMasterMute,
]


def _map_track(
    state: AudioMixerState,
    track_id: str,
    update: Callable[[AudioMixerTrack], dict[str, Any]],
) -> AudioMixerState:
    tracks = [t.model_copy(update=update(t)) if t.track_id == track_id else t for t in state.tracks]
    return state.model_copy(update={"tracks": tracks})


def _toggle_track_solo(state: AudioMixerState, action: ToggleTrackSolo) -> AudioMixerState:
    return with_solo_state(_map_track(state, action.track_id, lambda t: {"solo": not t.solo}))


_MIXER_HANDLERS: dict[type, Callable[[AudioMixerState, Any], AudioMixerState]] = {
    SetTrackVolume: lambda s, a: _map_track(s, a.track_id, lambda t: {"volume": clamp_volume(a.volume)}),
    ToggleTrackMute: lambda s, a: _map_track(s, a.track_id, lambda t: {"muted": not t.muted}),
    ToggleTrackSolo: _toggle_track_solo,
    SetMasterVolume: lambda s, a: s.model_copy(update={"master_volume": clamp_volume(a.volume)}),
    ToggleMasterMute: lambda s, a: s.model_copy(update={"master_mute": not s.master_mute}),
}


def apply_mixer_action(state: AudioMixerState, action: MixerAction) -> AudioMixerState:
    """Apply one mixer action and return the resulting state."""
    handler = _MIXER_HANDLERS.get(type(action))
    if handler is None:
        raise TypeError(f"Unsupported mixer action: {type(action).__name__}")
    return handler(state, action)
