"""Tests for the clip audio and mixer reducers."""

import pytest

from splice.editing.audio_actions import (
    SetConfig,
    SetError,
    SetFadeIn,
    SetFadeOut,
    SetLoading,
    SetMasterVolume,
    SetPan,
    SetTrackVolume,
    SetVolume,
    SetWaveform,
    ToggleMasterMute,
    ToggleMute,
    ToggleTrackMute,
    ToggleTrackSolo,
    apply_audio_action,
    apply_mixer_action,
    create_initial_audio_state,
)
from splice.render.audio_mixer import get_effective_volumes
from splice.render.waveform import create_empty_waveform
from splice.schemas.audio import AudioConfig, AudioMixerState, AudioMixerTrack


@pytest.fixture
def audio_state():
    return create_initial_audio_state("clip-1")


@pytest.fixture
def mixer():
    return AudioMixerState(
        tracks=[AudioMixerTrack(track_id="A"), AudioMixerTrack(track_id="B", volume=0.8)]
    )


class TestClipAudioReducer:
    def test_initial_state(self, audio_state):
        assert audio_state.config.clip_id == "clip-1"
        assert audio_state.config.volume == 1
        assert audio_state.waveform is None
        assert audio_state.loading is False

    def test_values_are_clamped(self, audio_state):
        state = apply_audio_action(audio_state, SetVolume(volume=5))
        state = apply_audio_action(state, SetPan(pan=-3))
        state = apply_audio_action(state, SetFadeIn(fade_in=-1))
        state = apply_audio_action(state, SetFadeOut(fade_out=1.5))
        assert (state.config.volume, state.config.pan) == (2, -1)
        assert (state.config.fade_in, state.config.fade_out) == (0, 1.5)

    def test_toggle_mute(self, audio_state):
        muted = apply_audio_action(audio_state, ToggleMute())
        assert muted.config.muted is True
        assert audio_state.config.muted is False

    def test_set_config_clears_loading_and_error(self, audio_state):
        loading = apply_audio_action(audio_state, SetLoading(loading=True))
        failed = apply_audio_action(loading, SetError(error="decode failed"))
        assert (failed.loading, failed.error) == (False, "decode failed")

        config = AudioConfig(clip_id="clip-1", volume=0.5)
        loaded = apply_audio_action(failed, SetConfig(config=config))
        assert loaded.config.volume == 0.5
        assert loaded.error is None

    def test_set_waveform(self, audio_state):
        waveform = create_empty_waveform(3.0, peak_count=4)
        assert apply_audio_action(audio_state, SetWaveform(waveform=waveform)).waveform == waveform

    def test_unknown_action_raises(self, audio_state):
        with pytest.raises(TypeError):
            apply_audio_action(audio_state, object())


class TestMixerReducer:
    def test_solo_flag_is_derived(self, mixer):
        soloed = apply_mixer_action(mixer, ToggleTrackSolo(track_id="A"))
        assert soloed.has_solo is True
        assert get_effective_volumes(soloed) == {"A": 1, "B": 0}

        unsoloed = apply_mixer_action(soloed, ToggleTrackSolo(track_id="A"))
        assert unsoloed.has_solo is False
        assert get_effective_volumes(unsoloed) == {"A": 1, "B": 0.8}

    def test_track_volume_clamped(self, mixer):
        assert apply_mixer_action(mixer, SetTrackVolume(track_id="B", volume=9)).tracks[1].volume == 2

    def test_track_mute(self, mixer):
        muted = apply_mixer_action(mixer, ToggleTrackMute(track_id="B"))
        assert get_effective_volumes(muted)["B"] == 0

    def test_master(self, mixer):
        halved = apply_mixer_action(mixer, SetMasterVolume(volume=0.5))
        assert get_effective_volumes(halved) == {"A": 0.5, "B": 0.4}
        silenced = apply_mixer_action(halved, ToggleMasterMute())
        assert get_effective_volumes(silenced) == {"A": 0, "B": 0}

    def test_unknown_track_is_noop(self, mixer):
        assert apply_mixer_action(mixer, ToggleTrackMute(track_id="Z")) == mixer

    def test_unknown_action_raises(self, mixer):
        with pytest.raises(TypeError):
            apply_mixer_action(mixer, object())
