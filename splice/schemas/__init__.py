from splice.schemas.audio import AudioConfig, AudioMixerState, AudioMixerTrack, WaveformData
from splice.schemas.effects import ClipEffect, EffectConfig, EffectPreset
from splice.schemas.project import Project, ProjectSettings
from splice.schemas.text import TextOverlay, TextStyle
from splice.schemas.timeline import TimelineClip, TimelineState, TimelineTrack
from splice.schemas.transform import Transform
from splice.schemas.transition import Transition, TransitionConfig

__all__ = [
    "TimelineClip",
    "TimelineTrack",
    "TimelineState",
    "TextOverlay",
    "TextStyle",
    "ClipEffect",
    "EffectConfig",
    "EffectPreset",
    "Transition",
    "TransitionConfig",
    "AudioConfig",
    "AudioMixerState",
    "AudioMixerTrack",
    "WaveformData",
    "Transform",
    "Project",
    "ProjectSettings",
]
