from splice.render.audio_mixer import AudioMixer
from splice.render.compiler import RenderPlan, compile_project
from splice.render.job import RenderJob, RenderStatus
from splice.render.text_renderer import TextRenderer

__all__ = [
    "AudioMixer",
    "RenderJob",
    "RenderPlan",
    "RenderStatus",
    "TextRenderer",
    "compile_project",
]
