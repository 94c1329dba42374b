"""
Project compiler.

Turns a Project into a RenderPlan: everything the render collaborator needs
to build its FFmpeg invocation. Compilation is pure; the project is not
modified and nothing is executed.

Input order is fixed: video clips first (track order, then start time),
followed by audio clips, so input indices in the filters are stable.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from splice.render.audio_mixer import (
    AudioMixer,
    AudioMixGraph,
    build_clip_audio_filters,
    create_default_audio_config,
)
from splice.render.effects import generate_ffmpeg_filters
from splice.render.filters import FilterExpr
from splice.render.text_renderer import TextRenderer
from splice.render.transform import build_transform_filters
from splice.render.transitions import TERMINAL_VIDEO_LABEL, TransitionGraph, build_transition_chain
from splice.schemas.project import Project
from splice.schemas.timeline import TimelineClip, TimelineTrack
from splice.timeline.clips import calculate_timeline_duration

logger = logging.getLogger(__name__)


@dataclass
class RenderPlan:
    """Compiled project, ready for the render stage."""

    project_id: str
    width: int
    height: int
    fps: int
    sample_rate: int
    background_color: str
    duration: float  # seconds
    inputs: list[str] = field(default_factory=list)  # source URL per FFmpeg input
    video_chains: dict[str, list[str]] = field(default_factory=dict)  # by clip id
    video_graphs: dict[str, TransitionGraph] = field(default_factory=dict)  # by track id
    audio_chains: dict[str, list[str]] = field(default_factory=dict)  # by clip id
    audio_graph: AudioMixGraph = field(default_factory=AudioMixGraph)
    text_filters: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "project_id": self.project_id,
            "width": self.width,
            "height": self.height,
            "fps": self.fps,
            "sample_rate": self.sample_rate,
            "background_color": self.background_color,
            "duration": self.duration,
            "inputs": self.inputs,
            "video_chains": self.video_chains,
            "video_graphs": {
                track_id: {
                    "filters": graph.filters,
                    "output_label": graph.output_label,
                    "offsets": graph.offsets,
                    "duration": graph.duration,
                }
                for track_id, graph in self.video_graphs.items()
            },
            "audio_chains": self.audio_chains,
            "audio_graph": {
                "inputs": self.audio_graph.inputs,
                "filters": self.audio_graph.filters,
                "output_label": self.audio_graph.output_label,
            },
            "text_filters": self.text_filters,
            "warnings": self.warnings,
        }


def _sorted_clips(track: TimelineTrack) -> list[TimelineClip]:
    return sorted(track.clips, key=lambda c: c.start_time)


def build_clip_video_filters(project: Project, clip: TimelineClip) -> list[str]:
    """Trim to the source window, then effects (by order), then transform."""
    filters = [
        FilterExpr("trim").arg("start", clip.source_start).arg("end", clip.source_end).render(),
        FilterExpr("setpts").arg(None, "PTS-STARTPTS").render(),
    ]
    filters.extend(generate_ffmpeg_filters(project.effects.get(clip.id, [])))
    transform = project.transforms.get(clip.id)
    if transform is not None:
        filters.extend(build_transform_filters(transform))
    return filters


def _compile_video_track(
    project: Project,
    track: TimelineTrack,
    track_index: int,
    plan: RenderPlan,
) -> None:
    clips = _sorted_clips(track)
    first_input = len(plan.inputs)
    labels = [f"clip{first_input + i}" for i in range(len(clips))]

    # First video track feeds the terminal label; later tracks get their own
    if track_index == 0:
        prefix, output = "v", TERMINAL_VIDEO_LABEL
    else:
        prefix, output = f"t{track_index}v", f"t{track_index}out"

    clip_ids = {clip.id for clip in clips}
    transitions = [
        t for t in project.transitions if t.from_clip_id in clip_ids or t.to_clip_id in clip_ids
    ]
    chain_graph = build_transition_chain(
        clips, transitions, labels, label_prefix=prefix, output_label=output
    )
    if chain_graph is None:
        plan.warnings.append(f"Track {track.id}: transitions do not form a valid chain")
        return

    graph = TransitionGraph(
        output_label=chain_graph.output_label,
        offsets=chain_graph.offsets,
        duration=chain_graph.duration,
    )
    for clip, label in zip(clips, labels):
        input_index = len(plan.inputs)
        plan.inputs.append(clip.source_url)
        chain = build_clip_video_filters(project, clip)
        plan.video_chains[clip.id] = chain
        graph.filters.append(f"[{input_index}:v]{','.join(chain)}[{label}]")
    graph.filters.extend(chain_graph.filters)
    plan.video_graphs[track.id] = graph


def compile_project(project: Project) -> RenderPlan:
    """
    Compile a project for export.

    Args:
        project: The project to compile

    Returns:
        RenderPlan with per-clip video and audio chains, a transition graph
        per visible video track, the audio mix graph and text filters
    """
    settings = project.settings
    plan = RenderPlan(
        project_id=project.id,
        width=settings.resolution.width,
        height=settings.resolution.height,
        fps=settings.frame_rate,
        sample_rate=settings.audio_sample_rate,
        background_color=settings.background_color,
        duration=calculate_timeline_duration(project.tracks),
    )

    video_tracks = [t for t in project.tracks if t.type == "video" and t.visible and t.clips]
    for index, track in enumerate(video_tracks):
        _compile_video_track(project, track, index, plan)

    audio_tracks = [t for t in project.tracks if t.type == "audio" and t.clips]
    for track in audio_tracks:
        for clip in track.clips:
            config = project.audio.get(clip.id) or create_default_audio_config(clip.id)
            plan.audio_chains[clip.id] = build_clip_audio_filters(config, clip.duration)

    mixer = AudioMixer(sample_rate=settings.audio_sample_rate)
    plan.audio_graph = mixer.build_mix_graph(
        audio_tracks, project.audio, project.mixer, input_offset=len(plan.inputs)
    )
    plan.inputs.extend(plan.audio_graph.inputs)

    renderer = TextRenderer(settings.resolution.width, settings.resolution.height)
    plan.text_filters = renderer.build_filters(project.text_overlays)

    for warning in plan.warnings:
        logger.warning(f"[COMPILE] {warning}")
    logger.info(
        f"[COMPILE] Project {project.id}: {len(plan.inputs)} inputs, "
        f"{len(plan.video_graphs)} video tracks, {len(audio_tracks)} audio tracks, "
        f"{len(plan.text_filters)} text overlays, duration={plan.duration}s"
    )
    return plan
