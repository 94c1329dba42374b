"""
Tests for project compilation.

Test cases:
1. Input order: video clips by track, then audio clips
2. Per-clip video chain: trim, effects, transform
3. Per-track transition graphs with distinct labels
4. Audio chains and mix graph input offsets
5. Text overlays and warnings for invalid chains
"""

import pytest

from splice.render.compiler import build_clip_video_filters, compile_project
from splice.render.effects import create_effect
from splice.render.text_renderer import create_text_overlay
from splice.schemas.audio import AudioConfig
from splice.schemas.project import Project
from splice.schemas.transform import Transform


@pytest.fixture
def project(make_clip, make_track, make_transition):
    video = make_track(
        "v1",
        [make_clip("b", 5, 4, track_id="v1"), make_clip("a", 0, 5, track_id="v1")],
    )
    overlay_track = make_track(
        "v2",
        [make_clip("c", 0, 2, track_id="v2"), make_clip("d", 2, 2, track_id="v2")],
    )
    hidden = make_track("v3", [make_clip("h", 0, 1, track_id="v3")], visible=False)
    music = make_track("m1", [make_clip("m", 0, 3, track_id="m1")], type="audio")
    return Project(
        id="project-1",
        tracks=[video, overlay_track, hidden, music],
        effects={"a": [create_effect("a", "brightness", params={"value": 20})]},
        transforms={"b": Transform(clip_id="b", flip_h=True)},
        transitions=[make_transition("a", "b", "fade", 1000)],
        audio={"m": AudioConfig(clip_id="m", volume=0.5)},
        text_overlays=[create_text_overlay("Title", "text-track", 0, "title")],
    )


class TestCompileProject:
    def test_plan_settings(self, project):
        plan = compile_project(project)
        assert (plan.width, plan.height, plan.fps, plan.sample_rate) == (1920, 1080, 30, 48000)
        assert plan.duration == 9
        assert plan.warnings == []

    def test_input_order(self, project):
        plan = compile_project(project)
        assert plan.inputs == [
            "media/a.mp4",
            "media/b.mp4",
            "media/c.mp4",
            "media/d.mp4",
            "media/m.mp4",
        ]

    def test_clip_video_chains(self, project):
        plan = compile_project(project)
        assert plan.video_chains["a"] == ["trim=start=0:end=5", "setpts=PTS-STARTPTS", "eq=brightness=0.2"]
        assert plan.video_chains["b"] == ["trim=start=0:end=4", "setpts=PTS-STARTPTS", "hflip"]
        assert "h" not in plan.video_chains

    def test_first_track_graph(self, project):
        graph = compile_project(project).video_graphs["v1"]
        assert graph.filters == [
            "[0:v]trim=start=0:end=5,setpts=PTS-STARTPTS,eq=brightness=0.2[clip0]",
            "[1:v]trim=start=0:end=4,setpts=PTS-STARTPTS,hflip[clip1]",
            "[clip0][clip1]xfade=transition=fade:duration=1:offset=4[vout]",
        ]
        assert graph.output_label == "vout"
        assert graph.duration == 8

    def test_later_track_has_own_labels(self, project):
        graph = compile_project(project).video_graphs["v2"]
        assert graph.filters[0] == "[2:v]trim=start=0:end=2,setpts=PTS-STARTPTS[clip2]"
        assert graph.filters[-1] == "[clip2][clip3]concat=n=2:v=1:a=0[t1out]"
        assert graph.output_label == "t1out"

    def test_hidden_track_skipped(self, project):
        assert "v3" not in compile_project(project).video_graphs

    def test_audio(self, project):
        plan = compile_project(project)
        assert plan.audio_chains == {"m": ["volume=0.5"]}
        assert plan.audio_graph.filters == [
            "[4:a]atrim=start=0:end=3,asetpts=PTS-STARTPTS,volume=0.5[track0_clip0]",
            "[track0_clip0]anull[aout]",
        ]

    def test_text(self, project):
        (text_filter,) = compile_project(project).text_filters
        assert text_filter.startswith("drawtext=text='Title'")

    def test_invalid_chain_is_a_warning(self, project, make_transition):
        broken = project.model_copy(update={"transitions": [make_transition("a", "c")]})
        plan = compile_project(broken)
        assert "v1" not in plan.video_graphs
        assert "v2" not in plan.video_graphs
        assert plan.warnings == [
            "Track v1: transitions do not form a valid chain",
            "Track v2: transitions do not form a valid chain",
        ]
        assert plan.inputs == ["media/m.mp4"]
        assert plan.audio_graph.filters[0].startswith("[0:a]")

    def test_does_not_modify_project(self, project):
        before = project.model_dump()
        compile_project(project)
        assert project.model_dump() == before

    def test_empty_project(self):
        plan = compile_project(Project(id="empty"))
        assert plan.inputs == []
        assert plan.video_graphs == {}
        assert plan.audio_graph.filters == ["anullsrc=r=48000:cl=stereo[aout]"]
        assert plan.duration == 0

    def test_to_dict(self, project):
        data = compile_project(project).to_dict()
        assert data["video_graphs"]["v1"]["output_label"] == "vout"
        assert data["audio_graph"]["output_label"] == "aout"


class TestClipVideoFilters:
    def test_source_window(self, make_clip):
        clip = make_clip("a", 3, 2, source_start=10, source_end=12)
        assert build_clip_video_filters(Project(id="p"), clip) == [
            "trim=start=10:end=12",
            "setpts=PTS-STARTPTS",
        ]

    def test_crop_is_relative_to_the_source_frame(self, make_clip):
        project = Project(
            id="p",
            settings={"resolution": {"width": 1920, "height": 1080}},
            transforms={"a": Transform(clip_id="a", crop={"left": 100})},
        )
        filters = build_clip_video_filters(project, make_clip("a"))
        assert filters[-1] == "crop=w='iw-100':h='ih':x=100:y=0"
