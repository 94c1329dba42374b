"""
Tests for transitions.

Test cases:
1. Duration validation against both clips and the type bounds
2. Chain validation
3. xfade chain offsets, labels and output duration
4. Hard cuts and missing transitions concatenate
5. Registry, aliases and factories
"""

import pytest

from splice.exceptions import UnknownTransitionTypeError
from splice.render.transitions import (
    TRANSITION_CONFIGS,
    build_transition_chain,
    build_xfade_filter,
    create_transition,
    get_basic_transitions,
    get_transition_between_clips,
    get_transition_config,
    get_transition_variants,
    has_transition_between_clips,
    validate_transition_chain,
    validate_transition_duration,
)


@pytest.fixture
def clips(make_clip):
    return [make_clip("a", 0, 5), make_clip("b", 5, 4), make_clip("c", 9, 6)]


class TestDurationValidation:
    def test_longer_than_shorter_clip(self):
        result = validate_transition_duration(3000, 2, 5, "fade")
        assert result.valid is False
        assert result.max_duration == 2000
        assert result.message == "Transition duration cannot exceed 2000ms"

    def test_below_minimum(self):
        result = validate_transition_duration(50, 2, 5, "fade")
        assert result.valid is False
        assert result.message == "Transition duration must be at least 100ms"

    def test_valid(self):
        result = validate_transition_duration(1000, 2, 5, "dissolve")
        assert (result.valid, result.max_duration) == (True, 2000)

    def test_type_maximum(self):
        assert validate_transition_duration(1000, 60, 60).max_duration == 5000

    def test_hard_cut_always_valid(self):
        assert validate_transition_duration(9999, 1, 1, "none").valid is True


class TestChainValidation:
    def test_valid_chain(self, make_transition):
        transitions = [make_transition("a", "b"), make_transition("b", "c")]
        assert validate_transition_chain(transitions, ["a", "b", "c"]) == []
        assert validate_transition_chain(transitions) == []

    def test_self_transition(self, make_transition):
        errors = validate_transition_chain([make_transition("a", "a")])
        assert errors == ["Transition tr-a-a starts and ends on clip a"]

    def test_two_outgoing(self, make_transition):
        transitions = [make_transition("a", "b"), make_transition("a", "c")]
        assert "Clip a has 2 outgoing transitions" in validate_transition_chain(transitions)

    def test_non_adjacent(self, make_transition):
        errors = validate_transition_chain([make_transition("a", "c")], ["a", "b", "c"])
        assert errors == ["Transition tr-a-c does not join adjacent clips"]

    def test_unknown_clip(self, make_transition):
        errors = validate_transition_chain([make_transition("x", "a")], ["a", "b"])
        assert errors == ["Transition tr-x-a references a clip outside the sequence"]

    def test_broken_order_without_clip_ids(self, make_transition):
        errors = validate_transition_chain([make_transition("a", "b"), make_transition("c", "d")])
        assert errors == ["Transition tr-c-d starts on clip c, expected b"]


class TestTransitionChain:
    def test_offsets_and_labels(self, clips, make_transition):
        transitions = [
            make_transition("a", "b", "fade", 1000),
            make_transition("b", "c", "dissolve", 500),
        ]
        graph = build_transition_chain(clips, transitions)

        assert graph.filters == [
            "[0:v][1:v]xfade=transition=fade:duration=1:offset=4[v0]",
            "[v0][2:v]xfade=transition=dissolve:duration=0.5:offset=7.5[vout]",
        ]
        assert graph.offsets == [4, 7.5]
        assert graph.output_label == "vout"
        assert graph.duration == 13.5

    def test_missing_transition_concatenates(self, clips, make_transition):
        graph = build_transition_chain(clips, [make_transition("a", "b", "fade", 1000)])
        assert graph.filters[1] == "[v0][2:v]concat=n=2:v=1:a=0[vout]"
        assert graph.offsets == [4, 8]
        assert graph.duration == 14

    def test_hard_cut_concatenates(self, clips, make_transition):
        graph = build_transition_chain(clips[:2], [make_transition("a", "b", "none", 0)])
        assert graph.filters == ["[0:v][1:v]concat=n=2:v=1:a=0[vout]"]
        assert graph.duration == 9

    def test_alias_uses_family_filter(self, clips, make_transition):
        graph = build_transition_chain(clips[:2], [make_transition("a", "b", "crossfade", 500)])
        assert graph.filters == ["[0:v][1:v]xfade=transition=fade:duration=0.5:offset=4.5[vout]"]

    def test_overlong_transition_is_clamped(self, make_clip, make_transition):
        short = [make_clip("a", 0, 2), make_clip("b", 2, 5)]
        graph = build_transition_chain(short, [make_transition("a", "b", "fade", 3000)])
        assert graph.filters == ["[0:v][1:v]xfade=transition=fade:duration=2:offset=0[vout]"]

    def test_custom_labels(self, clips, make_transition):
        graph = build_transition_chain(
            clips,
            [make_transition("a", "b")],
            input_labels=["clip4", "clip5", "clip6"],
            label_prefix="t1v",
            output_label="t1out",
        )
        assert graph.filters[0].startswith("[clip4][clip5]xfade")
        assert graph.filters[0].endswith("[t1v0]")
        assert graph.filters[1] == "[t1v0][clip6]concat=n=2:v=1:a=0[t1out]"

    def test_single_clip_passes_through(self, clips):
        graph = build_transition_chain(clips[:1], [])
        assert graph.filters == []
        assert graph.output_label == "0:v"
        assert graph.duration == 5

    def test_empty(self):
        assert build_transition_chain([], []) is None

    def test_invalid_chain(self, clips, make_transition):
        assert build_transition_chain(clips, [make_transition("a", "c")]) is None

    def test_single_pair_filter(self, make_transition):
        transition = make_transition("a", "b", "wipeLeft", 500)
        assert (
            build_xfade_filter(transition, 4.5, ("a", "b"), "out")
            == "[a][b]xfade=transition=wipeleft:duration=0.5:offset=4.5[out]"
        )


class TestRegistry:
    def test_unknown_type(self):
        with pytest.raises(UnknownTransitionTypeError):
            get_transition_config("spin")

    def test_aliases(self):
        assert TRANSITION_CONFIGS["crossfade"].ffmpeg_transition == "fade"
        assert TRANSITION_CONFIGS["slide"].alias_of == "slideLeft"
        assert TRANSITION_CONFIGS["zoomOut"].ffmpeg_transition == "circleclose"

    def test_basic_excludes_variants(self):
        basic = {config.type for config in get_basic_transitions()}
        assert {"fade", "wipe", "slide", "zoom", "none"} <= basic
        assert "wipeLeft" not in basic

    def test_variants(self):
        assert [c.type for c in get_transition_variants("zoom")] == ["zoomIn", "zoomOut"]
        assert get_transition_variants("fade") == []

    def test_create_transition_defaults(self):
        transition = create_transition("project-1", "a", "b")
        assert (transition.type, transition.duration) == ("fade", 500)
        assert transition.id.startswith("transition-")
        assert create_transition("project-1", "a", "b", "none").duration == 0

    def test_lookup_between_clips(self, make_transition):
        transitions = [make_transition("a", "b")]
        assert get_transition_between_clips(transitions, "a", "b").id == "tr-a-b"
        assert has_transition_between_clips(transitions, "b", "a") is False
