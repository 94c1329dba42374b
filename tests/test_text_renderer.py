"""
Tests for text overlays.

Test cases:
1. Preset merge and creation
2. Visibility window
3. Entry/exit animation progress and easing
4. Percentage <-> pixel placement
5. drawtext compilation (escaping, anchoring, time gate)
6. Batch validation
"""

import pytest

from splice.exceptions import UnknownPresetError
from splice.render.text_renderer import (
    TEXT_PRESETS,
    TextRenderer,
    apply_easing,
    calculate_animation_progress,
    create_text_overlay,
    generate_drawtext_filter,
    get_text_animation_state,
    get_visible_texts,
    is_text_visible_at_time,
    pixels_to_text_position,
    text_position_to_pixels,
    validate_text_overlay,
)
from splice.schemas.text import TextAnimation, TextOverlay, TextPosition, TextStyle
from splice.utils.interpolation import ExtrapolateType, interpolate


@pytest.fixture
def overlay():
    return TextOverlay(
        id="text-1",
        track_id="track-text",
        content="Hello",
        start_time=2,
        duration=3,
        animation_in=TextAnimation(type="fade", duration=1, easing="linear"),
    )


class TestCreateTextOverlay:
    def test_uses_preset(self):
        overlay = create_text_overlay("Title", "t", 0, "title")
        assert overlay.style.font_size == 72
        assert overlay.duration == 4
        assert overlay.preset == "title"
        assert overlay.animation_in.type == "fade"

    def test_style_override_is_per_field(self):
        overlay = create_text_overlay("Name", "t", 1, "lower-third", style={"color": "#FF0000"})
        assert overlay.style.color == "#FF0000"
        assert overlay.style.font_size == 32
        assert overlay.style.background_color == "rgba(0, 0, 0, 0.7)"

    def test_position_override_is_per_field(self):
        overlay = create_text_overlay("Cap", "t", 0, "caption", position={"y": 80})
        assert overlay.position.x == 50
        assert overlay.position.y == 80

    def test_watermark_spans_rest_of_timeline(self):
        overlay = create_text_overlay("(c)", "t", 5, "watermark", timeline_duration=60)
        assert overlay.duration == 55

    def test_explicit_duration(self):
        assert create_text_overlay("x", "t", 0, duration=7).duration == 7

    def test_unknown_preset_raises(self):
        with pytest.raises(UnknownPresetError) as exc_info:
            create_text_overlay("x", "t", 0, "poster")
        assert exc_info.value.code == "UNKNOWN_PRESET"

    def test_presets_are_not_shared(self):
        overlay = create_text_overlay("x", "t", 0, "title", style={"font_size": 10})
        assert TEXT_PRESETS["title"].style.font_size == 72
        assert overlay.style.font_size == 10


class TestVisibility:
    def test_half_open_window(self, overlay):
        assert is_text_visible_at_time(overlay, 1.99) is False
        assert is_text_visible_at_time(overlay, 2.0) is True
        assert is_text_visible_at_time(overlay, 4.99) is True
        assert is_text_visible_at_time(overlay, 5.0) is False

    def test_hidden_overlay(self, overlay):
        hidden = overlay.model_copy(update={"visible": False})
        assert is_text_visible_at_time(hidden, 3) is False

    def test_get_visible_texts(self, overlay):
        later = overlay.model_copy(update={"id": "text-2", "start_time": 10})
        assert [o.id for o in get_visible_texts([overlay, later], 3)] == ["text-1"]


class TestAnimationProgress:
    """start=2, duration=3, fade in over 1s."""

    @pytest.mark.parametrize("time,expected", [(1.0, 0), (2.0, 0), (2.5, 0.5), (3.0, 1), (4.0, 1)])
    def test_entry_progress(self, overlay, time, expected):
        assert calculate_animation_progress(overlay, time).in_progress == pytest.approx(expected)

    def test_no_animation(self, overlay):
        plain = overlay.model_copy(update={"animation_in": None})
        progress = calculate_animation_progress(plain, 2.0)
        assert (progress.in_progress, progress.out_progress) == (1.0, 0.0)

    def test_entry_delay(self, overlay):
        delayed = overlay.model_copy(
            update={"animation_in": TextAnimation(type="fade", duration=1, delay=0.5)}
        )
        assert calculate_animation_progress(delayed, 2.5).in_progress == 0
        assert calculate_animation_progress(delayed, 3.0).in_progress == pytest.approx(0.5)

    @pytest.mark.parametrize("time,expected", [(3.0, 0), (4.0, 0), (4.5, 0.5), (5.0, 1), (6.0, 1)])
    def test_exit_progress(self, overlay, time, expected):
        leaving = overlay.model_copy(update={"animation_out": TextAnimation(type="fade", duration=1)})
        assert calculate_animation_progress(leaving, time).out_progress == pytest.approx(expected)

    def test_fade_state(self, overlay):
        assert get_text_animation_state(overlay, 2.5).opacity == pytest.approx(0.5)
        assert get_text_animation_state(overlay, 4.0).opacity == 1.0

    def test_slide_state(self, overlay):
        sliding = overlay.model_copy(
            update={
                "animation_in": TextAnimation(
                    type="slide", duration=1, easing="linear", slide_direction="left"
                )
            }
        )
        state = get_text_animation_state(sliding, 2.0)
        assert state.translate_x == -50
        assert get_text_animation_state(sliding, 3.0).translate_x == 0


class TestEasing:
    @pytest.mark.parametrize("name", ["linear", "ease-in", "ease-out", "ease-in-out"])
    def test_endpoints(self, name):
        assert apply_easing(0, name) == 0
        assert apply_easing(1, name) == 1

    def test_curves(self):
        assert apply_easing(0.5, "linear") == 0.5
        assert apply_easing(0.5, "ease-in") == 0.25
        assert apply_easing(0.5, "ease-out") == 0.75
        assert apply_easing(0.25, "ease-in-out") == 0.125

    def test_unknown_is_linear(self):
        assert apply_easing(0.3, "bounce") == 0.3

    def test_interpolate_extend(self):
        assert interpolate(2, [0, 1], [0, 10], extrapolate=ExtrapolateType.EXTEND) == 20

    def test_interpolate_rejects_bad_ranges(self):
        with pytest.raises(ValueError):
            interpolate(0, [1, 0], [0, 1])


class TestPlacement:
    def test_to_pixels(self):
        pixels = text_position_to_pixels(TextPosition(x=50, y=25, width=10), 1920, 1080)
        assert (pixels.x, pixels.y, pixels.width, pixels.height) == (960, 270, 192, None)

    def test_from_pixels_is_clamped(self):
        position = pixels_to_text_position(2000, -10, 1920, 1080)
        assert (position.x, position.y) == (100, 0)


class TestDrawtext:
    def test_escapes_content(self, overlay):
        tricky = overlay.model_copy(update={"content": "It's 5:00"})
        result = generate_drawtext_filter(tricky, 1920, 1080)
        assert "text='It'\\''s 5\\:00'" in result

    def test_centered_anchor(self, overlay):
        result = generate_drawtext_filter(overlay, 1920, 1080)
        assert "x='960-text_w/2'" in result
        assert "y='540-text_h/2'" in result

    def test_left_top_anchor_is_plain_pixels(self, overlay):
        placed = overlay.model_copy(
            update={
                "position": TextPosition(x=10, y=10),
                "style": TextStyle(align="left", vertical_align="top"),
            }
        )
        result = generate_drawtext_filter(placed, 1000, 500)
        assert ":x=100:" in result
        assert ":y=50:" in result

    def test_time_gate(self, overlay):
        result = generate_drawtext_filter(overlay, 1920, 1080)
        assert result.endswith(":enable='between(t,2,5)'")

    def test_fade_alpha(self, overlay):
        result = generate_drawtext_filter(overlay, 1920, 1080)
        assert "alpha='clip((t-2)/1,0,1)'" in result

    def test_style(self, overlay):
        styled = overlay.model_copy(
            update={
                "style": TextStyle(
                    color="#ff0000", opacity=0.5, background_color="rgba(0, 0, 0, 0.6)", shadow=None
                )
            }
        )
        result = generate_drawtext_filter(styled, 1920, 1080)
        assert result.startswith("drawtext=text='Hello':fontsize=48:fontcolor=0xFF0000@0.5:")
        assert "font='Inter'" in result
        assert "box=1:boxcolor=0x000000@0.6" in result
        assert "shadowcolor" not in result

    def test_renderer_skips_empty_and_hidden(self, overlay):
        empty = overlay.model_copy(update={"id": "e", "content": "  "})
        hidden = overlay.model_copy(update={"id": "h", "visible": False})
        early = overlay.model_copy(update={"id": "first", "content": "First", "start_time": 0})
        filters = TextRenderer(1280, 720).build_filters([overlay, empty, hidden, early])
        assert len(filters) == 2
        assert filters[0].startswith("drawtext=text='First'")


class TestValidation:
    def test_valid(self, overlay):
        assert validate_text_overlay(overlay) == []

    def test_reports_every_problem(self):
        errors = validate_text_overlay(
            {
                "content": "",
                "start_time": -1,
                "duration": 0,
                "position": {"x": 120, "y": 50},
                "style": {"font_size": 0, "opacity": 2},
            }
        )
        assert errors == [
            "Text content cannot be empty",
            "Start time cannot be negative",
            "Duration must be positive",
            "X position must be between 0 and 100",
            "Font size must be at least 1",
            "Opacity must be between 0 and 1",
        ]
