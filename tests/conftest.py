"""
Pytest fixtures for splice tests.

Factories build clips, tracks and transitions with sensible defaults so each
test only spells out the fields it is about.
"""

import pytest

from splice.config import get_settings
from splice.schemas.timeline import TimelineClip, TimelineTrack
from splice.schemas.transition import Transition


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are cached; tests that patch the environment need a fresh read."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_clip():
    """Factory for clips whose source window matches their duration."""

    def _make(
        clip_id: str = "clip-1",
        start_time: float = 0.0,
        duration: float = 5.0,
        track_id: str = "track-1",
        source_start: float = 0.0,
        source_end: float | None = None,
        **extra,
    ) -> TimelineClip:
        return TimelineClip(
            id=clip_id,
            track_id=track_id,
            start_time=start_time,
            duration=duration,
            source_start=source_start,
            source_end=source_end if source_end is not None else source_start + duration,
            source_url=extra.pop("source_url", f"media/{clip_id}.mp4"),
            **extra,
        )

    return _make


@pytest.fixture
def make_track():
    def _make(
        track_id: str = "track-1",
        clips: list[TimelineClip] | None = None,
        type: str = "video",
        **extra,
    ) -> TimelineTrack:
        return TimelineTrack(id=track_id, type=type, clips=clips or [], **extra)

    return _make


@pytest.fixture
def make_transition():
    def _make(
        from_clip_id: str,
        to_clip_id: str,
        type: str = "fade",
        duration: int = 500,
        transition_id: str | None = None,
    ) -> Transition:
        return Transition(
            id=transition_id or f"tr-{from_clip_id}-{to_clip_id}",
            project_id="project-1",
            from_clip_id=from_clip_id,
            to_clip_id=to_clip_id,
            type=type,
            duration=duration,
        )

    return _make
