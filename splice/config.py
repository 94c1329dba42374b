import logging
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SPLICE_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Timeline view
    base_pixels_per_second: float = 50.0
    min_zoom: float = 0.1
    max_zoom: float = 5.0

    # Snapping
    snap_threshold_px: float = 10.0
    snap_grid_size: float = 1.0

    # Track heights (px)
    video_track_height: int = 80
    audio_track_height: int = 60
    text_track_height: int = 40

    # Render settings
    render_output_width: int = 1920
    render_output_height: int = 1080
    render_fps: int = 30
    render_audio_sample_rate: int = 48000

    # Waveform
    waveform_peak_count: int = 200


@lru_cache
def get_settings() -> Settings:
    return Settings()


def configure_logging(level: str | None = None) -> None:
    """Apply the configured log level to the package logger."""
    settings = get_settings()
    logging.basicConfig(
        level=level or settings.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logging.getLogger("splice").setLevel(level or settings.log_level)
