"""Waveform peak extraction for the timeline's audio display.

Peaks are the max absolute amplitude per bucket, normalized to 0-1 so the
timeline can draw them at any track height.

Usage:
    waveform = generate_waveform_peaks(samples, sample_rate=48000)
    # Returns: WaveformData(peaks=(0.12, 0.8, ...), duration=3.2, ...)
"""

import logging
from collections.abc import Sequence

import numpy as np

from splice.config import get_settings
from splice.schemas.audio import WaveformData

logger = logging.getLogger(__name__)


def create_empty_waveform(duration: float, peak_count: int | None = None) -> WaveformData:
    """Flat waveform used as a placeholder until real peaks are available."""
    count = peak_count if peak_count is not None else get_settings().waveform_peak_count
    return WaveformData(peaks=(0.0,) * count, duration=duration)


def normalize_waveform_peaks(peaks: Sequence[float] | np.ndarray) -> tuple[float, ...]:
    """Scale peaks so the loudest is 1.0. All-zero input stays all zero."""
    arr = np.abs(np.asarray(peaks, dtype=np.float64))
    if arr.size == 0:
        return ()
    max_peak = float(arr.max())
    if max_peak == 0:
        return tuple(float(v) for v in arr)
    return tuple(float(v) for v in arr / max_peak)


def generate_waveform_peaks(
    samples: np.ndarray,
    peak_count: int | None = None,
    sample_rate: int | None = None,
) -> WaveformData:
    """Reduce raw PCM samples to a normalized peak envelope.

    Args:
        samples: Shape (n,) for mono or (n, channels); any numeric dtype.
        peak_count: Buckets in the output (defaults to settings)
        sample_rate: Samples per second (defaults to settings)
    """
    settings = get_settings()
    count = peak_count if peak_count is not None else settings.waveform_peak_count
    rate = sample_rate if sample_rate is not None else settings.render_audio_sample_rate

    arr = np.asarray(samples, dtype=np.float64)
    channels = 1 if arr.ndim == 1 else arr.shape[1]
    # Mix down to mono
    mono = arr if arr.ndim == 1 else arr.mean(axis=1)
    duration = mono.size / rate if rate > 0 else 0.0

    if mono.size == 0 or count <= 0:
        return WaveformData(peaks=(), sample_rate=rate, duration=duration, channels=channels)

    buckets = np.array_split(np.abs(mono), count)
    peaks = np.array([bucket.max() if bucket.size else 0.0 for bucket in buckets])

    logger.debug(f"[WAVEFORM] {mono.size} samples -> {count} peaks")
    return WaveformData(
        peaks=normalize_waveform_peaks(peaks),
        sample_rate=rate,
        duration=duration,
        channels=channels,
    )
