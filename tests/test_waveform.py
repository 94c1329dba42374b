"""Tests for waveform peak extraction."""

import numpy as np
import pytest

from splice.render.waveform import (
    create_empty_waveform,
    generate_waveform_peaks,
    normalize_waveform_peaks,
)


class TestNormalize:
    def test_loudest_is_one(self):
        assert normalize_waveform_peaks([0.1, -0.4, 0.2]) == pytest.approx((0.25, 1.0, 0.5))

    def test_silence_stays_zero(self):
        assert normalize_waveform_peaks([0, 0, 0]) == (0.0, 0.0, 0.0)

    def test_empty(self):
        assert normalize_waveform_peaks([]) == ()


class TestGeneratePeaks:
    def test_mono(self):
        waveform = generate_waveform_peaks(np.array([0, 0.5, -1, 0.25]), peak_count=2, sample_rate=4)
        assert waveform.peaks == pytest.approx((0.5, 1.0))
        assert waveform.duration == 1.0
        assert waveform.channels == 1

    def test_stereo_is_mixed_down(self):
        samples = np.array([[1.0, -1.0], [0.5, 0.5]])
        waveform = generate_waveform_peaks(samples, peak_count=2, sample_rate=2)
        assert waveform.peaks == pytest.approx((0.0, 1.0))
        assert waveform.channels == 2

    def test_integer_pcm(self):
        samples = np.array([0, 16384, -32768, 8192], dtype=np.int16)
        waveform = generate_waveform_peaks(samples, peak_count=4, sample_rate=48000)
        assert waveform.peaks == pytest.approx((0.0, 0.5, 1.0, 0.25))

    def test_more_buckets_than_samples(self):
        waveform = generate_waveform_peaks(np.array([0.5, 1.0]), peak_count=4, sample_rate=2)
        assert len(waveform.peaks) == 4
        assert max(waveform.peaks) == 1.0

    def test_defaults_from_settings(self, monkeypatch):
        monkeypatch.setenv("SPLICE_WAVEFORM_PEAK_COUNT", "10")
        waveform = generate_waveform_peaks(np.ones(1000))
        assert len(waveform.peaks) == 10
        assert waveform.sample_rate == 48000

    def test_empty_samples(self):
        waveform = generate_waveform_peaks(np.array([]), peak_count=8, sample_rate=48000)
        assert waveform.peaks == ()
        assert waveform.duration == 0


class TestEmptyWaveform:
    def test_flat(self):
        waveform = create_empty_waveform(12.5, peak_count=5)
        assert waveform.peaks == (0.0,) * 5
        assert waveform.duration == 12.5
