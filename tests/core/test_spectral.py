# tests/core/test_spectral.py
"""
Tests for the direct DFT magnitude spectrum and dB PSD.
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from Sigflow.core.results import SpectralResult
from Sigflow.core.spectral import (
    compute_psd,
    compute_spectrum,
    dft_magnitudes,
    frequency_axis,
    limit_frequency,
    magnitude_to_db,
    nearest_bin,
)
from Sigflow.shared.error_handling import ProcessingError


class TestSpectrum:

    def test_matches_fft_reference(self):
        rng = np.random.default_rng(0)
        for n in (64, 101, 700):
            x = rng.normal(size=n)
            expected = 2 * np.abs(np.fft.fft(x))[: n // 2] / n
            assert_allclose(dft_magnitudes(x), expected, rtol=1e-9, atol=1e-9)

    def test_bin_count_and_axis(self):
        assert len(frequency_axis(7, 70)) == 3
        assert_allclose(frequency_axis(8, 80), [0, 10, 20, 30])
        result = compute_spectrum(np.ones(9), 90)
        assert len(result) == 4
        assert len(result.magnitudes) == 4

    def test_sine_on_bin_recovers_amplitude(self, make_sine):
        _, x = make_sine(10, 100, 1000, amplitude=2.0)
        result = compute_spectrum(x, 100)
        idx, value = nearest_bin(result, 10)
        assert result.frequencies[idx] == pytest.approx(10.0)
        assert value == pytest.approx(2.0, rel=1e-9)
        assert result.peak()[0] == pytest.approx(10.0)

    def test_sine_between_bins_peaks_nearby(self, make_sine):
        _, x = make_sine(10.05, 100, 1000, amplitude=2.0)
        freq, value = compute_spectrum(x, 100).peak()
        assert freq in (pytest.approx(10.0), pytest.approx(10.1))
        assert 0.6 * 2.0 < value < 2.0

    def test_dc_bin_is_twice_the_mean(self):
        result = compute_spectrum(np.full(10, 3.0), 10)
        assert result.magnitudes[0] == pytest.approx(6.0)
        assert_allclose(result.magnitudes[1:], 0, atol=1e-12)

    def test_empty_and_single_sample(self):
        assert len(compute_spectrum([], 100)) == 0
        assert len(compute_spectrum([1.0], 100)) == 0
        assert compute_spectrum([], 100).peak() is None

    def test_invalid_sampling_rate(self):
        with pytest.raises(ProcessingError):
            compute_spectrum(np.ones(10), 0)

    def test_size_ceiling(self):
        with pytest.raises(ProcessingError, match="limited to 10 samples"):
            compute_spectrum(np.ones(50), 100, max_samples=10)


class TestPsd:

    def test_psd_is_db_of_magnitudes(self):
        rng = np.random.default_rng(1)
        x = rng.normal(size=128)
        magnitudes = compute_spectrum(x, 128).magnitudes
        psd = compute_psd(x, 128)
        assert psd.kind == "psd"
        assert psd.unit == "dB"
        assert_allclose(psd.value, 10 * np.log10(magnitudes ** 2 + 1e-10))

    def test_peak_power_grows_with_amplitude(self, make_sine):
        _, x = make_sine(12, 120, 600)
        _, quiet = compute_psd(x, 120).peak()
        _, loud = compute_psd(3 * x, 120).peak()
        assert loud > quiet
        assert loud - quiet == pytest.approx(20 * np.log10(3), abs=1e-6)

    def test_silent_signal_is_floor(self):
        psd = compute_psd(np.zeros(64), 64)
        assert np.all(np.isfinite(psd.value))
        assert_allclose(psd.value, -100.0)

    def test_magnitude_to_db(self):
        assert magnitude_to_db(np.array([1.0]))[0] == pytest.approx(0.0, abs=1e-8)
        assert magnitude_to_db(np.array([10.0]))[0] == pytest.approx(20.0, abs=1e-8)


class TestFrequencyLimit:

    def test_keeps_bins_up_to_limit(self, make_sine):
        _, x = make_sine(5, 100, 1000)
        limited = limit_frequency(compute_spectrum(x, 100), 20)
        assert len(limited) == 201
        assert limited.frequencies[-1] == pytest.approx(20.0)
        assert len(limited.magnitudes) == len(limited.frequencies)
        assert limited.metadata["max_frequency"] == 20

    def test_invalid_result_passes_through(self):
        empty = SpectralResult.empty("psd", "No data in window")
        assert limit_frequency(empty, 10) is empty
        assert not empty.is_valid
        assert empty.unit == "dB"

    def test_nearest_bin_on_empty_spectrum(self):
        with pytest.raises(ProcessingError):
            nearest_bin(compute_spectrum([], 100), 10)
