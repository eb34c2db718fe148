# tests/core/test_signal_processor.py
"""
Tests for signal processing utilities.
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose, assert_array_equal

from Sigflow.core import signal_processor


def _reference_smoothing(x, alpha):
    y = np.empty(len(x))
    y[0] = x[0]
    for i in range(1, len(x)):
        y[i] = alpha * x[i] + (1 - alpha) * y[i - 1]
    return y


class TestAmplitudeTransforms:
    """Tests for detrend, normalize and standardize."""

    def test_detrend_removes_linear_trend(self):
        n = np.arange(200)
        data = 3.0 * n + 2.0 + np.sin(2 * np.pi * n / 20)
        detrended = signal_processor.detrend_linear(data)

        slope, intercept = np.polyfit(n, detrended, 1)
        assert abs(slope) < 1e-9
        assert abs(intercept) < 1e-6
        assert abs(np.mean(detrended)) < 1e-9

    def test_detrend_single_sample_unchanged(self):
        assert_array_equal(signal_processor.detrend_linear([4.2]), [4.2])

    def test_normalize_range(self):
        rng = np.random.default_rng(1)
        data = rng.normal(5, 3, 500)
        normalized = signal_processor.normalize_minmax(data)
        assert normalized.min() == pytest.approx(0.0)
        assert normalized.max() == pytest.approx(1.0)

    def test_normalize_constant_signal_unchanged(self):
        data = np.full(10, 7.0)
        assert_array_equal(signal_processor.normalize_minmax(data), data)

    def test_standardize_zero_mean_unit_std(self):
        rng = np.random.default_rng(2)
        data = rng.normal(-3, 8, 1000)
        z = signal_processor.standardize_zscore(data)
        assert np.mean(z) == pytest.approx(0.0, abs=1e-12)
        assert np.std(z) == pytest.approx(1.0)

    def test_standardize_constant_signal_unchanged(self):
        data = np.full(5, -1.0)
        assert_array_equal(signal_processor.standardize_zscore(data), data)

    def test_input_not_modified(self):
        data = np.array([1.0, 5.0, 2.0, 8.0])
        original = data.copy()
        signal_processor.detrend_linear(data)
        signal_processor.normalize_minmax(data)
        signal_processor.standardize_zscore(data)
        assert_array_equal(data, original)


class TestSmoothingFilters:
    """Tests for the single-pole lowpass family."""

    def test_alpha_is_normalised_cutoff(self):
        assert signal_processor.smoothing_alpha(5, 250) == pytest.approx(0.04)

    def test_alpha_is_capped(self):
        assert signal_processor.smoothing_alpha(500, 250) == pytest.approx(0.95)
        assert signal_processor.smoothing_alpha(500, 250, alpha_cap=0.9) == pytest.approx(0.9)

    def test_alpha_rejects_invalid_rate(self):
        with pytest.raises(ValueError):
            signal_processor.smoothing_alpha(5, 0)

    def test_exponential_smoothing_matches_recurrence(self):
        rng = np.random.default_rng(3)
        data = rng.normal(size=50)
        smoothed = signal_processor.exponential_smoothing(data, 0.3)
        assert smoothed[0] == data[0]
        assert_allclose(smoothed, _reference_smoothing(data, 0.3))

    def test_lowpass_removes_high_frequencies(self):
        """Test lowpass filter attenuates a fast component."""
        fs = 1000
        t = np.arange(2000) / fs
        low_freq = np.sin(2 * np.pi * 2 * t)
        high_freq = 0.5 * np.sin(2 * np.pi * 200 * t)
        data = low_freq + high_freq

        filtered = signal_processor.lowpass_filter(data, cutoff=50, fs=fs)

        assert np.std(filtered - low_freq) < np.std(data - low_freq)
        assert np.corrcoef(filtered, low_freq)[0, 1] > 0.9

    def test_lowpass_uses_capped_alpha(self):
        data = np.array([0.0, 10.0, 0.0, 10.0])
        filtered = signal_processor.lowpass_filter(data, cutoff=1000, fs=100)
        assert_allclose(filtered, _reference_smoothing(data, 0.95))

    def test_highpass_is_complement_of_lowpass(self):
        rng = np.random.default_rng(4)
        data = rng.normal(size=300) + 5.0
        low = signal_processor.lowpass_filter(data, 3, 100)
        high = signal_processor.highpass_filter(data, 3, 100)
        assert_allclose(low + high, data)

    def test_highpass_starts_at_zero(self):
        data = np.array([5.0, 6.0, 7.0])
        assert signal_processor.highpass_filter(data, 1, 100)[0] == 0.0

    def test_bandpass_is_lowpass_then_highpass(self):
        rng = np.random.default_rng(5)
        data = rng.normal(size=400)
        expected = signal_processor.highpass_filter(
            signal_processor.lowpass_filter(data, 40, 250), 2, 250
        )
        assert_allclose(signal_processor.bandpass_filter(data, 2, 40, 250), expected)

    def test_bandstop_recombination(self):
        rng = np.random.default_rng(6)
        data = rng.normal(size=400)
        low = signal_processor.lowpass_filter(data, 48, 250)
        high = signal_processor.highpass_filter(data, 52, 250)
        assert_allclose(signal_processor.bandstop_filter(data, 48, 52, 250), low + high - data)

    def test_invalid_cutoff_returns_input(self):
        data = np.array([1.0, 2.0, 3.0])
        assert_array_equal(signal_processor.lowpass_filter(data, 0, 100), data)
        assert_array_equal(signal_processor.highpass_filter(data, 5, -1), data)

    def test_empty_input(self):
        assert signal_processor.lowpass_filter(np.array([]), 5, 100).size == 0
        assert signal_processor.highpass_filter(np.array([]), 5, 100).size == 0


class TestWindowedFilters:
    """Tests for savgol, median and moving average."""

    def test_savgol_interior_is_centred_mean(self):
        data = np.arange(20, dtype=float) ** 2
        smoothed = signal_processor.savgol_filter(data, 5, 2)
        for i in range(2, 18):
            assert smoothed[i] == pytest.approx(np.mean(data[i - 2:i + 3]))

    def test_savgol_edges_pass_through(self):
        rng = np.random.default_rng(7)
        data = rng.normal(size=30)
        smoothed = signal_processor.savgol_filter(data, 11, 3)
        assert_array_equal(smoothed[:5], data[:5])
        assert_array_equal(smoothed[-5:], data[-5:])

    def test_savgol_ignores_polyorder(self):
        rng = np.random.default_rng(8)
        data = rng.normal(size=40)
        assert_array_equal(
            signal_processor.savgol_filter(data, 7, 3),
            signal_processor.savgol_filter(data, 7, 0),
        )

    def test_savgol_even_window_uses_odd_width(self):
        data = np.arange(10, dtype=float) ** 2
        smoothed = signal_processor.savgol_filter(data, 4, 2)
        assert smoothed[3] == pytest.approx(np.mean(data[1:6]))

    def test_savgol_window_larger_than_signal(self):
        data = np.array([1.0, 2.0, 3.0])
        assert_array_equal(signal_processor.savgol_filter(data, 11, 3), data)

    def test_median_removes_isolated_spikes(self):
        data = np.zeros(50)
        data[10] = 100.0
        data[30] = -80.0
        filtered = signal_processor.median_filter(data, 5)
        assert_array_equal(filtered, np.zeros(50))

    def test_median_edges_pass_through(self):
        data = np.array([9.0, 1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 0.0])
        filtered = signal_processor.median_filter(data, 5)
        assert filtered[0] == 9.0
        assert filtered[1] == 1.0
        assert filtered[-1] == 0.0
        assert filtered[-2] == 6.0
        assert filtered[2] == 3.0  # median of [9, 1, 2, 3, 4]

    def test_median_kernel_larger_than_signal(self):
        data = np.array([3.0, 1.0, 2.0])
        assert_array_equal(signal_processor.median_filter(data, 7), data)

    def test_moving_average_odd_window(self):
        data = np.array([1.0, 2.0, 3.0, 4.0, 5.0])
        assert_allclose(signal_processor.moving_average(data, 3), [1.5, 2.0, 3.0, 4.0, 4.5])

    def test_moving_average_even_window(self):
        data = np.array([1.0, 2.0, 3.0, 4.0, 5.0])
        assert_allclose(signal_processor.moving_average(data, 4), [1.5, 2.0, 2.5, 3.5, 4.0])

    def test_moving_average_window_larger_than_signal(self):
        data = np.array([1.0, 2.0, 3.0])
        assert_array_equal(signal_processor.moving_average(data, 10), data)

    def test_moving_average_window_one_is_identity(self):
        data = np.array([4.0, -1.0, 2.5])
        assert_allclose(signal_processor.moving_average(data, 1), data)


class TestNotchFilter:
    """Tests for the IIR notch."""

    def test_notch_filter_removes_line_noise(self):
        """Test notch filter removes specific frequency."""
        fs = 1000
        t = np.arange(2000) / fs
        clean_signal = np.sin(2 * np.pi * 10 * t)
        line_noise = 0.3 * np.sin(2 * np.pi * 50 * t)
        data = clean_signal + line_noise

        filtered = signal_processor.notch_filter(data, freq=50, Q=30, fs=fs)

        # Compare the 50 Hz bin over the settled second half
        orig_fft = np.abs(np.fft.rfft(data[1000:]))
        filt_fft = np.abs(np.fft.rfft(filtered[1000:]))
        assert filt_fft[50] < orig_fft[50] / 10
        assert filt_fft[10] == pytest.approx(orig_fft[10], rel=0.05)

    def test_notch_matches_biquad_recurrence(self):
        rng = np.random.default_rng(9)
        x = rng.normal(size=40)
        fs, f0, Q = 200.0, 50.0, 10.0
        w0 = 2 * np.pi * f0 / fs
        alpha = np.sin(w0) / (2 * Q)
        b0, b1, b2 = 1.0, -2 * np.cos(w0), 1.0
        a0, a1, a2 = 1 + alpha, -2 * np.cos(w0), 1 - alpha

        expected = x.copy()
        for i in range(2, len(x)):
            expected[i] = (
                b0 * x[i] + b1 * x[i - 1] + b2 * x[i - 2] - a1 * expected[i - 1] - a2 * expected[i - 2]
            ) / a0

        assert_allclose(signal_processor.notch_filter(x, f0, Q, fs), expected, atol=1e-12)

    def test_notch_first_two_samples_unchanged(self):
        x = np.array([3.0, -2.0, 1.0, 4.0, 0.5])
        filtered = signal_processor.notch_filter(x, 10, 5, 100)
        assert filtered[0] == 3.0
        assert filtered[1] == -2.0

    def test_notch_short_signal_unchanged(self):
        x = np.array([1.0, 2.0])
        assert_array_equal(signal_processor.notch_filter(x, 50, 30, 250), x)
