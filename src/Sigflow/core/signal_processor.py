# src/Sigflow/core/signal_processor.py
# -*- coding: utf-8 -*-
"""
Signal processing functions applied by the filter chain.

Every function maps a 1D signal to a new array of the same length and never
modifies its input. The "Butterworth" functions are single-pole exponential
smoothers parameterised by a normalised cutoff, not true IIR designs; the
Savitzky-Golay function is a centred moving average. Degenerate input
(empty signal, zero spread, window larger than the signal, invalid rate)
returns the input unchanged.
"""
import logging

import numpy as np
from scipy import signal as sp_signal

from Sigflow.shared.constants import DEFAULT_ALPHA_CAP

log = logging.getLogger('Sigflow.core.signal_processor')


def _as_signal(data) -> np.ndarray:
    return np.asarray(data, dtype=float).ravel()


def _unchanged(data: np.ndarray) -> np.ndarray:
    return np.array(data, dtype=float, copy=True)


# --- Amplitude transforms ---

def detrend_linear(data: np.ndarray) -> np.ndarray:
    """Subtract the least-squares line fitted against the sample index."""
    y = _as_signal(data)
    n = y.size
    if n < 2:
        log.warning(f"detrend: need at least 2 samples, got {n}. Returning input unchanged.")
        return _unchanged(y)

    x = np.arange(n, dtype=float)
    x_mean = x.mean()
    y_mean = y.mean()
    denominator = np.sum((x - x_mean) ** 2)
    if denominator == 0:
        log.warning("detrend: zero index variance. Returning input unchanged.")
        return _unchanged(y)

    slope = np.sum((x - x_mean) * (y - y_mean)) / denominator
    intercept = y_mean - slope * x_mean
    return y - (slope * x + intercept)


def normalize_minmax(data: np.ndarray) -> np.ndarray:
    """Scale to [0, 1]."""
    y = _as_signal(data)
    if y.size == 0:
        return _unchanged(y)
    lo = np.min(y)
    value_range = np.max(y) - lo
    if value_range == 0:
        log.debug("normalize: constant signal, returning input unchanged.")
        return _unchanged(y)
    return (y - lo) / value_range


def standardize_zscore(data: np.ndarray) -> np.ndarray:
    """Z-score using the population standard deviation (ddof=0)."""
    y = _as_signal(data)
    if y.size == 0:
        return _unchanged(y)
    std = np.std(y)
    if std == 0:
        log.debug("standardize: zero standard deviation, returning input unchanged.")
        return _unchanged(y)
    return (y - np.mean(y)) / std


# --- Exponential smoothing family ---

def smoothing_alpha(cutoff: float, fs: float, alpha_cap: float = DEFAULT_ALPHA_CAP) -> float:
    """Smoothing coefficient: cutoff normalised to Nyquist, clamped at ``alpha_cap``."""
    if fs <= 0:
        raise ValueError(f"fs must be > 0, got {fs}")
    nyquist = fs / 2.0
    return min(alpha_cap, cutoff / nyquist)


def exponential_smoothing(data: np.ndarray, alpha: float) -> np.ndarray:
    """y[0] = x[0]; y[i] = alpha*x[i] + (1 - alpha)*y[i-1]."""
    x = _as_signal(data)
    if x.size == 0:
        return _unchanged(x)
    # Initial state chosen so that y[0] == x[0]
    zi = np.array([(1.0 - alpha) * x[0]])
    y, _ = sp_signal.lfilter([alpha], [1.0, alpha - 1.0], x, zi=zi)
    return y


def _valid_cutoff(name: str, cutoff: float, fs: float) -> bool:
    if fs <= 0:
        log.warning(f"{name}: invalid sampling rate {fs}. Returning input unchanged.")
        return False
    if cutoff <= 0:
        log.warning(f"{name}: cutoff must be > 0, got {cutoff}. Returning input unchanged.")
        return False
    return True


def lowpass_filter(data: np.ndarray, cutoff: float, fs: float, order: int = 4,
                   alpha_cap: float = DEFAULT_ALPHA_CAP) -> np.ndarray:
    """Single-pole "Butterworth" lowpass. ``order`` is accepted but has no effect."""
    x = _as_signal(data)
    if x.size == 0 or not _valid_cutoff("lowpass", cutoff, fs):
        return _unchanged(x)
    return exponential_smoothing(x, smoothing_alpha(cutoff, fs, alpha_cap))


def highpass_filter(data: np.ndarray, cutoff: float, fs: float, order: int = 4,
                    alpha_cap: float = DEFAULT_ALPHA_CAP) -> np.ndarray:
    """Complement of the lowpass: x - lowpass(x)."""
    x = _as_signal(data)
    if x.size == 0 or not _valid_cutoff("highpass", cutoff, fs):
        return _unchanged(x)
    return x - exponential_smoothing(x, smoothing_alpha(cutoff, fs, alpha_cap))


def bandpass_filter(data: np.ndarray, lowcut: float, highcut: float, fs: float, order: int = 4,
                    alpha_cap: float = DEFAULT_ALPHA_CAP) -> np.ndarray:
    """Lowpass at ``highcut`` followed by highpass at ``lowcut``."""
    smoothed = lowpass_filter(data, highcut, fs, order=order, alpha_cap=alpha_cap)
    return highpass_filter(smoothed, lowcut, fs, order=order, alpha_cap=alpha_cap)


def bandstop_filter(data: np.ndarray, lowcut: float, highcut: float, fs: float, order: int = 4,
                    alpha_cap: float = DEFAULT_ALPHA_CAP) -> np.ndarray:
    """Additive recombination: lowpass(x, lowcut) + highpass(x, highcut) - x."""
    x = _as_signal(data)
    low = lowpass_filter(x, lowcut, fs, order=order, alpha_cap=alpha_cap)
    high = highpass_filter(x, highcut, fs, order=order, alpha_cap=alpha_cap)
    return low + high - x


# --- Windowed filters ---

def _half_width(name: str, window: float, n: int):
    """Half width of a centred window, or None when the window cannot be applied."""
    width = int(np.floor(window))
    if width < 1:
        log.warning(f"{name}: window must be >= 1, got {window}. Returning input unchanged.")
        return None
    half = width // 2
    if n < 2 * half + 1:
        log.warning(f"{name}: window {width} exceeds signal length {n}. Returning input unchanged.")
        return None
    return half


def savgol_filter(data: np.ndarray, window: float, polyorder: float = 3) -> np.ndarray:
    """
    Savitzky-Golay approximation: centred mean over ``2*floor(window/2)+1``
    samples. ``polyorder`` is ignored. The first and last ``floor(window/2)``
    samples pass through unmodified.
    """
    y = _as_signal(data)
    half = _half_width("savgol", window, y.size)
    if not half:
        return _unchanged(y)
    width = 2 * half + 1
    result = _unchanged(y)
    result[half:y.size - half] = np.convolve(y, np.ones(width) / width, mode="valid")
    return result


def median_filter(data: np.ndarray, kernel: float) -> np.ndarray:
    """Centred running median; edge samples pass through unmodified."""
    y = _as_signal(data)
    half = _half_width("median", kernel, y.size)
    if not half:
        return _unchanged(y)
    result = _unchanged(y)
    # medfilt zero-pads the edges; only interior samples are taken from it
    filtered = sp_signal.medfilt(y, kernel_size=2 * half + 1)
    result[half:y.size - half] = filtered[half:y.size - half]
    return result


def moving_average(data: np.ndarray, window: float) -> np.ndarray:
    """
    Centred running mean over ``[i - floor(w/2), i + ceil(w/2))``, clipped to
    the array bounds (narrower average at the edges, no zero padding).
    """
    y = _as_signal(data)
    n = y.size
    width = int(np.floor(window))
    if n == 0:
        return _unchanged(y)
    if width < 1:
        log.warning(f"moving_average: window must be >= 1, got {window}. Returning input unchanged.")
        return _unchanged(y)
    if width > n:
        log.warning(f"moving_average: window {width} exceeds signal length {n}. Returning input unchanged.")
        return _unchanged(y)

    idx = np.arange(n)
    start = np.maximum(0, idx - width // 2)
    end = np.minimum(n, idx + (width + 1) // 2)
    cumulative = np.concatenate(([0.0], np.cumsum(y)))
    return (cumulative[end] - cumulative[start]) / (end - start)


# --- IIR notch ---

def notch_filter(data: np.ndarray, freq: float, Q: float, fs: float) -> np.ndarray:
    """
    Second-order IIR notch (biquad) at ``freq``.

    The recurrence starts at index 2 using previous outputs; samples 0 and 1
    pass through unmodified.
    """
    x = _as_signal(data)
    if x.size < 3:
        return _unchanged(x)
    if fs <= 0 or Q <= 0:
        log.warning(f"notch: invalid fs={fs} or Q={Q}. Returning input unchanged.")
        return _unchanged(x)

    w0 = 2 * np.pi * freq / fs
    alpha = np.sin(w0) / (2 * Q)
    b = np.array([1.0, -2 * np.cos(w0), 1.0])
    a = np.array([1 + alpha, -2 * np.cos(w0), 1 - alpha])

    result = _unchanged(x)
    # Samples 0-1 are both the first inputs and the first outputs of the recurrence
    zi = sp_signal.lfiltic(b, a, y=[x[1], x[0]], x=[x[1], x[0]])
    result[2:], _ = sp_signal.lfilter(b, a, x[2:], zi=zi)
    return result
