# src/Sigflow/core/spectral.py
# -*- coding: utf-8 -*-
"""
Spectral estimation for processed signal slices.

``compute_spectrum`` is a direct O(N^2) discrete Fourier transform with
single-sided amplitude scaling; ``compute_psd`` converts its magnitudes to
decibels. The transform itself lives in ``dft_magnitudes`` so it can be
benchmarked or swapped for a fast transform without touching callers.
"""
import logging
from typing import Tuple

import numpy as np

from Sigflow.core.results import SpectralResult
from Sigflow.shared.constants import MAX_DFT_SAMPLES, PSD_EPSILON
from Sigflow.shared.error_handling import ProcessingError

log = logging.getLogger('Sigflow.core.spectral')

# Rows of the DFT matrix evaluated at once; bounds memory to _BLOCK_ROWS * N floats
_BLOCK_ROWS = 256


def dft_magnitudes(signal: np.ndarray) -> np.ndarray:
    """
    Single-sided DFT magnitudes for bins ``k = 0 .. floor(N/2) - 1``:
    ``2 * |sum_n x[n] exp(-2j*pi*k*n/N)| / N``.
    """
    x = np.asarray(signal, dtype=float).ravel()
    n_samples = x.size
    n_bins = n_samples // 2
    magnitudes = np.empty(n_bins)
    if n_bins == 0:
        return magnitudes

    n = np.arange(n_samples, dtype=np.int64)
    for block_start in range(0, n_bins, _BLOCK_ROWS):
        k = np.arange(block_start, min(block_start + _BLOCK_ROWS, n_bins), dtype=np.int64)
        # Reduce k*n modulo N before scaling to keep the angle exact for large N
        angle = -2 * np.pi * (np.outer(k, n) % n_samples) / n_samples
        real = np.cos(angle) @ x
        imag = np.sin(angle) @ x
        magnitudes[k] = 2 * np.sqrt(real * real + imag * imag) / n_samples
    return magnitudes


def frequency_axis(n_samples: int, sampling_rate: float) -> np.ndarray:
    """Bin frequencies ``k * sampling_rate / N`` for ``k < floor(N/2)``."""
    if n_samples == 0:
        return np.empty(0)
    return np.arange(n_samples // 2) * sampling_rate / n_samples


def _check_input(signal, sampling_rate: float, max_samples: int) -> np.ndarray:
    if sampling_rate is None or sampling_rate <= 0:
        raise ProcessingError(f"sampling_rate must be > 0, got {sampling_rate}")
    x = np.asarray(signal, dtype=float).ravel()
    if x.size > max_samples:
        raise ProcessingError(
            f"Direct DFT limited to {max_samples} samples, got {x.size}. "
            f"Narrow the time window before computing the spectrum."
        )
    return x


def compute_spectrum(signal, sampling_rate: float, max_samples: int = MAX_DFT_SAMPLES) -> SpectralResult:
    """
    Magnitude spectrum of ``signal``.

    Args:
        signal: 1D sample sequence (typically the processed, windowed signal).
        sampling_rate: Sampling rate in Hz.
        max_samples: Size ceiling of the direct transform.

    Returns:
        SpectralResult with ``floor(N/2)`` ascending frequency bins.
    """
    x = _check_input(signal, sampling_rate, max_samples)
    magnitudes = dft_magnitudes(x)
    log.debug(f"Computed DFT over {x.size} samples ({magnitudes.size} bins)")
    return SpectralResult(
        value=magnitudes,
        unit="a.u.",
        frequencies=frequency_axis(x.size, sampling_rate),
        kind="magnitude",
        sampling_rate=float(sampling_rate),
        n_samples=int(x.size),
    )


def magnitude_to_db(magnitudes: np.ndarray) -> np.ndarray:
    """``10*log10(magnitude**2 + eps)``; the epsilon floor keeps silent bins finite."""
    magnitudes = np.asarray(magnitudes, dtype=float)
    return 10 * np.log10(magnitudes * magnitudes + PSD_EPSILON)


def compute_psd(signal, sampling_rate: float, max_samples: int = MAX_DFT_SAMPLES) -> SpectralResult:
    """Power spectral density in dB on the frequency axis of ``compute_spectrum``."""
    spectrum = compute_spectrum(signal, sampling_rate, max_samples=max_samples)
    return SpectralResult(
        value=magnitude_to_db(spectrum.magnitudes),
        unit="dB",
        frequencies=spectrum.frequencies,
        kind="psd",
        sampling_rate=spectrum.sampling_rate,
        n_samples=spectrum.n_samples,
    )


def limit_frequency(result: SpectralResult, max_frequency: float) -> SpectralResult:
    """Keep only the bins at or below ``max_frequency``."""
    if not result.is_valid:
        return result
    mask = result.frequencies <= max_frequency
    return SpectralResult(
        value=result.value[mask],
        unit=result.unit,
        is_valid=result.is_valid,
        metadata=dict(result.metadata, max_frequency=max_frequency),
        frequencies=result.frequencies[mask],
        kind=result.kind,
        sampling_rate=result.sampling_rate,
        n_samples=result.n_samples,
    )


def nearest_bin(result: SpectralResult, frequency: float) -> Tuple[int, float]:
    """Index and value of the bin closest to ``frequency``."""
    if len(result.frequencies) == 0:
        raise ProcessingError("Spectrum has no frequency bins")
    idx = int(np.argmin(np.abs(result.frequencies - frequency)))
    return idx, float(result.value[idx])
