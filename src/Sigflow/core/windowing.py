# src/Sigflow/core/windowing.py
# -*- coding: utf-8 -*-
"""
Range selection helpers.

Two independent notions of a window exist and are kept apart:

* a time window ``[start, end]`` in the units of the time column, used to
  pick the slice that is plotted, exported and fed to the spectral estimator;
* an ``IndexWindow``, a fractional ``[0, 1]`` span over the sample count,
  used for pan/zoom of the processed trace.
"""
import logging
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from Sigflow.core.data_model import SampleBuffer
from Sigflow.shared.constants import MIN_WINDOW_SPAN, ZOOM_STEP
from Sigflow.shared.error_handling import RangeNotFoundError

log = logging.getLogger('Sigflow.core.windowing')


def time_window_indices(times: np.ndarray, start: float, end: float) -> Tuple[int, int]:
    """
    Locate ``[start_idx, end_idx)`` for a time range on ascending ``times``.

    ``start_idx`` is the first index with ``time >= start`` and ``end_idx``
    the first index with ``time >= end`` (the sample count when no time
    reaches ``end``).

    Raises:
        RangeNotFoundError: no sample time is ``>= start``.
    """
    times = np.asarray(times, dtype=float)
    start_idx = int(np.searchsorted(times, start, side='left'))
    if start_idx >= times.size:
        raise RangeNotFoundError(
            f"No samples at or after t={start} (data ends at "
            f"{times[-1] if times.size else 'n/a'})"
        )
    end_idx = int(np.searchsorted(times, end, side='left'))
    return start_idx, end_idx


def slice_time_window(buffer: SampleBuffer, start: float, end: float) -> SampleBuffer:
    """Sub-buffer covering ``[start, end)``; empty when ``end`` precedes the first match."""
    start_idx, end_idx = time_window_indices(buffer.times, start, end)
    if end_idx <= start_idx:
        log.debug(f"Time window [{start}, {end}] selects no samples")
        return buffer.slice(start_idx, start_idx)
    return buffer.slice(start_idx, end_idx)


@dataclass
class IndexWindow:
    """Fractional view span over the sample count (0 = first sample, 1 = past the last)."""

    start: float = 0.0
    end: float = 1.0

    def visible_range(self, total: int) -> Tuple[int, int]:
        return int(np.floor(self.start * total)), int(np.floor(self.end * total))

    def zoom_in(self, step: float = ZOOM_STEP) -> None:
        span = self.end - self.start
        self.start += span * step
        self.end -= span * step

    def zoom_out(self, step: float = ZOOM_STEP) -> None:
        span = self.end - self.start
        self.start = max(0.0, self.start - span * step)
        self.end = min(1.0, self.end + span * step)

    def reset(self) -> None:
        self.start = 0.0
        self.end = 1.0

    def set_sample_limits(self, x_min: float, x_max: float, total: int) -> Tuple[int, int]:
        """
        Set the window from sample-index limits typed by the user.

        Limits are swapped if reversed and clamped to ``[0, total]``. Returns
        the clamped limits.
        """
        if x_max < x_min:
            x_min, x_max = x_max, x_min
        x_min = max(0, min(x_min, total))
        x_max = max(0, min(x_max, total))

        denominator = max(1, total)
        start_norm = max(0.0, min(1.0, x_min / denominator))
        end_norm = max(0.0, min(1.0, x_max / denominator))
        self.start = start_norm
        self.end = end_norm if end_norm > start_norm else min(1.0, start_norm + MIN_WINDOW_SPAN)
        return x_min, x_max

    def apply(self, values: np.ndarray) -> np.ndarray:
        lo, hi = self.visible_range(len(values))
        return values[lo:hi]
