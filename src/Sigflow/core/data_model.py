# src/Sigflow/core/data_model.py
# -*- coding: utf-8 -*-
"""
Core Domain Data Models for Sigflow.

Defines the classes representing a loaded recording: immutable per-channel
Sample Buffers, the named Channels that own them and the Dataset grouping
all channels of one file or demo generation.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

import numpy as np

from Sigflow.shared.error_handling import DataError

log = logging.getLogger('Sigflow.core.data_model')


class SampleBuffer:
    """
    Time-indexed samples of one channel.

    ``times`` and ``values`` are parallel float64 arrays in acquisition order.
    Both are read-only once constructed; derived (processed) signals are new
    arrays, never writes into a buffer.
    """

    def __init__(self, times: Sequence[float], values: Sequence[float]):
        times_arr = np.array(times, dtype=float).ravel()
        values_arr = np.array(values, dtype=float).ravel()

        if times_arr.shape != values_arr.shape:
            raise DataError(
                f"times and values must have equal length, got {times_arr.size} and {values_arr.size}"
            )
        if times_arr.size > 1 and np.any(np.diff(times_arr) < 0):
            raise DataError("sample times must be non-decreasing")

        times_arr.flags.writeable = False
        values_arr.flags.writeable = False
        self._times = times_arr
        self._values = values_arr

    @classmethod
    def from_pairs(cls, pairs: Sequence[Tuple[float, float]]) -> "SampleBuffer":
        """Build a buffer from ``(time, value)`` pairs."""
        if len(pairs) == 0:
            return cls([], [])
        arr = np.asarray(pairs, dtype=float)
        return cls(arr[:, 0], arr[:, 1])

    @property
    def times(self) -> np.ndarray:
        return self._times

    @property
    def values(self) -> np.ndarray:
        return self._values

    def __len__(self) -> int:
        return self._values.size

    @property
    def is_empty(self) -> bool:
        return self._values.size == 0

    @property
    def duration(self) -> float:
        """Time span covered by the buffer in the units of ``times``."""
        if self._times.size < 2:
            return 0.0
        return float(self._times[-1] - self._times[0])

    def slice(self, start_idx: int, end_idx: int) -> "SampleBuffer":
        """Return a new buffer holding samples ``[start_idx, end_idx)``."""
        return SampleBuffer(self._times[start_idx:end_idx], self._values[start_idx:end_idx])

    def get_data_bounds(self) -> Optional[Tuple[float, float]]:
        """Returns the finite min and max values, or None if there are none."""
        finite = self._values[np.isfinite(self._values)]
        if finite.size == 0:
            return None
        return float(np.min(finite)), float(np.max(finite))

    def __repr__(self):
        return f"SampleBuffer(samples={len(self)}, duration={self.duration:.3f})"


class Channel:
    """
    A named signal column of a Dataset.
    """

    def __init__(self, name: str, buffer: SampleBuffer, units: str = ""):
        """
        Args:
            name: Column name, unique within the owning Dataset.
            buffer: The channel's samples.
            units: Physical units if known (e.g. 'uV').
        """
        self.name: str = name
        self.buffer: SampleBuffer = buffer
        self.units: str = units if units else "unknown"

    @property
    def num_samples(self) -> int:
        return len(self.buffer)

    def __repr__(self):
        return f"Channel(name='{self.name}', units='{self.units}', samples={self.num_samples})"


class Dataset:
    """
    Represents data loaded from a single table (file or demo generator).
    Contains multiple Channel objects keyed by name.
    """

    def __init__(self, source: Union[Path, str], sampling_rate: float, time_column: str = "time"):
        """
        Args:
            source: The file the data came from, or a label such as 'Demo EEG Data'.
            sampling_rate: Sampling frequency in Hz used by the filters and spectra.
            time_column: Name of the time column in the source table.
        """
        if sampling_rate is None or sampling_rate <= 0:
            raise DataError(f"sampling_rate must be > 0, got {sampling_rate}")
        self.source = source
        self.sampling_rate: float = float(sampling_rate)
        self.time_column: str = time_column
        self.channels: Dict[str, Channel] = {}

    def add_channel(self, channel: Channel) -> None:
        if channel.name in self.channels:
            raise DataError(f"Duplicate channel name '{channel.name}'")
        self.channels[channel.name] = channel
        log.debug(f"Dataset '{self.source_name}': added {channel}")

    def get_channel(self, name: str) -> Channel:
        try:
            return self.channels[name]
        except KeyError:
            raise DataError(f"Unknown channel '{name}'. Available: {self.channel_names}") from None

    @property
    def source_name(self) -> str:
        return self.source.name if isinstance(self.source, Path) else str(self.source)

    @property
    def channel_names(self) -> List[str]:
        return list(self.channels.keys())

    @property
    def num_channels(self) -> int:
        return len(self.channels)

    @property
    def duration(self) -> float:
        """Longest channel duration in seconds."""
        if not self.channels:
            return 0.0
        return max(ch.buffer.duration for ch in self.channels.values())

    def __repr__(self):
        return (
            f"Dataset(source='{self.source_name}', sampling_rate={self.sampling_rate}, "
            f"channels={self.channel_names})"
        )
