# src/Sigflow/infrastructure/file_readers/csv_reader.py
# -*- coding: utf-8 -*-
"""
Tabular (CSV / TXT) reader.

Turns a delimited table with one time column and one column per channel into
a Dataset. Rows where either the time or the channel value is not numeric
are dropped per channel, so every Sample Buffer only holds valid pairs.
"""
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Union

import numpy as np
import pandas as pd

from Sigflow.core.data_model import Channel, Dataset, SampleBuffer
from Sigflow.shared.constants import DEFAULT_SAMPLING_RATE, TIME_COLUMN_HINTS
from Sigflow.shared.error_handling import DataError, FileReadError

log = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = (".csv", ".txt")


def detect_time_column(columns: Sequence[str]) -> Optional[str]:
    """First column whose name contains 'time' or 'timestamp' (case-insensitive)."""
    for column in columns:
        lowered = str(column).lower()
        if any(hint in lowered for hint in TIME_COLUMN_HINTS):
            return column
    return None


def infer_sampling_rate(times: np.ndarray) -> Optional[float]:
    """Sampling rate from the median positive time step, or None if it cannot be inferred."""
    if times.size < 2:
        return None
    steps = np.diff(times)
    steps = steps[steps > 0]
    if steps.size == 0:
        return None
    return float(1.0 / np.median(steps))


def dataset_from_frame(
    frame: pd.DataFrame,
    source: Union[Path, str] = "table",
    time_column: Optional[str] = None,
    channels: Optional[Sequence[str]] = None,
    sampling_rate: Optional[float] = None,
) -> Dataset:
    """
    Build a Dataset from a DataFrame.

    Args:
        frame: Table with a time column and channel columns.
        source: Label or path recorded on the Dataset.
        time_column: Time column name; auto-detected if omitted.
        channels: Channel columns to extract; defaults to every other column
            holding at least one numeric value.
        sampling_rate: Sampling rate in Hz; inferred from the time steps if omitted.
    """
    if frame.empty:
        raise DataError(f"No data found in {source}")

    columns: List[str] = [str(c) for c in frame.columns]
    frame = frame.copy()
    frame.columns = columns

    time_column = time_column or detect_time_column(columns)
    if time_column is None:
        raise DataError(f"Could not detect a time column in {columns}; pass time_column explicitly")
    if time_column not in columns:
        raise DataError(f"Time column '{time_column}' not found in {columns}")

    numeric = frame.apply(pd.to_numeric, errors="coerce")
    if channels is None:
        channels = [c for c in columns if c != time_column and numeric[c].notna().any()]
    missing = [c for c in channels if c not in columns]
    if missing:
        raise DataError(f"Channel column(s) {missing} not found in {columns}")
    if not channels:
        raise DataError(f"No numeric channel columns found in {source}")

    times_all = numeric[time_column].to_numpy(dtype=float)
    if sampling_rate is None:
        sampling_rate = infer_sampling_rate(times_all[np.isfinite(times_all)])
        if sampling_rate is None:
            log.warning(f"Could not infer sampling rate for {source}; using {DEFAULT_SAMPLING_RATE} Hz")
            sampling_rate = DEFAULT_SAMPLING_RATE
        else:
            log.debug(f"Inferred sampling rate {sampling_rate:.3f} Hz for {source}")

    dataset = Dataset(source=source, sampling_rate=sampling_rate, time_column=time_column)
    for name in channels:
        values_all = numeric[name].to_numpy(dtype=float)
        valid = np.isfinite(times_all) & np.isfinite(values_all)
        dropped = int((~valid).sum())
        if dropped:
            log.debug(f"Channel '{name}': dropped {dropped} non-numeric row(s)")
        dataset.add_channel(Channel(name, SampleBuffer(times_all[valid], values_all[valid])))

    log.info(f"Loaded {dataset}")
    return dataset


def read_dataset(
    path: Union[str, Path],
    time_column: Optional[str] = None,
    channels: Optional[Sequence[str]] = None,
    sampling_rate: Optional[float] = None,
) -> Dataset:
    """Read a CSV/TXT file into a Dataset."""
    path = Path(path)
    if path.suffix.lower() not in SUPPORTED_SUFFIXES:
        raise FileReadError(f"Unsupported file type '{path.suffix}'. Please use a CSV or TXT file")
    try:
        frame = pd.read_csv(path, sep=None, engine="python", skip_blank_lines=True)
    except FileNotFoundError as e:
        raise FileReadError(f"File not found: {path}") from e
    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        log.error(f"Error parsing {path}: {e}")
        raise FileReadError(f"Error parsing file {path}: {e}") from e

    return dataset_from_frame(
        frame, source=path, time_column=time_column, channels=channels, sampling_rate=sampling_rate
    )
