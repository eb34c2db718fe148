# src/Sigflow/infrastructure/exporters/csv_exporter.py
# -*- coding: utf-8 -*-
"""
CSV Exporter for Sigflow.
Writes processed channel data and raw multi-channel windows to CSV files.
"""

import logging
from pathlib import Path
from typing import Optional, Sequence, Union

import numpy as np
import pandas as pd

from Sigflow.core.data_model import Dataset
from Sigflow.shared.constants import CSV_PRECISION, PROCESSED_CSV_TEMPLATE
from Sigflow.shared.error_handling import DataError, ExportError

log = logging.getLogger(__name__)


def safe_channel_name(name: str) -> str:
    return str(name).replace(" ", "_").replace("/", "-")


class CSVExporter:
    """
    Handles export of data to CSV files.
    All numeric columns are written with a fixed number of decimals.
    """

    def __init__(self, precision: int = CSV_PRECISION):
        self.precision = precision

    @property
    def float_format(self) -> str:
        return f"%.{self.precision}f"

    def _write(self, frame: pd.DataFrame, output_path: Path) -> Path:
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            frame.to_csv(output_path, index=False, float_format=self.float_format)
        except OSError as e:
            log.error(f"Failed to write CSV {output_path}: {e}")
            raise ExportError(f"Could not write {output_path}: {e}") from e
        log.info(f"Exported {len(frame)} row(s) to {output_path}")
        return output_path

    def export_processed(
        self,
        times: np.ndarray,
        values: np.ndarray,
        output_path: Union[str, Path],
        time_column: str = "time",
        channel_name: str = "value",
    ) -> Path:
        """
        Export one processed channel as two aligned columns.

        Args:
            times: Sample times.
            values: Processed values, same length as ``times``.
            output_path: Target file, or a directory in which
                ``processed_<channel>.csv`` is created.
            time_column: Header of the time column.
            channel_name: Header of the value column.
        """
        times = np.asarray(times, dtype=float)
        values = np.asarray(values, dtype=float)
        if times.shape != values.shape:
            raise DataError(f"Time/Data mismatch: {times.shape} vs {values.shape}")

        output_path = Path(output_path)
        if output_path.is_dir():
            output_path = output_path / PROCESSED_CSV_TEMPLATE.format(channel=safe_channel_name(channel_name))

        frame = pd.DataFrame({time_column: times, channel_name: values})
        return self._write(frame, output_path)

    def export_channels(
        self,
        dataset: Dataset,
        output_path: Union[str, Path],
        channel_names: Optional[Sequence[str]] = None,
        time_range: Optional[tuple] = None,
    ) -> Path:
        """
        Export raw values of several channels aligned on their sample times.

        Channels may have different time bases (rows dropped per channel on
        load); a channel without a sample at a given time gets an empty cell.
        With ``time_range`` only rows whose time lies inside the closed range
        are kept.
        """
        names = list(channel_names) if channel_names else dataset.channel_names
        if not names:
            raise ExportError("No channels selected for export")

        columns = []
        for name in names:
            buffer = dataset.get_channel(name).buffer
            series = pd.Series(buffer.values, index=buffer.times, name=name)
            duplicated = series.index.duplicated(keep="first")
            if duplicated.any():
                log.debug(f"Channel '{name}': keeping first of {int(duplicated.sum())} repeated time stamp(s)")
                series = series[~duplicated]
            columns.append(series)

        frame = pd.concat(columns, axis=1).sort_index()
        frame.index.name = dataset.time_column
        frame = frame.reset_index()

        if time_range is not None:
            start, end = time_range
            frame = frame[(frame[dataset.time_column] >= start) & (frame[dataset.time_column] <= end)]

        return self._write(frame, Path(output_path))
