# src/Sigflow/application/session_manager.py

from PySide6.QtCore import QObject, Signal
from typing import Optional, Tuple, Union
from pathlib import Path
import logging

import numpy as np

from Sigflow.core.data_model import Channel, Dataset, SampleBuffer
from Sigflow.core.filter_stages import FilterStage, StageKind
from Sigflow.core.processing_pipeline import FilterChain
from Sigflow.core.results import SpectralResult
from Sigflow.core.spectral import compute_psd, compute_spectrum, limit_frequency
from Sigflow.core.windowing import IndexWindow, slice_time_window
from Sigflow.infrastructure import pipeline_config
from Sigflow.infrastructure.exporters import CSVExporter, export_script
from Sigflow.shared.constants import DEFAULT_ALPHA_CAP, DEFAULT_MAX_FREQUENCY, DEFAULT_SAMPLING_RATE, MAX_DFT_SAMPLES
from Sigflow.shared.error_handling import DataError, ProcessingError, RangeNotFoundError
from Sigflow.shared.settings import PipelineSettings

log = logging.getLogger('Sigflow.application.session_manager')


class SessionManager(QObject):
    """
    State of one interactive session: the loaded Dataset, the FilterChain,
    the active channel and the view (time range, index window, max frequency).

    Each window or tool owns its own SessionManager and passes it to whatever
    needs it; there is no process-wide instance. Pipeline edits made through
    the session emit ``pipeline_changed`` so views can recompute.
    """

    # Signals
    dataset_changed = Signal(object)  # Emits Dataset or None
    channel_changed = Signal(str)
    pipeline_changed = Signal()
    view_changed = Signal()

    def __init__(self, settings: Optional[PipelineSettings] = None):
        super().__init__()
        self._settings = settings
        alpha_cap = settings.alpha_cap if settings else DEFAULT_ALPHA_CAP
        self._chain = FilterChain(alpha_cap=alpha_cap)
        self._dataset: Optional[Dataset] = None
        self._active_channel: Optional[str] = None
        self._time_range: Optional[Tuple[float, float]] = None
        self.index_window = IndexWindow()
        self._max_frequency: float = settings.max_frequency if settings else DEFAULT_MAX_FREQUENCY
        self._max_dft_samples: int = settings.max_dft_samples if settings else MAX_DFT_SAMPLES
        self._csv_exporter = CSVExporter()
        log.info("SessionManager initialized.")

    # --- Dataset / channel ---

    @property
    def dataset(self) -> Optional[Dataset]:
        return self._dataset

    @dataset.setter
    def dataset(self, dataset: Optional[Dataset]):
        self._dataset = dataset
        self._active_channel = dataset.channel_names[0] if dataset and dataset.channels else None
        self._time_range = None
        self.index_window.reset()
        log.debug(f"Current dataset changed to: {dataset.source_name if dataset else 'None'}")
        self.dataset_changed.emit(dataset)

    @property
    def sampling_rate(self) -> float:
        if self._dataset is not None:
            return self._dataset.sampling_rate
        return self._settings.sampling_rate if self._settings else DEFAULT_SAMPLING_RATE

    @property
    def active_channel(self) -> Optional[str]:
        return self._active_channel

    @active_channel.setter
    def active_channel(self, name: str):
        if self._dataset is None:
            raise DataError("No dataset loaded")
        self._dataset.get_channel(name)
        if name != self._active_channel:
            self._active_channel = name
            log.debug(f"Active channel changed to: {name}")
            self.channel_changed.emit(name)

    def _channel(self) -> Channel:
        if self._dataset is None or self._active_channel is None:
            raise DataError("No dataset loaded")
        return self._dataset.get_channel(self._active_channel)

    # --- View state ---

    @property
    def time_range(self) -> Optional[Tuple[float, float]]:
        return self._time_range

    def set_time_range(self, start: float, end: float) -> None:
        self._time_range = (float(start), float(end))
        log.debug(f"Time range set to [{start}, {end}]")
        self.view_changed.emit()

    def clear_time_range(self) -> None:
        self._time_range = None
        self.view_changed.emit()

    @property
    def max_frequency(self) -> float:
        return self._max_frequency

    @max_frequency.setter
    def max_frequency(self, value: float):
        self._max_frequency = float(value)
        self.view_changed.emit()

    # --- Pipeline editing ---

    @property
    def pipeline(self) -> FilterChain:
        return self._chain

    def add_stage(self, kind: Union[str, StageKind], **overrides) -> FilterStage:
        stage = self._chain.append(kind, **overrides)
        self.pipeline_changed.emit()
        return stage

    def remove_stage(self, stage_id: str) -> None:
        self._chain.remove(stage_id)
        self.pipeline_changed.emit()

    def reorder_stages(self, stage_ids) -> None:
        self._chain.reorder(stage_ids)
        self.pipeline_changed.emit()

    def set_stage_param(self, stage_id: str, name: str, value: float) -> FilterStage:
        stage = self._chain.set_param(stage_id, name, value)
        self.pipeline_changed.emit()
        return stage

    def toggle_stage(self, stage_id: str) -> bool:
        enabled = self._chain.toggle(stage_id)
        self.pipeline_changed.emit()
        return enabled

    def clear_pipeline(self) -> None:
        self._chain.clear()
        self.pipeline_changed.emit()

    # --- Derived data (recomputed on every call) ---

    def raw_buffer(self) -> SampleBuffer:
        return self._channel().buffer

    def windowed_buffer(self) -> SampleBuffer:
        """Active channel restricted to the time range; empty if the range misses the data."""
        buffer = self.raw_buffer()
        if self._time_range is None:
            return buffer
        try:
            return slice_time_window(buffer, *self._time_range)
        except RangeNotFoundError as e:
            log.warning(f"Time range outside data for channel '{self._active_channel}': {e}")
            return SampleBuffer([], [])

    def processed(self) -> Tuple[np.ndarray, np.ndarray]:
        """(times, processed values) of the windowed active channel."""
        buffer = self.windowed_buffer()
        return buffer.times, self._chain.process(buffer.values, self.sampling_rate)

    def visible_processed(self) -> Tuple[np.ndarray, np.ndarray]:
        """Processed data restricted to the pan/zoom index window."""
        times, values = self.processed()
        return self.index_window.apply(times), self.index_window.apply(values)

    def _spectral(self, estimator, kind: str, max_frequency: Optional[float]) -> SpectralResult:
        if self._dataset is None or self._active_channel is None:
            return SpectralResult.empty(kind, "No dataset loaded")
        _, values = self.processed()
        if values.size == 0:
            return SpectralResult.empty(kind, "No data in window")
        try:
            result = estimator(values, self.sampling_rate, max_samples=self._max_dft_samples)
        except ProcessingError as e:
            log.warning(f"Spectrum not computed: {e}")
            return SpectralResult.empty(kind, str(e))
        limit = self._max_frequency if max_frequency is None else max_frequency
        return limit_frequency(result, limit)

    def spectrum(self, max_frequency: Optional[float] = None) -> SpectralResult:
        return self._spectral(compute_spectrum, "magnitude", max_frequency)

    def psd(self, max_frequency: Optional[float] = None) -> SpectralResult:
        return self._spectral(compute_psd, "psd", max_frequency)

    # --- Persistence / export ---

    def save_pipeline(self, path: Union[str, Path]) -> Path:
        path = pipeline_config.save_pipeline(self._chain, path, sampling_rate=self.sampling_rate)
        if self._settings:
            self._settings.last_pipeline_path = path
        return path

    def load_pipeline(self, path: Union[str, Path]) -> None:
        """Replace the chain with a saved one. On any error the current chain is kept."""
        document = pipeline_config.load_pipeline(path)
        if document.sampling_rate is not None and document.sampling_rate != self.sampling_rate:
            log.info(
                f"Pipeline was saved at {document.sampling_rate} Hz; "
                f"applying at the dataset rate {self.sampling_rate} Hz"
            )
        self._chain.set_stages(document.stages)
        if self._settings:
            self._settings.last_pipeline_path = Path(path)
        self.pipeline_changed.emit()

    def export_processed_csv(self, path: Union[str, Path]) -> Path:
        times, values = self.processed()
        return self._csv_exporter.export_processed(
            times,
            values,
            path,
            time_column=self._dataset.time_column,
            channel_name=self._active_channel,
        )

    def export_script(self, path: Union[str, Path]) -> Path:
        channel = self._active_channel or "signal"
        return export_script(self._chain, path, channel, self.sampling_rate)
