# src/Sigflow/core/processing_pipeline.py
# -*- coding: utf-8 -*-
"""
Signal Processing Pipeline.

Holds the ordered chain of filter stages and applies the enabled ones in
order. Both the plots and the exports go through ``FilterChain.process`` so
they always see the exact same processing sequence. Nothing is cached: every
call recomputes the whole chain.
"""
import logging
from typing import Iterator, List, Sequence, Union

import numpy as np

from Sigflow.core import signal_processor
from Sigflow.core.filter_stages import FilterStage, StageKind
from Sigflow.shared.constants import DEFAULT_ALPHA_CAP
from Sigflow.shared.error_handling import ConfigurationError

log = logging.getLogger(__name__)


class FilterChain:
    """
    Manages an ordered list of filter stages.
    """

    def __init__(self, alpha_cap: float = DEFAULT_ALPHA_CAP):
        self._stages: List[FilterStage] = []
        self.alpha_cap = alpha_cap

    # --- Mutation ---

    def append(self, kind: Union[str, StageKind], **overrides) -> FilterStage:
        """
        Add a stage with the kind's default parameters at the end of the chain.

        Args:
            kind: Stage kind (e.g. 'median' or StageKind.MEDIAN)
            **overrides: Optional parameter values replacing the defaults

        Returns:
            A copy of the new stage; its ``id`` addresses it in later calls.
        """
        stage = FilterStage.create(kind, **overrides)
        self._stages.append(stage)
        log.debug(f"Added pipeline stage: {stage.describe()} [{stage.id}]")
        return stage.copy()

    def remove(self, stage_id: str) -> FilterStage:
        """Remove the stage with ``stage_id``."""
        index = self._index_of(stage_id)
        stage = self._stages.pop(index)
        log.debug(f"Removed pipeline stage {stage.kind.value} [{stage_id}]")
        return stage.copy()

    def reorder(self, stage_ids: Sequence[str]) -> None:
        """Rearrange the stages into the order given by ``stage_ids``."""
        current = {stage.id: stage for stage in self._stages}
        if len(stage_ids) != len(current) or set(stage_ids) != set(current):
            raise ConfigurationError(
                f"Reorder requires a permutation of the current stage ids {list(current)}, got {list(stage_ids)}"
            )
        self._stages = [current[stage_id] for stage_id in stage_ids]
        log.debug(f"Pipeline reordered: {[s.kind.value for s in self._stages]}")

    def move(self, stage_id: str, new_index: int) -> None:
        """Move one stage to ``new_index`` (clamped to the chain bounds)."""
        self._index_of(stage_id)
        ids = [stage.id for stage in self._stages]
        ids.remove(stage_id)
        ids.insert(max(0, min(new_index, len(ids))), stage_id)
        self.reorder(ids)

    def set_param(self, stage_id: str, name: str, value: float) -> FilterStage:
        """Change one parameter. Unknown names are rejected and leave the stage untouched."""
        index = self._index_of(stage_id)
        updated = self._stages[index].with_param(name, value)
        self._stages[index] = updated
        log.debug(f"Stage [{stage_id}] parameter {name} = {value}")
        return updated.copy()

    def toggle(self, stage_id: str) -> bool:
        """Flip the enabled flag of a stage and return the new state."""
        stage = self._stages[self._index_of(stage_id)]
        stage.enabled = not stage.enabled
        log.debug(f"Stage [{stage_id}] enabled = {stage.enabled}")
        return stage.enabled

    def clear(self):
        """Clear all stages."""
        self._stages.clear()
        log.debug("Pipeline cleared")

    def set_stages(self, stages: Sequence[FilterStage]):
        """Replace all stages; ids must be unique."""
        ids = [stage.id for stage in stages]
        if len(ids) != len(set(ids)):
            raise ConfigurationError(f"Duplicate stage ids in pipeline: {ids}")
        self._stages = [stage.copy() for stage in stages]
        log.debug(f"Pipeline stages set to: {[s.kind.value for s in self._stages]}")

    # --- Inspection ---

    def get_stages(self) -> List[FilterStage]:
        """Return a copy of the current stages."""
        return [stage.copy() for stage in self._stages]

    def get_stage(self, stage_id: str) -> FilterStage:
        return self._stages[self._index_of(stage_id)].copy()

    def enabled_stages(self) -> List[FilterStage]:
        return [stage.copy() for stage in self._stages if stage.enabled]

    def _index_of(self, stage_id: str) -> int:
        for index, stage in enumerate(self._stages):
            if stage.id == stage_id:
                return index
        raise ConfigurationError(f"No pipeline stage with id '{stage_id}'")

    def __len__(self) -> int:
        return len(self._stages)

    def __iter__(self) -> Iterator[FilterStage]:
        return iter(self.get_stages())

    # --- Application ---

    def apply_stage(self, stage: FilterStage, data: np.ndarray, fs: float) -> np.ndarray:  # noqa: C901
        """Apply a single stage regardless of its enabled flag."""
        kind = stage.kind
        p = stage.params
        cap = self.alpha_cap

        if kind is StageKind.DETREND:
            return signal_processor.detrend_linear(data)
        elif kind is StageKind.NORMALIZE:
            return signal_processor.normalize_minmax(data)
        elif kind is StageKind.STANDARDIZE:
            return signal_processor.standardize_zscore(data)
        elif kind is StageKind.LOWPASS:
            return signal_processor.lowpass_filter(data, p.cutoff, fs, order=int(p.order), alpha_cap=cap)
        elif kind is StageKind.HIGHPASS:
            return signal_processor.highpass_filter(data, p.cutoff, fs, order=int(p.order), alpha_cap=cap)
        elif kind is StageKind.BANDPASS:
            return signal_processor.bandpass_filter(data, p.low, p.high, fs, order=int(p.order), alpha_cap=cap)
        elif kind is StageKind.BANDSTOP:
            return signal_processor.bandstop_filter(data, p.low, p.high, fs, order=int(p.order), alpha_cap=cap)
        elif kind is StageKind.SAVGOL:
            return signal_processor.savgol_filter(data, p.window, p.polyorder)
        elif kind is StageKind.MEDIAN:
            return signal_processor.median_filter(data, p.kernel)
        elif kind is StageKind.NOTCH:
            return signal_processor.notch_filter(data, p.frequency, p.quality, fs)
        elif kind is StageKind.MOVING_AVERAGE:
            return signal_processor.moving_average(data, p.window)

        log.warning(f"No implementation for stage kind {kind}. Skipping.")
        return data

    def process(self, data: np.ndarray, fs: float) -> np.ndarray:
        """
        Apply all enabled stages in order to the data.

        A stage that raises, or returns an array of a different length or with
        NaN/Inf values not present in its input, is skipped: its input is
        passed on unchanged to the next stage.

        Args:
            data: Input signal array
            fs: Sampling rate in Hz

        Returns:
            Processed data array (always a new array)
        """
        if data is None:
            return data

        result = np.array(data, dtype=float, copy=True)
        if result.size == 0:
            return result

        for stage in self._stages:
            if not stage.enabled:
                continue
            try:
                output = np.asarray(self.apply_stage(stage, result, fs), dtype=float)
            except Exception as e:
                log.error(f"Error processing stage {stage.describe()}: {e}")
                continue

            if output.shape != result.shape:
                log.error(
                    f"Stage {stage.kind.value} changed signal length {result.shape} -> {output.shape}. Skipping."
                )
                continue
            if not np.all(np.isfinite(output)) and np.all(np.isfinite(result)):
                log.error(f"Stage {stage.kind.value} produced invalid data (NaN/Inf). Skipping.")
                continue
            result = output

        return result

    def describe(self) -> List[str]:
        return [
            f"{'[x]' if stage.enabled else '[ ]'} {stage.describe()}" for stage in self._stages
        ]

    def __repr__(self):
        return f"FilterChain(stages={[s.kind.value for s in self._stages]})"
