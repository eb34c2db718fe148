# src/Sigflow/shared/settings.py
# -*- coding: utf-8 -*-
"""
Persistent preferences for Sigflow.

Preferences are stored through QSettings so they survive between sessions.
Tests and batch tools can point the store at an explicit INI file instead of
the platform registry / plist location.
"""
import logging
from pathlib import Path
from typing import Optional, Union

from PySide6 import QtCore

from Sigflow.shared.constants import (
    APP_NAME,
    SETTINGS_SECTION,
    DEFAULT_SAMPLING_RATE,
    DEFAULT_MAX_FREQUENCY,
    DEFAULT_ALPHA_CAP,
    MAX_DFT_SAMPLES,
)

log = logging.getLogger(__name__)

_KEY_SAMPLING_RATE = "acquisition/sampling_rate"
_KEY_MAX_FREQUENCY = "spectrum/max_frequency"
_KEY_DFT_CEILING = "spectrum/max_dft_samples"
_KEY_ALPHA_CAP = "filters/alpha_cap"
_KEY_LAST_PIPELINE = "pipeline/last_path"


class PipelineSettings:
    """
    Typed accessors over a QSettings store.

    Invalid stored values are reported and replaced by their defaults rather
    than propagated into the processing code.
    """

    def __init__(self, settings_path: Optional[Union[str, Path]] = None):
        if settings_path is not None:
            self._settings = QtCore.QSettings(str(settings_path), QtCore.QSettings.IniFormat)
        else:
            self._settings = QtCore.QSettings(APP_NAME, SETTINGS_SECTION)

    def _read_float(self, key: str, default: float, minimum: float = 0.0) -> float:
        raw = self._settings.value(key, default)
        try:
            value = float(raw)
        except (TypeError, ValueError):
            log.warning(f"Invalid value for setting '{key}': {raw!r}, using default {default}")
            return default
        if value <= minimum:
            log.warning(f"Out of range value for setting '{key}': {value}, using default {default}")
            return default
        return value

    def _write(self, key: str, value) -> None:
        self._settings.setValue(key, value)
        self._settings.sync()
        log.debug(f"Setting updated: {key} = {value}")

    @property
    def sampling_rate(self) -> float:
        return self._read_float(_KEY_SAMPLING_RATE, DEFAULT_SAMPLING_RATE)

    @sampling_rate.setter
    def sampling_rate(self, value: float) -> None:
        self._write(_KEY_SAMPLING_RATE, float(value))

    @property
    def max_frequency(self) -> float:
        return self._read_float(_KEY_MAX_FREQUENCY, DEFAULT_MAX_FREQUENCY)

    @max_frequency.setter
    def max_frequency(self, value: float) -> None:
        self._write(_KEY_MAX_FREQUENCY, float(value))

    @property
    def alpha_cap(self) -> float:
        """Upper clamp for the smoothing coefficient of lowpass-derived stages."""
        cap = self._read_float(_KEY_ALPHA_CAP, DEFAULT_ALPHA_CAP)
        if cap >= 1.0:
            log.warning(f"alpha_cap must be < 1, got {cap}; using default {DEFAULT_ALPHA_CAP}")
            return DEFAULT_ALPHA_CAP
        return cap

    @alpha_cap.setter
    def alpha_cap(self, value: float) -> None:
        self._write(_KEY_ALPHA_CAP, float(value))

    @property
    def max_dft_samples(self) -> int:
        return int(self._read_float(_KEY_DFT_CEILING, float(MAX_DFT_SAMPLES)))

    @max_dft_samples.setter
    def max_dft_samples(self, value: int) -> None:
        self._write(_KEY_DFT_CEILING, int(value))

    @property
    def last_pipeline_path(self) -> Optional[Path]:
        value = self._settings.value(_KEY_LAST_PIPELINE, "")
        return Path(value) if value else None

    @last_pipeline_path.setter
    def last_pipeline_path(self, path: Optional[Union[str, Path]]) -> None:
        self._write(_KEY_LAST_PIPELINE, str(path) if path else "")

    def reset(self) -> None:
        """Remove every stored preference."""
        self._settings.clear()
        self._settings.sync()
        log.debug("Preferences reset to defaults")


__all__ = ["PipelineSettings"]
