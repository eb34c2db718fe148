from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

import numpy as np


@dataclass
class AnalysisResult:
    """Base class for analysis results."""

    value: Any  # Primary result value (array, float, or None if failed)
    unit: str
    is_valid: bool = True
    error_message: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def set_error(self, message: str):
        self.is_valid = False
        self.error_message = message


@dataclass
class SpectralResult(AnalysisResult):
    """
    Frequency-domain series of a signal slice.
    Primary 'value' is the magnitude (kind='magnitude') or dB power (kind='psd')
    array, parallel to 'frequencies'.
    """

    frequencies: np.ndarray = field(default_factory=lambda: np.empty(0))
    kind: str = "magnitude"
    sampling_rate: Optional[float] = None
    n_samples: int = 0

    @classmethod
    def empty(cls, kind: str = "magnitude", message: Optional[str] = None) -> "SpectralResult":
        result = cls(value=np.empty(0), unit="dB" if kind == "psd" else "a.u.", kind=kind)
        if message:
            result.set_error(message)
        return result

    @property
    def magnitudes(self) -> np.ndarray:
        return self.value

    def __len__(self) -> int:
        return len(self.frequencies)

    def peak(self) -> Optional[Tuple[float, float]]:
        """(frequency, value) of the largest bin, ignoring DC."""
        if len(self.frequencies) < 2:
            return None
        idx = int(np.argmax(self.value[1:])) + 1
        return float(self.frequencies[idx]), float(self.value[idx])

    def __repr__(self):
        if self.is_valid:
            return f"SpectralResult(kind={self.kind}, bins={len(self)}, n_samples={self.n_samples})"
        return f"SpectralResult(Error: {self.error_message})"
