# src/Sigflow/core/filter_stages.py
# -*- coding: utf-8 -*-
"""
Filter stage definitions.

Each stage kind carries its own frozen parameter dataclass whose field
defaults are the kind's default parameters. The string-keyed parameter
mapping only exists at the serialization boundary (``params_from_mapping`` /
``params_to_mapping``); everything inside the pipeline works on the typed
dataclasses.
"""
import dataclasses
import logging
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Tuple, Type, Union

from Sigflow.shared.error_handling import ConfigurationError

log = logging.getLogger('Sigflow.core.filter_stages')


class StageKind(Enum):
    """Transform kinds a pipeline stage can apply."""

    DETREND = "detrend"
    NORMALIZE = "normalize"
    STANDARDIZE = "standardize"
    LOWPASS = "lowpass"
    HIGHPASS = "highpass"
    BANDPASS = "bandpass"
    BANDSTOP = "bandstop"
    SAVGOL = "savgol"
    MEDIAN = "median"
    NOTCH = "notch"
    MOVING_AVERAGE = "moving_average"


# Kind names written by older pipeline files
LEGACY_KIND_ALIASES = {
    "butterworth_lowpass": StageKind.LOWPASS,
    "butterworth_highpass": StageKind.HIGHPASS,
    "butterworth_bandpass": StageKind.BANDPASS,
    "butterworth_bandstop": StageKind.BANDSTOP,
}

DISPLAY_NAMES = {
    StageKind.DETREND: "Detrend",
    StageKind.NORMALIZE: "Normalize (0-1)",
    StageKind.STANDARDIZE: "Standardize (Z-score)",
    StageKind.LOWPASS: "Butterworth Lowpass",
    StageKind.HIGHPASS: "Butterworth Highpass",
    StageKind.BANDPASS: "Butterworth Bandpass",
    StageKind.BANDSTOP: "Butterworth Bandstop",
    StageKind.SAVGOL: "Savitzky-Golay",
    StageKind.MEDIAN: "Median Filter",
    StageKind.NOTCH: "Notch Filter",
    StageKind.MOVING_AVERAGE: "Moving Average",
}


# --- Parameter structs, one per kind ---

@dataclass(frozen=True)
class DetrendParams:
    pass


@dataclass(frozen=True)
class NormalizeParams:
    pass


@dataclass(frozen=True)
class StandardizeParams:
    pass


@dataclass(frozen=True)
class LowpassParams:
    cutoff: float = 50.0
    order: float = 4.0  # accepted for compatibility, the smoothing filter is single-pole


@dataclass(frozen=True)
class HighpassParams:
    cutoff: float = 1.0
    order: float = 4.0


@dataclass(frozen=True)
class BandpassParams:
    low: float = 1.0
    high: float = 50.0
    order: float = 4.0


@dataclass(frozen=True)
class BandstopParams:
    low: float = 48.0
    high: float = 52.0
    order: float = 4.0


@dataclass(frozen=True)
class SavgolParams:
    window: float = 11.0
    polyorder: float = 3.0  # unused by the moving-average approximation


@dataclass(frozen=True)
class MedianParams:
    kernel: float = 5.0


@dataclass(frozen=True)
class NotchParams:
    frequency: float = 50.0
    quality: float = 30.0


@dataclass(frozen=True)
class MovingAverageParams:
    window: float = 5.0


StageParams = Union[
    DetrendParams, NormalizeParams, StandardizeParams, LowpassParams, HighpassParams,
    BandpassParams, BandstopParams, SavgolParams, MedianParams, NotchParams, MovingAverageParams,
]

PARAMS_BY_KIND: Dict[StageKind, Type] = {
    StageKind.DETREND: DetrendParams,
    StageKind.NORMALIZE: NormalizeParams,
    StageKind.STANDARDIZE: StandardizeParams,
    StageKind.LOWPASS: LowpassParams,
    StageKind.HIGHPASS: HighpassParams,
    StageKind.BANDPASS: BandpassParams,
    StageKind.BANDSTOP: BandstopParams,
    StageKind.SAVGOL: SavgolParams,
    StageKind.MEDIAN: MedianParams,
    StageKind.NOTCH: NotchParams,
    StageKind.MOVING_AVERAGE: MovingAverageParams,
}


def parse_kind(kind: Union[str, StageKind]) -> StageKind:
    """Resolve a kind name (including legacy ``butterworth_*`` names)."""
    if isinstance(kind, StageKind):
        return kind
    if kind in LEGACY_KIND_ALIASES:
        return LEGACY_KIND_ALIASES[kind]
    try:
        return StageKind(kind)
    except ValueError:
        valid = [k.value for k in StageKind]
        raise ConfigurationError(f"Unknown filter kind '{kind}'. Valid kinds: {valid}") from None


def declared_params(kind: Union[str, StageKind]) -> Tuple[str, ...]:
    """Parameter names the kind declares, in declaration order."""
    return tuple(f.name for f in dataclasses.fields(PARAMS_BY_KIND[parse_kind(kind)]))


def default_params(kind: Union[str, StageKind]) -> StageParams:
    return PARAMS_BY_KIND[parse_kind(kind)]()


def _coerce_value(kind: StageKind, name: str, value: Any) -> float:
    if isinstance(value, bool):
        raise ConfigurationError(f"Parameter '{name}' of '{kind.value}' must be numeric, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(
            f"Parameter '{name}' of '{kind.value}' must be numeric, got {value!r}"
        ) from None


def params_from_mapping(kind: Union[str, StageKind], mapping: Mapping[str, Any]) -> StageParams:
    """
    Build the typed parameters of ``kind`` from a string-keyed mapping.

    The mapping must contain exactly the declared parameter names.
    """
    kind = parse_kind(kind)
    if mapping is None:
        mapping = {}
    if not isinstance(mapping, Mapping):
        raise ConfigurationError(f"Parameters of '{kind.value}' must be a mapping, got {type(mapping).__name__}")

    declared = set(declared_params(kind))
    given = set(mapping.keys())
    unknown = given - declared
    missing = declared - given
    if unknown:
        raise ConfigurationError(f"Unknown parameter(s) {sorted(unknown)} for filter kind '{kind.value}'")
    if missing:
        raise ConfigurationError(f"Missing parameter(s) {sorted(missing)} for filter kind '{kind.value}'")

    values = {name: _coerce_value(kind, name, mapping[name]) for name in declared}
    return PARAMS_BY_KIND[kind](**values)


def params_to_mapping(params: StageParams) -> Dict[str, float]:
    return dataclasses.asdict(params)


def _new_stage_id() -> str:
    return uuid.uuid4().hex


@dataclass
class FilterStage:
    """
    One entry of a filter chain.

    ``id`` is stable for the lifetime of the stage so a selection survives
    reordering.
    """

    kind: StageKind
    params: StageParams
    enabled: bool = True
    id: str = field(default_factory=_new_stage_id)

    def __post_init__(self):
        self.kind = parse_kind(self.kind)
        expected = PARAMS_BY_KIND[self.kind]
        if not isinstance(self.params, expected):
            raise ConfigurationError(
                f"Stage '{self.kind.value}' requires {expected.__name__}, got {type(self.params).__name__}"
            )

    @classmethod
    def create(cls, kind: Union[str, StageKind], **overrides: Any) -> "FilterStage":
        """Create a stage with default parameters, optionally overriding some of them."""
        kind = parse_kind(kind)
        stage = cls(kind=kind, params=default_params(kind))
        for name, value in overrides.items():
            stage = stage.with_param(name, value)
        return stage

    @property
    def name(self) -> str:
        return DISPLAY_NAMES[self.kind]

    def with_param(self, name: str, value: Any) -> "FilterStage":
        """Return a copy of this stage (same id) with one parameter changed."""
        if name not in declared_params(self.kind):
            raise ConfigurationError(
                f"Parameter '{name}' is not declared for filter kind '{self.kind.value}'. "
                f"Declared: {list(declared_params(self.kind))}"
            )
        new_params = dataclasses.replace(self.params, **{name: _coerce_value(self.kind, name, value)})
        return dataclasses.replace(self, params=new_params)

    def copy(self) -> "FilterStage":
        return dataclasses.replace(self)

    def describe(self) -> str:
        """Short human readable summary, e.g. 'Median Filter (kernel: 5.00)'."""
        values = params_to_mapping(self.params)
        if not values:
            return self.name
        param_str = ", ".join(f"{k}: {v:.2f}" for k, v in values.items())
        return f"{self.name} ({param_str})"
