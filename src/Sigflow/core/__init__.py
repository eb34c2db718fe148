"""
Sigflow core: data model, filter stages, filter chain and spectral estimation.

Nothing in this sub-package touches files or the GUI toolkit.
"""
from .data_model import SampleBuffer, Channel, Dataset
from .filter_stages import FilterStage, StageKind
from .processing_pipeline import FilterChain
from .results import SpectralResult
from .spectral import compute_spectrum, compute_psd, limit_frequency

__all__ = [
    'SampleBuffer',
    'Channel',
    'Dataset',
    'FilterStage',
    'StageKind',
    'FilterChain',
    'SpectralResult',
    'compute_spectrum',
    'compute_psd',
    'limit_frequency',
]
