# src/Sigflow/infrastructure/file_readers/demo_source.py
# -*- coding: utf-8 -*-
"""
Synthetic EEG-like demo recording.

Two channels sampled at 250 Hz for 10 s: an alpha (10 Hz) plus beta (20 Hz)
mixture and an 8 Hz plus 15 Hz mixture, each with uniform noise. Randomness
stays here; the processing core itself is deterministic.
"""
import logging
from typing import Optional

import numpy as np

from Sigflow.core.data_model import Channel, Dataset, SampleBuffer
from Sigflow.shared.constants import DEFAULT_SAMPLING_RATE

log = logging.getLogger(__name__)

DEMO_LABEL = "Demo EEG Data"
DEMO_DURATION = 10.0  # seconds


def generate_demo_dataset(
    sampling_rate: float = DEFAULT_SAMPLING_RATE,
    duration: float = DEMO_DURATION,
    noise_amplitude: float = 3.0,
    seed: Optional[int] = None,
) -> Dataset:
    """Create the demo Dataset ('timestamp', 'ch1', 'ch2')."""
    rng = np.random.default_rng(seed)
    n_samples = int(round(sampling_rate * duration))
    t = np.arange(n_samples) / sampling_rate

    ch1 = (
        10 * np.sin(2 * np.pi * 10 * t)
        + 5 * np.sin(2 * np.pi * 20 * t)
        + noise_amplitude * (rng.random(n_samples) - 0.5)
    )
    ch2 = (
        8 * np.sin(2 * np.pi * 8 * t + 0.5)
        + 6 * np.sin(2 * np.pi * 15 * t)
        + noise_amplitude * (rng.random(n_samples) - 0.5)
    )

    dataset = Dataset(source=DEMO_LABEL, sampling_rate=sampling_rate, time_column="timestamp")
    dataset.add_channel(Channel("ch1", SampleBuffer(t, ch1), units="uV"))
    dataset.add_channel(Channel("ch2", SampleBuffer(t, ch2), units="uV"))
    log.debug(f"Generated demo dataset: {n_samples} samples at {sampling_rate} Hz")
    return dataset
