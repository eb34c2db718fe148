import os
import sys
from pathlib import Path

import numpy as np
import pytest

# Qt needs a platform plugin even for non-GUI objects; headless runs use offscreen
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

# Make sure src directory is included for imports if running pytest from root
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from Sigflow.infrastructure.file_readers import generate_demo_dataset  # noqa: E402
from Sigflow.shared.settings import PipelineSettings  # noqa: E402


@pytest.fixture
def demo_dataset():
    """Seeded demo recording: 'ch1' (10 + 20 Hz) and 'ch2' (8 + 15 Hz) at 250 Hz for 10 s."""
    return generate_demo_dataset(seed=0)


@pytest.fixture
def settings(tmp_path):
    """Preferences backed by a throwaway INI file instead of the user's store."""
    return PipelineSettings(tmp_path / "preferences.ini")


@pytest.fixture
def make_sine():
    """Factory for (t, signal) pairs of a pure sine."""

    def _make(freq, fs, n_samples, amplitude=1.0, phase=0.0):
        t = np.arange(n_samples) / fs
        return t, amplitude * np.sin(2 * np.pi * freq * t + phase)

    return _make
