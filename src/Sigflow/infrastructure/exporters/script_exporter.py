# src/Sigflow/infrastructure/exporters/script_exporter.py
# -*- coding: utf-8 -*-
"""
Export a filter chain as a standalone SciPy script.

The script reproduces the chain with textbook SciPy filters (``butter`` +
``filtfilt``, ``savgol_filter``, ``medfilt``, ``iirnotch``) so users can run
the processing outside Sigflow. One stanza is written per enabled stage, in
chain order, with the stage's literal parameter values.
"""
import logging
from pathlib import Path
from typing import Union

from Sigflow.core.filter_stages import FilterStage, StageKind, params_to_mapping
from Sigflow.core.processing_pipeline import FilterChain
from Sigflow.shared.error_handling import ExportError

log = logging.getLogger(__name__)

# Parameters that SciPy requires as integers
_INTEGER_PARAMS = {"order", "window", "polyorder", "kernel"}

STAGE_TEMPLATES = {
    StageKind.DETREND: "data = signal.detrend(data)\n",
    StageKind.NORMALIZE: "data = (data - data.min()) / (data.max() - data.min())\n",
    StageKind.STANDARDIZE: "data = (data - data.mean()) / data.std()\n",
    StageKind.LOWPASS: (
        "b, a = signal.butter({order}, {cutoff}, 'low', fs=sampling_rate)\n"
        "data = signal.filtfilt(b, a, data)\n"
    ),
    StageKind.HIGHPASS: (
        "b, a = signal.butter({order}, {cutoff}, 'high', fs=sampling_rate)\n"
        "data = signal.filtfilt(b, a, data)\n"
    ),
    StageKind.BANDPASS: (
        "b, a = signal.butter({order}, [{low}, {high}], 'bandpass', fs=sampling_rate)\n"
        "data = signal.filtfilt(b, a, data)\n"
    ),
    StageKind.BANDSTOP: (
        "b, a = signal.butter({order}, [{low}, {high}], 'bandstop', fs=sampling_rate)\n"
        "data = signal.filtfilt(b, a, data)\n"
    ),
    StageKind.SAVGOL: "data = signal.savgol_filter(data, {window}, {polyorder})\n",
    StageKind.MEDIAN: "data = signal.medfilt(data, kernel_size={kernel})\n",
    StageKind.NOTCH: (
        "b, a = signal.iirnotch({frequency}, {quality}, sampling_rate)\n"
        "data = signal.filtfilt(b, a, data)\n"
    ),
    StageKind.MOVING_AVERAGE: "data = np.convolve(data, np.ones({window}) / {window}, mode='same')\n",
}


def format_literal(name: str, value: float) -> str:
    """Render a parameter as a Python literal (integers without a trailing .0)."""
    if name in _INTEGER_PARAMS:
        return str(int(value))
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def render_stage(stage: FilterStage) -> str:
    values = {name: format_literal(name, v) for name, v in params_to_mapping(stage.params).items()}
    return STAGE_TEMPLATES[stage.kind].format(**values)


def generate_script(
    chain: FilterChain,
    channel_name: str,
    sampling_rate: float,
    input_file: str = "your_data.csv",
    output_file: str = "processed_data.csv",
) -> str:
    """Build the script text for the enabled stages of ``chain``."""
    lines = [
        "# Generated Python preprocessing pipeline\n",
        "import numpy as np\n",
        "from scipy import signal\n",
        "import pandas as pd\n",
        "\n",
        "# Load data\n",
        f"df = pd.read_csv({input_file!r})\n",
        f"data = df[{channel_name!r}].values\n",
        f"sampling_rate = {format_literal('sampling_rate', sampling_rate)}\n",
        "\n",
        "# Apply preprocessing steps\n",
    ]

    for idx, stage in enumerate(chain.enabled_stages(), start=1):
        lines.append(f"\n# Step {idx}: {stage.name}\n")
        lines.append(render_stage(stage))

    lines.extend([
        "\n# Save processed data\n",
        f"df[{channel_name + '_processed'!r}] = data\n",
        f"df.to_csv({output_file!r}, index=False)\n",
    ])
    return "".join(lines)


def export_script(
    chain: FilterChain,
    output_path: Union[str, Path],
    channel_name: str,
    sampling_rate: float,
) -> Path:
    output_path = Path(output_path)
    text = generate_script(chain, channel_name, sampling_rate)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(text, encoding="utf-8")
    except OSError as e:
        log.error(f"Failed to write pipeline script {output_path}: {e}")
        raise ExportError(f"Could not write {output_path}: {e}") from e
    log.info(f"Exported pipeline script ({len(chain.enabled_stages())} step(s)) to {output_path}")
    return output_path
