# -*- coding: utf-8 -*-
"""Shared constants for the Sigflow application."""

# Settings identity (QSettings organisation / application)
APP_NAME = "Sigflow"
SETTINGS_SECTION = "Preferences"

# Acquisition defaults
DEFAULT_SAMPLING_RATE = 250.0  # Hz, used when neither file nor user supplies one
DEFAULT_MAX_FREQUENCY = 100.0  # Hz, upper bound of displayed spectra
DEFAULT_TIME_WINDOW = 10.0     # seconds shown initially

# Single-pole smoothing: alpha = min(cap, cutoff / nyquist)
DEFAULT_ALPHA_CAP = 0.95

# Spectral estimation
PSD_EPSILON = 1e-10
MAX_DFT_SAMPLES = 20000  # direct DFT is O(N^2); beyond this it stalls an interactive session

# Export
CSV_PRECISION = 6
PROCESSED_CSV_TEMPLATE = "processed_{channel}.csv"
PIPELINE_FILE_NAME = "pipeline_config.json"
SCRIPT_FILE_NAME = "pipeline_code.py"

# Index window pan/zoom
ZOOM_STEP = 0.2
MIN_WINDOW_SPAN = 0.001

# Column name fragments used to auto-detect the time column of a table
TIME_COLUMN_HINTS = ("time", "timestamp")

__all__ = [
    'APP_NAME',
    'SETTINGS_SECTION',
    'DEFAULT_SAMPLING_RATE',
    'DEFAULT_MAX_FREQUENCY',
    'DEFAULT_TIME_WINDOW',
    'DEFAULT_ALPHA_CAP',
    'PSD_EPSILON',
    'MAX_DFT_SAMPLES',
    'CSV_PRECISION',
    'PROCESSED_CSV_TEMPLATE',
    'PIPELINE_FILE_NAME',
    'SCRIPT_FILE_NAME',
    'ZOOM_STEP',
    'MIN_WINDOW_SPAN',
    'TIME_COLUMN_HINTS',
]
