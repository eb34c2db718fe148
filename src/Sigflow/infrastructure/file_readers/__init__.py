"""
File Readers Submodule for Sigflow Infrastructure.

Turns external tabular sources into the core Dataset model.
"""
from .csv_reader import read_dataset, dataset_from_frame, detect_time_column
from .demo_source import generate_demo_dataset

__all__ = [
    'read_dataset',
    'dataset_from_frame',
    'detect_time_column',
    'generate_demo_dataset',
]
