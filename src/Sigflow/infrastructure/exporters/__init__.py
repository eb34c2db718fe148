# -*- coding: utf-8 -*-
"""
Exporters Submodule for Sigflow Infrastructure.

Contains the writers that turn processed data and pipelines into files
(CSV tables, standalone SciPy scripts).
"""

from .csv_exporter import CSVExporter
from .script_exporter import generate_script, export_script

__all__ = [
    "CSVExporter",
    "generate_script",
    "export_script",
]
