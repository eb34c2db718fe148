# -*- coding: utf-8 -*-
"""
Sigflow: filter pipeline and spectral analysis for tabular time-series recordings.

This package loads multi-channel biosignal tables, applies a reorderable chain
of simplified digital filters and estimates magnitude / power spectra of the
result.
"""

__version__ = "0.1.0"
__license__ = "AGPL-3.0-or-later"

__all__ = ["__version__", "__license__"]
