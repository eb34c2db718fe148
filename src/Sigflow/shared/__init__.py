"""
Shared utilities for the Sigflow application.

This module contains:
- Constants and defaults
- Logging configuration
- Error handling classes
- Persistent preferences
"""

from . import constants
from . import error_handling
from . import logging_config

from .error_handling import (
    SigflowError,
    ConfigurationError,
    ProcessingError,
    RangeNotFoundError,
    DataError,
    FileReadError,
    ExportError,
)
from .logging_config import setup_logging

__all__ = [
    'constants',
    'error_handling',
    'logging_config',
    'SigflowError',
    'ConfigurationError',
    'ProcessingError',
    'RangeNotFoundError',
    'DataError',
    'FileReadError',
    'ExportError',
    'setup_logging',
]
