"""
Custom Exception classes for Sigflow.

This module defines a hierarchy of exception classes specific to Sigflow.
All custom exceptions inherit from the base SigflowError class, which
itself inherits from Python's Exception class.

Only structurally invalid configuration is fatal for the pipeline; numeric
problems inside a filter stage are handled locally by the stage and the
chain, never raised through these classes.
"""


class SigflowError(Exception):
    """Base class for Sigflow specific errors."""

    pass


class ConfigurationError(SigflowError, ValueError):
    """Invalid pipeline configuration (unknown kind, undeclared parameter, bad document)."""

    pass


class ProcessingError(SigflowError):
    """Error occurred during signal processing or spectral estimation."""

    pass


class RangeNotFoundError(SigflowError, LookupError):
    """Requested time window lies outside the available data."""

    pass


class DataError(SigflowError, ValueError):
    """Sample data violates a structural invariant (length mismatch, non-monotonic time)."""

    pass


class FileReadError(SigflowError, IOError):
    """Error occurred during file reading or parsing."""

    pass


class ExportError(SigflowError, IOError):
    """Error occurred during file saving/exporting."""

    pass
