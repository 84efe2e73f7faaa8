"""Exception types raised by csv-nest."""

from __future__ import annotations


class CSVNestError(Exception):
    """Base class for csv-nest errors."""


class EmptyBatchError(CSVNestError, ValueError):
    """Raised when a conversion is asked to work on zero records."""


class DecodeError(CSVNestError, TypeError):
    """Raised when nested data cannot be decoded into the target type."""


class CSVReadError(CSVNestError):
    """Raised when CSV rows cannot be read from a file or URL."""
