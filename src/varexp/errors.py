"""
errors.py
-----

Exception hierarchy

Every error raised by varexp derives from VarexpError. Each kind also
subclasses the closest builtin so that callers can catch KeyError,
IndexError or ValueError as they would for a dict, list or numpy array.

"""

from __future__ import annotations


class VarexpError(Exception):
    """Base exception class for all varexp errors."""

    def __init__(self, message="An error occurred in varexp", details=None):
        self.message = message
        self.details = details
        super().__init__(self.message)

    def __str__(self):
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class DuplicateIdentifierError(VarexpError, ValueError):
    """Raised when an axis is built from non-unique identifiers."""

    def __init__(self, message="Axis identifiers must be unique", details=None):
        super().__init__(message, details)


class NotFoundError(VarexpError, KeyError):
    """Raised when an identifier is not present on an axis."""

    def __init__(self, message="Identifier not found", details=None):
        super().__init__(message, details)


class ColumnNotFoundError(NotFoundError):
    """Raised when a metadata column does not exist."""

    def __init__(self, message="Metadata column not found", details=None):
        super().__init__(message, details)


class AssayNotFoundError(NotFoundError):
    """Raised when an assay does not exist."""

    def __init__(self, message="Assay not found", details=None):
        super().__init__(message, details)


class LengthMismatchError(VarexpError, ValueError):
    """Raised when a column, table or mask length disagrees with its axis."""

    def __init__(self, message="Length does not match axis length", details=None):
        super().__init__(message, details)


class ShapeMismatchError(VarexpError, ValueError):
    """Raised when an assay shape disagrees with the store axes."""

    def __init__(self, message="Assay shape does not match store shape", details=None):
        super().__init__(message, details)


class IndexOutOfRangeError(VarexpError, IndexError):
    """Raised when a position lies outside [0, axis length)."""

    def __init__(self, message="Position out of range", details=None):
        super().__init__(message, details)


class AlignmentError(VarexpError, ValueError):
    """Raised when metadata rows do not line up with the sample axis."""

    def __init__(self, message="Metadata identifiers do not match axis order", details=None):
        super().__init__(message, details)


class PersistenceError(VarexpError):
    """Raised when a saved store cannot be read back."""

    def __init__(self, message="Error reading stored matrix", details=None):
        super().__init__(message, details)
