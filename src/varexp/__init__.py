"""
varexp: a synchronized annotated matrix store for variant calls, with
feature and sample metadata that stay aligned under subsetting.
"""

__version__ = "0.1.0"

from . import io, persist, variants  # convenience imports
from .axis import Axis
from .errors import (
    AlignmentError,
    AssayNotFoundError,
    ColumnNotFoundError,
    DuplicateIdentifierError,
    IndexOutOfRangeError,
    LengthMismatchError,
    NotFoundError,
    PersistenceError,
    ShapeMismatchError,
    VarexpError,
)
from .metadata import MetadataTable
from .selectors import ALL
from .store import MatrixStore

__all__ = [
    "io",
    "persist",
    "variants",
    "ALL",
    "Axis",
    "MatrixStore",
    "MetadataTable",
    "AlignmentError",
    "AssayNotFoundError",
    "ColumnNotFoundError",
    "DuplicateIdentifierError",
    "IndexOutOfRangeError",
    "LengthMismatchError",
    "NotFoundError",
    "PersistenceError",
    "ShapeMismatchError",
    "VarexpError",
]
