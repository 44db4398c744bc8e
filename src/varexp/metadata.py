"""
metadata.py
-----

Metadata tables

A MetadataTable maps column names to typed columns (boolean, numeric or
string) that are aligned positionally to one axis of a matrix store. Row i
of every column describes the identifier at position i of the axis.

"""

from __future__ import annotations

from typing import Mapping, Sequence

import numpy as np
import pandas as pd

from varexp.axis import check_positions
from varexp.errors import ColumnNotFoundError, LengthMismatchError


class MetadataTable:
    """
    Column-oriented annotations for one axis.

    Parameters
    ----------
    length : int
        Number of rows, i.e. the length of the axis the table annotates.
    columns : mapping of str to sequence, optional
        Initial columns. Each must have exactly `length` values.
    """

    def __init__(self, length: int, columns: Mapping[str, Sequence] | None = None):
        self._frame = pd.DataFrame(index=pd.RangeIndex(length))
        for name, values in (columns or {}).items():
            self.set_column(name, values)

    @classmethod
    def from_frame(cls, frame: pd.DataFrame) -> MetadataTable:
        """Build a table from a DataFrame, taking rows by position."""
        table = cls(len(frame))
        table._frame = frame.reset_index(drop=True).copy()
        return table

    def __len__(self) -> int:
        return len(self._frame)

    def __contains__(self, name) -> bool:
        return name in self._frame.columns

    def __repr__(self) -> str:
        return f"MetadataTable(n={len(self)}, columns={self.columns})"

    @property
    def columns(self) -> list[str]:
        return self._frame.columns.tolist()

    def set_column(self, name: str, values: Sequence) -> None:
        """
        Add or overwrite a column.

        A pandas Series is taken by position; its index is ignored.

        Raises
        ------
        LengthMismatchError
            If `values` does not have one value per row.
        """
        column = pd.Series(values, copy=True).reset_index(drop=True)
        if len(column) != len(self):
            raise LengthMismatchError(
                f"Column '{name}' has {len(column)} values, table has {len(self)} rows"
            )
        self._frame[name] = column

    def get_column(self, name: str) -> pd.Series:
        """Return a copy of column `name`."""
        if name not in self:
            raise ColumnNotFoundError(details=name)
        return self._frame[name].copy()

    def remove_column(self, name: str) -> None:
        if name not in self:
            raise ColumnNotFoundError(details=name)
        self._frame = self._frame.drop(columns=[name])

    def positions_where(self, name: str) -> np.ndarray:
        """
        Convert a boolean column to the positions where it is True.

        Raises
        ------
        TypeError
            If the column is not boolean.
        """
        column = self.get_column(name)
        if not pd.api.types.is_bool_dtype(column):
            raise TypeError(f"Column '{name}' is not boolean (dtype {column.dtype})")
        return np.flatnonzero(column.to_numpy(dtype=bool))

    def select(self, positions: Sequence[int]) -> MetadataTable:
        """Return a new table with every column re-indexed at `positions`."""
        positions = check_positions(positions, len(self))
        return MetadataTable.from_frame(self._frame.take(positions))

    def to_frame(self) -> pd.DataFrame:
        return self._frame.copy()

    def copy(self) -> MetadataTable:
        return MetadataTable.from_frame(self._frame)

    def equals(self, other: MetadataTable) -> bool:
        return len(self) == len(other) and self._frame.equals(other._frame)
