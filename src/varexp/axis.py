"""
axis.py
-----

Coordinate index

An Axis is the ordered, uniquely-identified sequence of positions along one
dimension of a matrix store (variant loci on the feature axis, sample names
on the sample axis).

"""

from __future__ import annotations

from typing import Iterable, Iterator, Sequence

import numpy as np
import pandas as pd

from varexp.errors import DuplicateIdentifierError, IndexOutOfRangeError, NotFoundError


def check_positions(positions: Sequence[int], length: int) -> np.ndarray:
    """
    Validate a list of positions against an axis length.

    Parameters
    ----------
    positions : sequence of int
        Positions to validate. Order is kept; no sorting or deduplication.
    length : int
        Length of the axis the positions refer to.

    Returns
    -------
    np.ndarray of dtype intp

    Raises
    ------
    TypeError
        If the positions are not integers.
    IndexOutOfRangeError
        If any position lies outside [0, length).
    """
    arr = np.asarray(positions)
    if arr.size == 0:
        return np.empty(0, dtype=np.intp)
    if arr.ndim != 1:
        raise TypeError(f"Positions must be one-dimensional, got shape {arr.shape}")
    if arr.dtype.kind not in "iu":
        raise TypeError(f"Positions must be integers, got dtype {arr.dtype}")

    bad = arr[(arr < 0) | (arr >= length)]
    if bad.size:
        raise IndexOutOfRangeError(
            f"Positions must lie in [0, {length})", details=bad.tolist()
        )
    return arr.astype(np.intp, copy=False)


class Axis:
    """Ordered sequence of unique string identifiers."""

    def __init__(self, identifiers: Iterable[str], name: str | None = None):
        index = pd.Index([str(i) for i in identifiers], dtype=object, name=name)
        if not index.is_unique:
            dups = index[index.duplicated()].unique().tolist()
            raise DuplicateIdentifierError(details=dups)
        self._index = index

    @property
    def name(self) -> str | None:
        return self._index.name

    @property
    def identifiers(self) -> list[str]:
        return self._index.tolist()

    def __len__(self) -> int:
        return len(self._index)

    def __iter__(self) -> Iterator[str]:
        return iter(self._index.tolist())

    def __contains__(self, identifier) -> bool:
        return identifier in self._index

    def __eq__(self, other) -> bool:
        if not isinstance(other, Axis):
            return NotImplemented
        return self.identifiers == other.identifiers

    def __repr__(self) -> str:
        head = ", ".join(self._index[:3].tolist())
        more = ", ..." if len(self) > 3 else ""
        return f"Axis({self.name!r}, n={len(self)}: [{head}{more}])"

    def position_of(self, identifier: str) -> int:
        """Return the position of `identifier` on this axis."""
        try:
            return int(self._index.get_loc(identifier))
        except KeyError:
            raise NotFoundError(details=identifier) from None

    def positions_of(self, identifiers: Iterable[str]) -> np.ndarray:
        """Return positions for several identifiers, in the order given."""
        identifiers = list(identifiers)
        positions = self._index.get_indexer(identifiers)
        missing = [i for i, p in zip(identifiers, positions) if p < 0]
        if missing:
            raise NotFoundError(details=missing)
        return positions.astype(np.intp)

    def select(self, positions: Sequence[int]) -> Axis:
        """
        Build a new Axis from the identifiers at `positions`.

        Positions need not be sorted, so this both filters and reorders.
        Repeating a position raises DuplicateIdentifierError.
        """
        positions = check_positions(positions, len(self))
        return Axis(self._index.take(positions), name=self.name)
