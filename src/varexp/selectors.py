"""
selectors.py
-----

Selector resolution

A selector says which positions of an axis a subset keeps:

- ALL (also None, "all" or slice(None)) keeps every position;
- a boolean mask with one value per axis position keeps the True positions;
- a sequence of integers keeps those positions, in that order;
- a slice keeps the positions it spans;
- a sequence of identifiers keeps those identifiers, in that order;
- a single integer keeps that one position.

Every selector is resolved to an explicit position array before anything is
sliced, so subsetting has a single code path.

"""

from __future__ import annotations

import numpy as np
import pandas as pd

from varexp.axis import Axis, check_positions
from varexp.errors import LengthMismatchError

ALL = "all"


def _is_all(selector) -> bool:
    if selector is None:
        return True
    if isinstance(selector, str):
        return selector == ALL
    if isinstance(selector, slice):
        return selector == slice(None)
    return False


def resolve_selector(selector, axis: Axis) -> np.ndarray:
    """
    Resolve `selector` to an ordered array of positions on `axis`.

    Raises
    ------
    LengthMismatchError
        If a boolean mask does not have one value per axis position.
    IndexOutOfRangeError
        If an explicit position lies outside the axis.
    NotFoundError
        If an identifier is not on the axis.
    """
    n = len(axis)
    if _is_all(selector):
        return np.arange(n, dtype=np.intp)
    if isinstance(selector, slice):
        return np.arange(n, dtype=np.intp)[selector]
    if isinstance(selector, str):
        # a lone identifier
        return np.array([axis.position_of(selector)], dtype=np.intp)
    if isinstance(selector, (int, np.integer)) and not isinstance(selector, (bool, np.bool_)):
        return check_positions([selector], n)

    if isinstance(selector, (pd.Series, pd.Index)):
        if pd.api.types.is_bool_dtype(selector):
            selector = selector.to_numpy(dtype=bool)
        else:
            selector = selector.to_numpy()
    arr = np.asarray(selector)

    if arr.dtype == bool:
        if arr.ndim != 1 or len(arr) != n:
            raise LengthMismatchError(
                f"Mask has {arr.size} values, axis '{axis.name}' has {n} positions"
            )
        return np.flatnonzero(arr)
    if arr.size and arr.dtype.kind in "OUS":
        return axis.positions_of(arr.tolist())
    return check_positions(arr, n)
