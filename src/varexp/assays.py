"""
assays.py
-----

Assay layer

A named collection of equally shaped 2-D arrays indexed
[feature, sample], e.g. genotype calls ("GT") and read depth ("DP").

"""

from __future__ import annotations

from typing import Iterator, Mapping, Sequence

import numpy as np

from varexp.axis import check_positions
from varexp.errors import AssayNotFoundError, ShapeMismatchError


def select_assay(
    array: np.ndarray,
    feature_positions: Sequence[int],
    sample_positions: Sequence[int],
) -> np.ndarray:
    """
    Re-index an assay on both axes at once.

    Returns a new array with ``out[i, j] == array[feature_positions[i],
    sample_positions[j]]``. Both position lists keep their given order.
    """
    feature_positions = check_positions(feature_positions, array.shape[0])
    sample_positions = check_positions(sample_positions, array.shape[1])
    return array[np.ix_(feature_positions, sample_positions)]


class AssayCollection:
    """Named 2-D arrays sharing one (n_features, n_samples) shape."""

    def __init__(self, shape: tuple[int, int], assays: Mapping[str, np.ndarray] | None = None):
        self._shape = (int(shape[0]), int(shape[1]))
        self._assays: dict[str, np.ndarray] = {}
        for name, array in (assays or {}).items():
            self.set_assay(name, array)

    @property
    def shape(self) -> tuple[int, int]:
        return self._shape

    @property
    def names(self) -> list[str]:
        return list(self._assays)

    def __len__(self) -> int:
        return len(self._assays)

    def __contains__(self, name) -> bool:
        return name in self._assays

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._assays))

    def __repr__(self) -> str:
        return f"AssayCollection(shape={self._shape}, names={self.names})"

    def set_assay(self, name: str, array) -> None:
        """
        Add or replace an assay.

        The array is copied and marked read-only so that no caller can
        modify the stored values afterwards.

        Raises
        ------
        ShapeMismatchError
            If the array is not 2-D with the collection's shape.
        TypeError
            If the array is not numeric or boolean.
        """
        arr = np.array(array, copy=True)
        if arr.shape != self._shape:
            raise ShapeMismatchError(
                f"Assay '{name}' has shape {arr.shape}, expected {self._shape}"
            )
        if arr.dtype.kind not in "biuf":
            raise TypeError(f"Assay '{name}' must be numeric, got dtype {arr.dtype}")
        arr.flags.writeable = False
        self._assays[name] = arr

    def get_assay(self, name: str) -> np.ndarray:
        try:
            return self._assays[name]
        except KeyError:
            raise AssayNotFoundError(details=name) from None

    def remove_assay(self, name: str) -> None:
        if name not in self._assays:
            raise AssayNotFoundError(details=name)
        del self._assays[name]

    def select(
        self, feature_positions: Sequence[int], sample_positions: Sequence[int]
    ) -> AssayCollection:
        """Apply `select_assay` to every assay, returning a new collection."""
        feature_positions = check_positions(feature_positions, self._shape[0])
        sample_positions = check_positions(sample_positions, self._shape[1])
        shape = (len(feature_positions), len(sample_positions))
        return AssayCollection(
            shape,
            {
                name: select_assay(arr, feature_positions, sample_positions)
                for name, arr in self._assays.items()
            },
        )

    def equals(self, other: AssayCollection) -> bool:
        if self._shape != other.shape or self.names != other.names:
            return False
        return all(
            arr.dtype == other.get_assay(name).dtype
            and np.array_equal(arr, other.get_assay(name), equal_nan=arr.dtype.kind == "f")
            for name, arr in self._assays.items()
        )
