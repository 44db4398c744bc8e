"""
store.py
-----

Matrix store

MatrixStore composes a feature axis, a sample axis, one metadata table per
axis and a collection of assays, and keeps them aligned. Metadata is
attached in place; subsetting is functional and returns an independent
store in which axes, metadata and every assay were re-indexed together.

Examples
--------
>>> store = MatrixStore(["v1", "v2", "v3"], ["s1", "s2"],
...                     assays={"GT": [[0, 1], [1, 1], [0, 0]]})
>>> store.feature_metadata.set_column("VOC1", [False, True, True])
>>> voc = store.subset(store.feature_metadata.get_column("VOC1"))
>>> voc.feature_axis.identifiers
['v2', 'v3']

"""

from __future__ import annotations

import logging
from typing import Mapping, Union

import numpy as np
import pandas as pd

from varexp.assays import AssayCollection
from varexp.axis import Axis
from varexp.errors import LengthMismatchError
from varexp.metadata import MetadataTable
from varexp.selectors import ALL, resolve_selector

log = logging.getLogger(__name__)

TableLike = Union[MetadataTable, pd.DataFrame]


def _as_axis(axis, name: str) -> Axis:
    if isinstance(axis, Axis):
        return axis
    return Axis(axis, name=name)


def _as_table(table: TableLike) -> MetadataTable:
    if isinstance(table, pd.DataFrame):
        return MetadataTable.from_frame(table)
    return table.copy()


class MatrixStore:
    """
    Synchronized annotated matrix of variant calls.

    Parameters
    ----------
    feature_axis : Axis or sequence of str
        Feature (variant locus) identifiers.
    sample_axis : Axis or sequence of str
        Sample identifiers.
    assays : mapping of str to 2-D array, optional
        Initial assays, each of shape (n_features, n_samples).
    feature_metadata, sample_metadata : MetadataTable or DataFrame, optional
        Initial annotations. Empty tables are created when omitted.

    Raises
    ------
    DuplicateIdentifierError
        If an axis repeats an identifier.
    ShapeMismatchError
        If an assay does not have shape (n_features, n_samples).
    LengthMismatchError
        If a metadata table does not match its axis.
    """

    def __init__(
        self,
        feature_axis,
        sample_axis,
        assays: Mapping[str, np.ndarray] | None = None,
        feature_metadata: TableLike | None = None,
        sample_metadata: TableLike | None = None,
    ):
        self._feature_axis = _as_axis(feature_axis, "features")
        self._sample_axis = _as_axis(sample_axis, "samples")
        self._assays = AssayCollection(self.shape, assays)
        self._feature_metadata = MetadataTable(self.n_features)
        self._sample_metadata = MetadataTable(self.n_samples)
        if feature_metadata is not None:
            self.attach_feature_metadata(feature_metadata)
        if sample_metadata is not None:
            self.attach_sample_metadata(sample_metadata)

    @classmethod
    def _from_parts(cls, feature_axis, sample_axis, assays, feature_metadata, sample_metadata):
        # Parts are already validated and owned by the new store.
        store = cls.__new__(cls)
        store._feature_axis = feature_axis
        store._sample_axis = sample_axis
        store._assays = assays
        store._feature_metadata = feature_metadata
        store._sample_metadata = sample_metadata
        return store

    # Introspection

    @property
    def feature_axis(self) -> Axis:
        return self._feature_axis

    @property
    def sample_axis(self) -> Axis:
        return self._sample_axis

    @property
    def feature_metadata(self) -> MetadataTable:
        """Feature annotations. Columns may be set in place."""
        return self._feature_metadata

    @property
    def sample_metadata(self) -> MetadataTable:
        """Sample annotations. Columns may be set in place."""
        return self._sample_metadata

    @property
    def n_features(self) -> int:
        return len(self._feature_axis)

    @property
    def n_samples(self) -> int:
        return len(self._sample_axis)

    @property
    def shape(self) -> tuple[int, int]:
        return (self.n_features, self.n_samples)

    @property
    def assay_names(self) -> list[str]:
        return self._assays.names

    def __repr__(self) -> str:
        return (
            f"MatrixStore({self.n_features} features x {self.n_samples} samples)\n"
            f"  assays: {self.assay_names}\n"
            f"  feature metadata: {self._feature_metadata.columns}\n"
            f"  sample metadata: {self._sample_metadata.columns}"
        )

    # Assays

    def get_assay(self, name: str) -> np.ndarray:
        """Return assay `name` as a read-only array."""
        return self._assays.get_assay(name)

    def set_assay(self, name: str, array) -> None:
        self._assays.set_assay(name, array)

    def remove_assay(self, name: str) -> None:
        self._assays.remove_assay(name)

    # Metadata

    def attach_feature_metadata(self, table: TableLike) -> None:
        """Replace the feature annotations with a copy of `table`."""
        self._feature_metadata = self._checked_table(table, self.n_features, "feature")

    def attach_sample_metadata(self, table: TableLike) -> None:
        """Replace the sample annotations with a copy of `table`."""
        self._sample_metadata = self._checked_table(table, self.n_samples, "sample")

    @staticmethod
    def _checked_table(table: TableLike, length: int, label: str) -> MetadataTable:
        if len(table) != length:
            raise LengthMismatchError(
                f"{label.capitalize()} metadata has {len(table)} rows, "
                f"{label} axis has {length} positions"
            )
        table = _as_table(table)
        log.debug("Attached %s metadata with columns %s", label, table.columns)
        return table

    # Subsetting

    def subset(self, features=ALL, samples=ALL) -> MatrixStore:
        """
        Return a new store restricted and/or reordered along both axes.

        Parameters
        ----------
        features, samples : selector
            ALL, a boolean mask, a list of positions, a slice or a list of
            identifiers. See `varexp.selectors`.

        Returns
        -------
        MatrixStore
            An independent store. This store is left untouched.
        """
        feature_positions = resolve_selector(features, self._feature_axis)
        sample_positions = resolve_selector(samples, self._sample_axis)
        log.debug(
            "Subsetting %s to %d features x %d samples",
            self.shape,
            len(feature_positions),
            len(sample_positions),
        )
        return MatrixStore._from_parts(
            self._feature_axis.select(feature_positions),
            self._sample_axis.select(sample_positions),
            self._assays.select(feature_positions, sample_positions),
            self._feature_metadata.select(feature_positions),
            self._sample_metadata.select(sample_positions),
        )

    def __getitem__(self, key) -> MatrixStore:
        if isinstance(key, tuple):
            if len(key) != 2:
                raise IndexError(f"MatrixStore takes 2 indices, got {len(key)}")
            return self.subset(*key)
        return self.subset(key)

    def copy(self) -> MatrixStore:
        return self.subset()

    def equals(self, other: MatrixStore) -> bool:
        """True if axes, metadata and assays are all identical."""
        return (
            self._feature_axis == other.feature_axis
            and self._sample_axis == other.sample_axis
            and self._feature_metadata.equals(other.feature_metadata)
            and self._sample_metadata.equals(other.sample_metadata)
            and self._assays.equals(other._assays)
        )
