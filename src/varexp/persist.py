"""
persist.py
-----

Saving and loading stores

A MatrixStore is written as a zarr group:

    /features/ids               feature identifiers
    /samples/ids                sample identifiers
    /feature_metadata/<i>       one array per column, attrs: name, dtype
    /feature_metadata/<i>_isna  missing-value mask of a non-numeric column
    /sample_metadata/<i>        as for feature_metadata
    /assays/<i>                 one array per assay, attrs: name

Names are kept in attributes so that any column or assay name can be
stored. `serialize` packs the same layout into an in-memory zip archive.

"""

from __future__ import annotations

import io
import logging
import zipfile
from typing import MutableMapping, Union

import numpy as np
import pandas as pd
import zarr
from numcodecs.compat import ensure_bytes
from yaspin import yaspin

from varexp.axis import Axis
from varexp.errors import PersistenceError
from varexp.metadata import MetadataTable
from varexp.store import MatrixStore

log = logging.getLogger(__name__)

STORE_FORMAT = "varexp.MatrixStore"
FORMAT_VERSION = 1

StoreLike = Union[str, MutableMapping]


def _describe(path: StoreLike) -> str:
    return repr(path) if isinstance(path, str) else type(path).__name__


def _string_array(values) -> np.ndarray:
    arr = np.asarray(values, dtype=object).astype(str)
    if arr.size == 0:
        arr = arr.astype("<U1")
    return arr


def _close(root) -> None:
    if hasattr(root.store, "close"):
        root.store.close()


def _write_table(group, table: MetadataTable) -> None:
    frame = table.to_frame()
    for i, name in enumerate(frame.columns):
        column = frame[name]
        attrs = {"name": str(name), "dtype": str(column.dtype)}
        if isinstance(column.dtype, np.dtype) and column.dtype.kind in "biuf":
            data = column.to_numpy()
        else:
            # Strings cannot hold NA; keep a mask beside the values.
            isna = column.isna().to_numpy(dtype=bool)
            data = _string_array(column.to_numpy())
            data[isna] = ""
            if isna.any():
                group.create_dataset(f"{i}_isna", data=isna)
            if isinstance(column.dtype, pd.CategoricalDtype):
                attrs["categories"] = [str(c) for c in column.cat.categories]
                attrs["ordered"] = bool(column.cat.ordered)
        arr = group.create_dataset(str(i), data=data)
        arr.attrs.update(attrs)
    group.attrs.update({"n_rows": len(table), "n_columns": len(frame.columns)})


def _read_table(group) -> MetadataTable:
    table = MetadataTable(int(group.attrs["n_rows"]))
    for i in range(int(group.attrs["n_columns"])):
        arr = group[str(i)]
        attrs = arr.attrs.asdict()
        if "categories" in attrs:
            dtype = pd.CategoricalDtype(attrs["categories"], ordered=attrs["ordered"])
        else:
            dtype = attrs["dtype"]

        if f"{i}_isna" in group:
            values = pd.Series(arr[:], dtype=object)
            values[group[f"{i}_isna"][:]] = np.nan
        else:
            values = pd.Series(arr[:])
        table.set_column(attrs["name"], values.astype(dtype))
    return table


@yaspin(text="Writing store...")
def write_zarr(store: MatrixStore, path: StoreLike) -> None:
    """
    Write `store` to a zarr group at `path`, replacing anything there.

    Parameters
    ----------
    store : MatrixStore
        The store to save.
    path : str or MutableMapping
        Directory path, '.zip' path, or any zarr-compatible mapping.
    """
    root = zarr.open_group(store=path, mode="w")
    try:
        root.attrs.update({"format": STORE_FORMAT, "version": FORMAT_VERSION})

        root.create_group("features").create_dataset("ids", data=_string_array(store.feature_axis.identifiers))
        root.create_group("samples").create_dataset("ids", data=_string_array(store.sample_axis.identifiers))

        _write_table(root.create_group("feature_metadata"), store.feature_metadata)
        _write_table(root.create_group("sample_metadata"), store.sample_metadata)

        assays = root.create_group("assays")
        for i, name in enumerate(store.assay_names):
            arr = assays.create_dataset(str(i), data=store.get_assay(name))
            arr.attrs["name"] = name
        assays.attrs["n_assays"] = len(store.assay_names)
    finally:
        _close(root)
    log.info("Wrote %d x %d store to %s", *store.shape, _describe(path))


def read_zarr(path: StoreLike) -> MatrixStore:
    """
    Read a store written by `write_zarr`.

    Raises
    ------
    PersistenceError
        If the group at `path` is not a saved MatrixStore.
    """
    try:
        root = zarr.open_group(store=path, mode="r")
    except zarr.errors.GroupNotFoundError as err:
        raise PersistenceError(details=f"no zarr group at {_describe(path)}") from err

    try:
        if root.attrs.get("format") != STORE_FORMAT:
            raise PersistenceError(details=f"{_describe(path)} does not hold a {STORE_FORMAT}")
        if root.attrs.get("version") != FORMAT_VERSION:
            raise PersistenceError(details=f"unsupported format version {root.attrs.get('version')}")

        feature_axis = Axis(root["features/ids"][:].tolist(), name="features")
        sample_axis = Axis(root["samples/ids"][:].tolist(), name="samples")

        group = root["assays"]
        assays = {}
        for i in range(int(group.attrs["n_assays"])):
            arr = group[str(i)]
            assays[arr.attrs["name"]] = arr[:]

        feature_metadata = _read_table(root["feature_metadata"])
        sample_metadata = _read_table(root["sample_metadata"])
    finally:
        _close(root)

    store = MatrixStore(
        feature_axis,
        sample_axis,
        assays,
        feature_metadata=feature_metadata,
        sample_metadata=sample_metadata,
    )
    log.info("Read %d x %d store", *store.shape)
    return store


def serialize(store: MatrixStore) -> bytes:
    """Pack `store` into bytes: its zarr layout inside a zip archive."""
    mapping: dict = {}
    write_zarr(store, mapping)
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, mode="w", compression=zipfile.ZIP_STORED) as zf:
        for key in sorted(mapping):
            zf.writestr(key, ensure_bytes(mapping[key]))
    return buffer.getvalue()


def deserialize(blob: bytes) -> MatrixStore:
    """Rebuild a store from the output of `serialize`."""
    try:
        with zipfile.ZipFile(io.BytesIO(blob)) as zf:
            mapping = {name: zf.read(name) for name in zf.namelist()}
    except zipfile.BadZipFile as err:
        raise PersistenceError(details="not a serialized store") from err
    if not mapping:
        raise PersistenceError(details="serialized store is empty")
    return read_zarr(mapping)
