"""
io.py
-----

input/output utilities

This module converts a VCF into a MatrixStore, either directly or through
an on-disk zarr backing store, and reads sample annotations from delimited
tables, aligned to the sample axis before they are attached.

"""

from __future__ import annotations

import logging

import allel
import numpy as np
import pandas as pd
import zarr
from yaspin import yaspin

from varexp.axis import Axis
from varexp.errors import AlignmentError, ColumnNotFoundError
from varexp.metadata import MetadataTable
from varexp.store import MatrixStore

log = logging.getLogger(__name__)

DEFAULT_FIELDS = [
    "samples",
    "variants/CHROM",
    "variants/POS",
    "variants/ID",
    "variants/REF",
    "variants/ALT",
    "variants/QUAL",
    "calldata/GT",
    "calldata/DP",
]

_MISSING_IDS = ("", ".")


def _feature_ids(callset, alt: list[str]) -> list[str]:
    """Use VCF IDs when every record has a distinct one, otherwise build
    'CHROM:POS_REF/ALT' identifiers."""
    chrom = np.asarray(callset["variants/CHROM"][:]).astype(str)
    pos = np.asarray(callset["variants/POS"][:])
    ref = np.asarray(callset["variants/REF"][:]).astype(str)

    if "variants/ID" in callset:
        ids = np.asarray(callset["variants/ID"][:]).astype(str)
        if not np.isin(ids, _MISSING_IDS).any() and len(set(ids)) == len(ids):
            return ids.tolist()

    return [f"{c}:{p}_{r}/{a}" for c, p, r, a in zip(chrom, pos, ref, alt)]


def _join_alt(alt: np.ndarray) -> list[str]:
    alt = np.asarray(alt).astype(str)
    if alt.ndim == 1:
        alt = alt[:, None]
    return [",".join(a for a in row if a and a != ".") for row in alt]


def _alt_allele_counts(gt: np.ndarray) -> np.ndarray:
    """
    Number of non-reference alleles per call, -1 where no allele was called.

    Haploid calls parsed at a higher ploidy (e.g. '1' read as [1, -1])
    count as called.
    """
    gt = np.asarray(gt)
    if gt.ndim == 2:
        gt = gt[:, :, np.newaxis]
    g = allel.GenotypeArray(gt)
    n_alt = g.to_n_alt()
    n_alt[np.all(g.values < 0, axis=2)] = -1
    return n_alt


@yaspin(text="Importing variant calls...")
def import_vcf(
    path: str,
    zarr_path: str | None = None,
    fields: list[str] | None = None,
    genotype_var: str = "calldata/GT",
    depth_var: str = "calldata/DP",
    ploidy: int = 2,
    alt_number: int = 3,
) -> MatrixStore:
    """
    Load a VCF into a MatrixStore.

    Parameters
    ----------
    path : str
        Path to the input VCF (plain or gzipped).
    zarr_path : str, optional
        If given, the VCF is first converted to a zarr store at this path
        (overwriting it) and loaded from there.
    fields : list of str, optional
        Fields to read. Defaults to DEFAULT_FIELDS.
    genotype_var : str
        Path to the genotype calls. Defaults to 'calldata/GT'.
    depth_var : str
        Path to the read depth. Loaded as the 'DP' assay when present.
    ploidy : int
        Ploidy to parse genotypes at. Defaults to 2; haploid calls are
        counted correctly at this ploidy.
    alt_number : int
        Maximum number of alternate alleles per record.

    Returns
    -------
    MatrixStore
        Feature axis of loci, sample axis of VCF samples, feature metadata
        CHROM/POS/REF/ALT/QUAL, assays 'GT' (alternate allele counts) and
        'DP'.

    Raises
    ------
    ValueError
        If the VCF holds no variant records.
    DuplicateIdentifierError
        If two records produce the same locus identifier.
    """
    fields = list(fields or DEFAULT_FIELDS)
    numbers = {genotype_var: ploidy}

    if zarr_path is not None:
        log.info("Converting %s to zarr store %s", path, zarr_path)
        allel.vcf_to_zarr(
            path,
            zarr_path,
            fields=fields,
            numbers=numbers,
            alt_number=alt_number,
            overwrite=True,
        )
        callset = zarr.open_group(zarr_path, mode="r")
        if "variants" not in callset:
            callset = None
    else:
        log.info("Reading %s", path)
        callset = allel.read_vcf(path, fields=fields, numbers=numbers, alt_number=alt_number)

    if callset is None:
        raise ValueError(f"No variants found in {path}")

    alt = _join_alt(callset["variants/ALT"][:])
    feature_axis = Axis(_feature_ids(callset, alt), name="features")
    sample_axis = Axis(np.asarray(callset["samples"][:]).astype(str), name="samples")

    feature_metadata = MetadataTable(
        len(feature_axis),
        {
            "CHROM": np.asarray(callset["variants/CHROM"][:]).astype(str),
            "POS": np.asarray(callset["variants/POS"][:]),
            "REF": np.asarray(callset["variants/REF"][:]).astype(str),
            "ALT": alt,
        },
    )
    if "variants/QUAL" in callset:
        feature_metadata.set_column("QUAL", np.asarray(callset["variants/QUAL"][:]))

    assays = {"GT": _alt_allele_counts(callset[genotype_var][:])}
    if depth_var in callset:
        assays["DP"] = np.asarray(callset[depth_var][:])

    store = MatrixStore(feature_axis, sample_axis, assays, feature_metadata=feature_metadata)
    log.info("Imported %d variants x %d samples from %s", *store.shape, path)
    return store


def read_sample_table(path: str, sep: str = "\t", **kwargs) -> pd.DataFrame:
    """Read a delimited sample annotation table with pandas."""
    return pd.read_csv(path, sep=sep, **kwargs)


def align_sample_table(frame: pd.DataFrame, id_column: str, sample_axis: Axis) -> pd.DataFrame:
    """
    Reorder the rows of `frame` to follow `sample_axis`.

    Rows are matched on `id_column`; rows for samples not on the axis are
    dropped. The matched identifiers must then equal the axis identifiers
    exactly.

    Raises
    ------
    ColumnNotFoundError
        If `id_column` is not in `frame`.
    AlignmentError
        If the table repeats an identifier or lacks an axis sample.
    """
    if id_column not in frame.columns:
        raise ColumnNotFoundError(details=id_column)

    ids = pd.Index(frame[id_column].astype(str).to_numpy())
    if not ids.is_unique:
        raise AlignmentError(
            f"Column '{id_column}' repeats identifiers",
            details=ids[ids.duplicated()].unique().tolist(),
        )

    rows = ids.get_indexer(sample_axis.identifiers)
    aligned = frame.iloc[rows[rows >= 0]].reset_index(drop=True)

    matched = aligned[id_column].astype(str).tolist()
    if matched != sample_axis.identifiers:
        missing = [s for s, r in zip(sample_axis.identifiers, rows) if r < 0]
        raise AlignmentError(details=f"samples without metadata: {missing}")

    dropped = len(frame) - len(aligned)
    if dropped:
        log.info("Dropped %d metadata rows for samples not in the store", dropped)
    return aligned


def attach_sample_table(store: MatrixStore, frame: pd.DataFrame, id_column: str) -> None:
    """
    Align `frame` to the store's sample axis and attach it as sample
    metadata. On AlignmentError the store is left unchanged.
    """
    aligned = align_sample_table(frame, id_column, store.sample_axis)
    store.attach_sample_metadata(aligned)
