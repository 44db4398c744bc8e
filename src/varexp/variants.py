"""
variants.py
-----

Variant queries

Helpers that turn feature annotations and assays into selectors for
MatrixStore.subset: genomic region masks, per-sample carrier flags
(e.g. "has_VOC1"), and regular or random thinning of loci.

"""

from __future__ import annotations

import numpy as np

from varexp.selectors import ALL, resolve_selector
from varexp.store import MatrixStore
from varexp.utils import locate_region, parse_region


def region_mask(
    store: MatrixStore,
    region: str,
    chrom_column: str = "CHROM",
    pos_column: str = "POS",
) -> np.ndarray:
    """
    Boolean feature mask for a genomic region.

    Parameters
    ----------
    store : MatrixStore
        Store whose feature metadata holds contig and position columns.
    region : str
        A whole contig (e.g. 'MN908947.3') or a range
        ('MN908947.3:21563-25384', 1-based, inclusive).
    chrom_column : str
        Feature metadata column holding the contig. Defaults to 'CHROM'.
    pos_column : str
        Feature metadata column holding the position. Defaults to 'POS'.

    Returns
    -------
    np.ndarray of bool, one value per feature.
    """
    chrom, start, end = parse_region(region)
    chroms = store.feature_metadata.get_column(chrom_column).astype(str).to_numpy()
    pos = store.feature_metadata.get_column(pos_column).to_numpy()

    mask = np.zeros(store.n_features, dtype=bool)
    on_contig = np.flatnonzero(chroms == chrom)
    if on_contig.size == 0:
        return mask

    # A subset may have reordered loci; search them in position order.
    order = np.argsort(pos[on_contig], kind="stable")
    loc = locate_region((chrom, start, end), pos[on_contig][order])
    mask[on_contig[order[loc]]] = True
    return mask


def carrier_mask(store: MatrixStore, features=ALL, assay: str = "GT") -> np.ndarray:
    """
    Per-sample flag: True where the sample carries a non-reference call
    (assay value > 0) at any of the selected features.

    `features` is any selector accepted by MatrixStore.subset, typically a
    boolean variant-of-concern column.
    """
    positions = resolve_selector(features, store.feature_axis)
    calls = store.get_assay(assay)[positions]
    return (calls > 0).any(axis=0)


def thin_positions(n_total: int, n: int, offset: int = 0) -> np.ndarray:
    """
    Evenly spaced positions for thinning `n_total` loci down to `n`.

    Change `offset` to repeat an analysis with a different set of loci.
    `offset` must lie in [0, n_total // n) so that `n` positions remain.
    """
    if n < 1:
        raise ValueError(f"Must keep at least one feature, got n={n}.")
    if n_total < n:
        raise ValueError(f"Not enough features: asked for {n}, have {n_total}.")
    thin_step = n_total // n
    if not 0 <= offset < thin_step:
        raise ValueError(f"Offset must lie in [0, {thin_step}), got {offset}.")
    return np.arange(n_total, dtype=np.intp)[slice(offset, None, thin_step)][:n]


def random_positions(n_total: int, n: int, seed: int | None = None) -> np.ndarray:
    """
    Select `n` random positions out of `n_total` without replacement,
    returned in sorted order.
    """
    if n > n_total:
        raise ValueError(
            f"Cannot sample {n} positions without replacement from {n_total} total."
        )
    rng = np.random.default_rng(seed)
    return np.sort(rng.choice(n_total, size=n, replace=False)).astype(np.intp)
