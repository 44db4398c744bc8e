"""
utils.py
-----

Genomic region helpers

"""

from __future__ import annotations

import allel
import numpy as np


def parse_region(region_str: str) -> tuple:
    """
    Parse a genomic region string of the form 'chrom', or 'chrom:start-end'.

    Coordinates are 1-based and inclusive, as in a VCF POS column.

    Examples
    --------
    'MN908947.3' -> ('MN908947.3', None, None)
    'MN908947.3:21563-25384' -> ('MN908947.3', 21563, 25384)
    'MN908947.3:21,563-25,384' -> ('MN908947.3', 21563, 25384)
    """
    region_str = region_str.strip()
    chrom = region_str
    start = end = None

    if ":" in region_str:
        chrom_part, coords = region_str.split(":", 1)
        chrom = chrom_part.strip()

        if "-" not in coords:
            raise ValueError(
                f"Region must include both start and end positions, e.g. 'MN908947.3:1000-2000', got '{region_str}'"
            )

        start_str, end_str = coords.split("-", 1)

        # Allow thousands separators
        try:
            start = int(start_str.replace(",", "").strip())
            end = int(end_str.replace(",", "").strip())
        except ValueError as err:
            raise ValueError(
                f"Start and end positions must be integers, got '{coords}'"
            ) from err

        if start >= end:
            raise ValueError(
                f"Start position must be less than end position in '{region_str}'"
            )

    if not chrom:
        raise ValueError(f"Region must name a contig, got '{region_str}'")

    return (chrom, start, end)


def locate_region(region: tuple, pos: np.ndarray) -> slice:
    """Get array slice for a parsed genomic region.

    Parameters
    ----------
    region : tuple
        The parsed region, as returned by `parse_region`.
    pos : array-like
        Sorted positions to be searched.

    Returns
    -------
    loc_region : slice

    """
    if region[1] is None:
        return slice(0, len(pos))

    pos_idx = allel.SortedIndex(pos)
    try:
        loc_region = pos_idx.locate_range(region[1], region[2])
    except KeyError:
        # No positions fall within the region.
        loc_region = slice(0, 0)
    return loc_region
