"""
Tests for region parsing and variant query helpers.
"""

import numpy as np
import pytest

from varexp.io import import_vcf
from varexp.utils import locate_region, parse_region
from varexp.variants import carrier_mask, random_positions, region_mask, thin_positions


class TestParseRegion:
    def test_contig_only(self):
        assert parse_region("MN908947.3") == ("MN908947.3", None, None)

    def test_range_with_separators(self):
        assert parse_region(" MN908947.3:21,563-25,384 ") == ("MN908947.3", 21563, 25384)

    @pytest.mark.parametrize("region", ["MN908947.3:1000", "MN908947.3:a-b", "MN908947.3:20-10", ":1-2"])
    def test_invalid(self, region):
        with pytest.raises(ValueError):
            parse_region(region)


def test_locate_region():
    pos = np.array([100, 200, 300, 400])
    assert locate_region(("c", 150, 300), pos) == slice(1, 3)
    assert locate_region(("c", 500, 600), pos) == slice(0, 0)
    assert locate_region(("c", None, None), pos) == slice(0, 4)


def test_region_mask_spike(sample_vcf_path):
    store = import_vcf(str(sample_vcf_path))
    spike = region_mask(store, "MN908947.3:21563-25384")
    assert spike.tolist() == [False, False, False, True, True]
    assert store.subset(spike).feature_metadata.get_column("POS").tolist() == [23063, 23403]


def test_region_mask_after_reordering(voc_store):
    reordered = voc_store.subset([5, 0, 3, 1], slice(None))
    mask = region_mask(reordered, "MN908947.3:150-450")
    assert mask.tolist() == [False, False, True, True]


def test_region_mask_other_contig(voc_store):
    assert not region_mask(voc_store, "chr1").any()
    assert region_mask(voc_store, "MN908947.3").all()


def test_carrier_mask_has_voc1(voc_store):
    voc1 = voc_store.feature_metadata.get_column("VOC1")
    has_voc1 = carrier_mask(voc_store, voc1)
    gt = voc_store.get_assay("GT")
    expected = (gt[[6, 25]] > 0).any(axis=0)
    assert has_voc1.tolist() == expected.tolist()

    voc_store.sample_metadata.set_column("has_VOC1", has_voc1)
    carriers = voc_store.subset(voc1, has_voc1)
    assert carriers.n_samples == int(expected.sum())
    assert (carriers.get_assay("GT") > 0).any(axis=0).all()


def test_carrier_mask_missing_calls_are_not_carriers(sample_vcf_path):
    store = import_vcf(str(sample_vcf_path))
    assert carrier_mask(store, [2]).tolist() == [False, True, True]


def test_thin_positions():
    assert thin_positions(10, 3).tolist() == [0, 3, 6]
    assert thin_positions(10, 3, offset=1).tolist() == [1, 4, 7]
    assert thin_positions(4, 4).tolist() == [0, 1, 2, 3]
    with pytest.raises(ValueError):
        thin_positions(3, 4)


def test_random_positions():
    positions = random_positions(40, 5, seed=42)
    assert len(positions) == 5
    assert len(set(positions.tolist())) == 5
    assert positions.tolist() == sorted(positions.tolist())
    assert np.array_equal(positions, random_positions(40, 5, seed=42))
    with pytest.raises(ValueError):
        random_positions(3, 4)


@pytest.mark.parametrize("n_total, n, offset", [(10, 0, 0), (10, -1, 0), (10, 3, 3), (10, 3, -1), (0, 1, 0)])
def test_thin_positions_invalid(n_total, n, offset):
    with pytest.raises(ValueError):
        thin_positions(n_total, n, offset=offset)


def test_thin_positions_always_returns_n():
    for offset in range(3):
        assert len(thin_positions(10, 3, offset=offset)) == 3


def test_random_positions_without_replacement():
    assert random_positions(12, 12, seed=0).tolist() == list(range(12))
