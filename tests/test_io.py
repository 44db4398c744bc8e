"""
Tests for VCF import and sample table ingestion.
"""

import numpy as np
import pandas as pd
import pytest

from varexp import MatrixStore
from varexp.errors import AlignmentError, ColumnNotFoundError
from varexp.io import align_sample_table, attach_sample_table, import_vcf, read_sample_table

EXPECTED_IDS = [
    "MN908947.3:241_C/T",
    "MN908947.3:3037_C/T",
    "MN908947.3:14408_C/T",
    "MN908947.3:23063_A/T",
    "MN908947.3:23403_A/G",
]

EXPECTED_GT = [
    [1, 1, 0],
    [1, 0, 1],
    [-1, 1, 1],
    [1, 0, 0],
    [1, 1, 1],
]


class TestImportVcf:
    """Tests for loading a VCF into a MatrixStore."""

    def test_axes(self, sample_vcf_path):
        store = import_vcf(str(sample_vcf_path))
        assert store.shape == (5, 3)
        assert store.feature_axis.identifiers == EXPECTED_IDS
        assert store.sample_axis.identifiers == ["S1", "S2", "S3"]

    def test_feature_metadata(self, sample_vcf_path):
        store = import_vcf(str(sample_vcf_path))
        meta = store.feature_metadata
        assert meta.get_column("POS").tolist() == [241, 3037, 14408, 23063, 23403]
        assert meta.get_column("REF").tolist() == ["C", "C", "C", "A", "A"]
        assert meta.get_column("ALT").tolist() == ["T", "T", "T", "T", "G"]
        assert set(meta.get_column("CHROM")) == {"MN908947.3"}
        assert "QUAL" in meta

    def test_assays(self, sample_vcf_path):
        store = import_vcf(str(sample_vcf_path))
        assert store.assay_names == ["GT", "DP"]
        assert store.get_assay("GT").tolist() == EXPECTED_GT
        assert store.get_assay("DP")[0].tolist() == [30, 28, 32]

    def test_through_zarr_backing_store(self, sample_vcf_path, tmp_path):
        direct = import_vcf(str(sample_vcf_path))
        backed = import_vcf(str(sample_vcf_path), zarr_path=str(tmp_path / "sample.zarr"))
        assert (tmp_path / "sample.zarr").exists()
        assert backed.feature_axis == direct.feature_axis
        assert backed.sample_axis == direct.sample_axis
        assert np.array_equal(backed.get_assay("GT"), direct.get_assay("GT"))
        assert np.array_equal(backed.get_assay("DP"), direct.get_assay("DP"))


class TestSampleTable:
    """Tests for aligning sample annotations to the sample axis."""

    @pytest.fixture
    def store(self):
        return MatrixStore(["v1", "v2"], ["S1", "S2", "S3"], {"GT": np.zeros((2, 3))})

    def test_read_sample_table(self, sample_table_path):
        frame = read_sample_table(sample_table_path)
        assert frame.columns.tolist() == ["sample", "lineage", "country"]
        assert len(frame) == 4

    def test_align_reorders_and_drops_extra_rows(self, store, sample_table_path):
        frame = read_sample_table(sample_table_path)
        aligned = align_sample_table(frame, "sample", store.sample_axis)
        assert aligned["sample"].tolist() == ["S1", "S2", "S3"]
        assert aligned["lineage"].tolist() == ["B.1.1.7", "B.1.351", "B.1"]

    def test_attach_sample_table(self, store, sample_table_path):
        attach_sample_table(store, read_sample_table(sample_table_path), "sample")
        assert store.sample_metadata.get_column("country").tolist() == ["UK", "South Africa", "UK"]

    def test_missing_sample_raises_and_leaves_store_unset(self, store):
        frame = pd.DataFrame({"sample": ["S3", "S1"], "lineage": ["B.1", "P.1"]})
        with pytest.raises(AlignmentError):
            attach_sample_table(store, frame, "sample")
        assert store.sample_metadata.columns == []

    def test_repeated_identifier_raises(self, store):
        frame = pd.DataFrame({"sample": ["S1", "S2", "S3", "S2"]})
        with pytest.raises(AlignmentError):
            align_sample_table(frame, "sample", store.sample_axis)

    def test_missing_id_column(self, store):
        with pytest.raises(ColumnNotFoundError):
            align_sample_table(pd.DataFrame({"name": ["S1"]}), "sample", store.sample_axis)
