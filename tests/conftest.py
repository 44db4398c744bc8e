"""
Shared fixtures for the varexp test suite.
"""

from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from varexp import MatrixStore


@pytest.fixture(scope="session")
def test_data_dir():
    """Return the path to the test data directory."""
    return Path(__file__).parent / "data"


@pytest.fixture(scope="session")
def sample_vcf_path(test_data_dir):
    """Five SARS-CoV-2 loci called in three haploid samples."""
    return test_data_dir / "sample.vcf"


@pytest.fixture(scope="session")
def sample_table_path(test_data_dir):
    return test_data_dir / "sample_metadata.tsv"


@pytest.fixture
def voc_store():
    """
    A 40 feature x 9 sample store. The boolean feature column VOC1 is True
    only at positions 6 and 25.
    """
    n_features, n_samples = 40, 9
    features = [f"MN908947.3:{100 * (i + 1)}_A/G" for i in range(n_features)]
    samples = [f"sample_{j + 1}" for j in range(n_samples)]

    gt = (np.arange(n_features * n_samples).reshape(n_features, n_samples) % 3 == 0).astype(np.int8)
    dp = np.arange(n_features * n_samples, dtype=np.int32).reshape(n_features, n_samples)

    store = MatrixStore(features, samples, {"GT": gt, "DP": dp})

    voc1 = np.zeros(n_features, dtype=bool)
    voc1[[6, 25]] = True
    store.feature_metadata.set_column("CHROM", ["MN908947.3"] * n_features)
    store.feature_metadata.set_column("POS", np.arange(1, n_features + 1) * 100)
    store.feature_metadata.set_column("VOC1", voc1)

    store.attach_sample_metadata(
        pd.DataFrame(
            {
                "sample": samples,
                "lineage": ["B.1.1.7", "B.1", "P.1", "B.1.351", "B.1", "B.1.1.7", "P.1", "B.1", "B.1.617.2"],
                "ct_value": np.linspace(18.0, 30.0, n_samples),
            }
        )
    )
    return store
