"""Shared pytest fixtures for factor plot tests."""
import matplotlib
matplotlib.use('Agg')  # Use non-interactive backend for testing
import matplotlib.pyplot as plt

import pytest
import numpy as np
import pandas as pd

from mofaviz.models import FactorModel
from mofaviz.data import create_sample_model

SAMPLES = [f"S{i:02d}" for i in range(10)]


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close('all')


@pytest.fixture
def mock_factors():
    """Create mock factor values (10 samples x 3 factors)."""
    np.random.seed(42)
    return pd.DataFrame(
        np.random.normal(0, 1, size=(10, 3)),
        index=SAMPLES,
        columns=["LF1", "LF2", "LF3"],
    )


@pytest.fixture
def mock_train_data():
    """
    Create mock training views.

    'Mutations' profiles every sample and holds IGHV (6 M, 4 U);
    'Methylation' only profiles 8 samples, in reverse order.
    """
    mutations = pd.DataFrame(
        [["M"] * 6 + ["U"] * 4,
         [0, 1, 0, 1, 0, 1, 0, 1, 0, 1]],
        index=["IGHV", "TP53"],
        columns=SAMPLES,
        dtype=object,
    )
    profiled = SAMPLES[:8][::-1]
    methylation = pd.DataFrame(
        [np.linspace(0.1, 0.8, 8),
         np.arange(8, dtype=float)],
        index=["cg01", "TP53"],
        columns=profiled,
    )
    return {"Mutations": mutations, "Methylation": methylation}


@pytest.fixture
def mock_covariates():
    """Create mock sample covariates."""
    return pd.DataFrame({
        "sex": ["M", "F"] * 5,
        "age": [50, 61, 72, 45, 38, 66, 59, 70, 41, 55],
    }, index=SAMPLES)


@pytest.fixture
def mock_model(mock_factors, mock_train_data, mock_covariates):
    """Model with 10 samples, 3 factors, two views and covariates."""
    return FactorModel(mock_factors, mock_train_data, covariates=mock_covariates)


@pytest.fixture
def intercept_model(mock_factors, mock_train_data):
    """Model fit with an intercept and no covariates."""
    return FactorModel(mock_factors, mock_train_data, learn_intercept=True)


@pytest.fixture
def sample_model():
    """Synthetic model from the package generator."""
    return create_sample_model(n_samples=40, n_factors=4, random_state=0)


class IntegerSampleModel:
    """Model exposing the query interface with integer sample ids."""
    learn_intercept = False

    def factor_names(self):
        return ["LF1"]

    def sample_names(self):
        return [0, 1, 2, 3]

    def get_factors(self, factors=None, include_intercept=True):
        return pd.DataFrame({"LF1": [0.1, 0.2, 0.3, 0.4]}, index=[0, 1, 2, 3])

    def get_train_data(self):
        # columns in a different order than sample_names()
        return {"F": pd.DataFrame([["b", "a", "b", "a"]], index=["status"], columns=[3, 2, 1, 0])}


@pytest.fixture
def integer_sample_model():
    """Duck-typed model whose sample ids are integers."""
    return IntegerSampleModel()
