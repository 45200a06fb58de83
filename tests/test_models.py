"""Tests for the in-memory factor model and the synthetic generator."""
import pytest
import numpy as np
import pandas as pd

from mofaviz.models import BaseFactorModel, FactorModel, INTERCEPT_NAME
from mofaviz.data import create_sample_model
from mofaviz.utils.exceptions import InvalidSpecification, UnknownFactor

from conftest import SAMPLES


class TestFactorModel:
    """Tests for FactorModel."""

    def test_query_interface(self, mock_model):
        assert isinstance(mock_model, BaseFactorModel)
        assert mock_model.factor_names() == ["LF1", "LF2", "LF3"]
        assert mock_model.sample_names() == SAMPLES
        assert mock_model.n_samples == 10
        assert mock_model.view_names() == ["Mutations", "Methylation"]
        assert mock_model.learn_intercept is False

    def test_intercept_inserted_first(self, intercept_model):
        assert intercept_model.factor_names()[0] == INTERCEPT_NAME
        Z = intercept_model.get_factors()
        assert (Z[INTERCEPT_NAME] == 1.0).all()

    def test_get_factors_without_intercept(self, intercept_model):
        Z = intercept_model.get_factors(include_intercept=False)
        assert list(Z.columns) == ["LF1", "LF2", "LF3"]

    def test_get_factors_subset(self, mock_model, mock_factors):
        Z = mock_model.get_factors(["LF2"])
        pd.testing.assert_series_equal(Z["LF2"], mock_factors["LF2"])

    def test_get_factors_returns_copy(self, mock_model):
        Z = mock_model.get_factors()
        Z.iloc[0, 0] = 999.0
        assert mock_model.get_factors().iloc[0, 0] != 999.0

    def test_unknown_factor(self, mock_model):
        with pytest.raises(UnknownFactor):
            mock_model.get_factors(["LF4"])

    def test_duplicate_samples_rejected(self, mock_factors, mock_train_data):
        factors = mock_factors.copy()
        factors.index = ["S00"] * 10
        with pytest.raises(ValueError, match="unique"):
            FactorModel(factors, mock_train_data)

    def test_duplicate_factors_rejected(self, mock_factors, mock_train_data):
        factors = mock_factors.copy()
        factors.columns = ["LF1", "LF1", "LF2"]
        with pytest.raises(ValueError, match="unique"):
            FactorModel(factors, mock_train_data)

    def test_covariates(self, mock_model, intercept_model):
        assert mock_model.supports_covariates()
        age = mock_model.get_covariates("age")
        assert list(age.index) == SAMPLES
        assert age["S02"] == 72

        assert not intercept_model.supports_covariates()
        with pytest.raises(InvalidSpecification):
            intercept_model.get_covariates("age")

    def test_unknown_covariate(self, mock_model):
        with pytest.raises(InvalidSpecification):
            mock_model.get_covariates("bmi")

    def test_warns_on_unknown_view_samples(self, mock_factors, caplog):
        view = pd.DataFrame([[1.0, 2.0]], index=["f1"], columns=["S00", "X99"])
        with caplog.at_level("WARNING"):
            FactorModel(mock_factors, {"extra": view})
        assert "not present in the model" in caplog.text

    def test_from_arrays(self, mock_train_data):
        model = FactorModel.from_arrays(
            np.zeros((10, 2)), mock_train_data, sample_names=SAMPLES
        )
        assert model.factor_names() == ["LF1", "LF2"]
        assert model.sample_names() == SAMPLES

    def test_from_arrays_rejects_vectors(self, mock_train_data):
        with pytest.raises(ValueError):
            FactorModel.from_arrays(np.zeros(10), mock_train_data)

    def test_repr(self, intercept_model):
        text = repr(intercept_model)
        assert "n_factors=3" in text
        assert "learn_intercept=True" in text


class TestCreateSampleModel:
    """Tests for create_sample_model."""

    def test_shapes(self, sample_model):
        assert sample_model.n_samples == 40
        assert sample_model.factor_names() == [INTERCEPT_NAME, "LF1", "LF2", "LF3", "LF4"]
        assert sample_model.view_names() == ["Drugs", "Mutations"]

    def test_mutation_view_subset(self, sample_model):
        mutations = sample_model.get_train_data()["Mutations"]
        assert "IGHV" in mutations.index
        assert "trisomy12" in mutations.index
        assert mutations.shape[1] == 36

    def test_reproducible(self):
        a = create_sample_model(n_samples=20, random_state=1)
        b = create_sample_model(n_samples=20, random_state=1)
        pd.testing.assert_frame_equal(a.get_factors(), b.get_factors())

    def test_without_intercept(self):
        model = create_sample_model(n_samples=20, n_factors=2, learn_intercept=False)
        assert model.factor_names() == ["LF1", "LF2"]


class TestLabelNormalisation:
    """Labels that collide once converted to strings are rejected."""

    def test_samples_colliding_as_strings(self, mock_train_data):
        factors = pd.DataFrame({"LF1": [0.1, 0.2]}, index=[1, "1"])
        with pytest.raises(ValueError, match="unique"):
            FactorModel(factors, mock_train_data)

    def test_factors_colliding_as_strings(self, mock_train_data):
        factors = pd.DataFrame([[0.1, 0.2]], index=["S00"], columns=[1, "1"])
        with pytest.raises(ValueError, match="unique"):
            FactorModel(factors, mock_train_data)
