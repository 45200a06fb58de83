"""Tests for factor correlation."""
import pytest
import numpy as np
import pandas as pd

from mofaviz.utils.metrics import factor_correlation


@pytest.fixture
def factors_with_gaps():
    np.random.seed(0)
    Z = pd.DataFrame(
        np.random.normal(0, 1, size=(30, 3)),
        columns=["LF1", "LF2", "LF3"]
    )
    Z.loc[:4, "LF1"] = np.nan
    Z.loc[25:, "LF3"] = np.nan
    return Z


class TestFactorCorrelation:
    """Tests for factor_correlation."""

    @pytest.mark.parametrize("method", ["pearson", "spearman", "kendall"])
    def test_symmetric_with_unit_diagonal(self, mock_factors, method):
        r = factor_correlation(mock_factors, method=method, absolute=False)
        assert r.shape == (3, 3)
        np.testing.assert_allclose(r.to_numpy(), r.to_numpy().T)
        np.testing.assert_allclose(np.diag(r.to_numpy()), 1.0)

    def test_absolute_by_default(self, mock_factors):
        r = factor_correlation(mock_factors)
        assert (r.to_numpy() >= 0).all()
        signed = factor_correlation(mock_factors, absolute=False)
        np.testing.assert_allclose(r.to_numpy(), np.abs(signed.to_numpy()))

    def test_keeps_factor_names(self, mock_factors):
        r = factor_correlation(mock_factors)
        assert list(r.index) == ["LF1", "LF2", "LF3"]
        assert list(r.columns) == ["LF1", "LF2", "LF3"]

    def test_intercept_excluded(self, intercept_model):
        r = factor_correlation(intercept_model.get_factors())
        assert "intercept" not in r.index
        assert r.shape == (3, 3)

    def test_pairwise_complete_observations(self, factors_with_gaps):
        r = factor_correlation(factors_with_gaps, absolute=False)
        pair = factors_with_gaps[["LF1", "LF2"]].dropna()
        expected = np.corrcoef(pair["LF1"], pair["LF2"])[0, 1]
        assert r.loc["LF1", "LF2"] == pytest.approx(expected)
        # LF2 has no gaps, so LF2/LF3 uses 25 samples
        pair = factors_with_gaps[["LF2", "LF3"]].dropna()
        assert len(pair) == 25
        expected = np.corrcoef(pair["LF2"], pair["LF3"])[0, 1]
        assert r.loc["LF2", "LF3"] == pytest.approx(expected)

    def test_unknown_method(self, mock_factors):
        with pytest.raises(ValueError, match="Unknown correlation method"):
            factor_correlation(mock_factors, method="distance")
