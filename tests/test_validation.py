"""Tests for model checks and factor selection."""
import pytest
import numpy as np

from mofaviz.utils.validation import check_model, resolve_factors
from mofaviz.utils.exceptions import InvalidSpecification, UnknownFactor


class TestCheckModel:
    """Tests for check_model."""

    def test_accepts_factor_model(self, mock_model):
        check_model(mock_model)

    def test_accepts_duck_typed_model(self):
        class Minimal:
            def factor_names(self): return []
            def sample_names(self): return []
            def get_factors(self, factors=None, include_intercept=True): return None
            def get_train_data(self): return {}

        check_model(Minimal())

    def test_rejects_other_objects(self):
        with pytest.raises(TypeError, match="get_train_data"):
            check_model(object())


class TestResolveFactors:
    """Tests for resolve_factors."""

    def test_all(self, mock_model):
        assert resolve_factors(mock_model, "all") == ["LF1", "LF2", "LF3"]

    def test_all_excludes_intercept(self, intercept_model):
        assert resolve_factors(intercept_model, "all") == ["LF1", "LF2", "LF3"]

    def test_all_with_intercept(self, intercept_model):
        factors = resolve_factors(intercept_model, "all", include_intercept=True)
        assert factors == ["intercept", "LF1", "LF2", "LF3"]

    def test_names(self, mock_model):
        assert resolve_factors(mock_model, ["LF3", "LF1"]) == ["LF3", "LF1"]
        assert resolve_factors(mock_model, "LF2") == ["LF2"]

    def test_unknown_name(self, mock_model):
        with pytest.raises(UnknownFactor):
            resolve_factors(mock_model, ["LF1", "LF9"])

    def test_indices_without_intercept(self, mock_model):
        assert resolve_factors(mock_model, [1, 3]) == ["LF1", "LF3"]

    def test_index_offset_by_intercept(self, intercept_model):
        # storage: [intercept, LF1, LF2, LF3]; index 1 -> storage position 1
        assert intercept_model.factor_names()[1] == "LF1"
        assert resolve_factors(intercept_model, 1) == ["LF1"]
        assert resolve_factors(intercept_model, [2, 3]) == ["LF2", "LF3"]

    def test_numpy_indices(self, mock_model):
        assert resolve_factors(mock_model, np.array([2, 1])) == ["LF2", "LF1"]

    def test_range(self, mock_model):
        assert resolve_factors(mock_model, range(1, 3)) == ["LF1", "LF2"]

    @pytest.mark.parametrize("index", [0, -1, 4])
    def test_index_out_of_range(self, mock_model, index):
        with pytest.raises(UnknownFactor):
            resolve_factors(mock_model, index)

    def test_index_out_of_range_with_intercept(self, intercept_model):
        with pytest.raises(UnknownFactor):
            resolve_factors(intercept_model, 4)

    def test_empty_selection(self, mock_model):
        with pytest.raises(InvalidSpecification):
            resolve_factors(mock_model, [])

    def test_mixed_selection(self, mock_model):
        with pytest.raises(InvalidSpecification):
            resolve_factors(mock_model, ["LF1", 2])

    def test_booleans_are_not_indices(self, mock_model):
        with pytest.raises(InvalidSpecification):
            resolve_factors(mock_model, [True, False])
