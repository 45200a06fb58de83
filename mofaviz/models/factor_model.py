"""
In-memory factor model backed by pandas tables.
"""

import logging
import numpy as np
import pandas as pd
from typing import Optional, Dict, List, Mapping, Sequence

from .base import BaseFactorModel, INTERCEPT_NAME
from ..utils.exceptions import InvalidSpecification, UnknownFactor

logger = logging.getLogger(__name__)


class FactorModel(BaseFactorModel):
    """
    Trained factor model held as pandas objects.

    Parameters:
    -----------
    factors : pd.DataFrame
        Factor values (samples x factors)
    train_data : Mapping[str, pd.DataFrame]
        Training data per view (features x samples). Iteration order is the
        declared view order.
    covariates : pd.DataFrame, optional
        Sample covariates (samples x covariates)
    learn_intercept : bool
        Whether the model was fit with an intercept. If no ``intercept``
        column exists one is inserted at position 0.
    """

    def __init__(
        self,
        factors: pd.DataFrame,
        train_data: Mapping[str, pd.DataFrame],
        covariates: Optional[pd.DataFrame] = None,
        learn_intercept: bool = False
    ):
        factors = factors.copy()
        factors.index = factors.index.astype(str)
        factors.columns = factors.columns.astype(str)
        if factors.index.has_duplicates:
            raise ValueError("Sample names in the factor table must be unique")
        if factors.columns.has_duplicates:
            raise ValueError("Factor names must be unique")
        if learn_intercept and INTERCEPT_NAME not in factors.columns:
            factors.insert(0, INTERCEPT_NAME, 1.0)

        self._factors = factors
        self._learn_intercept = bool(learn_intercept)

        self._train_data: Dict[str, pd.DataFrame] = {}
        samples = set(factors.index)
        for view, table in train_data.items():
            table = table.copy()
            table.columns = table.columns.astype(str)
            unknown = [s for s in table.columns if s not in samples]
            if unknown:
                logger.warning(
                    "View '%s' has %d samples not present in the model",
                    view, len(unknown)
                )
            self._train_data[str(view)] = table

        if covariates is not None:
            covariates = covariates.copy()
            covariates.index = covariates.index.astype(str)
        self._covariates = covariates

    @property
    def learn_intercept(self) -> bool:
        return self._learn_intercept

    def factor_names(self) -> List[str]:
        return list(self._factors.columns)

    def sample_names(self) -> List[str]:
        return list(self._factors.index)

    def get_factors(
        self,
        factors: Optional[Sequence[str]] = None,
        include_intercept: bool = True
    ) -> pd.DataFrame:
        Z = self._factors
        if factors is not None:
            factors = list(factors)
            unknown = [f for f in factors if f not in Z.columns]
            if unknown:
                raise UnknownFactor(f"Factors not found in the model: {unknown}")
            Z = Z[factors]
        if not include_intercept and INTERCEPT_NAME in Z.columns:
            Z = Z.drop(columns=INTERCEPT_NAME)
        return Z.copy()

    def get_train_data(self) -> Dict[str, pd.DataFrame]:
        return dict(self._train_data)

    def supports_covariates(self) -> bool:
        return self._covariates is not None

    def get_covariates(self, name: str) -> pd.Series:
        if self._covariates is None:
            raise InvalidSpecification("The model has no covariates")
        if name not in self._covariates.columns:
            raise InvalidSpecification(f"Covariate '{name}' not found")
        return self._covariates[name].reindex(self.sample_names())

    def __repr__(self) -> str:
        n_factors = len(self.factor_names()) - int(
            INTERCEPT_NAME in self._factors.columns
        )
        return (
            f"FactorModel(n_samples={self.n_samples}, n_factors={n_factors}, "
            f"views={self.view_names()}, learn_intercept={self.learn_intercept})"
        )

    @classmethod
    def from_arrays(
        cls,
        Z: np.ndarray,
        train_data: Mapping[str, pd.DataFrame],
        sample_names: Optional[Sequence[str]] = None,
        factor_names: Optional[Sequence[str]] = None,
        **kwargs
    ) -> 'FactorModel':
        """Build a model from a bare (samples x factors) array."""
        Z = np.asarray(Z, dtype=float)
        if Z.ndim != 2:
            raise ValueError("Factor values must be a 2-D array")
        if sample_names is None:
            sample_names = [f"sample_{i}" for i in range(Z.shape[0])]
        if factor_names is None:
            factor_names = [f"LF{k + 1}" for k in range(Z.shape[1])]
        factors = pd.DataFrame(Z, index=list(sample_names), columns=list(factor_names))
        return cls(factors, train_data, **kwargs)
