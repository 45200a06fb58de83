"""
Base class for trained multi-omics factor models.
"""

import pandas as pd
from abc import ABC, abstractmethod
from typing import Optional, Dict, List, Sequence

INTERCEPT_NAME = 'intercept'


class BaseFactorModel(ABC):
    """
    Query interface a trained factor model must expose to be plotted.

    The plotting functions only ever read from the model. Any object
    providing the same methods is accepted (see
    :func:`mofaviz.utils.validation.check_model`); subclassing is the
    simplest way to get there.
    """

    @property
    @abstractmethod
    def learn_intercept(self) -> bool:
        """Whether the model was fit with an intercept pseudo-factor."""
        pass

    @abstractmethod
    def factor_names(self) -> List[str]:
        """Ordered factor identifiers, intercept included if present."""
        pass

    @abstractmethod
    def sample_names(self) -> List[str]:
        """Ordered sample identifiers (length N)."""
        pass

    @abstractmethod
    def get_factors(
        self,
        factors: Optional[Sequence[str]] = None,
        include_intercept: bool = True
    ) -> pd.DataFrame:
        """
        Get the inferred factor values.

        Parameters:
        -----------
        factors : Sequence[str], optional
            Factor names to return (default: all)
        include_intercept : bool
            Whether to keep the intercept column

        Returns:
        --------
        pd.DataFrame
            Factor values (samples x factors), may contain NaN
        """
        pass

    @abstractmethod
    def get_train_data(self) -> Dict[str, pd.DataFrame]:
        """Training tables per view (features x samples), in view order."""
        pass

    def supports_covariates(self) -> bool:
        """Whether :meth:`get_covariates` can be called."""
        return False

    def get_covariates(self, name: str) -> pd.Series:
        """Per-sample covariate values for ``name``."""
        raise NotImplementedError(
            f"{type(self).__name__} does not provide covariates"
        )

    @property
    def n_samples(self) -> int:
        return len(self.sample_names())

    def view_names(self) -> List[str]:
        return list(self.get_train_data().keys())
