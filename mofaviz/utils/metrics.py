"""
Summary statistics over inferred factor values.
"""

import logging
import pandas as pd

from ..models.base import INTERCEPT_NAME

logger = logging.getLogger(__name__)

CORRELATION_METHODS = ('pearson', 'spearman', 'kendall')


def factor_correlation(
    factors: pd.DataFrame,
    method: str = 'pearson',
    absolute: bool = True,
    intercept_name: str = INTERCEPT_NAME
) -> pd.DataFrame:
    """
    Correlation matrix between latent factors.

    Each coefficient uses the samples observed in both factors of the pair
    (pairwise complete observations), not only the samples complete across
    every factor.

    Parameters:
    -----------
    factors : pd.DataFrame
        Factor values (samples x factors)
    method : str
        'pearson', 'spearman' or 'kendall'
    absolute : bool
        Whether to return absolute coefficients
    intercept_name : str
        Column dropped before correlating

    Returns:
    --------
    pd.DataFrame
        Symmetric (factors x factors) coefficient matrix
    """
    if method not in CORRELATION_METHODS:
        raise ValueError(
            f"Unknown correlation method: {method}. "
            f"Choose from {list(CORRELATION_METHODS)}"
        )

    Z = factors.drop(columns=intercept_name, errors='ignore')
    Z = Z.apply(pd.to_numeric, errors='coerce')

    r = Z.corr(method=method, min_periods=1)
    logger.info("Computed %s correlation between %d factors", method, r.shape[0])

    if absolute:
        r = r.abs()
    return r
