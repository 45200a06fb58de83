"""
Synthetic factor models for demonstration and testing.
"""

import logging
import numpy as np
import pandas as pd
from typing import Optional, Dict

from ..models.factor_model import FactorModel

logger = logging.getLogger(__name__)


def create_sample_model(
    n_samples: int = 100,
    n_factors: int = 5,
    n_features: Optional[Dict[str, int]] = None,
    missing_view_fraction: float = 0.1,
    learn_intercept: bool = True,
    random_state: Optional[int] = 42
) -> FactorModel:
    """
    Create a synthetic trained factor model.

    The model has a continuous 'Drugs' view, a binary 'Mutations' view that
    includes the features 'IGHV' and 'trisomy12', and 'sex' and 'age'
    covariates. The mutation status of IGHV drives the first factor.

    Parameters:
    -----------
    n_samples : int
        Number of samples to generate
    n_factors : int
        Number of latent factors (intercept excluded)
    n_features : Dict[str, int], optional
        Number of features per view (default: 50 drugs, 20 mutations)
    missing_view_fraction : float
        Fraction of samples left out of the mutation view
    learn_intercept : bool
        Whether to add an intercept factor
    random_state : int, optional
        Random seed for reproducibility

    Returns:
    --------
    FactorModel
        Synthetic model
    """
    if n_features is None:
        n_features = {'Drugs': 50, 'Mutations': 20}
    n_drugs = n_features.get('Drugs', 50)
    n_mutations = max(n_features.get('Mutations', 20), 2)

    rng = np.random.RandomState(random_state)

    sample_ids = [f"Sample_{i:03d}" for i in range(n_samples)]
    factor_ids = [f"LF{k + 1}" for k in range(n_factors)]

    ighv = rng.choice([0.0, 1.0], n_samples)
    Z = rng.normal(0, 1, (n_samples, n_factors))
    Z[:, 0] += 2.0 * (ighv - 0.5)
    factors = pd.DataFrame(Z, index=sample_ids, columns=factor_ids)

    # Drugs: linear in the factors plus noise
    W = rng.normal(0, 1, (n_drugs, n_factors))
    drugs = pd.DataFrame(
        W @ Z.T + rng.normal(0, 0.5, (n_drugs, n_samples)),
        index=[f"D_{j:03d}" for j in range(n_drugs)],
        columns=sample_ids
    )

    # Mutations: binary, only a subset of the samples profiled
    mutation_ids = ['IGHV', 'trisomy12'] + [f"M_{j:03d}" for j in range(n_mutations - 2)]
    mutations = rng.binomial(1, 0.3, (n_mutations, n_samples)).astype(float)
    mutations[0] = ighv
    n_unprofiled = int(n_samples * missing_view_fraction)
    unprofiled = set(rng.choice(n_samples, n_unprofiled, replace=False))
    profiled = [s for i, s in enumerate(sample_ids) if i not in unprofiled]
    mutations = pd.DataFrame(mutations, index=mutation_ids, columns=sample_ids)[profiled]

    covariates = pd.DataFrame({
        'sex': rng.choice(['M', 'F'], n_samples),
        'age': rng.normal(65, 10, n_samples).round(),
    }, index=sample_ids)

    model = FactorModel(
        factors,
        {'Drugs': drugs, 'Mutations': mutations},
        covariates=covariates,
        learn_intercept=learn_intercept
    )
    logger.info("Generated synthetic model: %r", model)
    return model
