"""
Validation utilities for factor model plots.
"""

import numbers
import logging
from typing import Any, List, Sequence, Union

from ..models.base import INTERCEPT_NAME
from .exceptions import InvalidSpecification, UnknownFactor

logger = logging.getLogger(__name__)

REQUIRED_MODEL_METHODS = (
    'factor_names',
    'sample_names',
    'get_factors',
    'get_train_data',
)

FactorSelection = Union[str, int, Sequence[Union[str, int]]]


def check_model(model: Any) -> None:
    """
    Check that an object exposes the factor model query interface.

    Parameters:
    -----------
    model : Any
        Object to check

    Raises:
    -------
    TypeError
        If any of the required query methods is missing
    """
    missing = [
        name for name in REQUIRED_MODEL_METHODS
        if not callable(getattr(model, name, None))
    ]
    if missing:
        raise TypeError(
            f"'model' must provide the factor model interface; "
            f"{type(model).__name__} is missing: {', '.join(missing)}"
        )


def model_has_intercept(model: Any) -> bool:
    """Whether the model was fit with an intercept pseudo-factor."""
    return bool(getattr(model, 'learn_intercept', False))


def supports_covariates(model: Any) -> bool:
    """Whether covariates can be looked up on the model."""
    method = getattr(model, 'supports_covariates', None)
    if not callable(method) or not callable(getattr(model, 'get_covariates', None)):
        return False
    return bool(method())


def _is_index(value: Any) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def resolve_factors(
    model: Any,
    factors: FactorSelection = 'all',
    include_intercept: bool = False
) -> List[str]:
    """
    Resolve a factor selection into factor names.

    Parameters:
    -----------
    model : Any
        Trained factor model
    factors : str, int or sequence of str/int
        ``'all'``, factor name(s), or 1-based factor index(es). When the
        model has an intercept, indices skip it: ``1`` is the first
        non-intercept factor.
    include_intercept : bool
        Whether ``'all'`` keeps the intercept

    Returns:
    --------
    List[str]
        Factor names in the requested order

    Raises:
    -------
    UnknownFactor
        If a name or index is not present in the model
    InvalidSpecification
        If the selection is empty or mixes names and indices
    """
    names = list(model.factor_names())
    intercept = model_has_intercept(model)

    if isinstance(factors, str) and factors == 'all':
        if include_intercept:
            return names
        return [f for f in names if f != INTERCEPT_NAME]

    if isinstance(factors, str) or _is_index(factors):
        factors = [factors]
    factors = list(factors)

    if not factors:
        raise InvalidSpecification("No factors were specified")

    if all(_is_index(f) for f in factors):
        offset = 1 if intercept else 0
        resolved = []
        for idx in factors:
            position = int(idx) - 1 + offset
            if idx < 1 or position >= len(names):
                raise UnknownFactor(
                    f"Factor index {idx} is out of range (model has "
                    f"{len(names) - offset} factors)"
                )
            resolved.append(names[position])
    elif all(isinstance(f, str) for f in factors):
        unknown = [f for f in factors if f not in names]
        if unknown:
            raise UnknownFactor(f"Factors not found in the model: {unknown}")
        resolved = factors
    else:
        raise InvalidSpecification(
            "Factors must be given either all by name or all by index"
        )

    logger.debug("Resolved factors %s", resolved)
    return resolved
