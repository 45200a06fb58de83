"""
Factor model interface and in-memory implementation.
"""

from .base import BaseFactorModel, INTERCEPT_NAME
from .factor_model import FactorModel

__all__ = [
    'BaseFactorModel',
    'FactorModel',
    'INTERCEPT_NAME'
]
