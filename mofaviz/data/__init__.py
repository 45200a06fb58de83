"""
Synthetic data utilities for factor plot demonstrations.
"""

from .loaders import create_sample_model

__all__ = [
    'create_sample_model'
]
