"""
Utility functions for factor model plots.
"""

from .annotations import (
    Absent,
    NamedSpec,
    ExplicitVector,
    FeatureIndex,
    ResolvedAnnotation,
    as_annotation_spec,
    resolve_annotation,
    classify_annotation,
    count_levels,
    missing_mask,
)
from .metrics import factor_correlation
from .validation import check_model, resolve_factors

__all__ = [
    'Absent',
    'NamedSpec',
    'ExplicitVector',
    'FeatureIndex',
    'ResolvedAnnotation',
    'as_annotation_spec',
    'resolve_annotation',
    'classify_annotation',
    'count_levels',
    'missing_mask',
    'factor_correlation',
    'check_model',
    'resolve_factors'
]
