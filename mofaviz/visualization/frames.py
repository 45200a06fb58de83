"""
Assembly of the tabular frames handed to the plotting functions.

Every builder resolves the requested factors, resolves the color/shape/group
annotations, joins them with the factor values by sample name and applies
the missing-value policy. The frames are plain pandas objects so they can be
inspected or plotted with other tools.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

from ..utils.annotations import (
    FeatureIndex,
    NamedSpec,
    ResolvedAnnotation,
    as_annotation_spec,
    resolve_annotation,
)
from ..utils.exceptions import InvalidSpecification
from ..utils.validation import FactorSelection, check_model, resolve_factors

logger = logging.getLogger(__name__)

ANNOTATION_COLUMNS = {
    'color': 'color_by',
    'shape': 'shape_by',
    'group': 'group_by',
}


@dataclass
class PlotFrame:
    """
    Factor values joined with resolved annotations.

    Attributes:
        data: 'wide' frames are indexed by sample with one column per
            factor; 'long' frames have one row per (sample, factor) with
            'sample', 'factor' and 'value' columns
        factors: Factor names in plotting order
        annotations: Resolved annotations keyed by aesthetic
        kind: 'wide' or 'long'
    """
    data: pd.DataFrame
    factors: List[str]
    annotations: Dict[str, ResolvedAnnotation] = field(default_factory=dict)
    kind: str = 'wide'

    def annotation(self, aesthetic: str) -> Optional[ResolvedAnnotation]:
        return self.annotations.get(aesthetic)

    @property
    def samples(self) -> List[str]:
        if self.kind == 'long':
            return list(pd.unique(self.data['sample']))
        return list(self.data.index)

    @property
    def n_samples(self) -> int:
        return len(self.samples)


def _resolve_aesthetics(
    model: Any,
    specs: Dict[str, Any],
    names: Dict[str, Optional[str]],
    on_ambiguous: str
) -> Dict[str, ResolvedAnnotation]:
    """Resolve several annotations, sharing one feature index."""
    specs = {aes: as_annotation_spec(spec) for aes, spec in specs.items()}
    feature_index = None
    if any(isinstance(spec, NamedSpec) for spec in specs.values()):
        feature_index = FeatureIndex.from_model(model)

    return {
        aes: resolve_annotation(
            model, spec,
            aesthetic=aes,
            name=names.get(aes),
            on_ambiguous=on_ambiguous,
            feature_index=feature_index
        )
        for aes, spec in specs.items()
    }


def apply_missing_policy(
    data: pd.DataFrame,
    annotations: Dict[str, ResolvedAnnotation],
    show_missing: bool,
    sample_column: Optional[str] = None
) -> pd.DataFrame:
    """
    Drop samples with a missing annotation.

    Parameters:
    -----------
    data : pd.DataFrame
        Plot frame
    annotations : Dict[str, ResolvedAnnotation]
        Resolved annotations; a sample missing in any of them is dropped
    show_missing : bool
        If True the frame is returned unchanged
    sample_column : str, optional
        Column holding sample names (default: use the index)

    Returns:
    --------
    pd.DataFrame
        Filtered frame
    """
    if show_missing:
        return data

    missing_samples = set()
    for annotation in annotations.values():
        missing = annotation.missing
        missing_samples.update(annotation.values.index[missing.to_numpy()])

    if not missing_samples:
        return data

    keys = data.index if sample_column is None else pd.Index(data[sample_column])
    drop = np.asarray(keys.isin(list(missing_samples)))
    logger.info(
        "Removing %d samples with missing annotations",
        len(set(keys[drop]))
    )
    return data.loc[~drop]


def _attach_annotations(
    data: pd.DataFrame,
    annotations: Dict[str, ResolvedAnnotation],
    keys: pd.Index
) -> pd.DataFrame:
    data = data.copy()
    for aes, annotation in annotations.items():
        column = annotation.as_plot_column().reindex(keys)
        data[ANNOTATION_COLUMNS[aes]] = column.values
    return data


def _drop_unused_levels(data: pd.DataFrame) -> pd.DataFrame:
    for column in ANNOTATION_COLUMNS.values():
        if column in data.columns and isinstance(data[column].dtype, pd.CategoricalDtype):
            data[column] = data[column].cat.remove_unused_categories()
    return data


def _long_factor_frame(Z: pd.DataFrame) -> pd.DataFrame:
    Z = Z.copy()
    Z.index = Z.index.astype(str)
    return (
        Z.rename_axis('sample')
        .reset_index()
        .melt(id_vars='sample', var_name='factor', value_name='value')
    )


def build_hist_frame(
    model: Any,
    factor: FactorSelection,
    group_by: Any = None,
    group_name: Optional[str] = None,
    show_missing: bool = False,
    on_ambiguous: str = 'first'
) -> PlotFrame:
    """
    Frame for a histogram of one factor, grouped by an annotation.

    Returns:
    --------
    PlotFrame
        Long frame with columns 'sample', 'factor', 'value', 'group_by'
    """
    check_model(model)
    factors = resolve_factors(model, factor, include_intercept=True)
    if len(factors) != 1:
        raise InvalidSpecification("Please specify a single factor")

    Z = model.get_factors(factors)
    annotations = _resolve_aesthetics(
        model, {'group': group_by}, {'group': group_name}, on_ambiguous
    )

    data = _long_factor_frame(Z)
    data = _attach_annotations(data, annotations, pd.Index(data['sample']))
    data = apply_missing_policy(data, annotations, show_missing, sample_column='sample')
    data = _drop_unused_levels(data.reset_index(drop=True))

    logger.info("Histogram frame for %s: %d samples", factors[0], len(data))
    return PlotFrame(data, factors, annotations, kind='long')


def build_beeswarm_frame(
    model: Any,
    factors: FactorSelection = 'all',
    color_by: Any = None,
    shape_by: Any = None,
    name_color: Optional[str] = None,
    name_shape: Optional[str] = None,
    show_missing: bool = False,
    on_ambiguous: str = 'first'
) -> PlotFrame:
    """
    Long frame for beeswarm plots, one row per (sample, factor).

    The intercept is never included.
    """
    check_model(model)
    factors = resolve_factors(model, factors)
    Z = model.get_factors(factors, include_intercept=False)
    factors = [f for f in factors if f in Z.columns]
    if not factors:
        raise InvalidSpecification("No factors left to plot")

    annotations = _resolve_aesthetics(
        model,
        {'color': color_by, 'shape': shape_by},
        {'color': name_color, 'shape': name_shape},
        on_ambiguous
    )

    data = _long_factor_frame(Z[factors])
    data = _attach_annotations(data, annotations, pd.Index(data['sample']))
    data = apply_missing_policy(data, annotations, show_missing, sample_column='sample')
    data = _drop_unused_levels(data.reset_index(drop=True))

    logger.info(
        "Beeswarm frame: %d factors, %d rows", len(factors), len(data)
    )
    return PlotFrame(data, factors, annotations, kind='long')


def _wide_frame(
    model: Any,
    factors: List[str],
    color_by: Any,
    shape_by: Any,
    name_color: Optional[str],
    name_shape: Optional[str],
    show_missing: bool,
    on_ambiguous: str,
    Z: Optional[pd.DataFrame] = None
) -> PlotFrame:
    if Z is None:
        Z = model.get_factors(factors)
    data = Z[factors].copy()
    data.index = data.index.astype(str)
    data.index.name = 'sample'

    annotations = _resolve_aesthetics(
        model,
        {'color': color_by, 'shape': shape_by},
        {'color': name_color, 'shape': name_shape},
        on_ambiguous
    )

    data = _attach_annotations(data, annotations, data.index)
    data = apply_missing_policy(data, annotations, show_missing)
    data = _drop_unused_levels(data)
    return PlotFrame(data, factors, annotations, kind='wide')


def build_scatter_frame(
    model: Any,
    factors: FactorSelection,
    color_by: Any = None,
    shape_by: Any = None,
    name_color: Optional[str] = None,
    name_shape: Optional[str] = None,
    show_missing: bool = True,
    on_ambiguous: str = 'first'
) -> PlotFrame:
    """
    Wide frame for a scatterplot of exactly two factors.

    Returns:
    --------
    PlotFrame
        Frame indexed by sample with the two factor columns followed by
        'color_by' and 'shape_by'
    """
    check_model(model)
    factors = resolve_factors(model, factors, include_intercept=True)
    if len(factors) != 2:
        raise InvalidSpecification(
            f"A scatterplot needs exactly two factors, got {len(factors)}"
        )
    if factors[0] == factors[1]:
        raise InvalidSpecification("The two factors must be different")

    frame = _wide_frame(
        model, factors, color_by, shape_by, name_color, name_shape,
        show_missing, on_ambiguous
    )
    logger.info("Scatter frame for %s vs %s: %d samples", factors[0], factors[1], len(frame.data))
    return frame


def build_scatters_frame(
    model: Any,
    factors: FactorSelection = 'all',
    color_by: Any = None,
    shape_by: Any = None,
    name_color: Optional[str] = None,
    name_shape: Optional[str] = None,
    show_missing: bool = True,
    on_ambiguous: str = 'first'
) -> PlotFrame:
    """
    Wide frame for pairwise scatterplots of several factors.

    Factors with zero variance (such as the intercept) are removed.
    """
    check_model(model)
    factors = list(dict.fromkeys(resolve_factors(model, factors)))
    Z = model.get_factors(factors)

    variances = Z.apply(pd.to_numeric, errors='coerce').var(skipna=True).fillna(0)
    constant = [f for f in factors if variances[f] == 0]
    if constant:
        logger.info("Removing constant factors: %s", ', '.join(constant))
        factors = [f for f in factors if f not in constant]
    if len(factors) < 2:
        raise InvalidSpecification(
            "Pairwise scatterplots need at least two non-constant factors"
        )

    frame = _wide_frame(
        model, factors, color_by, shape_by, name_color, name_shape,
        show_missing, on_ambiguous, Z=Z
    )
    logger.info("Pairwise frame: %d factors, %d samples", len(factors), len(frame.data))
    return frame
