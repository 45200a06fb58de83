"""
Resolution of per-sample annotations used to color, shape or group samples.

An annotation can be requested in three ways:

- not at all (``None``), giving a constant vector without a legend
- by name, looked up first among the training-data features of every view
  and then among the model covariates
- as an explicit vector with one value per sample, in the model's sample
  order

Example:
    >>> from mofaviz.utils.annotations import resolve_annotation
    >>>
    >>> color = resolve_annotation(model, "IGHV", aesthetic="color")
    >>> color.is_categorical, color.n_levels
    (True, 2)
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Sequence, Union

import numpy as np
import pandas as pd

from .exceptions import (
    AmbiguousAnnotationName,
    InvalidSpecification,
    TooManyShapeLevels,
)
from .validation import supports_covariates

logger = logging.getLogger(__name__)

# Colors with fewer distinct values than this get a discrete palette
COLOR_LEVEL_THRESHOLD = 5
# Shapes must have fewer distinct values than this
SHAPE_LEVEL_THRESHOLD = 7

AESTHETICS = ('color', 'shape', 'group')
AMBIGUITY_POLICIES = ('first', 'raise')
MISSING_LABEL = 'NA'
MISSING_STRINGS = ('NaN', 'nan')


@dataclass(frozen=True)
class Absent:
    """No annotation requested."""


@dataclass(frozen=True)
class NamedSpec:
    """Annotation requested by feature or covariate name."""
    name: str


@dataclass(frozen=True)
class ExplicitVector:
    """Annotation given as one value per sample, in model sample order."""
    values: tuple

    def __len__(self) -> int:
        return len(self.values)


AnnotationSpec = Union[Absent, NamedSpec, ExplicitVector]


def as_annotation_spec(raw: Any) -> AnnotationSpec:
    """
    Turn a user-supplied annotation argument into an :data:`AnnotationSpec`.

    Parameters:
    -----------
    raw : Any
        ``None``, a name, a sequence of per-sample values, or an already
        tagged spec

    Returns:
    --------
    AnnotationSpec
        The tagged specification

    Raises:
    -------
    InvalidSpecification
        If the argument is empty, a non-string scalar, a length-1
        non-string sequence, or not one-dimensional
    """
    if isinstance(raw, (Absent, NamedSpec, ExplicitVector)):
        return raw
    if raw is None:
        return Absent()
    if isinstance(raw, str):
        return NamedSpec(raw)

    if isinstance(raw, (pd.Series, pd.Index, pd.Categorical, np.ndarray, list, tuple)):
        values = np.asarray(raw, dtype=object)
        if values.ndim != 1:
            raise InvalidSpecification(
                f"Annotation vectors must be one-dimensional, got shape {values.shape}"
            )
        if len(values) == 1 and isinstance(values[0], str):
            return NamedSpec(values[0])
        if len(values) > 1:
            if isinstance(raw, (pd.Series, pd.Index)):
                return ExplicitVector(tuple(raw.tolist()))
            return ExplicitVector(tuple(values.tolist()))

    raise InvalidSpecification(
        "The annotation was specified but not recognised: use a feature or "
        "covariate name, or a vector with one value per sample"
    )


class FeatureLocation(NamedTuple):
    view: str
    row: int


class FeatureIndex:
    """
    Lookup from feature name to its locations across per-view tables.

    Locations are kept in declared view order, so "first match" is
    reproducible.

    Parameters:
    -----------
    train_data : Mapping[str, pd.DataFrame]
        Training tables per view (features x samples)
    """

    def __init__(self, train_data: Mapping[str, pd.DataFrame]):
        self._tables: Dict[str, pd.DataFrame] = {}
        for view, table in train_data.items():
            # samples are matched by their string labels
            table = table.copy()
            table.columns = table.columns.astype(str)
            self._tables[view] = table

        self._locations: Dict[str, List[FeatureLocation]] = {}
        for view, table in self._tables.items():
            seen = set()
            for row, feature in enumerate(table.index):
                if feature in seen:
                    continue
                seen.add(feature)
                self._locations.setdefault(feature, []).append(
                    FeatureLocation(view, row)
                )

    @classmethod
    def from_model(cls, model: Any) -> 'FeatureIndex':
        return cls(model.get_train_data())

    def __contains__(self, name: str) -> bool:
        return name in self._locations

    def __len__(self) -> int:
        return len(self._locations)

    def lookup(self, name: str) -> List[FeatureLocation]:
        """All locations of a feature, in view order (empty if absent)."""
        return list(self._locations.get(name, []))

    def views_of(self, name: str) -> List[str]:
        return [loc.view for loc in self.lookup(name)]

    def row(self, location: FeatureLocation, samples: Sequence[str]) -> pd.Series:
        """Values of a feature row aligned to ``samples`` by label."""
        table = self._tables[location.view]
        values = table.iloc[location.row]
        return values.reindex([str(s) for s in samples])


@dataclass
class ResolvedAnnotation:
    """
    A per-sample annotation ready to be merged into a plotting frame.

    Attributes:
        values: Values indexed by the model's sample names (length N)
        show_legend: Whether a legend should be drawn for this aesthetic
        display_name: Legend title
        is_categorical: Discrete palette/legend if True, gradient otherwise
        aesthetic: One of 'color', 'shape' or 'group'
    """
    values: pd.Series
    show_legend: bool
    display_name: str
    is_categorical: bool
    aesthetic: str = 'color'

    @property
    def missing(self) -> pd.Series:
        return missing_mask(self.values)

    @property
    def n_levels(self) -> int:
        return count_levels(self.values)

    def as_plot_column(self) -> pd.Series:
        """
        Values converted for plotting.

        Categorical annotations become a pandas categorical of string labels
        with missing values labelled ``'NA'``; continuous ones become floats.
        """
        if not self.is_categorical:
            return pd.to_numeric(
                self.values.where(~self.missing), errors='coerce'
            ).astype(float)

        missing = self.missing
        present = self.values[~missing]
        levels = list(pd.unique(present))
        try:
            levels = sorted(levels)
        except TypeError:
            pass
        categories = list(dict.fromkeys(_label(level) for level in levels))
        if missing.any() and MISSING_LABEL not in categories:
            categories.append(MISSING_LABEL)

        labels = [
            MISSING_LABEL if is_missing else _label(value)
            for value, is_missing in zip(self.values, missing)
        ]
        return pd.Series(
            pd.Categorical(labels, categories=categories),
            index=self.values.index,
            name=self.values.name
        )


def _label(value: Any) -> str:
    # 0/1 features read with NaNs come back as floats
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def missing_mask(values: pd.Series) -> pd.Series:
    """Boolean mask of missing annotation values (NA, NaN, or 'NaN' strings)."""
    mask = values.isna()
    if not pd.api.types.is_numeric_dtype(values.dtype):
        mask = mask | values.astype(object).isin(MISSING_STRINGS)
    return mask


def count_levels(values: pd.Series) -> int:
    """Number of distinct non-missing values."""
    return int(values[~missing_mask(values)].nunique())


def _is_numeric(values: pd.Series) -> bool:
    present = values[~missing_mask(values)]
    if pd.api.types.is_numeric_dtype(present.dtype):
        return True
    if any(isinstance(v, str) for v in present):
        return False
    return bool(pd.to_numeric(present, errors='coerce').notna().all())


def classify_annotation(values: pd.Series, aesthetic: str = 'color') -> bool:
    """
    Decide whether an annotation is categorical.

    Parameters:
    -----------
    values : pd.Series
        Resolved per-sample values
    aesthetic : str
        'color', 'shape' or 'group'

    Returns:
    --------
    bool
        True for a discrete legend and palette, False for a gradient

    Raises:
    -------
    TooManyShapeLevels
        If a shape annotation has ``SHAPE_LEVEL_THRESHOLD`` or more levels
    """
    n_levels = count_levels(values)
    if aesthetic == 'shape':
        if n_levels >= SHAPE_LEVEL_THRESHOLD:
            raise TooManyShapeLevels(
                f"The shape annotation has {n_levels} distinct values; at most "
                f"{SHAPE_LEVEL_THRESHOLD - 1} are supported"
            )
        return True
    if aesthetic == 'group':
        return True
    return n_levels < COLOR_LEVEL_THRESHOLD or not _is_numeric(values)


def _lookup_named(
    model: Any,
    name: str,
    samples: List[str],
    on_ambiguous: str,
    feature_index: Optional[FeatureIndex]
) -> pd.Series:
    if feature_index is None:
        feature_index = FeatureIndex.from_model(model)

    locations = feature_index.lookup(name)
    if locations:
        if len(locations) > 1:
            views = [loc.view for loc in locations]
            if on_ambiguous == 'raise':
                raise AmbiguousAnnotationName(
                    f"'{name}' is a feature of several views: {views}"
                )
            logger.warning(
                "'%s' is a feature of several views %s; using view '%s'",
                name, views, views[0]
            )
        logger.debug("Resolved '%s' from view '%s'", name, locations[0].view)
        return feature_index.row(locations[0], samples)

    if supports_covariates(model):
        covariate = model.get_covariates(name)
        if isinstance(covariate, pd.Series):
            covariate = covariate.copy()
            covariate.index = covariate.index.astype(str)
            return covariate.reindex(samples)
        covariate = list(covariate)
        if len(covariate) != len(samples):
            raise InvalidSpecification(
                f"Covariate '{name}' has {len(covariate)} values, "
                f"expected {len(samples)}"
            )
        return pd.Series(covariate, index=samples)

    raise InvalidSpecification(
        f"'{name}' is neither a feature of the training data nor a covariate"
    )


def resolve_annotation(
    model: Any,
    spec: Any,
    aesthetic: str = 'color',
    name: Optional[str] = None,
    on_ambiguous: str = 'first',
    feature_index: Optional[FeatureIndex] = None
) -> ResolvedAnnotation:
    """
    Resolve an annotation specification into a per-sample vector.

    Parameters:
    -----------
    model : Any
        Trained factor model
    spec : Any
        ``None``, a feature/covariate name, a vector of length N, or an
        :data:`AnnotationSpec`
    aesthetic : str
        'color', 'shape' or 'group'; decides the categorical threshold
    name : str, optional
        Legend title (defaults to the feature/covariate name)
    on_ambiguous : str
        What to do when a name is a feature of several views: 'first'
        takes the first view in declared order, 'raise' fails
    feature_index : FeatureIndex, optional
        Prebuilt feature lookup, shared between several resolutions

    Returns:
    --------
    ResolvedAnnotation
        Values aligned to the model's sample names

    Raises:
    -------
    InvalidSpecification
        If the specification is not recognised or has the wrong length
    AmbiguousAnnotationName
        If ``on_ambiguous='raise'`` and the name matches several views
    TooManyShapeLevels
        If a shape annotation has too many distinct values
    """
    if aesthetic not in AESTHETICS:
        raise ValueError(f"Unknown aesthetic: {aesthetic}")
    if on_ambiguous not in AMBIGUITY_POLICIES:
        raise ValueError(f"Unknown ambiguity policy: {on_ambiguous}")

    spec = as_annotation_spec(spec)
    samples = [str(s) for s in model.sample_names()]
    n_samples = len(samples)

    if isinstance(spec, Absent):
        values = pd.Series(True, index=samples)
        show_legend = False
        display_name = name or ''
    elif isinstance(spec, NamedSpec):
        values = _lookup_named(model, spec.name, samples, on_ambiguous, feature_index)
        show_legend = True
        display_name = name or spec.name
    else:
        if len(spec) != n_samples:
            raise InvalidSpecification(
                f"Annotation length mismatch: got {len(spec)} values for "
                f"{n_samples} samples"
            )
        values = pd.Series(list(spec.values), index=samples)
        show_legend = True
        display_name = name or ''

    values.name = aesthetic
    is_categorical = classify_annotation(values, aesthetic)

    logger.debug(
        "Resolved %s annotation '%s': %d levels, categorical=%s",
        aesthetic, display_name, count_levels(values), is_categorical
    )
    return ResolvedAnnotation(
        values=values,
        show_legend=show_legend,
        display_name=display_name,
        is_categorical=is_categorical,
        aesthetic=aesthetic
    )
