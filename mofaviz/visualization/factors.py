"""
Plotting functions for the latent factors of a trained model.

Histograms, beeswarm plots, scatterplots and correlation heatmaps of the
inferred factor values, colored or shaped by training-data features,
covariates or user-supplied per-sample vectors.

Examples
--------
>>> from mofaviz import create_sample_model, plot_factor_beeswarm
>>> model = create_sample_model(n_samples=60, random_state=0)
>>> fig = plot_factor_beeswarm(model, factors=[1, 2, 3], color_by='IGHV')
>>> fig = plot_factor_scatter(model, factors=[1, 2], color_by='IGHV',
...                           shape_by='sex', show_missing=False)
"""

import logging
from typing import Any, Dict, Optional, Tuple

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
import seaborn as sns
from scipy import stats

from ..utils.metrics import factor_correlation
from ..utils.validation import FactorSelection, check_model
from .frames import (
    ANNOTATION_COLUMNS,
    PlotFrame,
    build_beeswarm_frame,
    build_hist_frame,
    build_scatter_frame,
    build_scatters_frame,
)
from .style import MISSING_COLOR, FactorPlotConfig, _apply_base_style

logger = logging.getLogger(__name__)


def _figure(ax: Optional[plt.Axes], figsize: Tuple[float, float]) -> Tuple[plt.Figure, plt.Axes]:
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.get_figure()
    return fig, ax


def _save(fig: plt.Figure, save_path: Optional[str], config: FactorPlotConfig) -> None:
    if save_path:
        fig.savefig(save_path, dpi=config.dpi, bbox_inches='tight')
        logger.info("Figure saved to %s", save_path)


def _van_der_corput(n: int, base: int = 2) -> np.ndarray:
    sequence = np.zeros(n)
    for i in range(n):
        k, denominator, value = i + 1, 1.0, 0.0
        while k:
            k, remainder = divmod(k, base)
            denominator *= base
            value += remainder / denominator
        sequence[i] = value
    return sequence


def _quasirandom_offsets(values: np.ndarray, width: float = 0.4) -> np.ndarray:
    """
    Horizontal offsets for a beeswarm panel.

    Points are spread with a low-discrepancy sequence over their rank and
    scaled by the estimated density at their value, so dense regions fan
    out wider than sparse ones.
    """
    values = np.asarray(values, dtype=float)
    offsets = np.zeros(len(values))
    finite = np.isfinite(values)
    n = int(finite.sum())
    if n == 0:
        return offsets

    x = values[finite]
    if n > 2 and np.std(x) > 0:
        density = stats.gaussian_kde(x)(x)
        density = density / density.max()
    else:
        density = np.ones(n)

    ranks = np.empty(n, dtype=int)
    ranks[np.argsort(x, kind='mergesort')] = np.arange(n)
    jitter = _van_der_corput(n)[ranks]
    offsets[finite] = (jitter - 0.5) * 2 * width * density
    return offsets


def _legend_columns(frame: PlotFrame) -> Tuple[pd.DataFrame, Dict[str, Optional[str]]]:
    """
    Rename annotation columns after their legend titles.

    Aesthetics without a legend map to None. A title that would collide
    with another column keeps the plain column name.
    """
    data = frame.data
    taken = set(str(c) for c in data.columns)
    renames = {}
    keys: Dict[str, Optional[str]] = {}
    for aes, column in ANNOTATION_COLUMNS.items():
        annotation = frame.annotation(aes)
        if annotation is None or not annotation.show_legend or column not in data.columns:
            keys[aes] = None
            continue
        title = annotation.display_name or column
        if title != column and title in taken:
            title = column
        if title != column:
            renames[column] = title
            taken.add(title)
        keys[aes] = title
    return data.rename(columns=renames), keys


def _scatter_kwargs(
    frame: PlotFrame,
    data: pd.DataFrame,
    keys: Dict[str, Optional[str]],
    config: FactorPlotConfig
) -> Dict[str, Any]:
    kwargs: Dict[str, Any] = {'s': config.point_size, 'alpha': config.point_alpha}

    hue = keys.get('color')
    if hue is not None:
        kwargs['hue'] = hue
        if frame.annotation('color').is_categorical:
            levels = list(data[hue].cat.categories)
            kwargs['hue_order'] = levels
            kwargs['palette'] = config.categorical_palette(levels)
        else:
            kwargs['palette'] = config.continuous_cmap
            values = data[hue].to_numpy(dtype=float)
            if np.isfinite(values).any():
                kwargs['hue_norm'] = (np.nanmin(values), np.nanmax(values))
    else:
        kwargs['color'] = config.categorical_colors[0]

    style = keys.get('shape')
    if style is not None:
        kwargs['style'] = style
        kwargs['style_order'] = list(data[style].cat.categories)

    return kwargs


def _draw_points(
    ax: plt.Axes,
    data: pd.DataFrame,
    x: str,
    y: str,
    kwargs: Dict[str, Any],
    legend: Any
) -> None:
    """
    Scatter the rows of ``data``, keeping rows with a missing gradient color.

    seaborn skips rows whose continuous hue is NaN, so those are drawn
    separately in the missing color with the same marker mapping.
    """
    hue = kwargs.get('hue')
    if hue is not None and not isinstance(data[hue].dtype, pd.CategoricalDtype):
        missing = data[hue].isna().to_numpy()
        if missing.any():
            plain = {
                k: v for k, v in kwargs.items()
                if k not in ('hue', 'hue_order', 'hue_norm', 'palette')
            }
            sns.scatterplot(
                data=data[missing], x=x, y=y,
                color=MISSING_COLOR, legend=False, ax=ax, **plain
            )
            data = data[~missing]
            if data.empty:
                return

    sns.scatterplot(data=data, x=x, y=y, legend=legend, ax=ax, **kwargs)


def _legend_handles(ax: plt.Axes):
    legend = ax.get_legend()
    if legend is None:
        return None
    handles = legend.legend_handles
    labels = [text.get_text() for text in legend.get_texts()]
    return handles, labels, legend.get_title().get_text()


def plot_factor_hist(
    model: Any,
    factor: FactorSelection,
    group_by: Any = None,
    group_name: Optional[str] = None,
    alpha: float = 0.5,
    binwidth: Optional[float] = None,
    show_missing: bool = False,
    on_ambiguous: str = 'first',
    ax: Optional[plt.Axes] = None,
    save_path: Optional[str] = None,
    config: Optional[FactorPlotConfig] = None
) -> plt.Figure:
    """
    Plot a histogram of latent factor values.

    Parameters
    ----------
    model : BaseFactorModel
        Trained factor model.
    factor : str or int
        Factor name, or 1-based factor index.
    group_by : str or sequence, optional
        Groups used to color the histogram: a training-data feature name,
        a covariate name, or one value per sample. Always treated as
        discrete.
    group_name : str, optional
        Legend title. Defaults to ``group_by`` when it is a name.
    alpha : float, optional
        Bar transparency. Default is 0.5.
    binwidth : float, optional
        Bin width. If None, seaborn picks the bins.
    show_missing : bool, optional
        Whether to keep samples whose group is missing. Default is False.
    on_ambiguous : str, optional
        'first' or 'raise' when ``group_by`` names a feature of several views.
    ax : plt.Axes, optional
        Existing axes to plot on.
    save_path : str, optional
        Path to save the figure.
    config : FactorPlotConfig, optional
        Styling options.

    Returns
    -------
    plt.Figure
        Matplotlib figure object.
    """
    config = config or FactorPlotConfig()
    frame = build_hist_frame(
        model, factor,
        group_by=group_by,
        group_name=group_name,
        show_missing=show_missing,
        on_ambiguous=on_ambiguous
    )
    data, keys = _legend_columns(frame)
    group = frame.annotation('group')

    kwargs: Dict[str, Any] = {}
    hue = keys['group']
    if hue is not None:
        levels = list(data[hue].cat.categories)
        kwargs.update(hue=hue, hue_order=levels, palette=config.categorical_palette(levels))
    else:
        kwargs['color'] = config.categorical_colors[0]

    fig, ax = _figure(ax, config.figsize)
    sns.histplot(
        data=data, x='value',
        binwidth=binwidth,
        alpha=alpha,
        element='bars',
        multiple='layer',
        ax=ax,
        **kwargs
    )

    ax.set_xlabel(frame.factors[0], fontsize=config.fontsize['label'])
    ax.set_ylabel('Count', fontsize=config.fontsize['label'])
    ax.set_ylim(bottom=0)
    _apply_base_style(ax, config.fontsize)

    legend = ax.get_legend()
    if legend is not None:
        legend.set_title(group.display_name)
        legend.set_frame_on(False)

    _save(fig, save_path, config)
    return fig


def plot_factor_beeswarm(
    model: Any,
    factors: FactorSelection = 'all',
    color_by: Any = None,
    shape_by: Any = None,
    name_color: Optional[str] = None,
    name_shape: Optional[str] = None,
    show_missing: bool = False,
    on_ambiguous: str = 'first',
    save_path: Optional[str] = None,
    config: Optional[FactorPlotConfig] = None
) -> plt.Figure:
    """
    Beeswarm plot of the latent factor values, one panel per factor.

    Parameters
    ----------
    model : BaseFactorModel
        Trained factor model.
    factors : str, int or sequence, optional
        Factor names, 1-based indices, or 'all'. Default is 'all'.
    color_by : str or sequence, optional
        Feature name, covariate name, or one value per sample. Numeric
        annotations with 5 or more distinct values get a gradient.
    shape_by : str or sequence, optional
        As ``color_by``, with at most 6 distinct values.
    name_color, name_shape : str, optional
        Legend titles.
    show_missing : bool, optional
        Whether to keep samples with a missing color or shape.
        Default is False.
    on_ambiguous : str, optional
        'first' or 'raise' when a name is a feature of several views.
    save_path : str, optional
        Path to save the figure.
    config : FactorPlotConfig, optional
        Styling options.

    Returns
    -------
    plt.Figure
        Matplotlib figure object.
    """
    config = config or FactorPlotConfig()
    frame = build_beeswarm_frame(
        model, factors,
        color_by=color_by, shape_by=shape_by,
        name_color=name_color, name_shape=name_shape,
        show_missing=show_missing,
        on_ambiguous=on_ambiguous
    )
    data, keys = _legend_columns(frame)
    kwargs = _scatter_kwargs(frame, data, keys, config)
    has_legend = keys['color'] is not None or keys['shape'] is not None

    n_panels = len(frame.factors)
    fig, axes = plt.subplots(
        1, n_panels,
        figsize=(config.panel_size * n_panels + (2 if has_legend else 0),
                 config.panel_size * 1.5),
        squeeze=False
    )
    axes = axes[0]

    for i, (ax, factor) in enumerate(zip(axes, frame.factors)):
        panel = data[data['factor'] == factor].copy()
        panel['_offset'] = _quasirandom_offsets(
            panel['value'].to_numpy(), config.beeswarm_width
        )
        last = i == n_panels - 1
        _draw_points(
            ax, panel, '_offset', 'value', kwargs,
            legend='auto' if (has_legend and last) else False
        )
        ax.set_xlim(-0.5, 0.5)
        ax.set_xticks([])
        ax.set_xlabel('')
        ax.set_ylabel('Factor value' if i == 0 else '', fontsize=config.fontsize['label'])
        ax.set_title(factor, fontsize=config.fontsize['title'])
        _apply_base_style(ax, config.fontsize)
        ax.spines['bottom'].set_visible(False)

        if last and ax.get_legend() is not None:
            sns.move_legend(ax, 'upper left', bbox_to_anchor=(1.02, 1), frameon=False)

    fig.tight_layout()
    _save(fig, save_path, config)
    return fig


def plot_factor_scatter(
    model: Any,
    factors: FactorSelection,
    color_by: Any = None,
    shape_by: Any = None,
    name_color: Optional[str] = None,
    name_shape: Optional[str] = None,
    show_missing: bool = True,
    on_ambiguous: str = 'first',
    ax: Optional[plt.Axes] = None,
    save_path: Optional[str] = None,
    config: Optional[FactorPlotConfig] = None
) -> plt.Figure:
    """
    Scatterplot of the values of two latent factors.

    Parameters
    ----------
    model : BaseFactorModel
        Trained factor model.
    factors : sequence
        Two factor names or two 1-based factor indices.
    color_by, shape_by : str or sequence, optional
        Feature name, covariate name, or one value per sample.
    name_color, name_shape : str, optional
        Legend titles.
    show_missing : bool, optional
        Whether to keep samples with a missing color or shape; missing
        shapes are drawn as an 'NA' level. Default is True.
    on_ambiguous : str, optional
        'first' or 'raise' when a name is a feature of several views.
    ax : plt.Axes, optional
        Existing axes to plot on.
    save_path : str, optional
        Path to save the figure.
    config : FactorPlotConfig, optional
        Styling options.

    Returns
    -------
    plt.Figure
        Matplotlib figure object.
    """
    config = config or FactorPlotConfig()
    frame = build_scatter_frame(
        model, factors,
        color_by=color_by, shape_by=shape_by,
        name_color=name_color, name_shape=name_shape,
        show_missing=show_missing,
        on_ambiguous=on_ambiguous
    )
    data, keys = _legend_columns(frame)
    kwargs = _scatter_kwargs(frame, data, keys, config)
    has_legend = keys['color'] is not None or keys['shape'] is not None
    x, y = frame.factors

    fig, ax = _figure(ax, config.figsize)
    _draw_points(ax, data, x, y, kwargs, legend='auto' if has_legend else False)
    ax.set_xlabel(x, fontsize=config.fontsize['label'])
    ax.set_ylabel(y, fontsize=config.fontsize['label'])
    _apply_base_style(ax, config.fontsize)

    if ax.get_legend() is not None:
        sns.move_legend(ax, 'upper left', bbox_to_anchor=(1.02, 1), frameon=False)

    _save(fig, save_path, config)
    return fig


def plot_factor_scatters(
    model: Any,
    factors: FactorSelection = 'all',
    color_by: Any = None,
    shape_by: Any = None,
    name_color: Optional[str] = None,
    name_shape: Optional[str] = None,
    show_missing: bool = True,
    on_ambiguous: str = 'first',
    save_path: Optional[str] = None,
    config: Optional[FactorPlotConfig] = None
) -> plt.Figure:
    """
    Pairwise scatterplots of several latent factors.

    Constant factors are left out. The diagonal panels carry the factor
    names and a single legend is drawn for the whole grid.

    Parameters
    ----------
    model : BaseFactorModel
        Trained factor model.
    factors : str, int or sequence, optional
        Factor names, 1-based indices, or 'all'. Default is 'all'.
    color_by, shape_by : str or sequence, optional
        Feature name, covariate name, or one value per sample.
    name_color, name_shape : str, optional
        Legend titles.
    show_missing : bool, optional
        Whether to keep samples with a missing color or shape.
        Default is True.
    on_ambiguous : str, optional
        'first' or 'raise' when a name is a feature of several views.
    save_path : str, optional
        Path to save the figure.
    config : FactorPlotConfig, optional
        Styling options.

    Returns
    -------
    plt.Figure
        Matplotlib figure object.
    """
    config = config or FactorPlotConfig()
    frame = build_scatters_frame(
        model, factors,
        color_by=color_by, shape_by=shape_by,
        name_color=name_color, name_shape=name_shape,
        show_missing=show_missing,
        on_ambiguous=on_ambiguous
    )
    data, keys = _legend_columns(frame)
    kwargs = _scatter_kwargs(frame, data, keys, config)
    has_legend = keys['color'] is not None or keys['shape'] is not None

    k = len(frame.factors)
    fig, axes = plt.subplots(
        k, k,
        figsize=(config.panel_size * k, config.panel_size * k),
        squeeze=False
    )

    legend = None
    for i, y in enumerate(frame.factors):
        for j, x in enumerate(frame.factors):
            ax = axes[i, j]
            if i == j:
                ax.set_xticks([])
                ax.set_yticks([])
                ax.text(0.5, 0.5, x, ha='center', va='center',
                        transform=ax.transAxes, fontsize=config.fontsize['title'])
                continue

            want_legend = has_legend and legend is None
            _draw_points(ax, data, x, y, kwargs, legend='auto' if want_legend else False)
            if want_legend and ax.get_legend() is not None:
                legend = _legend_handles(ax)
                ax.get_legend().remove()

            ax.set_xlabel(x if i == k - 1 else '', fontsize=config.fontsize['label'])
            ax.set_ylabel(y if j == 0 else '', fontsize=config.fontsize['label'])
            _apply_base_style(ax, config.fontsize)

    fig.tight_layout()
    if legend is not None:
        handles, labels, title = legend
        fig.legend(
            handles, labels, title=title or None,
            loc='center left', bbox_to_anchor=(1.0, 0.5), frameon=False
        )

    _save(fig, save_path, config)
    return fig


def plot_factor_cor(
    model: Any,
    method: str = 'pearson',
    ax: Optional[plt.Axes] = None,
    save_path: Optional[str] = None,
    config: Optional[FactorPlotConfig] = None,
    **heatmap_kwargs
) -> pd.DataFrame:
    """
    Plot the correlation matrix between the latent factors.

    The factors are encouraged to be uncorrelated, so the matrix is usually
    close to diagonal. Strongly correlated factors are redundant and may
    indicate too many factors.

    Parameters
    ----------
    model : BaseFactorModel
        Trained factor model.
    method : str, optional
        'pearson' (default), 'spearman' or 'kendall'.
    ax : plt.Axes, optional
        Existing axes to plot on.
    save_path : str, optional
        Path to save the figure.
    config : FactorPlotConfig, optional
        Styling options.
    **heatmap_kwargs
        Passed to ``seaborn.heatmap``.

    Returns
    -------
    pd.DataFrame
        Symmetric matrix of absolute correlation coefficients.
    """
    config = config or FactorPlotConfig()
    check_model(model)

    r = factor_correlation(model.get_factors(), method=method)

    options = {
        'cmap': config.correlation_cmap,
        'vmin': 0,
        'vmax': 1,
        'square': True,
        'linewidths': 0.5,
        'cbar_kws': {'label': f'|{method} correlation|'},
    }
    options.update(heatmap_kwargs)

    fig, ax = _figure(ax, config.figsize)
    sns.heatmap(r, ax=ax, **options)
    ax.tick_params(labelsize=config.fontsize['tick'])

    _save(fig, save_path, config)
    return r
