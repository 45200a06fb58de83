"""
MOFA Factor Plots

Visualization helpers for the latent factors of a trained multi-omics
factor analysis model: histograms, beeswarm plots, scatterplots and
factor correlation matrices.
"""

__version__ = "0.1.0"
__author__ = "MOFA Factor Plots Team"

# Core module imports
from .models.base import BaseFactorModel
from .models.factor_model import FactorModel
from .data.loaders import create_sample_model
from .utils.annotations import resolve_annotation, ResolvedAnnotation
from .utils.exceptions import (
    FactorPlotError,
    InvalidSpecification,
    UnknownFactor,
    TooManyShapeLevels,
    AmbiguousAnnotationName,
)
from .utils.metrics import factor_correlation
from .utils.validation import resolve_factors
from .visualization.factors import (
    plot_factor_hist,
    plot_factor_beeswarm,
    plot_factor_scatter,
    plot_factor_scatters,
    plot_factor_cor,
)
from .visualization.style import FactorPlotConfig

__all__ = [
    'BaseFactorModel',
    'FactorModel',
    'create_sample_model',
    'resolve_annotation',
    'ResolvedAnnotation',
    'resolve_factors',
    'factor_correlation',
    'FactorPlotError',
    'InvalidSpecification',
    'UnknownFactor',
    'TooManyShapeLevels',
    'AmbiguousAnnotationName',
    'plot_factor_hist',
    'plot_factor_beeswarm',
    'plot_factor_scatter',
    'plot_factor_scatters',
    'plot_factor_cor',
    'FactorPlotConfig'
]
