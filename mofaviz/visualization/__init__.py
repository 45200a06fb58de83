"""
Visualization tools for latent factors.
"""

from .factors import (
    plot_factor_hist,
    plot_factor_beeswarm,
    plot_factor_scatter,
    plot_factor_scatters,
    plot_factor_cor
)
from .frames import (
    PlotFrame,
    apply_missing_policy,
    build_hist_frame,
    build_beeswarm_frame,
    build_scatter_frame,
    build_scatters_frame
)
from .style import FactorPlotConfig

__all__ = [
    'plot_factor_hist',
    'plot_factor_beeswarm',
    'plot_factor_scatter',
    'plot_factor_scatters',
    'plot_factor_cor',
    'PlotFrame',
    'apply_missing_policy',
    'build_hist_frame',
    'build_beeswarm_frame',
    'build_scatter_frame',
    'build_scatters_frame',
    'FactorPlotConfig'
]
