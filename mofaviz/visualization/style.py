"""
Default styling for factor plots.
"""

import matplotlib.pyplot as plt
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..utils.annotations import MISSING_LABEL

# Default color palette (colorblind-friendly, Nature-style)
DEFAULT_COLORS = {
    'primary': '#E64B35',      # Red
    'secondary': '#4DBBD5',    # Blue
    'tertiary': '#00A087',     # Green
    'quaternary': '#3C5488',   # Deep blue
    'quinary': '#F39B7F',      # Light orange
    'senary': '#91D1C2',       # Teal
    'septenary': '#8491B4',
    'octonary': '#B09C85',
    'neutral': '#808080',      # Gray
}

DEFAULT_FIGSIZE = (8, 6)
DEFAULT_DPI = 300
DEFAULT_FONTSIZE = {
    'title': 12,
    'label': 12,
    'tick': 10,
    'legend': 10,
}

MISSING_COLOR = '#B0B0B0'


@dataclass
class FactorPlotConfig:
    """
    Styling shared by the factor plotting functions.

    Attributes:
        figsize: Figure size for single-panel plots
        panel_size: Width/height in inches of each beeswarm or pairwise panel
        point_size: Marker area for scatter and beeswarm points
        point_alpha: Marker transparency
        dpi: Resolution used when saving
        categorical_colors: Colors cycled over discrete levels
        continuous_cmap: Colormap for continuous color annotations
        correlation_cmap: Colormap for the correlation heatmap
        beeswarm_width: Maximum horizontal spread of beeswarm points
        fontsize: Font sizes for 'title', 'label', 'tick' and 'legend'

    Example:
        >>> config = FactorPlotConfig(point_size=20, continuous_cmap='viridis')
        >>> fig = plot_factor_scatter(model, factors=[1, 2], config=config)
    """
    figsize: Tuple[float, float] = DEFAULT_FIGSIZE
    panel_size: float = 3.0
    point_size: float = 40
    point_alpha: float = 0.9
    dpi: int = DEFAULT_DPI
    categorical_colors: List[str] = field(
        default_factory=lambda: [
            c for k, c in DEFAULT_COLORS.items() if k != 'neutral'
        ]
    )
    continuous_cmap: str = 'RdYlBu_r'
    correlation_cmap: str = 'Blues'
    beeswarm_width: float = 0.4
    fontsize: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_FONTSIZE))

    def categorical_palette(self, levels: Sequence[Any]) -> Dict[Any, str]:
        """Map each level to a color; the missing label gets gray."""
        palette = {}
        colors = self.categorical_colors
        i = 0
        for level in levels:
            if level == MISSING_LABEL:
                palette[level] = MISSING_COLOR
                continue
            palette[level] = colors[i % len(colors)]
            i += 1
        return palette


def _apply_base_style(ax: plt.Axes, fontsize: Optional[Dict[str, int]] = None) -> None:
    """Hide the top/right spines and set tick label sizes."""
    ax.spines['top'].set_visible(False)
    ax.spines['right'].set_visible(False)
    if fontsize is not None:
        ax.tick_params(labelsize=fontsize['tick'])
