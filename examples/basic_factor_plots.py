#!/usr/bin/env python3
"""
Basic Factor Plots Example

This example demonstrates how to use the mofaviz package to:
1. Build a synthetic trained factor model
2. Inspect the distribution of single factors
3. Compare factors with beeswarm and scatter plots
4. Check the correlation between factors
"""

import logging
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import numpy as np

from mofaviz import (
    create_sample_model,
    plot_factor_hist,
    plot_factor_beeswarm,
    plot_factor_scatter,
    plot_factor_scatters,
    plot_factor_cor,
    FactorPlotConfig,
)


def main():
    """Run basic factor plots example."""
    logging.basicConfig(level=logging.INFO, format='%(name)s - %(levelname)s - %(message)s')

    print("=== MOFA Factor Plots Example ===")
    print()

    # Step 1: Generate synthetic model
    print("1. Generating synthetic factor model...")
    model = create_sample_model(n_samples=120, n_factors=5, random_state=42)
    print(f"   {model!r}")
    print()

    config = FactorPlotConfig(dpi=150)

    # Step 2: Histogram of the first factor by IGHV status
    print("2. Histogram of LF1 grouped by IGHV...")
    plot_factor_hist(
        model, 1,
        group_by='IGHV',
        group_name='IGHV status',
        save_path='factor_hist.png',
        config=config
    )
    print("   Saved: factor_hist.png")

    # Step 3: Beeswarm of every factor
    print("3. Beeswarm plots colored by IGHV, shaped by sex...")
    plot_factor_beeswarm(
        model,
        factors='all',
        color_by='IGHV',
        shape_by='sex',
        save_path='factor_beeswarm.png',
        config=config
    )
    print("   Saved: factor_beeswarm.png")

    # Step 4: Scatterplots
    print("4. Scatterplots of factor pairs...")
    plot_factor_scatter(
        model, [1, 2],
        color_by='age',
        shape_by='trisomy12',
        show_missing=False,
        save_path='factor_scatter.png',
        config=config
    )

    # A per-sample vector works the same way as a feature name
    risk = np.where(model.get_factors()['LF1'] > 0, 'high', 'low')
    plot_factor_scatters(
        model,
        factors=[1, 2, 3],
        color_by=risk,
        name_color='LF1 risk',
        save_path='factor_scatters.png',
        config=config
    )
    print("   Saved: factor_scatter.png, factor_scatters.png")

    # Step 5: Factor correlation
    print("5. Factor correlation...")
    r = plot_factor_cor(model, save_path='factor_cor.png', config=config, annot=True, fmt='.2f')
    off_diagonal = r.where(~np.eye(len(r), dtype=bool))
    print(f"   Largest |r| between factors: {off_diagonal.max().max():.3f}")
    print("   Saved: factor_cor.png")

    plt.close('all')

    print("\nExample completed successfully!")


if __name__ == "__main__":
    main()
