"""
Basic functionality tests for the MOFA factor plots package.
"""

import unittest
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from mofaviz.data import create_sample_model


class TestBasicFunctionality(unittest.TestCase):
    """Test an end-to-end plotting session on synthetic data."""

    def setUp(self):
        """Set up test fixtures."""
        self.model = create_sample_model(
            n_samples=30,
            n_factors=3,
            random_state=42
        )

    def tearDown(self):
        plt.close('all')

    def test_model_generation(self):
        """Test synthetic model generation."""
        self.assertEqual(self.model.n_samples, 30)
        self.assertIn('intercept', self.model.factor_names())
        self.assertIn('IGHV', self.model.get_train_data()['Mutations'].index)

    def test_all_plots(self):
        """Test that every plot can be drawn."""
        from mofaviz import (
            plot_factor_hist,
            plot_factor_beeswarm,
            plot_factor_scatter,
            plot_factor_scatters,
            plot_factor_cor,
        )

        self.assertIsInstance(plot_factor_hist(self.model, 1, group_by='IGHV'), plt.Figure)
        self.assertIsInstance(plot_factor_beeswarm(self.model, color_by='trisomy12'), plt.Figure)
        self.assertIsInstance(
            plot_factor_scatter(self.model, [1, 2], color_by='IGHV', shape_by='sex'),
            plt.Figure
        )
        self.assertIsInstance(plot_factor_scatters(self.model, color_by='age'), plt.Figure)

        r = plot_factor_cor(self.model)
        self.assertEqual(r.shape, (3, 3))


class TestPackageIntegration(unittest.TestCase):
    """Test package integration and imports."""

    def test_imports(self):
        """Test that all main components can be imported."""
        try:
            from mofaviz import (
                FactorModel,
                create_sample_model,
                resolve_annotation,
                factor_correlation,
                plot_factor_scatter,
                FactorPlotConfig,
            )
        except ImportError as e:
            self.fail(f"Import failed: {e}")

    def test_package_metadata(self):
        """Test package metadata."""
        import mofaviz

        self.assertTrue(hasattr(mofaviz, '__version__'))
        self.assertTrue(hasattr(mofaviz, '__author__'))


if __name__ == '__main__':
    unittest.main()
