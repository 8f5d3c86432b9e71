"""Tests for the visualization module."""

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
import pytest  # noqa: E402

from lasfield.covariance.models import CovarianceModel  # noqa: E402
from lasfield.materials.distributions import (  # noqa: E402
    Bounded,
    Deterministic,
    Lognormal,
)
from lasfield.postprocess.statistics import correlation_structure  # noqa: E402
from lasfield.simulation.runner import run_simulation  # noqa: E402
from lasfield.simulation.settings import FieldSettings, SimulationSettings  # noqa: E402
from lasfield.visualization.plot2d import (  # noqa: E402
    plot_correlation,
    plot_field,
    plot_histogram,
    plot_simulation,
)


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")


@pytest.fixture
def raster():
    return np.random.default_rng(0).standard_normal((6, 10))


class TestPlotField:
    def test_extent(self, raster):
        ax = plot_field(raster, 0.5, 2.0, title="field")
        x0, x1, y0, y1 = ax.images[0].get_extent()
        assert (x0, x1) == (0.0, 5.0)
        assert (y0, y1) == (12.0, 0.0)
        assert ax.get_title() == "field"

    def test_existing_axes(self, raster):
        fig, ax = plt.subplots()
        assert plot_field(raster, 1.0, 1.0, ax=ax, colorbar=False) is ax


class TestPlotHistogram:
    def test_default_bins(self):
        values = np.random.default_rng(1).standard_normal(256)
        ax = plot_histogram(values)
        # ceil(1 + log2(256)) + 3
        assert len(ax.patches) == 12
        assert not ax.lines

    def test_lognormal_density(self):
        d = Lognormal(30.0, 9.0)
        values = d.transform(np.random.default_rng(2).standard_normal(500))
        ax = plot_histogram(values, d)
        x = ax.lines[0].get_xdata()
        assert x.min() >= 0.0
        assert x.max() == pytest.approx(30.0 + 5 * 9.0)
        assert ax.texts

    def test_bounded_range(self):
        d = Bounded(1.0, 3.0, location=0.0, scale=1.0)
        values = d.transform(np.random.default_rng(3).standard_normal(500))
        ax = plot_histogram(values, d, bins=10)
        x = ax.lines[0].get_xdata()
        assert (x.min(), x.max()) == (1.0, 3.0)

    def test_deterministic_has_no_density(self):
        ax = plot_histogram(np.full(50, 4.0), Deterministic(4.0))
        assert not ax.lines


class TestPlotCorrelation:
    def test_lines(self, raster):
        cor = correlation_structure(raster, 1.0, 1.0)
        ax = plot_correlation(cor, CovarianceModel(2.0, 2.0))
        assert len(ax.lines) == 6
        model_x = ax.lines[3]
        assert model_x.get_ydata()[0] == pytest.approx(1.0)

    def test_without_model(self, raster):
        ax = plot_correlation(correlation_structure(raster, 1.0, 1.0))
        assert len(ax.lines) == 3


class TestPlotSimulation:
    def test_requested_figures(self):
        settings = SimulationSettings(
            field2=FieldSettings(Deterministic(2.0)),
            nxe=8,
            nye=8,
            n_realizations=2,
            plot=True,
            plot_realization=2,
            plot_field=1,
            debug=True,
        )
        axes = plot_simulation(run_simulation(settings))
        # field image, two histograms, one correlation plot
        assert len(axes) == 4

    def test_nothing_requested(self):
        settings = SimulationSettings(nxe=8, nye=8)
        assert plot_simulation(run_simulation(settings)) == []
