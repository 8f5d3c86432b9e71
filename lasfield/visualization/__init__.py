"""Visualization: 2-D plotting utilities."""

from lasfield.visualization.plot2d import (
    plot_correlation,
    plot_field,
    plot_histogram,
    plot_simulation,
)

__all__ = [
    "plot_correlation",
    "plot_field",
    "plot_histogram",
    "plot_simulation",
]
