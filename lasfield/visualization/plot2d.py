"""2-D plotting utilities.

Functions
---------
plot_field
    Image of a raster field with physical extents.
plot_histogram
    Normalised histogram of field values with the target density.
plot_correlation
    Estimated against model correlation functions.
plot_simulation
    The figures requested by a simulation's plot settings.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from lasfield.materials.distributions import Bounded, Distribution, Lognormal


def plot_field(
    raster: np.ndarray,
    dx: float,
    dy: float,
    title: str = "",
    ax: Any = None,
    cmap: str = "gray",
    colorbar: bool = True,
) -> Any:
    """Plot a raster field, row 0 at the top.

    Args:
        raster: Field of shape ``(ny, nx)``.
        dx: Cell size in x.
        dy: Cell size in y.
        title: Plot title.
        ax: Matplotlib axes (creates new figure if None).
        cmap: Matplotlib colour map name.
        colorbar: Show colour bar.

    Returns:
        Matplotlib axes.
    """
    import matplotlib.pyplot as plt

    raster = np.asarray(raster)
    ny, nx = raster.shape
    if ax is None:
        fig, ax = plt.subplots(1, 1, figsize=(10, max(2.0, 10 * ny / nx)))

    im = ax.imshow(
        raster,
        extent=(0.0, nx * dx, ny * dy, 0.0),
        cmap=cmap,
        aspect="equal",
        interpolation="nearest",
    )
    if colorbar:
        plt.colorbar(im, ax=ax)
    ax.xaxis.set_ticks_position("top")
    ax.xaxis.set_label_position("top")
    ax.set_xlabel("x (m)")
    ax.set_ylabel("depth (m)")
    ax.set_title(title)
    return ax


def plot_histogram(
    values: np.ndarray,
    distribution: Distribution | None = None,
    bins: int | None = None,
    title: str = "",
    ax: Any = None,
) -> Any:
    """Histogram of field values, normalised as a density.

    The default number of bins is ``ceil(1 + log2(n)) + 3``.  If
    *distribution* has a density it is drawn on top together with the
    sample and target moments.

    Args:
        values: Field values, any shape.
        distribution: Target marginal.
        bins: Number of bins.
        title: Label of the x axis.
        ax: Matplotlib axes (creates new figure if None).

    Returns:
        Matplotlib axes.
    """
    import matplotlib.pyplot as plt

    values = np.asarray(values, dtype=float).ravel()
    if bins is None:
        bins = int(np.ceil(1 + np.log2(values.size))) + 3
    if ax is None:
        fig, ax = plt.subplots(1, 1, figsize=(6, 4))

    ax.hist(values, bins=bins, density=True, color="0.75", edgecolor="k", linewidth=0.5)

    if distribution is not None and distribution.is_random and distribution.std > 0:
        mn, sd = distribution.mean, distribution.std
        if isinstance(distribution, Bounded):
            lo, hi = distribution.lower, distribution.upper
        else:
            lo, hi = mn - 4 * sd, mn + 5 * sd
            if isinstance(distribution, Lognormal):
                lo = max(lo, 0.0)
        x = np.linspace(lo, hi, 200)
        ax.plot(x, distribution.pdf(x), "r-", linewidth=1, label="Theoretical")
        text = (
            f"Sample mean: {values.mean():.2f}\n"
            f"Sample std: {values.std(ddof=1):.2f}\n"
            f"Theoretical mean: {mn:.2f}\n"
            f"Theoretical std: {sd:.2f}"
        )
        ax.text(
            0.97, 0.95, text, transform=ax.transAxes, ha="right", va="top",
            color="r", bbox={"edgecolor": "r", "facecolor": "white"},
        )

    ax.set_xlabel(title)
    ax.set_ylabel("PDF")
    return ax


def plot_correlation(
    correlations: tuple[np.ndarray, np.ndarray, np.ndarray],
    model: Any = None,
    title: str = "",
    ax: Any = None,
) -> Any:
    """Compare estimated correlation functions with the model.

    Args:
        correlations: ``(cor_x, cor_y, cor_diag)`` as returned by
            :func:`~lasfield.postprocess.statistics.correlation_structure`.
        model: :class:`~lasfield.covariance.models.CovarianceModel`; its
            correlation along each direction is drawn dashed.
        title: Plot title.
        ax: Matplotlib axes (creates new figure if None).

    Returns:
        Matplotlib axes.
    """
    import matplotlib.pyplot as plt

    if ax is None:
        fig, ax = plt.subplots(1, 1, figsize=(6, 4))

    cor_x, cor_y, cor_d = correlations
    labels = ("x direction", "y direction", "diagonal")
    colours = ("b", "r", "k")
    for cor, label, colour in zip((cor_x, cor_y, cor_d), labels, colours):
        ax.plot(cor[:, 0], cor[:, 1], f"{colour}-", linewidth=1, label=f"Simulation: {label}")

    if model is not None:
        dx = cor_x[1, 0] if len(cor_x) > 1 else 1.0
        dy = cor_y[1, 0] if len(cor_y) > 1 else 1.0
        # unit vector of the diagonal
        ux, uy = dx / np.hypot(dx, dy), dy / np.hypot(dx, dy)
        directions = (
            (cor_x[:, 0], 1.0, 0.0),
            (cor_y[:, 0], 0.0, 1.0),
            (cor_d[:, 0], ux, uy),
        )
        for (tau, cx, cy), label, colour in zip(directions, labels, colours):
            t = np.linspace(0.0, tau[-1], 200)
            ax.plot(
                t, model.correlation(cx * t, cy * t), f"{colour}--",
                linewidth=1, label=f"Theoretical: {label}",
            )

    ax.set_xlabel(r"Lag, $\tau$ (m)")
    ax.set_ylabel(r"$\rho(\tau)$")
    ax.set_title(title)
    ax.legend(loc="upper right")
    ax.grid(True, alpha=0.3)
    return ax


def plot_simulation(result: Any) -> list[Any]:
    """Draw the figures requested by ``result.settings``.

    The selected realisation of the selected field, a histogram of each
    field over all realisations and, in debug mode, the averaged
    correlation functions.

    Args:
        result: :class:`~lasfield.simulation.runner.SimulationResult`.

    Returns:
        List of Matplotlib axes, empty if plotting is switched off.
    """
    s = result.settings
    axes: list[Any] = []
    if s.plot_realization:
        fields = (result.field1, result.field2)
        raster = fields[s.plot_field - 1][s.plot_realization - 1]
        axes.append(plot_field(raster, s.dx, s.dy, title=f"Random field {s.plot_field}"))
    if not s.plot:
        return axes

    for i, (values, fs) in enumerate(
        ((result.field1, s.field1), (result.field2, s.field2)), start=1
    ):
        axes.append(plot_histogram(values, fs.distribution, title=f"Random field {i}"))
    for i, cor in enumerate((result.correlation1, result.correlation2), start=1):
        if cor is not None:
            axes.append(plot_correlation(cor, s.model, title=f"Random field #{i}"))
    return axes
