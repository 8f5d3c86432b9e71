"""Sample statistics of generated fields.

Used to check realisations against the target model; none of these
functions take part in generation.

Functions
---------
field_statistics
    Sample mean and standard deviation.
correlation_structure
    Directional sample correlation functions of a raster.
cross_correlation
    Sample correlation coefficient between two fields.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike


def field_statistics(values: ArrayLike) -> tuple[float, float]:
    """Return the sample mean and standard deviation (``ddof=1``)."""
    v = np.asarray(values, dtype=float).ravel()
    return float(v.mean()), float(v.std(ddof=1))


def _directional(dev: np.ndarray, var: float, step: tuple[int, int], spacing: float) -> np.ndarray:
    """Correlation along ``step = (dy, dx)`` index increments."""
    n2, n1 = dev.shape
    sy, sx = step
    n_lags = min(n2 if sy else n1, n1 if sx else n2)
    out = np.zeros((n_lags, 2))
    for j in range(n_lags):
        a = dev[: n2 - j * sy, : n1 - j * sx]
        b = dev[j * sy:, j * sx:]
        count = a.size
        out[j, 0] = j * spacing
        out[j, 1] = np.sum(a * b) / var / max(count - 1, 1)
    return out


def correlation_structure(
    raster: ArrayLike, dx: float, dy: float
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Estimate the correlation function in x, y and along the diagonal.

    Deviations from the field mean are multiplied at each lag and
    normalised by the sample variance and ``pairs - 1``, so the lag-0
    value is exactly 1.

    Args:
        raster: 2-D field of shape ``(ny, nx)``.
        dx: Cell size in x.
        dy: Cell size in y.

    Returns:
        ``(cor_x, cor_y, cor_diag)``, each an array of ``[lag, ρ]`` rows
        with ``nx``, ``ny`` and ``min(nx, ny)`` lags respectively.

    Raises:
        ValueError: If the field has zero variance.
    """
    rf = np.asarray(raster, dtype=float)
    if rf.ndim != 2:
        raise ValueError("raster must be 2-D.")
    dev = rf - rf.mean()
    var = float(rf.var(ddof=1)) if rf.size > 1 else 0.0
    if var <= 0.0:
        raise ValueError("Cannot estimate correlation of a constant field.")

    cor_x = _directional(dev, var, (0, 1), dx)
    cor_y = _directional(dev, var, (1, 0), dy)
    cor_d = _directional(dev, var, (1, 1), float(np.hypot(dx, dy)))
    return cor_x, cor_y, cor_d


def cross_correlation(a: ArrayLike, b: ArrayLike) -> float:
    """Sample correlation coefficient; ``nan`` if either field is constant."""
    a = np.asarray(a, dtype=float).ravel()
    b = np.asarray(b, dtype=float).ravel()
    if a.std() == 0.0 or b.std() == 0.0:
        return float("nan")
    return float(np.corrcoef(a, b)[0, 1])
