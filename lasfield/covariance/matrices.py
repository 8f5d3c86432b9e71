"""Covariance matrices between cell local averages.

Neighbourhood numbering used throughout (3 × 3 parent block and the
2 × 2 subdivision of the centre parent)::

    ----------------------------------------
    |            |            |            |
    |     6      |     7      |     8      |
    |            |            |            |
    |------------|------------|------------|
    |            | 2    |   3 |            |
    |     3      |------4-----|     5      |
    |            | 0    |   1 |            |
    |------------|------------|------------|
    |            |            |            |
    |     0      |     1      |     2      |
    |            |            |            |
    ----------------------------------------

Classes
-------
BaseCovariance
    Stage-0 matrix ``Q`` among all base cells.
NeighbourhoodCovariance
    Per-stage matrices ``R``, ``B`` and ``S``.

Functions
---------
base_covariance
    Build :class:`BaseCovariance` for a ``k1 × k2`` lattice.
stage_covariance
    Build :class:`NeighbourhoodCovariance` for a given child cell size.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

import numpy as np

from lasfield.covariance.local_average import local_average_covariance

CovarianceFunction = Callable[..., float]


@dataclass
class BaseCovariance:
    """Covariance matrix of the stage-0 lattice.

    The 3 × 3 block at base cell size is the ``R`` of
    ``stage_covariance(model, t1 / 2, t2 / 2)``, which the stage-1
    coefficients already use.

    Attributes:
        Q: ``(k1*k2, k1*k2)`` covariance among all base cells.
        cell_size: Base cell size ``(t1, t2)``.
    """

    Q: np.ndarray
    cell_size: tuple[float, float]


@dataclass
class NeighbourhoodCovariance:
    """Covariance matrices for one subdivision stage.

    Attributes:
        R: ``(9, 9)`` covariance among the 3 × 3 parent neighbourhood.
        B: ``(4, 4)`` covariance among the children of the centre parent.
        S: ``(9, 4)`` covariance between parents and those children.
        cell_size: Child cell size ``(t1, t2)``.
    """

    R: np.ndarray
    B: np.ndarray
    S: np.ndarray
    cell_size: tuple[float, float]


class _LagCovariance:
    """Covariance between equal-sized cells, cached by integer lag."""

    def __init__(
        self,
        model: Any,
        t1: float,
        t2: float,
        covariance: CovarianceFunction,
    ) -> None:
        self.model = model
        self.t1 = t1
        self.t2 = t2
        self._covariance = covariance
        self._symmetric = bool(getattr(model, "quadrant_symmetric", False))
        self._cache: dict[tuple[int, int], float] = {}

    def __call__(self, i: int, j: int) -> float:
        if self._symmetric:
            key = (abs(i), abs(j))
        elif (i, j) < (-i, -j):
            key = (-i, -j)
        else:
            key = (i, j)
        if key not in self._cache:
            di, dj = key
            self._cache[key] = self._covariance(
                (0.0, self.t1),
                (0.0, self.t2),
                (di * self.t1, (di + 1) * self.t1),
                (dj * self.t2, (dj + 1) * self.t2),
                self.model,
            )
        return self._cache[key]


def _block_matrix(lag: _LagCovariance, width: int, height: int) -> np.ndarray:
    """Covariance among all cells of a ``width × height`` block."""
    n = width * height
    ix = np.arange(n) % width
    iy = np.arange(n) // width
    mat = np.empty((n, n))
    for a in range(n):
        for b in range(a + 1):
            mat[a, b] = mat[b, a] = lag(int(ix[a] - ix[b]), int(iy[a] - iy[b]))
    return mat


def base_covariance(
    model: Any,
    t1: float,
    t2: float,
    k1: int,
    k2: int,
    covariance: CovarianceFunction = local_average_covariance,
) -> BaseCovariance:
    """Covariance matrix of the stage-0 lattice.

    Args:
        model: Covariance model passed to *covariance*.
        t1: Base cell size in x.
        t2: Base cell size in y.
        k1: Base cells in x.
        k2: Base cells in y.
        covariance: Scalar local-average covariance primitive.

    Returns:
        :class:`BaseCovariance`.
    """
    lag = _LagCovariance(model, t1, t2, covariance)
    return BaseCovariance(Q=_block_matrix(lag, k1, k2), cell_size=(t1, t2))


def stage_covariance(
    model: Any,
    t1: float,
    t2: float,
    covariance: CovarianceFunction = local_average_covariance,
) -> NeighbourhoodCovariance:
    """Covariance matrices for a subdivision into ``t1 × t2`` cells.

    The parents are ``2*t1 × 2*t2`` cells; the centre parent occupies
    ``[2*t1, 4*t1] × [2*t2, 4*t2]``.

    Args:
        model: Covariance model passed to *covariance*.
        t1: Child cell size in x.
        t2: Child cell size in y.
        covariance: Scalar local-average covariance primitive.

    Returns:
        :class:`NeighbourhoodCovariance`.
    """
    parent = _LagCovariance(model, 2.0 * t1, 2.0 * t2, covariance)
    child = _LagCovariance(model, t1, t2, covariance)
    R = _block_matrix(parent, 3, 3)
    B = _block_matrix(child, 2, 2)

    S = np.empty((9, 4))
    for p in range(9):
        px, py = p % 3, p // 3
        ax = (2.0 * px * t1, 2.0 * (px + 1) * t1)
        ay = (2.0 * py * t2, 2.0 * (py + 1) * t2)
        for c in range(4):
            cx, cy = c % 2, c // 2
            bx = ((2 + cx) * t1, (3 + cx) * t1)
            by = ((2 + cy) * t2, (3 + cy) * t2)
            S[p, c] = covariance(ax, ay, bx, by, model)

    return NeighbourhoodCovariance(R=R, B=B, S=S, cell_size=(t1, t2))
