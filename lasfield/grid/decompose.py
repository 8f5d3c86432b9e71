"""Grid decomposition for Local Average Subdivision.

LAS generates a coarse ``k1 × k2`` lattice directly and then doubles the
resolution ``m`` times, so a field of ``n1 × n2`` cells must satisfy
``n1 = k1 * 2**m`` and ``n2 = k2 * 2**m``.  The direct stage requires a
Cholesky factorisation of a ``(k1*k2) × (k1*k2)`` covariance matrix, which
is why ``k1 * k2`` is bounded by ``max_base_cells``.

Classes
-------
GridSpec
    A feasible decomposition ``(k1, k2, m)`` of a grid ``(nx, ny)``.

Functions
---------
decompose_grid
    Find ``(k1, k2, m)`` for a given grid by repeated halving.
normalize_grid_size
    Enlarge a requested grid to the nearest decomposable size.
"""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass

from lasfield.errors import GridSizeAdjustedWarning, InvalidGridError

logger = logging.getLogger(__name__)

MAX_BASE_CELLS = 256
MAX_DEPTH = 10


@dataclass(frozen=True)
class GridSpec:
    """Decomposition of an ``nx × ny`` grid.

    Attributes:
        nx: Number of cells in x.
        ny: Number of cells in y.
        k1: Base-lattice cells in x.
        k2: Base-lattice cells in y.
        m: Number of 2 × 2 subdivisions.
    """

    nx: int
    ny: int
    k1: int
    k2: int
    m: int

    def __post_init__(self) -> None:
        if self.nx != self.k1 * 2 ** self.m or self.ny != self.k2 * 2 ** self.m:
            raise InvalidGridError(
                f"({self.nx}, {self.ny}) is not ({self.k1}, {self.k2}) * 2**{self.m}"
            )

    @property
    def base_cells(self) -> int:
        """Number of cells in the stage-0 lattice."""
        return self.k1 * self.k2

    @property
    def is_strip(self) -> bool:
        """``True`` when the base lattice is a single row or column."""
        return self.k1 == 1 or self.k2 == 1

    def shape_at(self, stage: int) -> tuple[int, int]:
        """Return ``(width, height)`` of the lattice at *stage*."""
        if not 0 <= stage <= self.m:
            raise ValueError(f"stage must be in [0, {self.m}], got {stage}")
        return self.k1 * 2 ** stage, self.k2 * 2 ** stage

    def __repr__(self) -> str:
        return (
            f"GridSpec(nx={self.nx}, ny={self.ny}, "
            f"k1={self.k1}, k2={self.k2}, m={self.m})"
        )


def _check_positive(**values: int) -> None:
    for name, value in values.items():
        if int(value) != value or value < 1:
            raise ValueError(f"{name} must be a positive integer, got {value!r}")


def decompose_grid(
    n1: int,
    n2: int,
    max_depth: int = MAX_DEPTH,
    max_base_cells: int = MAX_BASE_CELLS,
) -> GridSpec:
    """Decompose ``(n1, n2)`` into ``(k1, k2) * 2**m``.

    Both sizes are halved together until ``k1 * k2 <= max_base_cells``,
    so *m* is the smallest depth reachable by halving.

    Args:
        n1: Number of cells in x.
        n2: Number of cells in y.
        max_depth: Largest admissible number of subdivisions.
        max_base_cells: Largest admissible ``k1 * k2``.

    Returns:
        The :class:`GridSpec`.

    Raises:
        InvalidGridError: If a halving meets an odd size, or more than
            *max_depth* halvings would be needed.
    """
    _check_positive(n1=n1, n2=n2, max_base_cells=max_base_cells)
    if max_depth < 0:
        raise ValueError(f"max_depth must be non-negative, got {max_depth}")

    k1, k2, m = int(n1), int(n2), 0
    while k1 * k2 > max_base_cells:
        if k1 % 2 or k2 % 2:
            raise InvalidGridError(
                f"Cannot decompose ({n1}, {n2}) into k1*2**m, k2*2**m with "
                f"k1*k2 <= {max_base_cells}: reached odd size ({k1}, {k2}) "
                f"after {m} halvings. Try changing the grid size."
            )
        if m == max_depth:
            raise InvalidGridError(
                f"Decomposing ({n1}, {n2}) needs more than max_depth={max_depth} "
                f"subdivisions (k1*k2={k1 * k2} > {max_base_cells})."
            )
        k1 //= 2
        k2 //= 2
        m += 1

    grid = GridSpec(nx=int(n1), ny=int(n2), k1=k1, k2=k2, m=m)
    logger.info("Grid decomposition: k1=%d, k2=%d, m=%d", k1, k2, m)
    return grid


def normalize_grid_size(
    nxe: int,
    nye: int,
    max_base_cells: int = MAX_BASE_CELLS,
) -> tuple[int, int]:
    """Return the smallest decomposable grid covering ``(nxe, nye)``.

    The depth *m* starts at the smallest value with
    ``nxe * nye <= max_base_cells * 4**m`` and the base sizes are rounded
    up.  If the rounded base lattice is still too large, *m* grows.

    A :class:`~lasfield.errors.GridSizeAdjustedWarning` is emitted when the
    size changes; the generated field must then be cropped back to
    ``(nxe, nye)``.

    Args:
        nxe: Requested number of cells in x.
        nye: Requested number of cells in y.
        max_base_cells: Largest admissible ``k1 * k2``.

    Returns:
        ``(nrfx, nrfy)`` with ``nrfx >= nxe`` and ``nrfy >= nye``.
    """
    _check_positive(nxe=nxe, nye=nye, max_base_cells=max_base_cells)
    nxe, nye = int(nxe), int(nye)

    m = 0
    while nxe * nye > max_base_cells * 4 ** m:
        m += 1

    while True:
        tm = 2 ** m
        k1 = -(-nxe // tm)
        k2 = -(-nye // tm)
        if k1 * k2 <= max_base_cells:
            break
        m += 1

    nrfx, nrfy = k1 * tm, k2 * tm
    if (nrfx, nrfy) != (nxe, nye):
        msg = (
            f"Incompatible number of elements ({nxe}, {nye}); "
            f"adjusting random field size to ({nrfx}, {nrfy})"
        )
        logger.warning(msg)
        warnings.warn(msg, GridSizeAdjustedWarning, stacklevel=2)
    return nrfx, nrfy
