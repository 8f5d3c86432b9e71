"""Cell numbering and raster conversion.

Generated fields are flat vectors numbered row by row from the bottom-left
cell, x fastest (here ``nx=5``, ``ny=3``)::

    | 10 | 11 | 12 | 13 | 14 |
    |  5 |  6 |  7 |  8 |  9 |
    |  0 |  1 |  2 |  3 |  4 |

:func:`to_raster` turns such a vector into an ``(ny, nx)`` array whose
row 0 is the top of the domain, i.e. matrix layout.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike


def cell_index(ix: ArrayLike, iy: ArrayLike, width: int) -> np.ndarray:
    """Flat index of cell ``(ix, iy)`` in a lattice *width* cells wide."""
    return np.asarray(ix) + np.asarray(iy) * width


def to_raster(values: ArrayLike, nx: int, ny: int) -> np.ndarray:
    """Reshape a flat field to an ``(ny, nx)`` raster, top row first."""
    values = np.asarray(values, dtype=float)
    if values.size != nx * ny:
        raise ValueError(f"Expected {nx * ny} values, got {values.size}")
    return np.flipud(values.reshape(ny, nx))


def from_raster(raster: ArrayLike) -> np.ndarray:
    """Inverse of :func:`to_raster`."""
    return np.flipud(np.asarray(raster, dtype=float)).ravel()


def crop_raster(raster: ArrayLike, nxe: int, nye: int) -> np.ndarray:
    """Keep the first *nye* rows and *nxe* columns of a raster."""
    raster = np.asarray(raster)
    if nye > raster.shape[-2] or nxe > raster.shape[-1]:
        raise ValueError(
            f"Cannot crop a {raster.shape[-2]}x{raster.shape[-1]} raster "
            f"to {nye}x{nxe}"
        )
    return raster[..., :nye, :nxe]


def average_up(values: ArrayLike, width: int, height: int) -> np.ndarray:
    """Average 2 × 2 blocks of a flat field onto the parent lattice.

    Args:
        values: Flat field of a ``width × height`` lattice (both even).
        width: Number of cells in x.
        height: Number of cells in y.

    Returns:
        Flat field of the ``width/2 × height/2`` parent lattice.
    """
    if width % 2 or height % 2:
        raise ValueError(f"Lattice {width}x{height} cannot be coarsened")
    grid = np.asarray(values, dtype=float).reshape(height // 2, 2, width // 2, 2)
    return grid.mean(axis=(1, 3)).ravel()
