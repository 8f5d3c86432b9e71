"""Spatially variable property fields.

Classes
-------
RandomField
    Abstract base for random field generation.
LocalAverageField
    Property field generated by Local Average Subdivision.

Functions
---------
correlate_pair
    Mix two independent standard fields into a cross-correlated pair.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

import numpy as np
from numpy.typing import ArrayLike

from lasfield.covariance.models import CovarianceModel
from lasfield.grid.decompose import MAX_BASE_CELLS, MAX_DEPTH, normalize_grid_size
from lasfield.grid.layout import crop_raster, to_raster
from lasfield.materials.distributions import Distribution, Normal
from lasfield.subdivision.engine import LASGenerator


class RandomField(ABC):
    """Abstract base class for spatially variable property fields."""

    @abstractmethod
    def generate(self, seed: int | np.random.Generator | None = None) -> np.ndarray:
        """Generate one realisation.

        Args:
            seed: Random seed or generator for reproducibility.

        Returns:
            2-D raster of property values, row 0 at the top.
        """


@dataclass
class LocalAverageField(RandomField):
    """Property field on a regular grid of ``nx × ny`` cells.

    Each value is the local average of the property over its cell.  If
    ``(nx, ny)`` cannot be generated directly, a larger grid is generated
    and cropped.

    Args:
        nx: Number of cells in x.
        ny: Number of cells in y.
        dx: Cell size in x.
        dy: Cell size in y.
        model: Covariance model of the underlying standard field.  Its
            variance should be 1; the marginal sets the property scale.
        distribution: Marginal distribution of the property.
        max_base_cells: Largest admissible base lattice ``k1 * k2``.
        max_depth: Largest admissible number of subdivisions.

    Example::

        stiffness = LocalAverageField(
            nx=100, ny=40, dx=0.5, dy=0.5,
            model=CovarianceModel(theta_x=8.0, theta_y=2.0),
            distribution=Lognormal(30e6, 9e6),
        )
        E = stiffness.generate(seed=1)   # shape (40, 100)
    """

    nx: int
    ny: int
    dx: float
    dy: float
    model: CovarianceModel
    distribution: Distribution = field(default_factory=lambda: Normal(0.0, 1.0))
    max_base_cells: int = MAX_BASE_CELLS
    max_depth: int = MAX_DEPTH
    _generator: LASGenerator | None = field(default=None, init=False, repr=False)

    @property
    def generator(self) -> LASGenerator:
        """The underlying :class:`LASGenerator`, built on first use."""
        if self._generator is None:
            nrfx, nrfy = normalize_grid_size(self.nx, self.ny, self.max_base_cells)
            self._generator = LASGenerator(
                nrfx, nrfy, nrfx * self.dx, nrfy * self.dy, self.model,
                max_depth=self.max_depth, max_base_cells=self.max_base_cells,
            )
        return self._generator

    def standard(self, seed: int | np.random.Generator | None = None) -> np.ndarray:
        """Standard Gaussian raster of shape ``(ny, nx)``."""
        gen = self.generator
        raster = to_raster(gen.generate(seed), gen.nx, gen.ny)
        return crop_raster(raster, self.nx, self.ny)

    def generate(self, seed: int | np.random.Generator | None = None) -> np.ndarray:
        """Property raster of shape ``(ny, nx)``."""
        return self.distribution.transform(self.standard(seed))


def correlate_pair(
    g1: ArrayLike, g2: ArrayLike, rho: float
) -> tuple[np.ndarray, np.ndarray]:
    """Cross-correlate two independent standard Gaussian fields.

    Applies the Cholesky factor of ``[[1, rho], [rho, 1]]``:
    ``(g1, rho*g1 + sqrt(1 - rho²)*g2)``.

    Args:
        g1: First standard field.
        g2: Second standard field, same shape.
        rho: Target correlation coefficient.

    Returns:
        The correlated pair.
    """
    if not -1.0 <= rho <= 1.0:
        raise ValueError(f"Correlation coefficient must be in [-1, 1], got {rho}")
    g1 = np.asarray(g1, dtype=float)
    g2 = np.asarray(g2, dtype=float)
    if g1.shape != g2.shape:
        raise ValueError("Fields must have the same shape.")
    return g1, rho * g1 + np.sqrt(1.0 - rho ** 2) * g2
