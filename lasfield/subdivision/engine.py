"""Local Average Subdivision generator.

Classes
-------
LASGenerator
    Grid, covariance and coefficients prepared once, sampled many times.
"""

from __future__ import annotations

import logging
from typing import Any

import numpy as np
from scipy import linalg

from lasfield.covariance.local_average import local_average_covariance
from lasfield.covariance.matrices import CovarianceFunction, base_covariance
from lasfield.errors import CovarianceError
from lasfield.grid.decompose import MAX_BASE_CELLS, MAX_DEPTH, decompose_grid
from lasfield.subdivision.coefficients import DegradedFactor, build_coefficient_table
from lasfield.subdivision.neighbourhoods import sweep_schedule
from lasfield.subdivision.sampler import sample_stages

logger = logging.getLogger(__name__)


class LASGenerator:
    """Standard Gaussian local-average fields on an ``nx × ny`` grid.

    Construction decomposes the grid, factors the stage-0 covariance and
    solves the estimation coefficients of every stage.  These are
    read-only afterwards, so one generator can serve any number of
    realisations.

    Args:
        nx: Number of cells in x; must be ``k1 * 2**m``.
        ny: Number of cells in y; must be ``k2 * 2**m``.
        xl: Physical size of the field in x.
        yl: Physical size of the field in y.
        model: Covariance model, e.g.
            :class:`~lasfield.covariance.models.CovarianceModel`.
        max_depth: Largest admissible number of subdivisions.
        max_base_cells: Largest admissible ``k1 * k2``.
        covariance: Scalar local-average covariance primitive.
        strict: Raise on a singular conditional covariance instead of
            warning.

    Raises:
        InvalidGridError: If ``(nx, ny)`` cannot be decomposed.
        CovarianceError: If the stage-0 covariance is not positive definite.

    Example::

        gen = LASGenerator(64, 64, 10.0, 10.0, CovarianceModel(1.0, 1.0))
        z = gen.generate(seed=42)        # length 64 * 64
        stages = gen.generate_stages(42) # stages 0 … m
    """

    def __init__(
        self,
        nx: int,
        ny: int,
        xl: float,
        yl: float,
        model: Any,
        max_depth: int = MAX_DEPTH,
        max_base_cells: int = MAX_BASE_CELLS,
        covariance: CovarianceFunction = local_average_covariance,
        strict: bool = False,
    ) -> None:
        if xl <= 0 or yl <= 0:
            raise ValueError("Field dimensions xl and yl must be positive.")
        self.grid = decompose_grid(nx, ny, max_depth, max_base_cells)
        self.xl = float(xl)
        self.yl = float(yl)
        self.model = model

        k1, k2 = self.grid.k1, self.grid.k2
        base = base_covariance(model, self.xl / k1, self.yl / k2, k1, k2, covariance)
        try:
            self.base_factor = linalg.cholesky(base.Q, lower=True)
        except linalg.LinAlgError as exc:
            raise CovarianceError(
                "Cholesky decomposition of the stage-0 covariance matrix failed."
            ) from exc

        self.coefficients = build_coefficient_table(
            model, self.grid, self.xl, self.yl, covariance, strict=strict
        )
        self.schedules = {
            stage: sweep_schedule(*self.grid.shape_at(stage - 1))
            for stage in range(1, self.grid.m + 1)
        }
        logger.info("Prepared %r", self)

    @property
    def nx(self) -> int:
        return self.grid.nx

    @property
    def ny(self) -> int:
        return self.grid.ny

    @property
    def cell_size(self) -> tuple[float, float]:
        """Physical size of a final-stage cell."""
        return self.xl / self.nx, self.yl / self.ny

    @property
    def degraded(self) -> list[DegradedFactor]:
        """Degraded conditional factors, see :class:`CoefficientTable`."""
        return self.coefficients.degraded

    def generate_stages(
        self, seed: int | np.random.Generator | None = None
    ) -> list[np.ndarray]:
        """Generate one realisation, returning every stage.

        Args:
            seed: Seed or generator for the random stream.

        Returns:
            List of ``m + 1`` flat fields; stage ``s`` has
            ``k1*2**s × k2*2**s`` cells.
        """
        rng = np.random.default_rng(seed)
        return sample_stages(
            self.grid, self.base_factor, self.coefficients, rng, self.schedules
        )

    def generate(self, seed: int | np.random.Generator | None = None) -> np.ndarray:
        """Generate one realisation at full resolution.

        Args:
            seed: Seed or generator for the random stream.

        Returns:
            Flat array of ``nx * ny`` zero-mean local averages, numbered
            from the bottom-left cell with x fastest.
        """
        return self.generate_stages(seed)[-1]

    def __repr__(self) -> str:
        g = self.grid
        return (
            f"LASGenerator(nx={g.nx}, ny={g.ny}, k1={g.k1}, k2={g.k2}, m={g.m}, "
            f"xl={self.xl}, yl={self.yl})"
        )
