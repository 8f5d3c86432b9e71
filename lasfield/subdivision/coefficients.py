"""Best linear estimation coefficients for each subdivision stage.

For a parent neighbourhood with covariance ``R``, children covariance
``B`` and parent-child covariance ``S``, the children of the centre parent
are generated as

    z = Aᵀ p + C u,      A = R⁻¹ S,      C Cᵀ = B − Sᵀ A

where ``p`` are the parent values and ``u`` independent standard normals.
Only the first three children are generated this way; the fourth follows
from upward averaging, ``z₃ = 4 p_centre − z₀ − z₁ − z₂``, so the last
row and column of ``B`` and the last column of ``S`` are dropped.

Classes
-------
EstimationPair
    ``(A, C)`` for one neighbourhood.
StageCoefficients
    All pairs of one stage, keyed by topology and orientation.
CoefficientTable
    Stage index → :class:`StageCoefficients`, plus degradation records.
DegradedFactor
    Record of a conditional covariance that was not positive definite.

Functions
---------
solve_neighbourhood
    Solve one neighbourhood.
solve_stage
    Solve all neighbourhoods of one stage.
build_coefficient_table
    Solve every stage of a grid.
"""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass, field
from typing import Any, Iterable

import numpy as np
from scipy import linalg

from lasfield.covariance.local_average import local_average_covariance
from lasfield.covariance.matrices import (
    CovarianceFunction,
    NeighbourhoodCovariance,
    stage_covariance,
)
from lasfield.errors import (
    SingularConditionalCovarianceError,
    SingularConditionalCovarianceWarning,
)
from lasfield.grid.decompose import GridSpec
from lasfield.subdivision.cholesky import conditional_factor
from lasfield.subdivision.neighbourhoods import (
    NEIGHBOURHOODS,
    Neighbourhood,
    strip_neighbourhoods,
)

logger = logging.getLogger(__name__)

N_SAMPLED = 3


@dataclass
class EstimationPair:
    """Estimation matrix and conditional factor for one neighbourhood.

    Attributes:
        neighbourhood: The parent neighbourhood.
        A: ``(k, 3)`` estimation coefficients.
        C: ``(3, 3)`` lower-triangular conditional factor.
        degraded: ``True`` if *C* came from the tolerant factorisation.
        residual: ``‖C Cᵀ − (B − Sᵀ A)‖``.
    """

    neighbourhood: Neighbourhood
    A: np.ndarray
    C: np.ndarray
    degraded: bool = False
    residual: float = 0.0

    def full_estimator(self) -> np.ndarray:
        """Conditional-mean map from the 3 × 3 template to all 4 children.

        Returns:
            ``(9, 4)`` array; rows of unused template positions are zero.
        """
        k = len(self.neighbourhood.positions)
        A4 = np.zeros((k, 4))
        A4[:, :N_SAMPLED] = self.A
        A4[:, 3] = -self.A.sum(axis=1)
        A4[self.neighbourhood.centre, 3] += 4.0
        full = np.zeros((9, 4))
        full[list(self.neighbourhood.positions)] = A4
        return full

    def full_covariance(self) -> np.ndarray:
        """``(4, 4)`` conditional covariance of all four children."""
        M = np.vstack([np.eye(N_SAMPLED), -np.ones((1, N_SAMPLED))])
        MC = M @ self.C
        return MC @ MC.T


@dataclass(frozen=True)
class DegradedFactor:
    """A conditional covariance that had to be factored approximately."""

    stage: int
    topology: str
    orientation: str
    residual: float


@dataclass
class StageCoefficients:
    """Coefficients of one subdivision stage.

    Attributes:
        stage: Stage produced by these coefficients (1 … m).
        cell_size: Child cell size ``(t1, t2)``.
        pairs: ``{(topology, orientation): EstimationPair}``.
    """

    stage: int
    cell_size: tuple[float, float]
    pairs: dict[tuple[str, str], EstimationPair] = field(default_factory=dict)

    def __getitem__(self, key: tuple[str, str]) -> EstimationPair:
        return self.pairs[key]

    def __contains__(self, key: tuple[str, str]) -> bool:
        return key in self.pairs

    def orientations(self, topology: str) -> dict[str, EstimationPair]:
        """All pairs of *topology*, keyed by orientation."""
        return {o: p for (t, o), p in self.pairs.items() if t == topology}

    @property
    def degraded(self) -> list[DegradedFactor]:
        return [
            DegradedFactor(self.stage, t, o, p.residual)
            for (t, o), p in self.pairs.items()
            if p.degraded
        ]


@dataclass
class CoefficientTable:
    """Coefficients for every stage of a grid.

    Attributes:
        grid: The grid decomposition.
        stages: ``{stage: StageCoefficients}`` for stages 1 … m.
    """

    grid: GridSpec
    stages: dict[int, StageCoefficients] = field(default_factory=dict)

    def __getitem__(self, stage: int) -> StageCoefficients:
        return self.stages[stage]

    def __len__(self) -> int:
        return len(self.stages)

    @property
    def degraded(self) -> list[DegradedFactor]:
        """Every degraded factor, in stage order."""
        out: list[DegradedFactor] = []
        for stage in sorted(self.stages):
            out.extend(self.stages[stage].degraded)
        return out


def solve_neighbourhood(
    cov: NeighbourhoodCovariance, neighbourhood: Neighbourhood
) -> EstimationPair:
    """Estimation pair for one neighbourhood.

    Args:
        cov: Stage covariance matrices.
        neighbourhood: Parents available to the cell.

    Returns:
        :class:`EstimationPair`.
    """
    idx = list(neighbourhood.positions)
    R = cov.R[np.ix_(idx, idx)]
    S = cov.S[idx, :N_SAMPLED]
    A = linalg.solve(R, S, assume_a="sym")
    bb = cov.B[:N_SAMPLED, :N_SAMPLED] - S.T @ A
    bb = 0.5 * (bb + bb.T)
    C, degraded, residual = conditional_factor(bb)
    return EstimationPair(
        neighbourhood=neighbourhood, A=A, C=C, degraded=degraded, residual=residual
    )


def solve_stage(
    cov: NeighbourhoodCovariance,
    stage: int,
    neighbourhoods: Iterable[Neighbourhood],
    strict: bool = False,
) -> StageCoefficients:
    """Solve every neighbourhood of one stage.

    Args:
        cov: Stage covariance matrices.
        stage: Stage index (1 … m).
        neighbourhoods: Neighbourhoods to solve.
        strict: Raise instead of warning on a singular conditional
            covariance.

    Returns:
        :class:`StageCoefficients`.

    Raises:
        SingularConditionalCovarianceError: If *strict* and a conditional
            covariance is not positive definite.
    """
    coeffs = StageCoefficients(stage=stage, cell_size=cov.cell_size)
    for nb in neighbourhoods:
        pair = solve_neighbourhood(cov, nb)
        coeffs.pairs[nb.key] = pair
        if not pair.degraded:
            continue
        msg = (
            f"Stage {stage}: conditional covariance of {nb.topology} "
            f"({nb.orientation}) is not positive definite; "
            f"factor residual {pair.residual:.3e}"
        )
        if strict:
            raise SingularConditionalCovarianceError(msg)
        logger.warning(msg)
        warnings.warn(msg, SingularConditionalCovarianceWarning, stacklevel=2)
    return coeffs


def _stage_neighbourhoods(grid: GridSpec, stage: int) -> list[Neighbourhood]:
    if stage == 1 and grid.is_strip:
        axis = "y" if grid.k1 == 1 and grid.k2 > 1 else "x"
        return list(strip_neighbourhoods(axis).values())
    return list(NEIGHBOURHOODS.values())


def build_coefficient_table(
    model: Any,
    grid: GridSpec,
    xl: float,
    yl: float,
    covariance: CovarianceFunction = local_average_covariance,
    strict: bool = False,
) -> CoefficientTable:
    """Solve the estimation coefficients of every stage of *grid*.

    Stage 1 of a single-row or single-column base lattice uses the strip
    neighbourhoods; all other stages use the corner, side and interior
    neighbourhoods.

    Args:
        model: Covariance model.
        grid: Grid decomposition.
        xl: Physical size of the field in x.
        yl: Physical size of the field in y.
        covariance: Scalar local-average covariance primitive.
        strict: See :func:`solve_stage`.

    Returns:
        :class:`CoefficientTable` with stages 1 … m.
    """
    table = CoefficientTable(grid=grid)
    t1 = xl / grid.k1
    t2 = yl / grid.k2
    for stage in range(1, grid.m + 1):
        t1 *= 0.5
        t2 *= 0.5
        cov = stage_covariance(model, t1, t2, covariance)
        table.stages[stage] = solve_stage(
            cov, stage, _stage_neighbourhoods(grid, stage), strict=strict
        )
        logger.debug(
            "Stage %d: cell size (%.4g, %.4g), %d neighbourhoods",
            stage, t1, t2, len(table.stages[stage].pairs),
        )
    return table
