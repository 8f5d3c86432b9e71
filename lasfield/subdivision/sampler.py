"""Recursive subdivision sampler.

Functions
---------
sample_base
    Stage-0 field from the base Cholesky factor.
subdivide
    One 2 × 2 subdivision of a parent lattice.
sample_stages
    All stages 0 … m of one realisation.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from lasfield.grid.decompose import GridSpec
from lasfield.subdivision.coefficients import CoefficientTable, StageCoefficients
from lasfield.subdivision.neighbourhoods import SweepStep, sweep_schedule


def sample_base(base_factor: np.ndarray, rng: np.random.Generator) -> np.ndarray:
    """Correlated stage-0 values ``L @ u`` with ``u ~ N(0, I)``."""
    u = rng.standard_normal(base_factor.shape[0])
    return base_factor @ u


def subdivide(
    parent: np.ndarray,
    width: int,
    height: int,
    coefficients: StageCoefficients,
    rng: np.random.Generator,
    schedule: Sequence[SweepStep] | None = None,
) -> np.ndarray:
    """Subdivide every cell of a ``width × height`` lattice into 2 × 2.

    All standard normals of the stage are drawn first, three per parent
    in schedule order, so the result does not depend on how the sweeps
    are evaluated.

    Args:
        parent: Flat parent field, length ``width * height``.
        width: Parent cells in x.
        height: Parent cells in y.
        coefficients: Estimation pairs for this stage.
        rng: Random generator.
        schedule: Precomputed :func:`sweep_schedule` of the lattice.

    Returns:
        Flat child field, length ``4 * width * height``.
    """
    if schedule is None:
        schedule = sweep_schedule(width, height)
    child = np.empty(4 * width * height)
    noise = rng.standard_normal((width * height, 3))

    start = 0
    for step in schedule:
        n = len(step)
        pair = coefficients[step.neighbourhood.key]
        zp = parent[step.parents]
        zz = zp @ pair.A + noise[start:start + n] @ pair.C.T
        start += n

        child[step.children[:, :3]] = zz
        # upward averaging: the 4 children average to their parent
        centre = zp[:, step.neighbourhood.centre]
        child[step.children[:, 3]] = 4.0 * centre - zz.sum(axis=1)
    return child


def sample_stages(
    grid: GridSpec,
    base_factor: np.ndarray,
    table: CoefficientTable,
    rng: np.random.Generator,
    schedules: dict[int, Sequence[SweepStep]] | None = None,
) -> list[np.ndarray]:
    """Generate stages ``0 … m`` of one realisation.

    Args:
        grid: Grid decomposition.
        base_factor: Lower Cholesky factor of the stage-0 covariance.
        table: Estimation coefficients for stages 1 … m.
        rng: Random generator.
        schedules: ``{stage: schedule}`` for subdividing into *stage*.

    Returns:
        List of flat fields, one per stage.
    """
    stages = [sample_base(base_factor, rng)]
    for stage in range(1, grid.m + 1):
        width, height = grid.shape_at(stage - 1)
        schedule = schedules.get(stage) if schedules else None
        stages.append(
            subdivide(stages[-1], width, height, table[stage], rng, schedule)
        )
    return stages
