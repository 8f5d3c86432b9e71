"""Realisation loop for a pair of cross-correlated property fields.

Classes
-------
RealizationStatistics
    Sample statistics of one realisation.
SimulationResult
    Generated fields and diagnostics of a run.

Functions
---------
run_simulation
    Generate every realisation described by a :class:`SimulationSettings`.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

import numpy as np

from lasfield.grid.decompose import normalize_grid_size
from lasfield.grid.layout import crop_raster, to_raster
from lasfield.materials.fields import correlate_pair
from lasfield.postprocess.statistics import (
    correlation_structure,
    cross_correlation,
    field_statistics,
)
from lasfield.simulation.settings import SimulationSettings
from lasfield.subdivision.engine import LASGenerator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RealizationStatistics:
    """Mean, sd and cross-correlation of one realisation."""

    index: int
    mean1: float
    sd1: float
    mean2: float
    sd2: float
    cross_correlation: float


@dataclass
class SimulationResult:
    """Output of :func:`run_simulation`.

    Attributes:
        settings: The settings of the run.
        generated_shape: ``(nrfx, nrfy)`` of the generated, uncropped grid.
        field1: ``(n_realizations, nye, nxe)`` values of field 1.
        field2: ``(n_realizations, nye, nxe)`` values of field 2.
        statistics: Per-realisation statistics (debug mode only).
        correlation1: Averaged ``(cor_x, cor_y, cor_diag)`` of field 1
            (debug mode, random field only).
        correlation2: Same for field 2.
        elapsed: Wall-clock time of the realisation loop in seconds.
    """

    settings: SimulationSettings
    generated_shape: tuple[int, int]
    field1: np.ndarray
    field2: np.ndarray
    statistics: list[RealizationStatistics] = field(default_factory=list)
    correlation1: tuple[np.ndarray, np.ndarray, np.ndarray] | None = None
    correlation2: tuple[np.ndarray, np.ndarray, np.ndarray] | None = None
    elapsed: float = 0.0

    def summary(self) -> dict[str, float]:
        """Averages of the per-realisation statistics.

        Cross-correlations that are undefined (a deterministic field) are
        ignored; the average is ``nan`` if none is defined.
        """
        if not self.statistics:
            return {}
        rows = np.array(
            [
                (s.mean1, s.sd1, s.mean2, s.sd2, s.cross_correlation)
                for s in self.statistics
            ]
        )
        crs = rows[:, 4][~np.isnan(rows[:, 4])]
        return {
            "mean1": float(rows[:, 0].mean()),
            "sd1": float(rows[:, 1].mean()),
            "mean2": float(rows[:, 2].mean()),
            "sd2": float(rows[:, 3].mean()),
            "cross_correlation": float(crs.mean()) if crs.size else float("nan"),
        }


def _accumulate(total, values):
    if total is None:
        return [np.array(v, dtype=float) for v in values]
    for acc, v in zip(total, values):
        acc += v
    return total


def run_simulation(
    settings: SimulationSettings, generator: LASGenerator | None = None
) -> SimulationResult:
    """Generate ``settings.n_realizations`` pairs of property fields.

    The requested grid is enlarged to a decomposable size if needed and
    one :class:`LASGenerator` is shared by all realisations and both
    fields.  Realisation ``i`` (0-based) uses a generator seeded with
    ``settings.seed + i``, draws field 1 and then field 2, mixes them to
    the requested cross-correlation, applies the marginals and crops to
    ``(nye, nxe)``.

    Args:
        settings: Simulation settings.
        generator: Prepared engine for the adjusted grid.  Built from
            *settings* if omitted.

    Returns:
        :class:`SimulationResult`.
    """
    s = settings
    nrfx, nrfy = normalize_grid_size(s.nxe, s.nye, s.max_base_cells)
    if generator is None:
        generator = LASGenerator(
            nrfx, nrfy, nrfx * s.dx, nrfy * s.dy, s.model,
            max_depth=s.max_depth, max_base_cells=s.max_base_cells,
        )
    elif (generator.nx, generator.ny) != (nrfx, nrfy):
        raise ValueError(
            f"Generator grid ({generator.nx}, {generator.ny}) does not match "
            f"the adjusted field size ({nrfx}, {nrfy})"
        )

    dist1 = s.field1.distribution
    dist2 = s.field2.distribution
    out1 = np.empty((s.n_realizations, s.nye, s.nxe))
    out2 = np.empty((s.n_realizations, s.nye, s.nxe))
    result = SimulationResult(settings=s, generated_shape=(nrfx, nrfy), field1=out1, field2=out2)
    cor1 = cor2 = None

    logger.info(
        "Running %d realisation(s) on a %d x %d grid (requested %d x %d)",
        s.n_realizations, nrfx, nrfy, s.nxe, s.nye,
    )
    start = time.perf_counter()
    for i in range(s.n_realizations):
        rng = np.random.default_rng(s.seed + i)
        g1 = to_raster(generator.generate(rng), nrfx, nrfy)
        g2 = to_raster(generator.generate(rng), nrfx, nrfy)
        g1, g2 = correlate_pair(g1, g2, s.cross_correlation)

        p1 = dist1.transform(crop_raster(g1, s.nxe, s.nye))
        p2 = dist2.transform(crop_raster(g2, s.nxe, s.nye))
        out1[i] = p1
        out2[i] = p2

        if not s.debug:
            continue
        m1, sd1 = field_statistics(p1)
        m2, sd2 = field_statistics(p2)
        result.statistics.append(
            RealizationStatistics(i + 1, m1, sd1, m2, sd2, cross_correlation(p1, p2))
        )
        if dist1.is_random and dist1.std > 0:
            cor1 = _accumulate(cor1, correlation_structure(p1, s.dx, s.dy))
        if dist2.is_random and dist2.std > 0:
            cor2 = _accumulate(cor2, correlation_structure(p2, s.dx, s.dy))
        logger.debug(
            "Realisation %d: field 1 mean %.4g sd %.4g, field 2 mean %.4g sd %.4g",
            i + 1, m1, sd1, m2, sd2,
        )

    result.elapsed = time.perf_counter() - start
    if cor1 is not None:
        result.correlation1 = tuple(c / s.n_realizations for c in cor1)
    if cor2 is not None:
        result.correlation2 = tuple(c / s.n_realizations for c in cor2)
    logger.info("Finished %d realisation(s) in %.3f s", s.n_realizations, result.elapsed)
    return result
