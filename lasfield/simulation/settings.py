"""Simulation settings and the text parameter file.

The parameter file has ten lines.  Numbers are read from column 59
onwards, so everything before it is free-form description::

    1.  mean and standard deviation of random field #1  . . . 30.0 9.0 2 0 0 0 0
    2.  mean and standard deviation of random field #2  . . . 30.0 9.0 2 0 0 0 0
    3.  correlation lengths of random fields  . . . . . . . . 30.0 30.0
    4.  cross-correlation between the two fields  . . . . . . 0.5
    5.  element sizes in x- and y-direction . . . . . . . . . 0.15 0.15
    6.  number of elements in x- and y-direction  . . . . . . 150  50
    7.  initial seed number . . . . . . . . . . . . . . . . . 111
    8.  total number of realizations  . . . . . . . . . . . . 10
    9.  plot a random field?  . . . . . . . . . . . . . . . . 1 1 1
    10. debug on? . . . . . . . . . . . . . . . . . . . . . . 1

Field lines hold ``[mean, sd, type, a, b, m, s]`` as understood by
:func:`~lasfield.materials.distributions.from_code`.  Line 9 holds
``plot ino irf``: whether to plot, which realisation (1-based, 0 for
none) and which field (1 or 2).

Classes
-------
FieldSettings
    Marginal distribution of one field.
SimulationSettings
    Everything needed by :func:`~lasfield.simulation.runner.run_simulation`.

Functions
---------
read_input_file
    Parse a parameter file into :class:`SimulationSettings`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from lasfield.covariance.models import CovarianceModel
from lasfield.grid.decompose import MAX_BASE_CELLS, MAX_DEPTH
from lasfield.materials.distributions import Distribution, Normal, from_code

DATA_COLUMN = 58
N_LINES = 10


@dataclass
class FieldSettings:
    """One property field: its marginal and the raw parameter vector."""

    distribution: Distribution
    params: tuple[float, ...] = ()

    @classmethod
    def from_params(cls, params: list[float] | tuple[float, ...]) -> FieldSettings:
        return cls(distribution=from_code(params), params=tuple(float(p) for p in params))

    @property
    def is_random(self) -> bool:
        return self.distribution.is_random


@dataclass
class SimulationSettings:
    """Settings of a two-field simulation.

    Attributes:
        field1: First property field.
        field2: Second property field.
        theta_x: Correlation length in x.
        theta_y: Correlation length in y.
        cross_correlation: Correlation coefficient between the fields.
        dx: Cell size in x.
        dy: Cell size in y.
        nxe: Requested number of cells in x.
        nye: Requested number of cells in y.
        seed: Seed of realisation 1; realisation ``i`` uses ``seed + i - 1``.
        n_realizations: Number of realisations.
        plot: Plot results after the run.
        plot_realization: Realisation to plot (1-based, 0 for none).
        plot_field: Field to plot, 1 or 2.
        debug: Collect per-realisation statistics.
        kind: Correlation function, see
            :data:`~lasfield.covariance.models.CORRELATION_FUNCTIONS`.
        max_base_cells: Largest admissible ``k1 * k2``.
        max_depth: Largest admissible number of subdivisions.
    """

    field1: FieldSettings = field(default_factory=lambda: FieldSettings(Normal(0.0, 1.0)))
    field2: FieldSettings = field(default_factory=lambda: FieldSettings(Normal(0.0, 1.0)))
    theta_x: float = 1.0
    theta_y: float = 1.0
    cross_correlation: float = 0.0
    dx: float = 1.0
    dy: float = 1.0
    nxe: int = 16
    nye: int = 16
    seed: int = 0
    n_realizations: int = 1
    plot: bool = False
    plot_realization: int = 0
    plot_field: int = 1
    debug: bool = False
    kind: str = "markov"
    max_base_cells: int = MAX_BASE_CELLS
    max_depth: int = MAX_DEPTH

    def __post_init__(self) -> None:
        if not -1.0 <= self.cross_correlation <= 1.0:
            raise ValueError(
                f"Cross-correlation must be in [-1, 1], got {self.cross_correlation}"
            )
        if self.dx <= 0 or self.dy <= 0:
            raise ValueError("Cell sizes dx and dy must be positive.")
        if self.nxe < 1 or self.nye < 1:
            raise ValueError("nxe and nye must be positive.")
        if self.n_realizations < 1:
            raise ValueError("n_realizations must be at least 1.")
        if not 0 <= self.plot_realization <= self.n_realizations:
            raise ValueError(
                f"plot_realization should be 0 to {self.n_realizations}, "
                f"got {self.plot_realization}"
            )
        if self.plot_realization and self.plot_field not in (1, 2):
            raise ValueError(f"plot_field should be 1 or 2, got {self.plot_field}")

    @property
    def model(self) -> CovarianceModel:
        """Unit-variance covariance model of the standard fields."""
        return CovarianceModel(self.theta_x, self.theta_y, 1.0, self.kind)


def _numbers(text: str) -> list[float]:
    values = []
    for token in text.replace(",", " ").split():
        try:
            values.append(float(token))
        except ValueError:
            break
    return values


def read_input_file(path: str | Path) -> SimulationSettings:
    """Read a parameter file.

    Args:
        path: Path to the parameter file.

    Returns:
        :class:`SimulationSettings`.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValueError: If a line has no numbers from column 59 onwards, or
            fewer than ten lines are present.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Input file does not exist: {path}")

    lines = path.read_text().splitlines()
    if len(lines) < N_LINES:
        raise ValueError(f"Expected {N_LINES} lines in {path}, found {len(lines)}")

    data = []
    for i, line in enumerate(lines[:N_LINES], start=1):
        numbers = _numbers(line[DATA_COLUMN:])
        if not numbers:
            raise ValueError(f"No data extracted from line {i} of {path}")
        data.append(numbers)

    def _pair(i: int) -> tuple[float, float]:
        if len(data[i]) < 2:
            raise ValueError(f"Line {i + 1} of {path} needs two numbers")
        return data[i][0], data[i][1]

    thx, thy = _pair(2)
    dx, dy = _pair(4)
    nxe, nye = _pair(5)
    plot_flags = data[8] + [0.0] * (3 - len(data[8]))

    return SimulationSettings(
        field1=FieldSettings.from_params(data[0]),
        field2=FieldSettings.from_params(data[1]),
        theta_x=thx,
        theta_y=thy,
        cross_correlation=data[3][0],
        dx=dx,
        dy=dy,
        nxe=int(nxe),
        nye=int(nye),
        seed=int(data[6][0]),
        n_realizations=int(data[7][0]),
        plot=bool(plot_flags[0]),
        plot_realization=int(plot_flags[1]),
        plot_field=int(plot_flags[2]),
        debug=bool(data[9][0]),
    )
