"""Parent neighbourhoods and the per-stage sweep schedule.

A subdivision step estimates the 2 × 2 children of one parent from the
parents around it.  Which parents are available depends on where the
parent sits in the lattice, giving one :class:`Neighbourhood` per
topology and orientation.  Every neighbourhood is a subset of the 3 × 3
template (positions numbered as in :mod:`lasfield.covariance.matrices`),
so gathering is the same routine for all of them: add the template
offsets to the centre parent index.

Children of parent ``(ix, iy)`` land at ``(2*ix + cx, 2*iy + cy)`` in the
new lattice, numbered 0 (bottom left), 1 (bottom right), 2 (top left)
and 3 (top right).

Functions
---------
strip_neighbourhoods
    Neighbourhoods for a single-row or single-column lattice.
sweep_schedule
    Ordered list of :class:`SweepStep` for one stage.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

INTERIOR = "interior"
CORNER = "corner"
SIDE = "side"
STRIP_END = "strip_end"
STRIP_INTERIOR = "strip_interior"
ISOLATED = "isolated"

CENTRE = 4


def template_offset(position: int) -> tuple[int, int]:
    """Offset ``(ox, oy)`` of a 3 × 3 template position from the centre."""
    return position % 3 - 1, position // 3 - 1


def template_position(ox: int, oy: int) -> int:
    """Inverse of :func:`template_offset`."""
    return (ox + 1) + 3 * (oy + 1)


CHILD_OFFSETS = np.array([(0, 0), (1, 0), (0, 1), (1, 1)])


@dataclass(frozen=True)
class Neighbourhood:
    """Parents used to subdivide one cell.

    Attributes:
        topology: ``"interior"``, ``"corner"``, ``"side"``, ``"strip_end"``,
            ``"strip_interior"`` or ``"isolated"``.
        orientation: Which corner, side or strip end.
        positions: 3 × 3 template positions of the parents, ascending.
    """

    topology: str
    orientation: str
    positions: tuple[int, ...]

    @property
    def key(self) -> tuple[str, str]:
        return self.topology, self.orientation

    @property
    def centre(self) -> int:
        """Index of the parent being subdivided within :attr:`positions`."""
        return self.positions.index(CENTRE)

    @property
    def offsets(self) -> np.ndarray:
        """``(k, 2)`` array of ``(ox, oy)`` parent offsets."""
        return np.array([template_offset(p) for p in self.positions])


NEIGHBOURHOODS: dict[tuple[str, str], Neighbourhood] = {
    nb.key: nb
    for nb in (
        Neighbourhood(INTERIOR, "centre", tuple(range(9))),
        Neighbourhood(CORNER, "bottom_left", (4, 5, 7, 8)),
        Neighbourhood(CORNER, "bottom_right", (3, 4, 6, 7)),
        Neighbourhood(CORNER, "top_left", (1, 2, 4, 5)),
        Neighbourhood(CORNER, "top_right", (0, 1, 3, 4)),
        Neighbourhood(SIDE, "bottom", (3, 4, 5, 6, 7, 8)),
        Neighbourhood(SIDE, "left", (1, 2, 4, 5, 7, 8)),
        Neighbourhood(SIDE, "right", (0, 1, 3, 4, 6, 7)),
        Neighbourhood(SIDE, "top", (0, 1, 2, 3, 4, 5)),
    )
}


def strip_neighbourhoods(axis: str) -> dict[tuple[str, str], Neighbourhood]:
    """Neighbourhoods of a lattice that is one cell wide.

    Args:
        axis: Direction the strip runs in, ``"x"`` (one row) or ``"y"``
            (one column).

    Returns:
        Mapping with the ``strip_end`` start/end, ``strip_interior`` and
        ``isolated`` neighbourhoods.
    """
    if axis == "x":
        before, after = 3, 5
    elif axis == "y":
        before, after = 1, 7
    else:
        raise ValueError(f"axis must be 'x' or 'y', got {axis!r}")
    nbs = (
        Neighbourhood(STRIP_END, "start", (CENTRE, after)),
        Neighbourhood(STRIP_END, "end", (before, CENTRE)),
        Neighbourhood(STRIP_INTERIOR, "centre", (before, CENTRE, after)),
        Neighbourhood(ISOLATED, "centre", (CENTRE,)),
    )
    return {nb.key: nb for nb in nbs}


@dataclass(frozen=True)
class SweepStep:
    """A group of parents subdivided with the same neighbourhood.

    Attributes:
        neighbourhood: The shared :class:`Neighbourhood`.
        parents: ``(n, k)`` flat indices of each parent's neighbourhood in
            the parent lattice, columns in template order.
        children: ``(n, 4)`` flat indices of the children in the new lattice.
    """

    neighbourhood: Neighbourhood
    parents: np.ndarray
    children: np.ndarray

    def __len__(self) -> int:
        return len(self.parents)


def _step(nb: Neighbourhood, ix: np.ndarray, iy: np.ndarray, width: int) -> SweepStep:
    ix = np.asarray(ix, dtype=int)
    iy = np.asarray(iy, dtype=int)
    off = nb.offsets
    parents = (ix[:, None] + off[:, 0]) + (iy[:, None] + off[:, 1]) * width
    children = (2 * ix[:, None] + CHILD_OFFSETS[:, 0]) + (
        2 * iy[:, None] + CHILD_OFFSETS[:, 1]
    ) * (2 * width)
    return SweepStep(neighbourhood=nb, parents=parents, children=children)


def _strip_schedule(width: int, height: int) -> list[SweepStep]:
    if width == 1 and height == 1:
        nbs = strip_neighbourhoods("x")
        return [_step(nbs[(ISOLATED, "centre")], np.zeros(1), np.zeros(1), width)]

    axis = "x" if height == 1 else "y"
    nbs = strip_neighbourhoods(axis)
    length = width if axis == "x" else height
    along = [np.array([0]), np.arange(1, length - 1), np.array([length - 1])]
    keys = [(STRIP_END, "start"), (STRIP_INTERIOR, "centre"), (STRIP_END, "end")]

    steps = []
    for key, idx in zip(keys, along):
        if len(idx) == 0:
            continue
        zeros = np.zeros(len(idx), dtype=int)
        ix, iy = (idx, zeros) if axis == "x" else (zeros, idx)
        steps.append(_step(nbs[key], ix, iy, width))
    return steps


def sweep_schedule(width: int, height: int) -> list[SweepStep]:
    """Ordered sweeps for subdividing a ``width × height`` parent lattice.

    The order fixes which random numbers each parent consumes: the four
    corners (bottom left, bottom right, top left, top right), then the
    bottom, left, right and top sides, then the interior with x in the
    outer loop.  Lattices one cell wide use the strip neighbourhoods,
    traversed from the start end.

    Args:
        width: Parent cells in x.
        height: Parent cells in y.

    Returns:
        List of non-empty :class:`SweepStep` in draw order.
    """
    if width < 1 or height < 1:
        raise ValueError(f"Invalid lattice {width}x{height}")
    if width == 1 or height == 1:
        return _strip_schedule(width, height)

    w, h = width, height
    inner_x = np.arange(1, w - 1)
    inner_y = np.arange(1, h - 1)
    groups = [
        ((CORNER, "bottom_left"), [0], [0]),
        ((CORNER, "bottom_right"), [w - 1], [0]),
        ((CORNER, "top_left"), [0], [h - 1]),
        ((CORNER, "top_right"), [w - 1], [h - 1]),
        ((SIDE, "bottom"), inner_x, np.zeros_like(inner_x)),
        ((SIDE, "left"), np.zeros_like(inner_y), inner_y),
        ((SIDE, "right"), np.full_like(inner_y, w - 1), inner_y),
        ((SIDE, "top"), inner_x, np.full_like(inner_x, h - 1)),
    ]
    gx, gy = np.meshgrid(inner_x, inner_y, indexing="ij")
    groups.append(((INTERIOR, "centre"), gx.ravel(), gy.ravel()))

    return [
        _step(NEIGHBOURHOODS[key], ix, iy, width)
        for key, ix, iy in groups
        if len(ix) > 0
    ]
