"""Grid: decomposition into base lattice and subdivisions, cell layout."""

from lasfield.grid.decompose import (
    MAX_BASE_CELLS,
    MAX_DEPTH,
    GridSpec,
    decompose_grid,
    normalize_grid_size,
)
from lasfield.grid.layout import (
    average_up,
    cell_index,
    crop_raster,
    from_raster,
    to_raster,
)

__all__ = [
    "MAX_BASE_CELLS",
    "MAX_DEPTH",
    "GridSpec",
    "decompose_grid",
    "normalize_grid_size",
    "average_up",
    "cell_index",
    "crop_raster",
    "from_raster",
    "to_raster",
]
