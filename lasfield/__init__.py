"""
lasfield: Local Average Subdivision generator for two-dimensional
Gaussian random fields of soil and material properties.

Subpackages
-----------
grid
    Grid decomposition and cell layout.
covariance
    Covariance models and local-average covariance matrices.
subdivision
    Stage coefficients, recursive sampler and the generator engine.
materials
    Marginal distributions and property fields.
postprocess
    Sample statistics of generated fields.
simulation
    Parameter file, realisation loop and report.
visualization
    2-D plotting utilities.
"""

import logging

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

from lasfield import (  # noqa: E402
    errors,
    grid,
    covariance,
    subdivision,
    materials,
    postprocess,
    simulation,
    visualization,
)
from lasfield.covariance import CovarianceModel  # noqa: E402
from lasfield.subdivision import LASGenerator  # noqa: E402

__all__ = [
    "errors",
    "grid",
    "covariance",
    "subdivision",
    "materials",
    "postprocess",
    "simulation",
    "visualization",
    "CovarianceModel",
    "LASGenerator",
]
