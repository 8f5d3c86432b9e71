"""Subdivision: neighbourhoods, stage coefficients, sampler and generator."""

from lasfield.subdivision.neighbourhoods import (
    NEIGHBOURHOODS,
    Neighbourhood,
    SweepStep,
    strip_neighbourhoods,
    sweep_schedule,
)
from lasfield.subdivision.cholesky import conditional_factor, tolerant_cholesky
from lasfield.subdivision.coefficients import (
    CoefficientTable,
    DegradedFactor,
    EstimationPair,
    StageCoefficients,
    build_coefficient_table,
    solve_neighbourhood,
    solve_stage,
)
from lasfield.subdivision.sampler import sample_base, sample_stages, subdivide
from lasfield.subdivision.engine import LASGenerator

__all__ = [
    "NEIGHBOURHOODS",
    "Neighbourhood",
    "SweepStep",
    "strip_neighbourhoods",
    "sweep_schedule",
    "conditional_factor",
    "tolerant_cholesky",
    "CoefficientTable",
    "DegradedFactor",
    "EstimationPair",
    "StageCoefficients",
    "build_coefficient_table",
    "solve_neighbourhood",
    "solve_stage",
    "sample_base",
    "sample_stages",
    "subdivide",
    "LASGenerator",
]
