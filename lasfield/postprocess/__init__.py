"""Post-processing: sample statistics of generated fields."""

from lasfield.postprocess.statistics import (
    correlation_structure,
    cross_correlation,
    field_statistics,
)

__all__ = [
    "correlation_structure",
    "cross_correlation",
    "field_statistics",
]
