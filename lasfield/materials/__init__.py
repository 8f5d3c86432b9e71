"""Materials: marginal distributions and property fields."""

from lasfield.materials.distributions import (
    Bounded,
    Deterministic,
    Distribution,
    Lognormal,
    Normal,
    from_code,
)
from lasfield.materials.fields import LocalAverageField, RandomField, correlate_pair

__all__ = [
    "Bounded",
    "Deterministic",
    "Distribution",
    "Lognormal",
    "Normal",
    "from_code",
    "LocalAverageField",
    "RandomField",
    "correlate_pair",
]
