"""Covariance: models, local-average covariance, neighbourhood matrices."""

from lasfield.covariance.models import (
    CORRELATION_FUNCTIONS,
    CovarianceModel,
    gaussian,
    markov,
    separable_markov,
)
from lasfield.covariance.local_average import local_average_covariance
from lasfield.covariance.matrices import (
    BaseCovariance,
    NeighbourhoodCovariance,
    base_covariance,
    stage_covariance,
)

__all__ = [
    "CORRELATION_FUNCTIONS",
    "CovarianceModel",
    "gaussian",
    "markov",
    "separable_markov",
    "local_average_covariance",
    "BaseCovariance",
    "NeighbourhoodCovariance",
    "base_covariance",
    "stage_covariance",
]
