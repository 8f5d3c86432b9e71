"""Exceptions and warnings raised by lasfield.

Classes
-------
LASError
    Root of all lasfield exceptions.
InvalidGridError
    Grid size cannot be decomposed as ``k * 2**m``.
CovarianceError
    A covariance matrix that must be positive definite is not.
SingularConditionalCovarianceError
    Raised instead of the warning below when the engine runs in strict mode.
UnknownDistributionError
    Unknown marginal distribution selector.
SingularConditionalCovarianceWarning
    A conditional covariance could only be factored approximately.
GridSizeAdjustedWarning
    The requested grid was enlarged to the nearest feasible size.
"""

from __future__ import annotations


class LASError(Exception):
    """Base class for all lasfield errors."""


class InvalidGridError(LASError, ValueError):
    """The grid ``(n1, n2)`` has no decomposition within the resource bounds."""


class CovarianceError(LASError):
    """A covariance matrix could not be Cholesky-factored."""


class SingularConditionalCovarianceError(CovarianceError):
    """A conditional covariance is not positive definite (strict mode)."""


class UnknownDistributionError(LASError, ValueError):
    """Unknown distribution selector for a marginal transform."""


class SingularConditionalCovarianceWarning(UserWarning):
    """A conditional covariance was factored with the tolerant Cholesky.

    Fields produced with the affected coefficients are of degraded
    quality.  The affected entries are listed on
    :attr:`~lasfield.subdivision.coefficients.CoefficientTable.degraded`.
    """


class GridSizeAdjustedWarning(UserWarning):
    """The requested field size was enlarged; crop the result before use."""
