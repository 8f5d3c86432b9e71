"""Covariance models for stationary Gaussian fields.

Each model is a point correlation function ρ(τx, τy) scaled by the point
variance σ².  The correlation lengths θx, θy are scales of fluctuation:
for the Markov model the correlation at lag θ/2 is e⁻¹.

Functions
---------
markov
    ρ = exp(−2·sqrt((τx/θx)² + (τy/θy)²)).
separable_markov
    ρ = exp(−2|τx|/θx − 2|τy|/θy).
gaussian
    ρ = exp(−π(τx/θx)² − π(τy/θy)²).

Classes
-------
CovarianceModel
    Model selector and parameters.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import numpy as np
from numpy.typing import ArrayLike


def markov(tx: ArrayLike, ty: ArrayLike, theta_x: float, theta_y: float) -> np.ndarray:
    """Exponentially decaying (Markov) correlation, elliptical distance."""
    r = np.sqrt((np.asarray(tx) / theta_x) ** 2 + (np.asarray(ty) / theta_y) ** 2)
    return np.exp(-2.0 * r)


def separable_markov(
    tx: ArrayLike, ty: ArrayLike, theta_x: float, theta_y: float
) -> np.ndarray:
    """Product of two 1-D Markov correlations."""
    return np.exp(
        -2.0 * np.abs(np.asarray(tx)) / theta_x - 2.0 * np.abs(np.asarray(ty)) / theta_y
    )


def gaussian(tx: ArrayLike, ty: ArrayLike, theta_x: float, theta_y: float) -> np.ndarray:
    """Gaussian-decaying (squared exponential) correlation."""
    return np.exp(
        -np.pi * (np.asarray(tx) / theta_x) ** 2 - np.pi * (np.asarray(ty) / theta_y) ** 2
    )


CORRELATION_FUNCTIONS: dict[str, Callable[..., np.ndarray]] = {
    "markov": markov,
    "separable_markov": separable_markov,
    "gaussian": gaussian,
}


@dataclass(frozen=True)
class CovarianceModel:
    """Point covariance C(τ) = σ² ρ(τx, τy).

    Args:
        theta_x: Correlation length in x.
        theta_y: Correlation length in y.
        variance: Point variance σ².
        kind: Key of :data:`CORRELATION_FUNCTIONS`.

    Example::

        model = CovarianceModel(theta_x=2.0, theta_y=1.0)
        model.covariance(0.5, 0.0)
    """

    theta_x: float
    theta_y: float
    variance: float = 1.0
    kind: str = "markov"

    def __post_init__(self) -> None:
        if self.kind not in CORRELATION_FUNCTIONS:
            raise ValueError(
                f"Unknown covariance model {self.kind!r}. "
                f"Choose from {list(CORRELATION_FUNCTIONS)}"
            )
        if self.theta_x <= 0 or self.theta_y <= 0:
            raise ValueError("Correlation lengths must be positive.")
        if self.variance < 0:
            raise ValueError("variance must be non-negative.")

    @property
    def quadrant_symmetric(self) -> bool:
        """All built-in models satisfy ρ(τx, τy) = ρ(|τx|, |τy|)."""
        return True

    @property
    def isotropic(self) -> bool:
        """``True`` when both correlation lengths are equal."""
        return self.theta_x == self.theta_y

    def correlation(self, tx: ArrayLike, ty: ArrayLike) -> np.ndarray:
        """Point correlation at lag ``(tx, ty)``."""
        func = CORRELATION_FUNCTIONS[self.kind]
        return func(tx, ty, self.theta_x, self.theta_y)

    def covariance(self, tx: ArrayLike, ty: ArrayLike) -> np.ndarray:
        """Point covariance at lag ``(tx, ty)``."""
        return self.variance * self.correlation(tx, ty)
