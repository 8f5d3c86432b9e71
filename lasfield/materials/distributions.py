"""Marginal distributions for property fields.

A standard Gaussian field G is mapped pointwise onto the target marginal:

* deterministic: P = μ
* normal: P = μ + σ G
* lognormal: P = exp(μ_ln + σ_ln G)
* bounded: P = a + ½ (b − a) [1 + tanh((m + s G) / 2π)]

Classes
-------
Distribution
    Abstract base.
Deterministic, Normal, Lognormal, Bounded
    Concrete marginals.

Functions
---------
from_code
    Build a distribution from a numeric parameter vector.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Sequence

import numpy as np
from numpy.typing import ArrayLike
from scipy import stats

from lasfield.errors import UnknownDistributionError


class Distribution(ABC):
    """Marginal distribution of a property field."""

    code: int = -1
    name: str = ""

    @property
    @abstractmethod
    def mean(self) -> float:
        """Mean of the distribution."""

    @property
    @abstractmethod
    def std(self) -> float:
        """Standard deviation of the distribution."""

    @abstractmethod
    def transform(self, g: ArrayLike) -> np.ndarray:
        """Map standard Gaussian values onto this marginal."""

    @property
    def is_random(self) -> bool:
        return True

    def pdf(self, x: ArrayLike) -> np.ndarray:
        """Probability density of the marginal."""
        raise NotImplementedError(f"{type(self).__name__} has no density.")


@dataclass(frozen=True)
class Deterministic(Distribution):
    """Constant field at *value*."""

    value: float
    code = 0
    name = "Deterministic"

    @property
    def mean(self) -> float:
        return self.value

    @property
    def std(self) -> float:
        return 0.0

    @property
    def is_random(self) -> bool:
        return False

    def transform(self, g: ArrayLike) -> np.ndarray:
        return np.full(np.shape(g), self.value, dtype=float)


@dataclass(frozen=True)
class Normal(Distribution):
    """Normal marginal with mean *mu* and standard deviation *sigma*."""

    mu: float
    sigma: float
    code = 1
    name = "Normal"

    def __post_init__(self) -> None:
        if self.sigma < 0:
            raise ValueError("sigma must be non-negative.")

    @property
    def mean(self) -> float:
        return self.mu

    @property
    def std(self) -> float:
        return self.sigma

    def transform(self, g: ArrayLike) -> np.ndarray:
        return self.mu + self.sigma * np.asarray(g, dtype=float)

    def pdf(self, x: ArrayLike) -> np.ndarray:
        return stats.norm.pdf(x, loc=self.mu, scale=self.sigma)


@dataclass(frozen=True)
class Lognormal(Distribution):
    """Lognormal marginal specified by its (arithmetic) mean and sd.

    Useful for strictly positive soil properties such as stiffness or
    hydraulic conductivity.
    """

    mu: float
    sigma: float
    code = 2
    name = "Lognormal"

    def __post_init__(self) -> None:
        if self.mu <= 0:
            raise ValueError("Lognormal mean must be positive.")
        if self.sigma < 0:
            raise ValueError("sigma must be non-negative.")

    @property
    def mean(self) -> float:
        return self.mu

    @property
    def std(self) -> float:
        return self.sigma

    @property
    def log_std(self) -> float:
        """Standard deviation of ln P."""
        return float(np.sqrt(np.log1p((self.sigma / self.mu) ** 2)))

    @property
    def log_mean(self) -> float:
        """Mean of ln P."""
        return float(np.log(self.mu) - 0.5 * self.log_std ** 2)

    def transform(self, g: ArrayLike) -> np.ndarray:
        return np.exp(self.log_mean + self.log_std * np.asarray(g, dtype=float))

    def pdf(self, x: ArrayLike) -> np.ndarray:
        return stats.lognorm.pdf(x, s=self.log_std, scale=np.exp(self.log_mean))


@dataclass(frozen=True)
class Bounded(Distribution):
    """Bounded (tanh) marginal on ``(lower, upper)``.

    Args:
        lower: Lower bound a.
        upper: Upper bound b.
        location: Location parameter m.
        scale: Scale parameter s.
    """

    lower: float
    upper: float
    location: float = 0.0
    scale: float = 1.0
    code = 3
    name = "Bounded"

    def __post_init__(self) -> None:
        if self.upper <= self.lower:
            raise ValueError("upper must be greater than lower.")
        if self.scale <= 0:
            raise ValueError("scale must be positive.")

    @property
    def mean(self) -> float:
        """Midpoint of the bounds (exact for ``location = 0``)."""
        return 0.5 * (self.lower + self.upper)

    @property
    def std(self) -> float:
        """First-order approximation with empirical adjustment."""
        s = self.scale
        return 0.46 * (self.upper - self.lower) * s / np.sqrt(4.0 * np.pi ** 2 + s ** 2)

    def transform(self, g: ArrayLike) -> np.ndarray:
        g = np.asarray(g, dtype=float)
        a, b = self.lower, self.upper
        return a + 0.5 * (b - a) * (1.0 + np.tanh((self.location + self.scale * g) / (2.0 * np.pi)))

    def pdf(self, x: ArrayLike) -> np.ndarray:
        """Probability density on ``(lower, upper)``; zero outside."""
        x = np.asarray(x, dtype=float)
        a, b, m, s = self.lower, self.upper, self.location, self.scale
        out = np.zeros_like(x)
        inside = (x > a) & (x < b)
        xi = x[inside]
        coef = np.sqrt(np.pi) * (b - a) / (np.sqrt(2.0) * s * (xi - a) * (b - xi))
        arg = np.pi * np.log((xi - a) / (b - xi)) - m
        out[inside] = coef * np.exp(-0.5 * arg ** 2 / s ** 2)
        return out


def from_code(params: Sequence[float]) -> Distribution:
    """Build a distribution from ``[mean, sd, type, a, b, m, s]``.

    ``type`` is 0 (deterministic), 1 (normal), 2 (lognormal) or
    3 (bounded, which reads ``a, b, m, s`` and ignores mean and sd).

    Raises:
        UnknownDistributionError: For any other type code.
    """
    params = [float(v) for v in params]
    if len(params) < 3:
        raise ValueError("Expected at least [mean, sd, type].")
    mean, sd, code = params[0], params[1], params[2]
    if code == 0:
        return Deterministic(mean)
    if code == 1:
        return Normal(mean, sd)
    if code == 2:
        return Lognormal(mean, sd)
    if code == 3:
        if len(params) < 7:
            raise ValueError("Bounded distribution needs [mean, sd, 3, a, b, m, s].")
        return Bounded(*params[3:7])
    raise UnknownDistributionError(f"Unknown distribution type {code:g}")
