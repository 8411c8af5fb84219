"""
Probability distribution capability.

Pricing code depends on this interface rather than on a concrete
distribution, so new variants (e.g. log-normal) can be added without
touching the pricers.
"""

from abc import ABC, abstractmethod

import numpy as np


class ProbabilityDistribution(ABC):
    """Abstract base class for univariate distributions."""

    @abstractmethod
    def pdf(self, x: float) -> float:
        """Probability density at x."""

    @abstractmethod
    def cdf(self, x: float) -> float:
        """Cumulative probability P(X <= x)."""

    @abstractmethod
    def sample(self) -> float:
        """One random draw from the distribution."""

    def sample_n(self, size: int) -> np.ndarray:
        """Array of ``size`` independent draws."""
        return np.array([self.sample() for _ in range(size)])
