"""
Normal Distribution
===================

Gaussian density, cumulative distribution and sampling.

The cumulative distribution uses the double-precision rational
approximation published in West, G. (2004), "Better approximations to
cumulative normal functions" (Hart's algorithm 5666 with a
continued-fraction tail).

Author: Jose Orlando Bobadilla Fuentes | CQF
"""

from typing import Optional

import numpy as np

from qfanalytics.config import SamplingConfig
from qfanalytics.errors import InvalidParameter
from qfanalytics.probability.base import ProbabilityDistribution
from qfanalytics.utils import get_logger

logger = get_logger(__name__)

SQRT_2PI = np.sqrt(2.0 * np.pi)

# one SeedSequence per configured seed; instances draw independent children
_SEED_SEQUENCES = {}

# West (2004) rational approximation coefficients.
_SPLIT = 7.07106781186547
_TAIL_CUTOFF = 37.0
_N = (220.206867912376, 221.213596169931, 112.079291497871,
      33.912866078383, 6.37396220353165, 0.700383064443688,
      3.52624965998911e-02)
_M = (440.413735824752, 793.826512519948, 637.333633378831,
      296.564248779674, 86.7807322029461, 16.064177579207,
      1.75566716318264, 8.83883476483184e-02)


def _horner(coefficients, z: float) -> float:
    """Evaluate sum(c_i * z**i) with coefficients in increasing order."""
    acc = 0.0
    for c in reversed(coefficients):
        acc = acc * z + c
    return acc


def _lower_tail(z: float) -> float:
    """P(Z <= -z) for a standard normal Z and z >= 0."""
    if z > _TAIL_CUTOFF:
        return 0.0
    e = np.exp(-z * z / 2.0)
    if z < _SPLIT:
        return e * _horner(_N, z) / _horner(_M, z)
    f = z + 1.0 / (z + 2.0 / (z + 3.0 / (z + 4.0 / (z + 13.0 / 20.0))))
    return e / (SQRT_2PI * f)


def _resolve_seed(seed: Optional[int]):
    """
    An explicit seed is used as is. Otherwise, when QFA_SEED is set, each
    call spawns a fresh child of that seed's sequence so instances draw
    distinct but reproducible streams.
    """
    if seed is not None:
        return seed
    configured = SamplingConfig().seed
    if configured is None:
        return None
    if configured not in _SEED_SEQUENCES:
        _SEED_SEQUENCES[configured] = np.random.SeedSequence(configured)
    return _SEED_SEQUENCES[configured].spawn(1)[0]


class Normal(ProbabilityDistribution):
    """
    Normal(mu, sigma) distribution.

    Attributes:
        mu: Expected value
        sigma: Standard deviation (sigma > 0)

    Each instance owns its random generator, so instances can be used from
    different threads without sharing state. Pass ``seed`` for reproducible
    draws.

    Example:
        >>> std = Normal()
        >>> std.cdf(0.0)
        0.5
    """

    def __init__(self, mu: float = 0.0, sigma: float = 1.0,
                 seed: Optional[int] = None):
        if sigma <= 0:
            logger.debug("Rejected normal distribution with sigma=%s", sigma)
            raise InvalidParameter(
                f"The normal distribution sigma must be positive, got {sigma}")
        self._mu = float(mu)
        self._sigma = float(sigma)
        self._rng = np.random.default_rng(_resolve_seed(seed))

    @property
    def mu(self) -> float:
        return self._mu

    @property
    def sigma(self) -> float:
        return self._sigma

    def pdf(self, x: float) -> float:
        """n(x) = exp(-z^2 / 2) / (sigma * sqrt(2 pi)),  z = (x - mu) / sigma."""
        z = (x - self._mu) / self._sigma
        return float(np.exp(-0.5 * z * z) / (self._sigma * SQRT_2PI))

    def cdf(self, x: float) -> float:
        """N(x) via the West (2004) approximation, symmetric around mu."""
        y = x - self._mu
        c = _lower_tail(abs(y) / self._sigma)
        return float(c if y <= 0.0 else 1.0 - c)

    def sample(self) -> float:
        return float(self._rng.normal(self._mu, self._sigma))

    def sample_n(self, size: int) -> np.ndarray:
        return self._rng.normal(self._mu, self._sigma, size)

    def __repr__(self):
        return f"Normal(mu={self._mu:.4f}, sigma={self._sigma:.4f})"
