"""
Closed-Form Option Analytics & SVI Volatility Surfaces
======================================================
Black-Scholes pricing with a full Greeks suite, the West (2004) normal
distribution, and the SVI / SSVI family of implied variance models with
their no-arbitrage checks.

Author: Jose Orlando Bobadilla Fuentes, CQF
"""

from qfanalytics.errors import (
    ErrorKind, InvalidParameter, NonPositiveVolatility,
    NonPositiveYearFraction, Outcome, attempt,
)
from qfanalytics.probability import ProbabilityDistribution, Normal
from qfanalytics.models import (
    BlackScholes, BlackScholesInputs, put_call_parity, greeks_table,
    SVI, SSVI, ReducedSVI, JumpWingsParams, RawSVIParams,
)

__version__ = "1.0.0"
__author__ = "Jose Orlando Bobadilla Fuentes"

__all__ = [
    "ErrorKind", "InvalidParameter", "NonPositiveVolatility",
    "NonPositiveYearFraction", "Outcome", "attempt",
    "ProbabilityDistribution", "Normal",
    "BlackScholes", "BlackScholesInputs", "put_call_parity", "greeks_table",
    "SVI", "SSVI", "ReducedSVI", "JumpWingsParams", "RawSVIParams",
]
