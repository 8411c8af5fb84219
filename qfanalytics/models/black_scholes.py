"""
Black-Scholes Closed-Form Pricer
================================

European vanilla options on a spot underlying with continuous carry
(Black & Scholes 1973, Merton 1973) or on a future (Black 1976), together
with first, second and third order Greeks.

Under the risk-neutral measure the forward price is

    F = S * exp(mu * T),   mu = (r - q) for a spot underlying, 0 for a future

and the price of an option with call/put flag phi (+1 / -1) is

    V = exp(-r*T) * phi * (F * N(phi*d1) - K * N(phi*d2))
    d1 = [ln(F/K) + 0.5 * sigma^2 * T] / (sigma * sqrt(T)),  d2 = d1 - sigma*sqrt(T)

All intermediate quantities are derived once at construction and frozen;
every Greek is a pure read of that state.

Author: Jose Orlando Bobadilla Fuentes | CQF
"""

from dataclasses import dataclass, asdict
from typing import Dict, Optional

import numpy as np
import pandas as pd

from qfanalytics.errors import (
    InvalidParameter, NonPositiveVolatility, NonPositiveYearFraction,
)
from qfanalytics.probability import ProbabilityDistribution, Normal
from qfanalytics.utils import get_logger, timeit

logger = get_logger(__name__)

# pdf/cdf only; never sampled
_STANDARD_NORMAL = Normal(0.0, 1.0, seed=0)

GREEK_NAMES = (
    "delta", "gamma", "theta", "vega", "rho", "epsilon", "vanna", "volga",
    "charm", "veta", "speed", "zomma", "color", "ultima",
    "dual_delta", "dual_gamma",
)


@dataclass(frozen=True)
class BlackScholesInputs:
    """
    Container for option pricing parameters.

    Attributes:
        S: Spot price, or future price when ``is_future`` is set
        K: Strike price of the option
        r: Annualized interest rate (continuous compounding)
        q: Continuous carry cost / dividend yield
        sigma: Annualized implied volatility (sigma > 0)
        T: Year fraction to expiry (T > 0)
        is_call: True for a call, False for a put
        is_future: True when the underlying is a future

    Example:
        >>> BlackScholesInputs(S=100, K=105, r=0.05, q=0.0, sigma=0.2, T=0.25)
    """
    S: float
    K: float
    r: float
    q: float
    sigma: float
    T: float
    is_call: bool = True
    is_future: bool = False

    def validate(self) -> None:
        if self.sigma <= 0:
            raise NonPositiveVolatility(self.sigma)
        if self.T <= 0:
            raise NonPositiveYearFraction(self.T)
        if self.S <= 0:
            raise InvalidParameter(
                f"Underlying price must be positive, got {self.S}")
        if self.K <= 0:
            raise InvalidParameter(
                f"Strike price must be positive, got {self.K}")


@dataclass(frozen=True)
class BlackScholesState:
    """Quantities derived once from the inputs."""
    call_put_flag: int
    future_flag: int
    mu: float
    df: float
    F: float
    sqrt_T: float
    d1: float
    d2: float
    nd1: float
    nd2: float
    Nd1: float
    Nd2: float

    @classmethod
    def derive(cls, p: BlackScholesInputs,
               dist: ProbabilityDistribution) -> "BlackScholesState":
        call_put_flag = 1 if p.is_call else -1
        future_flag = 0 if p.is_future else 1
        mu = future_flag * (p.r - p.q)
        df = np.exp(-p.r * p.T)
        F = p.S * np.exp(mu * p.T)
        sqrt_T = np.sqrt(p.T)
        d1 = (np.log(F / p.K) + 0.5 * p.sigma ** 2 * p.T) / (p.sigma * sqrt_T)
        d2 = d1 - p.sigma * sqrt_T
        return cls(
            call_put_flag=call_put_flag,
            future_flag=future_flag,
            mu=float(mu),
            df=float(df),
            F=float(F),
            sqrt_T=float(sqrt_T),
            d1=float(d1),
            d2=float(d2),
            nd1=dist.pdf(d1),
            nd2=dist.pdf(d2),
            Nd1=dist.cdf(call_put_flag * d1),
            Nd2=dist.cdf(call_put_flag * d2),
        )


class BlackScholes:
    """
    Closed-form Black-Scholes / Black-76 pricer with the full Greeks suite.

    Time sensitivities follow the usual desk conventions: theta and charm
    are derivatives with respect to calendar time (minus the derivative in
    T), veta and color are derivatives with respect to T.

    Usage:
        >>> bs = BlackScholes(S=100, K=100, r=0.01, q=0.0, sigma=0.2, T=1.0)
        >>> round(bs.price(), 3)
        8.433
        >>> bs.greeks()["delta"]

    Raises:
        NonPositiveVolatility: sigma <= 0
        NonPositiveYearFraction: T <= 0
        InvalidParameter: non-positive spot/future price or strike
    """

    def __init__(self, S: float, K: float, r: float, q: float, sigma: float,
                 T: float, is_call: bool = True, is_future: bool = False,
                 distribution: Optional[ProbabilityDistribution] = None):
        inputs = BlackScholesInputs(S=S, K=K, r=r, q=q, sigma=sigma, T=T,
                                    is_call=is_call, is_future=is_future)
        try:
            inputs.validate()
        except InvalidParameter as exc:
            logger.debug("Rejected Black-Scholes inputs %s: %s", inputs, exc)
            raise
        self._inputs = inputs
        self._state = BlackScholesState.derive(
            inputs, distribution or _STANDARD_NORMAL)

    @classmethod
    def from_inputs(cls, inputs: BlackScholesInputs,
                    distribution: Optional[ProbabilityDistribution] = None
                    ) -> "BlackScholes":
        return cls(distribution=distribution, **asdict(inputs))

    @property
    def inputs(self) -> BlackScholesInputs:
        return self._inputs

    @property
    def state(self) -> BlackScholesState:
        return self._state

    # ------------------------------------------------------------------
    # Price and first-order Greeks
    # ------------------------------------------------------------------
    def price(self) -> float:
        s = self._state
        return s.df * s.call_put_flag * (s.F * s.Nd1 - self._inputs.K * s.Nd2)

    def delta(self) -> float:
        """dV/dS = df * phi * exp(mu*T) * N(phi*d1)."""
        s = self._state
        return s.df * s.call_put_flag * np.exp(s.mu * self._inputs.T) * s.Nd1

    def theta(self) -> float:
        """Annual time decay, -dV/dT."""
        s, p = self._state, self._inputs
        term1 = -s.F * s.df * s.nd1 * p.sigma / (2.0 * s.sqrt_T)
        term2 = -s.call_put_flag * p.r * p.K * s.df * s.Nd2
        term3 = s.call_put_flag * (p.r - s.mu) * s.F * s.df * s.Nd1
        return term1 + term2 + term3

    def vega(self) -> float:
        """dV/dsigma per unit of volatility (not per 1%)."""
        s = self._state
        return s.F * s.df * s.nd1 * s.sqrt_T

    def rho(self) -> float:
        """
        dV/dr for a spot underlying. For a future-priced option F does not
        depend on r and the value returned is -T*df*price, i.e. dV/dr
        discounted once more by df.
        """
        s, p = self._state, self._inputs
        if s.future_flag == 0:
            return -p.T * s.df * self.price()
        return s.call_put_flag * p.K * p.T * s.Nd2 * s.df

    def epsilon(self) -> float:
        """dV/dq, zero for a future-priced option."""
        s, p = self._state, self._inputs
        if s.future_flag == 0:
            return 0.0
        return -s.call_put_flag * s.F * p.T * s.Nd1 * s.df

    def dual_delta(self) -> float:
        """dV/dK."""
        s = self._state
        return -s.call_put_flag * s.df * s.Nd2

    # ------------------------------------------------------------------
    # Second-order Greeks
    # ------------------------------------------------------------------
    def gamma(self) -> float:
        """d2V/dS2. Identical for calls and puts."""
        s, p = self._state, self._inputs
        drift = np.exp(s.mu * p.T)
        return s.df * drift * drift * s.nd1 / (s.F * p.sigma * s.sqrt_T)

    def vanna(self) -> float:
        """d2V/(dS dsigma)."""
        s, p = self._state, self._inputs
        return -s.df * np.exp(s.mu * p.T) * s.nd1 * s.d2 / p.sigma

    def volga(self) -> float:
        """d2V/dsigma2."""
        s = self._state
        return self.vega() * s.d1 * s.d2 / self._inputs.sigma

    def charm(self) -> float:
        """Delta decay, -d(delta)/dT."""
        s, p = self._state, self._inputs
        drift = np.exp(s.mu * p.T)
        term1 = (p.r - s.mu) * s.df * drift * s.Nd1
        term2 = ((2.0 * s.mu * p.T - p.sigma * s.d2 * s.sqrt_T)
                 / (2.0 * p.T * p.sigma * s.sqrt_T))
        term3 = s.df * drift * s.nd1
        return s.call_put_flag * term1 - term2 * term3

    def veta(self) -> float:
        """d(vega)/dT."""
        s, p = self._state, self._inputs
        term1 = -s.F * s.df * s.nd1 * s.sqrt_T
        term2 = (p.r - s.mu) + s.mu * s.d1 / (p.sigma * s.sqrt_T)
        term3 = (1.0 + s.d1 * s.d2) / (2.0 * p.T)
        return term1 * (term2 - term3)

    def dual_gamma(self) -> float:
        """d2V/dK2."""
        s, p = self._state, self._inputs
        return s.df * s.nd2 / (p.K * p.sigma * s.sqrt_T)

    # ------------------------------------------------------------------
    # Third-order Greeks
    # ------------------------------------------------------------------
    def speed(self) -> float:
        """d(gamma)/dS."""
        s, p = self._state, self._inputs
        term1 = -np.exp(s.mu * p.T) * self.gamma() * (
            1.0 + s.d1 / (p.sigma * s.sqrt_T))
        return term1 / s.F

    def zomma(self) -> float:
        """d(gamma)/dsigma."""
        s = self._state
        return self.gamma() * (s.d1 * s.d2 - 1.0) / self._inputs.sigma

    def color(self) -> float:
        """d(gamma)/dT."""
        s, p = self._state, self._inputs
        term1 = s.d1 * (2.0 * s.mu * p.T - s.d2 * p.sigma * s.sqrt_T) / (
            p.sigma * s.sqrt_T)
        return -self.gamma() * (2.0 * (p.r - s.mu) * p.T + 1.0 + term1) / (
            2.0 * p.T)

    def ultima(self) -> float:
        """d(volga)/dsigma."""
        s = self._state
        d1d2 = s.d1 * s.d2
        return -self.vega() * (d1d2 * (1.0 - d1d2) + s.d1 ** 2 + s.d2 ** 2) / (
            self._inputs.sigma ** 2)

    def greeks(self) -> Dict[str, float]:
        """
        Compute every Greek in a single call.

        Returns:
            Dictionary keyed by Greek name (see ``GREEK_NAMES``)
        """
        return {name: float(getattr(self, name)()) for name in GREEK_NAMES}

    def __repr__(self):
        p = self._inputs
        kind = "call" if p.is_call else "put"
        under = "future" if p.is_future else "spot"
        return (f"BlackScholes({kind} on {under}, S={p.S}, K={p.K}, r={p.r}, "
                f"q={p.q}, sigma={p.sigma}, T={p.T})")


def put_call_parity(S: float, K: float, r: float, q: float, sigma: float,
                    T: float, is_future: bool = False) -> dict:
    """
    Verify put-call parity: C - P = exp(-rT) * (F - K).

    For a spot underlying this is S*exp(-qT) - K*exp(-rT); for a future it is
    exp(-rT) * (S - K).
    """
    call = BlackScholes(S, K, r, q, sigma, T, True, is_future)
    put = BlackScholes(S, K, r, q, sigma, T, False, is_future)
    st = call.state
    theoretical = st.df * (st.F - K)
    actual = call.price() - put.price()
    return {
        "call_price": call.price(), "put_price": put.price(),
        "theoretical_C_minus_P": theoretical, "actual_C_minus_P": actual,
        "parity_error": abs(actual - theoretical),
        "parity_holds": abs(actual - theoretical) < 1e-10,
    }


@timeit
def greeks_table(options: Dict[str, BlackScholes]) -> pd.DataFrame:
    """
    Tabulate price and Greeks for several labelled options.

    Returns:
        DataFrame indexed by label, with a ``price`` column followed by one
        column per Greek
    """
    rows = {}
    for label, option in options.items():
        row = {"price": float(option.price())}
        row.update(option.greeks())
        rows[label] = row
    return pd.DataFrame.from_dict(rows, orient="index",
                                  columns=["price", *GREEK_NAMES])
