"""
================================================================================
SVI / SSVI: STOCHASTIC VOLATILITY INSPIRED PARAMETRIZATIONS
================================================================================
Gatheral (2004) parametric model for total implied variance and its surface
extension by Gatheral & Jacquier (2014), "Arbitrage-free SVI volatility
surfaces".

Raw SVI:          w(k) = a + b * (rho*(k-m) + sqrt((k-m)^2 + s^2))
Jump-wings SVI:   (v_t, u_t, c_t, p_t, v~_t) at maturity t, i.e. ATM
                  variance, ATM skew, call/put wing slopes, minimum variance
Power-law SSVI:   w(k, theta) = theta/2 * (1 + rho*phi*k
                                + sqrt((phi*k + rho)^2 + 1 - rho^2)),
                  phi(theta) = nu * theta^gamma

Slices are built from jump-wings inputs and converted once to raw
coefficients; every query is a closed-form read of the frozen state and
accepts either a float or a NumPy array of log-moneyness values.

Author: Jose Orlando Bobadilla Fuentes, CQF
================================================================================
"""

from dataclasses import dataclass
from typing import Optional, Union

import numpy as np

from qfanalytics.config import SurfaceConfig
from qfanalytics.errors import InvalidParameter
from qfanalytics.utils import get_logger

logger = get_logger(__name__)

ArrayLike = Union[float, np.ndarray]


def _reject(message: str) -> InvalidParameter:
    logger.debug("Rejected SVI parameters: %s", message)
    return InvalidParameter(message)


def _sign(x: float) -> float:
    return -1.0 if x < 0 else 1.0


@dataclass(frozen=True)
class JumpWingsParams:
    """Jump-wings SVI parameters."""
    vt: float    # ATM implied variance
    ut: float    # ATM skew
    ct: float    # call wing slope
    pt: float    # put wing slope
    vmt: float   # minimum implied variance
    T: float     # year fraction


@dataclass(frozen=True)
class RawSVIParams:
    """Raw SVI parameters."""
    a: float
    b: float
    rho: float
    m: float
    sigma: float


@dataclass(frozen=True)
class RawSVIState:
    """Raw coefficients, translation values and their time-derivatives."""
    a: float
    b: float
    p: float
    m: float
    s: float
    alpha: float
    beta: float
    dadt: float
    dbdt: float
    dmdt: float
    dsdt: float

    @classmethod
    def derive(cls, jw: JumpWingsParams) -> "RawSVIState":
        """
        Translate jump-wings parameters into raw SVI coefficients.

        Order: b -> p -> beta -> alpha -> m -> a -> s -> time-derivatives.
        Time-derivatives hold the jump-wings parameters fixed.
        """
        vt, ut, ct, pt, vmt, T = jw.vt, jw.ut, jw.ct, jw.pt, jw.vmt, jw.T
        atm_vol = np.sqrt(vt * T)

        b = atm_vol * (ct + pt) / 2.0
        if b < 0:
            raise _reject(f"b must be non-negative, got {b}")

        p = 0.0 if b == 0 else 1.0 - pt * atm_vol / b
        if abs(p) > 1.0:
            raise _reject(f"|rho| must not exceed 1, got {p}")

        if b == 0:
            beta = 1.0
        else:
            beta = p - 2.0 * ut * atm_vol / b
            if abs(beta) > 1.0:
                raise _reject(f"|beta| must not exceed 1, got {beta}")

        alpha = 0.0 if beta == 0 else _sign(beta) * np.sqrt(1.0 / beta ** 2 - 1.0)

        root_p = np.sqrt(1.0 - p * p)
        factor = -p + _sign(alpha) * np.sqrt(1.0 + alpha * alpha) - alpha * root_p
        if b == 0:
            m = 0.0
        elif factor == 0:
            raise _reject("jump-wings parameters give an undefined m")
        else:
            m = T * (vt - vmt) / (b * factor)

        if m != 0:
            a = T * vmt - b * (alpha * m) * root_p
            s = alpha * m
        elif b == 0:
            # flat slice
            a = T * (vmt + vt) / 2.0
            s = 1.0
        else:
            if root_p == 1.0:
                raise _reject("symmetric slice with m = 0 is undetermined")
            a = T * (vmt + vt * root_p) / (1.0 - root_p)
            s = (vt * T - a) / b

        if s <= 0:
            raise _reject(f"s must be positive, got {s}")
        if a + b * s * root_p < 0:
            raise _reject("minimum total variance is negative")

        dbdt = np.sqrt(vt) * (ct + pt) / (4.0 * np.sqrt(T))
        dmdt = 0.0 if b == 0 else (vt - vmt) * (b - T * dbdt) / (factor * b * b)
        if m != 0:
            dsdt = alpha * dmdt
        elif b == 0:
            dsdt = 0.0
        else:
            dsdt = (b * (vt - a / T) - dbdt * (vt * T - a)) / (b * b)
        dadt = a / T if m == 0 else vmt - root_p * (dbdt * s + dsdt * b)

        return cls(a=float(a), b=float(b), p=float(p), m=float(m), s=float(s),
                   alpha=float(alpha), beta=float(beta), dadt=float(dadt),
                   dbdt=float(dbdt), dmdt=float(dmdt), dsdt=float(dsdt))


class SVI:
    """
    Single-maturity SVI slice built from jump-wings parameters.

    Parameters:
        vt: ATM implied variance (> 0)
        ut: ATM skew
        ct: Call wing slope (>= 0)
        pt: Put wing slope (>= 0)
        vmt: Minimum implied variance (> 0)
        T: Year fraction (> 0)

    Raises:
        InvalidParameter: out-of-domain inputs or derived raw coefficients

    Usage:
        >>> svi = SVI(vt=0.04, ut=-0.01, ct=0.01, pt=0.03, vmt=0.03, T=1.0)
        >>> svi.implied_volatility(0.0)
        0.2
    """

    def __init__(self, vt: float, ut: float, ct: float, pt: float,
                 vmt: float, T: float):
        if vt <= 0:
            raise _reject(f"vt must be positive, got {vt}")
        if vmt <= 0:
            raise _reject(f"vmt must be positive, got {vmt}")
        if T <= 0:
            raise _reject(f"T must be positive, got {T}")
        self._jw = JumpWingsParams(vt=float(vt), ut=float(ut), ct=float(ct),
                                   pt=float(pt), vmt=float(vmt), T=float(T))
        self._state = RawSVIState.derive(self._jw)

    # ---------------------------------------------------------------- state
    @property
    def jump_wings(self) -> JumpWingsParams:
        return self._jw

    @property
    def state(self) -> RawSVIState:
        return self._state

    @property
    def raw_params(self) -> RawSVIParams:
        st = self._state
        return RawSVIParams(a=st.a, b=st.b, rho=st.p, m=st.m, sigma=st.s)

    @property
    def T(self) -> float:
        return self._jw.T

    @property
    def a(self) -> float:
        return self._state.a

    @property
    def b(self) -> float:
        return self._state.b

    @property
    def p(self) -> float:
        return self._state.p

    @property
    def m(self) -> float:
        return self._state.m

    @property
    def s(self) -> float:
        return self._state.s

    @property
    def alpha(self) -> float:
        return self._state.alpha

    @property
    def beta(self) -> float:
        return self._state.beta

    @property
    def dadt(self) -> float:
        return self._state.dadt

    @property
    def dbdt(self) -> float:
        return self._state.dbdt

    @property
    def dmdt(self) -> float:
        return self._state.dmdt

    @property
    def dsdt(self) -> float:
        return self._state.dsdt

    # -------------------------------------------------------------- variance
    def total_variance(self, k: ArrayLike) -> ArrayLike:
        st = self._state
        km = k - st.m
        return st.a + st.b * (st.p * km + np.sqrt(km * km + st.s * st.s))

    def implied_variance(self, k: ArrayLike) -> ArrayLike:
        return self.total_variance(k) / self._jw.T

    def implied_volatility(self, k: ArrayLike) -> ArrayLike:
        return np.sqrt(self.implied_variance(k))

    def dwdk(self, k: ArrayLike) -> ArrayLike:
        st = self._state
        km = k - st.m
        return st.b * (st.p + km / np.sqrt(km * km + st.s * st.s))

    def dw2dk2(self, k: ArrayLike) -> ArrayLike:
        st = self._state
        km = k - st.m
        return st.b * st.s * st.s / (km * km + st.s * st.s) ** 1.5

    # ------------------------------------------------------ time dependence
    def smile(self, k: ArrayLike) -> ArrayLike:
        """Smile part g(k) = p*(k-m) + sqrt((k-m)^2 + s^2), so w = a + b*g."""
        st = self._state
        km = k - st.m
        return st.p * km + np.sqrt(km * km + st.s * st.s)

    def dgdt(self, k: ArrayLike) -> ArrayLike:
        st = self._state
        km = k - st.m
        return -st.p * st.dmdt + (st.dsdt * st.s - st.dmdt * km) / np.sqrt(
            km * km + st.s * st.s)

    def dwdt(self, k: ArrayLike) -> ArrayLike:
        st = self._state
        return st.dadt + st.b * self.dgdt(k) + st.dbdt * self.smile(k)

    # ------------------------------------------------ density & local vol
    def risk_neutral_density(self, k: ArrayLike) -> ArrayLike:
        """
        Gatheral's g(k); non-negative everywhere iff the slice is free of
        butterfly arbitrage.
        """
        w = self.total_variance(k)
        w1 = self.dwdk(k)
        term1 = 1.0 - k * w1 / (2.0 * w)
        term2 = 0.25 * w1 * w1 * (0.25 + 1.0 / w)
        return term1 * term1 - term2 + 0.5 * self.dw2dk2(k)

    def local_variance(self, k: ArrayLike) -> ArrayLike:
        """Dupire local variance dw/dt / g(k)."""
        return self.dwdt(k) / self.risk_neutral_density(k)

    def local_volatility(self, k: ArrayLike) -> ArrayLike:
        return np.sqrt(self.local_variance(k))

    # ------------------------------------------------------------ arbitrage
    def butterfly_arbitrage_check(self) -> bool:
        """Gatheral-Jacquier sufficient wing conditions."""
        jw = self._jw
        wing = max(jw.ct, jw.pt)
        cond1 = np.sqrt(jw.vt * jw.T) * wing
        cond2 = (jw.ct + jw.pt) * wing
        return bool(cond1 < 2 and cond2 <= 2)

    def calendar_spread_arbitrage_check(self, other: "SVI",
                                        k: Optional[np.ndarray] = None) -> bool:
        """
        True when total variance does not decrease from the shorter to the
        longer maturity anywhere on the log-moneyness grid ``k``.
        """
        cfg = SurfaceConfig()
        k = cfg.grid() if k is None else np.asarray(k, dtype=float)
        short, long_ = (self, other) if self.T <= other.T else (other, self)
        gap = long_.total_variance(k) - short.total_variance(k)
        return bool(np.all(gap >= -cfg.tol))

    # ------------------------------------------------------------ conversion
    def get_power_law_ssvi(self) -> "SSVI":
        """Power-law SSVI (gamma = 0.5) sharing this slice's skew and wings."""
        jw = self._jw
        if jw.ut == 0 or jw.pt == -jw.ut:
            raise _reject("ATM skew does not define a power-law SSVI")
        rho = 1.0 / (1.0 + jw.pt / jw.ut)
        return SSVI(rho, 2.0 * jw.ut / rho, 0.5)

    def __repr__(self):
        st = self._state
        return (f"SVI(a={st.a:.6f}, b={st.b:.6f}, rho={st.p:.4f}, "
                f"m={st.m:.6f}, s={st.s:.6f}, T={self._jw.T:.4f})")


class SSVI:
    """
    Power-law surface SVI.

    Parameters:
        rho: Spot/vol correlation, |rho| <= 1
        nu: Power-law level, nu >= 0
        gamma: Power-law exponent in [0, 1]

    Usage:
        >>> ssvi = SSVI(rho=-0.5, nu=1.0, gamma=0.5)
        >>> slice_1y = ssvi.get_svi(atm_total_variance=0.04, T=1.0)
    """

    def __init__(self, rho: float, nu: float, gamma: float):
        if abs(rho) > 1:
            raise _reject(f"|rho| must not exceed 1, got {rho}")
        if gamma < 0 or gamma > 1:
            raise _reject(f"gamma must lie in [0, 1], got {gamma}")
        if nu < 0:
            raise _reject(f"nu must be non-negative, got {nu}")
        self._rho = float(rho)
        self._nu = float(nu)
        self._gamma = float(gamma)

    @property
    def rho(self) -> float:
        return self._rho

    @property
    def nu(self) -> float:
        return self._nu

    @property
    def gamma(self) -> float:
        return self._gamma

    def phi(self, atm_total_variance: ArrayLike) -> ArrayLike:
        """Power-law function nu * theta^gamma."""
        return self._nu * np.power(atm_total_variance, self._gamma)

    def dphi(self, atm_total_variance: ArrayLike) -> ArrayLike:
        return (1.0 - self._gamma) * self.phi(atm_total_variance)

    def get_svi(self, atm_total_variance: float, T: float) -> SVI:
        """SVI slice at ATM total variance theta and maturity T."""
        if T <= 0:
            raise _reject(f"T must be positive, got {T}")
        theta, rho = atm_total_variance, self._rho
        f = self.phi(theta) * np.sqrt(theta)
        return SVI(
            theta / T,
            0.5 * rho * f,
            0.5 * (1.0 + rho) * f,
            0.5 * (1.0 - rho) * f,
            theta * (1.0 - rho * rho) / T,
            T,
        )

    def butterfly_arbitrage_check(self, atm_total_variance: float) -> bool:
        phi = self.phi(atm_total_variance)
        cond1 = atm_total_variance * phi * (1.0 + abs(self._rho))
        cond2 = cond1 * phi
        return bool(cond1 <= 4 and cond2 <= 4)

    def calendar_spread_arbitrage_check(self, atm_total_variance: float) -> bool:
        phi = self.phi(atm_total_variance)
        dphi = self.dphi(atm_total_variance)
        rho2 = self._rho * self._rho
        if rho2 == 0:
            return bool(dphi >= 0)
        bound = phi * (1.0 + np.sqrt(1.0 - rho2)) / rho2
        return bool(0 <= dphi <= bound)

    def total_variance(self, k: ArrayLike, atm_total_variance: float) -> ArrayLike:
        phi = self.phi(atm_total_variance)
        rho = self._rho
        term1 = phi * k + rho
        term2 = np.sqrt(term1 * term1 + (1.0 - rho * rho))
        return 0.5 * atm_total_variance * (1.0 + rho * k * phi + term2)

    def implied_variance(self, k: ArrayLike, atm_total_variance: float,
                         T: float) -> ArrayLike:
        return self.total_variance(k, atm_total_variance) / T

    def implied_volatility(self, k: ArrayLike, atm_total_variance: float,
                           T: float) -> ArrayLike:
        return np.sqrt(self.implied_variance(k, atm_total_variance, T))

    def risk_neutral_density(self, k: ArrayLike,
                             atm_total_variance: float) -> ArrayLike:
        """Gatheral's g(k) evaluated on the closed-form SSVI slice."""
        theta, rho = atm_total_variance, self._rho
        phi = self.phi(theta)
        root = np.sqrt((phi * k + rho) ** 2 + 1.0 - rho * rho)
        w = self.total_variance(k, theta)
        w1 = 0.5 * theta * phi * (rho + (phi * k + rho) / root)
        w2 = 0.5 * theta * phi * phi * (1.0 - rho * rho) / root ** 3
        term1 = 1.0 - k * w1 / (2.0 * w)
        return term1 * term1 - 0.25 * w1 * w1 * (0.25 + 1.0 / w) + 0.5 * w2

    def atm_volatility_skew(self, atm_total_variance: float, T: float) -> float:
        """d(sigma_BS)/dk at k = 0."""
        theta = atm_total_variance
        return float(self._rho * np.sqrt(theta) * self.phi(theta)
                     / (2.0 * np.sqrt(T)))

    def __repr__(self):
        return f"SSVI(rho={self._rho:.4f}, nu={self._nu:.4f}, gamma={self._gamma:.2f})"


class ReducedSVI:
    """
    Three-parameter SVI slice (v_t, nu, rho) built through SSVI(rho, nu, 0.5)
    at ATM total variance v_t * T.
    """

    def __init__(self, vt: float, nu: float, rho: float, T: float):
        if vt <= 0:
            raise _reject(f"vt must be positive, got {vt}")
        if T <= 0:
            raise _reject(f"T must be positive, got {T}")
        self._vt = float(vt)
        self._nu = float(nu)
        self._rho = float(rho)
        self._T = float(T)
        self._svi = SSVI(rho, nu, 0.5).get_svi(self._vt * self._T, self._T)

    @property
    def vt(self) -> float:
        return self._vt

    @property
    def nu(self) -> float:
        return self._nu

    @property
    def rho(self) -> float:
        return self._rho

    @property
    def T(self) -> float:
        return self._T

    def get_svi(self) -> SVI:
        return self._svi

    def butterfly_arbitrage_check(self) -> bool:
        return self._svi.butterfly_arbitrage_check()

    def calendar_spread_arbitrage_check(self, other: "ReducedSVI",
                                        k: Optional[np.ndarray] = None) -> bool:
        return self._svi.calendar_spread_arbitrage_check(other.get_svi(), k)

    def __repr__(self):
        return (f"ReducedSVI(vt={self.vt:.4f}, nu={self.nu:.4f}, "
                f"rho={self.rho:.4f}, T={self.T:.4f})")
