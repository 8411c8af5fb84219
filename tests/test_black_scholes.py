"""
Unit Tests for the Black-Scholes Pricer
=======================================

Validates pricing against reference values, put-call parity, every Greek
against a central finite difference of the quantity it differentiates,
and construction failures.

Run: pytest tests/test_black_scholes.py -v
"""

import numpy as np
import pandas as pd
import pytest
from scipy.stats import norm

from qfanalytics.errors import (
    ErrorKind, InvalidParameter, NonPositiveVolatility, NonPositiveYearFraction,
)
from qfanalytics.models.black_scholes import (
    BlackScholes, BlackScholesInputs, GREEK_NAMES, greeks_table, put_call_parity,
)

BASE = dict(S=105.0, K=100.0, r=0.03, q=0.01, sigma=0.25, T=0.75)


def make(is_call=True, is_future=False, **overrides):
    p = dict(BASE)
    p.update(overrides)
    return BlackScholes(p["S"], p["K"], p["r"], p["q"], p["sigma"], p["T"],
                        is_call, is_future)


def central(f, x, h):
    return (f(x + h) - f(x - h)) / (2.0 * h)


@pytest.fixture
def atm_call():
    return BlackScholes(S=100, K=100, r=0.01, q=0.0, sigma=0.2, T=1.0,
                        is_call=True, is_future=False)


class TestPricing:
    def test_call_known_value(self, atm_call):
        assert atm_call.price() == pytest.approx(8.433, abs=1e-3)

    def test_call_delta_known_value(self, atm_call):
        # d1 = (ln(F/K) + sigma^2 T / 2) / (sigma sqrt(T)) = 0.15
        assert atm_call.state.d1 == pytest.approx(0.15, abs=1e-12)
        assert atm_call.delta() == pytest.approx(norm.cdf(0.15), abs=1e-12)
        assert atm_call.delta() == pytest.approx(0.5596, abs=1e-4)

    def test_matches_textbook_formula(self):
        S, K, r, q, sigma, T = 105.0, 100.0, 0.03, 0.01, 0.25, 0.75
        d1 = (np.log(S / K) + (r - q + 0.5 * sigma ** 2) * T) / (sigma * np.sqrt(T))
        d2 = d1 - sigma * np.sqrt(T)
        call = S * np.exp(-q * T) * norm.cdf(d1) - K * np.exp(-r * T) * norm.cdf(d2)
        put = K * np.exp(-r * T) * norm.cdf(-d2) - S * np.exp(-q * T) * norm.cdf(-d1)
        assert make(True).price() == pytest.approx(call, rel=1e-12)
        assert make(False).price() == pytest.approx(put, rel=1e-12)

    def test_black76_future(self):
        F, K, r, sigma, T = 105.0, 100.0, 0.03, 0.25, 0.75
        d1 = (np.log(F / K) + 0.5 * sigma ** 2 * T) / (sigma * np.sqrt(T))
        d2 = d1 - sigma * np.sqrt(T)
        expected = np.exp(-r * T) * (F * norm.cdf(d1) - K * norm.cdf(d2))
        assert make(True, True).price() == pytest.approx(expected, rel=1e-12)

    def test_future_ignores_carry(self):
        assert make(True, True, q=0.0).price() == make(True, True, q=0.2).price()

    def test_put_call_parity_spot(self):
        res = put_call_parity(**BASE)
        expected = BASE["S"] * np.exp(-BASE["q"] * BASE["T"]) \
            - BASE["K"] * np.exp(-BASE["r"] * BASE["T"])
        assert res["parity_holds"]
        assert res["actual_C_minus_P"] == pytest.approx(expected, abs=1e-10)

    def test_put_call_parity_future(self):
        res = put_call_parity(is_future=True, **BASE)
        expected = np.exp(-BASE["r"] * BASE["T"]) * (BASE["S"] - BASE["K"])
        assert res["parity_holds"]
        assert res["actual_C_minus_P"] == pytest.approx(expected, abs=1e-10)

    def test_deep_otm_put(self):
        assert make(False, S=200.0, T=0.25).price() < 0.01

    def test_from_inputs(self):
        inputs = BlackScholesInputs(**BASE, is_call=False)
        assert BlackScholes.from_inputs(inputs).price() == make(False).price()


class TestGreekSymmetry:
    @pytest.mark.parametrize("is_future", [False, True])
    def test_gamma_vega_call_put_identical(self, is_future):
        call, put = make(True, is_future), make(False, is_future)
        assert call.gamma() == pytest.approx(put.gamma(), rel=1e-14)
        assert call.vega() == pytest.approx(put.vega(), rel=1e-14)

    def test_delta_bounds(self):
        assert 0 <= make(True).delta() <= 1
        assert -1 <= make(False).delta() <= 0

    def test_future_epsilon_zero(self):
        assert make(True, True).epsilon() == 0.0
        assert make(False, True).epsilon() == 0.0

    def test_future_rho(self):
        opt = make(True, True)
        assert opt.rho() == pytest.approx(-BASE["T"] * opt.state.df * opt.price())

    def test_construction_builds_no_distribution(self, monkeypatch):
        from qfanalytics.models import black_scholes

        def fail(*args, **kwargs):
            raise AssertionError("Normal constructed during pricing")

        monkeypatch.setattr(black_scholes, "Normal", fail)
        assert make(True).price() == pytest.approx(make(True).price())
        assert make(False, True).delta() < 0

    def test_greeks_dict(self):
        g = make(True).greeks()
        assert tuple(g) == GREEK_NAMES
        assert all(np.isfinite(v) for v in g.values())


@pytest.mark.parametrize("is_future", [False, True])
@pytest.mark.parametrize("is_call", [True, False])
class TestGreeksFiniteDifference:
    """Each analytical Greek against a central difference."""

    TOL = dict(rel=1e-5, abs=1e-7)

    def _fd(self, is_call, is_future, param, attr, h):
        f = lambda x: getattr(make(is_call, is_future, **{param: x}), attr)()
        return central(f, BASE[param], h)

    def test_delta(self, is_call, is_future):
        fd = self._fd(is_call, is_future, "S", "price", 1e-3)
        assert make(is_call, is_future).delta() == pytest.approx(fd, **self.TOL)

    def test_gamma(self, is_call, is_future):
        fd = self._fd(is_call, is_future, "S", "delta", 1e-3)
        assert make(is_call, is_future).gamma() == pytest.approx(fd, **self.TOL)

    def test_vega(self, is_call, is_future):
        fd = self._fd(is_call, is_future, "sigma", "price", 1e-5)
        assert make(is_call, is_future).vega() == pytest.approx(fd, **self.TOL)

    def test_theta(self, is_call, is_future):
        fd = -self._fd(is_call, is_future, "T", "price", 1e-5)
        assert make(is_call, is_future).theta() == pytest.approx(fd, **self.TOL)

    def test_rho(self, is_call, is_future):
        fd = self._fd(is_call, is_future, "r", "price", 1e-5)
        opt = make(is_call, is_future)
        if is_future:
            # future-priced rho is reported discounted by df
            fd *= opt.state.df
        assert opt.rho() == pytest.approx(fd, **self.TOL)

    def test_epsilon(self, is_call, is_future):
        fd = self._fd(is_call, is_future, "q", "price", 1e-5)
        assert make(is_call, is_future).epsilon() == pytest.approx(fd, **self.TOL)

    def test_vanna(self, is_call, is_future):
        fd = self._fd(is_call, is_future, "sigma", "delta", 1e-5)
        assert make(is_call, is_future).vanna() == pytest.approx(fd, **self.TOL)

    def test_volga(self, is_call, is_future):
        fd = self._fd(is_call, is_future, "sigma", "vega", 1e-5)
        assert make(is_call, is_future).volga() == pytest.approx(fd, **self.TOL)

    def test_charm(self, is_call, is_future):
        fd = -self._fd(is_call, is_future, "T", "delta", 1e-5)
        assert make(is_call, is_future).charm() == pytest.approx(fd, **self.TOL)

    def test_veta(self, is_call, is_future):
        fd = self._fd(is_call, is_future, "T", "vega", 1e-5)
        assert make(is_call, is_future).veta() == pytest.approx(fd, **self.TOL)

    def test_speed(self, is_call, is_future):
        fd = self._fd(is_call, is_future, "S", "gamma", 1e-3)
        assert make(is_call, is_future).speed() == pytest.approx(fd, **self.TOL)

    def test_zomma(self, is_call, is_future):
        fd = self._fd(is_call, is_future, "sigma", "gamma", 1e-5)
        assert make(is_call, is_future).zomma() == pytest.approx(fd, **self.TOL)

    def test_color(self, is_call, is_future):
        fd = self._fd(is_call, is_future, "T", "gamma", 1e-5)
        assert make(is_call, is_future).color() == pytest.approx(fd, **self.TOL)

    def test_ultima(self, is_call, is_future):
        fd = self._fd(is_call, is_future, "sigma", "volga", 1e-5)
        assert make(is_call, is_future).ultima() == pytest.approx(fd, **self.TOL)

    def test_dual_delta(self, is_call, is_future):
        fd = self._fd(is_call, is_future, "K", "price", 1e-3)
        assert make(is_call, is_future).dual_delta() == pytest.approx(fd, **self.TOL)

    def test_dual_gamma(self, is_call, is_future):
        fd = self._fd(is_call, is_future, "K", "dual_delta", 1e-3)
        assert make(is_call, is_future).dual_gamma() == pytest.approx(fd, **self.TOL)


class TestValidation:
    @pytest.mark.parametrize("sigma", [0.0, -0.2])
    def test_non_positive_vol(self, sigma):
        with pytest.raises(NonPositiveVolatility) as exc:
            make(sigma=sigma)
        assert exc.value.kind is ErrorKind.NON_POSITIVE_VOLATILITY

    @pytest.mark.parametrize("T", [0.0, -1.0])
    def test_non_positive_year_fraction(self, T):
        with pytest.raises(NonPositiveYearFraction) as exc:
            make(T=T)
        assert exc.value.kind is ErrorKind.NON_POSITIVE_YEAR_FRACTION

    def test_errors_are_invalid_parameter(self):
        with pytest.raises(InvalidParameter):
            make(sigma=0.0)
        with pytest.raises(InvalidParameter):
            make(K=0.0)
        with pytest.raises(InvalidParameter):
            make(S=-1.0)

    def test_state_frozen(self):
        opt = make()
        with pytest.raises(Exception):
            opt.state.d1 = 0.0


class TestReporting:
    def test_greeks_table(self):
        table = greeks_table({"call": make(True), "put": make(False)})
        assert isinstance(table, pd.DataFrame)
        assert list(table.index) == ["call", "put"]
        assert list(table.columns) == ["price", *GREEK_NAMES]
        assert table.loc["call", "gamma"] == pytest.approx(table.loc["put", "gamma"])
        assert table.loc["put", "price"] == pytest.approx(make(False).price())


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
