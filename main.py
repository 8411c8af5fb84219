"""
Closed-Form Option Analytics - Main Analysis
============================================

Demonstrates:
    1. European option pricing with put-call parity verification
    2. Full Greeks report (spot and future underlyings)
    3. SSVI surface slices and their no-arbitrage diagnostics
    4. Jump-wings SVI round trip and local volatility
    5. Figure generation (optional)

Author: Jose Orlando Bobadilla Fuentes | CQF
"""

import argparse

import numpy as np
import pandas as pd

from qfanalytics import (
    BlackScholes, SSVI, ReducedSVI, attempt, greeks_table, put_call_parity,
)
from qfanalytics.config import load_config
from qfanalytics.utils import get_logger

logger = get_logger("qfanalytics.main")


def header(text):
    print(f"\n{'='*70}\n  {text}\n{'='*70}")


def parse_args():
    parser = argparse.ArgumentParser(description="Option analytics demo")
    parser.add_argument("--plots", metavar="DIR", default=None,
                        help="save figures to DIR")
    return parser.parse_args()


def main():
    args = parse_args()
    cfg = load_config()
    logger.setLevel(cfg.logging.level.upper())

    header("CLOSED-FORM OPTION ANALYTICS")

    # --- 1. European Pricing ---
    header("1. EUROPEAN OPTION PRICING")
    S, K, r, q, sigma, T = 100.0, 100.0, 0.01, 0.0, 0.20, 1.0
    parity = put_call_parity(S, K, r, q, sigma, T)
    print(f"\n  S={S}, K={K}, T={T}y, r={r:.2%}, sigma={sigma:.2%}, q={q:.2%}")
    print(f"\n  European Call = {parity['call_price']:.6f}")
    print(f"  European Put  = {parity['put_price']:.6f}")
    print(f"\n  Put-Call Parity error = {parity['parity_error']:.2e} "
          f"(holds: {parity['parity_holds']})")

    # --- 2. Greeks ---
    header("2. GREEKS REPORT")
    options = {
        "call/spot": BlackScholes(S, K, r, q, sigma, T, True, False),
        "put/spot": BlackScholes(S, K, r, q, sigma, T, False, False),
        "call/future": BlackScholes(S, K, r, q, sigma, T, True, True),
        "put/future": BlackScholes(S, K, r, q, sigma, T, False, True),
    }
    with pd.option_context("display.width", 200, "display.max_columns", 20):
        print(greeks_table(options).T.round(6).to_string())

    # --- 3. SSVI ---
    header("3. POWER-LAW SSVI SURFACE")
    ssvi = SSVI(rho=-0.4, nu=1.2, gamma=0.5)
    maturities = np.array([0.25, 0.5, 1.0, 2.0])
    atm_vol = 0.20
    rows = []
    slices = {}
    for T_i in maturities:
        theta = atm_vol ** 2 * T_i
        res = attempt(ssvi.get_svi, theta, T_i)
        if not res.ok:
            logger.warning("No slice at T=%.2f: %s", T_i, res.error)
            continue
        svi = res.value
        slices[f"T={T_i:.2f}y"] = svi
        raw = svi.raw_params
        rows.append({
            "T": T_i, "theta": theta, "a": raw.a, "b": raw.b,
            "rho": raw.rho, "m": raw.m, "sigma": raw.sigma,
            "butterfly_free": ssvi.butterfly_arbitrage_check(theta),
            "calendar_free": ssvi.calendar_spread_arbitrage_check(theta),
            "atm_skew": ssvi.atm_volatility_skew(theta, T_i),
        })
    print(pd.DataFrame(rows).round(6).to_string(index=False))

    # --- 4. Reduced SVI ---
    header("4. REDUCED SVI & LOCAL VOLATILITY")
    rsvi = ReducedSVI(vt=0.04, nu=1.0, rho=-0.5, T=1.0)
    svi = rsvi.get_svi()
    k = np.array([-0.4, -0.2, 0.0, 0.2, 0.4])
    print(f"\n  {svi}")
    print(f"  Butterfly free: {rsvi.butterfly_arbitrage_check()}")
    print(f"  Power-law SSVI: {svi.get_power_law_ssvi()}")
    print(pd.DataFrame({
        "k": k,
        "implied_vol": svi.implied_volatility(k),
        "local_vol": svi.local_volatility(k),
        "g(k)": svi.risk_neutral_density(k),
    }).round(6).to_string(index=False))

    # --- 5. Visualizations ---
    if args.plots:
        header("5. GENERATING VISUALIZATIONS")
        from qfanalytics.visualization import (
            plot_svi_smiles, plot_local_vol, plot_greeks_profile)
        print(f"  {plot_svi_smiles(slices, output_dir=args.plots)}")
        print(f"  {plot_local_vol(svi, output_dir=args.plots)}")
        print(f"  {plot_greeks_profile(K, r, q, sigma, T, output_dir=args.plots)}")

    header("ANALYSIS COMPLETE")


if __name__ == "__main__":
    main()
