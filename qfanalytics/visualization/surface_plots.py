"""
Publication-quality charts for SVI slices and Black-Scholes Greeks.

All figures use matplotlib with the Agg backend (headless safe).

Figures generated:
    svi_smiles.png        - Implied vol smiles for several slices
    svi_local_vol.png     - Implied vs local volatility for one slice
    greeks_profile.png    - Delta, gamma, vega and theta against spot

Author: Jose Orlando Bobadilla Fuentes, CQF
"""

import os
from typing import Dict, Optional

import numpy as np
import matplotlib
matplotlib.use("Agg")                     # headless rendering
import matplotlib.pyplot as plt

from qfanalytics.models.black_scholes import BlackScholes
from qfanalytics.models.svi import SVI

# ---------------------------------------------------------------------------
# Style configuration
# ---------------------------------------------------------------------------
NAVY   = "#1a1a2e"
TEAL   = "#16697a"
CORAL  = "#db6400"
GOLD   = "#c5a880"
SLATE  = "#4a4e69"
COLORS = [NAVY, TEAL, CORAL, GOLD, SLATE, "#2d6a4f", "#e07a5f", "#3d405b"]

plt.rcParams.update({
    "figure.facecolor": "white",
    "axes.facecolor": "white",
    "axes.grid": True,
    "grid.alpha": 0.3,
    "grid.linestyle": "--",
    "font.size": 11,
    "axes.titlesize": 14,
    "axes.labelsize": 12,
    "figure.dpi": 150,
    "savefig.dpi": 300,
    "savefig.facecolor": "white",
})


def _save(fig, output_dir: Optional[str], name: str) -> Optional[str]:
    if output_dir is None:
        return None
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, name)
    fig.savefig(path, bbox_inches="tight")
    plt.close(fig)
    return path


def plot_svi_smiles(slices: Dict[str, SVI], k: Optional[np.ndarray] = None,
                    output_dir: Optional[str] = None):
    """Implied volatility smiles, one line per labelled slice."""
    k = np.linspace(-0.5, 0.5, 201) if k is None else k
    fig, ax = plt.subplots(figsize=(10, 6))
    for i, (label, svi) in enumerate(slices.items()):
        ax.plot(k, svi.implied_volatility(k) * 100, color=COLORS[i % len(COLORS)],
                linewidth=2, label=label)
    ax.axvline(0.0, color=SLATE, linestyle=":", alpha=0.6)
    ax.set_xlabel("Log-moneyness k = ln(K/F)")
    ax.set_ylabel("Implied Volatility (%)")
    ax.set_title("SVI Volatility Smiles")
    ax.legend()
    path = _save(fig, output_dir, "svi_smiles.png")
    return path or fig


def plot_local_vol(svi: SVI, k: Optional[np.ndarray] = None,
                   output_dir: Optional[str] = None):
    """Implied against Dupire local volatility, with g(k) on a twin axis."""
    k = np.linspace(-0.5, 0.5, 201) if k is None else k
    fig, ax = plt.subplots(figsize=(10, 6))
    ax.plot(k, svi.implied_volatility(k) * 100, color=NAVY, linewidth=2,
            label="Implied vol")
    ax.plot(k, svi.local_volatility(k) * 100, color=CORAL, linewidth=2,
            linestyle="--", label="Local vol")
    ax.set_xlabel("Log-moneyness k")
    ax.set_ylabel("Volatility (%)")
    ax2 = ax.twinx()
    ax2.plot(k, svi.risk_neutral_density(k), color=TEAL, alpha=0.5,
             label="g(k)")
    ax2.axhline(0.0, color=TEAL, linestyle=":", alpha=0.5)
    ax2.set_ylabel("g(k)")
    ax2.grid(False)
    ax.set_title(f"Implied vs Local Volatility (T={svi.T:.2f}y)")
    ax.legend(loc="upper left")
    path = _save(fig, output_dir, "svi_local_vol.png")
    return path or fig


def plot_greeks_profile(K: float, r: float, q: float, sigma: float, T: float,
                        spots: Optional[np.ndarray] = None,
                        output_dir: Optional[str] = None):
    """Call and put delta, gamma, vega and theta as a function of spot."""
    spots = np.linspace(0.5 * K, 1.5 * K, 101) if spots is None else spots
    names = ["delta", "gamma", "vega", "theta"]
    fig, axes = plt.subplots(2, 2, figsize=(12, 8))
    for is_call, color, label in [(True, NAVY, "Call"), (False, CORAL, "Put")]:
        curves = {name: [] for name in names}
        for S in spots:
            g = BlackScholes(S, K, r, q, sigma, T, is_call).greeks()
            for name in names:
                curves[name].append(g[name])
        for ax, name in zip(axes.flat, names):
            ax.plot(spots, curves[name], color=color, linewidth=2, label=label)
    for ax, name in zip(axes.flat, names):
        ax.axvline(K, color=SLATE, linestyle=":", alpha=0.6)
        ax.set_title(name.capitalize())
        ax.set_xlabel("Spot")
        ax.legend()
    fig.tight_layout()
    path = _save(fig, output_dir, "greeks_profile.png")
    return path or fig
