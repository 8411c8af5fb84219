from qfanalytics.visualization.surface_plots import (
    plot_svi_smiles, plot_local_vol, plot_greeks_profile,
)

__all__ = ["plot_svi_smiles", "plot_local_vol", "plot_greeks_profile"]
