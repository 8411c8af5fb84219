from qfanalytics.models.black_scholes import (
    BlackScholes, BlackScholesInputs, BlackScholesState,
    GREEK_NAMES, put_call_parity, greeks_table,
)
from qfanalytics.models.svi import (
    SVI, SSVI, ReducedSVI, JumpWingsParams, RawSVIParams, RawSVIState,
)

__all__ = [
    "BlackScholes", "BlackScholesInputs", "BlackScholesState",
    "GREEK_NAMES", "put_call_parity", "greeks_table",
    "SVI", "SSVI", "ReducedSVI", "JumpWingsParams", "RawSVIParams",
    "RawSVIState",
]
