"""
config.py
---------
Centralised configuration for the analytics package.
All parameters are read from environment variables with sensible defaults,
so diagnostics grids and logging verbosity can be tuned without code changes.
Values are read when a config object is instantiated, not at import.
"""

import os
from dataclasses import dataclass, field
from typing import Optional

import numpy as np


def _env(name: str, default: str):
    return lambda: os.getenv(name, default)


def _env_float(name: str, default: str):
    return lambda: float(os.getenv(name, default))


def _env_int(name: str, default: str):
    return lambda: int(os.getenv(name, default))


def _env_seed() -> Optional[int]:
    value = os.getenv("QFA_SEED", "")
    return int(value) if value else None


@dataclass
class LogConfig:
    """Logging verbosity for the package loggers."""
    level: str = field(default_factory=_env("QFA_LOG_LEVEL", "WARNING"))


@dataclass
class SurfaceConfig:
    """Log-moneyness grid used by slice-to-slice arbitrage diagnostics."""
    k_min:    float = field(default_factory=_env_float("QFA_K_MIN", "-1.5"))
    k_max:    float = field(default_factory=_env_float("QFA_K_MAX", "1.5"))
    k_points: int   = field(default_factory=_env_int("QFA_K_POINTS", "201"))
    tol:      float = field(default_factory=_env_float("QFA_CAL_TOL", "1e-12"))

    def grid(self) -> np.ndarray:
        return np.linspace(self.k_min, self.k_max, self.k_points)


@dataclass
class SamplingConfig:
    """Random sampling settings; a fixed seed makes draws reproducible."""
    seed: Optional[int] = field(default_factory=_env_seed)


@dataclass
class AnalyticsConfig:
    """Master configuration aggregating all sub-configs."""
    logging:  LogConfig      = field(default_factory=LogConfig)
    surface:  SurfaceConfig  = field(default_factory=SurfaceConfig)
    sampling: SamplingConfig = field(default_factory=SamplingConfig)


def load_config() -> AnalyticsConfig:
    """Build a configuration snapshot from the current environment."""
    return AnalyticsConfig()
