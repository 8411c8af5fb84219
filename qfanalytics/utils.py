"""
utils.py
--------
Logging and timing helpers shared by the model modules.
"""

import functools
import logging
import time

from qfanalytics.config import LogConfig


def get_logger(name: str, level: str = None) -> logging.Logger:
    """
    Return a named logger writing to stderr.

    Parameters
    ----------
    name  : Logger name (typically the module __name__).
    level : Logging level string ("DEBUG", "INFO", "WARNING", "ERROR").
            Defaults to ``QFA_LOG_LEVEL`` from the environment.

    Returns
    -------
    logging.Logger
    """
    logger = logging.getLogger(name)

    if logger.handlers:          # avoid duplicate handlers on re-import
        return logger

    level = level or LogConfig().level
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))

    fmt = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler()
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    return logger


def timeit(func):
    """Decorator that logs the execution time of any function."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = logging.getLogger(func.__module__)
        t0 = time.perf_counter()
        result = func(*args, **kwargs)
        elapsed = time.perf_counter() - t0
        logger.debug("%s completed in %.3f s", func.__qualname__, elapsed)
        return result
    return wrapper
