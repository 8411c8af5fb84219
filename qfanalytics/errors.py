"""
errors.py
---------
Construction errors raised by the pricing and surface models, and a
result-style wrapper for callers that prefer an explicit error value over
exception handling.

Every model validates eagerly in its constructor: once an object exists,
all of its queries are well-defined.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional


class ErrorKind(Enum):
    """Enumeration of construction failure kinds."""
    INVALID_PARAMETER = "invalid_parameter"
    NON_POSITIVE_VOLATILITY = "non_positive_volatility"
    NON_POSITIVE_YEAR_FRACTION = "non_positive_year_fraction"


class InvalidParameter(ValueError):
    """Out-of-domain model input (or derived coefficient)."""

    kind = ErrorKind.INVALID_PARAMETER

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NonPositiveVolatility(InvalidParameter):
    kind = ErrorKind.NON_POSITIVE_VOLATILITY

    def __init__(self, sigma: float):
        super().__init__(
            f"The implied volatility must be positive, got {sigma}")
        self.sigma = sigma


class NonPositiveYearFraction(InvalidParameter):
    kind = ErrorKind.NON_POSITIVE_YEAR_FRACTION

    def __init__(self, T: float):
        super().__init__(f"The year fraction must be positive, got {T}")
        self.T = T


@dataclass(frozen=True)
class Outcome:
    """Either a constructed model (``value``) or the rejection (``error``)."""
    value: Any = None
    error: Optional[InvalidParameter] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> Optional[ErrorKind]:
        return None if self.error is None else self.error.kind

    def unwrap(self) -> Any:
        """Return the value, re-raising the stored error if construction failed."""
        if self.error is not None:
            raise self.error
        return self.value


def attempt(factory: Callable[..., Any], *args, **kwargs) -> Outcome:
    """
    Call ``factory(*args, **kwargs)`` and capture an ``InvalidParameter``
    rejection as an explicit ``Outcome`` instead of raising it.

    Any other exception propagates unchanged.

    Example:
        >>> res = attempt(SVI, 0.04, -0.1, 0.3, 0.5, 0.03, 1.0)
        >>> if res.ok:
        ...     w = res.value.total_variance(0.0)
    """
    try:
        return Outcome(value=factory(*args, **kwargs))
    except InvalidParameter as exc:
        return Outcome(error=exc)
