"""Black-Scholes pricing for European calls and puts.

The cumulative normal uses the Abramowitz & Stegun 26.2.17 polynomial
approximation (absolute error < 7.5e-8).

Reference: Abramowitz, M. & Stegun, I. (1964) "Handbook of Mathematical
Functions", formula 26.2.17.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping

_A1 = 0.31938153
_A2 = -0.356563782
_A3 = 1.781477937
_A4 = -1.821255978
_A5 = 1.330274429
_P = 0.2316419

MISSING_FIELDS_MESSAGE = "Please fill all option parameter fields."

OPTION_FIELDS = ("stock", "strike", "time", "rate", "vol")


class InvalidOptionParameters(ValueError):
    """Raised when option inputs are missing, non-numeric or out of domain."""


@dataclass(frozen=True)
class OptionPrices:
    call: float
    put: float

    @property
    def call_display(self) -> str:
        return format_price(self.call)

    @property
    def put_display(self) -> str:
        return format_price(self.put)


def cnd(x: float) -> float:
    """Cumulative standard normal distribution N(x)."""
    abs_x = abs(x)
    k = 1.0 / (1.0 + _P * abs_x)
    poly = _A1 * k + _A2 * k**2 + _A3 * k**3 + _A4 * k**4 + _A5 * k**5
    w = 1.0 - 1.0 / math.sqrt(2 * math.pi) * math.exp(-abs_x * abs_x / 2) * poly
    return w if x >= 0 else 1.0 - w


def black_scholes(S: float, K: float, T: float, r: float, v: float) -> OptionPrices:
    """Price a European call and put.

    S: spot, K: strike, T: years to expiry, r: risk-free rate, v: volatility.
    """
    _check_domain(S, K, T, r, v)

    sqrt_t = math.sqrt(T)
    d1 = (math.log(S / K) + (r + v * v / 2) * T) / (v * sqrt_t)
    d2 = d1 - v * sqrt_t
    discount = K * math.exp(-r * T)

    return OptionPrices(
        call=S * cnd(d1) - discount * cnd(d2),
        put=discount * cnd(-d2) - S * cnd(-d1),
    )


def parse_option_inputs(raw: Mapping[str, Any]) -> tuple[float, float, float, float, float]:
    """Read the five option fields from form-like input.

    Blank, missing or non-numeric entries all produce the same user-facing
    message so the form can show a single prompt.
    """
    values: list[float] = []
    for name in OPTION_FIELDS:
        value = raw.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise InvalidOptionParameters(MISSING_FIELDS_MESSAGE)
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise InvalidOptionParameters(MISSING_FIELDS_MESSAGE) from None
        if math.isnan(number):
            raise InvalidOptionParameters(MISSING_FIELDS_MESSAGE)
        values.append(number)

    S, K, T, r, v = values
    return S, K, T, r, v


def format_price(value: float) -> str:
    return f"${value:.2f}"


def _check_domain(S: float, K: float, T: float, r: float, v: float) -> None:
    for name, value in (("stock", S), ("strike", K), ("time", T), ("rate", r), ("vol", v)):
        if not math.isfinite(value):
            raise InvalidOptionParameters(f"{name} must be a finite number")
    for name, value in (("stock", S), ("strike", K), ("time", T), ("vol", v)):
        if value <= 0:
            raise InvalidOptionParameters(f"{name} must be greater than zero")
