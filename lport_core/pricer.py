"""
Pricer: (ticker, date) -> price per share.

Injected by the caller. The core never looks prices up itself and caches nothing.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from datetime import datetime
from typing import Protocol

from lport_core.errors import InvalidPriceError
from lport_core.units import Price


class Pricer(Protocol):
    """Pure, deterministic price lookup."""

    def __call__(self, ticker: str, date: datetime) -> Price:
        ...


def flat_pricer(value: float = 1.0) -> Callable[[str, datetime], Price]:
    """Pricer that prices every ticker at value on every date."""
    price = Price(value)

    def _price(ticker: str, date: datetime) -> Price:
        return price

    return _price


def divisor_price(pricer: Pricer, ticker: str, date: datetime) -> Price:
    """
    Look up a price that is about to be divided by.

    Raises InvalidPriceError for NaN, infinity, zero or a negative price,
    instead of letting inf/NaN flow into the cash position.
    """
    price = pricer(ticker, date)
    if not isinstance(price, Price):
        raise TypeError(f"pricer must return Price, got {type(price).__name__}")
    value = float(price)
    if not math.isfinite(value) or value <= 0.0:
        raise InvalidPriceError(ticker, date, value)
    return price
