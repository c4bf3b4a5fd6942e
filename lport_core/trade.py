"""
Trade: one market or cash event that moves a portfolio to its next snapshot.

Closed variant of four immutable records. Dispatch on the concrete type;
there is no common base class.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Union

from lport_core.units import Money, Price, Shares


@dataclass(frozen=True)
class Buy:
    """Acquire shares of ticker at price per share, paying commission."""

    date: datetime
    ticker: str
    shares: Shares
    price: Price
    commission: Money = Money(0.0)


@dataclass(frozen=True)
class Sell:
    """Dispose of shares of ticker at price per share, paying commission."""

    date: datetime
    ticker: str
    shares: Shares
    price: Price
    commission: Money = Money(0.0)


@dataclass(frozen=True)
class Deposit:
    """Add amount units to the cash position. price is informational."""

    date: datetime
    amount: Shares
    price: Price = Price(1.0)


@dataclass(frozen=True)
class Withdrawal:
    """Remove amount units from the cash position. price is informational."""

    date: datetime
    amount: Shares
    price: Price = Price(1.0)


Trade = Union[Buy, Sell, Deposit, Withdrawal]

TRADE_TYPES = (Buy, Sell, Deposit, Withdrawal)


def trade_date(trade: Trade) -> datetime:
    """Date carried by any trade variant."""
    if not isinstance(trade, TRADE_TYPES):
        raise TypeError(f"not a trade: {type(trade).__name__}")
    return trade.date
