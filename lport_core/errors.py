"""
Error types for the portfolio core.

The core has no recoverable-error taxonomy: negative cash is a valid state
and no trade is rejected. These types mark defects (broken invariants, a
pricer that cannot be divided by) and malformed input at the loader layer.
"""

from __future__ import annotations

from datetime import datetime


class LPortError(Exception):
    """Base class for all lport errors."""


class InvariantViolationError(LPortError):
    """A portfolio invariant was broken by an earlier step."""


class DuplicateTickerError(InvariantViolationError):
    """More than one position shares a ticker."""

    def __init__(self, ticker: str, count: int) -> None:
        self.ticker = ticker
        self.count = count
        super().__init__(f"{count} positions share ticker {ticker!r}")


class InvalidPriceError(LPortError, ValueError):
    """Pricer returned a non-finite or non-positive price where it divides."""

    def __init__(self, ticker: str, date: datetime, value: float) -> None:
        self.ticker = ticker
        self.date = date
        self.value = value
        super().__init__(f"invalid price {value!r} for {ticker!r} at {date}")


class TradeFormatError(LPortError, ValueError):
    """A trade record could not be turned into a Trade."""
