"""
Configuration: which ticker is cash, and how broken invariants are handled.

Defaults suit tests and notebooks; from_env() lets a deployment override them
without code changes.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

# Environment variables read by LPortConfig.from_env().
CASH_TICKER_ENV = "LPORT_CASH_TICKER"
STRICT_ENV = "LPORT_STRICT"

DEFAULT_CASH_TICKER = "CASH"


@dataclass(frozen=True)
class LPortConfig:
    """
    cash_ticker: ticker whose position represents cash.
    strict: raise on duplicate tickers (True) or log a warning and continue (False).
    """

    cash_ticker: str = DEFAULT_CASH_TICKER
    strict: bool = True

    @classmethod
    def from_env(cls) -> LPortConfig:
        """Build from LPORT_CASH_TICKER / LPORT_STRICT, falling back to defaults."""
        cash = os.environ.get(CASH_TICKER_ENV, "").strip() or DEFAULT_CASH_TICKER
        strict = os.environ.get(STRICT_ENV, "true").strip().lower() != "false"
        return cls(cash_ticker=cash, strict=strict)
