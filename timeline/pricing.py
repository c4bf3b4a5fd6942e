"""
PriceTable: a Pricer backed by a wide price DataFrame.

Looks up the last known price at or before the requested date (as-of).
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime

import pandas as pd

from lport_core.units import Price


class PriceTable:
    """
    Pricer over a DataFrame with a DatetimeIndex and one column per ticker.
    constants prices fixed tickers (typically the cash ticker at 1.0) without a column.
    """

    def __init__(
        self,
        prices: pd.DataFrame,
        *,
        constants: Mapping[str, float] | None = None,
    ) -> None:
        self._prices = prices.sort_index()
        self._constants = dict(constants or {})

    @property
    def tickers(self) -> list[str]:
        return list(self._constants) + [str(c) for c in self._prices.columns]

    def __call__(self, ticker: str, date: datetime) -> Price:
        if ticker in self._constants:
            return Price(self._constants[ticker])
        if ticker not in self._prices.columns:
            raise KeyError(f"no prices for {ticker!r}")
        series = self._prices[ticker].dropna()
        value = series.asof(pd.Timestamp(date)) if not series.empty else float("nan")
        if pd.isna(value):
            raise KeyError(f"no price for {ticker!r} at or before {date}")
        return Price(float(value))
