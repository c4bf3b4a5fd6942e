"""
Load trade blotters and price history from CSV or DataFrame.

Trades: one row per event with a date, a kind (buy/sell/deposit/withdrawal)
and the fields that kind needs. Prices: wide table, dates down, tickers across.
"""

from __future__ import annotations

import math
from pathlib import Path
from typing import Any

import pandas as pd

from lport_core.errors import TradeFormatError
from lport_core.trade import Buy, Deposit, Sell, Trade, Withdrawal
from lport_core.units import Money, Price, Shares

# Common aliases, mapped onto the canonical lowercase column names.
TRADE_ALIASES = {
    "type": "kind",
    "side": "kind",
    "action": "kind",
    "symbol": "ticker",
    "qty": "shares",
    "quantity": "shares",
    "fee": "commission",
    "fees": "commission",
}

KINDS = {
    "buy": Buy,
    "sell": Sell,
    "deposit": Deposit,
    "withdrawal": Withdrawal,
    "withdraw": Withdrawal,
}


def _normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Lowercase and strip column names; map known aliases."""
    out = df.copy()
    out.columns = [str(c).lower().strip() for c in out.columns]
    renames: dict[str, str] = {}
    for alias, canonical in TRADE_ALIASES.items():
        if alias in out.columns and canonical not in out.columns and canonical not in renames.values():
            renames[alias] = canonical
    return out.rename(columns=renames)


def _to_float(value: Any, name: str, index: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise TradeFormatError(f"row {index}: bad {name!r} value {value!r}") from exc


def _field(row: pd.Series, name: str, index: Any, default: float | None = None) -> float:
    value = row.get(name, None)
    if value is None or (isinstance(value, float) and math.isnan(value)):
        if default is None:
            raise TradeFormatError(f"row {index}: missing {name!r}")
        return default
    return _to_float(value, name, index)


def _row_to_trade(row: pd.Series, index: Any) -> Trade:
    kind_raw = row.get("kind", None)
    if not isinstance(kind_raw, str):
        raise TradeFormatError(f"row {index}: missing trade kind")
    kind = KINDS.get(kind_raw.strip().lower())
    if kind is None:
        raise TradeFormatError(f"row {index}: unknown trade kind {kind_raw!r}")

    date = row["datetime"].to_pydatetime()
    if kind in (Buy, Sell):
        ticker = row.get("ticker", None)
        if not isinstance(ticker, str) or not ticker.strip():
            raise TradeFormatError(f"row {index}: missing 'ticker'")
        return kind(
            date,
            ticker.strip(),
            Shares(_field(row, "shares", index)),
            Price(_field(row, "price", index)),
            Money(_field(row, "commission", index, default=0.0)),
        )
    amount = row.get("amount", None)
    if amount is None or (isinstance(amount, float) and math.isnan(amount)):
        amount = _field(row, "shares", index)
    return kind(date, Shares(_to_float(amount, "amount", index)), Price(_field(row, "price", index, default=1.0)))


def load_trades_dataframe(
    df: pd.DataFrame,
    *,
    date_column: str = "date",
    datetime_format: str | None = None,
) -> list[Trade]:
    """
    Build trades from a DataFrame, oldest first.

    Parameters
    ----------
    df : pd.DataFrame
        One row per trade. Column names are case-insensitive; aliases such as
        'side', 'symbol', 'qty' and 'fee' are accepted.
    date_column : str
        Column holding the trade date (default 'date').
    datetime_format : str, optional
        Format for parsing dates (e.g. '%Y-%m-%d').

    Returns
    -------
    list of Trade
        Sorted by date; rows with the same date keep their input order.

    Raises
    ------
    TradeFormatError
        Unknown kind, a field the kind needs is missing, or a value is not numeric.
    """
    out = _normalize_columns(df)
    date_col = date_column.lower()
    if date_col not in out.columns:
        raise TradeFormatError(f"missing date column {date_column!r}")
    out["datetime"] = pd.to_datetime(out[date_col], format=datetime_format)
    out = out.sort_values("datetime", kind="stable")
    return [_row_to_trade(row, idx) for idx, row in out.iterrows()]


def load_trades_csv(path: str | Path, **kwargs: Any) -> list[Trade]:
    """Read a trade blotter CSV. Keyword arguments go to load_trades_dataframe."""
    return load_trades_dataframe(pd.read_csv(path), **kwargs)


def load_prices_dataframe(
    df: pd.DataFrame,
    *,
    date_column: str | None = None,
) -> pd.DataFrame:
    """
    Normalize a wide price table: DatetimeIndex named 'datetime', sorted, float columns.

    Parameters
    ----------
    df : pd.DataFrame
        Dates down, one column per ticker. Ticker names are kept as given.
    date_column : str, optional
        Column to use as index. If None, the index is assumed to hold dates.
    """
    out = df.copy()
    if date_column is not None and date_column in out.columns:
        out["datetime"] = pd.to_datetime(out[date_column])
        out = out.drop(columns=[date_column]).set_index("datetime")
    elif not isinstance(out.index, pd.DatetimeIndex):
        out.index = pd.to_datetime(out.index)
    out = out.sort_index().astype(float)
    out.index.name = "datetime"
    return out


def load_prices_csv(path: str | Path, *, date_column: str | None = None) -> pd.DataFrame:
    """Read a wide price CSV. If date_column is None, 'date' or the first column is used."""
    df = pd.read_csv(path)
    if date_column is None:
        date_column = "date" if "date" in df.columns else df.columns[0]
    return load_prices_dataframe(df, date_column=date_column)
