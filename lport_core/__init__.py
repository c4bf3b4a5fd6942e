"""
lport-core: a portfolio is the fold of a sequence of trades.

Pure functions over immutable values. No I/O, no pricing source, no persistence:
the caller injects a Pricer and designates the cash ticker.
"""

__version__ = "0.1.0"

from lport_core.config import LPortConfig
from lport_core.errors import (
    DuplicateTickerError,
    InvalidPriceError,
    InvariantViolationError,
    LPortError,
    TradeFormatError,
)
from lport_core.portfolio import EMPTY_PORTFOLIO, Portfolio, Position
from lport_core.pricer import Pricer, flat_pricer
from lport_core.process import add_trade, apply_trades, calc_port_value, snapshots
from lport_core.trade import Buy, Deposit, Sell, Trade, Withdrawal, trade_date
from lport_core.units import Money, Price, Shares
from lport_core.upsert import add_or_replace

__all__ = [
    "Shares",
    "Money",
    "Price",
    "Buy",
    "Sell",
    "Deposit",
    "Withdrawal",
    "Trade",
    "trade_date",
    "Position",
    "Portfolio",
    "EMPTY_PORTFOLIO",
    "Pricer",
    "flat_pricer",
    "add_or_replace",
    "add_trade",
    "calc_port_value",
    "apply_trades",
    "snapshots",
    "LPortConfig",
    "LPortError",
    "InvariantViolationError",
    "DuplicateTickerError",
    "InvalidPriceError",
    "TradeFormatError",
]
