"""
Portfolio as a process: apply trades one at a time, value any snapshot.

add_trade is the state transition (Trade, cash ticker, Pricer, Portfolio) -> Portfolio;
calc_port_value reduces a snapshot to money. Both are pure. Cash going
negative is allowed (infinite free borrowing); no trade is ever rejected.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Iterator
from datetime import datetime
from functools import reduce
from itertools import accumulate

from lport_core.errors import DuplicateTickerError
from lport_core.portfolio import EMPTY_PORTFOLIO, Portfolio, Position
from lport_core.pricer import Pricer, divisor_price
from lport_core.trade import Buy, Deposit, Sell, Trade, Withdrawal
from lport_core.units import Money, Price, Shares
from lport_core.upsert import add_or_replace

logger = logging.getLogger(__name__)


def check_unique_tickers(portfolio: Portfolio, *, strict: bool = True) -> None:
    """Raise (strict) or warn when more than one position shares a ticker."""
    counts = Counter(p.ticker for p in portfolio)
    for ticker, count in counts.items():
        if count > 1:
            if strict:
                raise DuplicateTickerError(ticker, count)
            logger.warning("Portfolio holds %d positions for ticker %s", count, ticker)


def _move(portfolio: Portfolio, ticker: str, delta: Shares, strict: bool) -> Portfolio:
    """Add delta to ticker's position, creating it if absent."""
    return add_or_replace(
        lambda p: p.ticker == ticker,
        lambda p: Position(p.ticker, p.quantity + delta),
        Position(ticker, delta),
        portfolio,
        strict=strict,
    )


def _trade_cash_units(
    shares: Shares,
    price: Price,
    commission: Money,
    sign: int,
    cash_ticker: str,
    pricer: Pricer,
    date: datetime,
) -> Shares:
    # Principal and commission both convert money -> cash-ticker units at the cash price.
    amount = shares * price + commission * sign
    return amount / divisor_price(pricer, cash_ticker, date)


def add_trade(
    trade: Trade,
    cash_ticker: str,
    pricer: Pricer,
    portfolio: Portfolio,
    *,
    strict: bool = True,
) -> Portfolio:
    """
    Apply one trade and return the next snapshot.

    Buy/Sell move the traded ticker first, then the cash ticker (the order
    matters when ticker == cash_ticker). Deposit/Withdrawal move cash only.
    Positions left at exactly zero are dropped.
    """
    check_unique_tickers(portfolio, strict=strict)

    if isinstance(trade, (Buy, Sell)):
        sign = 1 if isinstance(trade, Buy) else -1
        cash_units = _trade_cash_units(
            trade.shares, trade.price, trade.commission, sign, cash_ticker, pricer, trade.date
        )
        out = _move(portfolio, trade.ticker, trade.shares * sign, strict)
        out = _move(out, cash_ticker, -(cash_units * sign), strict)
    elif isinstance(trade, Deposit):
        out = _move(portfolio, cash_ticker, trade.amount, strict)
    elif isinstance(trade, Withdrawal):
        out = _move(portfolio, cash_ticker, -trade.amount, strict)
    else:
        raise TypeError(f"not a trade: {type(trade).__name__}")

    logger.debug("Applied %s -> %d positions", trade, len(out))
    return Portfolio(tuple(p for p in out if not p.quantity.is_zero()))


def calc_port_value(pricer: Pricer, date: datetime, portfolio: Portfolio) -> Money:
    """Sum of quantity * price over every position. Money(0) when empty."""
    total = Money(0.0)
    for p in portfolio:
        price = pricer(p.ticker, date)
        if not isinstance(price, Price):
            raise TypeError(f"pricer must return Price, got {type(price).__name__}")
        total = total + p.quantity * price
    return total


def apply_trades(
    trades: Iterable[Trade],
    cash_ticker: str,
    pricer: Pricer,
    portfolio: Portfolio = EMPTY_PORTFOLIO,
    *,
    strict: bool = True,
) -> Portfolio:
    """Left fold of add_trade over trades, starting from portfolio."""
    return reduce(
        lambda port, trade: add_trade(trade, cash_ticker, pricer, port, strict=strict),
        trades,
        portfolio,
    )


def snapshots(
    trades: Iterable[Trade],
    cash_ticker: str,
    pricer: Pricer,
    portfolio: Portfolio = EMPTY_PORTFOLIO,
    *,
    strict: bool = True,
) -> Iterator[Portfolio]:
    """Portfolio after each trade, in order. The starting portfolio is not yielded."""
    steps = accumulate(
        trades,
        lambda port, trade: add_trade(trade, cash_ticker, pricer, port, strict=strict),
        initial=portfolio,
    )
    next(steps)
    return steps
