"""
Sample portfolio: a cash deposit followed by two stock purchases.

Everything priced at 1 so the numbers can be checked by hand.
"""

from datetime import datetime

from lport_core.config import DEFAULT_CASH_TICKER
from lport_core.portfolio import Portfolio
from lport_core.pricer import flat_pricer
from lport_core.process import apply_trades
from lport_core.trade import Buy, Deposit, Trade
from lport_core.units import Money, Price, Shares

unit_pricer = flat_pricer(1.0)


def sample_trades(date: datetime) -> list[Trade]:
    return [
        Deposit(date, Shares(100_000), Price(1)),
        Buy(date, "MSFT", Shares(300), Price(25), Money(2.5)),
        Buy(date, "ORCL", Shares(300), Price(15), Money(2.5)),
    ]


def sample_portfolio(date: datetime | None = None) -> Portfolio:
    """Fold sample_trades over the empty portfolio with cash ticker CASH."""
    date = date or datetime.now()
    return apply_trades(sample_trades(date), DEFAULT_CASH_TICKER, unit_pricer)
