"""
Trade history demo: load a blotter and prices → fold trades → value curve → report.

Cash ticker and strictness come from LPORT_CASH_TICKER / LPORT_STRICT if set.
"""

import logging
from pathlib import Path

from lport_core import LPortConfig, Portfolio, Trade
from timeline import PriceTable, TimelineEngine, load_prices_csv, load_trades_csv, print_report


def log_fill_observer(trade: Trade, portfolio: Portfolio) -> None:
    """Observer: show each snapshot as it is produced."""
    print(f"  [Observer] {type(trade).__name__:<10} {trade.date:%Y-%m-%d} -> {portfolio.to_dict()}")


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    data_dir = Path(__file__).resolve().parent / "data"

    config = LPortConfig.from_env()
    trades = load_trades_csv(data_dir / "trades.csv")
    prices = load_prices_csv(data_dir / "prices.csv")
    pricer = PriceTable(prices, constants={config.cash_ticker: 1.0})

    engine = TimelineEngine(pricer, config, observers=[log_fill_observer])
    result = engine.run(trades, valuation_dates=list(prices.index.to_pydatetime()))

    print_report(result, pricer, prices.index[-1].to_pydatetime())


if __name__ == "__main__":
    main()
