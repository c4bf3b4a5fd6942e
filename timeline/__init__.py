"""
Timeline layer on top of lport-core.

Loads trade blotters and prices, folds trades through add_trade, values the
snapshots and summarizes the resulting value curve. Caller-side validation
and observation hook in here, not in the core.
"""

from timeline.engine import RejectedTradeLog, TimelineEngine, TimelineResult
from timeline.data_loader import load_prices_csv, load_prices_dataframe, load_trades_csv, load_trades_dataframe
from timeline.metrics import Metrics, compute_metrics
from timeline.pricing import PriceTable
from timeline.report import holdings_frame, print_report

__all__ = [
    "TimelineEngine",
    "TimelineResult",
    "RejectedTradeLog",
    "PriceTable",
    "load_trades_csv",
    "load_trades_dataframe",
    "load_prices_csv",
    "load_prices_dataframe",
    "compute_metrics",
    "Metrics",
    "holdings_frame",
    "print_report",
]
