"""
Report: holdings table and value-curve summary for a TimelineResult.
"""

from __future__ import annotations

from datetime import datetime

import pandas as pd

from lport_core import Portfolio, Pricer
from lport_core.process import calc_port_value
from timeline.engine import TimelineResult
from timeline.metrics import Metrics, compute_metrics

HOLDINGS_COLUMNS = ["ticker", "shares", "price", "value", "weight"]


def holdings_frame(pricer: Pricer, date: datetime, portfolio: Portfolio) -> pd.DataFrame:
    """
    One row per position valued at date, largest value first.

    weight is value / total portfolio value (NaN when the total is zero).
    """
    rows = []
    for p in portfolio:
        price = float(pricer(p.ticker, date))
        shares = float(p.quantity)
        rows.append({"ticker": p.ticker, "shares": shares, "price": price, "value": shares * price})
    if not rows:
        return pd.DataFrame(columns=HOLDINGS_COLUMNS)
    df = pd.DataFrame(rows)
    total = float(calc_port_value(pricer, date, portfolio))
    df["weight"] = df["value"] / total if total else float("nan")
    return df.sort_values("value", ascending=False, kind="stable").reset_index(drop=True)[HOLDINGS_COLUMNS]


def print_report(
    result: TimelineResult,
    pricer: Pricer,
    date: datetime,
    *,
    trading_days_per_year: int = 252,
    risk_free_rate: float = 0.0,
) -> Metrics:
    """
    Print holdings at date and a summary of the run's value curve.

    Returns
    -------
    Metrics
        The computed metrics (e.g. for programmatic use).
    """
    metrics = compute_metrics(
        result.equity_curve,
        flows=result.flows,
        net_contributions=result.net_contributions,
        trading_days_per_year=trading_days_per_year,
        risk_free_rate=risk_free_rate,
    )
    holdings = holdings_frame(pricer, date, result.portfolio)
    print(f"--- Holdings at {date:%Y-%m-%d} ---")
    print(holdings.to_string(index=False) if not holdings.empty else "(empty)")
    print("--- Portfolio Summary ---")
    print(f"Value:           {float(calc_port_value(pricer, date, result.portfolio)):,.2f}")
    print(f"Start value:     {metrics.initial_value:,.2f}")
    print(f"End value:       {metrics.final_value:,.2f}")
    print(f"Contributions:   {metrics.net_contributions:,.2f}")
    print(f"Total PnL:       {metrics.total_pnl:,.2f}")
    print(f"Total return:    {metrics.total_return_pct:.2f}%")
    print(f"Sharpe ratio:    {metrics.sharpe_ratio:.2f}")
    print(f"Max drawdown:    {metrics.max_drawdown:,.2f} ({metrics.max_drawdown_pct:.2f}%)")
    print(f"Commissions:     {result.commissions:,.2f}")
    print(f"Trades:          {len(result.snapshots)} applied, {len(result.rejected)} rejected")
    print("-------------------------")
    return metrics
