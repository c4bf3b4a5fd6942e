"""
Value-curve metrics: PnL net of contributions, Sharpe ratio, drawdown.

Works on the (date, value) curve a TimelineEngine run produces.
Annualization assumes 252 trading days.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

import numpy as np


@dataclass
class Metrics:
    """Summary of a portfolio value curve."""

    initial_value: float
    final_value: float
    net_contributions: float
    total_pnl: float
    total_return_pct: float
    sharpe_ratio: float
    max_drawdown: float
    max_drawdown_pct: float


def compute_metrics(
    equity_curve: Sequence[tuple[datetime, float]],
    *,
    flows: Sequence[float] | None = None,
    net_contributions: float | None = None,
    trading_days_per_year: int = 252,
    risk_free_rate: float = 0.0,
) -> Metrics:
    """
    Compute metrics from a value curve.

    Parameters
    ----------
    equity_curve : sequence of (datetime, value)
        Time-ordered portfolio values. The first point is the starting value.
    flows : sequence of float, optional
        Cash deposited (+) or withdrawn (-) between point i-1 and point i, one
        entry per point (flows[0] is ignored). Netted out of every step return
        and of the drawdown series, so moving cash is never a gain or a loss.
    net_contributions : float, optional
        Deposits minus withdrawals after the first point, subtracted from the
        value change for PnL. Defaults to the sum of flows[1:].
    trading_days_per_year : int
        Used for annualizing Sharpe (default 252).
    risk_free_rate : float
        Annual risk-free rate for Sharpe (default 0).

    Returns
    -------
    Metrics
        All zeros for an empty curve.
    """
    n = len(equity_curve)
    step_flows = np.zeros(n) if flows is None else np.array(flows, dtype=float)
    if len(step_flows) != n:
        raise ValueError(f"flows has {len(step_flows)} entries for {n} curve points")
    if n:
        step_flows[0] = 0.0
    if net_contributions is None:
        net_contributions = float(step_flows.sum())

    if not n:
        return Metrics(
            initial_value=0.0,
            final_value=0.0,
            net_contributions=net_contributions,
            total_pnl=0.0,
            total_return_pct=0.0,
            sharpe_ratio=0.0,
            max_drawdown=0.0,
            max_drawdown_pct=0.0,
        )

    values = np.array([v for _, v in equity_curve], dtype=float)
    initial_value = float(values[0])
    final_value = float(values[-1])
    total_pnl = final_value - initial_value - net_contributions
    base = initial_value + max(net_contributions, 0.0)
    total_return_pct = (total_pnl / base * 100.0) if base > 0 else 0.0

    # Step returns net of flows; steps starting from a non-positive value have no return.
    prior = values[:-1]
    gains = values[1:] - step_flows[1:] - prior
    valid = prior > 0
    returns = gains[valid] / prior[valid]
    if len(returns) == 0:
        sharpe_ratio = 0.0
    else:
        excess = returns - (risk_free_rate / trading_days_per_year)
        std = np.std(excess)
        sharpe_ratio = float(np.mean(excess) / std * np.sqrt(trading_days_per_year)) if std > 1e-14 else 0.0

    # Money drawdown on the value with contributions removed.
    adjusted = values - np.cumsum(step_flows)
    drawdowns = np.maximum.accumulate(adjusted) - adjusted
    max_drawdown = float(np.max(drawdowns))

    # Percent drawdown on the compounded return index.
    index = np.concatenate(([1.0], np.cumprod(1.0 + returns)))
    index_peak = np.maximum.accumulate(index)
    max_dd_pct = float(np.max((index_peak - index) / index_peak) * 100.0)

    return Metrics(
        initial_value=initial_value,
        final_value=final_value,
        net_contributions=net_contributions,
        total_pnl=total_pnl,
        total_return_pct=total_return_pct,
        sharpe_ratio=sharpe_ratio,
        max_drawdown=max_drawdown,
        max_drawdown_pct=max_dd_pct,
    )
