"""
Timeline engine: folds a trade sequence through add_trade and values each snapshot.

Trades → validators → add_trade → observers; records snapshots and the value curve.
Validation lives here, on the caller side; the core itself rejects nothing.
"""

from __future__ import annotations

import logging
from bisect import bisect_left, bisect_right
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from lport_core import EMPTY_PORTFOLIO, LPortConfig, Portfolio, Pricer, Trade
from lport_core.process import add_trade, calc_port_value
from lport_core.trade import Buy, Deposit, Sell, Withdrawal

logger = logging.getLogger(__name__)


class Validator(Protocol):
    """Caller-side check before a trade is applied. Return the trade (or a replacement), or None to reject."""

    def __call__(self, trade: Trade, portfolio: Portfolio) -> Trade | None:
        ...


class Observer(Protocol):
    """Called after each applied trade with the new snapshot."""

    def __call__(self, trade: Trade, portfolio: Portfolio) -> None:
        ...


@dataclass
class RejectedTradeLog:
    """One trade a validator refused."""

    trade: Trade
    reason: str
    timestamp: datetime


@dataclass
class TimelineResult:
    """Final portfolio, every snapshot, value curve, and bookkeeping totals."""

    portfolio: Portfolio
    snapshots: list[tuple[datetime, Portfolio]] = field(default_factory=list)
    equity_curve: list[tuple[datetime, float]] = field(default_factory=list)
    commissions: float = 0.0
    flows: list[float] = field(default_factory=list)
    net_contributions: float = 0.0
    rejected: list[RejectedTradeLog] = field(default_factory=list)


class TimelineEngine:
    """
    Runs one fold over a trade sequence with a fixed pricer and cash ticker.
    validators may replace or drop trades; observers see each new snapshot.
    """

    def __init__(
        self,
        pricer: Pricer,
        config: LPortConfig | None = None,
        *,
        validators: Sequence[Validator] = (),
        observers: Sequence[Observer] = (),
    ) -> None:
        self.pricer = pricer
        self.config = config or LPortConfig()
        self.validators: list[Validator] = list(validators)
        self.observers: list[Observer] = list(observers)

    def _validate(self, trade: Trade, portfolio: Portfolio) -> Trade | None:
        for validator in self.validators:
            checked = validator(trade, portfolio)
            if checked is None:
                return None
            trade = checked
        return trade

    def _contribution(self, trade: Trade) -> float:
        """Money brought in (deposit) or taken out (withdrawal) at the cash price."""
        if isinstance(trade, (Deposit, Withdrawal)):
            sign = 1.0 if isinstance(trade, Deposit) else -1.0
            cash_price = self.pricer(self.config.cash_ticker, trade.date)
            return sign * float(trade.amount * cash_price)
        return 0.0

    def run(
        self,
        trades: Iterable[Trade],
        initial: Portfolio = EMPTY_PORTFOLIO,
        *,
        valuation_dates: Sequence[datetime] | None = None,
    ) -> TimelineResult:
        """
        Apply trades in the given order.

        Parameters
        ----------
        trades : iterable of Trade
            Chronological trade sequence.
        initial : Portfolio
            Starting snapshot (default: empty).
        valuation_dates : sequence of datetime, optional
            Value the curve on these dates instead of once per trade. Each date
            uses the last snapshot whose trade date is on or before it.

        Returns
        -------
        TimelineResult
            Without valuation_dates the curve opens with the initial portfolio
            valued at the first trade date, then one point per applied trade.
            flows[i] is the cash moved in or out between curve points i-1 and i
            (flows[0] is always 0); net_contributions is their sum. Building the
            curve prices the cash ticker, so the pricer must cover it then; the
            fold alone never asks for it.
        """
        cash = self.config.cash_ticker
        portfolio = initial
        result = TimelineResult(portfolio=initial)
        applied: list[Trade] = []

        for trade in trades:
            checked = self._validate(trade, portfolio)
            if checked is None:
                result.rejected.append(RejectedTradeLog(trade=trade, reason="validator_rejected", timestamp=trade.date))
                logger.info("Trade rejected by validator: %s", trade)
                continue

            portfolio = add_trade(checked, cash, self.pricer, portfolio, strict=self.config.strict)
            result.snapshots.append((checked.date, portfolio))
            applied.append(checked)
            if isinstance(checked, (Buy, Sell)):
                result.commissions += float(checked.commission)

            for obs in self.observers:
                obs(checked, portfolio)

        if valuation_dates is None:
            if result.snapshots:
                opening = result.snapshots[0][0]
                points = [(opening, initial)] + result.snapshots
                result.equity_curve = [
                    (date, float(calc_port_value(self.pricer, date, snap))) for date, snap in points
                ]
                result.flows = [0.0] + [self._contribution(t) for t in applied]
        elif valuation_dates:
            result.equity_curve = self._value_on(result.snapshots, initial, valuation_dates)
            result.flows = self._flows_between(applied, [d for d, _ in result.equity_curve])
        result.net_contributions = float(sum(result.flows))

        result.portfolio = portfolio
        logger.debug(
            "Timeline run: %d applied, %d rejected, %d positions",
            len(result.snapshots),
            len(result.rejected),
            len(portfolio),
        )
        return result

    def _flows_between(self, applied: list[Trade], dates: list[datetime]) -> list[float]:
        """Cash moved in or out in (dates[i-1], dates[i]]; 0 for the first point."""
        flows = [0.0] * len(dates)
        for trade in applied:
            if not isinstance(trade, (Deposit, Withdrawal)):
                continue
            i = bisect_left(dates, trade.date)
            if 0 < i < len(dates):
                flows[i] += self._contribution(trade)
        return flows

    def _value_on(
        self,
        snaps: list[tuple[datetime, Portfolio]],
        initial: Portfolio,
        dates: Sequence[datetime],
    ) -> list[tuple[datetime, float]]:
        # Snapshots are in trade order; bisect assumes trade dates never decrease.
        snap_dates = [d for d, _ in snaps]
        curve: list[tuple[datetime, float]] = []
        for date in sorted(dates):
            i = bisect_right(snap_dates, date)
            snap = snaps[i - 1][1] if i > 0 else initial
            curve.append((date, float(calc_port_value(self.pricer, date, snap))))
        return curve
