"""
Portfolio: a snapshot of holdings, one position per ticker.

Immutable. Each trade produces a new Portfolio; nothing is updated in place.
Position order is kept but not significant: equality is by the set of positions.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass

from lport_core.units import Shares


@dataclass(frozen=True)
class Position:
    """A ticker and the signed number of shares held."""

    ticker: str
    quantity: Shares


@dataclass(frozen=True, eq=False)
class Portfolio:
    """
    Ordered, immutable collection of positions.
    Tickers are unique in every snapshot produced by add_trade.
    """

    positions: tuple[Position, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.positions, tuple):
            object.__setattr__(self, "positions", tuple(self.positions))

    @classmethod
    def from_dict(cls, holdings: Mapping[str, float]) -> Portfolio:
        """Build from ticker -> quantity. Zero quantities are kept as given."""
        return cls(tuple(Position(t, Shares(q)) for t, q in holdings.items()))

    def __iter__(self) -> Iterator[Position]:
        return iter(self.positions)

    def __len__(self) -> int:
        return len(self.positions)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Portfolio):
            return NotImplemented
        return frozenset(self.positions) == frozenset(other.positions)

    def __hash__(self) -> int:
        return hash(frozenset(self.positions))

    def position(self, ticker: str) -> Shares:
        """Quantity held in ticker. Zero if not present."""
        total = Shares(0.0)
        for p in self.positions:
            if p.ticker == ticker:
                total = total + p.quantity
        return total

    def tickers(self) -> list[str]:
        return [p.ticker for p in self.positions]

    def to_dict(self) -> dict[str, float]:
        """ticker -> quantity as plain floats (e.g. for display or DataFrames)."""
        return {p.ticker: float(p.quantity) for p in self.positions}


EMPTY_PORTFOLIO = Portfolio()
