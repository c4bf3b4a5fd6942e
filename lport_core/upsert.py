"""
Upsert by predicate over a portfolio: update the matching position, or
prepend a default one when nothing matches.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from lport_core.errors import DuplicateTickerError
from lport_core.portfolio import Portfolio, Position

logger = logging.getLogger(__name__)


def add_or_replace(
    matches: Callable[[Position], bool],
    update: Callable[[Position], Position],
    default: Position,
    portfolio: Portfolio,
    *,
    strict: bool = True,
) -> Portfolio:
    """
    Insert-or-update a position.

    - No position matches: default is prepended, the rest keep their order.
    - One matches: it is replaced by update(position) in place.
    - Several match: the ticker invariant is already broken. strict raises
      DuplicateTickerError; otherwise a warning is logged and every match
      is updated.
    """
    hits = [i for i, p in enumerate(portfolio.positions) if matches(p)]
    if not hits:
        return Portfolio((default,) + portfolio.positions)
    if len(hits) > 1:
        ticker = portfolio.positions[hits[0]].ticker
        if strict:
            raise DuplicateTickerError(ticker, len(hits))
        logger.warning(
            "add_or_replace: %d positions match (ticker %s); updating all", len(hits), ticker
        )
    hit_set = set(hits)
    return Portfolio(
        tuple(update(p) if i in hit_set else p for i, p in enumerate(portfolio.positions))
    )
