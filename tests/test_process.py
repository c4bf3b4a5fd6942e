"""
Tests for lport_core.process: add_trade, calc_port_value, apply_trades, snapshots.
"""

import logging
from collections import Counter
from datetime import datetime

import pytest

from lport_core import (
    EMPTY_PORTFOLIO,
    Buy,
    Deposit,
    DuplicateTickerError,
    InvalidPriceError,
    Money,
    Portfolio,
    Position,
    Price,
    Sell,
    Shares,
    Withdrawal,
    add_trade,
    apply_trades,
    calc_port_value,
    flat_pricer,
    snapshots,
)

D = datetime(2024, 1, 15)
CASH = "CASH"
unit = flat_pricer(1.0)


def _deposit(amount=10_000):
    return Deposit(D, Shares(amount), Price(1))


def _buy(ticker, shares, price, comm):
    return Buy(D, ticker, Shares(shares), Price(price), Money(comm))


def _sell(ticker, shares, price, comm):
    return Sell(D, ticker, Shares(shares), Price(price), Money(comm))


def _construct(trades, pricer=unit):
    return apply_trades(trades, CASH, pricer)


def _pricer(prices):
    return lambda ticker, date: Price(prices[ticker])


# --- Reference scenarios ---


@pytest.mark.parametrize(
    "trades, expected",
    [
        ([_deposit()], {"CASH": 10_000}),
        ([_deposit(), _deposit()], {"CASH": 20_000}),
        ([_deposit(), _buy("MSFT", 100, 2, 4)], {"MSFT": 100, "CASH": 9_796}),
        ([_deposit(), _sell("MSFT", 100, 2, 4)], {"MSFT": -100, "CASH": 10_196}),
        (
            [_deposit(), _buy("MSFT", 100, 2, 4), _sell("MSFT", 50, 2, 4)],
            {"MSFT": 50, "CASH": 9_892},
        ),
        (
            [_deposit(), _buy("MSFT", 50, 2, 4), _buy("ORCL", 50, 2, 4)],
            {"MSFT": 50, "ORCL": 50, "CASH": 9_792},
        ),
        ([_deposit(), _buy("MSFT", 100, 2, 4), _sell("MSFT", 100, 2, 4)], {"CASH": 9_992}),
    ],
)
def test_reference_scenarios(trades, expected):
    assert _construct(trades) == Portfolio.from_dict(expected)


def test_buy_prepends_new_ticker():
    port = _construct([_deposit(), _buy("MSFT", 100, 2, 4)])
    assert port.positions == (Position("MSFT", Shares(100)), Position(CASH, Shares(9_796)))


def test_withdrawal_reduces_cash():
    port = _construct([_deposit(), Withdrawal(D, Shares(2_500), Price(1))])
    assert port == Portfolio.from_dict({"CASH": 7_500})


def test_withdrawal_from_empty_goes_negative():
    port = _construct([Withdrawal(D, Shares(100), Price(1))])
    assert port == Portfolio.from_dict({"CASH": -100})


def test_deposit_ignores_price_field_and_pricer():
    port = add_trade(Deposit(D, Shares(50), Price(999)), CASH, _pricer({}), EMPTY_PORTFOLIO)
    assert port == Portfolio.from_dict({"CASH": 50})


def test_cash_can_go_negative_on_buy():
    port = _construct([_buy("MSFT", 100, 2, 4)])
    assert port == Portfolio.from_dict({"MSFT": 100, "CASH": -204})


def test_add_trade_does_not_mutate_input():
    before = _construct([_deposit()])
    add_trade(_buy("MSFT", 100, 2, 4), CASH, unit, before)
    assert before == Portfolio.from_dict({"CASH": 10_000})


def test_custom_cash_ticker():
    port = apply_trades([_deposit(), _buy("MSFT", 10, 2, 0)], "USD", unit)
    assert port == Portfolio.from_dict({"USD": 9_980, "MSFT": 10})


# --- Cash price normalization ---


def test_cash_units_divided_by_cash_price():
    pricer = _pricer({"CASH": 2.0})
    port = apply_trades([_deposit(), _buy("MSFT", 100, 2, 4)], CASH, pricer)
    # (100 * 2 + 4) money at 2 per cash unit = 102 units
    assert port == Portfolio.from_dict({"MSFT": 100, "CASH": 10_000 - 102})


def test_sell_commission_normalized_like_principal():
    pricer = _pricer({"CASH": 4.0})
    port = apply_trades([_sell("MSFT", 100, 2, 8)], CASH, pricer)
    # (200 - 8) / 4 = 48
    assert port == Portfolio.from_dict({"MSFT": -100, "CASH": 48})


@pytest.mark.parametrize("bad", [0.0, -2.0, float("nan"), float("inf")])
def test_invalid_cash_price_raises(bad):
    with pytest.raises(InvalidPriceError):
        add_trade(_buy("MSFT", 1, 2, 0), CASH, _pricer({"CASH": bad}), EMPTY_PORTFOLIO)


def test_deposit_does_not_consult_cash_price():
    port = add_trade(_deposit(), CASH, _pricer({"CASH": 0.0}), EMPTY_PORTFOLIO)
    assert port == Portfolio.from_dict({"CASH": 10_000})


# --- Zero filtering ---


def test_position_closed_to_zero_is_removed():
    port = _construct([_deposit(), _buy("MSFT", 100, 2, 0), _sell("MSFT", 100, 2, 0)])
    assert port == Portfolio.from_dict({"CASH": 10_000})
    assert "MSFT" not in port.tickers()


def test_cash_emptied_to_zero_is_removed():
    port = _construct([_deposit(200), _buy("MSFT", 100, 2, 0)])
    assert port == Portfolio.from_dict({"MSFT": 100})


def test_withdraw_everything_leaves_empty():
    port = _construct([_deposit(), Withdrawal(D, Shares(10_000), Price(1))])
    assert port == EMPTY_PORTFOLIO
    assert len(port) == 0


def test_zero_share_buy_leaves_no_zero_position():
    port = _construct([_deposit(), _buy("MSFT", 0, 2, 0)])
    assert all(not p.quantity.is_zero() for p in port)
    assert port == Portfolio.from_dict({"CASH": 10_000})


# --- Ticker equal to cash ticker ---


def test_buy_cash_ticker_applies_ticker_then_cash():
    # +100 shares of CASH, then -(100 * 2 + 4) / 1 on the same row.
    port = _construct([_deposit(), _buy(CASH, 100, 2, 4)])
    assert port == Portfolio.from_dict({"CASH": 10_000 + 100 - 204})
    assert len(port) == 1


def test_buy_cash_ticker_on_empty_creates_then_updates():
    port = _construct([_buy(CASH, 100, 1, 0)])
    # insert +100, then update by -100 -> zero -> filtered
    assert port == EMPTY_PORTFOLIO


def test_sell_cash_ticker_ordering():
    port = _construct([_sell(CASH, 10, 3, 1)])
    # -10, then +(30 - 1)
    assert port == Portfolio.from_dict({"CASH": 19})


# --- Invariant checks ---


def test_duplicate_tickers_rejected_strict():
    broken = Portfolio((Position("MSFT", Shares(1)), Position("MSFT", Shares(2))))
    with pytest.raises(DuplicateTickerError):
        add_trade(_deposit(), CASH, unit, broken)


def test_duplicate_tickers_logged_lenient(caplog):
    broken = Portfolio((Position("MSFT", Shares(1)), Position("MSFT", Shares(2))))
    with caplog.at_level(logging.WARNING, logger="lport_core.process"):
        out = add_trade(_deposit(), CASH, unit, broken, strict=False)
    assert "MSFT" in caplog.text
    assert out.position(CASH) == Shares(10_000)


def test_unknown_trade_type_raises():
    with pytest.raises(TypeError):
        add_trade(object(), CASH, unit, EMPTY_PORTFOLIO)


def test_add_trade_logs_debug(caplog):
    with caplog.at_level(logging.DEBUG, logger="lport_core.process"):
        add_trade(_deposit(), CASH, unit, EMPTY_PORTFOLIO)
    assert "Applied" in caplog.text


# --- Properties over mixed sequences ---

MIXED_SEQUENCES = [
    [_deposit(), _buy("MSFT", 100, 2, 4), _buy("ORCL", 30, 5, 1), _sell("MSFT", 100, 2, 4)],
    [_sell("AAPL", 10, 3, 1), _buy("AAPL", 10, 3, 1), Withdrawal(D, Shares(5), Price(1)), _deposit(5)],
    [_buy("MSFT", 1, 1, 0), _buy("MSFT", 1, 1, 0), _sell("MSFT", 2, 1, 0), _buy(CASH, 3, 1, 1)],
    [_deposit(1), Withdrawal(D, Shares(1), Price(1)), _deposit(1), _buy("X", 0.5, 2, 0)],
]


@pytest.mark.parametrize("trades", MIXED_SEQUENCES)
def test_no_zero_positions_after_any_step(trades):
    for snap in snapshots(trades, CASH, unit):
        assert all(not p.quantity.is_zero() for p in snap)


@pytest.mark.parametrize("trades", MIXED_SEQUENCES)
def test_tickers_unique_after_any_step(trades):
    for snap in snapshots(trades, CASH, unit):
        counts = Counter(p.ticker for p in snap)
        assert all(c == 1 for c in counts.values())


def test_snapshots_yield_one_per_trade_and_end_at_fold():
    trades = MIXED_SEQUENCES[0]
    snaps = list(snapshots(trades, CASH, unit))
    assert len(snaps) == len(trades)
    assert snaps[-1] == apply_trades(trades, CASH, unit)


def test_snapshots_empty_sequence():
    assert list(snapshots([], CASH, unit)) == []


def test_apply_trades_empty_sequence_returns_start():
    start = Portfolio.from_dict({"CASH": 5.0})
    assert apply_trades([], CASH, unit, start) is start


# --- Valuation ---


def test_value_of_empty_is_zero():
    assert calc_port_value(unit, D, EMPTY_PORTFOLIO) == Money(0)
    assert calc_port_value(_pricer({}), D, EMPTY_PORTFOLIO) == Money(0)


def test_value_sums_quantity_times_price():
    port = Portfolio.from_dict({"MSFT": 100, "ORCL": 50, "CASH": 1_000})
    pricer = _pricer({"MSFT": 3.0, "ORCL": 2.0, "CASH": 1.0})
    assert calc_port_value(pricer, D, port) == Money(300 + 100 + 1_000)


def test_value_with_short_and_negative_cash():
    port = Portfolio.from_dict({"MSFT": -10, "CASH": -50})
    assert calc_port_value(_pricer({"MSFT": 2.0, "CASH": 1.0}), D, port) == Money(-70)


def test_value_does_not_reorder():
    port = Portfolio.from_dict({"MSFT": 100, "CASH": 10})
    calc_port_value(unit, D, port)
    assert port.tickers() == ["MSFT", "CASH"]


def test_value_requires_price_type():
    with pytest.raises(TypeError):
        calc_port_value(lambda t, d: 1.0, D, Portfolio.from_dict({"CASH": 1}))


def test_value_uses_date():
    seen = []

    def pricer(ticker, date):
        seen.append((ticker, date))
        return Price(1)

    calc_port_value(pricer, D, Portfolio.from_dict({"CASH": 1}))
    assert seen == [("CASH", D)]


# --- Conservation ---


@pytest.mark.parametrize("trade", [_buy("MSFT", 100, 2, 4), _sell("MSFT", 40, 2, 3)])
def test_value_changes_by_commission_only(trade):
    # Trade at the market price with cash priced at 1: value drops by the commission.
    pricer = _pricer({"MSFT": 2.0, "CASH": 1.0})
    before = _construct([_deposit()], pricer)
    after = add_trade(trade, CASH, pricer, before)
    diff = calc_port_value(pricer, D, before) - calc_port_value(pricer, D, after)
    assert diff == trade.commission


def test_cash_moved_matches_notional_plus_commission():
    pricer = _pricer({"CASH": 1.25})
    before = _construct([_deposit()], pricer)
    after = add_trade(_buy("MSFT", 100, 2, 5), CASH, pricer, before)
    moved = before.position(CASH) - after.position(CASH)
    assert moved == (Shares(100) * Price(2) + Money(5)) / Price(1.25)
