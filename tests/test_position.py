import pytest

from tradedesk.models import OrderInfo, Side
from tradedesk.position import (
    GreekValues,
    NetBookCalculation,
    NetBookEntry,
    Position,
    apply_trade,
    calculate_pnl,
)


def _order(token=1, pf=1, side=Side.BUY, price=100.0, quantity=10, contract="ABC"):
    return OrderInfo(token=token, pf=pf, side=side, price=price, quantity=quantity, contract=contract)


def _feed(position, *orders):
    for order in orders:
        position.insert(order)
    while position.process_pending():
        pass


class _Options:
    """Greek info factory keeping the objects it hands out."""

    def __init__(self, future_token=100, futures=()):
        self.future_token = future_token
        self.futures = set(futures)
        self.made = {}

    def __call__(self, token):
        greeks = GreekValues(
            token=token,
            future_token=self.future_token,
            is_call=token % 2 == 1,
            is_future=token in self.futures,
            strike_price=float(token * 10),
        )
        self.made[token] = greeks
        return greeks


def test_apply_trade_single_buy():
    entry = NetBookEntry()
    apply_trade(entry, _order(price=100.0, quantity=10))
    assert entry.buy_quantity == 10
    assert entry.sell_quantity == 0
    assert entry.average_buy_price == 100.0
    assert entry.total_qty == 10
    assert entry.net_investment == entry.total_buy_price


def test_apply_trade_averages_buys():
    entry = NetBookEntry()
    apply_trade(entry, _order(price=100.0, quantity=10))
    apply_trade(entry, _order(price=110.0, quantity=10))
    assert entry.average_buy_price == pytest.approx(105.0)


def test_apply_trade_sell_reduces_total_qty():
    entry = NetBookEntry()
    apply_trade(entry, _order(price=100.0, quantity=10))
    apply_trade(entry, _order(side=Side.SELL, price=120.0, quantity=4))
    assert entry.total_qty == 6
    assert entry.average_sell_price == 120.0
    assert entry.net_investment == pytest.approx(entry.total_buy_price - entry.total_sell_price)


def test_apply_trade_zero_quantity_raises():
    with pytest.raises(ZeroDivisionError):
        apply_trade(NetBookEntry(), _order(quantity=0))


def test_calculate_pnl_long_position():
    entry = NetBookEntry()
    apply_trade(entry, _order(price=100.0, quantity=10))
    pnl = calculate_pnl(entry, 105.0)
    assert pnl == pytest.approx(50.0)
    assert entry.mtm == pnl
    assert entry.pnl == pnl
    assert entry.last_ltp == 105.0


def test_calculate_pnl_is_cached_for_same_price():
    entry = NetBookEntry()
    apply_trade(entry, _order(price=100.0, quantity=10))
    first = calculate_pnl(entry, 105.0)
    apply_trade(entry, _order(price=90.0, quantity=10))
    assert calculate_pnl(entry, 105.0) == first


def test_calculate_pnl_flat_position_books_difference():
    entry = NetBookEntry()
    apply_trade(entry, _order(price=100.0, quantity=10))
    apply_trade(entry, _order(side=Side.SELL, price=110.0, quantity=10))
    pnl = calculate_pnl(entry, 130.0)
    assert pnl == pytest.approx(entry.total_sell_price - entry.total_buy_price)
    assert entry.mtm == 0.0


def test_calculate_pnl_short_position_sign():
    entry = NetBookEntry()
    apply_trade(entry, _order(side=Side.SELL, price=200.0, quantity=5))
    assert calculate_pnl(entry, 190.0) > 0
    assert calculate_pnl(entry, 210.0) < 0
    assert entry.mtm == entry.pnl


def test_calculate_pnl_zero_price_hits_initial_cache():
    entry = NetBookEntry()
    apply_trade(entry, _order(price=100.0, quantity=10))
    assert calculate_pnl(entry, 0.0) == 0.0
    assert entry.mtm == 0.0


def test_insert_is_deferred_until_processed():
    position = Position(lambda token: 100.0)
    position.insert(_order())
    assert position.symbol_wise_rows() == []
    assert position.process_pending() is True
    assert len(position.symbol_wise_rows()) == 1
    assert position.process_pending() is False


def test_process_pending_books_one_trade_at_a_time():
    position = Position(lambda token: 100.0)
    position.insert(_order(token=1))
    position.insert(_order(token=2))
    position.process_pending()
    assert [row.token for row in position.symbol_wise_rows()] == [1]


def test_rows_sorted_and_aggregated():
    position = Position(lambda token: 100.0)
    _feed(
        position,
        _order(token=5, pf=1, quantity=3),
        _order(token=2, pf=1, quantity=7),
        _order(token=5, pf=2, quantity=4),
    )
    symbol_rows = position.symbol_wise_rows()
    pf_rows = position.pf_wise_rows()
    assert [row.token for row in symbol_rows] == [2, 5]
    assert [(row.pf, row.token) for row in pf_rows] == [(1, 2), (1, 5), (2, 5)]
    token_five = symbol_rows[1]
    assert token_five.buy_quantity == sum(row.buy_quantity for row in pf_rows if row.token == 5)


def test_rows_carry_contract_description():
    position = Position(lambda token: 100.0)
    _feed(position, _order(contract="NIFTY FUT"))
    assert position.symbol_wise_rows()[0].description == "NIFTY FUT"
    assert position.pf_wise_rows()[0].description == "NIFTY FUT"


def test_update_net_pnl_symbol_sums_rows():
    prices = {1: 105.0, 2: 48.0}
    position = Position(prices.__getitem__)
    _feed(
        position,
        _order(token=1, price=100.0, quantity=10),
        _order(token=2, side=Side.SELL, price=50.0, quantity=3),
    )
    net = position.update_net_pnl(NetBookCalculation.SYMBOL)
    assert net == pytest.approx(sum(row.pnl for row in position.symbol_wise_rows()))
    assert position.net_pnl == net
    assert position.calculation is NetBookCalculation.SYMBOL


def test_update_net_pnl_pf_matches_symbol_for_single_pf():
    prices = {1: 105.0, 2: 48.0}
    position = Position(prices.__getitem__)
    _feed(
        position,
        _order(token=1, price=100.0, quantity=10),
        _order(token=2, side=Side.SELL, price=50.0, quantity=3),
    )
    symbol_net = position.update_net_pnl(NetBookCalculation.SYMBOL)
    pf_net = position.update_net_pnl(NetBookCalculation.PF)
    assert pf_net == pytest.approx(symbol_net)
    assert position.calculation is NetBookCalculation.PF


def test_greek_summary_single_contract_uses_default_greeks():
    prices = {1: 12.0, 100: 20000.0}
    options = _Options()
    position = Position(prices.__getitem__, symbol_of=lambda token: "NIFTY", greek_info=options)
    _feed(position, _order(token=1, price=10.0, quantity=10))
    (row,) = position.greek_summary()
    assert row.symbol == "NIFTY"
    assert row.delta == pytest.approx(10 * options.made[1].delta)
    assert row.market_rate == 20000.0


def test_greek_summary_merges_contracts_of_one_symbol():
    prices = {1: 12.0, 2: 8.0, 100: 20000.0}
    position = Position(prices.__getitem__, symbol_of=lambda token: "NIFTY", greek_info=_Options())
    _feed(
        position,
        _order(token=1, price=10.0, quantity=10),
        _order(token=2, side=Side.SELL, price=9.0, quantity=4),
    )
    (row,) = position.greek_summary()
    assert row.delta == pytest.approx(row.gamma)
    assert row.value == pytest.approx(row.market_rate * row.delta)


def test_greek_summary_separates_symbols():
    prices = {1: 12.0, 2: 8.0, 100: 20000.0}
    position = Position(prices.__getitem__, symbol_of=lambda token: f"SYM{token}", greek_info=_Options())
    _feed(position, _order(token=1), _order(token=2))
    assert sorted(row.symbol for row in position.greek_summary()) == ["SYM1", "SYM2"]


def test_update_greeks_uses_bid_for_call_and_ask_for_put():
    prices = {1: 12.0, 2: 8.0, 3: 20000.0, 100: 20000.0}
    calls = []

    def model(underlying, strike, expiry, option_price, is_call):
        calls.append((underlying, strike, option_price, is_call))
        return 0.2, 0.5, 0.01, 3.0, -1.0

    options = _Options(futures={3})
    position = Position(
        prices.__getitem__,
        greek_info=options,
        top_of_book=lambda token: (99.5, 100.5),
        greeks_model=model,
    )
    _feed(position, _order(token=1), _order(token=2), _order(token=3))
    position.update_net_pnl(NetBookCalculation.GREEK)

    by_call = {is_call: (underlying, strike, price) for underlying, strike, price, is_call in calls}
    assert len(calls) == 2
    assert by_call[True] == (99.5, options.made[1].strike_price, 12.0)
    assert by_call[False] == (100.5, options.made[2].strike_price, 8.0)
    assert options.made[1].delta == 0.5
    assert options.made[3].delta == 1.0


def test_update_greeks_falls_back_to_future_ltp():
    prices = {1: 12.0, 100: 20000.0}
    seen = []

    def model(underlying, strike, expiry, option_price, is_call):
        seen.append(underlying)
        return 0.2, 0.5, 0.01, 3.0, -1.0

    position = Position(
        prices.__getitem__,
        greek_info=_Options(),
        top_of_book=lambda token: (0.0, 0.0),
        greeks_model=model,
    )
    _feed(position, _order(token=1))
    position.update_net_pnl(NetBookCalculation.GREEK)
    assert seen == [20000.0]
    assert position.calculation is NetBookCalculation.GREEK


def test_update_greeks_without_model_raises():
    position = Position(lambda token: 1.0)
    with pytest.raises(RuntimeError):
        position.update_net_pnl(NetBookCalculation.GREEK)