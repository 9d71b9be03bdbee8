"""Net positions by symbol and by portfolio, and a greek book of options."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Union

from .models import OrderInfo, Side

PriceLookup = Callable[[int], float]
SymbolLookup = Callable[[int], str]
TopOfBook = Callable[[int], "tuple[float, float]"]
GreeksModel = Callable[[float, float, int, float, bool], "tuple[float, float, float, float, float]"]


class NetBookCalculation(Enum):
    """Which book the periodic refresh works on."""

    SYMBOL = "symbol"
    PF = "pf"
    GREEK = "greek"


@dataclass
class _TradeTotals:
    buy_quantity: int = 0
    sell_quantity: int = 0
    total_buy_price: float = 0.0
    total_sell_price: float = 0.0
    average_buy_price: float = 0.0
    average_sell_price: float = 0.0


@dataclass
class NetBookEntry(_TradeTotals):
    """Accumulated trades of one contract, or one contract in one portfolio."""

    token: int = 0
    pf: int = 0
    description: str = ""
    last_ltp: float = 0.0
    last_pnl: float = 0.0
    mtm: float = 0.0
    pnl: float = 0.0

    @property
    def net_investment(self) -> float:
        return self.total_buy_price - self.total_sell_price

    @property
    def total_qty(self) -> int:
        return self.buy_quantity - self.sell_quantity


@dataclass
class GreekValues:
    """Option details of a contract and its latest greeks."""

    token: int
    future_token: int
    is_call: bool = False
    is_future: bool = False
    expiry: int = 0
    strike_price: float = 0.0
    iv: float = 1.0
    delta: float = 1.0
    gamma: float = 1.0
    vega: float = 1.0
    theta: float = 1.0


@dataclass
class GreekBookEntry(_TradeTotals):
    """Accumulated trades of one contract with its greeks."""

    symbol: str = ""
    greeks: Optional[GreekValues] = None


@dataclass
class GreekSummary:
    """Position-weighted greeks and mark-to-market of one underlying symbol."""

    symbol: str
    delta: float = 0.0
    gamma: float = 0.0
    vega: float = 0.0
    theta: float = 0.0
    mtm: float = 0.0
    market_rate: float = 0.0
    value: float = 0.0


def apply_trade(entry: Union[NetBookEntry, GreekBookEntry], order: OrderInfo) -> None:
    """Add one trade to the buy or sell totals of ``entry``."""
    amount = order.price * order.quantity
    if order.side == Side.BUY:
        entry.total_buy_price += amount
        entry.buy_quantity += order.quantity
        entry.average_buy_price = entry.total_buy_price / entry.buy_quantity
    else:
        entry.total_sell_price += amount
        entry.sell_quantity += order.quantity
        entry.average_sell_price = entry.total_sell_price / entry.sell_quantity


def calculate_pnl(entry: NetBookEntry, last_trade_price: float) -> float:
    """Booked plus mark-to-market profit of ``entry`` at ``last_trade_price``.

    The result is cached: an unchanged price returns the previous value.
    """
    if entry.last_ltp == last_trade_price:
        return entry.last_pnl
    entry.last_ltp = last_trade_price

    mtm = 0.0
    booked = min(entry.buy_quantity, entry.sell_quantity) * (entry.average_sell_price - entry.average_buy_price)
    if entry.buy_quantity > entry.sell_quantity:
        mtm = (entry.buy_quantity - entry.sell_quantity) * (last_trade_price - entry.average_buy_price)
    elif entry.buy_quantity < entry.sell_quantity:
        mtm = (entry.sell_quantity - entry.buy_quantity) * (entry.average_sell_price - last_trade_price)
    else:
        booked = entry.total_sell_price - entry.total_buy_price

    pnl = mtm + booked
    entry.mtm = mtm
    entry.pnl = pnl
    entry.last_pnl = pnl
    return pnl


def _plain_future(token: int) -> GreekValues:
    return GreekValues(token=token, future_token=token, is_future=True)


class Position:
    """Symbol-wise, portfolio-wise and greek books built from trades.

    Trades are queued by ``insert`` and applied by ``process_pending``;
    ``update_net_pnl`` is the periodic refresh the caller drives.
    """

    def __init__(
        self,
        last_price: PriceLookup,
        *,
        symbol_of: Optional[SymbolLookup] = None,
        greek_info: Optional[Callable[[int], GreekValues]] = None,
        top_of_book: Optional[TopOfBook] = None,
        greeks_model: Optional[GreeksModel] = None,
    ) -> None:
        self._last_price = last_price
        self._symbol_of = symbol_of or str
        self._greek_info = greek_info or _plain_future
        self._top_of_book = top_of_book
        self._greeks_model = greeks_model
        self._pending: deque[OrderInfo] = deque()
        self._symbol_wise: dict[int, NetBookEntry] = {}
        self._pf_wise: dict[tuple[int, int], NetBookEntry] = {}
        self._greek_book: dict[int, GreekBookEntry] = {}
        self.net_pnl = 0.0
        self.calculation = NetBookCalculation.SYMBOL

    def insert(self, order: OrderInfo) -> None:
        """Queue a trade; it is booked on the next ``process_pending``."""
        self._pending.append(order)

    def process_pending(self) -> bool:
        """Book at most one queued trade; True if one was booked."""
        try:
            order = self._pending.popleft()
        except IndexError:
            return False
        self._update_net_book(self._symbol_wise, order.token, order)
        self._update_net_book(self._pf_wise, (order.pf, order.token), order)
        self._update_greek_book(order)
        return True

    @staticmethod
    def _update_net_book(book: dict, key, order: OrderInfo) -> None:
        entry = book.get(key)
        if entry is None:
            entry = NetBookEntry(token=order.token, pf=order.pf, description=order.contract)
            book[key] = entry
        apply_trade(entry, order)

    def _update_greek_book(self, order: OrderInfo) -> None:
        entry = self._greek_book.get(order.token)
        if entry is None:
            entry = GreekBookEntry(symbol=self._symbol_of(order.token), greeks=self._greek_info(order.token))
            self._greek_book[order.token] = entry
        apply_trade(entry, order)

    def symbol_wise_rows(self) -> list[NetBookEntry]:
        """One entry per contract, ordered by token."""
        return [self._symbol_wise[key] for key in sorted(self._symbol_wise)]

    def pf_wise_rows(self) -> list[NetBookEntry]:
        """One entry per portfolio and contract, ordered by (pf, token)."""
        return [self._pf_wise[key] for key in sorted(self._pf_wise)]

    def greek_summary(self) -> list[GreekSummary]:
        """Greeks and mark-to-market aggregated per underlying symbol."""
        summary: dict[str, GreekSummary] = {}
        for entry in self._greek_book.values():
            greeks = entry.greeks
            qty = entry.buy_quantity - entry.sell_quantity
            ltp = self._last_price(greeks.future_token)
            mtm = 0.0
            if entry.buy_quantity > entry.sell_quantity:
                mtm = qty * (ltp - entry.average_buy_price)
            elif entry.buy_quantity < entry.sell_quantity:
                mtm = -qty * (entry.average_sell_price - ltp)

            delta = qty * greeks.delta
            gamma = qty * greeks.gamma
            vega = qty * greeks.vega
            theta = qty * greeks.theta

            row = summary.get(entry.symbol)
            if row is None:
                summary[entry.symbol] = GreekSummary(
                    symbol=entry.symbol,
                    delta=delta,
                    gamma=gamma,
                    vega=vega,
                    theta=theta,
                    mtm=mtm,
                    market_rate=ltp,
                )
            else:
                row.delta += delta
                row.gamma += gamma
                row.vega += vega
                row.theta += theta
                row.mtm += mtm
                row.value = row.market_rate * row.delta
        return list(summary.values())

    def update_net_pnl(self, calculation: NetBookCalculation) -> float:
        """Refresh the book named by ``calculation``; returns the net PNL."""
        self.calculation = calculation
        if calculation is NetBookCalculation.GREEK:
            self._update_greeks()
        elif calculation is NetBookCalculation.SYMBOL:
            self.net_pnl = sum(calculate_pnl(e, self._last_price(e.token)) for e in self.symbol_wise_rows())
        elif calculation is NetBookCalculation.PF:
            self.net_pnl = sum(calculate_pnl(e, self._last_price(e.token)) for e in self.pf_wise_rows())
        return self.net_pnl

    def _update_greeks(self) -> None:
        if self._greeks_model is None:
            raise RuntimeError("no greeks model configured")
        for entry in self._greek_book.values():
            greeks = entry.greeks
            if greeks.is_future:
                continue
            future_ltp = self._last_price(greeks.future_token)
            bid, ask = self._top_of_book(greeks.future_token) if self._top_of_book else (0.0, 0.0)
            quote = bid if greeks.is_call else ask
            underlying = quote or future_ltp
            (
                greeks.iv,
                greeks.delta,
                greeks.gamma,
                greeks.vega,
                greeks.theta,
            ) = self._greeks_model(
                underlying,
                greeks.strike_price,
                greeks.expiry,
                self._last_price(greeks.token),
                greeks.is_call,
            )