"""Book of open (pending) orders keyed by gateway id."""

from __future__ import annotations

from collections import deque
from typing import Callable, Optional

from .models import OrderInfo, Side

CancelOrder = Callable[[OrderInfo], None]


def is_modifiable(pf: int) -> bool:
    """Orders of a real portfolio (not a multiple of 10000) may be modified."""
    return pf % 10000 != 0


def is_cancellable_in_bulk(pf: int) -> bool:
    """Manual orders (portfolio ending in 9999) are cancelled by 'Cancel All'."""
    return pf % 10000 == 9999


class OpenOrders:
    """Open orders ordered by time, with buy and sell counts."""

    def __init__(self, cancel_callback: Optional[CancelOrder] = None) -> None:
        self._cancel_callback = cancel_callback
        self._pending: deque[tuple[OrderInfo, bool]] = deque()
        self._container: dict[int, OrderInfo] = {}
        self._hashing: dict[int, int] = {}
        self._cancel_orders: list[OrderInfo] = []
        self.buy_count = 0
        self.sell_count = 0

    def __len__(self) -> int:
        return len(self._container)

    def set_cancel_callback(self, callback: CancelOrder) -> None:
        self._cancel_callback = callback

    def insert(self, order: OrderInfo, insert: bool) -> None:
        """Queue an update; ``insert`` False removes the order."""
        self._pending.append((order, insert))

    def process_pending(self) -> bool:
        """Apply at most one queued update; True if one was applied."""
        try:
            order, insert = self._pending.popleft()
        except IndexError:
            return False
        self.update(order, insert)
        return True

    def update(self, order: OrderInfo, insert: bool) -> None:
        """Drop any earlier entry for this gateway, then add it if ``insert``."""
        previous_time = self._hashing.get(order.gateway)
        if previous_time is not None and self._container.pop(previous_time, None) is not None:
            self.buy_count -= order.side == Side.BUY
            self.sell_count -= order.side == Side.SELL
        self._hashing[order.gateway] = order.time

        if insert:
            self._container.setdefault(order.time, order)
            self.buy_count += order.side == Side.BUY
            self.sell_count += order.side == Side.SELL

    def rows(self) -> list[OrderInfo]:
        """Open orders, newest first."""
        return [self._container[t] for t in sorted(self._container, reverse=True)]

    def collect_cancel_all(self) -> list[OrderInfo]:
        """Gather the orders that 'Cancel All' would cancel, oldest first."""
        self._cancel_orders = [
            self._container[t] for t in sorted(self._container) if is_cancellable_in_bulk(self._container[t].pf)
        ]
        return list(self._cancel_orders)

    def cancel_all(self) -> int:
        """Cancel every collected order; returns how many were sent."""
        for order in self._cancel_orders:
            self.cancel(order)
        return len(self._cancel_orders)

    def cancel(self, order: OrderInfo) -> None:
        if self._cancel_callback is None:
            raise RuntimeError("no cancel callback configured")
        self._cancel_callback(order)