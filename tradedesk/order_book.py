"""Trade book and order history lists."""

from __future__ import annotations

from collections import deque
from typing import Callable, Iterable

from .models import OrderInfo


class OrderBook:
    """A named list of trades fed through a thread-safe pending queue."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.table_name = f"{name} Table"
        self._pending: deque[OrderInfo] = deque()
        self._container: list[OrderInfo] = []

    def insert(self, order: OrderInfo) -> None:
        """Queue an order; it is added on the next ``process_pending``."""
        self._pending.append(order)

    def process_pending(self) -> bool:
        """Move at most one queued order into the book; True if one moved."""
        try:
            order = self._pending.popleft()
        except IndexError:
            return False
        self._container.append(order)
        return True

    def rows(self) -> list[OrderInfo]:
        """Orders in the book, newest first."""
        return list(reversed(self._container))

    def __len__(self) -> int:
        return len(self._container)


class OrderHistory:
    """History of one order number, fetched from a loader."""

    def __init__(self, loader: Callable[[float], Iterable[OrderInfo]]) -> None:
        self._loader = loader
        self._container: list[OrderInfo] = []
        self.shown = False

    def load(self, order_number: float) -> list[OrderInfo]:
        """Replace the history with the entries for ``order_number``."""
        self.shown = True
        self._container = list(self._loader(order_number))
        return self.rows()

    def rows(self) -> list[OrderInfo]:
        return list(self._container)