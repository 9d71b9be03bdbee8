"""Manual order entry form."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from .models import OrderStatus, RequestType, Side

ORDER_TYPE_COUNT = 4


@dataclass(frozen=True)
class ClientCode:
    exchange: str
    client_code: str


@dataclass
class OrderFormInfo:
    """The fields of an order being entered or modified."""

    gateway: int = 0
    price: float = 0.0
    quantity: int = 0
    lot_size: int = 1
    order_number: int = 0
    type: int = 0
    side: Side = Side.BUY
    status: OrderStatus = OrderStatus.NEW
    contract: str = ""
    client: str = ""


PublishOrder = Callable[[OrderFormInfo, RequestType], None]


class OrderForm:
    """Holds one order, validates edits and hands it to the publisher."""

    def __init__(
        self,
        client_codes: Sequence[ClientCode],
        exchange_of: Callable[[str], str],
        publish: Optional[PublishOrder] = None,
    ) -> None:
        self.client_codes = list(client_codes)
        self._exchange_of = exchange_of
        self.publish = publish
        self.order = OrderFormInfo()
        self.exchange: Optional[str] = None
        self.client_code = ""

    @property
    def editable(self) -> bool:
        """Broker and type may only be changed for a new order."""
        return self.order.status == OrderStatus.NEW

    def update(self, info: OrderFormInfo) -> None:
        """Load ``info`` into the form, picking a client for a new exchange.

        When the exchange changes, the chosen client code is written back
        into ``info`` for the caller.
        """
        self.order = dataclasses.replace(info)
        exchange = self._exchange_of(info.contract)
        if exchange != self.exchange:
            self.exchange = exchange
            for item in self.client_codes:
                if item.exchange == exchange:
                    self.client_code = item.client_code
                    info.client = self.client_code
                    break

    def set_price(self, price: float) -> float:
        self.order.price = max(price, 0.0)
        return self.order.price

    def set_quantity(self, quantity: int) -> int:
        self.order.quantity = max(quantity, self.order.lot_size)
        return self.order.quantity

    def select_client(self, client: ClientCode) -> None:
        if not self.editable:
            raise ValueError("client can only be chosen for a new order")
        self.order.client = client.client_code
        self.exchange = client.exchange
        self.client_code = client.client_code

    def select_type(self, index: int) -> None:
        if not self.editable:
            raise ValueError("order type can only be chosen for a new order")
        if not 0 <= index < ORDER_TYPE_COUNT:
            raise ValueError(f"order type index out of range: {index}")
        self.order.type = index

    def request_type(self) -> RequestType:
        return RequestType.NEW if self.order.order_number == 0 else RequestType.MODIFY

    def submit(self) -> bool:
        """Publish the order; returns True when the form should close."""
        if self.publish is None:
            raise RuntimeError("no order publisher configured")
        self.publish(self.order, self.request_type())
        return not self.editable