"""Shared enumerations and records for orders, strategies and parameters."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum


class DataType(IntEnum):
    """Kind of value a strategy parameter holds."""

    INT = 0
    FLOAT = 1
    TEXT = 2
    RADIO = 3
    COMBO = 4
    CLIENT = 5
    CONTRACT = 6
    UPDATES = 7
    END = 8


class StrategyStatus(IntEnum):
    """Lifecycle state of a strategy row."""

    INACTIVE = 0
    ACTIVE = 1
    APPLIED = 2
    TERMINATED = 3
    WAITING = 4
    DISCONNECTED = 5
    PENDING = 6


class Side(IntEnum):
    BUY = 0
    SELL = 1


class RequestType(IntEnum):
    """Kind of request sent to the broker or strategy engine."""

    NEW = 0
    MODIFY = 1
    CANCEL = 2
    SUBSCRIBE = 3
    APPLY = 4
    UNSUBSCRIBE = 5


class OrderStatus(IntEnum):
    NEW = 0
    REPLACED = 1
    CANCELLED = 2
    FILLED = 3
    REJECTED = 4


@dataclass
class OrderInfo:
    """One order or trade as reported by the gateway."""

    gateway: int = 0
    order_no: int = 0
    token: int = 0
    pf: int = 0
    side: Side = Side.BUY
    price: float = 0.0
    quantity: int = 0
    time: int = 0
    contract: str = ""
    status: OrderStatus = OrderStatus.NEW


@dataclass
class ParameterValue:
    """The value of a parameter; which field matters depends on its type."""

    text: str = ""
    integer: int = 0
    floating: float = 0.0
    check: bool = False


@dataclass
class ParameterInfo:
    type: DataType = DataType.TEXT
    parameter: ParameterValue = field(default_factory=ParameterValue)
    search_enable: bool = False


@dataclass
class StrategyRow:
    """One portfolio row of a strategy with its parameters by name."""

    pf: int = 0
    status: StrategyStatus = StrategyStatus.INACTIVE
    subscribed: bool = False
    selected: bool = False
    changed: bool = False
    parameters: dict[str, ParameterInfo] = field(default_factory=dict)


@dataclass
class GlobalParameterInfo:
    """A parameter applied to every row when ``update`` is set."""

    name: str
    info: ParameterInfo = field(default_factory=ParameterInfo)
    update: bool = False


@dataclass
class PortfolioStatus:
    """Counts of rows per status, and whether closing must be refused."""

    close: bool = False
    inactive: int = 0
    active: int = 0
    apply: int = 0
    waiting: int = 0
    terminate: int = 0