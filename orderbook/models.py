"""Value types shared by the order book: sides, order types, trades and depth."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterable, Optional

Price = int
Quantity = int
OrderId = int

INVALID_PRICE: Optional[Price] = None
"""Price carried by a market order before it is given a limit."""


class Side(Enum):
    """Which side of the book an order rests on."""

    BUY = auto()
    SELL = auto()


class OrderType(Enum):
    """How long an order lives and how it may be matched."""

    GOOD_TILL_CANCEL = auto()
    FILL_AND_KILL = auto()
    FILL_OR_KILL = auto()
    GOOD_FOR_DAY = auto()
    MARKET = auto()


@dataclass(frozen=True)
class LevelInfo:
    """Aggregated remaining quantity resting at one price."""

    price: Price
    quantity: Quantity


@dataclass(frozen=True)
class TradeInfo:
    """One side of an executed trade."""

    order_id: OrderId
    price: Price
    quantity: Quantity


@dataclass(frozen=True)
class Trade:
    """A match between a bid and an ask."""

    bid: TradeInfo
    ask: TradeInfo


@dataclass(frozen=True)
class OrderbookLevelInfos:
    """Snapshot of book depth: bids best-first, asks best-first."""

    bids: tuple[LevelInfo, ...] = field(default_factory=tuple)
    asks: tuple[LevelInfo, ...] = field(default_factory=tuple)

    def __init__(
        self,
        bids: Iterable[LevelInfo] = (),
        asks: Iterable[LevelInfo] = (),
    ) -> None:
        object.__setattr__(self, "bids", tuple(bids))
        object.__setattr__(self, "asks", tuple(asks))