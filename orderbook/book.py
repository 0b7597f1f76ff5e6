"""A limit order book with price-time priority matching."""

from __future__ import annotations

import bisect
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum, auto
from typing import Iterable, Iterator, Optional

from orderbook.models import (
    LevelInfo,
    OrderbookLevelInfos,
    OrderId,
    OrderType,
    Price,
    Quantity,
    Side,
    Trade,
    TradeInfo,
)
from orderbook.order import Order, OrderModify

GOOD_FOR_DAY_CUTOFF_HOUR = 16
_PRUNE_SLACK_SECONDS = 0.1


def seconds_until_cutoff(now: datetime, cutoff_hour: int) -> float:
    """Seconds from ``now`` to the next time the clock reads ``cutoff_hour``:00:00.

    At or after the cutoff hour the next cutoff is on the following day.
    """
    target = now.replace(hour=cutoff_hour, minute=0, second=0, microsecond=0)
    if now.hour >= cutoff_hour:
        target += timedelta(days=1)
    return (target - now).total_seconds()


class _LevelAction(Enum):
    ADD = auto()
    REMOVE = auto()
    MATCH = auto()


@dataclass
class _LevelData:
    quantity: Quantity = 0
    count: int = 0


class _BookSide:
    """Price levels of one side, each a FIFO queue of orders keyed by id."""

    def __init__(self, descending: bool) -> None:
        self._descending = descending
        self._levels: dict[Price, dict[OrderId, Order]] = {}
        self._prices: list[Price] = []

    def __bool__(self) -> bool:
        return bool(self._prices)

    def best_price(self) -> Price:
        return self._prices[-1] if self._descending else self._prices[0]

    def worst_price(self) -> Price:
        return self._prices[0] if self._descending else self._prices[-1]

    def level(self, price: Price) -> dict[OrderId, Order]:
        return self._levels[price]

    def append(self, order: Order) -> None:
        level = self._levels.get(order.price)
        if level is None:
            level = self._levels[order.price] = {}
            bisect.insort(self._prices, order.price)
        level[order.order_id] = order

    def discard(self, order: Order) -> None:
        level = self._levels[order.price]
        del level[order.order_id]
        if not level:
            self.drop_level(order.price)

    def drop_level(self, price: Price) -> None:
        if self._levels.pop(price, None) is not None:
            self._prices.pop(bisect.bisect_left(self._prices, price))

    def levels(self) -> Iterator[tuple[Price, dict[OrderId, Order]]]:
        """Yield levels best price first."""
        prices = reversed(self._prices) if self._descending else iter(self._prices)
        for price in prices:
            yield price, self._levels[price]


def _front(level: dict[OrderId, Order]) -> Order:
    return next(iter(level.values()))


class Orderbook:
    """Matches bids against asks; optionally expires good-for-day orders daily."""

    def __init__(self, prune_good_for_day: bool = True) -> None:
        self._data: dict[Price, _LevelData] = {}
        self._bids = _BookSide(descending=True)
        self._asks = _BookSide(descending=False)
        self._orders: dict[OrderId, Order] = {}
        self._lock = threading.RLock()
        self._shutdown = threading.Event()
        self._thread: Optional[threading.Thread] = None
        if prune_good_for_day:
            self._thread = threading.Thread(
                target=self._prune_loop, name="good-for-day-pruner", daemon=True
            )
            self._thread.start()

    # -- lifecycle ---------------------------------------------------------

    def close(self) -> None:
        """Stop the good-for-day pruning thread, if one is running."""
        self._shutdown.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None

    def __enter__(self) -> "Orderbook":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _prune_loop(self) -> None:
        while True:
            wait = (
                seconds_until_cutoff(datetime.now(), GOOD_FOR_DAY_CUTOFF_HOUR)
                + _PRUNE_SLACK_SECONDS
            )
            if self._shutdown.wait(wait):
                return
            self.prune_good_for_day_orders()

    # -- public operations -------------------------------------------------

    def __len__(self) -> int:
        with self._lock:
            return len(self._orders)

    def __contains__(self, order_id: object) -> bool:
        with self._lock:
            return order_id in self._orders

    def add_order(self, order: Order) -> list[Trade]:
        """Place ``order`` and return the trades it caused."""
        with self._lock:
            if order.order_id in self._orders:
                return []

            if order.order_type is OrderType.MARKET:
                if order.side is Side.BUY and self._asks:
                    order.to_good_till_cancel(self._asks.worst_price())
                elif order.side is Side.SELL and self._bids:
                    order.to_good_till_cancel(self._bids.worst_price())
                else:
                    return []

            if order.order_type is OrderType.FILL_AND_KILL and not self._can_match(
                order.side, order.price
            ):
                return []

            if order.order_type is OrderType.FILL_OR_KILL and not self._can_fully_fill(
                order.side, order.price, order.initial_quantity
            ):
                return []

            self._side_of(order.side).append(order)
            self._orders[order.order_id] = order
            self._update_level(order.price, order.initial_quantity, _LevelAction.ADD)
            return self._match_orders()

    def cancel_order(self, order_id: OrderId) -> None:
        """Remove the order with ``order_id``; unknown ids are ignored."""
        with self._lock:
            self._cancel_internal(order_id)

    def cancel_orders(self, order_ids: Iterable[OrderId]) -> None:
        """Remove every order in ``order_ids`` under one lock."""
        with self._lock:
            for order_id in order_ids:
                self._cancel_internal(order_id)

    def modify_order(self, modify: OrderModify) -> list[Trade]:
        """Replace an existing order, keeping its order type."""
        with self._lock:
            existing = self._orders.get(modify.order_id)
            if existing is None:
                return []
            order_type = existing.order_type
            self._cancel_internal(modify.order_id)
            return self.add_order(modify.to_order(order_type))

    def prune_good_for_day_orders(self) -> None:
        """Cancel every resting good-for-day order."""
        with self._lock:
            expired = [
                order_id
                for order_id, order in self._orders.items()
                if order.order_type is OrderType.GOOD_FOR_DAY
            ]
            self.cancel_orders(expired)

    def level_infos(self) -> OrderbookLevelInfos:
        """Depth snapshot, each side ordered best price first."""
        with self._lock:
            return OrderbookLevelInfos(
                bids=self._side_infos(self._bids),
                asks=self._side_infos(self._asks),
            )

    # -- internals ---------------------------------------------------------

    @staticmethod
    def _side_infos(side: _BookSide) -> list[LevelInfo]:
        return [
            LevelInfo(price, sum(o.remaining_quantity for o in level.values()))
            for price, level in side.levels()
        ]

    def _side_of(self, side: Side) -> _BookSide:
        return self._bids if side is Side.BUY else self._asks

    def _cancel_internal(self, order_id: OrderId) -> None:
        order = self._orders.pop(order_id, None)
        if order is None:
            return
        self._side_of(order.side).discard(order)
        self._update_level(order.price, order.remaining_quantity, _LevelAction.REMOVE)

    def _update_level(self, price: Price, quantity: Quantity, action: _LevelAction) -> None:
        data = self._data.setdefault(price, _LevelData())
        if action is _LevelAction.ADD:
            data.count += 1
            data.quantity += quantity
        else:
            if action is _LevelAction.REMOVE:
                data.count -= 1
            data.quantity -= quantity
        if data.count == 0:
            del self._data[price]

    def _can_match(self, side: Side, price: Price) -> bool:
        if side is Side.BUY:
            return bool(self._asks) and price >= self._asks.best_price()
        return bool(self._bids) and price <= self._bids.best_price()

    def _can_fully_fill(self, side: Side, price: Price, quantity: Quantity) -> bool:
        if not self._can_match(side, price):
            return False

        if side is Side.BUY:
            low, high = self._asks.best_price(), price
        else:
            low, high = price, self._bids.best_price()

        for level_price, data in self._data.items():
            if not low <= level_price <= high:
                continue
            if quantity <= data.quantity:
                return True
            quantity -= data.quantity
        return False

    def _match_orders(self) -> list[Trade]:
        trades: list[Trade] = []

        while self._bids and self._asks:
            bid_price = self._bids.best_price()
            ask_price = self._asks.best_price()
            if bid_price < ask_price:
                break

            bids = self._bids.level(bid_price)
            asks = self._asks.level(ask_price)

            while bids and asks:
                bid = _front(bids)
                ask = _front(asks)
                quantity = min(bid.remaining_quantity, ask.remaining_quantity)

                bid.fill(quantity)
                ask.fill(quantity)

                if bid.is_filled:
                    del bids[bid.order_id]
                    del self._orders[bid.order_id]
                if ask.is_filled:
                    del asks[ask.order_id]
                    del self._orders[ask.order_id]

                trades.append(
                    Trade(
                        TradeInfo(bid.order_id, bid.price, quantity),
                        TradeInfo(ask.order_id, ask.price, quantity),
                    )
                )
                self._on_matched(bid.price, quantity, bid.is_filled)
                self._on_matched(ask.price, quantity, ask.is_filled)

            if not bids:
                self._bids.drop_level(bid_price)
                self._data.pop(bid_price, None)
            if not asks:
                self._asks.drop_level(ask_price)
                self._data.pop(ask_price, None)

        for side in (self._bids, self._asks):
            if side:
                order = _front(side.level(side.best_price()))
                if order.order_type is OrderType.FILL_AND_KILL:
                    self._cancel_internal(order.order_id)

        return trades

    def _on_matched(self, price: Price, quantity: Quantity, fully_filled: bool) -> None:
        action = _LevelAction.REMOVE if fully_filled else _LevelAction.MATCH
        self._update_level(price, quantity, action)