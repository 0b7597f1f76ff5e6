"""Orders and order modification requests."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from orderbook.models import INVALID_PRICE, OrderId, OrderType, Price, Quantity, Side


class OrderError(Exception):
    """Raised when an order is used in a way its state does not allow."""


class Order:
    """A single order with its remaining, unfilled quantity."""

    __slots__ = (
        "order_type",
        "order_id",
        "side",
        "price",
        "initial_quantity",
        "remaining_quantity",
    )

    def __init__(
        self,
        order_type: OrderType,
        order_id: OrderId,
        side: Side,
        price: Optional[Price],
        quantity: Quantity,
    ) -> None:
        self.order_type = order_type
        self.order_id = order_id
        self.side = side
        self.price = price
        self.initial_quantity = quantity
        self.remaining_quantity = quantity

    @classmethod
    def market(cls, order_id: OrderId, side: Side, quantity: Quantity) -> "Order":
        """Create a market order, which has no price until it is placed."""
        return cls(OrderType.MARKET, order_id, side, INVALID_PRICE, quantity)

    @property
    def filled_quantity(self) -> Quantity:
        return self.initial_quantity - self.remaining_quantity

    @property
    def is_filled(self) -> bool:
        return self.remaining_quantity == 0

    def fill(self, quantity: Quantity) -> None:
        """Reduce the remaining quantity; it may not go below zero."""
        if quantity > self.remaining_quantity:
            raise OrderError(
                f"Order ({self.order_id}) cannot be filled for more than "
                "its remaining quantity."
            )
        self.remaining_quantity -= quantity

    def to_good_till_cancel(self, price: Price) -> None:
        """Turn a market order into a good-till-cancel order at ``price``."""
        if self.order_type is not OrderType.MARKET:
            raise OrderError(
                f"Order ({self.order_id}) cannot have its price adjusted, "
                "only market orders can."
            )
        self.price = price
        self.order_type = OrderType.GOOD_TILL_CANCEL

    def __repr__(self) -> str:
        return (
            f"Order(order_type={self.order_type.name}, order_id={self.order_id}, "
            f"side={self.side.name}, price={self.price}, "
            f"initial_quantity={self.initial_quantity}, "
            f"remaining_quantity={self.remaining_quantity})"
        )


@dataclass(frozen=True)
class OrderModify:
    """A request to replace an existing order's side, price and quantity."""

    order_id: OrderId
    side: Side
    price: Price
    quantity: Quantity

    def to_order(self, order_type: OrderType) -> Order:
        """Build a fresh order of ``order_type`` from this request."""
        return Order(order_type, self.order_id, self.side, self.price, self.quantity)