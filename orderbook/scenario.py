"""Scripted order book scenarios: parse action files, replay them, count the result.

A scenario is a sequence of lines, one action each, closed by a result line:

    A <B|S> <OrderType> <price> <quantity> <order id>   add an order
    M <order id> <B|S> <price> <quantity>               modify an order
    C <order id>                                        cancel an order
    R <orders> <bid levels> <ask levels>                expected final state

Lines starting with any other character are ignored. An empty line ends the
input, and the result line must be the last line.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from os import PathLike
from typing import Iterable, Optional, Union

from orderbook.book import Orderbook
from orderbook.models import OrderId, OrderType, Price, Quantity, Side
from orderbook.order import Order, OrderModify


class ScenarioError(ValueError):
    """Raised when a scenario cannot be parsed."""


class ActionType(Enum):
    """What an action line does to the book."""

    ADD = auto()
    CANCEL = auto()
    MODIFY = auto()


@dataclass(frozen=True)
class Action:
    """One parsed action line."""

    type: ActionType
    order_id: OrderId
    side: Optional[Side] = None
    order_type: Optional[OrderType] = None
    price: Optional[Price] = None
    quantity: Optional[Quantity] = None


@dataclass(frozen=True)
class ScenarioResult:
    """Size of the book: resting orders, bid levels and ask levels."""

    all_count: int
    bid_count: int
    ask_count: int


_SIDES = {"B": Side.BUY, "S": Side.SELL}

_ORDER_TYPES = {
    "FillAndKill": OrderType.FILL_AND_KILL,
    "GoodTillCancel": OrderType.GOOD_TILL_CANCEL,
    "GoodForDay": OrderType.GOOD_FOR_DAY,
    "FillOrKill": OrderType.FILL_OR_KILL,
    "Market": OrderType.MARKET,
}


def _field(values: list[str], index: int) -> str:
    try:
        return values[index]
    except IndexError:
        raise ScenarioError(f"Missing field {index} in line: {' '.join(values)!r}") from None


def _to_number(text: str, empty_message: str) -> int:
    if not text:
        raise ScenarioError(empty_message)
    try:
        value = int(text)
    except ValueError:
        raise ScenarioError(f"Not a number: {text!r}") from None
    if value < 0:
        raise ScenarioError("Value is below zero.")
    return value


def _parse_side(text: str) -> Side:
    try:
        return _SIDES[text]
    except KeyError:
        raise ScenarioError("Unknown Side") from None


def _parse_order_type(text: str) -> OrderType:
    try:
        return _ORDER_TYPES[text]
    except KeyError:
        raise ScenarioError("Unknown OrderType") from None


def _parse_price(text: str) -> Price:
    return _to_number(text, "Unknown Price")


def _parse_quantity(text: str) -> Quantity:
    return _to_number(text, "Unknown Quantity")


def _parse_order_id(text: str) -> OrderId:
    return _to_number(text, "Empty OrderId")


def _parse_action(line: str) -> Optional[Action]:
    kind = line[0]
    values = line.split(" ")
    if kind == "A":
        return Action(
            type=ActionType.ADD,
            side=_parse_side(_field(values, 1)),
            order_type=_parse_order_type(_field(values, 2)),
            price=_parse_price(_field(values, 3)),
            quantity=_parse_quantity(_field(values, 4)),
            order_id=_parse_order_id(_field(values, 5)),
        )
    if kind == "M":
        return Action(
            type=ActionType.MODIFY,
            order_id=_parse_order_id(_field(values, 1)),
            side=_parse_side(_field(values, 2)),
            price=_parse_price(_field(values, 3)),
            quantity=_parse_quantity(_field(values, 4)),
        )
    if kind == "C":
        return Action(type=ActionType.CANCEL, order_id=_parse_order_id(_field(values, 1)))
    return None


def _parse_result(line: str) -> ScenarioResult:
    values = line.split(" ")
    return ScenarioResult(
        all_count=_to_number(_field(values, 1), "Unknown count"),
        bid_count=_to_number(_field(values, 2), "Unknown count"),
        ask_count=_to_number(_field(values, 3), "Unknown count"),
    )


def parse_scenario(lines: Iterable[str]) -> tuple[list[Action], ScenarioResult]:
    """Parse scenario lines into actions and the expected result."""
    actions: list[Action] = []
    remaining = iter(lines)
    for raw in remaining:
        line = raw.rstrip("\r\n")
        if not line:
            break
        if line[0] == "R":
            if next(remaining, None) is not None:
                raise ScenarioError("Result should only be specified at the end.")
            return actions, _parse_result(line)
        action = _parse_action(line)
        if action is not None:
            actions.append(action)
    raise ScenarioError("No result specified.")


def load_scenario(
    path: Union[str, "PathLike[str]"],
) -> tuple[list[Action], ScenarioResult]:
    """Read and parse a scenario file."""
    with open(path, encoding="utf-8") as handle:
        return parse_scenario(handle)


def run_scenario(actions: Iterable[Action]) -> ScenarioResult:
    """Replay ``actions`` on a fresh book and report its final size."""
    with Orderbook(prune_good_for_day=False) as book:
        for action in actions:
            if action.type is ActionType.ADD:
                book.add_order(
                    Order(
                        action.order_type,
                        action.order_id,
                        action.side,
                        action.price,
                        action.quantity,
                    )
                )
            elif action.type is ActionType.MODIFY:
                book.modify_order(
                    OrderModify(action.order_id, action.side, action.price, action.quantity)
                )
            elif action.type is ActionType.CANCEL:
                book.cancel_order(action.order_id)
            else:
                raise ScenarioError(f"Unsupported action: {action.type}")
        infos = book.level_infos()
        return ScenarioResult(len(book), len(infos.bids), len(infos.asks))