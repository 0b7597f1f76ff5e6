"""Command line demonstration of the order book."""

from __future__ import annotations

import argparse
from typing import Iterable, Optional, Sequence

from orderbook.book import Orderbook
from orderbook.models import OrderType, Side, Trade
from orderbook.order import Order, OrderModify

_RULE = "===================="


def format_book(orderbook: Orderbook) -> str:
    """Render the order count and the depth on each side."""
    infos = orderbook.level_infos()
    lines = [
        "",
        "=== Orderbook State ===",
        f"Total Orders: {len(orderbook)}",
        "",
        "Bids (Buy Orders):",
    ]
    lines += [f"  Price: {level.price}, Quantity: {level.quantity}" for level in infos.bids]
    lines += ["", "Asks (Sell Orders):"]
    lines += [f"  Price: {level.price}, Quantity: {level.quantity}" for level in infos.asks]
    lines += [_RULE, "", ""]
    return "\n".join(lines)


def format_trades(trades: Iterable[Trade]) -> str:
    """Render executed trades, numbered from one."""
    trades = list(trades)
    if not trades:
        return "No trades executed.\n"
    lines = ["", "=== Executed Trades ==="]
    for number, trade in enumerate(trades, start=1):
        lines.append(f"Trade {number}:")
        lines.append(
            f"  Bid Order ID: {trade.bid.order_id} @ Price: {trade.bid.price} "
            f"Quantity: {trade.bid.quantity}"
        )
        lines.append(
            f"  Ask Order ID: {trade.ask.order_id} @ Price: {trade.ask.price} "
            f"Quantity: {trade.ask.quantity}"
        )
    lines += [_RULE, "", ""]
    return "\n".join(lines)


def _add_all(book: Orderbook, orders: Iterable[Order]) -> None:
    results = [book.add_order(order) for order in orders]
    for trades in results:
        print(format_trades(trades), end="")
    print(format_book(book), end="")


def _gtc(order_id: int, side: Side, price: int, quantity: int) -> Order:
    return Order(OrderType.GOOD_TILL_CANCEL, order_id, side, price, quantity)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run a scripted session against a fresh order book, printing each step."""
    parser = argparse.ArgumentParser(
        prog="orderbook", description="Exercise the order book with sample orders."
    )
    parser.parse_args(argv)

    print("=== Orderbook Testing with Dummy Orders ===\n")

    with Orderbook() as book:
        print("Test 1: Adding Buy Orders (Bids)")
        print("Adding buy orders at different price levels...")
        _add_all(
            book,
            [
                _gtc(1, Side.BUY, 100, 50),
                _gtc(2, Side.BUY, 99, 30),
                _gtc(3, Side.BUY, 101, 20),
            ],
        )

        print("Test 2: Adding Sell Orders (Asks) - Should Match with Bids")
        print("Adding sell orders that should match with existing bids...")
        _add_all(book, [_gtc(4, Side.SELL, 99, 25), _gtc(5, Side.SELL, 100, 40)])

        print("Test 3: Fill and Kill Order")
        print("Adding a fill-and-kill order that should be cancelled if not matched...")
        _add_all(book, [Order(OrderType.FILL_AND_KILL, 6, Side.SELL, 95, 10)])

        print("Test 4: Fill or Kill Order")
        print("Adding a fill-or-kill order that should be cancelled if not fully filled...")
        _add_all(book, [Order(OrderType.FILL_OR_KILL, 7, Side.BUY, 102, 100)])

        print("Test 5: Market Order")
        print("Adding a market order that should match at best available price...")
        _add_all(book, [Order.market(8, Side.BUY, 15)])

        print("Test 6: Cancel Order")
        print("Cancelling order ID 3...")
        book.cancel_order(3)
        print(format_book(book), end="")

        print("Test 7: Modify Order")
        print("Modifying order ID 2 to change price and quantity...")
        trades = book.modify_order(OrderModify(2, Side.BUY, 98, 25))
        print(format_trades(trades), end="")
        print(format_book(book), end="")

        print("Test 8: Adding More Orders to Test Orderbook Depth")
        _add_all(
            book,
            [
                _gtc(9, Side.BUY, 97, 35),
                _gtc(10, Side.BUY, 96, 45),
                _gtc(11, Side.SELL, 103, 60),
                _gtc(12, Side.SELL, 104, 40),
            ],
        )

        print("Test 9: Good For Day Order")
        print("Adding a good-for-day order...")
        _add_all(book, [Order(OrderType.GOOD_FOR_DAY, 13, Side.SELL, 105, 30)])

        print("=== Testing Complete ===")
        print("Final orderbook state:")
        print(format_book(book), end="")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())