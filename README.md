# orderbook

A limit order book that matches buy and sell orders by price. At each price
level, orders are matched in the order they arrived.

## What it does

- Keeps bids with the highest price first and asks with the lowest price first.
  Each price level holds its orders in arrival order.
- Matches crossing orders as soon as they arrive. Every fill is reported as a
  `Trade`, which pairs a `TradeInfo` for the bid with a `TradeInfo` for the
  ask. Each `TradeInfo` holds the order id, the order's price and the quantity.
- Supports these order types (`OrderType`):
  - **`GOOD_TILL_CANCEL`**: rests on the book until it is filled or cancelled.
  - **`GOOD_FOR_DAY`**: rests like `GOOD_TILL_CANCEL`. If pruning is enabled,
    it is cancelled at the 16:00 local-time cut-off.
  - **`FILL_AND_KILL`**: accepted only if it can match at once. If any of it
    is left at the front of the best level after matching, it is cancelled.
  - **`FILL_OR_KILL`**: accepted only if the resting quantity within its price
    can cover its whole quantity.
  - **`MARKET`**: takes the worst price on the opposite side, then behaves as
    `GOOD_TILL_CANCEL`. It is dropped if the opposite side is empty.
- Orders can be cancelled by id. They can also be replaced with an
  `OrderModify`, which holds an order id, side, price and quantity. A replaced
  order keeps its order type but goes to the back of the queue. Modifying an
  unknown id does nothing.
- `Orderbook.level_infos()` returns an `OrderbookLevelInfos`. It has `bids`
  and `asks`, each a tuple of `LevelInfo(price, quantity)`, best price first.
  The quantity is the total remaining quantity at that price.
- `len(orderbook)` is the number of orders resting on the book.
- `order_id in orderbook` tells whether an order is resting on the book.

An order whose id is already on the book is ignored, and no trades are
returned. `Order.fill` raises `OrderError` when asked to fill more than the
order has left. `Order.to_good_till_cancel` raises `OrderError` on any order
that is not a market order.

## Installation

```
pip install .
```

The package uses only the standard library. To run the tests:

```
pip install ".[test]"
pytest
```

## Using the book

```python
from orderbook.book import Orderbook
from orderbook.models import OrderType, Side
from orderbook.order import Order, OrderModify

with Orderbook() as book:
    book.add_order(Order(OrderType.GOOD_TILL_CANCEL, 1, Side.BUY, 100, 10))
    trades = book.add_order(Order(OrderType.GOOD_TILL_CANCEL, 2, Side.SELL, 100, 4))
    book.modify_order(OrderModify(1, Side.BUY, 101, 8))
    print(book.level_infos(), len(book))
```

By default, `Orderbook()` starts a background thread. The thread cancels
every good-for-day order each day at 16:00 local time. Leaving the `with`
block stops the thread, and `close()` does the same by hand.
`Orderbook(prune_good_for_day=False)` does not start the thread.

The other operations are:

- `cancel_order(order_id)` cancels one order. Unknown ids are ignored.
- `cancel_orders(order_ids)` cancels several orders under one lock.
- `prune_good_for_day_orders()` cancels every good-for-day order at once.
- `Order.market(order_id, side, quantity)` builds a market order, which has
  no price until it is placed.

`orderbook.book.seconds_until_cutoff(now, cutoff_hour)` gives the number of
seconds from a `datetime` to the next time the clock reads `cutoff_hour`:00:00.

## Scenario files

`orderbook.scenario` handles plain-text lists of actions:

- `parse_scenario(lines)` parses the lines.
- `load_scenario(path)` reads and parses a file.
- Both return the parsed actions and a `ScenarioResult`.
- `run_scenario(actions)` plays the actions against a fresh book. It returns a
  `ScenarioResult` with the number of orders on the book, the number of bid
  levels and the number of ask levels.

There is one action per line, with fields separated by single spaces:

```
A <B|S> <OrderType> <price> <quantity> <order id>
M <order id> <B|S> <price> <quantity>
C <order id>
R <orders on book> <bid levels> <ask levels>
```

- `A` adds an order, `M` modifies one and `C` cancels one.
- `<OrderType>` is one of `GoodTillCancel`, `GoodForDay`, `FillAndKill`,
  `FillOrKill` and `Market`.
- The `R` line gives the expected outcome and must be the last line.
- Lines starting with any other character are skipped.
- An empty line ends the input.

For example:

```
A B GoodTillCancel 100 10 1
A S GoodTillCancel 100 10 2
R 0 0 0
```

Malformed input raises `ScenarioError`. This includes unknown sides or order
types, negative or non-numeric values, missing fields, a missing `R` line and
lines after the `R` line.

## Command line

```
orderbook
```

This runs a fixed demonstration session. It places, matches, cancels and
modifies a set of sample orders. After each step it prints the trades and the
state of the book.

## What it does not do

- The book lives in memory only. Nothing is stored, and nothing is read from
  or sent over a network.
- The `orderbook` command takes no input of its own and does not run scenario
  files. To check a scenario, call `load_scenario` and `run_scenario`, then
  compare the result with the expected `ScenarioResult`.