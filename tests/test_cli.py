import pytest

from orderbook.book import Orderbook
from orderbook.cli import format_book, format_trades, main
from orderbook.models import OrderType, Side, Trade, TradeInfo
from orderbook.order import Order


@pytest.fixture
def book():
    with Orderbook(prune_good_for_day=False) as orderbook:
        yield orderbook


def _gtc(order_id, side, price, quantity):
    return Order(OrderType.GOOD_TILL_CANCEL, order_id, side, price, quantity)


def test_format_trades_empty():
    assert format_trades([]) == "No trades executed.\n"


def test_format_trades_lists_each_trade():
    trades = [
        Trade(TradeInfo(1, 100, 5), TradeInfo(2, 99, 5)),
        Trade(TradeInfo(3, 101, 7), TradeInfo(4, 98, 7)),
    ]
    text = format_trades(trades)
    assert "=== Executed Trades ===" in text
    assert "Trade 1:" in text
    assert "Trade 2:" in text
    assert "  Bid Order ID: 1 @ Price: 100 Quantity: 5" in text
    assert "  Ask Order ID: 4 @ Price: 98 Quantity: 7" in text
    assert text.index("Trade 1:") < text.index("Trade 2:")


def test_format_trades_accepts_generator():
    trades = (Trade(TradeInfo(1, 100, 5), TradeInfo(2, 99, 5)) for _ in range(1))
    assert "Trade 1:" in format_trades(trades)


def test_format_book_empty(book):
    text = format_book(book)
    assert "=== Orderbook State ===" in text
    assert f"Total Orders: {len(book)}" in text
    assert "Price:" not in text


def test_format_book_orders_levels_best_first(book):
    book.add_order(_gtc(1, Side.BUY, 99, 30))
    book.add_order(_gtc(2, Side.BUY, 100, 50))
    book.add_order(_gtc(3, Side.SELL, 104, 40))
    book.add_order(_gtc(4, Side.SELL, 103, 60))
    text = format_book(book)
    assert f"Total Orders: {len(book)}" in text
    bids_at = text.index("Bids (Buy Orders):")
    asks_at = text.index("Asks (Sell Orders):")
    assert bids_at < text.index("Price: 100, Quantity: 50") < text.index("Price: 99, Quantity: 30") < asks_at
    assert asks_at < text.index("Price: 103, Quantity: 60") < text.index("Price: 104, Quantity: 40")


def test_format_book_shows_remaining_quantity(book):
    book.add_order(_gtc(1, Side.BUY, 100, 50))
    book.add_order(_gtc(2, Side.SELL, 100, 20))
    infos = book.level_infos()
    text = format_book(book)
    for level in infos.bids:
        assert f"Price: {level.price}, Quantity: {level.quantity}" in text


def test_main_runs_demo(capsys):
    assert main([]) == 0
    out = capsys.readouterr().out
    assert out.startswith("=== Orderbook Testing with Dummy Orders ===")
    assert "Test 9: Good For Day Order" in out
    assert "=== Testing Complete ===" in out
    assert "Bid Order ID: 3 @ Price: 101" in out


def test_main_rejects_unknown_arguments():
    with pytest.raises(SystemExit):
        main(["--bogus"])