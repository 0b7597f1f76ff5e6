"""A price-time priority limit order book, with scenario replay and a demo command."""

__version__ = "0.1.0"

__all__ = ["book", "cli", "models", "order", "scenario"]