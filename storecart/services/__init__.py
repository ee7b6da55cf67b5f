"""Collaborators of the cart: catalog/stock client, notification sinks, money helpers."""
from .models import Product, Stock
from .notifications import CollectingNotifier, LoggingNotifier, NotificationSink, TelegramNotifier
from .stock_client import StockClient

__all__ = [
    "Product",
    "Stock",
    "StockClient",
    "NotificationSink",
    "LoggingNotifier",
    "CollectingNotifier",
    "TelegramNotifier",
]
