"""Pytest configuration and fixtures"""
import os
from decimal import Decimal

import pytest

# Keep test runs away from real services
os.environ.setdefault("STOCK_SERVICE_URL", "http://stock.test")
os.environ.setdefault("UPSTASH_REDIS_REST_URL", "")
os.environ.setdefault("UPSTASH_REDIS_REST_TOKEN", "")

from storecart.cart import CartManager, MemoryCartStorage
from storecart.errors import StockServiceError
from storecart.services import CollectingNotifier, Product, Stock


class FakeStockClient:
    """In-memory stand-in for StockClient, with call counters."""

    def __init__(self, products=None, stock=None):
        self.products = products or {}
        self.stock = stock or {}
        self.product_calls = 0
        self.stock_calls = 0
        self.fail_with = None

    async def get_product(self, product_id):
        self.product_calls += 1
        if self.fail_with:
            raise self.fail_with
        if product_id not in self.products:
            raise StockServiceError(f"GET /products/{product_id} returned HTTP 404", status_code=404)
        return self.products[product_id]

    async def get_stock(self, product_id):
        self.stock_calls += 1
        if self.fail_with:
            raise self.fail_with
        if product_id not in self.stock:
            raise StockServiceError(f"GET /stock/{product_id} returned HTTP 404", status_code=404)
        return self.stock[product_id]


@pytest.fixture
def sample_products():
    """Catalog used by most cart tests"""
    return {
        1: Product(id=1, title="Tênis de Caminhada Leve Confortável", price=Decimal("179.90"),
                   imageUrl="https://cdn.test/1.jpg"),
        2: Product(id=2, title="Tênis VR Caminhada Confortável", price=Decimal("139.90"),
                   imageUrl="https://cdn.test/2.jpg"),
        3: Product(id=3, title="Tênis Adidas Duramo Lite 2.0", price=Decimal("219.90"),
                   imageUrl="https://cdn.test/3.jpg"),
    }


@pytest.fixture
def sample_stock():
    """Available units per product id"""
    return {
        1: Stock(id=1, amount=5),
        2: Stock(id=2, amount=3),
        3: Stock(id=3, amount=2),
    }


@pytest.fixture
def stock_client(sample_products, sample_stock):
    return FakeStockClient(products=dict(sample_products), stock=dict(sample_stock))


@pytest.fixture
def storage():
    return MemoryCartStorage()


@pytest.fixture
def notifier():
    return CollectingNotifier()


@pytest.fixture
def manager(stock_client, storage, notifier):
    """Manager over an empty cart"""
    return CartManager(stock_client, storage, notifier)
