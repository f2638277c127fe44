"""Pytest configuration and fixtures"""
import os
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

# Keep tests off the network and the developer's disk
os.environ.setdefault("SHOP_API_URL", "http://shop.test")
os.environ.pop("UPSTASH_REDIS_REST_URL", None)
os.environ.pop("UPSTASH_REDIS_REST_TOKEN", None)

from cartstore.cart import CartLine, CartStore, MemoryCartStorage, dump_cart
from cartstore.errors import CatalogLookupFailed, StockLookupFailed
from cartstore.services import ProductRecord, RecordingNotificationSink, StockRecord


PRODUCTS = {
    1: {"id": 1, "title": "Shoe", "price": 100, "image": "u"},
    2: {"id": 2, "title": "Running Sneaker", "price": "179.90", "image": "https://cdn.test/2.jpg"},
    3: {"id": 3, "title": "Slipper", "price": 39.9, "image": "https://cdn.test/3.jpg"},
}


class FakeShop:
    """In-memory catalog and stock service with AsyncMock call tracking."""

    def __init__(self, stock: dict[int, int] | None = None):
        self.products = dict(PRODUCTS)
        self.stock = dict(stock or {1: 5, 2: 3, 3: 1})
        self.get_product = AsyncMock(side_effect=self._get_product)
        self.get_stock = AsyncMock(side_effect=self._get_stock)

    async def _get_product(self, product_id: int) -> ProductRecord:
        if product_id not in self.products:
            raise CatalogLookupFailed(product_id, "HTTP 404")
        return ProductRecord(**self.products[product_id])

    async def _get_stock(self, product_id: int) -> StockRecord:
        if product_id not in self.stock:
            raise StockLookupFailed(product_id, "HTTP 404")
        return StockRecord(id=product_id, amount=self.stock[product_id])


def _make_line(product_id: int = 1, amount: int = 1) -> CartLine:
    product = PRODUCTS[product_id]
    return CartLine(
        product_id=product_id,
        title=product["title"],
        price=Decimal(str(product["price"])),
        image=product["image"],
        amount=amount,
    )


@pytest.fixture
def shop():
    """Catalog + stock collaborator"""
    return FakeShop()


@pytest.fixture
def storage():
    """Empty in-memory storage slot"""
    return MemoryCartStorage()


@pytest.fixture
def notifier():
    """Notification sink that records messages"""
    return RecordingNotificationSink()


@pytest.fixture
def make_store(shop, storage, notifier):
    """Factory for a store hydrated from the given lines"""

    def _make(*lines: CartLine) -> CartStore:
        if lines:
            storage.save(dump_cart(lines))
        return CartStore(catalog=shop, stock=shop, storage=storage, notifier=notifier)

    return _make


@pytest.fixture
def store(make_store):
    """Store with an empty cart"""
    return make_store()


@pytest.fixture
def make_line():
    """Factory for cart lines of the sample products"""
    return _make_line
