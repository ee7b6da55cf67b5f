"""
Tests for cart models
"""

import json
from dataclasses import FrozenInstanceError
from decimal import Decimal

import pytest

from storecart.cart import Cart, CartItem
from storecart.services import Product


class TestCartItem:
    """Tests for CartItem dataclass."""

    def test_from_product(self):
        """New items start at one unit."""
        product = Product(id=1, title="Tênis", price=179.9, imageUrl="https://cdn.test/1.jpg")

        item = CartItem.from_product(product)

        assert item.id == 1
        assert item.amount == 1
        assert item.price == Decimal("179.9")
        assert item.image == "https://cdn.test/1.jpg"

    def test_subtotal(self):
        item = CartItem(id=1, title="Test", price=Decimal("139.90"), amount=3)

        assert item.subtotal == Decimal("419.70")

    def test_amount_must_be_positive(self):
        with pytest.raises(ValueError):
            CartItem(id=1, title="Test", price=Decimal("1"), amount=0)

    def test_is_frozen(self):
        item = CartItem(id=1, title="Test", price=Decimal("1"))

        with pytest.raises(FrozenInstanceError):
            item.amount = 2

    def test_from_dict_accepts_numeric_price_and_image_url(self):
        """Snapshots written by older clients store numbers and imageUrl."""
        item = CartItem.from_dict({
            "id": 2,
            "title": "Test",
            "price": 99.5,
            "imageUrl": "https://cdn.test/2.jpg",
            "amount": 2,
        })

        assert item.price == Decimal("99.5")
        assert item.image == "https://cdn.test/2.jpg"
        assert item.amount == 2


class TestCart:
    """Tests for Cart dataclass."""

    def test_create_empty_cart(self):
        cart = Cart()

        assert len(cart) == 0
        assert cart.total_items == 0
        assert cart.subtotal == Decimal("0")

    def test_totals(self):
        cart = Cart(items=(
            CartItem(id=1, title="A", price=Decimal("100.00"), amount=2),
            CartItem(id=2, title="B", price=Decimal("50.50"), amount=1),
        ))

        assert cart.total_items == 3
        assert cart.subtotal == Decimal("250.50")

    def test_duplicate_ids_rejected(self):
        item = CartItem(id=1, title="A", price=Decimal("1"))

        with pytest.raises(ValueError):
            Cart(items=(item, item))

    def test_find_and_contains(self):
        cart = Cart(items=(CartItem(id=1, title="A", price=Decimal("1")),))

        assert cart.find(1).title == "A"
        assert cart.find(2) is None
        assert 1 in cart
        assert 2 not in cart

    def test_helpers_return_new_carts(self):
        """with_item / with_amount / without never touch the original."""
        original = Cart(items=(CartItem(id=1, title="A", price=Decimal("1")),))

        added = original.with_item(CartItem(id=2, title="B", price=Decimal("2")))
        changed = added.with_amount(1, 4)
        removed = changed.without(1)

        assert [i.id for i in original] == [1]
        assert [(i.id, i.amount) for i in changed] == [(1, 4), (2, 1)]
        assert [i.id for i in removed] == [2]
        assert original.find(1).amount == 1

    def test_json_is_a_list_of_product_records(self):
        cart = Cart(items=(CartItem(id=1, title="Tênis", price=Decimal("179.90"), image="x.jpg", amount=2),))

        data = json.loads(cart.to_json())

        assert data == [{"id": 1, "title": "Tênis", "price": "179.90", "image": "x.jpg", "amount": 2}]

    def test_json_restores_equal_cart(self):
        cart = Cart(items=(
            CartItem(id=3, title="C", price=Decimal("219.90"), amount=2),
            CartItem(id=1, title="A", price=Decimal("179.90")),
        ))

        restored = Cart.from_json(cart.to_json())

        assert restored == cart
        assert [i.id for i in restored] == [3, 1]

    def test_from_json_rejects_non_list(self):
        with pytest.raises(TypeError):
            Cart.from_json('{"items": []}')
