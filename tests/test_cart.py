"""
Tests for cart models
"""

import json
from decimal import Decimal

import pytest

from cartstore.cart import CartLine, cart_items_amount, cart_size, cart_total, dump_cart, load_cart
from cartstore.services import ProductRecord


class TestCartLine:
    """Tests for CartLine dataclass."""

    def test_from_product(self):
        """Test a new line copies the catalog record with amount 1."""
        product = ProductRecord(id=1, title="Shoe", price=100, image="u")

        line = CartLine.from_product(product)

        assert line == CartLine(product_id=1, title="Shoe", price=Decimal("100"), image="u", amount=1)

    def test_with_amount_returns_new_line(self, make_line):
        """Test with_amount leaves the original untouched."""
        line = make_line(1, amount=2)

        updated = line.with_amount(3)

        assert updated.amount == 3
        assert line.amount == 2
        assert updated is not line

    def test_line_is_immutable(self, make_line):
        """Test lines cannot be edited in place."""
        line = make_line(1)

        with pytest.raises(AttributeError):
            line.amount = 5

    def test_subtotal(self, make_line):
        """Test subtotal for amount."""
        line = make_line(3, amount=3)

        # 39.9 * 3 = 119.70
        assert line.subtotal == Decimal("119.70")

    def test_to_dict_uses_product_record_shape(self, make_line):
        """Test stored shape is the product record plus amount."""
        data = make_line(1, amount=2).to_dict()

        assert data == {"id": 1, "title": "Shoe", "price": "100", "image": "u", "amount": 2}

    def test_from_dict_accepts_numeric_price(self):
        """Test payloads written with a numeric price are read back."""
        line = CartLine.from_dict({"id": 7, "title": "Boot", "price": 59.9, "image": "x", "amount": 1})

        assert line.product_id == 7
        assert line.price == Decimal("59.9")


class TestCartSerialization:
    """Tests for dump_cart / load_cart."""

    def test_dump_preserves_order(self, make_line):
        """Test lines are written in insertion order."""
        payload = dump_cart((make_line(2), make_line(1)))

        assert [item["id"] for item in json.loads(payload)] == [2, 1]

    def test_load_restores_lines(self, make_line):
        """Test a dumped cart loads back equal."""
        cart = (make_line(1, amount=2), make_line(3))

        assert load_cart(dump_cart(cart)) == cart

    def test_load_does_not_validate_invariants(self):
        """Test restored carts are taken as-is."""
        payload = json.dumps([
            {"id": 1, "title": "Shoe", "price": 100, "image": "u", "amount": 0},
            {"id": 1, "title": "Shoe", "price": 100, "image": "u", "amount": 4},
        ])

        cart = load_cart(payload)

        assert [line.amount for line in cart] == [0, 4]

    def test_load_rejects_non_list(self):
        """Test a stored object is not a cart."""
        with pytest.raises(TypeError):
            load_cart('{"id": 1}')

    def test_load_rejects_invalid_json(self):
        """Test malformed payloads raise ValueError."""
        with pytest.raises(ValueError):
            load_cart("not json")


class TestCartViews:
    """Tests for derived cart views."""

    def test_items_amount(self, make_line):
        """Test quantity badge mapping."""
        cart = (make_line(1, amount=2), make_line(2, amount=1))

        assert cart_items_amount(cart) == {1: 2, 2: 1}

    def test_size_counts_lines(self, make_line):
        """Test size counts distinct products, not units."""
        assert cart_size((make_line(1, amount=4), make_line(2))) == 2
        assert cart_size(()) == 0

    def test_total(self, make_line):
        """Test cart total."""
        cart = (make_line(1, amount=2), make_line(2, amount=1))

        # 200 + 179.90
        assert cart_total(cart) == Decimal("379.90")

    def test_total_of_empty_cart(self):
        assert cart_total(()) == Decimal("0.00")
