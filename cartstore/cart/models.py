"""Cart models with Decimal-based pricing.

A cart is an immutable tuple of CartLine values in insertion order.
"""
import json
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Iterable

from cartstore.services.models import ProductRecord
from cartstore.services.money import round_money, to_decimal

Cart = tuple["CartLine", ...]


@dataclass(frozen=True)
class CartLine:
    """Single product in the cart with its cached display attributes."""
    product_id: int
    title: str
    price: Decimal
    image: str
    amount: int

    def __post_init__(self):
        # Normalize numeric fields (frozen, hence object.__setattr__)
        object.__setattr__(self, "price", to_decimal(self.price))

    @classmethod
    def from_product(cls, product: ProductRecord, amount: int = 1) -> "CartLine":
        """New line for a catalog record."""
        return cls(
            product_id=product.id,
            title=product.title,
            price=product.price,
            image=product.image,
            amount=amount,
        )

    def with_amount(self, amount: int) -> "CartLine":
        """Copy of this line with a different amount."""
        return replace(self, amount=amount)

    @property
    def subtotal(self) -> Decimal:
        return round_money(self.price * self.amount)

    def to_dict(self) -> dict:
        """Stored shape: the product record plus its amount."""
        return {
            "id": self.product_id,
            "title": self.title,
            "price": str(self.price),
            "image": self.image,
            "amount": self.amount,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartLine":
        """Create from dictionary."""
        return cls(
            product_id=int(data["id"]),
            title=data.get("title", ""),
            price=to_decimal(data.get("price")),
            image=data.get("image", ""),
            amount=int(data["amount"]),
        )


def dump_cart(cart: Iterable[CartLine]) -> str:
    """Serialize a cart for the persistent store."""
    return json.dumps([line.to_dict() for line in cart], ensure_ascii=False)


def load_cart(payload: str) -> Cart:
    """Parse a stored cart.

    Restored lines are taken as-is; uniqueness and amount >= 1 are not
    re-checked. Raises ValueError (json.JSONDecodeError included),
    KeyError or TypeError when the payload is not a list of lines.
    """
    data = json.loads(payload)
    if not isinstance(data, list):
        raise TypeError(f"stored cart must be a list, got {type(data).__name__}")
    return tuple(CartLine.from_dict(item) for item in data)


def find_line(cart: Cart, product_id: int) -> CartLine | None:
    return next((line for line in cart if line.product_id == product_id), None)


def cart_items_amount(cart: Cart) -> dict[int, int]:
    """Amount per product id, for quantity badges on product lists."""
    return {line.product_id: line.amount for line in cart}


def cart_size(cart: Cart) -> int:
    """Number of distinct products in the cart."""
    return len(cart)


def cart_total(cart: Cart) -> Decimal:
    return round_money(sum((line.subtotal for line in cart), Decimal("0")))
