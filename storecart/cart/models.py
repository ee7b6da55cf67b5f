"""Cart models with Decimal-based pricing.

Both classes are frozen: every change produces a new Cart, so a snapshot
handed to a caller never changes under them.
"""
import json
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Iterator, Optional, Tuple

from storecart.services.models import Product
from storecart.services.money import multiply, round_money, to_decimal


@dataclass(frozen=True)
class CartItem:
    """Single line item: a product and how many units of it are in the cart."""
    id: int
    title: str
    price: Decimal
    image: str = ""
    amount: int = 1

    def __post_init__(self):
        # Normalize numeric fields
        object.__setattr__(self, "id", int(self.id))
        object.__setattr__(self, "price", to_decimal(self.price))
        object.__setattr__(self, "amount", int(self.amount))
        if self.amount < 1:
            raise ValueError(f"amount must be >= 1, got {self.amount}")

    @property
    def subtotal(self) -> Decimal:
        """Price for all units of this item."""
        return round_money(multiply(self.price, self.amount))

    def with_amount(self, amount: int) -> "CartItem":
        return replace(self, amount=amount)

    @classmethod
    def from_product(cls, product: Product, amount: int = 1) -> "CartItem":
        return cls(
            id=product.id,
            title=product.title,
            price=product.price,
            image=product.image,
            amount=amount,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "title": self.title,
            "price": str(self.price),
            "image": self.image,
            "amount": self.amount,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartItem":
        """Create from dictionary."""
        return cls(
            id=int(data["id"]),
            title=data["title"],
            price=to_decimal(data["price"]),
            image=data.get("image") or data.get("imageUrl") or "",
            amount=int(data["amount"]),
        )


@dataclass(frozen=True)
class Cart:
    """Ordered collection of line items, at most one per product id."""
    items: Tuple[CartItem, ...] = field(default_factory=tuple)

    def __post_init__(self):
        items = tuple(self.items)
        ids = [item.id for item in items]
        if len(ids) != len(set(ids)):
            raise ValueError("cart contains duplicate product ids")
        object.__setattr__(self, "items", items)

    def __iter__(self) -> Iterator[CartItem]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __contains__(self, product_id: object) -> bool:
        return self.find(product_id) is not None

    def find(self, product_id) -> Optional[CartItem]:
        """First item with the given id, or None."""
        return next((item for item in self.items if item.id == product_id), None)

    @property
    def total_items(self) -> int:
        """Total number of units in cart."""
        return sum(item.amount for item in self.items)

    @property
    def subtotal(self) -> Decimal:
        """Sum of line subtotals."""
        return sum((item.subtotal for item in self.items), Decimal("0"))

    def with_item(self, item: CartItem) -> "Cart":
        """New cart with ``item`` appended."""
        return Cart(items=self.items + (item,))

    def with_amount(self, product_id: int, amount: int) -> "Cart":
        """New cart with the amount of one item replaced; order is kept."""
        return Cart(items=tuple(
            item.with_amount(amount) if item.id == product_id else item
            for item in self.items
        ))

    def without(self, product_id: int) -> "Cart":
        """New cart without the item for ``product_id``."""
        return Cart(items=tuple(item for item in self.items if item.id != product_id))

    def to_list(self) -> list:
        return [item.to_dict() for item in self.items]

    def to_json(self) -> str:
        """Serialize for storage: a JSON array of product records."""
        return json.dumps(self.to_list(), ensure_ascii=False)

    @classmethod
    def from_list(cls, data: list) -> "Cart":
        if not isinstance(data, list):
            raise TypeError(f"expected a list of cart items, got {type(data).__name__}")
        return cls(items=tuple(CartItem.from_dict(item) for item in data))

    @classmethod
    def from_json(cls, raw: str) -> "Cart":
        """
        Decode a stored snapshot.

        Raises:
            json.JSONDecodeError, KeyError, TypeError, ValueError on malformed data
        """
        return cls.from_list(json.loads(raw))
