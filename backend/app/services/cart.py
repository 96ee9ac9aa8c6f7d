"""In-memory cart for the POS screen."""

import uuid
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from uuid import UUID

CENTS = Decimal("0.01")


def line_total(unit_price: Decimal, quantity: int) -> Decimal:
    return (Decimal(unit_price) * quantity).quantize(CENTS, rounding=ROUND_HALF_UP)


def cart_total(lines) -> Decimal:
    """Sum of unit_price * quantity over anything exposing those two attributes."""
    return sum((line_total(line.unit_price, line.quantity) for line in lines), Decimal("0.00"))


@dataclass
class CartItem:
    name: str
    unit_price: Decimal
    quantity: int = 1
    product_id: UUID | None = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def total_price(self) -> Decimal:
        return line_total(self.unit_price, self.quantity)


@dataclass
class Cart:
    items: list[CartItem] = field(default_factory=list)

    def add_product(self, product) -> CartItem:
        """Add one unit of ``product``; repeated adds bump the existing line."""
        for item in self.items:
            if item.product_id is not None and item.product_id == product.id:
                item.quantity += 1
                return item
        item = CartItem(name=product.name, unit_price=Decimal(product.price), product_id=product.id)
        self.items.append(item)
        return item

    def add_custom_item(self, name: str, unit_price: Decimal) -> CartItem:
        if not name:
            raise ValueError("custom item needs a name")
        if unit_price is None or Decimal(unit_price) < 0:
            raise ValueError("custom item needs a non-negative price")
        item = CartItem(name=name, unit_price=Decimal(unit_price))
        self.items.append(item)
        return item

    def update_quantity(self, item_id: str, change: int) -> None:
        """Apply ``change``; a line reaching zero is dropped."""
        for item in list(self.items):
            if item.id == item_id:
                item.quantity = max(0, item.quantity + change)
                if item.quantity == 0:
                    self.items.remove(item)
                return
        raise KeyError(item_id)

    def remove(self, item_id: str) -> None:
        self.items = [item for item in self.items if item.id != item_id]

    def clear(self) -> None:
        self.items.clear()

    @property
    def total(self) -> Decimal:
        return cart_total(self.items)

    def is_empty(self) -> bool:
        return not self.items

    def to_sale_lines(self) -> list[dict]:
        """Payload lines for the sale endpoint."""
        return [
            {
                "name": item.name,
                "unit_price": item.unit_price,
                "quantity": item.quantity,
                "product_id": item.product_id,
            }
            for item in self.items
        ]
