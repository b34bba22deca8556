"""Shopping Cart aggregate (CQRS): the priced selection a customer checks out.

Each cart line carries the unit price observed when the product was added;
checkout snapshots those prices onto the order. Clearing the cart after a
successful checkout is idempotent.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from ordering.cart.events import CartCleared, CartItemAdded, CartItemRemoved
from ordering.domain import ordering


@ordering.entity(part_of="ShoppingCart")
class CartItem:
    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    added_at = DateTime()


@ordering.aggregate
class ShoppingCart:
    customer_id = Identifier()
    items = HasMany(CartItem)
    currency = String(max_length=3, default="USD")
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, customer_id=None, currency="USD"):
        now = datetime.now(UTC)
        return cls(
            customer_id=customer_id,
            currency=currency,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def total_price(self) -> float:
        return sum(item.unit_price * item.quantity for item in self.items)

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product_id, product_name, quantity, unit_price):
        """Add a product to the cart, or increase its quantity if already present.

        The line keeps the most recently observed unit price.
        """
        existing = next((i for i in self.items if str(i.product_id) == str(product_id)), None)

        now = datetime.now(UTC)

        if existing:
            existing.quantity += quantity
            existing.unit_price = unit_price
            item_id = str(existing.id)
        else:
            item = CartItem(
                product_id=product_id,
                product_name=product_name,
                quantity=quantity,
                unit_price=unit_price,
                added_at=now,
            )
            self.add_items(item)
            item_id = str(item.id)

        self.updated_at = now

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                item_id=item_id,
                product_id=str(product_id),
                quantity=quantity,
                unit_price=unit_price,
            )
        )
        return item_id

    def remove_item(self, item_id):
        """Remove an item from the cart."""
        item = next((i for i in self.items if str(i.id) == str(item_id)), None)
        if item is None:
            raise ValidationError({"item_id": ["Item not found in cart"]})

        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                item_id=str(item_id),
            )
        )

    def clear(self) -> int:
        """Remove every item. Clearing an empty cart is a no-op.

        Returns the number of items removed.
        """
        removed = list(self.items)
        if not removed:
            return 0

        for item in removed:
            self.remove_items(item)
        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            CartCleared(
                cart_id=str(self.id),
                items_removed=len(removed),
                cleared_at=now,
            )
        )
        return len(removed)
