"""Order aggregate (CQRS): a purchase placed at checkout.

The Order is a state-stored aggregate rather than an event-sourced one: an
order whose payment session could not be established is hard-deleted, and
that has no place in an append-only stream.

State Machine:
    PENDING → PAID
    PENDING → FAILED
    PAID, FAILED: terminal (further payment outcomes are ignored)
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from ordering.domain import ordering
from ordering.order.events import OrderPaid, OrderPaymentFailed, OrderPlaced


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "Pending"
    PAID = "Paid"
    FAILED = "Failed"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PAID, OrderStatus.FAILED},
    OrderStatus.PAID: set(),  # Terminal
    OrderStatus.FAILED: set(),  # Terminal
}

_TERMINAL_STATES = {OrderStatus.PAID, OrderStatus.FAILED}


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    """A line item captured from the cart at checkout.

    The unit price is a snapshot: later catalogue price changes never reach a
    placed order.
    """

    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)

    @property
    def line_total(self) -> float:
        return self.unit_price * self.quantity


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    customer_id = Identifier(required=True)
    cart_id = Identifier()
    status = String(
        choices=OrderStatus,
        default=OrderStatus.PENDING.value,
    )
    items = HasMany(OrderItem)
    total_price = Float(default=0.0, min_value=0.0)
    currency = String(max_length=3, default="USD")
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create_from_cart(cls, cart, customer_id):
        """Place a PENDING order from the cart's current contents.

        Every cart line is copied with its current unit price; the cart itself
        is left untouched (clearing it is the checkout workflow's job, and only
        once a payment session exists).
        """
        if not cart.items:
            raise ValidationError({"cart": ["Cannot place an order from an empty cart"]})

        now = datetime.now(UTC)
        items = [
            OrderItem(
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity,
                unit_price=item.unit_price,
            )
            for item in cart.items
        ]
        total_price = sum(item.line_total for item in items)

        order = cls(
            customer_id=customer_id,
            cart_id=str(cart.id),
            status=OrderStatus.PENDING.value,
            items=items,
            total_price=total_price,
            currency=cart.currency or "USD",
            created_at=now,
            updated_at=now,
        )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                customer_id=str(customer_id),
                cart_id=str(cart.id),
                items=json.dumps(
                    [
                        {
                            "product_id": str(item.product_id),
                            "product_name": item.product_name,
                            "quantity": item.quantity,
                            "unit_price": item.unit_price,
                        }
                        for item in items
                    ]
                ),
                total_price=total_price,
                currency=order.currency,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def is_placed_by(self, customer_id) -> bool:
        return customer_id is not None and str(self.customer_id) == str(customer_id)

    @property
    def is_settled(self) -> bool:
        return OrderStatus(self.status) in _TERMINAL_STATES

    # -------------------------------------------------------------------
    # Status transitions
    # -------------------------------------------------------------------
    def transition_to(self, new_status: OrderStatus) -> bool:
        """Apply a payment outcome to the order.

        Returns False, leaving the order untouched, when the order is already
        PAID or FAILED. Processors redeliver and reorder notifications, so a
        late or contradicting outcome for a settled order is expected traffic.
        """
        current = OrderStatus(self.status)
        if current in _TERMINAL_STATES:
            return False

        if new_status not in _VALID_TRANSITIONS[current]:
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {new_status.value}"]})

        now = datetime.now(UTC)
        self.status = new_status.value
        self.updated_at = now

        if new_status == OrderStatus.PAID:
            self.raise_(
                OrderPaid(
                    order_id=str(self.id),
                    customer_id=str(self.customer_id),
                    total_price=self.total_price,
                    paid_at=now,
                )
            )
        else:
            self.raise_(
                OrderPaymentFailed(
                    order_id=str(self.id),
                    customer_id=str(self.customer_id),
                    failed_at=now,
                )
            )
        return True
