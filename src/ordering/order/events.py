"""Domain events for the Order aggregate.

Events are versioned, immutable facts. They are raised only when a state
change is actually applied, so a redelivered payment notification never
produces a second OrderPaid or OrderPaymentFailed.
"""

from protean.fields import DateTime, Float, Identifier, String, Text

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """An order was placed from a shopping cart and awaits payment."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    cart_id = Identifier()
    items = Text(required=True)  # JSON: list of item snapshots
    total_price = Float(required=True)
    currency = String(max_length=3, default="USD")
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderPaid:
    """The payment processor reported a successful payment for the order."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    total_price = Float(required=True)
    paid_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderPaymentFailed:
    """The payment processor reported a failed payment for the order."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    failed_at = DateTime(required=True)
