"""Payment gateway port (abstract interface).

Defines the contract that all payment gateway adapters must implement.
This enables swapping between FakeGateway (dev/test) and StripeGateway
(production) without changing the checkout workflow.

Adapters never return a partially created session: any remote, transport or
validation failure surfaces as PaymentError.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum


class PaymentError(Exception):
    """The interaction with the payment processor failed."""


class PaymentOutcome(Enum):
    PAID = "Paid"
    FAILED = "Failed"


@dataclass(frozen=True)
class CheckoutLineItem:
    """A purchasable line passed to the processor."""

    name: str
    quantity: int
    unit_price: float

    @property
    def unit_amount_cents(self) -> int:
        return int(round(self.unit_price * 100))


@dataclass(frozen=True)
class CheckoutSession:
    """A remote checkout session created for an order.

    `order_id` is the correlation key the processor echoes back in payment
    notifications.
    """

    order_id: str
    checkout_url: str
    session_id: str | None = None
    line_items: tuple[CheckoutLineItem, ...] = ()


@dataclass(frozen=True)
class PaymentNotification:
    """An inbound, unauthenticated notification from the processor."""

    payload: str
    headers: Mapping[str, str] = field(default_factory=dict)

    def header(self, name: str) -> str | None:
        """Case-insensitive header lookup."""
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None


@dataclass(frozen=True)
class PaymentResult:
    """A payment outcome correlated to an order."""

    order_id: str
    outcome: PaymentOutcome


def line_items_for(order) -> tuple[CheckoutLineItem, ...]:
    """The order's items as processor line items, at their snapshotted price."""
    return tuple(
        CheckoutLineItem(
            name=item.product_name,
            quantity=item.quantity,
            unit_price=item.unit_price,
        )
        for item in order.items
    )


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def create_checkout_session(self, order) -> CheckoutSession:
        """Create a remote checkout session covering exactly the order's items.

        The session, and any charge it produces, is tagged with the order id.
        Raises PaymentError on failure.
        """
        ...

    @abstractmethod
    def parse_notification(self, notification: PaymentNotification) -> PaymentResult | None:
        """Authenticate and interpret a payment notification.

        Raises PaymentError if the notification cannot be authenticated.
        Returns None for event types the workflow does not act on, or when
        the order id cannot be located in a recognized event.
        """
        ...
