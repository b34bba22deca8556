"""Checkout workflow: cart to payment-pending order, and back from the processor.

Checkout runs as a sequence of short units of work rather than one long one,
so that no database transaction stays open across the remote call:

    1. PlaceOrder        → order persisted as Pending
    2. gateway session   → remote call, outside any unit of work
    3a. ClearCart        → on success
    3b. DiscardOrder     → on any session failure; the cart is left untouched

Payment notifications are authenticated and parsed by the gateway before any
order lookup, then applied through ReconcilePayment under the order's lock.
"""

from dataclasses import dataclass

import structlog
from protean.utils.globals import current_domain

from ordering.auth import get_current_customer
from ordering.cart.management import ClearCart
from ordering.order.creation import DiscardOrder, PlaceOrder
from ordering.order.locks import OrderLocks, order_locks
from ordering.order.order import Order
from ordering.order.payment import NotificationOutcome, ReconcilePayment
from ordering.utils.logging import bound_to
from payments.gateway import get_gateway
from payments.gateway.port import PaymentGateway, PaymentNotification

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CheckoutResult:
    order_id: str
    checkout_url: str


class CheckoutService:
    """Coordinates the cart, the order and the payment gateway."""

    def __init__(self, gateway: PaymentGateway | None = None, locks: OrderLocks | None = None) -> None:
        self._gateway = gateway
        self.locks = locks or order_locks

    @property
    def gateway(self) -> PaymentGateway:
        return self._gateway or get_gateway()

    def checkout(self, cart_id) -> CheckoutResult:
        """Turn the cart into a Pending order and open a payment session for it.

        Raises CartNotFoundError / CartEmptyError before anything is persisted,
        and re-raises any session failure (normally PaymentError) after the
        order has been discarded.
        """
        customer_id = get_current_customer()

        with bound_to(cart_id=cart_id):
            order_id = current_domain.process(
                PlaceOrder(cart_id=cart_id, customer_id=customer_id),
                asynchronous=False,
            )
            with bound_to(order_id=order_id):
                order = current_domain.repository_for(Order).get(order_id)

                try:
                    session = self.gateway.create_checkout_session(order)
                except Exception as exc:
                    logger.warning("Payment session failed, discarding order", error=str(exc))
                    with self.locks.hold(order_id):
                        current_domain.process(DiscardOrder(order_id=order_id), asynchronous=False)
                    raise

                current_domain.process(ClearCart(cart_id=cart_id), asynchronous=False)
                logger.info("Checkout session opened")

        return CheckoutResult(order_id=order_id, checkout_url=session.checkout_url)

    def handle_notification(self, notification: PaymentNotification) -> NotificationOutcome:
        """Apply a processor notification to its order.

        Raises PaymentError if the notification cannot be authenticated; no
        order is looked up in that case.
        """
        result = self.gateway.parse_notification(notification)
        if result is None:
            return NotificationOutcome.IGNORED

        with bound_to(order_id=result.order_id), self.locks.hold(result.order_id):
            return current_domain.process(
                ReconcilePayment(order_id=result.order_id, payment_status=result.outcome.value),
                asynchronous=False,
            )
