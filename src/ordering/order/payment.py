"""Order payment reconciliation: command and handler.

Applies a payment outcome reported by the payment processor to an order.
The handler is idempotent: a redelivered or contradicting outcome for an
order that is already PAID or FAILED changes nothing and raises no events.
"""

from enum import Enum

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order, OrderStatus

logger = structlog.get_logger(__name__)


class NotificationOutcome(Enum):
    APPLIED = "applied"
    ALREADY_SETTLED = "already_settled"
    ORDER_NOT_FOUND = "order_not_found"
    IGNORED = "ignored"


@ordering.command(part_of="Order")
class ReconcilePayment:
    order_id = Identifier(required=True)
    payment_status = String(
        required=True,
        choices=OrderStatus,
    )


@ordering.command_handler(part_of=Order)
class ReconcilePaymentHandler:
    @handle(ReconcilePayment)
    def reconcile_payment(self, command):
        repo = current_domain.repository_for(Order)
        try:
            order = repo.get(command.order_id)
        except ObjectNotFoundError:
            # Unknown correlation ids are an outcome, never an error.
            logger.warning(
                "Payment notification references an unknown order",
                order_id=str(command.order_id),
                payment_status=command.payment_status,
            )
            return NotificationOutcome.ORDER_NOT_FOUND

        previous_status = order.status
        if not order.transition_to(OrderStatus(command.payment_status)):
            logger.info(
                "Order already settled, payment notification ignored",
                order_id=str(command.order_id),
                status=previous_status,
                reported_status=command.payment_status,
            )
            return NotificationOutcome.ALREADY_SETTLED

        repo.add(order)
        logger.info(
            "Order status updated from payment notification",
            order_id=str(command.order_id),
            previous_status=previous_status,
            status=order.status,
        )
        return NotificationOutcome.APPLIED
