"""Order placement and discard: commands and handler.

PlaceOrder materializes a PENDING order from a cart. DiscardOrder is the
checkout workflow's compensating action: it hard-deletes an order whose
payment session could not be established.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from ordering.cart.cart import ShoppingCart
from ordering.checkout.errors import CartEmptyError, CartNotFoundError
from ordering.domain import ordering
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class PlaceOrder:
    """Place a payment-pending order from the contents of a cart."""

    cart_id = Identifier(required=True)
    customer_id = Identifier(required=True)


@ordering.command(part_of="Order")
class DiscardOrder:
    """Delete an order that never got a payment session."""

    order_id = Identifier(required=True)


@ordering.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        try:
            cart = current_domain.repository_for(ShoppingCart).get(command.cart_id)
        except ObjectNotFoundError as exc:
            raise CartNotFoundError(command.cart_id) from exc

        if cart.is_empty:
            raise CartEmptyError(command.cart_id)

        order = Order.create_from_cart(cart, customer_id=command.customer_id)
        current_domain.repository_for(Order).add(order)

        logger.info(
            "Order placed from cart",
            order_id=str(order.id),
            cart_id=str(command.cart_id),
            customer_id=str(command.customer_id),
            item_count=len(order.items),
            total_price=order.total_price,
        )
        return str(order.id)

    @handle(DiscardOrder)
    def discard_order(self, command):
        repo = current_domain.repository_for(Order)
        try:
            order = repo.get(command.order_id)
        except ObjectNotFoundError:
            logger.info("Order already absent, nothing to discard", order_id=str(command.order_id))
            return

        repo._dao.delete(order)
        logger.info("Order discarded", order_id=str(command.order_id))
