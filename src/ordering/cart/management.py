"""Cart management: commands and handler.

Handles cart creation and clearing. ClearCart is idempotent: the checkout
workflow issues it once a payment session exists, and a repeated clear of an
already-empty cart succeeds without raising events.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.cart.cart import ShoppingCart
from ordering.domain import ordering


@ordering.command(part_of="ShoppingCart")
class CreateCart:
    """Create a new shopping cart for a customer."""

    customer_id = Identifier(required=True)
    currency = String(max_length=3, default="USD")


@ordering.command(part_of="ShoppingCart")
class ClearCart:
    """Remove every item from a cart."""

    cart_id = Identifier(required=True)


@ordering.command_handler(part_of=ShoppingCart)
class ManageCartHandler:
    @handle(CreateCart)
    def create_cart(self, command):
        cart = ShoppingCart.create(
            customer_id=command.customer_id,
            currency=command.currency or "USD",
        )
        current_domain.repository_for(ShoppingCart).add(cart)
        return str(cart.id)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        if cart.clear():
            repo.add(cart)
