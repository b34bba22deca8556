"""Checkout errors surfaced to the checkout caller.

Cart errors are client-correctable: they are raised before anything is
persisted. Payment processor failures are `payments.gateway.port.PaymentError`.
"""


class CheckoutError(Exception):
    """Base class for checkout input errors."""


class CartNotFoundError(CheckoutError):
    def __init__(self, cart_id) -> None:
        self.cart_id = str(cart_id)
        super().__init__(f"Cart {self.cart_id} not found")


class CartEmptyError(CheckoutError):
    def __init__(self, cart_id) -> None:
        self.cart_id = str(cart_id)
        super().__init__(f"Cart {self.cart_id} is empty")
