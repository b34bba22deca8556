import pytest
from ordering.cart.items import AddToCart
from ordering.cart.management import CreateCart
from ordering.checkout.service import CheckoutService
from ordering.order.locks import OrderLocks
from payments.gateway import set_gateway
from payments.gateway.fake_adapter import FakeGateway
from protean import current_domain


@pytest.fixture()
def customer_id():
    return "cust-001"


@pytest.fixture()
def fake_gateway():
    gateway = FakeGateway(webhook_secret="whsec_test", website_url="http://shop.test")
    set_gateway(gateway)
    return gateway


@pytest.fixture()
def checkout_service(fake_gateway):
    return CheckoutService(gateway=fake_gateway, locks=OrderLocks(timeout=5))


@pytest.fixture()
def make_cart():
    """Create a persisted cart holding the given (product_id, name, quantity, unit_price) lines."""

    def _make_cart(customer_id="cust-001", lines=()):
        cart_id = current_domain.process(CreateCart(customer_id=customer_id), asynchronous=False)
        for product_id, product_name, quantity, unit_price in lines:
            current_domain.process(
                AddToCart(
                    cart_id=cart_id,
                    product_id=product_id,
                    product_name=product_name,
                    quantity=quantity,
                    unit_price=unit_price,
                ),
                asynchronous=False,
            )
        return cart_id

    return _make_cart
