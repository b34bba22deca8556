import hashlib
import hmac
import json
import time

import pytest
from ordering.cart.cart import ShoppingCart
from ordering.order.order import Order
from payments.gateway.fake_adapter import FakeGateway
from payments.gateway.stripe_adapter import StripeGateway

STRIPE_WEBHOOK_SECRET = "whsec_test_secret"


@pytest.fixture()
def order():
    cart = ShoppingCart.create(customer_id="cust-001")
    cart.add_item(product_id="prod-A", product_name="Keyboard", quantity=2, unit_price=19.99)
    cart.add_item(product_id="prod-B", product_name="Mouse", quantity=1, unit_price=5.0)
    return Order.create_from_cart(cart, customer_id="cust-001")


@pytest.fixture()
def fake_gateway():
    return FakeGateway(webhook_secret="whsec_test", website_url="http://shop.test/")


@pytest.fixture()
def stripe_gateway():
    return StripeGateway(
        api_key="sk_test_123",
        webhook_secret=STRIPE_WEBHOOK_SECRET,
        website_url="https://shop.example.com",
    )


@pytest.fixture()
def stripe_signature():
    """Sign a raw body the way Stripe does for the `stripe-signature` header."""

    def _sign(payload, secret=STRIPE_WEBHOOK_SECRET):
        timestamp = int(time.time())
        digest = hmac.new(secret.encode(), f"{timestamp}.{payload}".encode(), hashlib.sha256).hexdigest()
        return f"t={timestamp},v1={digest}"

    return _sign


@pytest.fixture()
def stripe_event(stripe_signature):
    """Build a Stripe event body and a valid `stripe-signature` header for it."""

    def _stripe_event(event_type, data_object, secret=STRIPE_WEBHOOK_SECRET):
        payload = json.dumps(
            {
                "id": "evt_test_1",
                "object": "event",
                "type": event_type,
                "data": {"object": data_object},
            }
        )
        return payload, stripe_signature(payload, secret=secret)

    return _stripe_event
