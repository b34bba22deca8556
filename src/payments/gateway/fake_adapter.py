"""Configurable fake payment gateway for development and testing.

This adapter simulates a hosted checkout processor without any external calls.
It can be configured at runtime to succeed or fail, making it useful for:
- Manual API testing via /checkout/gateway/configure
- Automated tests with predictable outcomes
- Development without real gateway credentials

Notifications use the same event names and payload shape as Stripe, signed
with an HMAC-SHA256 hex digest of the raw body in the `x-gateway-signature`
header.
"""

import hashlib
import hmac
import json
from uuid import uuid4

import structlog

from payments.gateway.extraction import CorrelationIdNotFound, EventEnvelope, extract_order_id
from payments.gateway.port import (
    CheckoutSession,
    PaymentError,
    PaymentGateway,
    PaymentNotification,
    PaymentOutcome,
    PaymentResult,
    line_items_for,
)
from payments.gateway.settings import DEFAULT_FAKE_WEBHOOK_SECRET, DEFAULT_WEBSITE_URL

logger = structlog.get_logger(__name__)

SIGNATURE_HEADER = "x-gateway-signature"

PAYMENT_SUCCEEDED = "payment_intent.succeeded"
PAYMENT_FAILED = "payment_intent.payment_failed"

_OUTCOMES = {
    PAYMENT_SUCCEEDED: PaymentOutcome.PAID,
    PAYMENT_FAILED: PaymentOutcome.FAILED,
}


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(
        self,
        webhook_secret: str = DEFAULT_FAKE_WEBHOOK_SECRET,
        website_url: str = DEFAULT_WEBSITE_URL,
    ) -> None:
        self.webhook_secret = webhook_secret
        self.website_url = website_url.rstrip("/")
        self.should_succeed: bool = True
        self.failure_reason: str = "Gateway unavailable"
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Gateway unavailable") -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    # -------------------------------------------------------------------
    # Checkout sessions
    # -------------------------------------------------------------------
    def create_checkout_session(self, order) -> CheckoutSession:
        order_id = str(order.id)
        line_items = line_items_for(order)
        if not line_items:
            raise PaymentError(f"Order {order_id} has no items")
        self.calls.append(
            {
                "method": "create_checkout_session",
                "order_id": order_id,
                "line_items": line_items,
            }
        )

        if not self.should_succeed:
            raise PaymentError(self.failure_reason)

        session_id = f"fake_cs_{uuid4().hex[:12]}"
        return CheckoutSession(
            order_id=order_id,
            checkout_url=f"{self.website_url}/fake-checkout/{session_id}?orderId={order_id}",
            session_id=session_id,
            line_items=line_items,
        )

    # -------------------------------------------------------------------
    # Notifications
    # -------------------------------------------------------------------
    def sign(self, payload: str) -> str:
        return hmac.new(self.webhook_secret.encode(), payload.encode(), hashlib.sha256).hexdigest()

    def build_notification(self, event_type: str, order_id: str | None) -> PaymentNotification:
        """Build a correctly signed notification, as the processor would send it."""
        metadata = {"order_id": str(order_id)} if order_id is not None else {}
        payload = json.dumps(
            {
                "id": f"evt_{uuid4().hex[:12]}",
                "type": event_type,
                "data": {"object": {"id": f"pi_{uuid4().hex[:12]}", "metadata": metadata}},
            }
        )
        return PaymentNotification(payload=payload, headers={SIGNATURE_HEADER: self.sign(payload)})

    def parse_notification(self, notification: PaymentNotification) -> PaymentResult | None:
        signature = notification.header(SIGNATURE_HEADER)
        if not signature or not hmac.compare_digest(signature, self.sign(notification.payload)):
            raise PaymentError("invalid signature")

        try:
            event = json.loads(notification.payload)
            event_type = event["type"]
        except (ValueError, KeyError, TypeError) as exc:
            raise PaymentError("invalid payload") from exc
        if not isinstance(event_type, str):
            raise PaymentError("invalid payload")

        outcome = _OUTCOMES.get(event_type)
        if outcome is None:
            logger.info("Gateway event ignored", event_type=event_type)
            return None

        data = event.get("data")
        data_object = data.get("object") if isinstance(data, dict) else None
        envelope = EventEnvelope(event_type=event_type, data_object=data_object, raw_payload=notification.payload)
        try:
            order_id = extract_order_id(envelope)
        except CorrelationIdNotFound:
            logger.warning("Gateway event carries no order id", event_type=event_type)
            return None

        return PaymentResult(order_id=order_id, outcome=outcome)
