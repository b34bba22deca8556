"""Stripe payment gateway adapter.

Creates hosted Checkout Sessions with the stripe-python SDK and verifies
webhook deliveries with Stripe's signing secret. The order id travels as
`metadata.order_id` on both the session and its PaymentIntent, so that
`payment_intent.*` events can be correlated back to the order.
"""

import stripe
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

logger = structlog.get_logger(__name__)

SIGNATURE_HEADER = "stripe-signature"

PAYMENT_SUCCEEDED = "payment_intent.succeeded"
PAYMENT_FAILED = "payment_intent.payment_failed"

_OUTCOMES = {
    PAYMENT_SUCCEEDED: PaymentOutcome.PAID,
    PAYMENT_FAILED: PaymentOutcome.FAILED,
}


class StripeGateway(PaymentGateway):
    """Production Stripe gateway adapter."""

    def __init__(self, api_key: str, webhook_secret: str, website_url: str, currency: str = "usd") -> None:
        self.api_key = api_key
        self.webhook_secret = webhook_secret
        self.website_url = website_url.rstrip("/")
        self.currency = currency.lower()

    def success_url(self, order_id: str) -> str:
        return f"{self.website_url}/checkout-success?orderId={order_id}"

    @property
    def cancel_url(self) -> str:
        return f"{self.website_url}/checkout-cancel"

    def create_checkout_session(self, order) -> CheckoutSession:
        order_id = str(order.id)
        line_items = line_items_for(order)
        if not line_items:
            raise PaymentError(f"Order {order_id} has no items")
        metadata = {"order_id": order_id}

        try:
            session = stripe.checkout.Session.create(
                api_key=self.api_key,
                mode="payment",
                success_url=self.success_url(order_id),
                cancel_url=self.cancel_url,
                metadata=metadata,
                payment_intent_data={"metadata": metadata},
                line_items=[
                    {
                        "quantity": item.quantity,
                        "price_data": {
                            "currency": self.currency,
                            "unit_amount": item.unit_amount_cents,
                            "product_data": {"name": item.name},
                        },
                    }
                    for item in line_items
                ],
            )
        except stripe.StripeError as exc:
            logger.error("Stripe checkout session creation failed", order_id=order_id, error=str(exc))
            raise PaymentError(str(exc) or "Stripe checkout session creation failed") from exc

        checkout_url = getattr(session, "url", None)
        if not checkout_url:
            raise PaymentError("Stripe returned a checkout session without a URL")

        logger.info("Stripe checkout session created", order_id=order_id, session_id=session.id)
        return CheckoutSession(
            order_id=order_id,
            checkout_url=checkout_url,
            session_id=session.id,
            line_items=line_items,
        )

    def parse_notification(self, notification: PaymentNotification) -> PaymentResult | None:
        signature = notification.header(SIGNATURE_HEADER)
        if not signature:
            raise PaymentError("invalid signature")

        try:
            event = stripe.Webhook.construct_event(notification.payload, signature, self.webhook_secret)
        except stripe.SignatureVerificationError as exc:
            raise PaymentError("invalid signature") from exc
        except ValueError as exc:
            raise PaymentError("invalid payload") from exc

        event_type = event["type"] if "type" in event else None
        if not isinstance(event_type, str):
            raise PaymentError("invalid payload")

        outcome = _OUTCOMES.get(event_type)
        if outcome is None:
            logger.info("Stripe event ignored", event_type=event_type)
            return None

        try:
            data_object = event["data"]["object"]
        except (KeyError, TypeError):
            data_object = None

        envelope = EventEnvelope(event_type=event_type, data_object=data_object, raw_payload=notification.payload)
        try:
            order_id = extract_order_id(envelope)
        except CorrelationIdNotFound:
            logger.warning(
                "Stripe event carries no order id",
                event_type=event_type,
                event_id=getattr(event, "id", None),
            )
            return None

        return PaymentResult(order_id=order_id, outcome=outcome)
