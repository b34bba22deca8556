"""Payment gateway settings, read from the environment."""

import os
from dataclasses import dataclass

DEFAULT_WEBSITE_URL = "http://localhost:8000"
DEFAULT_FAKE_WEBHOOK_SECRET = "whsec_fake"

SUPPORTED_GATEWAYS = {"fake", "stripe"}


@dataclass(frozen=True)
class GatewaySettings:
    gateway: str
    website_url: str
    stripe_secret_key: str | None = None
    stripe_webhook_secret: str | None = None
    fake_webhook_secret: str = DEFAULT_FAKE_WEBHOOK_SECRET

    @classmethod
    def from_env(cls) -> "GatewaySettings":
        gateway = os.getenv("PAYMENT_GATEWAY", "fake").strip().lower()
        if gateway not in SUPPORTED_GATEWAYS:
            raise ValueError(f"Unsupported PAYMENT_GATEWAY {gateway!r}: expected one of {sorted(SUPPORTED_GATEWAYS)}")

        settings = cls(
            gateway=gateway,
            website_url=os.getenv("WEBSITE_URL", DEFAULT_WEBSITE_URL).rstrip("/"),
            stripe_secret_key=os.getenv("STRIPE_SECRET_KEY"),
            stripe_webhook_secret=os.getenv("STRIPE_WEBHOOK_SECRET"),
            fake_webhook_secret=os.getenv("FAKE_GATEWAY_WEBHOOK_SECRET", DEFAULT_FAKE_WEBHOOK_SECRET),
        )
        if gateway == "stripe" and not (settings.stripe_secret_key and settings.stripe_webhook_secret):
            raise ValueError("STRIPE_SECRET_KEY and STRIPE_WEBHOOK_SECRET are required when PAYMENT_GATEWAY=stripe")
        return settings
