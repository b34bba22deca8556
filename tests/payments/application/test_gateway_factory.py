"""Tests for gateway selection from the environment."""

import pytest
from payments.gateway import build_gateway, get_gateway, reset_gateway, set_gateway
from payments.gateway.fake_adapter import FakeGateway
from payments.gateway.settings import GatewaySettings
from payments.gateway.stripe_adapter import StripeGateway


class TestGatewaySettings:
    def test_defaults(self, monkeypatch):
        for name in ("PAYMENT_GATEWAY", "WEBSITE_URL", "FAKE_GATEWAY_WEBHOOK_SECRET"):
            monkeypatch.delenv(name, raising=False)

        settings = GatewaySettings.from_env()
        assert settings.gateway == "fake"
        assert settings.website_url == "http://localhost:8000"
        assert settings.fake_webhook_secret == "whsec_fake"

    def test_stripe_requires_credentials(self, monkeypatch):
        monkeypatch.setenv("PAYMENT_GATEWAY", "stripe")
        monkeypatch.delenv("STRIPE_SECRET_KEY", raising=False)
        monkeypatch.delenv("STRIPE_WEBHOOK_SECRET", raising=False)
        with pytest.raises(ValueError):
            GatewaySettings.from_env()

    def test_unknown_gateway(self, monkeypatch):
        monkeypatch.setenv("PAYMENT_GATEWAY", "paypal")
        with pytest.raises(ValueError):
            GatewaySettings.from_env()

    def test_website_url_trailing_slash_is_dropped(self, monkeypatch):
        monkeypatch.setenv("PAYMENT_GATEWAY", "fake")
        monkeypatch.setenv("WEBSITE_URL", "https://shop.example.com/")
        assert GatewaySettings.from_env().website_url == "https://shop.example.com"


class TestGatewayFactory:
    def test_get_gateway_returns_fake_by_default(self, monkeypatch):
        monkeypatch.setenv("PAYMENT_GATEWAY", "fake")
        reset_gateway()
        assert isinstance(get_gateway(), FakeGateway)

    def test_get_gateway_is_cached(self, monkeypatch):
        monkeypatch.setenv("PAYMENT_GATEWAY", "fake")
        reset_gateway()
        assert get_gateway() is get_gateway()

    def test_stripe_from_environment(self, monkeypatch):
        monkeypatch.setenv("PAYMENT_GATEWAY", "stripe")
        monkeypatch.setenv("STRIPE_SECRET_KEY", "sk_test_123")
        monkeypatch.setenv("STRIPE_WEBHOOK_SECRET", "whsec_456")
        monkeypatch.setenv("WEBSITE_URL", "https://shop.example.com")
        reset_gateway()

        gateway = get_gateway()
        assert isinstance(gateway, StripeGateway)
        assert gateway.api_key == "sk_test_123"
        assert gateway.webhook_secret == "whsec_456"
        assert gateway.website_url == "https://shop.example.com"

    def test_build_fake_uses_configured_secret(self):
        settings = GatewaySettings(gateway="fake", website_url="http://shop.test", fake_webhook_secret="whsec_x")
        gateway = build_gateway(settings)
        assert gateway.webhook_secret == "whsec_x"

    def test_set_gateway_overrides(self):
        custom = FakeGateway()
        custom.configure(should_succeed=False)
        set_gateway(custom)
        assert get_gateway() is custom

    def test_reset_gateway(self, monkeypatch):
        monkeypatch.setenv("PAYMENT_GATEWAY", "fake")
        custom = FakeGateway()
        custom.configure(should_succeed=False)
        set_gateway(custom)
        reset_gateway()
        assert get_gateway().should_succeed is True
