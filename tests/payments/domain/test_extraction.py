"""Tests for order-id extraction from notification payloads."""

import json

import pytest
from payments.gateway.extraction import (
    CorrelationIdNotFound,
    EventEnvelope,
    extract_order_id,
    from_data_object,
    from_raw_json,
    from_text_scan,
)


def _envelope(data_object=None, raw=None):
    if raw is None:
        raw = json.dumps({"type": "payment_intent.succeeded", "data": {"object": data_object}})
    return EventEnvelope(event_type="payment_intent.succeeded", data_object=data_object, raw_payload=raw)


class TestStrategies:
    def test_data_object(self):
        assert from_data_object(_envelope({"metadata": {"order_id": "ord-1"}})) == "ord-1"

    def test_data_object_missing_metadata(self):
        assert from_data_object(_envelope({"id": "pi_1"})) is None

    def test_data_object_absent(self):
        assert from_data_object(_envelope(None, raw="{}")) is None

    def test_blank_value_is_a_miss(self):
        assert from_data_object(_envelope({"metadata": {"order_id": "  "}})) is None

    def test_raw_json(self):
        raw = json.dumps({"data": {"object": {"metadata": {"order_id": "ord-2"}}}})
        assert from_raw_json(_envelope(None, raw=raw)) == "ord-2"

    def test_raw_json_unparseable(self):
        assert from_raw_json(_envelope(None, raw="{not json")) is None

    def test_text_scan(self):
        raw = '{"broken": [, "metadata": {"order_id" : "ord-3"}'
        assert from_text_scan(_envelope(None, raw=raw)) == "ord-3"

    def test_text_scan_requires_metadata(self):
        assert from_text_scan(_envelope(None, raw='{"order_id": "ord-3"}')) is None


class TestExtractOrderId:
    def test_first_hit_wins(self):
        raw = json.dumps({"data": {"object": {"metadata": {"order_id": "from-raw"}}}})
        envelope = _envelope({"metadata": {"order_id": "from-object"}}, raw=raw)
        assert extract_order_id(envelope) == "from-object"

    def test_falls_through_to_raw_json(self):
        raw = json.dumps({"data": {"object": {"metadata": {"order_id": "from-raw"}}}})
        assert extract_order_id(_envelope(None, raw=raw)) == "from-raw"

    def test_falls_through_to_text_scan(self):
        raw = '{"data": {"object": {"metadata": {"order_id": "from-text"}}}'
        assert extract_order_id(_envelope(None, raw=raw)) == "from-text"

    def test_custom_strategy_order(self):
        raw = json.dumps({"data": {"object": {"metadata": {"order_id": "from-raw"}}}})
        envelope = _envelope({"metadata": {"order_id": "from-object"}}, raw=raw)
        assert extract_order_id(envelope, strategies=[from_raw_json, from_data_object]) == "from-raw"

    def test_not_found(self):
        with pytest.raises(CorrelationIdNotFound):
            extract_order_id(_envelope({"metadata": {}}))
