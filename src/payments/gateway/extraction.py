"""Order-id extraction from payment notification payloads.

The processor's payload shape varies with the delivery path and SDK version,
so the correlation id is looked up by an ordered chain of strategies. Each
strategy returns the id or None; the first hit wins. When every strategy
misses, `extract_order_id` raises CorrelationIdNotFound.
"""

import json
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

CORRELATION_FIELD = "order_id"

_ORDER_ID_PATTERN = re.compile(r'"order_id"\s*:\s*"([^"]+)"')


class CorrelationIdNotFound(Exception):
    """No strategy could locate the order id in the notification."""


@dataclass(frozen=True)
class EventEnvelope:
    """A verified notification, as seen by the extraction strategies.

    `data_object` is the event's `data.object`, either as deserialized by the
    processor SDK or as a plain mapping; it may be None when deserialization
    failed. `raw_payload` is the verified request body.
    """

    event_type: str
    data_object: Any
    raw_payload: str


Strategy = Callable[[EventEnvelope], str | None]


def _clean(value) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def from_data_object(envelope: EventEnvelope) -> str | None:
    """Read `metadata.order_id` from the deserialized data object."""
    obj = envelope.data_object
    if obj is None:
        return None
    try:
        return _clean(obj["metadata"][CORRELATION_FIELD])
    except (KeyError, TypeError, AttributeError):
        return None


def from_raw_json(envelope: EventEnvelope) -> str | None:
    """Read `data.object.metadata.order_id` from the raw JSON body."""
    try:
        body = json.loads(envelope.raw_payload)
        return _clean(body["data"]["object"]["metadata"][CORRELATION_FIELD])
    except (ValueError, KeyError, TypeError):
        return None


def from_text_scan(envelope: EventEnvelope) -> str | None:
    """Scan the raw body for an `"order_id": "<value>"` pair inside metadata."""
    payload = envelope.raw_payload or ""
    if '"metadata"' not in payload:
        return None
    match = _ORDER_ID_PATTERN.search(payload)
    return _clean(match.group(1)) if match else None


DEFAULT_STRATEGIES: tuple[Strategy, ...] = (from_data_object, from_raw_json, from_text_scan)


def extract_order_id(envelope: EventEnvelope, strategies: Sequence[Strategy] = DEFAULT_STRATEGIES) -> str:
    for strategy in strategies:
        order_id = strategy(envelope)
        if order_id is not None:
            return order_id
    raise CorrelationIdNotFound(f"No {CORRELATION_FIELD} found in {envelope.event_type} event")
