"""Ordering bounded context: Checkout and Payment Reconciliation.

Handles shopping carts, order placement at checkout, and reconciliation of
asynchronous payment notifications onto order status.
"""

import structlog
from protean.domain import Domain

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)
