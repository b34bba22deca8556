"""Shared BDD fixtures and step definitions for the Ordering domain."""

import pytest
from ordering.order.order import Order
from protean import current_domain
from pytest_bdd import given, parsers, then


# ---------------------------------------------------------------------------
# Scalar fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def checkout_state():
    """Container for what happened during a scenario: results, outcomes, errors."""
    return {"result": None, "outcome": None, "error": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('customer "{customer_id}" is signed in'), target_fixture="customer_id")
def signed_in_customer(customer_id):
    return customer_id


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("no order exists")
def no_order_exists():
    assert current_domain.repository_for(Order)._dao.query.all().items == []
