"""Request-scoped customer identity.

Authentication itself happens upstream; the transport layer binds the
authenticated customer for the duration of a request with
`authenticated_as()`, and the checkout workflow reads it back with
`get_current_customer()`.
"""

from contextlib import contextmanager
from contextvars import ContextVar

from ordering.utils.logging import bound_to

_current_customer: ContextVar[str | None] = ContextVar("current_customer", default=None)


class NotAuthenticatedError(Exception):
    """No customer is bound to the current request."""


def get_current_customer() -> str:
    customer_id = _current_customer.get()
    if not customer_id:
        raise NotAuthenticatedError("No authenticated customer for this request")
    return customer_id


@contextmanager
def authenticated_as(customer_id):
    """Bind `customer_id` as the current customer inside the block."""
    token = _current_customer.set(str(customer_id))
    try:
        with bound_to(customer_id=customer_id):
            yield
    finally:
        _current_customer.reset(token)
