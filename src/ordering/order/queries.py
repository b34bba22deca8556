"""Order read access scoped to the customer who placed the order."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from ordering.order.order import Order


class OrderNotFoundError(Exception):
    def __init__(self, order_id) -> None:
        self.order_id = str(order_id)
        super().__init__(f"Order {self.order_id} not found")


class OrderAccessDenied(Exception):
    def __init__(self, order_id) -> None:
        self.order_id = str(order_id)
        super().__init__(f"Order {self.order_id} was placed by another customer")


def list_orders_for_customer(customer_id) -> list[Order]:
    """All orders placed by the customer, newest first."""
    repo = current_domain.repository_for(Order)
    return repo._dao.query.filter(customer_id=str(customer_id)).order_by("-created_at").all().items


def get_order_for_customer(order_id, customer_id) -> Order:
    try:
        order = current_domain.repository_for(Order).get(order_id)
    except ObjectNotFoundError as exc:
        raise OrderNotFoundError(order_id) from exc

    if not order.is_placed_by(customer_id):
        raise OrderAccessDenied(order_id)
    return order
