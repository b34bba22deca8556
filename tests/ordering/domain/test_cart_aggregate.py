"""Tests for the ShoppingCart aggregate."""

import pytest
from ordering.cart.cart import ShoppingCart
from ordering.cart.events import CartCleared, CartItemAdded, CartItemRemoved
from protean.exceptions import ValidationError


@pytest.fixture()
def cart():
    return ShoppingCart.create(customer_id="cust-001")


class TestCartCreation:
    def test_new_cart_is_empty(self, cart):
        assert cart.is_empty is True
        assert cart.total_price == 0

    def test_defaults(self, cart):
        assert cart.customer_id == "cust-001"
        assert cart.currency == "USD"
        assert cart.created_at is not None


class TestAddItem:
    def test_add_item(self, cart):
        item_id = cart.add_item("prod-A", "Keyboard", 2, 10.0)
        assert cart.is_empty is False
        assert len(cart.items) == 1
        assert str(cart.items[0].id) == item_id

    def test_adding_same_product_merges_quantity(self, cart):
        first = cart.add_item("prod-A", "Keyboard", 1, 10.0)
        second = cart.add_item("prod-A", "Keyboard", 2, 12.0)
        assert first == second
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 3
        assert cart.items[0].unit_price == 12.0

    def test_total_price(self, cart):
        cart.add_item("prod-A", "Keyboard", 2, 10.0)
        cart.add_item("prod-B", "Mouse", 1, 5.5)
        assert cart.total_price == pytest.approx(25.5)

    def test_add_raises_event(self, cart):
        item_id = cart.add_item("prod-A", "Keyboard", 2, 10.0)
        event = cart._events[-1]
        assert isinstance(event, CartItemAdded)
        assert event.item_id == item_id
        assert event.quantity == 2


class TestRemoveItem:
    def test_remove_item(self, cart):
        item_id = cart.add_item("prod-A", "Keyboard", 1, 10.0)
        cart.remove_item(item_id)
        assert cart.is_empty is True
        assert isinstance(cart._events[-1], CartItemRemoved)

    def test_remove_unknown_item(self, cart):
        with pytest.raises(ValidationError):
            cart.remove_item("missing")


class TestClear:
    def test_clear_removes_everything(self, cart):
        cart.add_item("prod-A", "Keyboard", 1, 10.0)
        cart.add_item("prod-B", "Mouse", 1, 5.0)
        cart._events.clear()

        assert cart.clear() == 2
        assert cart.is_empty is True
        assert len(cart._events) == 1
        assert isinstance(cart._events[0], CartCleared)
        assert cart._events[0].items_removed == 2

    def test_clearing_empty_cart_is_a_noop(self, cart):
        assert cart.clear() == 0
        assert cart._events == []
