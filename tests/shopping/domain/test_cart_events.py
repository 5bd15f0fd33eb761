"""Tests for the events raised by cart transitions."""

import json

from shopping.cart.cart import Cart
from shopping.cart.events import (
    CartCleared,
    CartItemAdded,
    CartItemRemoved,
    CartItemsRemoved,
    CartQuantityChanged,
)


def _cart_with_two_lines():
    cart = Cart.create(owner_id="user-001")
    cart.add({"id": 1, "name": "Clavier", "price": 89.9})
    cart.add({"id": 2, "name": "Souris", "price": 39.9})
    cart._events.clear()
    return cart


class TestCartEvents:
    def test_add_raises_item_added(self):
        cart = Cart.create()
        cart.add({"id": 1, "name": "Clavier", "price": 89.9}, 2)
        assert len(cart._events) == 1
        event = cart._events[0]
        assert isinstance(event, CartItemAdded)
        assert event.cart_id == str(cart.id)
        assert event.key == "1"
        assert event.unit_price == "89.9"
        assert event.quantity == 2
        assert event.new_quantity == 2

    def test_repeated_add_reports_running_quantity(self):
        cart = _cart_with_two_lines()
        cart.add({"id": 1, "name": "Clavier", "price": 89.9}, 3)
        event = cart._events[0]
        assert isinstance(event, CartItemAdded)
        assert event.quantity == 3
        assert event.new_quantity == 4

    def test_quantity_change(self):
        cart = _cart_with_two_lines()
        cart.set_quantity("2", 4)
        assert len(cart._events) == 1
        event = cart._events[0]
        assert isinstance(event, CartQuantityChanged)
        assert event.previous_quantity == 1
        assert event.new_quantity == 4

    def test_same_quantity_records_nothing(self):
        cart = _cart_with_two_lines()
        cart.set_quantity("2", 1)
        assert cart._events == []

    def test_stepping_to_zero_raises_item_removed(self):
        cart = _cart_with_two_lines()
        cart.change_qty("1", -1)
        assert len(cart._events) == 1
        assert isinstance(cart._events[0], CartItemRemoved)
        assert cart._events[0].key == "1"

    def test_remove(self):
        cart = _cart_with_two_lines()
        cart.remove("2")
        assert isinstance(cart._events[0], CartItemRemoved)

    def test_remove_many_is_one_event(self):
        cart = _cart_with_two_lines()
        cart.remove_many(["1", "2"])
        assert len(cart._events) == 1
        event = cart._events[0]
        assert isinstance(event, CartItemsRemoved)
        assert json.loads(event.keys) == ["1", "2"]

    def test_clear(self):
        cart = _cart_with_two_lines()
        cart.clear()
        assert len(cart._events) == 1
        event = cart._events[0]
        assert isinstance(event, CartCleared)
        assert event.removed_count == 2

    def test_unknown_key_records_nothing(self):
        cart = _cart_with_two_lines()
        cart.remove("999")
        cart.change_qty("999", 1)
        assert cart._events == []
