"""Shared BDD fixtures and step definitions for the Shopping domain."""

from decimal import Decimal

import pytest
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then

from shopping.cart.cart import Cart
from shopping.cart.events import (
    CartCleared,
    CartItemAdded,
    CartItemRemoved,
    CartItemsRemoved,
    CartQuantityChanged,
)
from shopping.checkout.gateway.fake_adapter import FakeOrderGateway

# Map event name strings to classes for dynamic lookup in Then steps
_CART_EVENT_CLASSES = {
    "CartItemAdded": CartItemAdded,
    "CartQuantityChanged": CartQuantityChanged,
    "CartItemRemoved": CartItemRemoved,
    "CartItemsRemoved": CartItemsRemoved,
    "CartCleared": CartCleared,
}


# ---------------------------------------------------------------------------
# Scalar fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for captured errors."""
    return {"exc": None}


@pytest.fixture()
def gateway():
    return FakeOrderGateway()


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("an empty cart", target_fixture="cart")
def empty_cart():
    cart = Cart.create(owner_id="42")
    cart._events.clear()
    return cart


@given(parsers.cfparse('the cart holds {qty:d} x product {key} "{name}" at {price}'), target_fixture="cart")
def cart_holds(cart, qty, key, name, price):
    cart.add({"id": key, "name": name, "price": price}, qty)
    cart._events.clear()
    return cart


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the cart has {count:d} line"))
def cart_has_n_line(cart, count):
    assert len(cart.items) == count


@then(parsers.cfparse("the cart has {count:d} lines"))
def cart_has_n_lines(cart, count):
    assert len(cart.items) == count


@then("the cart is empty")
def cart_is_empty(cart):
    assert cart.is_empty


@then(parsers.cfparse("product {key} has quantity {qty:d}"))
def product_has_quantity(cart, key, qty):
    item = cart.find(key)
    assert item is not None, f"No line for product {key}"
    assert item.quantity == qty


@then(parsers.cfparse("the cart subtotal is {amount}"))
def cart_subtotal_is(cart, amount):
    assert cart.totals.subtotal == Decimal(amount)


@then(parsers.cfparse("the cart total is {amount}"))
def cart_total_is(cart, amount):
    assert cart.totals.total == Decimal(amount)


@then(parsers.cfparse("the shipping fee is {amount}"))
def shipping_fee_is(cart, amount):
    assert cart.totals.shipping_fee == Decimal(amount)


@then(parsers.cfparse("a {event_type} cart event is raised"))
def cart_event_raised(cart, event_type):
    event_cls = _CART_EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in cart._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in cart._events]}"


@then("no cart event is raised")
def no_cart_event(cart):
    assert cart._events == []


@then("the checkout fails with a validation error")
def checkout_fails_validation(error):
    assert isinstance(error["exc"], ValidationError)
