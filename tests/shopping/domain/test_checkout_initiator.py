"""Tests for the checkout initiator against the fake order gateway."""

from decimal import Decimal

import pytest
from protean.exceptions import ValidationError

from shopping.cart.cart import Cart
from shopping.cart.events import CartCleared
from shopping.cart.snapshot import take_snapshot
from shopping.checkout.gateway.fake_adapter import FakeOrderGateway
from shopping.checkout.gateway.port import OrderConfirmation, OrderGateway
from shopping.checkout.initiator import CheckoutFailed, CheckoutInitiator, build_order_request


def _cart():
    cart = Cart.create(owner_id="42")
    cart.add({"id": 1, "name": "Clavier", "price": 19.9}, 2)
    cart.add({"id": 2, "name": "Souris", "price": 5})
    cart._events.clear()
    return cart


class TestBuildOrderRequest:
    def test_wire_shape(self):
        request = build_order_request(take_snapshot(_cart()), "42")
        assert request == {
            "userId": "42",
            "lines": [
                {"id": "1", "qty": 2, "price": 19.9},
                {"id": "2", "qty": 1, "price": 5.0},
            ],
            "total": 60.66,
        }

    def test_total_is_rounded_to_cents(self):
        cart = Cart.create()
        cart.add({"id": 1, "name": "Gomme", "price": "0.333"}, 3)
        request = build_order_request(take_snapshot(cart), "42")
        # 0.999 + 0.1998 tax + 6.90 shipping
        assert request["total"] == 8.10


class TestCheckout:
    def test_success_clears_cart(self):
        gateway = FakeOrderGateway()
        cart = _cart()

        confirmation = CheckoutInitiator(gateway).checkout(cart, "42")

        assert confirmation.success
        assert confirmation.order_id.startswith("fake_ord_")
        assert confirmation.confirmed_total == Decimal("60.66")
        assert cart.is_empty
        assert any(isinstance(e, CartCleared) for e in cart._events)

    def test_gateway_receives_request(self):
        gateway = FakeOrderGateway()
        CheckoutInitiator(gateway).checkout(_cart(), "42")
        assert len(gateway.calls) == 1
        assert gateway.calls[0]["userId"] == "42"

    def test_failure_keeps_cart(self):
        gateway = FakeOrderGateway()
        gateway.configure(should_succeed=False, failure_reason="Out of stock", status_code=409)
        cart = _cart()

        with pytest.raises(CheckoutFailed) as exc:
            CheckoutInitiator(gateway).checkout(cart, "42")

        assert exc.value.reason == "Out of stock"
        assert exc.value.status_code == 409
        assert len(cart.items) == 2
        assert cart._events == []

    def test_missing_user_is_rejected(self):
        gateway = FakeOrderGateway()
        with pytest.raises(ValidationError):
            CheckoutInitiator(gateway).checkout(_cart(), None)
        assert gateway.calls == []

    def test_empty_cart_is_rejected(self):
        gateway = FakeOrderGateway()
        with pytest.raises(ValidationError):
            CheckoutInitiator(gateway).checkout(Cart.create(), "42")
        assert gateway.calls == []

    def test_missing_confirmed_total_falls_back_to_requested(self):
        class SilentGateway(OrderGateway):
            def create_order(self, request):
                return OrderConfirmation(success=True, order_id="ord-1")

        confirmation = CheckoutInitiator(SilentGateway()).checkout(_cart(), "42")
        assert confirmation.confirmed_total == Decimal("60.66")

    def test_uses_active_gateway_by_default(self):
        from shopping.checkout.gateway import get_gateway

        CheckoutInitiator().checkout(_cart(), "42")
        assert len(get_gateway().calls) == 1
