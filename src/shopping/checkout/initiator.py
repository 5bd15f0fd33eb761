"""Checkout initiator — turns a cart into an order-creation request.

The cart is only emptied once the order service has confirmed the order.
Any failure leaves the cart exactly as it was so the shopper can retry
without re-entering items.
"""

from dataclasses import replace

import structlog
from protean.exceptions import ValidationError

from shared.money import quantize_display
from shopping.cart.snapshot import CartSnapshot, take_snapshot
from shopping.checkout.gateway import get_gateway
from shopping.checkout.gateway.port import OrderConfirmation, OrderGateway

logger = structlog.get_logger(__name__)


class CheckoutFailed(Exception):
    """The order service did not confirm the order."""

    def __init__(self, reason: str, status_code: int | None = None):
        super().__init__(reason)
        self.reason = reason
        self.status_code = status_code


def build_order_request(snapshot: CartSnapshot, user_id) -> dict:
    """Wire payload for the order service.

    Unit prices go out at full precision; the total is rounded to cents.
    """
    return {
        "userId": user_id,
        "lines": [
            {
                "id": line.id,
                "qty": line.quantity,
                "price": float(line.unit_price),
            }
            for line in snapshot.lines
        ],
        "total": float(quantize_display(snapshot.total)),
    }


class CheckoutInitiator:
    def __init__(self, gateway: OrderGateway | None = None) -> None:
        self.gateway = gateway

    def checkout(self, cart, user_id) -> OrderConfirmation:
        if not user_id:
            raise ValidationError({"user_id": ["A signed-in user is required to place an order"]})

        snapshot = take_snapshot(cart)
        if snapshot.is_empty:
            raise ValidationError({"cart": ["Cannot check out an empty cart"]})

        request = build_order_request(snapshot, user_id)
        gateway = self.gateway or get_gateway()

        logger.info(
            "Submitting order",
            cart_id=str(cart.id),
            user_id=str(user_id),
            line_count=len(request["lines"]),
            total=request["total"],
        )

        confirmation = gateway.create_order(request)

        if not confirmation.success:
            reason = confirmation.failure_reason or "Checkout failed"
            logger.warning(
                "Checkout failed, cart left untouched",
                cart_id=str(cart.id),
                reason=reason,
                status_code=confirmation.status_code,
            )
            raise CheckoutFailed(reason, status_code=confirmation.status_code)

        cart.clear()

        if confirmation.confirmed_total is None:
            confirmation = replace(confirmation, confirmed_total=quantize_display(snapshot.total))

        logger.info(
            "Order placed",
            cart_id=str(cart.id),
            order_id=confirmation.order_id,
            confirmed_total=str(confirmation.confirmed_total),
        )
        return confirmation
