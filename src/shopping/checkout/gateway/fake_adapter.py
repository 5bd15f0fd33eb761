"""Configurable fake order gateway for development and testing.

Accepts or rejects orders without any network call, and records every
request it receives so tests can inspect the payload.
"""

from uuid import uuid4

from shared.money import coerce_decimal
from shopping.checkout.gateway.port import OrderConfirmation, OrderGateway


class FakeOrderGateway(OrderGateway):
    """Configurable fake order gateway."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Order rejected"
        self.status_code: int = 200
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Order rejected", status_code: int = 200) -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.status_code = status_code

    def create_order(self, request: dict) -> OrderConfirmation:
        self.calls.append(request)

        if self.should_succeed:
            return OrderConfirmation(
                success=True,
                order_id=f"fake_ord_{uuid4().hex[:12]}",
                confirmed_total=coerce_decimal(request.get("total")),
                status_code=self.status_code,
            )
        return OrderConfirmation(
            success=False,
            failure_reason=self.failure_reason,
            status_code=self.status_code,
        )
