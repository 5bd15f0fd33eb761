"""Order gateway port (abstract interface).

Defines the contract with the remote order-management service. Adapters:
FakeOrderGateway (dev/test) and HttpOrderGateway (the storefront API).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class OrderConfirmation:
    """Outcome of an order-creation request."""

    success: bool
    order_id: str | None = None
    confirmed_total: Decimal | None = None
    failure_reason: str | None = None
    status_code: int | None = None


class OrderGateway(ABC):
    """Abstract order-management interface."""

    @abstractmethod
    def create_order(self, request: dict) -> OrderConfirmation:
        """Submit an order-creation request.

        ``request`` has the wire shape ``{"userId", "lines": [{"id", "qty", "price"}], "total"}``.
        Failures are reported through ``OrderConfirmation.success``, not raised.
        """
        ...
