"""HTTP order gateway — posts order-creation requests to the storefront API.

The service answers ``{"ok": true, "order_id": ..., "total": ...}`` on
success. A non-2xx status, a transport failure, a body that is not a JSON
object, or ``"ok": false`` are all failures.
"""

import structlog

from shared.http import ApiClient, ApiError
from shared.money import coerce_decimal
from shopping.checkout.gateway.port import OrderConfirmation, OrderGateway

logger = structlog.get_logger(__name__)

DEFAULT_ORDER_PATH = "/order.php"


def _failure_message(data, status: int | None, fallback: str) -> str:
    if isinstance(data, dict):
        message = data.get("error") or data.get("message")
        if message:
            return str(message)
    if status is not None:
        return f"HTTP {status}"
    return fallback


class HttpOrderGateway(OrderGateway):
    """Order gateway backed by the remote CRUD API."""

    def __init__(self, client: ApiClient | None = None, path: str = DEFAULT_ORDER_PATH, token: str | None = None) -> None:
        self.client = client or ApiClient()
        self.path = path
        self.token = token

    def create_order(self, request: dict) -> OrderConfirmation:
        try:
            data = self.client.post(self.path, request, token=self.token)
        except ApiError as exc:
            reason = _failure_message(exc.data, exc.status, exc.message)
            logger.warning("Order request failed", status=exc.status, reason=reason)
            return OrderConfirmation(success=False, failure_reason=reason, status_code=exc.status)

        if not isinstance(data, dict):
            logger.warning("Order service returned a non-object body", body_type=type(data).__name__)
            return OrderConfirmation(success=False, failure_reason="Unexpected response from order service")

        if data.get("ok") is False:
            reason = _failure_message(data, None, "Order rejected")
            logger.warning("Order rejected by order service", reason=reason)
            return OrderConfirmation(success=False, failure_reason=reason)

        order_id = data.get("order_id") or data.get("orderId") or data.get("id")
        confirmed_total = data.get("total")

        return OrderConfirmation(
            success=True,
            order_id=str(order_id) if order_id is not None else None,
            confirmed_total=coerce_decimal(confirmed_total) if confirmed_total is not None else None,
        )
