"""Order gateway factory.

Provides get_gateway() / set_gateway() to swap implementations:
- FakeOrderGateway for development and testing
- HttpOrderGateway for the real order service
"""

from shopping.checkout.gateway.fake_adapter import FakeOrderGateway
from shopping.checkout.gateway.port import OrderGateway

_current_gateway: OrderGateway | None = None


def get_gateway() -> OrderGateway:
    """Return the current order gateway. Defaults to FakeOrderGateway."""
    global _current_gateway
    if _current_gateway is None:
        _current_gateway = FakeOrderGateway()
    return _current_gateway


def set_gateway(gateway: OrderGateway) -> None:
    """Override the active order gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to default gateway."""
    global _current_gateway
    _current_gateway = None
