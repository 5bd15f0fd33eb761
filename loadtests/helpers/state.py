"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance keeps its own state; nothing is shared across
users.
"""

from dataclasses import dataclass, field


@dataclass
class CartState:
    """Tracks state for a shopping cart lifecycle."""

    cart_id: str | None = None
    user_id: str | None = None
    keys: list[str] = field(default_factory=list)
    order_id: str | None = None
