"""Checkout snapshot — the frozen view of a cart handed to the checkout."""

from dataclasses import dataclass
from decimal import Decimal

from shopping.cart.totals import DerivedTotals, derive_totals


@dataclass(frozen=True)
class SnapshotLine:
    id: str
    quantity: int
    unit_price: Decimal


@dataclass(frozen=True)
class CartSnapshot:
    lines: tuple[SnapshotLine, ...]
    totals: DerivedTotals

    @property
    def total(self) -> Decimal:
        return self.totals.total

    @property
    def is_empty(self) -> bool:
        return not self.lines


def take_snapshot(cart) -> CartSnapshot:
    """Capture the cart's lines as ``{id, quantity, unit_price}`` and its totals."""
    lines = tuple(
        SnapshotLine(id=item.key, quantity=item.quantity, unit_price=item.amount)
        for item in cart.items
    )
    return CartSnapshot(lines=lines, totals=derive_totals(cart))
