"""Derived cart totals — subtotal, VAT, shipping and grand total.

Totals are a pure projection of the current line items. They are computed
on every read and never stored, so a view can recompute them on each
render. All arithmetic is exact ``Decimal``; rounding belongs to display.
"""

from dataclasses import dataclass
from decimal import Decimal

from shared.money import ZERO, coerce_decimal, format_eur

TAX_RATE = Decimal("0.20")
SHIPPING_FEE = Decimal("6.90")
FREE_SHIPPING_THRESHOLD = Decimal("100.00")


@dataclass(frozen=True)
class DerivedTotals:
    subtotal: Decimal
    tax_rate: Decimal
    tax: Decimal
    shipping_fee: Decimal
    total: Decimal
    item_count: int
    line_count: int

    @property
    def free_shipping(self) -> bool:
        return self.shipping_fee == ZERO

    def formatted(self) -> dict[str, str]:
        """Euro strings for rendering a cart summary."""
        return {
            "subtotal": format_eur(self.subtotal),
            "tax": format_eur(self.tax),
            "shipping_fee": format_eur(self.shipping_fee),
            "total": format_eur(self.total),
        }


def shipping_fee_for(subtotal: Decimal) -> Decimal:
    # Strictly above the threshold; exactly 100.00 still pays shipping.
    return ZERO if subtotal > FREE_SHIPPING_THRESHOLD else SHIPPING_FEE


def derive_totals(cart) -> DerivedTotals:
    """Compute totals for a ``Cart`` or any iterable of line items.

    Line items only need ``unit_price`` and ``quantity`` attributes.
    """
    items = list(getattr(cart, "items", cart) or [])

    subtotal = sum((coerce_decimal(item.unit_price) * item.quantity for item in items), ZERO)
    tax = subtotal * TAX_RATE
    shipping_fee = shipping_fee_for(subtotal)

    return DerivedTotals(
        subtotal=subtotal,
        tax_rate=TAX_RATE,
        tax=tax,
        shipping_fee=shipping_fee,
        total=subtotal + tax + shipping_fee,
        item_count=sum(item.quantity for item in items),
        line_count=len(items),
    )
