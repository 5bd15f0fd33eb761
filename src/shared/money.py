"""Monetary amounts — exact decimal coercion, explicit units, display rounding.

Amounts are carried as ``Decimal`` everywhere inside the system. Upstream
services report money in two encodings (integer cents or decimal major
units); the encoding must be stated explicitly through an ``AmountUnit``.
An amount without a unit is rejected with ``AmbiguousAmountError`` rather
than guessed from its shape: ``20`` could be twenty euros or twenty cents.

Rounding to two decimals happens only at display time.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum

ZERO = Decimal("0")
CENT = Decimal("0.01")

_NARROW_NBSP = "\u202f"
_NBSP = "\u00a0"


class AmountUnit(Enum):
    CENTS = "cents"
    MAJOR = "major"


class AmbiguousAmountError(ValueError):
    """Raised when an amount arrives without an explicit unit."""

    def __init__(self, value, field=None):
        self.value = value
        self.field = field
        where = f" for '{field}'" if field else ""
        super().__init__(f"Amount {value!r}{where} has no unit; expected one of {[u.value for u in AmountUnit]}")


def coerce_decimal(value) -> Decimal:
    """Convert ``value`` to an exact ``Decimal``; anything unusable becomes 0.

    Floats go through their shortest repr so ``19.9`` becomes ``Decimal("19.9")``.
    Text accepts a comma as decimal separator.
    """
    if value is None or isinstance(value, bool):
        return ZERO

    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, int):
        amount = Decimal(value)
    elif isinstance(value, float):
        amount = Decimal(repr(value))
    elif isinstance(value, str):
        text = value.strip().replace(",", ".")
        if not text:
            return ZERO
        try:
            amount = Decimal(text)
        except InvalidOperation:
            return ZERO
    else:
        return ZERO

    if not amount.is_finite():
        return ZERO
    return amount


def to_major_units(value, unit, field=None) -> Decimal:
    """Return ``value`` in major currency units according to its explicit ``unit``."""
    if unit is None:
        raise AmbiguousAmountError(value, field)
    try:
        unit = AmountUnit(unit)
    except ValueError as exc:
        raise AmbiguousAmountError(value, field) from exc

    amount = coerce_decimal(value)
    if unit is AmountUnit.CENTS:
        return amount / 100
    return amount


def quantize_display(amount) -> Decimal:
    """Round to cents, half-up. For display and wire output only."""
    return coerce_decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def format_eur(amount) -> str:
    """Format an amount the way fr-FR renders euros, e.g. ``1 234,50 €``."""
    value = quantize_display(amount)
    sign = "-" if value < 0 else ""
    whole, _, cents = f"{abs(value):.2f}".partition(".")
    grouped = f"{int(whole):,}".replace(",", _NARROW_NBSP)
    return f"{sign}{grouped},{cents}{_NBSP}€"
