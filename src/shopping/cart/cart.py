"""Cart aggregate — the line items a shopper intends to buy.

The cart is a standard CQRS aggregate (not event sourced). It is lenient
towards its callers: malformed product descriptors are normalised rather
than rejected, unknown keys are ignored, and quantities that would drop to
zero or below remove the line instead. The real correctness boundary
(stock, prices, authentication) is the order service at checkout.

Line items are keyed by the product's explicit ``key``, else its ``id``,
else its display ``name``. Keys are kept as text so ``7`` and ``"7"`` name
the same line.
"""

import json
from collections.abc import Mapping
from datetime import UTC, datetime
from decimal import Decimal

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String, Text

from shared.money import ZERO, coerce_decimal
from shopping.cart.events import (
    CartCleared,
    CartItemAdded,
    CartItemRemoved,
    CartItemsRemoved,
    CartQuantityChanged,
)
from shopping.cart.totals import DerivedTotals, derive_totals
from shopping.domain import shopping

# Keys and display names longer than this are clipped, never rejected
MAX_LABEL_LENGTH = 255


def normalize_key(key) -> str | None:
    """Text form of a line key, or ``None`` when there is nothing usable.

    Lookups go through the same clipping, so an over-long key still finds
    the line it created.
    """
    if key is None or isinstance(key, bool):
        return None
    if isinstance(key, float) and key.is_integer():
        key = int(key)
    text = str(key).strip()[:MAX_LABEL_LENGTH].strip()
    return text or None


def _read(product, *names):
    """First non-empty value among ``names`` on a mapping or an object."""
    for name in names:
        if isinstance(product, Mapping):
            value = product.get(name)
        else:
            value = getattr(product, name, None)
        if value is not None and value != "":
            return value
    return None


def resolve_key(product) -> str | None:
    return (
        normalize_key(_read(product, "key"))
        or normalize_key(_read(product, "id"))
        or normalize_key(_read(product, "name"))
    )


def coerce_price(value) -> Decimal:
    """Non-negative exact price; non-numeric input counts as 0."""
    return max(ZERO, coerce_decimal(value))


def coerce_quantity(value, default: int = 0) -> int:
    if value is None:
        return default
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return int(coerce_decimal(value))


@shopping.entity(part_of="Cart")
class LineItem:
    key = String(required=True, max_length=255)
    name = String(required=True, max_length=255)
    unit_price = Text(required=True)  # Exact decimal text at full precision, see `amount`
    quantity = Integer(required=True, min_value=1)
    image_url = Text()
    description = Text()

    @property
    def amount(self) -> Decimal:
        return Decimal(self.unit_price)

    @property
    def line_total(self) -> Decimal:
        return self.amount * self.quantity


@shopping.aggregate
class Cart:
    owner_id = Identifier()  # Nullable for guest carts
    items = HasMany(LineItem)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def line_keys_must_be_unique(self):
        keys = [item.key for item in self.items]
        if len(keys) != len(set(keys)):
            raise ValidationError({"items": ["Line item keys must be unique"]})

    @invariant.post
    def quantities_must_be_positive(self):
        if any(item.quantity < 1 for item in self.items):
            raise ValidationError({"items": ["Line item quantities must be at least 1"]})

    @invariant.post
    def unit_prices_must_not_be_negative(self):
        if any(item.amount < ZERO for item in self.items):
            raise ValidationError({"items": ["Line item prices cannot be negative"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, owner_id=None):
        now = datetime.now(UTC)
        return cls(owner_id=owner_id, created_at=now, updated_at=now)

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def find(self, key) -> LineItem | None:
        key = normalize_key(key)
        if key is None:
            return None
        return next((item for item in self.items if item.key == key), None)

    @property
    def totals(self) -> DerivedTotals:
        return derive_totals(self)

    @property
    def is_empty(self) -> bool:
        return not self.items

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def add(self, product, qty=1) -> None:
        """Put ``qty`` units of ``product`` in the cart.

        An existing line accumulates the quantity (removed if the result is
        not positive). A new line is only created for a positive ``qty``.
        """
        key = resolve_key(product)
        quantity = coerce_quantity(qty, default=1)
        if key is None or quantity == 0:
            return

        existing = self.find(key)
        if existing is not None:
            if quantity < 0:
                self._apply_quantity(existing, existing.quantity + quantity)
                return

            existing.quantity += quantity
            self._touch()
            self.raise_(
                CartItemAdded(
                    cart_id=str(self.id),
                    key=key,
                    name=existing.name,
                    unit_price=existing.unit_price,
                    quantity=quantity,
                    new_quantity=existing.quantity,
                )
            )
            return

        if quantity < 0:
            return

        name = _read(product, "name")
        name = str(name).strip()[:MAX_LABEL_LENGTH].strip() if name is not None else ""
        unit_price = format(coerce_price(_read(product, "price")), "f")
        image_url = _read(product, "image_url", "imageUrl")
        description = _read(product, "description")

        self.add_items(
            LineItem(
                key=key,
                name=name or key,
                unit_price=unit_price,
                quantity=quantity,
                image_url=str(image_url) if image_url is not None else None,
                description=str(description) if description is not None else None,
            )
        )
        self._touch()

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                key=key,
                name=name or key,
                unit_price=unit_price,
                quantity=quantity,
                new_quantity=quantity,
            )
        )

    def change_qty(self, key, delta) -> None:
        """Step a line's quantity by ``delta``; reaching zero removes the line."""
        delta = coerce_quantity(delta)
        if not delta:
            return

        item = self.find(key)
        if item is None:
            return

        self._apply_quantity(item, item.quantity + delta)

    def set_quantity(self, key, qty) -> None:
        """Overwrite a line's quantity; zero or below removes the line."""
        item = self.find(key)
        if item is None:
            return

        self._apply_quantity(item, coerce_quantity(qty))

    def remove(self, key) -> None:
        item = self.find(key)
        if item is None:
            return

        self._drop([item])
        self.raise_(CartItemRemoved(cart_id=str(self.id), key=item.key))

    def remove_many(self, keys) -> None:
        """Remove every line whose key is in ``keys`` as one transition."""
        if keys is None:
            return
        if isinstance(keys, (str, int, float)):
            keys = [keys]

        wanted = {key for key in (normalize_key(k) for k in keys) if key is not None}
        doomed = [item for item in self.items if item.key in wanted]
        if not doomed:
            return

        self._drop(doomed)
        self.raise_(
            CartItemsRemoved(
                cart_id=str(self.id),
                keys=json.dumps([item.key for item in doomed]),
            )
        )

    def clear(self) -> None:
        """Drop every line item."""
        if not self.items:
            return

        removed = list(self.items)
        self._drop(removed)
        self.raise_(CartCleared(cart_id=str(self.id), removed_count=len(removed)))

    # -------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------
    def _apply_quantity(self, item: LineItem, requested: int) -> None:
        new_quantity = max(0, requested)
        if new_quantity == item.quantity:
            return

        if new_quantity == 0:
            self._drop([item])
            self.raise_(CartItemRemoved(cart_id=str(self.id), key=item.key))
            return

        previous_quantity = item.quantity
        item.quantity = new_quantity
        self._touch()

        self.raise_(
            CartQuantityChanged(
                cart_id=str(self.id),
                key=item.key,
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
            )
        )

    def _drop(self, items: list[LineItem]) -> None:
        with atomic_change(self):
            for item in items:
                self.remove_items(item)
        self._touch()

    def _touch(self) -> None:
        self.updated_at = datetime.now(UTC)
