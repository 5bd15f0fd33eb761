"""Domain events for the Cart aggregate."""

from protean.fields import Identifier, Integer, String, Text

from shopping.domain import shopping


@shopping.event(part_of="Cart")
class CartItemAdded:
    """A product was put in the cart, as a new line or on top of an existing one."""

    __version__ = 1

    cart_id = Identifier(required=True)
    key = String(required=True, max_length=255)
    name = String(required=True, max_length=255)
    unit_price = Text(required=True)
    quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@shopping.event(part_of="Cart")
class CartQuantityChanged:
    """The quantity of a line item changed to another positive value."""

    __version__ = 1

    cart_id = Identifier(required=True)
    key = String(required=True, max_length=255)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@shopping.event(part_of="Cart")
class CartItemRemoved:
    """A line item left the cart, explicitly or because its quantity reached zero."""

    __version__ = 1

    cart_id = Identifier(required=True)
    key = String(required=True, max_length=255)


@shopping.event(part_of="Cart")
class CartItemsRemoved:
    """Several line items were removed in one transition."""

    __version__ = 1

    cart_id = Identifier(required=True)
    keys = Text(required=True)  # JSON array of keys


@shopping.event(part_of="Cart")
class CartCleared:
    """All line items were dropped (explicit empty or after checkout)."""

    __version__ = 1

    cart_id = Identifier(required=True)
    removed_count = Integer(required=True)
