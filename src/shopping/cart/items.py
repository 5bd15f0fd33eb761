"""Cart item management — commands and handler."""

import json

from protean import handle
from protean.fields import Identifier, Integer, Text
from protean.utils.globals import current_domain

from shopping.cart.cart import Cart
from shopping.domain import shopping


@shopping.command(part_of="Cart")
class AddToCart:
    cart_id = Identifier(required=True)
    key = Text()
    product_id = Text()
    name = Text(required=True)
    price = Text()  # Decimal text; non-numeric counts as 0
    image_url = Text()
    description = Text()
    quantity = Integer(default=1)


@shopping.command(part_of="Cart")
class ChangeCartQuantity:
    """Step a line's quantity up or down (the +/- stepper)."""

    cart_id = Identifier(required=True)
    key = Text(required=True)
    delta = Integer(required=True)


@shopping.command(part_of="Cart")
class SetCartQuantity:
    """Overwrite a line's quantity (direct numeric entry)."""

    cart_id = Identifier(required=True)
    key = Text(required=True)
    quantity = Integer(required=True)


@shopping.command(part_of="Cart")
class RemoveFromCart:
    cart_id = Identifier(required=True)
    key = Text(required=True)


@shopping.command(part_of="Cart")
class RemoveManyFromCart:
    cart_id = Identifier(required=True)
    keys = Text(required=True)  # JSON array of line keys


@shopping.command_handler(part_of=Cart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get(command.cart_id)
        cart.add(
            {
                "key": command.key,
                "id": command.product_id,
                "name": command.name,
                "price": command.price,
                "image_url": command.image_url,
                "description": command.description,
            },
            command.quantity,
        )
        repo.add(cart)

    @handle(ChangeCartQuantity)
    def change_cart_quantity(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get(command.cart_id)
        cart.change_qty(command.key, command.delta)
        repo.add(cart)

    @handle(SetCartQuantity)
    def set_cart_quantity(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get(command.cart_id)
        cart.set_quantity(command.key, command.quantity)
        repo.add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get(command.cart_id)
        cart.remove(command.key)
        repo.add(cart)

    @handle(RemoveManyFromCart)
    def remove_many_from_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get(command.cart_id)

        keys = json.loads(command.keys) if isinstance(command.keys, str) else command.keys

        cart.remove_many(keys)
        repo.add(cart)
