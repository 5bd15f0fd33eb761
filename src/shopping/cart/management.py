"""Cart management — commands and handler.

Handles cart creation and the explicit "empty my cart" action.
"""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from shopping.cart.cart import Cart
from shopping.domain import shopping


@shopping.command(part_of="Cart")
class CreateCart:
    """Create an empty cart for a signed-in shopper or a guest."""

    owner_id = Identifier()  # Optional for guest carts


@shopping.command(part_of="Cart")
class ClearCart:
    """Drop every line from a cart."""

    cart_id = Identifier(required=True)


@shopping.command_handler(part_of=Cart)
class ManageCartHandler:
    @handle(CreateCart)
    def create_cart(self, command):
        cart = Cart.create(owner_id=command.owner_id)
        current_domain.repository_for(Cart).add(cart)
        return str(cart.id)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get(command.cart_id)
        cart.clear()
        repo.add(cart)
