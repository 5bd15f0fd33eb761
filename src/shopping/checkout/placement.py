"""Order placement — command and handler.

Loads the cart, runs the checkout against the active order gateway and
persists the emptied cart only when the order was confirmed.
"""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from shopping.cart.cart import Cart
from shopping.checkout.initiator import CheckoutInitiator
from shopping.domain import shopping


@shopping.command(part_of="Cart")
class PlaceOrder:
    cart_id = Identifier(required=True)
    user_id = Identifier(required=True)


@shopping.command_handler(part_of=Cart)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get(command.cart_id)

        confirmation = CheckoutInitiator().checkout(cart, command.user_id)

        repo.add(cart)
        return confirmation
