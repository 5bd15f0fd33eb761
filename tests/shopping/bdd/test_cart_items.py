"""BDD tests for cart line items."""

from pytest_bdd import parsers, scenarios, when

scenarios("features/cart_items.feature")


@when(parsers.cfparse('product {key} "{name}" at {price} is added'))
def add_product(cart, key, name, price):
    cart.add({"id": key, "name": name, "price": price})


@when(parsers.cfparse("the quantity of product {key} is changed by {delta:d}"))
def change_quantity(cart, key, delta):
    cart.change_qty(key, delta)


@when(parsers.cfparse("the quantity of product {key} is set to {qty:d}"))
def set_quantity(cart, key, qty):
    cart.set_quantity(key, qty)


@when(parsers.cfparse("products {first} and {second} are removed"))
def remove_products(cart, first, second):
    cart.remove_many([first, second])


@when("the cart is cleared")
def clear_cart(cart):
    cart.clear()
