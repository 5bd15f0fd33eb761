"""Shopping cart load test scenarios.

Two stateful SequentialTaskSet journeys: a browsing shopper who edits the
cart and empties it, and a buyer who checks out.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import cart_data, cart_item_data, checkout_data
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import CartState


class _CartJourney(SequentialTaskSet):
    def on_start(self):
        self.state = CartState()

    def _create_cart(self):
        payload = cart_data()
        with self.client.post("/carts", json=payload, catch_response=True, name="POST /carts") as resp:
            if resp.status_code == 201:
                self.state.cart_id = resp.json()["cart_id"]
                self.state.user_id = payload["owner_id"]
            else:
                resp.failure(f"Create cart failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    def _add_item(self):
        payload = cart_item_data()
        with self.client.post(
            f"/carts/{self.state.cart_id}/items",
            json=payload,
            catch_response=True,
            name="POST /carts/{id}/items",
        ) as resp:
            if resp.status_code == 200:
                self.state.keys.append(payload["product_id"])
            else:
                resp.failure(f"Add cart item failed: {resp.status_code} — {extract_error_detail(resp)}")


class CartEditingJourney(_CartJourney):
    """Create Cart -> Add Items -> Step Quantity -> Set Quantity -> View -> Clear.

    Generates events: CartItemAdded (x3), CartQuantityChanged (x2),
    CartCleared.
    """

    @task
    def create_cart(self):
        self._create_cart()

    @task
    def add_items(self):
        for _ in range(3):
            self._add_item()

    @task
    def step_quantity(self):
        key = random.choice(self.state.keys)
        with self.client.patch(
            f"/carts/{self.state.cart_id}/items/{key}",
            json={"delta": 1},
            catch_response=True,
            name="PATCH /carts/{id}/items/{key}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Step quantity failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def set_quantity(self):
        key = random.choice(self.state.keys)
        with self.client.put(
            f"/carts/{self.state.cart_id}/items/{key}",
            json={"quantity": random.randint(1, 5)},
            catch_response=True,
            name="PUT /carts/{id}/items/{key}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Set quantity failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def view_cart(self):
        with self.client.get(
            f"/carts/{self.state.cart_id}",
            catch_response=True,
            name="GET /carts/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"View cart failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def clear_cart(self):
        with self.client.delete(
            f"/carts/{self.state.cart_id}/items",
            catch_response=True,
            name="DELETE /carts/{id}/items",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Clear cart failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class CheckoutJourney(_CartJourney):
    """Create Cart -> Add Items -> Remove One -> Checkout.

    Generates events: CartItemAdded (x2), CartItemRemoved, CartCleared.
    """

    @task
    def create_cart(self):
        self._create_cart()

    @task
    def add_items(self):
        for _ in range(3):
            self._add_item()

    @task
    def remove_item(self):
        key = self.state.keys.pop()
        with self.client.delete(
            f"/carts/{self.state.cart_id}/items/{key}",
            catch_response=True,
            name="DELETE /carts/{id}/items/{key}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Remove item failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def checkout(self):
        with self.client.post(
            f"/carts/{self.state.cart_id}/checkout",
            json=checkout_data(self.state.user_id),
            catch_response=True,
            name="POST /carts/{id}/checkout",
        ) as resp:
            if resp.status_code == 201:
                self.state.order_id = resp.json()["order_id"]
            else:
                resp.failure(f"Checkout failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class CartUser(HttpUser):
    """Shopper who edits a cart without buying."""

    tasks = [CartEditingJourney]
    wait_time = between(0.5, 2.0)


class CheckoutUser(HttpUser):
    """Shopper who goes through checkout."""

    tasks = [CheckoutJourney]
    wait_time = between(1.0, 3.0)
