"""Faker-based data generators for Locust load test scenarios.

Payloads match the field names of the Shopping API's Pydantic request
schemas.
"""

import random
import uuid

from faker import Faker

fake = Faker("fr_FR")


def user_id() -> str:
    return str(random.randint(1, 50_000))


def cart_data() -> dict:
    """CreateCartRequest payload; roughly one cart in five is a guest cart."""
    return {"owner_id": None if random.random() < 0.2 else user_id()}


def cart_item_data(product_id: str | None = None) -> dict:
    """AddToCartRequest payload with a two-decimal euro price."""
    return {
        "product_id": product_id or uuid.uuid4().hex[:8],
        "name": fake.word().capitalize()[:255],
        "price": f"{random.uniform(1, 150):.2f}",
        "description": fake.sentence(nb_words=8),
        "quantity": random.randint(1, 3),
    }


def checkout_data(owner: str | None = None) -> dict:
    return {"user_id": owner or user_id()}
