import pytest

from shopping.checkout.gateway import reset_gateway


@pytest.fixture(autouse=True)
def _ctx(shopping_context):
    yield


@pytest.fixture(autouse=True)
def _reset_order_gateway():
    reset_gateway()
    yield
    reset_gateway()
