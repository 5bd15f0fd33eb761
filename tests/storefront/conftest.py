import pytest


@pytest.fixture(autouse=True)
def _ctx(shopping_context):
    yield
