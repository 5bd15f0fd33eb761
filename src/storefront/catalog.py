"""Catalogue boundary — normalises product listings from the storefront API.

The products endpoint is inconsistent about its envelope and its field
names. Everything is normalised here, right after the HTTP call, so the
rest of the system only ever sees ``Product`` values.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal

import structlog

from shared.http import ApiClient
from shared.money import ZERO, AmountUnit, to_major_units

logger = structlog.get_logger(__name__)

PRODUCTS_PATH = "/products.php"
DEFAULT_CURRENCY = "EUR"

# Field-priority table: the first non-empty source wins.
ID_FIELDS = ("id", "product_id", "id_product")
NAME_FIELDS = ("name", "title")
PRICE_FIELDS = (("price_cents", AmountUnit.CENTS), ("price", AmountUnit.MAJOR))
IMAGE_FIELDS = ("image_url", "imageUrl")
STOCK_FIELDS = ("stock", "qty", "quantity")


class CatalogResponseError(Exception):
    """The products endpoint answered with an error instead of a listing."""


@dataclass(frozen=True)
class Product:
    id: str | None
    name: str
    price: Decimal
    currency: str = DEFAULT_CURRENCY
    description: str = ""
    image_url: str | None = None
    stock: int | None = None

    @property
    def in_stock(self) -> bool:
        return self.stock is None or self.stock > 0

    def as_cart_item(self) -> dict:
        """Descriptor accepted by ``Cart.add``."""
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "image_url": self.image_url,
            "description": self.description,
        }


def _first(raw: Mapping, fields):
    for field in fields:
        value = raw.get(field)
        if value is not None and value != "":
            return value
    return None


def _stock(value) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def normalize_product(raw: Mapping, amount_unit=None) -> Product:
    """Map one upstream product onto ``Product``.

    The price field name tags its unit (``price_cents`` or ``price``). An
    explicit ``amount_unit`` on the product, or passed in for the whole
    listing, overrides that tag.
    """
    unit_override = raw.get("amount_unit") or amount_unit

    price = ZERO
    for field, unit in PRICE_FIELDS:
        value = raw.get(field)
        if value is not None and value != "":
            price = to_major_units(value, unit_override or unit, field=field)
            break

    product_id = _first(raw, ID_FIELDS)
    name = _first(raw, NAME_FIELDS)
    image_url = _first(raw, IMAGE_FIELDS)

    return Product(
        id=str(product_id) if product_id is not None else None,
        name=str(name) if name is not None else "",
        price=price,
        currency=raw.get("currency") or DEFAULT_CURRENCY,
        description=raw.get("description") or "",
        image_url=str(image_url) if image_url is not None else None,
        stock=_stock(_first(raw, STOCK_FIELDS)),
    )


def _looks_like_html(text: str) -> bool:
    head = text.lstrip()[:20].lower()
    return head.startswith("<")


def normalize_products_response(data) -> list[Product]:
    """Extract and normalise the product list from any known envelope.

    Accepts a bare list, or an object carrying an ``items`` or ``data`` list.
    An error object or an HTML page raises ``CatalogResponseError``.
    Anything else is treated as an empty listing.
    """
    amount_unit = None

    if isinstance(data, list):
        rows = data
    elif isinstance(data, Mapping):
        amount_unit = data.get("amount_unit")
        if isinstance(data.get("items"), list):
            rows = data["items"]
        elif isinstance(data.get("data"), list):
            rows = data["data"]
        elif data.get("error") or data.get("message"):
            raise CatalogResponseError(str(data.get("error") or data.get("message")))
        else:
            rows = []
    elif isinstance(data, str) and _looks_like_html(data):
        raise CatalogResponseError("Products endpoint returned an HTML page instead of JSON")
    else:
        rows = []

    products = [normalize_product(row, amount_unit) for row in rows if isinstance(row, Mapping)]
    if len(products) != len(rows):
        logger.warning("Skipped malformed product rows", skipped=len(rows) - len(products))
    return products


class CatalogClient:
    def __init__(self, client: ApiClient | None = None, path: str = PRODUCTS_PATH) -> None:
        self.client = client or ApiClient()
        self.path = path

    def list_products(self, **params) -> list[Product]:
        data = self.client.get(self.path, params=params or None)
        products = normalize_products_response(data)
        logger.debug("Fetched products", count=len(products))
        return products
