"""Pydantic request/response schemas for the Shopping API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands. Money goes out as decimal strings so no
precision is lost on the wire.
"""

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Cart Request Schemas
# ---------------------------------------------------------------------------
class CreateCartRequest(BaseModel):
    owner_id: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "owner_id": "user-42",
                }
            ]
        }
    }


class AddToCartRequest(BaseModel):
    key: str | None = None
    product_id: str | None = None
    name: str
    price: str | float | int = "0"
    image_url: str | None = None
    description: str | None = None
    quantity: int = 1

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_id": "7",
                    "name": "Rain jacket",
                    "price": "89.90",
                    "quantity": 1,
                }
            ]
        }
    }


class ChangeQuantityRequest(BaseModel):
    delta: int


class SetQuantityRequest(BaseModel):
    quantity: int


class RemoveItemsRequest(BaseModel):
    keys: list[str] = Field(default_factory=list)


class CheckoutRequest(BaseModel):
    user_id: str


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class LineItemSchema(BaseModel):
    key: str
    name: str
    unit_price: str
    quantity: int
    line_total: str
    image_url: str | None = None
    description: str | None = None


class TotalsSchema(BaseModel):
    subtotal: str
    tax_rate: str
    tax: str
    shipping_fee: str
    total: str
    item_count: int
    line_count: int
    free_shipping: bool


class CartResponse(BaseModel):
    cart_id: str
    owner_id: str | None = None
    items: list[LineItemSchema]
    totals: TotalsSchema


class CartIdResponse(BaseModel):
    cart_id: str


class OrderPlacedResponse(BaseModel):
    order_id: str | None = None
    total: str


class StatusResponse(BaseModel):
    status: str = "ok"
