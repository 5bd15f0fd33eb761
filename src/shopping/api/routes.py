"""FastAPI routes for the Shopping domain — carts and checkout."""

import json

import structlog
from fastapi import APIRouter, HTTPException
from protean.utils.globals import current_domain

from shared.money import quantize_display
from shopping.api.schemas import (
    AddToCartRequest,
    CartIdResponse,
    CartResponse,
    ChangeQuantityRequest,
    CheckoutRequest,
    CreateCartRequest,
    LineItemSchema,
    OrderPlacedResponse,
    RemoveItemsRequest,
    SetQuantityRequest,
    StatusResponse,
    TotalsSchema,
)
from shopping.cart.cart import Cart
from shopping.cart.items import (
    AddToCart,
    ChangeCartQuantity,
    RemoveFromCart,
    RemoveManyFromCart,
    SetCartQuantity,
)
from shopping.cart.management import ClearCart, CreateCart
from shopping.checkout.initiator import CheckoutFailed
from shopping.checkout.placement import PlaceOrder

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/carts", tags=["carts"])


def _cart_response(cart: Cart) -> CartResponse:
    totals = cart.totals
    return CartResponse(
        cart_id=str(cart.id),
        owner_id=str(cart.owner_id) if cart.owner_id else None,
        items=[
            LineItemSchema(
                key=item.key,
                name=item.name,
                unit_price=item.unit_price,
                quantity=item.quantity,
                line_total=str(item.line_total),
                image_url=item.image_url,
                description=item.description,
            )
            for item in cart.items
        ],
        totals=TotalsSchema(
            subtotal=str(totals.subtotal),
            tax_rate=str(totals.tax_rate),
            tax=str(totals.tax),
            shipping_fee=str(totals.shipping_fee),
            total=str(totals.total),
            item_count=totals.item_count,
            line_count=totals.line_count,
            free_shipping=totals.free_shipping,
        ),
    )


@cart_router.post("", status_code=201, response_model=CartIdResponse)
async def create_cart(body: CreateCartRequest) -> CartIdResponse:
    command = CreateCart(owner_id=body.owner_id)
    result = current_domain.process(command, asynchronous=False)
    return CartIdResponse(cart_id=result)


@cart_router.get("/{cart_id}", response_model=CartResponse)
async def get_cart(cart_id: str) -> CartResponse:
    cart = current_domain.repository_for(Cart).get(cart_id)
    return _cart_response(cart)


@cart_router.post("/{cart_id}/items", response_model=StatusResponse)
async def add_cart_item(cart_id: str, body: AddToCartRequest) -> StatusResponse:
    command = AddToCart(
        cart_id=cart_id,
        key=body.key,
        product_id=body.product_id,
        name=body.name,
        price=str(body.price),
        image_url=body.image_url,
        description=body.description,
        quantity=body.quantity,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.patch("/{cart_id}/items/{key}", response_model=StatusResponse)
async def change_cart_item_quantity(cart_id: str, key: str, body: ChangeQuantityRequest) -> StatusResponse:
    command = ChangeCartQuantity(cart_id=cart_id, key=key, delta=body.delta)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.put("/{cart_id}/items/{key}", response_model=StatusResponse)
async def set_cart_item_quantity(cart_id: str, key: str, body: SetQuantityRequest) -> StatusResponse:
    command = SetCartQuantity(cart_id=cart_id, key=key, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.delete("/{cart_id}/items/{key}", response_model=StatusResponse)
async def remove_cart_item(cart_id: str, key: str) -> StatusResponse:
    command = RemoveFromCart(cart_id=cart_id, key=key)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.post("/{cart_id}/items/remove", response_model=StatusResponse)
async def remove_cart_items(cart_id: str, body: RemoveItemsRequest) -> StatusResponse:
    command = RemoveManyFromCart(cart_id=cart_id, keys=json.dumps(body.keys))
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.delete("/{cart_id}/items", response_model=StatusResponse)
async def clear_cart(cart_id: str) -> StatusResponse:
    command = ClearCart(cart_id=cart_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="cleared")


@cart_router.post("/{cart_id}/checkout", status_code=201, response_model=OrderPlacedResponse)
async def checkout_cart(cart_id: str, body: CheckoutRequest) -> OrderPlacedResponse:
    """Submit the cart to the order service.

    The cart is emptied only when the order is confirmed. A rejected order
    surfaces as 502 and the cart keeps its items.
    """
    command = PlaceOrder(cart_id=cart_id, user_id=body.user_id)
    try:
        confirmation = current_domain.process(command, asynchronous=False)
    except CheckoutFailed as exc:
        logger.warning("Checkout rejected", cart_id=cart_id, reason=exc.reason)
        raise HTTPException(status_code=502, detail=exc.reason)

    return OrderPlacedResponse(
        order_id=confirmation.order_id,
        total=str(quantize_display(confirmation.confirmed_total)),
    )
