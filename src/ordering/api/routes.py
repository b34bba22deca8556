"""FastAPI routes for the Ordering domain: carts, checkout and orders."""

import os

from fastapi import APIRouter, Depends, Header, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from ordering.api.schemas import (
    AddToCartRequest,
    CartIdResponse,
    CartItemResponse,
    CartResponse,
    CheckoutRequest,
    CheckoutResponse,
    ConfigureGatewayRequest,
    CreateCartRequest,
    GatewayConfigResponse,
    ItemIdResponse,
    OrderItemResponse,
    OrderResponse,
    StatusResponse,
)
from ordering.auth import NotAuthenticatedError, authenticated_as
from ordering.cart.cart import ShoppingCart
from ordering.cart.items import AddToCart, RemoveFromCart
from ordering.cart.management import ClearCart, CreateCart
from ordering.checkout.errors import CheckoutError
from ordering.checkout.service import CheckoutService
from ordering.order.queries import (
    OrderAccessDenied,
    OrderNotFoundError,
    get_order_for_customer,
    list_orders_for_customer,
)
from payments.gateway import get_gateway
from payments.gateway.fake_adapter import FakeGateway
from payments.gateway.port import PaymentError, PaymentNotification

checkout_service = CheckoutService()


def current_customer_id(x_customer_id: str = Header(default="")) -> str:
    """The authenticated customer, as asserted by the upstream gateway."""
    if not x_customer_id.strip():
        raise HTTPException(status_code=401, detail="Missing X-Customer-Id header")
    return x_customer_id.strip()


def _cart_response(cart: ShoppingCart) -> CartResponse:
    return CartResponse(
        cart_id=str(cart.id),
        customer_id=str(cart.customer_id) if cart.customer_id else None,
        currency=cart.currency,
        items=[
            CartItemResponse(
                item_id=str(item.id),
                product_id=str(item.product_id),
                product_name=item.product_name,
                quantity=item.quantity,
                unit_price=item.unit_price,
            )
            for item in cart.items
        ],
        total_price=cart.total_price,
    )


def _order_response(order) -> OrderResponse:
    return OrderResponse(
        order_id=str(order.id),
        customer_id=str(order.customer_id),
        status=order.status,
        items=[
            OrderItemResponse(
                product_id=str(item.product_id),
                product_name=item.product_name,
                quantity=item.quantity,
                unit_price=item.unit_price,
            )
            for item in order.items
        ],
        total_price=order.total_price,
        currency=order.currency,
        created_at=order.created_at,
        updated_at=order.updated_at,
    )


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/carts", tags=["carts"])


@cart_router.post("", status_code=201, response_model=CartIdResponse)
async def create_cart(body: CreateCartRequest, customer_id: str = Depends(current_customer_id)) -> CartIdResponse:
    command = CreateCart(customer_id=customer_id, currency=body.currency)
    result = current_domain.process(command, asynchronous=False)
    return CartIdResponse(cart_id=result)


@cart_router.get("/{cart_id}", response_model=CartResponse)
async def get_cart(cart_id: str) -> CartResponse:
    try:
        cart = current_domain.repository_for(ShoppingCart).get(cart_id)
    except ObjectNotFoundError as exc:
        raise HTTPException(status_code=404, detail=f"Cart {cart_id} not found") from exc
    return _cart_response(cart)


@cart_router.post("/{cart_id}/items", status_code=201, response_model=ItemIdResponse)
async def add_cart_item(cart_id: str, body: AddToCartRequest) -> ItemIdResponse:
    command = AddToCart(
        cart_id=cart_id,
        product_id=body.product_id,
        product_name=body.product_name,
        quantity=body.quantity,
        unit_price=body.unit_price,
    )
    try:
        item_id = current_domain.process(command, asynchronous=False)
    except ObjectNotFoundError as exc:
        raise HTTPException(status_code=404, detail=f"Cart {cart_id} not found") from exc
    return ItemIdResponse(item_id=item_id)


@cart_router.delete("/{cart_id}/items/{item_id}", response_model=StatusResponse)
async def remove_cart_item(cart_id: str, item_id: str) -> StatusResponse:
    command = RemoveFromCart(cart_id=cart_id, item_id=item_id)
    try:
        current_domain.process(command, asynchronous=False)
    except ObjectNotFoundError as exc:
        raise HTTPException(status_code=404, detail=f"Cart {cart_id} not found") from exc
    except ValidationError as exc:
        raise HTTPException(status_code=404, detail=exc.messages) from exc
    return StatusResponse()


@cart_router.delete("/{cart_id}/items", response_model=StatusResponse)
async def clear_cart(cart_id: str) -> StatusResponse:
    try:
        current_domain.process(ClearCart(cart_id=cart_id), asynchronous=False)
    except ObjectNotFoundError as exc:
        raise HTTPException(status_code=404, detail=f"Cart {cart_id} not found") from exc
    return StatusResponse(status="cleared")


# ---------------------------------------------------------------------------
# Checkout Router
# ---------------------------------------------------------------------------
checkout_router = APIRouter(prefix="/checkout", tags=["checkout"])


@checkout_router.post("", status_code=201, response_model=CheckoutResponse)
def checkout(body: CheckoutRequest, customer_id: str = Depends(current_customer_id)) -> CheckoutResponse:
    """Turn the cart into a payment-pending order and open a payment session.

    Returns the URL the client is redirected to for payment. Declared sync so
    FastAPI runs the blocking processor call in its threadpool.
    """
    try:
        with authenticated_as(customer_id):
            result = checkout_service.checkout(body.cart_id)
    except CheckoutError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except NotAuthenticatedError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc
    except PaymentError as exc:
        raise HTTPException(status_code=502, detail=f"Payment processor error: {exc}") from exc
    return CheckoutResponse(order_id=result.order_id, checkout_url=result.checkout_url)


@checkout_router.post("/webhook", response_model=StatusResponse)
async def payment_webhook(request: Request) -> StatusResponse:
    """Receive a payment notification from the processor.

    The raw body is passed through untouched: signatures are computed over
    the exact bytes sent. Handling runs in the threadpool since it blocks on
    the order lock.
    """
    try:
        payload = (await request.body()).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise HTTPException(status_code=400, detail="invalid payload") from exc

    notification = PaymentNotification(payload=payload, headers=dict(request.headers))
    try:
        outcome = await run_in_threadpool(checkout_service.handle_notification, notification)
    except PaymentError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return StatusResponse(status=outcome.value)


@checkout_router.post("/gateway/configure", response_model=GatewayConfigResponse)
async def configure_gateway(body: ConfigureGatewayRequest) -> GatewayConfigResponse:
    """Configure the FakeGateway behavior (non-production only).

    This endpoint is only available when PROTEAN_ENV is not 'production'.
    It allows toggling success/failure behavior for manual API testing.
    """
    if os.environ.get("PROTEAN_ENV") == "production":
        raise HTTPException(status_code=403, detail="Gateway configuration not available in production")

    gateway = get_gateway()
    if not isinstance(gateway, FakeGateway):
        raise HTTPException(status_code=400, detail="Gateway configuration only available for FakeGateway")

    gateway.configure(
        should_succeed=body.should_succeed,
        failure_reason=body.failure_reason,
    )
    return GatewayConfigResponse(
        gateway=type(gateway).__name__,
        should_succeed=gateway.should_succeed,
        failure_reason=gateway.failure_reason,
    )


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.get("", response_model=list[OrderResponse])
async def list_orders(customer_id: str = Depends(current_customer_id)) -> list[OrderResponse]:
    return [_order_response(order) for order in list_orders_for_customer(customer_id)]


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, customer_id: str = Depends(current_customer_id)) -> OrderResponse:
    try:
        order = get_order_for_customer(order_id, customer_id)
    except OrderNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except OrderAccessDenied as exc:
        raise HTTPException(status_code=403, detail=str(exc)) from exc
    return _order_response(order)
