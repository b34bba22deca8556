"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer), separate from
internal Protean commands.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Cart Request Schemas
# ---------------------------------------------------------------------------
class CreateCartRequest(BaseModel):
    currency: str = Field(default="USD", min_length=3, max_length=3)


class AddToCartRequest(BaseModel):
    product_id: str
    product_name: str
    quantity: int = Field(ge=1, default=1)
    unit_price: float = Field(ge=0)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_id": "prod-001",
                    "product_name": "Mechanical Keyboard",
                    "quantity": 1,
                    "unit_price": 89.99,
                }
            ]
        }
    }


# ---------------------------------------------------------------------------
# Checkout Request Schemas
# ---------------------------------------------------------------------------
class CheckoutRequest(BaseModel):
    cart_id: str


class ConfigureGatewayRequest(BaseModel):
    should_succeed: bool = True
    failure_reason: str = "Gateway unavailable"


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class CartIdResponse(BaseModel):
    cart_id: str


class ItemIdResponse(BaseModel):
    item_id: str


class CartItemResponse(BaseModel):
    item_id: str
    product_id: str
    product_name: str
    quantity: int
    unit_price: float


class CartResponse(BaseModel):
    cart_id: str
    customer_id: str | None = None
    currency: str
    items: list[CartItemResponse]
    total_price: float


class CheckoutResponse(BaseModel):
    order_id: str
    checkout_url: str


class OrderItemResponse(BaseModel):
    product_id: str
    product_name: str
    quantity: int
    unit_price: float


class OrderResponse(BaseModel):
    order_id: str
    customer_id: str
    status: str
    items: list[OrderItemResponse]
    total_price: float
    currency: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class GatewayConfigResponse(BaseModel):
    gateway: str
    should_succeed: bool
    failure_reason: str


class StatusResponse(BaseModel):
    status: str = "ok"
