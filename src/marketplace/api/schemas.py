"""Pydantic request/response schemas for the Marketplace API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands and aggregates.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from shared.order_lifecycle import OrderStatus


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------
class RegisterRequest(BaseModel):
    email: str
    password: str
    name: str = Field(min_length=1)
    role: Literal["customer", "shopkeeper"] = "customer"

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "email": "asha@example.com",
                    "password": "secret123",
                    "name": "Asha",
                    "role": "customer",
                }
            ]
        }
    }


class LoginRequest(BaseModel):
    email: str
    password: str


class UpdateProfileRequest(BaseModel):
    name: str | None = None
    email: str | None = None


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str


# ---------------------------------------------------------------------------
# Shops
# ---------------------------------------------------------------------------
class CreateShopRequest(BaseModel):
    shop_name: str = Field(min_length=1)
    category: str = Field(min_length=1)
    address: str = Field(min_length=1)
    city: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    timings: str | None = None
    description: str | None = None
    logo: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "shop_name": "Vijay Grocery Store",
                    "category": "Grocery",
                    "address": "123 Main Street",
                    "city": "Delhi",
                    "phone": "+91 98765 43210",
                }
            ]
        }
    }


class UpdateShopRequest(BaseModel):
    shop_name: str | None = Field(default=None, min_length=1)
    category: str | None = Field(default=None, min_length=1)
    address: str | None = None
    city: str | None = None
    phone: str | None = None
    timings: str | None = None
    description: str | None = None
    logo: str | None = None


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
class CreateProductRequest(BaseModel):
    name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    price: float = Field(ge=0)
    category: str = Field(min_length=1)
    shop_id: str = Field(min_length=1)
    image: str | None = None
    stock: int | None = Field(default=None, ge=0)


class UpdateProductRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    price: float | None = Field(default=None, ge=0)
    category: str | None = None
    image: str | None = None
    stock: int | None = Field(default=None, ge=0)


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class OrderItemSchema(BaseModel):
    product_id: str = Field(min_length=1)
    product_name: str = Field(min_length=1)
    quantity: int = Field(ge=1)
    price: float = Field(ge=0)


class CreateOrderRequest(BaseModel):
    items: list[OrderItemSchema] = Field(min_length=1)
    shop_id: str = Field(min_length=1)
    shop_name: str | None = None
    customer_name: str = Field(min_length=1)
    customer_email: str = Field(min_length=1)
    customer_phone: str = Field(min_length=1)
    customer_address: str = Field(min_length=1)
    customer_city: str = Field(min_length=1)
    customer_pincode: str = Field(min_length=1)
    payment_method: str | None = None


class UpdateStatusRequest(BaseModel):
    status: OrderStatus


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------
class _FromAggregate(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class UserOut(_FromAggregate):
    id: str
    email: str
    name: str
    role: str
    shop_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ShopOut(_FromAggregate):
    id: str
    shop_name: str
    owner_name: str | None = None
    owner_id: str
    category: str
    address: str
    city: str
    phone: str
    timings: str | None = None
    description: str | None = None
    logo: str | None = None
    rating: float | None = None
    review_count: int = 0
    is_verified: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProductOut(_FromAggregate):
    id: str
    name: str
    description: str
    price: float
    category: str
    shop_id: str
    image: str | None = None
    stock: int | None = None
    in_stock: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None


class OrderLineOut(_FromAggregate):
    product_id: str
    product_name: str
    quantity: int
    price: float


class OrderOut(_FromAggregate):
    id: str
    customer_id: str
    customer_name: str
    customer_email: str
    customer_phone: str
    customer_address: str
    customer_city: str
    customer_pincode: str
    shop_id: str
    shop_name: str | None = None
    items: list[OrderLineOut]
    total: float
    status: str
    payment_method: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
