"""FastAPI routes for the Marketplace — auth, shops, products and orders."""

import json

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from marketplace.account.profile import ChangePassword, UpdateProfile
from marketplace.account.registration import RegisterUser
from marketplace.account.session import LogIn, LogOut
from marketplace.account.user import User
from marketplace.api.auth import current_user, optional_user
from marketplace.api.schemas import (
    ChangePasswordRequest,
    CreateOrderRequest,
    CreateProductRequest,
    CreateShopRequest,
    LoginRequest,
    OrderOut,
    ProductOut,
    RegisterRequest,
    ShopOut,
    UpdateProductRequest,
    UpdateProfileRequest,
    UpdateShopRequest,
    UpdateStatusRequest,
    UserOut,
)
from marketplace.catalogue.management import CreateProduct, DeleteProduct, UpdateProduct
from marketplace.catalogue.product import Product
from marketplace.account.lookup import user_for_token
from marketplace.ordering.placement import PlaceOrder
from marketplace.ordering.queries import order_for, orders_for
from marketplace.ordering.status import UpdateOrderStatus
from marketplace.ordering.order import Order
from marketplace.shop.management import CreateShop, DeleteShop, UpdateShop
from marketplace.shop.shop import Shop
from marketplace.utils.repository import load


def _user_out(user):
    return UserOut.model_validate(user)


def _shop_out(shop):
    return ShopOut.model_validate(shop)


def _product_out(product):
    return ProductOut.model_validate(product)


def _order_out(order):
    return OrderOut.model_validate(order)


# ---------------------------------------------------------------------------
# Auth Router
# ---------------------------------------------------------------------------
auth_router = APIRouter(prefix="/auth", tags=["auth"])


@auth_router.post("/register", status_code=201)
async def register(body: RegisterRequest):
    command = RegisterUser(
        email=body.email,
        password=body.password,
        name=body.name,
        role=body.role,
    )
    token = current_domain.process(command, asynchronous=False)
    user = user_for_token(token)
    return {"message": "User registered successfully", "token": token, "user": _user_out(user)}


@auth_router.post("/login")
async def login(body: LoginRequest):
    token = current_domain.process(LogIn(email=body.email, password=body.password), asynchronous=False)
    user = user_for_token(token)
    return {"message": "Login successful", "token": token, "user": _user_out(user)}


@auth_router.post("/logout")
async def logout(user: User = Depends(current_user)):
    current_domain.process(LogOut(user_id=str(user.id)), asynchronous=False)
    return {"message": "Logged out successfully"}


@auth_router.get("/me")
async def me(user: User = Depends(current_user)):
    return {"user": _user_out(user)}


@auth_router.put("/profile")
async def update_profile(body: UpdateProfileRequest, user: User = Depends(current_user)):
    command = UpdateProfile(user_id=str(user.id), name=body.name, email=body.email)
    current_domain.process(command, asynchronous=False)
    return {"message": "Profile updated successfully", "user": _user_out(load(User, str(user.id), "User"))}


@auth_router.put("/password")
async def change_password(body: ChangePasswordRequest, user: User = Depends(current_user)):
    command = ChangePassword(
        user_id=str(user.id),
        current_password=body.current_password,
        new_password=body.new_password,
    )
    current_domain.process(command, asynchronous=False)
    return {"message": "Password changed successfully"}


# ---------------------------------------------------------------------------
# Shop Router
# ---------------------------------------------------------------------------
shop_router = APIRouter(prefix="/shops", tags=["shops"])


@shop_router.get("")
async def list_shops(user: User | None = Depends(optional_user)):  # noqa: ARG001
    shops = current_domain.repository_for(Shop)._dao.query.all().items
    return {"shops": [_shop_out(shop) for shop in shops]}


@shop_router.get("/{shop_id}")
async def get_shop(shop_id: str, user: User | None = Depends(optional_user)):  # noqa: ARG001
    return {"shop": _shop_out(load(Shop, shop_id, "Shop"))}


@shop_router.post("", status_code=201)
async def create_shop(body: CreateShopRequest, user: User = Depends(current_user)):
    command = CreateShop(actor_id=str(user.id), **body.model_dump())
    shop_id = current_domain.process(command, asynchronous=False)
    return {"message": "Shop created successfully", "shop": _shop_out(load(Shop, shop_id, "Shop"))}


@shop_router.put("/{shop_id}")
async def update_shop(shop_id: str, body: UpdateShopRequest, user: User = Depends(current_user)):
    command = UpdateShop(
        actor_id=str(user.id),
        shop_id=shop_id,
        changes=json.dumps(body.model_dump(exclude_unset=True)),
    )
    current_domain.process(command, asynchronous=False)
    return {"message": "Shop updated successfully", "shop": _shop_out(load(Shop, shop_id, "Shop"))}


@shop_router.delete("/{shop_id}")
async def delete_shop(shop_id: str, user: User = Depends(current_user)):
    current_domain.process(DeleteShop(actor_id=str(user.id), shop_id=shop_id), asynchronous=False)
    return {"message": "Shop deleted successfully"}


# ---------------------------------------------------------------------------
# Product Router
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])


@product_router.get("")
async def list_products(
    shop_id: str | None = Query(default=None, alias="shopId"),
    category: str | None = Query(default=None),
):
    filters = {}
    if shop_id:
        filters["shop_id"] = shop_id
    if category:
        filters["category"] = category

    query = current_domain.repository_for(Product)._dao.query
    products = (query.filter(**filters) if filters else query).all().items
    return {"products": [_product_out(product) for product in products]}


@product_router.get("/{product_id}")
async def get_product(product_id: str):
    return {"product": _product_out(load(Product, product_id, "Product"))}


@product_router.post("", status_code=201)
async def create_product(body: CreateProductRequest, user: User = Depends(current_user)):
    command = CreateProduct(actor_id=str(user.id), **body.model_dump())
    product_id = current_domain.process(command, asynchronous=False)
    return {"message": "Product created successfully", "product": _product_out(load(Product, product_id, "Product"))}


@product_router.put("/{product_id}")
async def update_product(product_id: str, body: UpdateProductRequest, user: User = Depends(current_user)):
    command = UpdateProduct(
        actor_id=str(user.id),
        product_id=product_id,
        changes=json.dumps(body.model_dump(exclude_unset=True)),
    )
    current_domain.process(command, asynchronous=False)
    return {"message": "Product updated successfully", "product": _product_out(load(Product, product_id, "Product"))}


@product_router.delete("/{product_id}")
async def delete_product(product_id: str, user: User = Depends(current_user)):
    current_domain.process(DeleteProduct(actor_id=str(user.id), product_id=product_id), asynchronous=False)
    return {"message": "Product deleted successfully"}


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.get("")
async def list_orders(user: User = Depends(current_user)):
    return {"orders": [_order_out(order) for order in orders_for(user)]}


@order_router.get("/{order_id}")
async def get_order(order_id: str, user: User = Depends(current_user)):
    return {"order": _order_out(order_for(user, order_id))}


@order_router.post("", status_code=201)
async def create_order(body: CreateOrderRequest, user: User = Depends(current_user)):
    payload = body.model_dump()
    command = PlaceOrder(
        customer_id=str(user.id),
        items=json.dumps(payload.pop("items")),
        **payload,
    )
    order_id = current_domain.process(command, asynchronous=False)
    return {"message": "Order created successfully", "order": _order_out(load(Order, order_id, "Order"))}


@order_router.put("/{order_id}/status")
async def update_order_status(order_id: str, body: UpdateStatusRequest, user: User = Depends(current_user)):
    command = UpdateOrderStatus(actor_id=str(user.id), order_id=order_id, status=body.status.value)
    current_domain.process(command, asynchronous=False)
    return {"message": "Order status updated successfully", "order": _order_out(load(Order, order_id, "Order"))}
