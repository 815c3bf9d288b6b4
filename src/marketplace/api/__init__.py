"""Marketplace HTTP API package."""

from marketplace.api.routes import auth_router, order_router, product_router, shop_router
from marketplace.api.uploads import upload_router

__all__ = ["auth_router", "shop_router", "product_router", "order_router", "upload_router"]
