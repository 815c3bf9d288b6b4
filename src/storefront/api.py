"""Resource-level client for the LocalMart API.

Cache keys and how long each resource stays fresh are decided here:

    shops:all, shops:<id>                              60 s
    products:all, products:shop:<id>[:category:<c>]    30 s
    products:<id>                                      60 s
    orders:all, orders:shop:<id>                       15 s

Writes invalidate every key of their resource family.
"""

from pathlib import Path

import structlog

from storefront.config import Settings
from storefront.errors import AuthenticationRequired, RequestFailed
from storefront.orchestrator import RequestOrchestrator
from storefront.storage import TOKEN_KEY, FileStorage

logger = structlog.get_logger(__name__)

SHOPS_TTL = 60.0
SHOP_TTL = 60.0
PRODUCTS_TTL = 30.0
PRODUCT_TTL = 60.0
ORDERS_TTL = 15.0
SHOP_ORDERS_TTL = 15.0

SEARCHABLE_SHOP_FIELDS = ("shop_name", "category", "city", "address")


class _Resource:
    def __init__(self, orchestrator):
        self.orchestrator = orchestrator


class AuthResource(_Resource):
    def _remember(self, data):
        token = data.get("token")
        if token:
            self.orchestrator.storage.set(TOKEN_KEY, token)
        return data

    async def register(self, email, password, name, role="customer", *, signal=None):
        data = await self.orchestrator.write(
            "POST",
            "/auth/register",
            json={"email": email, "password": password, "name": name, "role": role},
            signal=signal,
        )
        return self._remember(data)

    async def login(self, email, password, *, signal=None):
        data = await self.orchestrator.write(
            "POST", "/auth/login", json={"email": email, "password": password}, signal=signal
        )
        return self._remember(data)

    async def logout(self):
        """End the session remotely if possible; the local token is always dropped."""
        try:
            if self.orchestrator.token:
                await self.orchestrator.write("POST", "/auth/logout", auth_required=True)
        except RequestFailed as exc:
            logger.warning("logout_failed", error=exc.message)
        finally:
            self.orchestrator.storage.remove(TOKEN_KEY)
            self.orchestrator.invalidate("orders:")

    @property
    def is_authenticated(self):
        return bool(self.orchestrator.token)

    async def me(self, *, signal=None):
        return await self.orchestrator.read("/auth/me", signal=signal, auth_required=True)

    async def update_profile(self, *, signal=None, **updates):
        return await self.orchestrator.write(
            "PUT", "/auth/profile", json=updates, signal=signal, auth_required=True
        )

    async def change_password(self, current_password, new_password, *, signal=None):
        return await self.orchestrator.write(
            "PUT",
            "/auth/password",
            json={"current_password": current_password, "new_password": new_password},
            signal=signal,
            auth_required=True,
        )


class ShopsResource(_Resource):
    async def all(self, use_cache=True, *, signal=None):
        if not use_cache:
            self.orchestrator.invalidate("shops:all")
        return await self.orchestrator.read("/shops", cache_key="shops:all", ttl=SHOPS_TTL, signal=signal)

    async def get(self, shop_id, *, signal=None):
        return await self.orchestrator.read(
            f"/shops/{shop_id}", cache_key=f"shops:{shop_id}", ttl=SHOP_TTL, signal=signal
        )

    async def search(self, query, shops=None, *, signal=None):
        """Filter shops by name, category, city or address (case-insensitive)."""
        if shops is None:
            shops = (await self.all(signal=signal))["shops"]

        needle = (query or "").strip().lower()
        if not needle:
            return list(shops)
        return [
            shop
            for shop in shops
            if any(needle in str(shop.get(field) or "").lower() for field in SEARCHABLE_SHOP_FIELDS)
        ]

    async def create(self, data, *, signal=None):
        return await self.orchestrator.write(
            "POST", "/shops", json=data, invalidate=("shops:",), signal=signal, auth_required=True
        )

    async def update(self, shop_id, data, *, signal=None):
        return await self.orchestrator.write(
            "PUT", f"/shops/{shop_id}", json=data, invalidate=("shops:",), signal=signal, auth_required=True
        )

    async def delete(self, shop_id, *, signal=None):
        return await self.orchestrator.write(
            "DELETE", f"/shops/{shop_id}", invalidate=("shops:",), signal=signal, auth_required=True
        )


def products_cache_key(shop_id=None, category=None):
    key = f"products:shop:{shop_id}" if shop_id else "products:all"
    if category:
        key += f":category:{category}"
    return key


class ProductsResource(_Resource):
    async def all(self, shop_id=None, category=None, *, signal=None):
        params = {}
        if shop_id:
            params["shopId"] = shop_id
        if category:
            params["category"] = category
        return await self.orchestrator.read(
            "/products",
            cache_key=products_cache_key(shop_id, category),
            ttl=PRODUCTS_TTL,
            params=params or None,
            signal=signal,
        )

    async def get(self, product_id, *, signal=None):
        return await self.orchestrator.read(
            f"/products/{product_id}", cache_key=f"products:{product_id}", ttl=PRODUCT_TTL, signal=signal
        )

    async def create(self, data, *, signal=None):
        return await self.orchestrator.write(
            "POST", "/products", json=data, invalidate=("products:",), signal=signal, auth_required=True
        )

    async def update(self, product_id, data, *, signal=None):
        return await self.orchestrator.write(
            "PUT",
            f"/products/{product_id}",
            json=data,
            invalidate=("products:",),
            signal=signal,
            auth_required=True,
        )

    async def delete(self, product_id, *, signal=None):
        return await self.orchestrator.write(
            "DELETE", f"/products/{product_id}", invalidate=("products:",), signal=signal, auth_required=True
        )


class OrdersResource(_Resource):
    async def all(self, *, signal=None):
        return await self.orchestrator.read(
            "/orders", cache_key="orders:all", ttl=ORDERS_TTL, signal=signal, auth_required=True
        )

    async def by_shop(self, shop_id, *, signal=None):
        """Orders of one shop, derived from ``all()`` and cached on their own key."""
        key = f"orders:shop:{shop_id}"
        cached = self.orchestrator.cache.get(key)
        if cached is not None:
            return cached

        mark = self.orchestrator.cache.mark()
        orders = (await self.all(signal=signal))["orders"]
        view = {"orders": [order for order in orders if str(order.get("shop_id")) == str(shop_id)]}
        if not self.orchestrator.cache.invalidated_since(key, mark):
            self.orchestrator.cache.set(key, view, SHOP_ORDERS_TTL)
        return view

    async def get(self, order_id, *, signal=None):
        return await self.orchestrator.read(f"/orders/{order_id}", signal=signal, auth_required=True)

    async def create(self, data, *, signal=None):
        return await self.orchestrator.write(
            "POST", "/orders", json=data, invalidate=("orders:",), signal=signal, auth_required=True
        )

    async def update_status(self, order_id, status, *, signal=None):
        return await self.orchestrator.write(
            "PUT",
            f"/orders/{order_id}/status",
            json={"status": status},
            invalidate=("orders:",),
            signal=signal,
            auth_required=True,
        )


class UploadsResource(_Resource):
    def _absolute(self, url):
        return url if url.startswith(("http://", "https://")) else f"{self.orchestrator.server_root}{url}"

    def _require_token(self):
        if not self.orchestrator.token:
            raise AuthenticationRequired()

    async def upload(self, path, *, signal=None):
        """Upload one image and return its absolute URL."""
        self._require_token()
        path = Path(path)
        data = await self.orchestrator.write(
            "POST",
            "/upload",
            files={"file": (path.name, path.read_bytes(), _content_type(path))},
            signal=signal,
            auth_required=True,
        )
        return self._absolute(data["url"])

    async def upload_many(self, paths, *, signal=None):
        self._require_token()
        files = []
        for path in map(Path, paths):
            files.append(("files", (path.name, path.read_bytes(), _content_type(path))))
        data = await self.orchestrator.write("POST", "/upload/multiple", files=files, signal=signal, auth_required=True)
        return [self._absolute(entry["url"]) for entry in data["files"]]


_CONTENT_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
}


def _content_type(path):
    return _CONTENT_TYPES.get(path.suffix.lower(), "application/octet-stream")


class StorefrontAPI:
    def __init__(self, orchestrator):
        self.orchestrator = orchestrator
        self.auth = AuthResource(orchestrator)
        self.shops = ShopsResource(orchestrator)
        self.products = ProductsResource(orchestrator)
        self.orders = OrdersResource(orchestrator)
        self.uploads = UploadsResource(orchestrator)

    @classmethod
    def from_settings(cls, settings=None, *, transport=None):
        """Build a client backed by the on-disk storage named in ``settings``.

        Without ``settings`` they are read from the environment.
        """
        settings = settings if settings is not None else Settings.from_env()
        orchestrator = RequestOrchestrator(
            settings.api_url,
            FileStorage(settings.storage_path),
            transport=transport,
            max_concurrent=settings.max_concurrent,
        )
        logger.debug("storefront_configured", api_url=settings.api_url, storage=str(settings.storage_path))
        return cls(orchestrator)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self):
        await self.orchestrator.aclose()
