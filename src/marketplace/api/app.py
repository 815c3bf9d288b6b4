"""FastAPI application factory for the Marketplace API.

Every route is mounted under ``/api`` and runs inside the marketplace domain
context. Uploaded images are served from ``/uploads``.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from marketplace.api import auth_router, order_router, product_router, shop_router, upload_router
from marketplace.api.errors import register_exception_handlers
from marketplace.config import settings
from marketplace.domain import marketplace
from marketplace.utils.logging import add_context, clear_context

API_PREFIX = "/api"


def create_app() -> FastAPI:
    app = FastAPI(
        title="LocalMart API",
        description="Neighbourhood marketplace: shops, products and orders",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the marketplace domain context for each request."""
        clear_context()
        add_context(method=request.method, path=request.url.path)
        with marketplace.domain_context():
            response = await call_next(request)
        return response

    register_exception_handlers(app)

    for router in (auth_router, shop_router, product_router, order_router, upload_router):
        app.include_router(router, prefix=API_PREFIX)

    @app.get(f"{API_PREFIX}/health")
    async def health():
        return {"status": "OK", "message": "LocalMart API is running", "domain": marketplace.name}

    app.mount("/uploads", StaticFiles(directory=str(settings.upload_dir), check_dir=False), name="uploads")

    return app
