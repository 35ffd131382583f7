"""HTTP API: routers, schemas, dependencies and middleware."""

from storefront.api.cart import router as cart_router
from storefront.api.health import router as health_router
from storefront.api.products import router as products_router

__all__ = [
    "cart_router",
    "health_router",
    "products_router",
]
