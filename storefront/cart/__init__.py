"""Shopping cart: one entry per (user, product) pair."""

from storefront.cart.models import CartItem
from storefront.cart.repository import CartRepository
from storefront.cart.service import CartService

__all__ = [
    "CartItem",
    "CartRepository",
    "CartService",
]
