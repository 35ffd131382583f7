"""Cart service.

Adds products to a user's cart at most once, lists the cart with product
previews and removes single entries.
"""

from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.cart.models import CartItem
from storefront.cart.repository import CartRepository
from storefront.domain.exceptions import CartItemNotFoundError, DuplicateCartItemError

logger = structlog.get_logger()


class CartService:
    """Service for cart operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session
        self.repository = CartRepository(session)

    async def add_item(self, user_id: str, product_id: str, quantity: int) -> CartItem:
        """Add a product to the user's cart.

        The existence check only gives an early answer; two concurrent
        requests can both pass it, and the insert of the second one is then
        rejected by the storage constraint with the same error.

        Raises:
            DuplicateCartItemError: If the product is already in the cart.
            ProductNotFoundError: If the product does not exist.
        """
        existing = await self.repository.get_by_user_and_product(user_id, product_id)
        if existing is not None:
            logger.info("Cart item already present", user_id=user_id, product_id=product_id)
            raise DuplicateCartItemError(user_id, product_id)

        item = await self.repository.create(
            CartItem(user_id=user_id, product_id=product_id, quantity=quantity)
        )
        await self.repository.commit()
        logger.info(
            "Cart item added",
            user_id=user_id,
            product_id=product_id,
            cart_item_id=item.id,
        )
        return item

    async def list_items(self, user_id: str) -> list[dict[str, Any]]:
        """List the user's cart with product preview fields."""
        return await self.repository.list_for_user(user_id)

    async def remove_item(self, user_id: str, item_id: str) -> dict[str, Any]:
        """Remove one entry from the user's cart.

        Returns:
            The removed entry.

        Raises:
            CartItemNotFoundError: If the user has no entry with that id.
        """
        item = await self.repository.get_by_id(item_id, user_id=user_id)
        if item is None:
            raise CartItemNotFoundError(item_id)
        removed = item.to_dict()
        await self.repository.delete(item_id)
        await self.repository.commit()
        logger.info("Cart item removed", user_id=user_id, cart_item_id=item_id)
        return removed
