"""Cart repository for database operations."""

from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.cart.models import CART_USER_PRODUCT_CONSTRAINT, CartItem
from storefront.catalog.models import Brand, Product
from storefront.domain.exceptions import (
    CatalogError,
    DuplicateCartItemError,
    ProductNotFoundError,
)
from storefront.infrastructure.db_errors import (
    FOREIGN_KEY_VIOLATION,
    sqlstate,
    storage_errors,
    violates,
)


class CartRepository:
    """Repository for cart entries.

    Example usage:
        async with database.session() as session:
            repo = CartRepository(session)
            items = await repo.list_for_user(user_id)
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def commit(self) -> None:
        """Commit the current transaction."""
        with storage_errors("cart.commit"):
            await self.session.commit()

    async def get_by_id(self, item_id: str, user_id: str | None = None) -> CartItem | None:
        """Get a cart entry by ID, optionally scoped to its owner."""
        query = select(CartItem).where(CartItem.id == item_id)
        if user_id is not None:
            query = query.where(CartItem.user_id == user_id)
        with storage_errors("cart.get_by_id"):
            result = await self.session.execute(query)
            return result.scalar_one_or_none()

    async def get_by_user_and_product(self, user_id: str, product_id: str) -> CartItem | None:
        """Get the entry for a (user, product) pair, if any."""
        with storage_errors("cart.get_by_user_and_product"):
            result = await self.session.execute(
                select(CartItem).where(
                    CartItem.user_id == user_id,
                    CartItem.product_id == product_id,
                )
            )
            return result.scalar_one_or_none()

    async def create(self, item: CartItem) -> CartItem:
        """Insert a cart entry.

        The unique constraint on (user_id, product_id) is the authority on
        duplicates; a violation surfaces as ``DuplicateCartItemError``.

        Raises:
            DuplicateCartItemError: If the pair already has an entry.
            ProductNotFoundError: If the product does not exist.
        """

        def translate(exc: IntegrityError) -> CatalogError | None:
            if violates(exc, CART_USER_PRODUCT_CONSTRAINT):
                return DuplicateCartItemError(item.user_id, item.product_id)
            if sqlstate(exc) == FOREIGN_KEY_VIOLATION:
                return ProductNotFoundError(item.product_id)
            return None

        with storage_errors("cart.create", translate):
            self.session.add(item)
            await self.session.flush()
        return item

    async def list_for_user(self, user_id: str) -> list[dict[str, Any]]:
        """Cart entries of a user joined to product preview fields and brand."""
        query = (
            select(
                CartItem.id,
                CartItem.user_id,
                CartItem.quantity,
                CartItem.created_at,
                CartItem.updated_at,
                Product.id.label("product_id"),
                Product.title,
                Product.description,
                Product.pictures,
                Product.moq,
                Brand.name.label("brand"),
            )
            .select_from(CartItem)
            .outerjoin(Product, Product.id == CartItem.product_id)
            .outerjoin(Brand, Brand.id == Product.brand_id)
            .where(CartItem.user_id == user_id)
            .order_by(CartItem.created_at.desc())
        )
        with storage_errors("cart.list"):
            result = await self.session.execute(query)
            return [dict(row) for row in result.mappings().all()]

    async def delete(self, item_id: str) -> int:
        """Delete a cart entry.

        Returns:
            Number of deleted rows.
        """
        with storage_errors("cart.delete"):
            result = await self.session.execute(delete(CartItem).where(CartItem.id == item_id))
            return result.rowcount
