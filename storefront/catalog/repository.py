"""Product repository for database operations.

Executes the statements compiled in ``storefront.catalog.queries`` and maps
driver failures into domain errors.
"""

from collections.abc import Callable, Sequence
from datetime import datetime
from typing import Any

from sqlalchemy import RowMapping, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.catalog.models import Product
from storefront.catalog.queries import (
    CatalogQuery,
    delete_statement,
    detail_statement,
    search_statement,
    status_counts_statement,
    status_update_statement,
)
from storefront.domain.exceptions import CatalogError, SlugConflictError, ValidationError
from storefront.domain.state_machines import ProductStatus
from storefront.infrastructure.db_errors import (
    CHECK_VIOLATION,
    FOREIGN_KEY_VIOLATION,
    NOT_NULL_VIOLATION,
    sqlstate,
    storage_errors,
    violates,
)

PRODUCT_SLUG_CONSTRAINT = "products_slug_key"


def _write_conflicts(slug: str | None) -> Callable[[IntegrityError], CatalogError | None]:
    def translate(exc: IntegrityError) -> CatalogError | None:
        if violates(exc, PRODUCT_SLUG_CONSTRAINT):
            return SlugConflictError(slug)
        if sqlstate(exc) == FOREIGN_KEY_VIOLATION:
            return ValidationError("Unknown brand", details={"constraint": "brand_id"})
        if sqlstate(exc) in (NOT_NULL_VIOLATION, CHECK_VIOLATION):
            return ValidationError(
                "Product values rejected by the catalog schema",
                details={"sqlstate": sqlstate(exc)},
            )
        return None

    return translate


class ProductRepository:
    """Repository for Product database operations.

    Example usage:
        async with database.session() as session:
            repo = ProductRepository(session)
            rows, total = await repo.list_page(
                CatalogQuery(build_predicates({"brands": "acme"}), PageRequest()),
            )
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def save(self, product: Product) -> Product:
        """Insert a product.

        Raises:
            SlugConflictError: If the slug is already taken.
        """
        with storage_errors("product.create", _write_conflicts(product.slug)):
            self.session.add(product)
            await self.session.flush()
            await self.session.refresh(product)
        return product

    async def commit(self) -> None:
        """Commit the current transaction."""
        with storage_errors("product.commit"):
            await self.session.commit()

    async def get_by_id(self, product_id: str) -> Product | None:
        """Get product by ID."""
        with storage_errors("product.get_by_id"):
            result = await self.session.execute(
                select(Product).where(Product.id == product_id)
            )
            return result.scalar_one_or_none()

    async def list_page(self, query: CatalogQuery) -> tuple[list[dict[str, Any]], int]:
        """Run the data statement, then the count statement.

        Args:
            query: Compiled listing query.

        Returns:
            Rows on the requested page and the total number of matches.
        """
        with storage_errors("product.list"):
            result = await self.session.execute(query.data_statement())
            rows = [dict(row) for row in result.mappings().all()]

            count_result = await self.session.execute(query.count_statement())
            total = count_result.scalar_one()
        return rows, int(total or 0)

    async def get_detail_rows(self, slug: str) -> Sequence[RowMapping]:
        """Flat joined rows for the product with ``slug``."""
        with storage_errors("product.get_by_slug"):
            result = await self.session.execute(detail_statement(slug))
            return result.mappings().all()

    async def search(self, term: str) -> list[dict[str, Any]]:
        """Minimal projections of products matching a normalized term."""
        with storage_errors("product.search"):
            result = await self.session.execute(search_statement(term))
            return [dict(row) for row in result.mappings().all()]

    async def set_status(self, product_id: str, target: ProductStatus) -> Product | None:
        """Write ``target`` if allowed from the current status.

        Returns:
            The updated product, or None when no row qualified.
        """
        with storage_errors("product.set_status"):
            result = await self.session.execute(status_update_statement(product_id, target))
            return result.scalar_one_or_none()

    async def update(self, product_id: str, values: dict[str, Any]) -> Product | None:
        """Partially update a product.

        Args:
            product_id: Product ID.
            values: Column values to overwrite; other columns are untouched.

        Returns:
            The updated product, or None if it does not exist.
        """
        statement = (
            update(Product)
            .where(Product.id == product_id)
            .values(**values)
            .returning(Product)
            .execution_options(synchronize_session=False)
        )
        with storage_errors("product.update", _write_conflicts(values.get("slug"))):
            result = await self.session.execute(statement)
            return result.scalar_one_or_none()

    async def delete(self, product_id: str) -> Product | None:
        """Hard delete a product, returning the removed row."""
        with storage_errors("product.delete"):
            result = await self.session.execute(delete_statement(product_id))
            return result.scalar_one_or_none()

    async def count_by_status(self, since: datetime | None = None) -> dict[str, int]:
        """Count products per status.

        Args:
            since: Only count products created at or after this time.

        Returns:
            Mapping of every status value to its count (0 when absent).
        """
        with storage_errors("product.count_by_status"):
            result = await self.session.execute(status_counts_statement(since))
            counts = {ProductStatus(row.status).value: int(row.total) for row in result.all()}
        return {status.value: counts.get(status.value, 0) for status in ProductStatus}
