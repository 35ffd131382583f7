"""Catalog service for product operations.

High-level service that combines the predicate builder, pagination planner,
query compiler and relational aggregator into the catalog operations the
API exposes.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.catalog.aggregation import fold_product
from storefront.catalog.filters import (
    PredicateSet,
    ProductFilter,
    brand_slug_predicate,
    category_slug_predicate,
)
from storefront.catalog.models import Product
from storefront.catalog.pagination import PageRequest, PaginatedResult
from storefront.catalog.queries import CatalogQuery, normalize_search_term
from storefront.catalog.repository import ProductRepository
from storefront.domain.exceptions import ProductNotFoundError
from storefront.domain.state_machines import ProductStatus, validate_product_transition

logger = structlog.get_logger()

RECENT_WINDOW = timedelta(days=30)


class CatalogService:
    """Service for catalog operations.

    Example usage:
        async with database.session() as session:
            service = CatalogService(session)
            result = await service.list_products(
                ProductFilter(categories="shoes_bags", featured=True),
                PageRequest.plan(page=2, limit=10),
            )
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session
        self.repository = ProductRepository(session)

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    async def list_products(
        self,
        filters: ProductFilter,
        page: PageRequest,
    ) -> PaginatedResult[dict[str, Any]]:
        """List products matching every supplied filter, newest first.

        Args:
            filters: Listing filters.
            page: Pagination window.

        Returns:
            Page of products with the total match count.
        """
        return await self._paginate(filters.predicates(), page)

    async def list_by_category(
        self,
        slug: str,
        page: PageRequest,
    ) -> PaginatedResult[dict[str, Any]]:
        """List products in the category with ``slug``."""
        return await self._paginate(category_slug_predicate(slug), page)

    async def list_by_brand(
        self,
        slug: str,
        page: PageRequest,
    ) -> PaginatedResult[dict[str, Any]]:
        """List products of the brand with ``slug``."""
        return await self._paginate(brand_slug_predicate(slug), page)

    async def _paginate(
        self,
        predicates: PredicateSet,
        page: PageRequest,
    ) -> PaginatedResult[dict[str, Any]]:
        rows, total = await self.repository.list_page(CatalogQuery(predicates, page))
        logger.info(
            "Products listed",
            filters=predicates.keys,
            page=page.page,
            limit=page.limit,
            returned=len(rows),
            total=total,
        )
        return PaginatedResult(items=rows, total=total, page=page.page, limit=page.limit)

    # ------------------------------------------------------------------
    # Single product reads
    # ------------------------------------------------------------------

    async def get_by_slug(self, slug: str) -> dict[str, Any]:
        """Get the nested detail view of a product.

        Raises:
            ProductNotFoundError: If no product has ``slug``.
        """
        rows = await self.repository.get_detail_rows(slug)
        product = fold_product(rows)
        if product is None:
            raise ProductNotFoundError(slug, field="slug")
        return product

    async def get_product(self, product_id: str) -> Product:
        """Get the full product row by id.

        Raises:
            ProductNotFoundError: If the product does not exist.
        """
        product = await self.repository.get_by_id(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    async def search(self, raw_term: str | None) -> list[dict[str, Any]]:
        """Substring search over titles and tags.

        The result is not paginated. A blank term matches nothing.

        Args:
            raw_term: Search text as typed by the caller.

        Returns:
            Minimal product projections.
        """
        term = normalize_search_term(raw_term)
        if not term:
            return []
        results = await self.repository.search(term)
        logger.info("Products searched", term=term, returned=len(results))
        return results

    async def status_counts(self, last_30_days: bool = False) -> dict[str, int]:
        """Count products per status, optionally only recent ones."""
        since = datetime.now(timezone.utc) - RECENT_WINDOW if last_30_days else None
        return await self.repository.count_by_status(since)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create_product(self, values: dict[str, Any]) -> Product:
        """Create a product; status defaults to pending.

        Raises:
            SlugConflictError: If the slug is already taken.
        """
        product = Product(**values)
        if product.status is None:
            product.status = ProductStatus.PENDING
        product = await self.repository.save(product)
        await self.repository.commit()
        logger.info("Product created", product_id=product.id, slug=product.slug)
        return product

    async def update_product(self, product_id: str, values: dict[str, Any]) -> Product:
        """Overwrite the supplied fields of a product.

        Raises:
            ProductNotFoundError: If the product does not exist.
            SlugConflictError: If the new slug is already taken.
        """
        if not values:
            return await self.get_product(product_id)
        product = await self.repository.update(product_id, values)
        if product is None:
            raise ProductNotFoundError(product_id)
        await self.repository.commit()
        logger.info("Product updated", product_id=product_id, fields=sorted(values))
        return product

    async def set_status(self, product_id: str, value: str | ProductStatus) -> Product:
        """Move a product to a new lifecycle status.

        Writing the current status again succeeds. The write is a single
        conditional UPDATE; when it matches nothing the product is re-read to
        tell a missing product from a forbidden transition.

        Args:
            product_id: Product ID.
            value: Target status.

        Returns:
            The updated product.

        Raises:
            InvalidStatusError: If ``value`` is not a known status.
            ProductNotFoundError: If the product does not exist.
            InvalidStatusTransitionError: If the transition is not allowed.
        """
        target = ProductStatus.parse(value)

        product = await self.repository.set_status(product_id, target)
        if product is None:
            current = await self.repository.get_by_id(product_id)
            if current is None:
                raise ProductNotFoundError(product_id)
            validate_product_transition(product_id, ProductStatus(current.status), target)
            # Status changed between the two statements; the write is valid now.
            product = await self.repository.set_status(product_id, target)
            if product is None:
                raise ProductNotFoundError(product_id)

        await self.repository.commit()
        logger.info("Product status set", product_id=product_id, status=target.value)
        return product

    async def delete_product(self, product_id: str) -> Product:
        """Hard delete a product.

        Raises:
            ProductNotFoundError: If the product does not exist.
        """
        product = await self.repository.delete(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        await self.repository.commit()
        logger.info("Product deleted", product_id=product_id)
        return product
