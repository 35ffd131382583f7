"""Product API endpoints.

Provides endpoints for the product catalog:
- GET /products - filtered, paginated listing
- GET /products/search - substring search (unpaginated)
- GET /products/stats - product counts per status
- GET /products/category/{slug} - products of a category
- GET /products/brand/{slug} - products of a brand
- GET /products/id/{id} - full product row
- GET /products/{slug} - aggregated product detail
- POST /products - create a product
- PUT /products/{id} - update a product
- PATCH /products/{id}/status - change lifecycle status
- DELETE /products/{id} - delete a product
"""

from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from storefront.api.deps import get_catalog_service, get_page_request
from storefront.api.schemas import (
    ErrorResponse,
    ProductCreateRequest,
    ProductDetail,
    ProductDetailResponse,
    ProductGroupListResponse,
    ProductListItem,
    ProductListResponse,
    ProductResponse,
    ProductSchema,
    ProductUpdateRequest,
    SearchResponse,
    SearchResult,
    StatusCountsResponse,
    StatusUpdateRequest,
)
from storefront.catalog.filters import ProductFilter
from storefront.catalog.pagination import PageRequest, PaginatedResult
from storefront.catalog.service import CatalogService
from storefront.domain.state_machines import ProductStatus

router = APIRouter(prefix="/products", tags=["Products"])

UNBOUNDED_HEADER = "X-Result-Unbounded"

CatalogServiceDep = Annotated[CatalogService, Depends(get_catalog_service)]
PageDep = Annotated[PageRequest, Depends(get_page_request)]


# ============================================================================
# Converters
# ============================================================================


def _list_items(result: PaginatedResult[dict[str, Any]]) -> list[ProductListItem]:
    return [ProductListItem.model_validate(row) for row in result.items]


def _to_columns(values: dict[str, Any]) -> dict[str, Any]:
    """Map validated request values onto model column values."""
    if "status" in values:
        values["status"] = ProductStatus(values["status"])
    return values


# ============================================================================
# Listing Endpoints
# ============================================================================


@router.get(
    "",
    response_model=ProductListResponse,
    summary="List products",
    description="List products matching every supplied filter, newest first.",
)
async def list_products(
    service: CatalogServiceDep,
    page: PageDep,
    type: Annotated[str | None, Query(description="Exact product type")] = None,
    featured: Annotated[bool | None, Query(description="Only featured products")] = None,
    categories: Annotated[
        str | None, Query(description="Category slugs separated by '_'")
    ] = None,
    brands: Annotated[str | None, Query(description="Brand slugs separated by '_'")] = None,
) -> ProductListResponse:
    """List products with filters and pagination.

    Returns:
        Products on the requested page with ``total_page`` and ``page``.
    """
    result = await service.list_products(
        ProductFilter(type=type, featured=featured, categories=categories, brands=brands),
        page,
    )
    return ProductListResponse(
        data=_list_items(result),
        total_page=result.total_pages,
        page=result.page,
    )


@router.get(
    "/search",
    response_model=SearchResponse,
    summary="Search products",
    description=(
        "Case-insensitive substring search over titles and tags. "
        "Results are not paginated."
    ),
)
async def search_products(
    service: CatalogServiceDep,
    response: Response,
    q: Annotated[str | None, Query(description="Search term")] = None,
) -> SearchResponse:
    """Search products by title or tag.

    The ``X-Result-Unbounded`` header tells callers that the result set is
    not paginated.
    """
    results = await service.search(q)
    response.headers[UNBOUNDED_HEADER] = "true"
    return SearchResponse(data=[SearchResult.model_validate(row) for row in results])


@router.get(
    "/stats",
    response_model=StatusCountsResponse,
    summary="Count products per status",
)
async def product_stats(
    service: CatalogServiceDep,
    last_30_days: Annotated[
        bool, Query(description="Only products created in the last 30 days")
    ] = False,
) -> StatusCountsResponse:
    """Count products per lifecycle status."""
    return StatusCountsResponse(data=await service.status_counts(last_30_days))


@router.get(
    "/category/{slug}",
    response_model=ProductGroupListResponse,
    summary="List products of a category",
)
async def list_by_category(
    slug: str,
    service: CatalogServiceDep,
    page: PageDep,
) -> ProductGroupListResponse:
    """List products that belong to the category with ``slug``."""
    result = await service.list_by_category(slug, page)
    return ProductGroupListResponse(
        products=_list_items(result),
        total_page=result.total_pages,
        page=result.page,
    )


@router.get(
    "/brand/{slug}",
    response_model=ProductGroupListResponse,
    summary="List products of a brand",
)
async def list_by_brand(
    slug: str,
    service: CatalogServiceDep,
    page: PageDep,
) -> ProductGroupListResponse:
    """List products of the brand with ``slug``."""
    result = await service.list_by_brand(slug, page)
    return ProductGroupListResponse(
        products=_list_items(result),
        total_page=result.total_pages,
        page=result.page,
    )


# ============================================================================
# Single Product Endpoints
# ============================================================================


@router.get(
    "/id/{product_id}",
    response_model=ProductResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get product by id",
)
async def get_product(product_id: UUID, service: CatalogServiceDep) -> ProductResponse:
    """Get the full product row."""
    product = await service.get_product(str(product_id))
    return ProductResponse(data=ProductSchema.model_validate(product))


@router.get(
    "/{slug}",
    response_model=ProductDetailResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get product by slug",
    description="Product with its categories, brand and related products.",
)
async def get_product_by_slug(slug: str, service: CatalogServiceDep) -> ProductDetailResponse:
    """Get the aggregated product detail view."""
    product = await service.get_by_slug(slug)
    return ProductDetailResponse(data=ProductDetail.model_validate(product))


# ============================================================================
# Write Endpoints
# ============================================================================


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    responses={401: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    summary="Create product",
)
async def create_product(
    body: ProductCreateRequest,
    service: CatalogServiceDep,
) -> ProductResponse:
    """Create a product. New products are pending unless stated otherwise."""
    product = await service.create_product(_to_columns(body.model_dump(mode="json")))
    return ProductResponse(
        message="Product created.",
        data=ProductSchema.model_validate(product),
    )


@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    responses={
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
    summary="Update product",
)
async def update_product(
    product_id: UUID,
    body: ProductUpdateRequest,
    service: CatalogServiceDep,
) -> ProductResponse:
    """Overwrite the supplied product fields."""
    values = _to_columns(body.model_dump(mode="json", exclude_unset=True))
    product = await service.update_product(str(product_id), values)
    return ProductResponse(
        message="Product updated.",
        data=ProductSchema.model_validate(product),
    )


@router.patch(
    "/{product_id}/status",
    response_model=ProductResponse,
    responses={
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
    summary="Set product status",
    description="Move a product between pending, draft and published.",
)
async def set_product_status(
    product_id: UUID,
    body: StatusUpdateRequest,
    service: CatalogServiceDep,
) -> ProductResponse:
    """Change a product's lifecycle status."""
    product = await service.set_status(str(product_id), body.status)
    return ProductResponse(
        message=f"Product {body.status.value}.",
        data=ProductSchema.model_validate(product),
    )


@router.delete(
    "/{product_id}",
    response_model=ProductResponse,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Delete product",
)
async def delete_product(product_id: UUID, service: CatalogServiceDep) -> ProductResponse:
    """Hard delete a product and echo the removed row."""
    product = await service.delete_product(str(product_id))
    return ProductResponse(
        message="Product deleted.",
        data=ProductSchema.model_validate(product),
    )
