"""API schemas for the storefront catalog.

Pydantic models for request validation and response serialization. Every
response is wrapped in the ``{status, message, ...}`` envelope.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from storefront.domain.state_machines import ProductStatus


# ============================================================================
# Common Schemas
# ============================================================================


class Envelope(BaseModel):
    """Fields shared by every response."""

    status: bool = Field(default=True, description="Whether the operation succeeded")
    message: str | None = Field(default=None, description="Human-readable outcome")


class ErrorResponse(Envelope):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    status: bool = False
    error_code: str = Field(..., description="Machine-readable error code")
    details: Any = Field(default=None, description="Additional error context")
    request_id: str | None = Field(default=None, description="Request ID for correlation")


# ============================================================================
# Catalog Preview Schemas
# ============================================================================


class CategorySummary(BaseModel):
    """Category as embedded in product views."""

    id: str
    name: str
    slug: str
    image: str | None = None


class BrandSummary(BaseModel):
    """Brand as embedded in product detail views."""

    id: str
    name: str
    slug: str


class RelatedProductSummary(BaseModel):
    """Preview of a related product."""

    id: str
    title: str
    slug: str
    description: str | None = None
    custom_description: Any = None
    pictures: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    sku: str | None = None


# ============================================================================
# Product Listing Schemas
# ============================================================================


class ProductListItem(BaseModel):
    """One product row in a listing."""

    id: str
    title: str
    slug: str
    pictures: list[str] | None = None
    price: float
    moq: int
    status: ProductStatus
    is_featured: bool = False
    created_at: datetime
    categories: list[CategorySummary] = Field(default_factory=list)
    brand: str | None = Field(default=None, description="Brand name")
    brand_slug: str | None = None


class ProductListResponse(Envelope):
    """Filtered product listing."""

    data: list[ProductListItem]
    total_page: int = Field(..., description="Number of pages for the current limit")
    page: int = Field(..., description="Current page number")


class ProductGroupListResponse(Envelope):
    """Products of one category or brand."""

    products: list[ProductListItem]
    total_page: int
    page: int


# ============================================================================
# Product Detail Schemas
# ============================================================================


class ProductDetail(BaseModel):
    """Product with its categories, brand and related products folded in."""

    id: str
    title: str
    slug: str
    type: str | None = None
    description: str | None = None
    custom_description: Any = None
    pictures: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    sku: str
    price: float
    moq: int
    status: ProductStatus
    is_featured: bool = False
    meta_title: str | None = None
    meta_description: str | None = None
    created_at: datetime
    updated_at: datetime
    categories: list[CategorySummary] = Field(default_factory=list)
    related_products: list[RelatedProductSummary] = Field(default_factory=list)
    brand: list[BrandSummary] = Field(default_factory=list)


class ProductDetailResponse(Envelope):
    """Single aggregated product."""

    data: ProductDetail


class SearchResult(BaseModel):
    """Minimal projection returned by search."""

    id: str
    title: str
    pictures: list[str] | None = None
    slug: str
    tags: list[str] | None = None


class SearchResponse(Envelope):
    """Unpaginated search results."""

    data: list[SearchResult]


class StatusCountsResponse(Envelope):
    """Product counts per status."""

    data: dict[str, int]


# ============================================================================
# Product Write Schemas
# ============================================================================


class ProductSchema(BaseModel):
    """Full product row."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    slug: str
    type: str | None = None
    price: float
    moq: int
    description: str | None = None
    custom_description: Any = None
    pictures: list[str] | None = None
    tags: list[str] | None = None
    sku: str
    brand_id: str
    category_ids: list[str] | None = None
    status: ProductStatus
    is_featured: bool | None = None
    related_products: list[str] | None = None
    meta_title: str
    meta_description: str
    created_at: datetime
    updated_at: datetime


class ProductResponse(Envelope):
    """Single product row."""

    data: ProductSchema


class ProductCreateRequest(BaseModel):
    """Request to create a product."""

    title: str = Field(..., min_length=1, max_length=255)
    slug: str = Field(..., min_length=1, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    type: str | None = Field(default=None, max_length=100)
    price: float = Field(..., ge=0, description="Unit price, never negative")
    moq: int = Field(default=1, ge=1, description="Minimum order quantity")
    description: str | None = None
    custom_description: list[Any] = Field(default_factory=list)
    pictures: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    sku: str = Field(..., min_length=1, max_length=100)
    brand_id: UUID
    category_ids: list[UUID] = Field(default_factory=list)
    status: ProductStatus = ProductStatus.PENDING
    is_featured: bool = False
    related_products: list[UUID] = Field(default_factory=list)
    meta_title: str = Field(..., min_length=1, max_length=255)
    meta_description: str = Field(..., min_length=1)


class ProductUpdateRequest(BaseModel):
    """Partial product update; only supplied fields are written.

    Status changes go through the status endpoint.
    """

    title: str | None = Field(default=None, min_length=1, max_length=255)
    slug: str | None = Field(default=None, min_length=1, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    type: str | None = Field(default=None, max_length=100)
    price: float | None = Field(default=None, ge=0)
    moq: int | None = Field(default=None, ge=1)
    description: str | None = None
    custom_description: list[Any] | None = None
    pictures: list[str] | None = None
    tags: list[str] | None = None
    sku: str | None = Field(default=None, min_length=1, max_length=100)
    brand_id: UUID | None = None
    category_ids: list[UUID] | None = None
    is_featured: bool | None = None
    related_products: list[UUID] | None = None
    meta_title: str | None = Field(default=None, min_length=1, max_length=255)
    meta_description: str | None = Field(default=None, min_length=1)

    @field_validator(
        "title",
        "slug",
        "price",
        "moq",
        "sku",
        "brand_id",
        "meta_title",
        "meta_description",
        "custom_description",
        "pictures",
        "tags",
        "category_ids",
        "is_featured",
        "related_products",
    )
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        """Omit a field to keep it; null cannot clear a required column."""
        if value is None:
            raise ValueError("must not be null")
        return value


class StatusUpdateRequest(BaseModel):
    """Request to change a product's lifecycle status."""

    status: ProductStatus = Field(..., description="Target status")


# ============================================================================
# Cart Schemas
# ============================================================================


class CartItemCreateRequest(BaseModel):
    """Request to add a product to the cart."""

    product_id: UUID
    quantity: int = Field(default=1, ge=1)


class CartItemSchema(BaseModel):
    """Stored cart entry."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    product_id: str
    quantity: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CartLineSchema(BaseModel):
    """Cart entry joined to its product preview."""

    id: str
    user_id: str
    quantity: int
    created_at: datetime
    updated_at: datetime
    product_id: str | None = None
    title: str | None = None
    description: str | None = None
    pictures: list[str] | None = None
    moq: int | None = None
    brand: str | None = None


class CartItemResponse(Envelope):
    """Single cart entry."""

    data: CartItemSchema


class CartListResponse(Envelope):
    """The user's cart."""

    data: list[CartLineSchema]
