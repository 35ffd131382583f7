"""SQLAlchemy models for the product catalog.

Defines the Brand, Category and Product tables. Category membership and
related products are stored on the product as native UUID arrays rather
than join tables; membership is tested with ``id = ANY(array)``.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any
from uuid import uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import ARRAY, JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from storefront.domain.state_machines import ProductStatus
from storefront.infrastructure.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Brand(Base):
    """Brand that owns products.

    Attributes:
        id: Unique brand identifier (UUID).
        name: Display name.
        slug: URL-safe unique identifier.
    """

    __tablename__ = "brands"

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Brand(id={self.id}, slug={self.slug})>"


class Category(Base):
    """Product category.

    Attributes:
        id: Unique category identifier (UUID).
        name: Display name.
        slug: URL-safe unique identifier.
        image: Image reference shown in category listings.
    """

    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    image: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Category(id={self.id}, slug={self.slug})>"


class Product(Base):
    """Product entity in the catalog.

    Attributes:
        id: Unique product identifier (UUID).
        title: Product title.
        slug: URL-safe unique identifier.
        type: Optional product type used by the ``type`` listing filter.
        price: Unit price, never negative.
        moq: Minimum order quantity, at least 1.
        description: Free-text description.
        custom_description: Structured rich description (JSON list of blocks).
        pictures: Ordered picture references.
        tags: Search tags.
        sku: Stock keeping unit.
        brand_id: Owning brand.
        category_ids: Ids of the categories the product belongs to.
        status: Lifecycle status (pending, draft, published).
        is_featured: Whether the product is featured.
        related_products: Ids of related products.
        meta_title: SEO title.
        meta_description: SEO description.
        created_at: Creation timestamp.
        updated_at: Last update timestamp.
    """

    __tablename__ = "products"

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    type: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    moq: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    custom_description: Mapped[list[Any]] = mapped_column(
        JSONB, nullable=False, default=list
    )
    pictures: Mapped[list[str]] = mapped_column(
        ARRAY(Text), nullable=False, default=list
    )
    tags: Mapped[list[str]] = mapped_column(
        ARRAY(String(255)), nullable=False, default=list
    )
    sku: Mapped[str] = mapped_column(String(100), nullable=False)
    brand_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("brands.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    category_ids: Mapped[list[str]] = mapped_column(
        ARRAY(UUID(as_uuid=False)), nullable=False, default=list
    )
    status: Mapped[ProductStatus] = mapped_column(
        Enum(
            ProductStatus,
            name="product_status",
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=False,
        default=ProductStatus.PENDING,
        index=True,
    )
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    related_products: Mapped[list[str]] = mapped_column(
        ARRAY(UUID(as_uuid=False)), nullable=False, default=list
    )
    meta_title: Mapped[str] = mapped_column(String(255), nullable=False)
    meta_description: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
        CheckConstraint("moq >= 1", name="ck_products_moq_positive"),
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Product(id={self.id}, slug={self.slug}, title={self.title[:30]}...)>"
