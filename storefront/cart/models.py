"""SQLAlchemy model for shopping-cart entries."""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from storefront.infrastructure.database import Base

# Storage-level guard for one entry per (user, product)
CART_USER_PRODUCT_CONSTRAINT = "uq_cart_user_product"


class CartItem(Base):
    """One product in a user's cart.

    Users live in an external identity service, so ``user_id`` carries no
    foreign key.

    Attributes:
        id: Unique cart entry identifier (UUID).
        user_id: Owning user.
        product_id: Referenced product.
        quantity: Number of units, at least 1.
    """

    __tablename__ = "cart"

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    user_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False, index=True)
    product_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        UniqueConstraint("user_id", "product_id", name=CART_USER_PRODUCT_CONSTRAINT),
        CheckConstraint("quantity >= 1", name="ck_cart_quantity_positive"),
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<CartItem(id={self.id}, user_id={self.user_id}, product_id={self.product_id})>"

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "product_id": self.product_id,
            "quantity": self.quantity,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
