"""Domain layer: product status rules and the error taxonomy."""

from storefront.domain.exceptions import (
    CartItemNotFoundError,
    CatalogError,
    ConflictError,
    DuplicateCartItemError,
    InvalidStatusError,
    InvalidStatusTransitionError,
    NotFoundError,
    ProductNotFoundError,
    SlugConflictError,
    StorageError,
    ValidationError,
)
from storefront.domain.state_machines import (
    ProductStatus,
    source_statuses_for,
    validate_product_transition,
)

__all__ = [
    # State machine
    "ProductStatus",
    "source_statuses_for",
    "validate_product_transition",
    # Exceptions
    "CartItemNotFoundError",
    "CatalogError",
    "ConflictError",
    "DuplicateCartItemError",
    "InvalidStatusError",
    "InvalidStatusTransitionError",
    "NotFoundError",
    "ProductNotFoundError",
    "SlugConflictError",
    "StorageError",
    "ValidationError",
]
