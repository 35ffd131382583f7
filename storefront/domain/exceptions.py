"""Domain exceptions.

All catalog and cart errors derive from ``CatalogError``. Each class carries
the HTTP status and machine-readable code the API layer reports, so the
boundary converts any of them into the response envelope without a lookup
table.
"""

from typing import Any


class CatalogError(Exception):
    """Base class for all domain exceptions."""

    status_code: int = 500
    error_code: str = "ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Validation Errors
# ============================================================================


class ValidationError(CatalogError):
    """Raised when caller input cannot be turned into a valid request."""

    status_code = 422
    error_code = "VALIDATION_ERROR"


class InvalidStatusError(ValidationError):
    """Raised when a status value is not one of the enumerated states."""

    def __init__(self, value: str, allowed: list[str]) -> None:
        super().__init__(
            f"Invalid product status '{value}'. Allowed values: {allowed}",
            details={"value": value, "allowed": allowed},
        )


# ============================================================================
# Not Found Errors
# ============================================================================


class NotFoundError(CatalogError):
    """Raised when a slug or id has no matching row."""

    status_code = 404
    error_code = "NOT_FOUND"


class ProductNotFoundError(NotFoundError):
    """Raised when a product is not found."""

    error_code = "PRODUCT_NOT_FOUND"

    def __init__(self, key: str, field: str = "id") -> None:
        """Initialize product not found error.

        Args:
            key: The id or slug that was looked up.
            field: Which attribute ``key`` refers to.
        """
        super().__init__(
            f"Product not found: {key}",
            details={field: key},
        )


class CartItemNotFoundError(NotFoundError):
    """Raised when a cart entry is not found."""

    error_code = "CART_ITEM_NOT_FOUND"

    def __init__(self, item_id: str) -> None:
        super().__init__(
            f"Cart item not found: {item_id}",
            details={"item_id": item_id},
        )


# ============================================================================
# Conflict Errors
# ============================================================================


class ConflictError(CatalogError):
    """Raised when a write collides with existing state."""

    status_code = 409
    error_code = "CONFLICT"


class DuplicateCartItemError(ConflictError):
    """Raised when the (user, product) pair already has a cart entry.

    Reported as 400 rather than 409.
    """

    status_code = 400
    error_code = "DUPLICATE_CART_ITEM"

    def __init__(self, user_id: str, product_id: str) -> None:
        super().__init__(
            "Product exist in the cart!",
            details={"user_id": user_id, "product_id": product_id},
        )


class SlugConflictError(ConflictError):
    """Raised when a product slug is already taken."""

    error_code = "SLUG_CONFLICT"

    def __init__(self, slug: str | None) -> None:
        super().__init__(
            f"Slug already in use: {slug}",
            details={"slug": slug},
        )


class InvalidStatusTransitionError(ConflictError):
    """Raised when a product cannot move from its current status to the target.

    This error indicates that the requested status change is not one of
    the allowed transitions from the product's current state.
    """

    error_code = "INVALID_STATUS_TRANSITION"

    def __init__(
        self,
        product_id: str,
        current_status: str,
        target_status: str,
        allowed_transitions: list[str] | None = None,
    ) -> None:
        """Initialize invalid status transition error.

        Args:
            product_id: ID of the product.
            current_status: Current status of the product.
            target_status: Attempted target status.
            allowed_transitions: Statuses reachable from the current one.
        """
        allowed = allowed_transitions or []
        super().__init__(
            f"Cannot transition Product({product_id}) "
            f"from '{current_status}' to '{target_status}'. "
            f"Allowed transitions: {allowed}",
            details={
                "product_id": product_id,
                "current_status": current_status,
                "target_status": target_status,
                "allowed_transitions": allowed,
            },
        )


# ============================================================================
# Storage Errors
# ============================================================================


class StorageError(CatalogError):
    """Raised when a query fails inside the storage engine.

    ``details["error"]`` holds the engine message; the API layer only
    exposes it in debug mode.
    """

    status_code = 500
    error_code = "STORAGE_ERROR"

    def __init__(self, operation: str, error: Exception) -> None:
        super().__init__(
            f"Storage failure during {operation}",
            details={"operation": operation, "error": str(error)},
        )
