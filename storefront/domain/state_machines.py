"""Product status state machine.

State diagram:
    PENDING ───────┬──────────► DRAFT
                   │              ▲
                   │              │
                   ▼              ▼
                 PUBLISHED ◄──────┘

Nothing moves a product back to PENDING and nothing changes status on its
own; every change goes through an explicit status write. Writing the
current status again is allowed so repeated identical writes succeed.
"""

from enum import Enum

from storefront.domain.exceptions import InvalidStatusError, InvalidStatusTransitionError


class ProductStatus(str, Enum):
    """Product lifecycle states."""

    PENDING = "pending"
    DRAFT = "draft"
    PUBLISHED = "published"

    @classmethod
    def parse(cls, value: "str | ProductStatus") -> "ProductStatus":
        """Convert a raw value to a status.

        Raises:
            InvalidStatusError: If the value is not an enumerated status.
        """
        try:
            return cls(value)
        except ValueError:
            raise InvalidStatusError(str(value), [s.value for s in cls]) from None

    def can_transition_to(self, target: "ProductStatus") -> bool:
        """Check if transition to target state is valid.

        Args:
            target: Target state to transition to.

        Returns:
            True if transition is valid.
        """
        return target == self or target in _PRODUCT_TRANSITIONS.get(self, set())

    def allowed_transitions(self) -> list["ProductStatus"]:
        """Get list of valid target states, sorted by value."""
        return sorted(_PRODUCT_TRANSITIONS.get(self, set()), key=lambda s: s.value)


# Product state transitions (defined outside enum to avoid Enum restrictions)
_PRODUCT_TRANSITIONS: dict[ProductStatus, set[ProductStatus]] = {
    ProductStatus.PENDING: {ProductStatus.DRAFT, ProductStatus.PUBLISHED},
    ProductStatus.DRAFT: {ProductStatus.PUBLISHED},
    ProductStatus.PUBLISHED: {ProductStatus.DRAFT},
}


def source_statuses_for(target: ProductStatus) -> list[ProductStatus]:
    """Get every status from which ``target`` may be written.

    Used to make the status write conditional on the current state in a
    single UPDATE statement.
    """
    return [s for s in ProductStatus if s.can_transition_to(target)]


def validate_product_transition(
    product_id: str,
    current: ProductStatus,
    target: ProductStatus,
) -> None:
    """Validate a product status transition.

    Raises:
        InvalidStatusTransitionError: If the transition is not allowed.
    """
    if not current.can_transition_to(target):
        raise InvalidStatusTransitionError(
            product_id=product_id,
            current_status=current.value,
            target_status=target.value,
            allowed_transitions=[s.value for s in current.allowed_transitions()],
        )
