"""Pagination planning for catalog listings."""

import math
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

T = TypeVar("T")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100
MAX_PAGE = 2**31 - 1


def _to_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class PageRequest:
    """Validated page/limit pair.

    Attributes:
        page: Page number (1-indexed).
        limit: Items per page, always positive.
    """

    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @classmethod
    def plan(
        cls,
        page: Any = None,
        limit: Any = None,
        default_limit: int = DEFAULT_LIMIT,
        max_limit: int = MAX_LIMIT,
    ) -> "PageRequest":
        """Build a page request from raw caller input.

        Missing or unparsable pages become 1 and other pages are clamped to
        ``1..MAX_PAGE``, which keeps the offset inside a BIGINT. Missing,
        unparsable or non-positive limits fall back to ``default_limit``;
        limits above ``max_limit`` are capped.

        Args:
            page: Requested page.
            limit: Requested page size.
            default_limit: Page size used when ``limit`` is unusable.
            max_limit: Largest accepted page size.

        Returns:
            A page request that is always safe to paginate with.
        """
        parsed_page = _to_int(page)
        parsed_limit = _to_int(limit)

        page_number = DEFAULT_PAGE
        if parsed_page is not None:
            page_number = min(max(DEFAULT_PAGE, parsed_page), MAX_PAGE)
        if parsed_limit is None or parsed_limit <= 0:
            parsed_limit = default_limit
        return cls(page=page_number, limit=min(parsed_limit, max_limit))

    @property
    def offset(self) -> int:
        """Calculate offset from page number."""
        return (self.page - 1) * self.limit

    def total_pages(self, total: int) -> int:
        """Number of pages needed to show ``total`` rows."""
        if total <= 0:
            return 0
        return math.ceil(total / self.limit)


@dataclass
class PaginatedResult(Generic[T]):
    """Paginated result container.

    Attributes:
        items: Rows on the requested page.
        total: Total matching rows.
        page: Current page.
        limit: Items per page.
    """

    items: list[T]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        """Calculate total pages."""
        return PageRequest(page=self.page, limit=self.limit).total_pages(self.total)

