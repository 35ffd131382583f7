"""FastAPI dependencies.

Resolves the per-request session, services, pagination window and caller
identity from the application state built at startup.
"""

from collections.abc import AsyncIterator
from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.cart.service import CartService
from storefront.catalog.pagination import PageRequest
from storefront.catalog.service import CatalogService
from storefront.infrastructure.config import Settings
from storefront.infrastructure.database import Database

USER_ID_HEADER = "X-User-ID"


def get_app_settings(request: Request) -> Settings:
    """Get the settings the application was built with."""
    return request.app.state.settings


def get_database(request: Request) -> Database:
    """Get the database context created at startup."""
    return request.app.state.database


async def get_session(
    database: Annotated[Database, Depends(get_database)],
) -> AsyncIterator[AsyncSession]:
    """Get database session for one request.

    Yields:
        AsyncSession committed on success and rolled back on error.
    """
    async with database.session() as session:
        yield session


def get_catalog_service(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> CatalogService:
    """Get catalog service bound to the request session."""
    return CatalogService(session)


def get_cart_service(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> CartService:
    """Get cart service bound to the request session."""
    return CartService(session)


def get_page_request(
    settings: Annotated[Settings, Depends(get_app_settings)],
    page: Annotated[str | None, Query(description="Page number (1-based)")] = None,
    limit: Annotated[str | None, Query(description="Items per page")] = None,
) -> PageRequest:
    """Plan pagination from query parameters.

    Unparsable or out-of-range values are clamped or defaulted rather
    than rejected.
    """
    return PageRequest.plan(
        page=page,
        limit=limit,
        default_limit=settings.default_page_limit,
        max_limit=settings.max_page_limit,
    )


def get_current_user_id(
    x_user_id: Annotated[str | None, Header(alias=USER_ID_HEADER)] = None,
) -> str:
    """Get the authenticated user id forwarded by the gateway.

    Raises:
        HTTPException: 401 if the header is missing or not a UUID.
    """
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error_code": "UNAUTHORIZED", "message": "Please login first!"},
        )
    try:
        return str(UUID(x_user_id))
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error_code": "UNAUTHORIZED", "message": "Invalid user id"},
        ) from None
