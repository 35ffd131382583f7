"""Exception handlers.

Converts every failure into the response envelope
``{status: false, message, error_code, details, request_id}``.
"""

from typing import Any

import structlog
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.domain.exceptions import CatalogError

logger = structlog.get_logger()


def error_response(
    request: Request,
    status_code: int,
    error_code: str,
    message: str,
    details: Any = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build an error envelope response."""
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(
            {
                "status": False,
                "message": message,
                "error_code": error_code,
                "details": details,
                "request_id": getattr(request.state, "request_id", None),
            }
        ),
        headers=headers,
    )


async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    """Handle domain errors with their own status and code."""
    details = dict(exc.details)
    if exc.status_code >= 500:
        logger.error(
            "Catalog operation failed",
            path=request.url.path,
            method=request.method,
            error_code=exc.error_code,
            details=details,
        )
        # Engine text only leaves the service in debug mode
        if not request.app.state.settings.debug:
            details.pop("error", None)
    else:
        logger.warning(
            "Catalog request rejected",
            path=request.url.path,
            method=request.method,
            error_code=exc.error_code,
        )

    return error_response(
        request,
        status_code=exc.status_code,
        error_code=exc.error_code,
        message=exc.message,
        details=details or None,
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle request validation failures."""
    return error_response(
        request,
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        error_code="VALIDATION_ERROR",
        message="Invalid request",
        details=exc.errors(),
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Handle HTTP exceptions with consistent format."""
    detail = exc.detail
    if isinstance(detail, dict):
        error_code = detail.get("error_code", "ERROR")
        message = detail.get("message", str(detail))
        details = detail.get("details")
    else:
        error_code = "ERROR"
        message = str(detail)
        details = None

    return error_response(
        request,
        status_code=exc.status_code,
        error_code=error_code,
        message=message,
        details=details,
        headers=getattr(exc, "headers", None),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle uncaught exceptions with consistent format."""
    logger.exception(
        "Unhandled exception in handler",
        path=request.url.path,
        method=request.method,
        error=str(exc),
    )
    return error_response(
        request,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code="INTERNAL_ERROR",
        message="Internal server error!",
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the application."""
    app.add_exception_handler(CatalogError, catalog_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
