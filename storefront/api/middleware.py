"""API middleware for the storefront catalog.

Provides:
- Request ID correlation
- API key authentication for catalog writes
- Error handling
"""

import time
from typing import Callable
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

logger = structlog.get_logger()


# ============================================================================
# Request ID Middleware
# ============================================================================


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Middleware to add request ID for correlation.

    Generates or extracts a request ID and adds it to:
    - Request state for access in handlers
    - Response headers for client correlation
    - Log context for tracing
    """

    HEADER_NAME = "X-Request-ID"

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        """Process request with correlation ID.

        Args:
            request: Incoming request.
            call_next: Next middleware/handler.

        Returns:
            Response with request ID header.
        """
        request_id = request.headers.get(self.HEADER_NAME) or str(uuid4())
        request.state.request_id = request_id
        structlog.contextvars.bind_contextvars(request_id=request_id)

        start_time = time.perf_counter()
        response = None
        try:
            response = await call_next(request)
        finally:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=getattr(response, "status_code", 500),
                duration_ms=round(duration_ms, 2),
            )
            structlog.contextvars.unbind_contextvars("request_id")

        response.headers[self.HEADER_NAME] = request_id
        return response


# ============================================================================
# API Key Authentication Middleware
# ============================================================================


# Path prefixes whose non-read requests require the API key
PROTECTED_PREFIXES = ("/products",)

READ_METHODS = {"GET", "HEAD", "OPTIONS"}


def requires_api_key(method: str, path: str) -> bool:
    """Check whether a request writes to the catalog."""
    if method.upper() in READ_METHODS:
        return False
    return any(
        path == prefix or path.startswith(prefix + "/") for prefix in PROTECTED_PREFIXES
    )


class ApiKeyMiddleware(BaseHTTPMiddleware):
    """Middleware for API key authentication of catalog writes.

    Validates the Authorization header contains a valid API key.
    Supports Bearer token format: "Authorization: Bearer <api_key>"
    """

    def __init__(self, app: ASGIApp, api_key: str) -> None:
        super().__init__(app)
        self.api_key = api_key

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        """Validate API key for protected endpoints.

        Args:
            request: Incoming request.
            call_next: Next middleware/handler.

        Returns:
            Response or 401 error.
        """
        path = request.url.path.rstrip("/") or "/"
        if not requires_api_key(request.method, path):
            return await call_next(request)

        auth_header = request.headers.get("Authorization")
        if not auth_header:
            logger.warning("Missing authorization header", path=path, method=request.method)
            return self._unauthorized(request, "UNAUTHORIZED", "Missing Authorization header")

        parts = auth_header.split(" ", 1)
        if len(parts) != 2 or parts[0].lower() != "bearer":
            logger.warning("Invalid authorization format", path=path, method=request.method)
            return self._unauthorized(
                request,
                "UNAUTHORIZED",
                "Invalid Authorization header format. Use 'Bearer <api_key>'",
            )

        if parts[1] != self.api_key:
            logger.warning("Invalid API key", path=path, method=request.method)
            return self._unauthorized(request, "INVALID_API_KEY", "Invalid API key")

        request.state.authenticated = True
        return await call_next(request)

    @staticmethod
    def _unauthorized(request: Request, error_code: str, message: str) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={
                "status": False,
                "message": message,
                "error_code": error_code,
                "details": None,
                "request_id": getattr(request.state, "request_id", None),
            },
            headers={"WWW-Authenticate": "Bearer"},
        )


# ============================================================================
# Error Handling Middleware
# ============================================================================


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Middleware for consistent error handling.

    Catches exceptions that escaped the exception handlers and returns the
    standard error envelope.
    """

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        """Handle errors uniformly.

        Args:
            request: Incoming request.
            call_next: Next middleware/handler.

        Returns:
            Response or error response.
        """
        try:
            return await call_next(request)
        except Exception as e:
            request_id = getattr(request.state, "request_id", None)

            logger.exception(
                "Unhandled exception",
                path=request.url.path,
                method=request.method,
                error=str(e),
            )

            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "status": False,
                    "message": "Internal server error!",
                    "error_code": "INTERNAL_ERROR",
                    "details": None,
                    "request_id": request_id,
                },
            )


# ============================================================================
# Middleware Setup
# ============================================================================


def setup_middleware(app: FastAPI, api_key: str) -> None:
    """Configure all middleware for the application.

    Middleware is added in reverse order (last added = first executed),
    so request IDs are assigned before authentication runs.

    Args:
        app: FastAPI application instance.
        api_key: Key required for catalog writes.
    """
    # Error handling (innermost - wraps the routed handlers)
    app.add_middleware(ErrorHandlerMiddleware)

    # API key authentication
    app.add_middleware(ApiKeyMiddleware, api_key=api_key)

    # Request ID correlation (outermost)
    app.add_middleware(RequestIdMiddleware)
