"""Shared fixtures for API tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from storefront.api.deps import get_cart_service, get_catalog_service
from storefront.cart.service import CartService
from storefront.catalog.service import CatalogService
from storefront.infrastructure.config import Settings
from storefront.infrastructure.database import Database
from storefront.main import create_app

TEST_API_KEY = "test-api-key"


@pytest.fixture
def settings() -> Settings:
    """Settings for the application under test."""
    return Settings(api_key=TEST_API_KEY, debug=False, log_json=False)


@pytest.fixture
def database() -> MagicMock:
    """Database stand-in whose ping succeeds."""
    database = MagicMock(spec=Database)
    database.ping = AsyncMock(return_value=True)
    return database


@pytest.fixture
def catalog_service() -> AsyncMock:
    """Mocked catalog service."""
    return AsyncMock(spec=CatalogService)


@pytest.fixture
def cart_service() -> AsyncMock:
    """Mocked cart service."""
    return AsyncMock(spec=CartService)


@pytest.fixture
def app(settings, database, catalog_service, cart_service) -> FastAPI:
    """Application with services replaced by mocks."""
    app = create_app(settings)
    app.state.database = database
    app.dependency_overrides[get_catalog_service] = lambda: catalog_service
    app.dependency_overrides[get_cart_service] = lambda: cart_service
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create test client without authentication."""
    return TestClient(app)


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Get authentication headers."""
    return {"Authorization": f"Bearer {TEST_API_KEY}"}


@pytest.fixture
def auth_client(app: FastAPI, auth_headers: dict[str, str]) -> TestClient:
    """Create test client with valid API key authentication."""
    return TestClient(app, headers=auth_headers)
