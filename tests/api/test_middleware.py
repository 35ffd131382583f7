"""Tests for API middleware."""

from uuid import uuid4

from fastapi.testclient import TestClient

from storefront.api.middleware import requires_api_key
from storefront.catalog.pagination import PaginatedResult


class TestRequestIdMiddleware:
    """Tests for request ID correlation middleware."""

    def test_generates_request_id_if_not_provided(self, client: TestClient) -> None:
        """Should generate request ID if not in request headers."""
        response = client.get("/health")
        assert response.status_code == 200
        # UUID format
        assert len(response.headers["X-Request-ID"]) == 36

    def test_uses_provided_request_id(self, client: TestClient) -> None:
        """Should use request ID from request headers."""
        custom_id = "custom-request-id-12345"
        response = client.get("/health", headers={"X-Request-ID": custom_id})
        assert response.headers["X-Request-ID"] == custom_id

    def test_error_envelope_carries_request_id(self, client: TestClient) -> None:
        response = client.get("/products/id/not-a-uuid", headers={"X-Request-ID": "req-1"})
        assert response.json()["request_id"] == "req-1"


class TestApiKeyMiddleware:
    """Tests for API key authentication middleware."""

    def test_reads_dont_require_auth(self, client: TestClient, catalog_service) -> None:
        """Catalog reads work without authentication."""
        catalog_service.list_products.return_value = PaginatedResult(
            items=[], total=0, page=1, limit=10
        )
        assert client.get("/products").status_code == 200

    def test_writes_require_auth(self, client: TestClient, catalog_service) -> None:
        response = client.delete(f"/products/{uuid4()}")

        assert response.status_code == 401
        assert response.json()["error_code"] == "UNAUTHORIZED"
        catalog_service.delete_product.assert_not_awaited()

    def test_invalid_auth_format_rejected(self, client: TestClient) -> None:
        response = client.post("/products", json={}, headers={"Authorization": "InvalidFormat"})
        assert response.status_code == 401
        assert response.json()["error_code"] == "UNAUTHORIZED"

    def test_invalid_api_key_rejected(self, client: TestClient) -> None:
        response = client.post("/products", json={}, headers={"Authorization": "Bearer wrong"})
        assert response.status_code == 401
        assert response.json()["error_code"] == "INVALID_API_KEY"

    def test_valid_api_key_accepted(self, auth_client: TestClient) -> None:
        """A valid key passes through to request validation."""
        response = auth_client.post("/products", json={})
        assert response.status_code == 422

    def test_cart_uses_user_header_not_api_key(self, client: TestClient) -> None:
        response = client.post("/cart", json={"product_id": str(uuid4())})
        assert response.json()["error_code"] == "UNAUTHORIZED"
        assert response.json()["message"] == "Please login first!"


class TestRequiresApiKey:
    """Tests for the protected-route predicate."""

    def test_product_writes(self) -> None:
        assert requires_api_key("POST", "/products")
        assert requires_api_key("patch", "/products/abc/status")
        assert requires_api_key("DELETE", "/products/abc")

    def test_reads_and_other_paths(self) -> None:
        assert not requires_api_key("GET", "/products")
        assert not requires_api_key("POST", "/cart")
        assert not requires_api_key("POST", "/productsx")
