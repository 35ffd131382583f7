"""Tests for Product API endpoints."""

from uuid import uuid4

from fastapi.testclient import TestClient

from storefront.catalog.pagination import MAX_PAGE, PageRequest, PaginatedResult
from storefront.domain.exceptions import (
    InvalidStatusTransitionError,
    ProductNotFoundError,
    SlugConflictError,
    StorageError,
)
from storefront.domain.state_machines import ProductStatus


def page_of(rows, total, page=1, limit=10) -> PaginatedResult:
    return PaginatedResult(items=rows, total=total, page=page, limit=limit)


def create_body(**overrides) -> dict:
    body = {
        "title": "Red Shoe",
        "slug": "red-shoe",
        "price": 49.5,
        "sku": "SKU-1",
        "brand_id": str(uuid4()),
        "category_ids": [str(uuid4())],
        "meta_title": "Red Shoe",
        "meta_description": "Buy the red shoe",
    }
    body.update(overrides)
    return body


class TestListProducts:
    """Tests for GET /products."""

    def test_envelope_and_total_page(self, client: TestClient, catalog_service, list_row_factory):
        """25 matches at limit 10 report total_page 3."""
        rows = [list_row_factory() for _ in range(10)]
        catalog_service.list_products.return_value = page_of(rows, 25)

        response = client.get("/products", params={"page": 1, "limit": 10})

        assert response.status_code == 200
        data = response.json()
        assert data["status"] is True
        assert data["total_page"] == 3
        assert data["page"] == 1
        assert len(data["data"]) == 10
        assert data["data"][0]["brand"] == "Acme"
        assert data["data"][0]["price"] == 59.0
        assert data["data"][0]["categories"][0]["slug"] == "shoes"

    def test_second_page(self, client: TestClient, catalog_service, list_row_factory):
        """page=2&limit=10 over 25 rows: 10 rows, total_page 3, page 2."""
        rows = [list_row_factory() for _ in range(10)]
        catalog_service.list_products.return_value = page_of(rows, 25, page=2)

        data = client.get("/products", params={"page": 2, "limit": 10}).json()

        assert len(data["data"]) == 10
        assert data["total_page"] == 3
        assert data["page"] == 2
        _, page = catalog_service.list_products.await_args.args
        assert page.offset == 10

    def test_filters_are_passed_through(self, client: TestClient, catalog_service):
        catalog_service.list_products.return_value = page_of([], 0)

        client.get(
            "/products",
            params={"categories": "shoes_bags", "brands": "acme", "featured": "true", "type": "gear"},
        )

        filters, page = catalog_service.list_products.await_args.args
        assert filters.categories == "shoes_bags"
        assert filters.brands == "acme"
        assert filters.featured is True
        assert filters.type == "gear"
        assert page == PageRequest(page=1, limit=10)

    def test_out_of_range_paging_is_clamped(self, client: TestClient, catalog_service):
        catalog_service.list_products.return_value = page_of([], 0)

        response = client.get("/products", params={"page": -3, "limit": 0})

        assert response.status_code == 200
        _, page = catalog_service.list_products.await_args.args
        assert page == PageRequest(page=1, limit=10)

    def test_unparsable_paging_falls_back_to_defaults(self, client: TestClient, catalog_service):
        catalog_service.list_products.return_value = page_of([], 0)

        response = client.get("/products", params={"page": "two", "limit": "abc"})

        assert response.status_code == 200
        _, page = catalog_service.list_products.await_args.args
        assert page == PageRequest(page=1, limit=10)

    def test_huge_page_is_clamped(self, client: TestClient, catalog_service):
        """A page far past the end lists nothing instead of failing."""
        catalog_service.list_products.return_value = page_of([], 25, page=MAX_PAGE)

        response = client.get("/products", params={"page": 30_000_000_000_000, "limit": 100})

        assert response.status_code == 200
        assert response.json()["data"] == []
        _, page = catalog_service.list_products.await_args.args
        assert page.page == MAX_PAGE
        assert page.offset < 2**63

    def test_limit_is_capped(self, client: TestClient, catalog_service):
        catalog_service.list_products.return_value = page_of([], 0)

        client.get("/products", params={"limit": 1000})

        _, page = catalog_service.list_products.await_args.args
        assert page.limit == 100

    def test_empty_listing(self, client: TestClient, catalog_service):
        catalog_service.list_products.return_value = page_of([], 0)

        data = client.get("/products").json()

        assert data["data"] == []
        assert data["total_page"] == 0

    def test_storage_error_hides_engine_text(self, client: TestClient, catalog_service):
        catalog_service.list_products.side_effect = StorageError(
            "product.list", RuntimeError("relation \"products\" does not exist")
        )

        response = client.get("/products")

        assert response.status_code == 500
        data = response.json()
        assert data["status"] is False
        assert data["error_code"] == "STORAGE_ERROR"
        assert data["details"] == {"operation": "product.list"}


class TestGroupListings:
    """Tests for by-category and by-brand listings."""

    def test_by_category(self, client: TestClient, catalog_service, list_row_factory):
        catalog_service.list_by_category.return_value = page_of([list_row_factory()], 1)

        response = client.get("/products/category/shoes")

        assert response.status_code == 200
        data = response.json()
        assert len(data["products"]) == 1
        assert data["total_page"] == 1
        assert catalog_service.list_by_category.await_args.args[0] == "shoes"

    def test_by_brand(self, client: TestClient, catalog_service):
        catalog_service.list_by_brand.return_value = page_of([], 0, page=2)

        response = client.get("/products/brand/acme", params={"page": 2})

        assert response.status_code == 200
        assert response.json()["page"] == 2
        assert catalog_service.list_by_brand.await_args.args[0] == "acme"


class TestSearch:
    """Tests for GET /products/search."""

    def test_results_are_marked_unbounded(self, client: TestClient, catalog_service):
        catalog_service.search.return_value = [
            {"id": "p1", "title": "Red Shoe", "pictures": [], "slug": "red-shoe", "tags": ["red"]},
        ]

        response = client.get("/products/search", params={"q": "red-shoe"})

        assert response.status_code == 200
        assert response.headers["X-Result-Unbounded"] == "true"
        assert response.json()["data"][0]["slug"] == "red-shoe"
        catalog_service.search.assert_awaited_once_with("red-shoe")

    def test_missing_term(self, client: TestClient, catalog_service):
        catalog_service.search.return_value = []

        response = client.get("/products/search")

        assert response.status_code == 200
        assert response.json()["data"] == []


class TestProductDetail:
    """Tests for single-product reads."""

    def test_by_slug(self, client: TestClient, catalog_service, product_factory):
        product = product_factory()
        catalog_service.get_by_slug.return_value = {
            "id": product.id,
            "title": product.title,
            "slug": product.slug,
            "sku": product.sku,
            "price": product.price,
            "moq": product.moq,
            "status": product.status,
            "created_at": product.created_at,
            "updated_at": product.updated_at,
            "categories": [{"id": "c1", "name": "Bags", "slug": "bags"}],
            "related_products": [],
            "brand": [{"id": "b1", "name": "Acme", "slug": "acme"}],
        }

        response = client.get(f"/products/{product.slug}")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["slug"] == product.slug
        assert data["brand"] == [{"id": "b1", "name": "Acme", "slug": "acme"}]
        assert data["related_products"] == []

    def test_unknown_slug(self, client: TestClient, catalog_service):
        catalog_service.get_by_slug.side_effect = ProductNotFoundError("nope", field="slug")

        response = client.get("/products/nope")

        assert response.status_code == 404
        data = response.json()
        assert data["status"] is False
        assert data["error_code"] == "PRODUCT_NOT_FOUND"
        assert "request_id" in data

    def test_by_id(self, client: TestClient, catalog_service, product_factory):
        product = product_factory()
        catalog_service.get_product.return_value = product

        response = client.get(f"/products/id/{product.id}")

        assert response.status_code == 200
        assert response.json()["data"]["id"] == product.id
        catalog_service.get_product.assert_awaited_once_with(product.id)

    def test_by_id_rejects_non_uuid(self, client: TestClient):
        response = client.get("/products/id/not-a-uuid")
        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"


class TestStats:
    """Tests for GET /products/stats."""

    def test_counts(self, client: TestClient, catalog_service):
        catalog_service.status_counts.return_value = {"pending": 1, "draft": 2, "published": 3}

        response = client.get("/products/stats", params={"last_30_days": "true"})

        assert response.status_code == 200
        assert response.json()["data"]["draft"] == 2
        catalog_service.status_counts.assert_awaited_once_with(True)


class TestWrites:
    """Tests for product writes (API key required)."""

    def test_create(self, auth_client: TestClient, catalog_service, product_factory):
        product = product_factory(slug="red-shoe")
        catalog_service.create_product.return_value = product

        response = auth_client.post("/products", json=create_body())

        assert response.status_code == 201
        assert response.json()["data"]["slug"] == "red-shoe"
        values = catalog_service.create_product.await_args.args[0]
        assert values["status"] is ProductStatus.PENDING
        assert isinstance(values["brand_id"], str)

    def test_create_rejects_negative_price(self, auth_client: TestClient, catalog_service):
        response = auth_client.post("/products", json=create_body(price=-1))

        assert response.status_code == 422
        catalog_service.create_product.assert_not_awaited()

    def test_create_duplicate_slug(self, auth_client: TestClient, catalog_service):
        catalog_service.create_product.side_effect = SlugConflictError("red-shoe")

        response = auth_client.post("/products", json=create_body())

        assert response.status_code == 409
        assert response.json()["error_code"] == "SLUG_CONFLICT"

    def test_update_sends_only_supplied_fields(
        self, auth_client: TestClient, catalog_service, product_factory
    ):
        product = product_factory(title="New Title")
        catalog_service.update_product.return_value = product

        response = auth_client.put(f"/products/{product.id}", json={"title": "New Title"})

        assert response.status_code == 200
        catalog_service.update_product.assert_awaited_once_with(product.id, {"title": "New Title"})

    def test_update_rejects_null_for_required_column(
        self, auth_client: TestClient, catalog_service
    ):
        response = auth_client.put(f"/products/{uuid4()}", json={"title": None})

        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"
        catalog_service.update_product.assert_not_awaited()

    def test_update_allows_clearing_optional_column(
        self, auth_client: TestClient, catalog_service, product_factory
    ):
        product = product_factory()
        catalog_service.update_product.return_value = product

        response = auth_client.put(f"/products/{product.id}", json={"description": None})

        assert response.status_code == 200
        catalog_service.update_product.assert_awaited_once_with(product.id, {"description": None})

    def test_set_status(self, auth_client: TestClient, catalog_service, product_factory):
        product = product_factory(status=ProductStatus.PUBLISHED)
        catalog_service.set_status.return_value = product

        response = auth_client.patch(
            f"/products/{product.id}/status", json={"status": "published"}
        )

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "published"
        catalog_service.set_status.assert_awaited_once_with(product.id, ProductStatus.PUBLISHED)

    def test_set_unknown_status(self, auth_client: TestClient, catalog_service):
        response = auth_client.patch(f"/products/{uuid4()}/status", json={"status": "archived"})

        assert response.status_code == 422
        catalog_service.set_status.assert_not_awaited()

    def test_forbidden_transition(self, auth_client: TestClient, catalog_service):
        product_id = str(uuid4())
        catalog_service.set_status.side_effect = InvalidStatusTransitionError(
            product_id, "published", "pending", ["draft"]
        )

        response = auth_client.patch(f"/products/{product_id}/status", json={"status": "pending"})

        assert response.status_code == 409
        assert response.json()["details"]["allowed_transitions"] == ["draft"]

    def test_delete(self, auth_client: TestClient, catalog_service, product_factory):
        product = product_factory()
        catalog_service.delete_product.return_value = product

        response = auth_client.delete(f"/products/{product.id}")

        assert response.status_code == 200
        assert response.json()["message"] == "Product deleted."

    def test_delete_missing(self, auth_client: TestClient, catalog_service):
        catalog_service.delete_product.side_effect = ProductNotFoundError("x")

        response = auth_client.delete(f"/products/{uuid4()}")

        assert response.status_code == 404
