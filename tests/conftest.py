"""Shared fixtures for storefront tests."""

from collections.abc import Callable
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any
from uuid import uuid4

import pytest

from storefront.cart.models import CartItem
from storefront.catalog.models import Product
from storefront.domain.state_machines import ProductStatus

CREATED_AT = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def product_factory() -> Callable[..., Product]:
    """Build unsaved Product rows with every column populated."""

    def make(**overrides: Any) -> Product:
        values: dict[str, Any] = {
            "id": str(uuid4()),
            "title": "Leather Weekender Bag",
            "slug": "leather-weekender-bag",
            "type": "gear",
            "price": Decimal("129.99"),
            "moq": 1,
            "description": "Full-grain leather travel bag.",
            "custom_description": [],
            "pictures": ["/images/weekender.jpg"],
            "tags": ["leather", "travel"],
            "sku": "SKU-00001",
            "brand_id": str(uuid4()),
            "category_ids": [str(uuid4())],
            "status": ProductStatus.PENDING,
            "is_featured": False,
            "related_products": [],
            "meta_title": "Leather Weekender Bag",
            "meta_description": "Buy the leather weekender bag",
            "created_at": CREATED_AT,
            "updated_at": CREATED_AT,
        }
        values.update(overrides)
        return Product(**values)

    return make


@pytest.fixture
def list_row_factory() -> Callable[..., dict[str, Any]]:
    """Build rows shaped like the listing data statement output."""

    def make(**overrides: Any) -> dict[str, Any]:
        row: dict[str, Any] = {
            "id": str(uuid4()),
            "title": "Canvas Sneaker",
            "slug": "canvas-sneaker",
            "pictures": ["/images/sneaker.jpg"],
            "price": Decimal("59.00"),
            "moq": 2,
            "status": ProductStatus.PUBLISHED,
            "is_featured": True,
            "created_at": CREATED_AT,
            "categories": [
                {"id": str(uuid4()), "name": "Shoes", "slug": "shoes", "image": None},
            ],
            "brand": "Acme",
            "brand_slug": "acme",
        }
        row.update(overrides)
        return row

    return make


@pytest.fixture
def cart_item_factory() -> Callable[..., CartItem]:
    """Build unsaved CartItem rows."""

    def make(**overrides: Any) -> CartItem:
        values: dict[str, Any] = {
            "id": str(uuid4()),
            "user_id": str(uuid4()),
            "product_id": str(uuid4()),
            "quantity": 1,
            "created_at": CREATED_AT,
            "updated_at": CREATED_AT,
        }
        values.update(overrides)
        return CartItem(**values)

    return make
