#!/usr/bin/env python3
"""Seed product catalog script.

Creates a small deterministic catalog of brands, categories and products
for local development.

Usage:
    python scripts/seed_catalog.py
    python scripts/seed_catalog.py --products 40 --publish
    python scripts/seed_catalog.py --create-tables
"""

import argparse
import asyncio
import sys
from decimal import Decimal
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from storefront.cart.models import CartItem  # noqa: E402,F401
from storefront.catalog.models import Brand, Category  # noqa: E402
from storefront.catalog.service import CatalogService  # noqa: E402
from storefront.domain.state_machines import ProductStatus  # noqa: E402
from storefront.infrastructure.config import get_settings  # noqa: E402
from storefront.infrastructure.database import Database  # noqa: E402

BRANDS = [
    ("Acme", "acme"),
    ("Northwind", "northwind"),
    ("Globex", "globex"),
]

CATEGORIES = [
    ("Shoes", "shoes"),
    ("Bags", "bags"),
    ("Accessories", "accessories"),
    ("Outdoor", "outdoor"),
]

TYPES = ["apparel", "gear", "gift"]

TAGS = ["summer", "leather", "travel", "bestseller", "eco"]


def product_values(index: int, brands: list[Brand], categories: list[Category]) -> dict:
    """Deterministic field values for the ``index``-th product."""
    brand = brands[index % len(brands)]
    first = categories[index % len(categories)]
    second = categories[(index + 1) % len(categories)]
    category_ids = [first.id] if index % 3 else [first.id, second.id]
    title = f"{brand.name} {first.name} Item {index + 1}"

    return {
        "title": title,
        "slug": f"{brand.slug}-{first.slug}-item-{index + 1}",
        "type": TYPES[index % len(TYPES)],
        "price": Decimal(10 + (index * 7) % 190) + Decimal("0.99"),
        "moq": 1 + index % 5,
        "description": f"Sample {first.name.lower()} product from {brand.name}.",
        "custom_description": [{"type": "paragraph", "text": title}],
        "pictures": [f"/images/products/{index + 1}.jpg"],
        "tags": [TAGS[index % len(TAGS)], TAGS[(index + 2) % len(TAGS)]],
        "sku": f"SKU-{index + 1:05d}",
        "brand_id": brand.id,
        "category_ids": category_ids,
        "is_featured": index % 4 == 0,
        "meta_title": title,
        "meta_description": f"Buy {title}",
    }


async def seed(database: Database, product_count: int, publish: bool) -> dict:
    """Seed brands, categories and products.

    Args:
        database: Target database.
        product_count: Number of products to create.
        publish: Publish every product after creating it.

    Returns:
        Seeding result.
    """
    async with database.session() as session:
        brands = [Brand(name=name, slug=slug) for name, slug in BRANDS]
        categories = [
            Category(name=name, slug=slug, image=f"/images/categories/{slug}.jpg")
            for name, slug in CATEGORIES
        ]
        session.add_all([*brands, *categories])
        await session.commit()

        service = CatalogService(session)
        created = []
        for index in range(product_count):
            product = await service.create_product(product_values(index, brands, categories))
            created.append(product)

        # Link each product to its neighbour
        for current, neighbour in zip(created, created[1:]):
            await service.update_product(current.id, {"related_products": [neighbour.id]})

        if publish:
            for product in created:
                await service.set_status(product.id, ProductStatus.PUBLISHED)

    return {
        "brands": len(brands),
        "categories": len(categories),
        "products": len(created),
    }


async def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Seed the storefront product catalog",
    )
    parser.add_argument(
        "--products",
        type=int,
        default=25,
        help="Number of products to create (default: 25)",
    )
    parser.add_argument(
        "--publish",
        action="store_true",
        help="Publish the created products",
    )
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create tables directly instead of relying on migrations",
    )

    args = parser.parse_args()

    print("=" * 60)
    print("Storefront Catalog Seeder")
    print("=" * 60)
    print(f"Products: {args.products}")
    print(f"Publish: {args.publish}")
    print()

    database = Database.from_settings(get_settings())
    try:
        if args.create_tables:
            print("Creating database tables...")
            await database.create_all()
            print("Tables ready.")
            print()

        result = await seed(database, args.products, args.publish)
    finally:
        await database.dispose()

    print(f"  Brands: {result['brands']}")
    print(f"  Categories: {result['categories']}")
    print(f"  Products: {result['products']}")
    print()
    print("=" * 60)
    print("Seeding complete!")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
