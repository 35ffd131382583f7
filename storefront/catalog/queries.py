"""Statement compiler for catalog reads and writes.

Every statement here is SQLAlchemy Core; caller input only ever reaches the
database as bound parameters.

The listing pair (data + count) shares one join graph and one WHERE clause,
so the page and the reported total always agree on which products match.
The two statements are issued one after the other in the same session; if
a product is inserted between them the total can be one row stale. That
race only affects ``total_page`` and is accepted.
"""

import re
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import (
    BigInteger,
    Delete,
    Select,
    Update,
    any_,
    bindparam,
    delete,
    distinct,
    exists,
    func,
    literal_column,
    or_,
    select,
    update,
)
from sqlalchemy.dialects.postgresql import JSON
from sqlalchemy.orm import aliased
from sqlalchemy.sql.elements import ColumnElement

from storefront.catalog.aggregation import BRAND, CATEGORIES, RELATED_PRODUCTS, RelationSpec
from storefront.catalog.filters import PredicateSet
from storefront.catalog.models import Brand, Category, Product
from storefront.catalog.pagination import PageRequest
from storefront.domain.state_machines import ProductStatus, source_statuses_for

EMPTY_JSON_ARRAY = literal_column("'[]'::json")

# Characters treated as word separators in search terms
_SEPARATORS = re.compile(r"[-_\s]+")

# Related products are a self-join on the products table
RelatedProduct = aliased(Product, name="rp")

# Columns returned by the listing endpoints
LIST_COLUMNS = (
    Product.id,
    Product.title,
    Product.slug,
    Product.pictures,
    Product.price,
    Product.moq,
    Product.status,
    Product.is_featured,
    Product.created_at,
)

# Columns returned for the product itself on the detail endpoint
DETAIL_COLUMNS = (
    Product.id,
    Product.title,
    Product.slug,
    Product.type,
    Product.description,
    Product.custom_description,
    Product.pictures,
    Product.tags,
    Product.sku,
    Product.price,
    Product.moq,
    Product.status,
    Product.is_featured,
    Product.meta_title,
    Product.meta_description,
    Product.created_at,
    Product.updated_at,
)

SEARCH_COLUMNS = (
    Product.id,
    Product.title,
    Product.pictures,
    Product.slug,
    Product.tags,
)

# Source entity for each relation folded on the detail endpoint
_RELATION_SOURCES = {
    CATEGORIES.name: Category,
    RELATED_PRODUCTS.name: RelatedProduct,
    BRAND.name: Brand,
}


def json_object(**fields: ColumnElement) -> ColumnElement:
    """``json_build_object`` with constant keys rendered inline."""
    args: list[ColumnElement] = []
    for key, column in fields.items():
        args.append(literal_column(f"'{key}'"))
        args.append(column)
    return func.json_build_object(*args)


def json_array_agg(item: ColumnElement, present: ColumnElement[bool]) -> ColumnElement:
    """Aggregate ``item`` into a JSON array, ``[]`` when nothing joined."""
    return func.coalesce(
        func.json_agg(item).filter(present),
        EMPTY_JSON_ARRAY,
        type_=JSON,
    )


def with_catalog_joins(query: Select) -> Select:
    """Join products to their categories (array membership) and brand."""
    return (
        query.select_from(Product)
        .outerjoin(Category, Category.id == any_(Product.category_ids))
        .outerjoin(Brand, Brand.id == Product.brand_id)
    )


@dataclass(frozen=True)
class CatalogQuery:
    """Paired data and count statements for one listing request.

    Attributes:
        predicates: Conjunctive filters shared by both statements.
        page: Validated pagination window.
    """

    predicates: PredicateSet
    page: PageRequest

    def data_statement(self) -> Select:
        """One row per product for the requested page, newest first."""
        categories = json_array_agg(
            json_object(
                id=Category.id,
                name=Category.name,
                slug=Category.slug,
                image=Category.image,
            ),
            Category.id.isnot(None),
        )
        query = with_catalog_joins(
            select(
                *LIST_COLUMNS,
                categories.label("categories"),
                Brand.name.label("brand"),
                Brand.slug.label("brand_slug"),
            )
        )
        query = self.predicates.apply(query)
        return (
            query.group_by(Product.id, Brand.name, Brand.slug)
            .order_by(Product.created_at.desc(), Product.id)
            .limit(bindparam("limit", self.page.limit, type_=BigInteger))
            .offset(bindparam("offset", self.page.offset, type_=BigInteger))
        )

    def count_statement(self) -> Select:
        """Number of distinct products matching the same filters."""
        query = with_catalog_joins(select(func.count(distinct(Product.id)).label("total")))
        return self.predicates.apply(query)


def detail_statement(slug: str) -> Select:
    """Flat rows for one product joined to categories, related products and brand.

    Each relation's preview columns are labelled ``<prefix><field>`` so the
    aggregator can fold them. Rows are ordered by each id's position in the
    product's own arrays so the folded lists keep the stored order.
    """
    relation_columns: list[ColumnElement] = []
    for spec in (CATEGORIES, RELATED_PRODUCTS, BRAND):
        source = _RELATION_SOURCES[spec.name]
        relation_columns.extend(_prefixed(spec, source))

    return (
        select(*DETAIL_COLUMNS, *relation_columns)
        .select_from(Product)
        .outerjoin(RelatedProduct, RelatedProduct.id == any_(Product.related_products))
        .outerjoin(Category, Category.id == any_(Product.category_ids))
        .outerjoin(Brand, Brand.id == Product.brand_id)
        .where(Product.slug == bindparam("slug", slug))
        .order_by(
            func.array_position(Product.category_ids, Category.id),
            func.array_position(Product.related_products, RelatedProduct.id),
        )
    )


def _prefixed(spec: RelationSpec, source: type) -> list[ColumnElement]:
    return [getattr(source, name).label(f"{spec.prefix}{name}") for name in spec.fields]


def normalize_search_term(raw: str | None) -> str:
    """Replace word separators with single spaces and trim.

    >>> normalize_search_term("red-shoe")
    'red shoe'
    """
    if not raw:
        return ""
    return _SEPARATORS.sub(" ", raw).strip()


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the term matches literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def search_statement(term: str) -> Select:
    """Case-insensitive substring search over title and tags.

    Args:
        term: Already-normalized, non-blank search term.
    """
    pattern = bindparam("pattern", f"%{escape_like(term)}%")
    tag = func.unnest(Product.tags).column_valued("tag")
    return (
        select(*SEARCH_COLUMNS)
        .where(
            or_(
                Product.title.ilike(pattern),
                bindparam("tag_literal", f"%{term}%") == any_(Product.tags),
                exists().where(tag.ilike(pattern)),
            )
        )
        .order_by(Product.title, Product.id)
    )


def status_update_statement(product_id: str, target: ProductStatus) -> Update:
    """Write ``target`` only if the current status allows it.

    Validation and write happen in one statement; an empty RETURNING
    means the product is missing or the transition is not allowed.
    """
    return (
        update(Product)
        .where(
            Product.id == bindparam("product_id", product_id),
            Product.status.in_(source_statuses_for(target)),
        )
        .values(status=target)
        .returning(Product)
        .execution_options(synchronize_session=False, populate_existing=True)
    )


def delete_statement(product_id: str) -> Delete:
    """Hard delete returning the removed row."""
    return (
        delete(Product)
        .where(Product.id == product_id)
        .returning(Product)
        .execution_options(synchronize_session=False)
    )


def status_counts_statement(since: datetime | None = None) -> Select:
    """Product counts grouped by status, optionally since a timestamp."""
    query = select(Product.status, func.count(Product.id).label("total")).group_by(
        Product.status
    )
    if since is not None:
        query = query.where(Product.created_at >= since)
    return query
