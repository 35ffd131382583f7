"""Predicate builder for catalog listings.

Turns raw listing filters into an ordered set of named predicates whose
values are always bound parameters, never text spliced into the statement.
"""

from collections.abc import Iterator, Mapping
from dataclasses import asdict, dataclass
from typing import Any

from sqlalchemy import and_, bindparam, true
from sqlalchemy.dialects import postgresql
from sqlalchemy.sql.elements import ColumnElement

from storefront.catalog.models import Brand, Category, Product

# Separator between slugs in the ``categories`` and ``brands`` filters
SLUG_DELIMITER = "_"

TRUTHY_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Predicate:
    """A single WHERE condition with the parameters it binds.

    Attributes:
        key: Filter key that produced the predicate.
        clause: SQLAlchemy boolean expression.
        params: Ordered ``(name, value)`` pairs bound by the clause.
    """

    key: str
    clause: ColumnElement[bool]
    params: tuple[tuple[str, Any], ...] = ()

    @property
    def fragment(self) -> str:
        """Render the clause as PostgreSQL text with named placeholders."""
        return str(self.clause.compile(dialect=postgresql.dialect()))


@dataclass(frozen=True)
class PredicateSet:
    """Ordered, conjunctive set of predicates."""

    predicates: tuple[Predicate, ...] = ()

    def __len__(self) -> int:
        return len(self.predicates)

    def __iter__(self) -> Iterator[Predicate]:
        return iter(self.predicates)

    @property
    def keys(self) -> list[str]:
        """Filter keys in predicate order."""
        return [p.key for p in self.predicates]

    @property
    def params(self) -> dict[str, Any]:
        """Merged bound-parameter map."""
        return {name: value for p in self.predicates for name, value in p.params}

    @property
    def where_clause(self) -> ColumnElement[bool] | None:
        """AND of every clause, or None when there is nothing to filter."""
        if not self.predicates:
            return None
        return and_(*(p.clause for p in self.predicates))

    def triples(self) -> list[tuple[str, str | None, Any]]:
        """Flatten to ``(fragment, parameter name, parameter value)`` triples.

        Parameterless predicates (``featured``) produce one triple with
        ``None`` name and value; multi-valued ones produce one per value.
        """
        result: list[tuple[str, str | None, Any]] = []
        for predicate in self.predicates:
            if not predicate.params:
                result.append((predicate.fragment, None, None))
                continue
            for name, value in predicate.params:
                result.append((predicate.fragment, name, value))
        return result

    def apply(self, query: Any) -> Any:
        """Add the WHERE clause to a select, if any."""
        clause = self.where_clause
        if clause is None:
            return query
        return query.where(clause)


@dataclass
class ProductFilter:
    """Typed listing filters as received from the HTTP layer.

    Attributes:
        type: Exact product type.
        featured: Only featured products when truthy.
        categories: Category slugs joined with ``_``.
        brands: Brand slugs joined with ``_``.
    """

    type: str | None = None
    featured: bool | None = None
    categories: str | None = None
    brands: str | None = None

    def predicates(self) -> PredicateSet:
        """Build the predicate set for these filters."""
        return build_predicates(asdict(self))


def split_slugs(raw: str | None) -> list[str]:
    """Split a delimiter-separated slug list, dropping blank segments."""
    if not raw:
        return []
    return [part.strip() for part in raw.split(SLUG_DELIMITER) if part.strip()]


def is_truthy(value: Any) -> bool:
    """Interpret a filter flag that may arrive as bool or query-string text."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in TRUTHY_VALUES


def _slug_in(key: str, column: Any, prefix: str, slugs: list[str]) -> Predicate:
    params = tuple((f"{prefix}{index}", slug) for index, slug in enumerate(slugs))
    clause = column.in_([bindparam(name, value) for name, value in params])
    return Predicate(key=key, clause=clause, params=params)


def build_predicates(filters: Mapping[str, Any]) -> PredicateSet:
    """Build the ordered predicate set for a listing request.

    Recognized keys are ``type``, ``featured``, ``categories`` and
    ``brands``; anything else is ignored. Predicates come out in that order
    so parameter naming is deterministic.

    Args:
        filters: Raw filter values; absent or empty values add nothing.

    Returns:
        Predicate set to AND into the listing and count statements.
    """
    predicates: list[Predicate] = []

    product_type = filters.get("type")
    if product_type:
        predicates.append(
            Predicate(
                key="type",
                clause=Product.type == bindparam("type", product_type),
                params=(("type", product_type),),
            )
        )

    if is_truthy(filters.get("featured")):
        predicates.append(Predicate(key="featured", clause=Product.is_featured == true()))

    category_slugs = split_slugs(filters.get("categories"))
    if category_slugs:
        predicates.append(
            _slug_in("categories", Category.slug, "category", category_slugs)
        )

    brand_slugs = split_slugs(filters.get("brands"))
    if brand_slugs:
        predicates.append(_slug_in("brands", Brand.slug, "brand", brand_slugs))

    return PredicateSet(tuple(predicates))


def category_slug_predicate(slug: str) -> PredicateSet:
    """Fixed predicate used by the by-category listing."""
    return PredicateSet(
        (
            Predicate(
                key="category",
                clause=Category.slug == bindparam("category_slug", slug),
                params=(("category_slug", slug),),
            ),
        )
    )


def brand_slug_predicate(slug: str) -> PredicateSet:
    """Fixed predicate used by the by-brand listing."""
    return PredicateSet(
        (
            Predicate(
                key="brand",
                clause=Brand.slug == bindparam("brand_slug", slug),
                params=(("brand_slug", slug),),
            ),
        )
    )
