"""Product catalog.

Provides the predicate builder, pagination planner, query compiler,
relational aggregator and the catalog service built on top of them.
"""

from storefront.catalog.aggregation import RelationSpec, fold_product, fold_rows
from storefront.catalog.filters import PredicateSet, ProductFilter, build_predicates
from storefront.catalog.models import Brand, Category, Product
from storefront.catalog.pagination import PageRequest, PaginatedResult
from storefront.catalog.queries import CatalogQuery, normalize_search_term
from storefront.catalog.repository import ProductRepository
from storefront.catalog.service import CatalogService

__all__ = [
    # Models
    "Brand",
    "Category",
    "Product",
    # Query building
    "CatalogQuery",
    "PageRequest",
    "PaginatedResult",
    "PredicateSet",
    "ProductFilter",
    "build_predicates",
    "normalize_search_term",
    # Aggregation
    "RelationSpec",
    "fold_product",
    "fold_rows",
    # Repository
    "ProductRepository",
    # Service
    "CatalogService",
]
