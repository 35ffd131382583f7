"""Relational aggregation for product detail views.

The detail query joins a product to its categories, related products and
brand, which yields one flat row per (category, related product)
combination. ``fold_rows`` folds those rows back into one nested record per
product, keyed by the product id.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class RelationSpec:
    """How one related entity appears in the flat rows.

    Attributes:
        name: Key of the nested list in the folded record.
        prefix: Label prefix of the relation's columns in the flat rows.
        fields: Preview fields copied into each sub-record.
        id_field: Field that identifies a sub-record; rows where it is NULL
            come from an unmatched outer join and are skipped.
    """

    name: str
    prefix: str
    fields: tuple[str, ...]
    id_field: str = "id"

    def owns(self, key: str) -> bool:
        return key.startswith(self.prefix)

    def extract(self, row: Mapping[str, Any]) -> dict[str, Any] | None:
        """Pull this relation's sub-record out of a flat row."""
        if row.get(f"{self.prefix}{self.id_field}") is None:
            return None
        return {field: row.get(f"{self.prefix}{field}") for field in self.fields}


CATEGORIES = RelationSpec(
    name="categories",
    prefix="category__",
    fields=("id", "name", "slug"),
)

RELATED_PRODUCTS = RelationSpec(
    name="related_products",
    prefix="related__",
    fields=(
        "id",
        "title",
        "slug",
        "description",
        "custom_description",
        "pictures",
        "tags",
        "sku",
    ),
)

# Many-to-one, but emitted as a list of at most one record like the others
BRAND = RelationSpec(
    name="brand",
    prefix="brand__",
    fields=("id", "name", "slug"),
)

DETAIL_RELATIONS: tuple[RelationSpec, ...] = (CATEGORIES, RELATED_PRODUCTS, BRAND)


def fold_rows(
    rows: Iterable[Mapping[str, Any]],
    relations: tuple[RelationSpec, ...] = DETAIL_RELATIONS,
    root_key: str = "id",
) -> list[dict[str, Any]]:
    """Fold flat joined rows into nested records.

    Root columns are taken from the first row of each root id. Every
    relation becomes a list of sub-records, de-duplicated by sub-record id
    and kept in first-seen order. A relation with no matches is ``[]``.

    Args:
        rows: Flat rows, each a mapping of column label to value.
        relations: Relations to fold.
        root_key: Column identifying the root entity.

    Returns:
        One record per distinct root id, in first-seen order.
    """
    folded: dict[Any, dict[str, Any]] = {}
    seen: dict[Any, dict[str, set[Any]]] = {}

    for row in rows:
        root_id = row[root_key]
        record = folded.get(root_id)
        if record is None:
            record = {
                key: value
                for key, value in row.items()
                if not any(spec.owns(key) for spec in relations)
            }
            for spec in relations:
                record[spec.name] = []
            folded[root_id] = record
            seen[root_id] = {spec.name: set() for spec in relations}

        for spec in relations:
            sub_record = spec.extract(row)
            if sub_record is None:
                continue
            sub_id = sub_record[spec.id_field]
            if sub_id in seen[root_id][spec.name]:
                continue
            seen[root_id][spec.name].add(sub_id)
            record[spec.name].append(sub_record)

    return list(folded.values())


def fold_product(rows: Iterable[Mapping[str, Any]]) -> dict[str, Any] | None:
    """Fold the rows of a single-product detail query.

    Returns:
        The nested product, or None when there were no rows.
    """
    products = fold_rows(rows)
    return products[0] if products else None
