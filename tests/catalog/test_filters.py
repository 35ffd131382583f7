"""Tests for the listing predicate builder."""

from storefront.catalog.filters import (
    ProductFilter,
    brand_slug_predicate,
    build_predicates,
    category_slug_predicate,
    is_truthy,
    split_slugs,
)


class TestBuildPredicates:
    """Tests for build_predicates."""

    def test_empty_filters_produce_no_predicates(self) -> None:
        predicates = build_predicates({})
        assert len(predicates) == 0
        assert predicates.where_clause is None
        assert predicates.params == {}

    def test_unknown_keys_are_ignored(self) -> None:
        predicates = build_predicates({"color": "red", "sort": "price"})
        assert len(predicates) == 0

    def test_fixed_order_regardless_of_input_order(self) -> None:
        """Predicates always come out as type, featured, categories, brands."""
        predicates = build_predicates(
            {
                "brands": "acme",
                "categories": "shoes",
                "featured": "true",
                "type": "apparel",
            }
        )
        assert predicates.keys == ["type", "featured", "categories", "brands"]

    def test_type_binds_its_value(self) -> None:
        predicates = build_predicates({"type": "apparel"})
        assert predicates.params == {"type": "apparel"}
        assert "products.type" in next(iter(predicates)).fragment

    def test_category_slugs_are_numbered(self) -> None:
        """Each category slug gets its own parameter: category0, category1, ..."""
        predicates = build_predicates({"categories": "shoes_bags_hats"})
        assert predicates.params == {
            "category0": "shoes",
            "category1": "bags",
            "category2": "hats",
        }

    def test_brand_slugs_are_numbered(self) -> None:
        predicates = build_predicates({"brands": "acme_globex"})
        assert predicates.params == {"brand0": "acme", "brand1": "globex"}

    def test_blank_segments_are_dropped(self) -> None:
        predicates = build_predicates({"categories": "shoes__bags_"})
        assert predicates.params == {"category0": "shoes", "category1": "bags"}

    def test_only_delimiters_add_nothing(self) -> None:
        assert len(build_predicates({"categories": "__", "brands": ""})) == 0

    def test_featured_false_adds_nothing(self) -> None:
        assert len(build_predicates({"featured": "false"})) == 0
        assert len(build_predicates({"featured": False})) == 0

    def test_featured_has_no_parameter(self) -> None:
        predicates = build_predicates({"featured": True})
        assert predicates.keys == ["featured"]
        assert predicates.params == {}

    def test_values_never_reach_the_fragment(self) -> None:
        """Caller text only ever appears as a bound parameter."""
        hostile = "x' OR '1'='1"
        predicates = build_predicates({"type": hostile, "brands": hostile})
        for predicate in predicates:
            assert hostile not in predicate.fragment
        assert predicates.params["type"] == hostile


class TestTriples:
    """Tests for PredicateSet.triples."""

    def test_one_triple_per_parameter(self) -> None:
        predicates = build_predicates({"type": "gear", "brands": "acme_globex"})
        triples = predicates.triples()

        assert [(name, value) for _, name, value in triples] == [
            ("type", "gear"),
            ("brand0", "acme"),
            ("brand1", "globex"),
        ]
        # Both brand triples share the same fragment
        assert triples[1][0] == triples[2][0]

    def test_featured_triple_has_no_parameter(self) -> None:
        triples = build_predicates({"featured": "1"}).triples()
        assert len(triples) == 1
        fragment, name, value = triples[0]
        assert "is_featured" in fragment
        assert name is None
        assert value is None


class TestProductFilter:
    """Tests for the typed filter wrapper."""

    def test_matches_build_predicates(self) -> None:
        product_filter = ProductFilter(type="gear", featured=True, categories="shoes")
        assert product_filter.predicates().keys == ["type", "featured", "categories"]

    def test_defaults_produce_no_predicates(self) -> None:
        assert len(ProductFilter().predicates()) == 0


class TestFixedPredicates:
    """Tests for the by-category and by-brand predicates."""

    def test_category_slug_predicate(self) -> None:
        predicates = category_slug_predicate("shoes")
        assert predicates.params == {"category_slug": "shoes"}
        assert "categories.slug" in next(iter(predicates)).fragment

    def test_brand_slug_predicate(self) -> None:
        predicates = brand_slug_predicate("acme")
        assert predicates.params == {"brand_slug": "acme"}
        assert "brands.slug" in next(iter(predicates)).fragment


class TestHelpers:
    """Tests for slug splitting and flag parsing."""

    def test_split_slugs(self) -> None:
        assert split_slugs("a_b") == ["a", "b"]
        assert split_slugs(None) == []
        assert split_slugs("") == []

    def test_is_truthy(self) -> None:
        assert is_truthy("true")
        assert is_truthy("YES")
        assert is_truthy("1")
        assert is_truthy(True)
        assert not is_truthy("0")
        assert not is_truthy(None)
        assert not is_truthy("no")
