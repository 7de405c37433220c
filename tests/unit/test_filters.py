"""Unit tests for filter specs and the predicate engine."""

import itertools
import logging
from datetime import date, datetime, timezone

import pytest

from catalog.engines.browse import (
    BrowseValidationError,
    CategoricalFilter,
    FilterSpec,
    FlagFilter,
    MatchMode,
    PredicateEngine,
    RangeFilter,
)


@pytest.fixture
def engine(item_fields) -> PredicateEngine:
    return PredicateEngine(item_fields)


def _ids(entities):
    return [entity["id"] for entity in entities]


class TestFilterSpecValues:
    """Tests for the frozen spec value types."""

    def test_flag_filter_defaults_to_any(self):
        assert FlagFilter("flags", ["light"]).match_mode == MatchMode.ANY
        assert FlagFilter("flags", ["light"], None).match_mode == MatchMode.ANY
        assert FlagFilter("flags", ["light"], "").match_mode == MatchMode.ANY

    def test_flag_filter_mode_case_insensitive(self):
        assert FlagFilter("flags", ["light"], "ALL").match_mode == MatchMode.ALL

    def test_flag_filter_rejects_unknown_mode(self):
        with pytest.raises(BrowseValidationError) as exc_info:
            FlagFilter("flags", ["light"], "most")
        assert exc_info.value.facet == "flags"

    def test_flag_names_lowercased(self):
        assert FlagFilter("flags", ["Light", "NONE"]).required == ("light", "none")

    def test_single_string_values_are_one_option(self):
        assert CategoricalFilter("group", "even").values == ("even",)

    def test_blank_range_bounds_are_open(self):
        assert RangeFilter("price", "", "").is_open

    def test_blank_search_text(self):
        assert FilterSpec(search="   ").search_text == ""
        assert FilterSpec().search_text == ""

    def test_specs_are_immutable(self):
        spec = FilterSpec(search="a")
        with pytest.raises(AttributeError):
            spec.search = "b"


class TestSearch:
    """Tests for the free-text search facet."""

    def test_substring_case_insensitive(self, engine, items):
        matched = engine.apply(items, FilterSpec(search="MATCH"))
        assert len(matched) == 12
        assert all(item["id"] % 2 == 0 for item in matched)

    def test_any_search_field_may_match(self, engine, items):
        assert _ids(engine.apply(items, FilterSpec(search="item 7"))) == [7]
        assert _ids(engine.apply(items, FilterSpec(search="other-25"))) == [25]

    def test_explicit_search_fields(self, engine, items):
        spec = FilterSpec(search="match", search_fields=("name",))
        assert engine.apply(items, spec) == []

    def test_blank_search_matches_everything(self, engine, items):
        assert engine.apply(items, FilterSpec(search="  ")) == items

    def test_missing_values_never_match(self, engine):
        assert engine.apply([{"id": 1, "name": None, "code": None}], FilterSpec(search="x")) == []

    def test_unknown_search_field(self, engine):
        with pytest.raises(BrowseValidationError) as exc_info:
            engine.compile(FilterSpec(search="x", search_fields=("colour",)))
        assert exc_info.value.facet == "search"


class TestCategorical:
    """Tests for categorical facets."""

    def test_or_within_facet(self, engine, items):
        spec = FilterSpec(categorical=(CategoricalFilter("id", (3, 5, 99)),))
        assert _ids(engine.apply(items, spec)) == [3, 5]

    def test_and_across_facets(self, engine, items):
        spec = FilterSpec(categorical=(
            CategoricalFilter("group", ("even",)),
            CategoricalFilter("id", (1, 2, 3, 4)),
        ))
        assert _ids(engine.apply(items, spec)) == [2, 4]

    def test_empty_selection_is_no_constraint(self, engine, items):
        spec = FilterSpec(categorical=(CategoricalFilter("group", ()),))
        assert engine.apply(items, spec) == items
        assert engine.compile(spec) == []

    def test_unknown_field(self, engine):
        with pytest.raises(BrowseValidationError) as exc_info:
            engine.compile(FilterSpec(categorical=(CategoricalFilter("colour", ("red",)),)))
        assert exc_info.value.facet == "categorical"

    def test_unhashable_values(self, engine):
        with pytest.raises(BrowseValidationError):
            engine.compile(FilterSpec(categorical=(CategoricalFilter("group", (["even"],)),)))

    def test_numeric_options_from_strings(self, engine, items):
        spec = FilterSpec(categorical=(CategoricalFilter("id", ("3", "5", 7.0)),))
        assert _ids(engine.apply(items, spec)) == [3, 5, 7]

    def test_unparseable_numeric_option(self, engine):
        with pytest.raises(BrowseValidationError) as exc_info:
            engine.compile(FilterSpec(categorical=(CategoricalFilter("id", ("3", "three")),)))
        assert exc_info.value.facet == "categorical"

    def test_text_options_stay_text(self, engine, items):
        spec = FilterSpec(categorical=(CategoricalFilter("code", ("3",)),))
        assert engine.apply(items, spec) == []


class TestFlagFacet:
    """Tests for flag facets."""

    @pytest.fixture
    def flagged(self):
        return [{"id": 1, "flags": 0b011}, {"id": 2, "flags": 0b001}, {"id": 3, "flags": 0b111},
                {"id": 4, "flags": 0}, {"id": 5, "flags": None}]

    def test_match_all(self, engine, flagged):
        spec = FilterSpec(flags=FlagFilter("flags", ("light", "camera"), "all"))
        assert _ids(engine.apply(flagged, spec)) == [1, 3]

    def test_match_any(self, engine, flagged):
        spec = FilterSpec(flags=FlagFilter("flags", ("light", "camera"), "any"))
        assert _ids(engine.apply(flagged, spec)) == [1, 2, 3]

    def test_none_option_selects_zero_flags(self, engine, flagged):
        spec = FilterSpec(flags=FlagFilter("flags", ("none",)))
        assert _ids(engine.apply(flagged, spec)) == [4, 5]

    def test_none_overrides_other_names(self, engine, flagged, caplog):
        spec = FilterSpec(flags=FlagFilter("flags", ("light", "none"), "all"))
        with caplog.at_level(logging.WARNING):
            assert _ids(engine.apply(flagged, spec)) == [4, 5]
        assert "overrides" in caplog.text

    def test_unknown_names_ignored(self, engine, flagged, caplog):
        spec = FilterSpec(flags=FlagFilter("flags", ("camera", "teleport"), "all"))
        with caplog.at_level(logging.WARNING):
            assert _ids(engine.apply(flagged, spec)) == [1, 3]
        assert "unknown flag" in caplog.text.lower()

    def test_only_unknown_names_is_no_constraint(self, engine, flagged):
        spec = FilterSpec(flags=FlagFilter("flags", ("teleport",)))
        assert engine.apply(flagged, spec) == flagged

    def test_empty_required_is_no_constraint(self, engine, flagged):
        assert engine.apply(flagged, FilterSpec(flags=FlagFilter("flags", ()))) == flagged

    def test_non_flag_field_rejected(self, engine):
        with pytest.raises(BrowseValidationError) as exc_info:
            engine.compile(FilterSpec(flags=FlagFilter("group", ("light",))))
        assert exc_info.value.facet == "flags"


class TestRangeFacet:
    """Tests for numeric and date ranges."""

    def test_inclusive_numeric_bounds(self, engine, items):
        spec = FilterSpec(ranges=(RangeFilter("price", 30, 50),))
        assert _ids(engine.apply(items, spec)) == [3, 4, 5]

    def test_numeric_bounds_from_strings(self, engine, items):
        spec = FilterSpec(ranges=(RangeFilter("price", "235.5", None),))
        assert _ids(engine.apply(items, spec)) == [24, 25]

    def test_open_range_is_no_constraint(self, engine, items):
        spec = FilterSpec(ranges=(RangeFilter("price", None, ""),))
        assert engine.compile(spec) == []

    def test_reversed_range_matches_nothing(self, engine, items):
        spec = FilterSpec(ranges=(RangeFilter("price", 50, 30),))
        assert engine.apply(items, spec) == []

    def test_missing_value_fails_bounded_range(self, engine):
        spec = FilterSpec(ranges=(RangeFilter("price", 0, None),))
        assert engine.apply([{"id": 1, "price": None}], spec) == []

    def test_date_end_covers_whole_day(self, engine, items):
        spec = FilterSpec(ranges=(RangeFilter("added", "2024-01-03", "2024-01-04"),))
        items[3]["added"] = datetime(2024, 1, 4, 23, 59)
        assert _ids(engine.apply(items, spec)) == [3, 4]

    def test_date_objects_and_aware_datetimes(self, engine):
        entities = [
            {"id": 1, "added": date(2024, 3, 1)},
            {"id": 2, "added": datetime(2024, 3, 2, 1, 0, tzinfo=timezone.utc)},
            {"id": 3, "added": datetime(2024, 3, 5)},
        ]
        spec = FilterSpec(ranges=(RangeFilter("added", date(2024, 3, 1), "2024-03-02T12:00:00"),))
        assert _ids(engine.apply(entities, spec)) == [1, 2]

    def test_unparseable_bound(self, engine):
        with pytest.raises(BrowseValidationError) as exc_info:
            engine.compile(FilterSpec(ranges=(RangeFilter("price", "cheap", None),)))
        assert exc_info.value.facet == "range"
        with pytest.raises(BrowseValidationError):
            engine.compile(FilterSpec(ranges=(RangeFilter("added", None, "someday"),)))

    def test_text_field_not_rangeable(self, engine):
        with pytest.raises(BrowseValidationError):
            engine.compile(FilterSpec(ranges=(RangeFilter("group", "a", "b"),)))

    def test_string_dates_on_entities(self, engine):
        entities = [
            {"id": 1, "added": "2024-03-01T10:00:00"},
            {"id": 2, "added": "2024-03-04"},
            {"id": 3, "added": "2024-02-28T23:00:00Z"},
        ]
        spec = FilterSpec(ranges=(RangeFilter("added", "2024-03-01", "2024-03-04"),))
        assert _ids(engine.apply(entities, spec)) == [1, 2]

    def test_unparseable_entity_date(self, engine):
        spec = FilterSpec(ranges=(RangeFilter("added", "2024-03-01", None),))
        with pytest.raises(BrowseValidationError) as exc_info:
            engine.apply([{"id": 1, "added": "last week"}], spec)
        assert exc_info.value.facet == "range"


class TestComposition:
    """Facets combine with AND regardless of order."""

    def test_facet_order_does_not_matter(self, engine, items):
        spec = FilterSpec(
            search="match",
            categorical=(CategoricalFilter("group", ("even", "odd")),),
            flags=FlagFilter("flags", ("camera",)),
            ranges=(RangeFilter("price", 20, 200),),
        )
        facets = engine.compile(spec)
        assert len(facets) == 4

        expected = [item for item in items if all(facet.test(item) for facet in facets)]
        for ordering in itertools.permutations(facets):
            matched = [item for item in items if all(facet.test(item) for facet in ordering)]
            assert matched == expected
        assert engine.apply(items, spec) == expected

    def test_empty_spec_matches_everything(self, engine, items):
        assert engine.compile(FilterSpec()) == []
        assert engine.apply(items, FilterSpec()) == items

    def test_facet_names(self, engine):
        spec = FilterSpec(
            search="x",
            categorical=(CategoricalFilter("group", ("odd",)),),
            flags=FlagFilter("flags", ("admin",)),
            ranges=(RangeFilter("price", 1, None),),
        )
        assert [facet.name for facet in engine.compile(spec)] == [
            "search", "categorical:group", "flags:flags", "range:price",
        ]

    def test_snapshot_left_untouched(self, engine, items):
        before = [dict(item) for item in items]
        engine.apply(items, FilterSpec(search="match"))
        assert items == before
