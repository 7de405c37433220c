"""
Browse Engine - faceted filtering, natural multi-key sorting, pagination.

Pipeline:
1. PredicateEngine - search, categorical, flag and range facets (AND-ed)
2. SortSpec - chained comparators (lexicographic, numeric, natural)
3. BrowseEngine - filter -> sort -> slice -> Page
"""

from catalog.engines.browse.errors import BrowseValidationError
from catalog.engines.browse.fields import EntityField, EntityFields, SortKind, ValueKind, attr
from catalog.engines.browse.natural_order import natural_compare, natural_key, natural_tokens
from catalog.engines.browse.filters import (
    CategoricalFilter,
    Facet,
    FilterSpec,
    FlagFilter,
    MatchMode,
    PredicateEngine,
    RangeFilter,
)
from catalog.engines.browse.sorting import SortDirection, SortKey, SortSpec
from catalog.engines.browse.browse_engine import BrowseEngine, coerce_positive_int

__all__ = [
    "BrowseValidationError",
    "EntityField",
    "EntityFields",
    "SortKind",
    "ValueKind",
    "attr",
    "natural_compare",
    "natural_key",
    "natural_tokens",
    "CategoricalFilter",
    "Facet",
    "FilterSpec",
    "FlagFilter",
    "MatchMode",
    "PredicateEngine",
    "RangeFilter",
    "SortDirection",
    "SortKey",
    "SortSpec",
    "BrowseEngine",
    "coerce_positive_int",
]
