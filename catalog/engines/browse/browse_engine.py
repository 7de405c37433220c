"""
Browse Engine - filter, then sort, then paginate.

Order matters and is fixed:
1. Filter the snapshot with the compiled FilterSpec
2. Sort the whole filtered set (natural order cannot be pushed to a store)
3. Slice the requested page out of the sorted set

Pagination leniency: a page or limit that is missing, non-numeric, or not
positive is replaced by the configured default (page 1, limit 10) instead of
failing the request. Callers relying on this get "first page, default size",
never an error. Malformed filter or sort specs still raise
BrowseValidationError.
"""

from functools import cmp_to_key
from typing import TYPE_CHECKING, Any, Iterable, List, Mapping, Optional, Tuple, Union

from catalog.config import Settings, get_settings
from catalog.engines.browse.errors import BrowseValidationError
from catalog.engines.browse.fields import EntityFields
from catalog.engines.browse.filters import FilterSpec, PredicateEngine
from catalog.engines.browse.sorting import SortSpec, compare_values
from catalog.logging_config import get_logger
from catalog.schemas.common import Page

if TYPE_CHECKING:
    from catalog.schemas.query import BrowseQuery

logger = get_logger(__name__)


def coerce_positive_int(value: Any, default: int) -> int:
    """value as a positive int, or default when it is missing or unusable."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, str):
        value = value.strip()
        try:
            value = int(value)
        except ValueError:
            try:
                value = float(value)
            except ValueError:
                return default
    if isinstance(value, float):
        if not value.is_integer():
            return default
        value = int(value)
    if isinstance(value, int) and value > 0:
        return value
    return default


class BrowseEngine:
    """
    Stateless browse pipeline for one entity type.

    Usage:
        engine = BrowseEngine(fields, default_sort=SortSpec.of(SortKey("name")))
        page = engine.browse(snapshot, FilterSpec(search="a7"), page=2, limit=10)
    """

    def __init__(
        self,
        fields: EntityFields,
        default_sort: Optional[SortSpec] = None,
        settings: Optional[Settings] = None,
    ):
        self.fields = fields
        default_sort = default_sort or SortSpec()
        unknown = [key.field for key in default_sort.keys if key.field not in fields]
        if unknown:
            raise ValueError(f"Default sort names unregistered fields: {unknown}")
        self.default_sort = default_sort.resolve(fields, SortSpec())
        self.predicates = PredicateEngine(fields)

        settings = settings or get_settings()
        self.default_page = settings.default_page
        self.default_limit = settings.default_limit

    def resolve_pagination(self, page: Any, limit: Any) -> Tuple[int, int]:
        return (
            coerce_positive_int(page, self.default_page),
            coerce_positive_int(limit, self.default_limit),
        )

    def browse(
        self,
        snapshot: Iterable[Any],
        filter_spec: Optional[FilterSpec] = None,
        sort_spec: Optional[SortSpec] = None,
        page: Any = None,
        limit: Any = None,
    ) -> Page:
        """
        Run one browse over snapshot.

        Args:
            snapshot: Entities fetched by the caller; read, never modified
            filter_spec: Facets to apply; None matches everything
            sort_spec: Requested chain; None or unknown fields use the default
            page: 1-based page number
            limit: Page size

        Returns:
            Page whose total counts the filtered set, not the snapshot
        """
        page, limit = self.resolve_pagination(page, limit)
        filter_spec = filter_spec or FilterSpec()
        sort_spec = (sort_spec or SortSpec()).resolve(self.fields, self.default_sort)

        # Compile first so malformed specs fail before any work is done
        matches = self.predicates.predicate(filter_spec)
        filtered = [entity for entity in snapshot if matches(entity)]
        ordered = sort_spec.sort(filtered, self.fields) if sort_spec else filtered

        total = len(filtered)
        offset = (page - 1) * limit
        items = ordered[offset:offset + limit]

        logger.debug(
            "Browse complete",
            extra={"total": total, "page": page, "limit": limit, "returned": len(items)},
        )
        return Page.create(items=items, total=total, page=page, limit=limit)

    def browse_query(
        self,
        snapshot: Iterable[Any],
        query: Union["BrowseQuery", Mapping[str, Any], None] = None,
    ) -> Page:
        """Browse with a request-shaped query (a BrowseQuery or its dict form)."""
        from catalog.schemas.query import BrowseQuery

        if query is None:
            query = BrowseQuery()
        elif not isinstance(query, BrowseQuery):
            query = BrowseQuery.parse(query)

        return self.browse(
            snapshot,
            query.to_filter_spec(),
            query.to_sort_spec(),
            page=query.page,
            limit=query.limit,
        )

    def facet_values(self, snapshot: Iterable[Any], field: str) -> List[Any]:
        """
        Distinct non-null values of field, ordered by the field's sort kind.

        Feeds filter option lists such as "brands that have cameras".
        """
        entity_field = self.fields.get(field)
        if entity_field is None:
            raise BrowseValidationError("field", f"unknown field '{field}'")
        seen = set()
        values = []
        for entity in snapshot:
            value = entity_field.get(entity)
            if value is None or value in seen:
                continue
            seen.add(value)
            values.append(value)
        kind = entity_field.sort_kind
        return sorted(values, key=cmp_to_key(lambda a, b: compare_values(a, b, kind)))
