"""
Sort specs - ordered multi-key comparators.

Keys are evaluated left to right and the first non-zero comparison wins.
When every key ties, the input order is kept (Python's sort is stable); no
hidden identity key is appended.

Natural-order keys cannot be expressed in a store's native ordering, so a
chain containing one must be applied to the fully materialized filtered set
before slicing. is_store_orderable() tells a caller when pushing the sort
(and therefore pagination) down to the store would be equivalent.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from functools import cmp_to_key
from typing import Any, Callable, Iterable, List, Mapping, Optional, Tuple, Union

from catalog.engines.browse.errors import BrowseValidationError
from catalog.engines.browse.fields import EntityFields, SortKind, normalize_date
from catalog.engines.browse.natural_order import natural_compare
from catalog.logging_config import get_logger

logger = get_logger(__name__)


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class SortKey:
    """One link of a sort chain. kind=None means the field's registered kind."""

    field: str
    direction: SortDirection = SortDirection.ASC
    kind: Optional[SortKind] = None

    def __post_init__(self) -> None:
        direction = self.direction
        if isinstance(direction, str):
            direction = direction.lower()
        try:
            object.__setattr__(self, "direction", SortDirection(direction))
        except ValueError:
            raise BrowseValidationError(
                "sort", f"direction for '{self.field}' must be 'asc' or 'desc', got {self.direction!r}"
            ) from None

        if self.kind is not None:
            try:
                object.__setattr__(self, "kind", SortKind(self.kind))
            except ValueError:
                raise BrowseValidationError(
                    "sort", f"unknown comparator kind {self.kind!r} for '{self.field}'"
                ) from None

    @property
    def descending(self) -> bool:
        return self.direction == SortDirection.DESC


def _compare_plain(a: Any, b: Any) -> int:
    return (a > b) - (a < b)


def compare_values(a: Any, b: Any, kind: SortKind) -> int:
    """Compare two field values with the given comparator. Missing or empty values sort last."""
    if kind == SortKind.NATURAL:
        # Surrounding whitespace is ignored; blank counts as empty
        return natural_compare(
            None if a is None else str(a).strip(),
            None if b is None else str(b).strip(),
        )
    if a == "":
        a = None
    if b == "":
        b = None
    if a is None and b is None:
        return 0
    if a is None:
        return 1
    if b is None:
        return -1
    if kind == SortKind.LEXICOGRAPHIC:
        return _compare_plain(str(a), str(b))
    if isinstance(a, date) and isinstance(b, date):
        return _compare_plain(normalize_date(a), normalize_date(b))
    return _compare_plain(a, b)


SortInput = Union[
    "SortSpec",
    Iterable[Union[SortKey, Mapping[str, Any]]],
    Mapping[str, Any],
    None,
]


@dataclass(frozen=True)
class SortSpec:
    """
    Ordered chain of SortKeys.

    Usage:
        spec = SortSpec.of(SortKey("brand"), SortKey("year", "desc"))
        ordered = spec.resolve(fields, default).sort(items, fields)
    """

    keys: Tuple[SortKey, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "keys", tuple(self.keys))

    @classmethod
    def of(cls, *keys: SortKey) -> "SortSpec":
        return cls(keys=keys)

    @classmethod
    def parse(cls, value: SortInput) -> "SortSpec":
        """
        Build from request data.

        Accepts a list of ``{"field", "direction"}`` items, or a mapping of
        field -> direction in priority order (``{"brand": "asc", "year": "desc"}``).
        """
        if value is None:
            return cls()
        if isinstance(value, SortSpec):
            return value
        if isinstance(value, Mapping):
            # Falsy directions mean "not sorting by this field"
            return cls(tuple(
                SortKey(str(name), direction) for name, direction in value.items() if direction
            ))

        keys = []
        for item in value:
            if isinstance(item, SortKey):
                keys.append(item)
            elif isinstance(item, Mapping):
                if "field" not in item:
                    raise BrowseValidationError("sort", f"sort entry {dict(item)!r} has no field")
                keys.append(SortKey(
                    str(item["field"]),
                    item.get("direction") or SortDirection.ASC,
                    item.get("kind"),
                ))
            else:
                raise BrowseValidationError("sort", f"cannot read sort entry {item!r}")
        return cls(tuple(keys))

    def __bool__(self) -> bool:
        return bool(self.keys)

    def resolve(self, fields: EntityFields, default: "SortSpec") -> "SortSpec":
        """
        Bind this chain to fields, filling in each key's comparator kind.

        An empty chain, or one naming a field that is not registered, yields
        the default chain instead. A kind the field cannot sort by raises.
        """
        if not self.keys:
            return default.resolve(fields, SortSpec()) if default else default

        unknown = [key.field for key in self.keys if key.field not in fields]
        if unknown:
            logger.warning("Unknown sort field, using default order", extra={"unknown": unknown})
            return default.resolve(fields, SortSpec()) if default else default

        resolved = []
        for key in self.keys:
            entity_field = fields[key.field]
            kind = key.kind or entity_field.sort_kind
            if not entity_field.accepts_sort_kind(kind):
                raise BrowseValidationError(
                    "sort",
                    f"'{key.field}' holds {entity_field.kind.value} values and cannot sort {kind.value}",
                )
            resolved.append(SortKey(key.field, key.direction, kind))
        return SortSpec(tuple(resolved))

    def comparator(self, fields: EntityFields) -> Callable[[Any, Any], int]:
        """cmp-style function applying the chain. Call on a resolved spec."""
        chain = [
            (fields[key.field].get, key.kind or fields[key.field].sort_kind, key.descending)
            for key in self.keys
        ]

        def compare(a: Any, b: Any) -> int:
            for select, kind, descending in chain:
                result = compare_values(select(a), select(b), kind)
                if result:
                    return -result if descending else result
            return 0

        return compare

    def sort(self, items: Iterable[Any], fields: EntityFields) -> List[Any]:
        """New list of items in chain order; ties keep their input order."""
        return sorted(items, key=cmp_to_key(self.comparator(fields)))

    def is_store_orderable(self, fields: EntityFields) -> bool:
        """True when no key needs natural order, so a store could sort natively."""
        return all(
            (key.kind or fields[key.field].sort_kind) != SortKind.NATURAL
            for key in self.keys
        )
