"""
Field selectors - how the engine reads entities without knowing their schema.

Each catalog registers one EntityFields: a selector function per field name,
the value kind behind it, the default sort kind, and (for flag fields) the
registry that names its bits.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from enum import Enum
from typing import Any, Callable, Dict, Iterable, Iterator, Optional, Tuple

from catalog.kernel.flags.registry import FlagRegistry


class ValueKind(str, Enum):
    """What a selector returns."""
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"
    FLAGS = "flags"


class SortKind(str, Enum):
    """Comparator used for a sort key."""
    LEXICOGRAPHIC = "lexicographic"
    NUMERIC = "numeric"
    NATURAL = "natural"


# Which comparators make sense for which values
COMPATIBLE_SORT_KINDS = {
    ValueKind.TEXT: {SortKind.LEXICOGRAPHIC, SortKind.NATURAL},
    ValueKind.NUMBER: {SortKind.NUMERIC},
    ValueKind.DATE: {SortKind.NUMERIC},
    ValueKind.BOOLEAN: {SortKind.NUMERIC},
    ValueKind.FLAGS: {SortKind.NUMERIC},
}

_DEFAULT_SORT_KIND = {
    ValueKind.TEXT: SortKind.LEXICOGRAPHIC,
    ValueKind.NUMBER: SortKind.NUMERIC,
    ValueKind.DATE: SortKind.NUMERIC,
    ValueKind.BOOLEAN: SortKind.NUMERIC,
    ValueKind.FLAGS: SortKind.NUMERIC,
}


@dataclass(frozen=True)
class EntityField:
    """A named accessor over an entity."""

    name: str
    get: Callable[[Any], Any]
    kind: ValueKind = ValueKind.TEXT
    sort_kind: Optional[SortKind] = None
    registry: Optional[FlagRegistry] = None

    def __post_init__(self) -> None:
        if self.kind == ValueKind.FLAGS and self.registry is None:
            raise ValueError(f"Flag field '{self.name}' needs a registry")
        if self.sort_kind is None:
            object.__setattr__(self, "sort_kind", _DEFAULT_SORT_KIND[self.kind])
        elif self.sort_kind not in COMPATIBLE_SORT_KINDS[self.kind]:
            raise ValueError(
                f"Field '{self.name}' of kind {self.kind.value} cannot sort {self.sort_kind.value}"
            )

    def accepts_sort_kind(self, sort_kind: SortKind) -> bool:
        return sort_kind in COMPATIBLE_SORT_KINDS[self.kind]


@dataclass(frozen=True)
class EntityFields:
    """Registered fields of one entity type, plus its searchable fields."""

    fields: Tuple[EntityField, ...]
    search_fields: Tuple[str, ...] = ()
    _by_name: Dict[str, EntityField] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        by_name: Dict[str, EntityField] = {}
        for f in self.fields:
            if f.name in by_name:
                raise ValueError(f"Duplicate field '{f.name}'")
            by_name[f.name] = f
        for name in self.search_fields:
            if name not in by_name:
                raise ValueError(f"Search field '{name}' is not registered")
        object.__setattr__(self, "_by_name", by_name)

    @classmethod
    def of(cls, *fields: EntityField, search: Iterable[str] = ()) -> "EntityFields":
        return cls(fields=tuple(fields), search_fields=tuple(search))

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __iter__(self) -> Iterator[EntityField]:
        return iter(self.fields)

    def get(self, name: str) -> Optional[EntityField]:
        return self._by_name.get(name)

    def __getitem__(self, name: str) -> EntityField:
        return self._by_name[name]


def normalize_date(value: Any) -> Optional[datetime]:
    """Dates become midnight; aware datetimes become naive UTC so all compare."""
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    raise TypeError(f"not a date: {value!r}")


def attr(name: str) -> Callable[[Any], Any]:
    """Selector reading an attribute, or a key when the entity is a mapping."""

    def select(entity: Any) -> Any:
        if isinstance(entity, dict):
            return entity.get(name)
        return getattr(entity, name, None)

    select.__name__ = f"attr_{name}"
    return select
