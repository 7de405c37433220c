"""
Filter specs and the predicate engine.

A FilterSpec is a frozen description of one request's facets: search text,
categorical selections, a flag filter and range filters. The PredicateEngine
compiles it against an entity's registered fields into one predicate per
facet; an entity matches when every facet predicate holds (AND across
facets, OR within a facet's own options). A facet that is absent or empty
compiles to nothing, so it never excludes anything.
"""

from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum
from typing import Any, Callable, Iterable, List, NamedTuple, Optional, Sequence, Tuple

from pydantic import TypeAdapter, ValidationError

from catalog.engines.browse.errors import BrowseValidationError
from catalog.engines.browse.fields import EntityField, EntityFields, ValueKind, normalize_date
from catalog.kernel.flags.bitflags import match_all, match_any
from catalog.kernel.flags.registry import NONE_OPTION
from catalog.logging_config import get_logger

logger = get_logger(__name__)

_DATETIME = TypeAdapter(datetime)
_DATE = TypeAdapter(date)
_FLOAT = TypeAdapter(float)


class MatchMode(str, Enum):
    """How a flag filter combines its required flags."""
    ANY = "any"
    ALL = "all"


def _as_tuple(values: Optional[Iterable[Any]]) -> Tuple[Any, ...]:
    if values is None:
        return ()
    if isinstance(values, (str, bytes)):
        return (values,)
    return tuple(values)


@dataclass(frozen=True)
class CategoricalFilter:
    """Field value must be one of values. No values means no constraint."""

    field: str
    values: Tuple[Any, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", _as_tuple(self.values))


@dataclass(frozen=True)
class FlagFilter:
    """
    Required flag names over a flag field.

    The "none" option selects entities with no flags at all and overrides
    every other selected name.
    """

    field: str
    required: Tuple[str, ...] = ()
    match_mode: MatchMode = MatchMode.ANY

    def __post_init__(self) -> None:
        object.__setattr__(self, "required", tuple(str(n).lower() for n in _as_tuple(self.required)))
        mode = self.match_mode
        if mode is None or mode == "":
            mode = MatchMode.ANY
        try:
            mode = MatchMode(mode.lower() if isinstance(mode, str) else mode)
        except (ValueError, AttributeError):
            raise BrowseValidationError(
                "flags", f"match mode must be 'any' or 'all', got {self.match_mode!r}"
            ) from None
        object.__setattr__(self, "match_mode", mode)

    @property
    def wants_no_flags(self) -> bool:
        return NONE_OPTION in self.required


@dataclass(frozen=True)
class RangeFilter:
    """Inclusive [start, end]. A missing (or empty-string) bound is open."""

    field: str
    start: Any = None
    end: Any = None

    def __post_init__(self) -> None:
        if self.start == "":
            object.__setattr__(self, "start", None)
        if self.end == "":
            object.__setattr__(self, "end", None)

    @property
    def is_open(self) -> bool:
        return self.start is None and self.end is None


@dataclass(frozen=True)
class FilterSpec:
    """All facets of one browse request."""

    search: Optional[str] = None
    search_fields: Tuple[str, ...] = ()
    categorical: Tuple[CategoricalFilter, ...] = ()
    flags: Optional[FlagFilter] = None
    ranges: Tuple[RangeFilter, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "search_fields", _as_tuple(self.search_fields))
        object.__setattr__(self, "categorical", _as_tuple(self.categorical))
        object.__setattr__(self, "ranges", _as_tuple(self.ranges))

    @property
    def search_text(self) -> str:
        """Trimmed search text; empty when the search imposes no constraint."""
        return self.search.strip() if isinstance(self.search, str) else ""


class Facet(NamedTuple):
    """One compiled facet: a label and its predicate."""
    name: str
    test: Callable[[Any], bool]


def _parse_date(value: Any, field: str, what: str) -> Any:
    """value as a date or datetime; ISO strings are parsed."""
    if isinstance(value, (date, datetime)):
        return value
    try:
        return _DATE.validate_python(value)
    except ValidationError:
        try:
            return _DATETIME.validate_python(value)
        except ValidationError:
            raise BrowseValidationError("range", f"'{field}' {what} {value!r} is not a date") from None


def _date_bound(value: Any, field: str, end: bool) -> Optional[datetime]:
    if value is None:
        return None
    parsed = _parse_date(value, field, "bound")
    # A bare end date covers that whole day
    if end and not isinstance(parsed, datetime):
        return datetime.combine(parsed, time.max)
    return normalize_date(parsed)


def _entity_date(field: str) -> Callable[[Any], Optional[datetime]]:
    def normalize(value: Any) -> Optional[datetime]:
        return normalize_date(_parse_date(value, field, "value"))

    return normalize


def _number_bound(value: Any, field: str, facet: str = "range") -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise BrowseValidationError(facet, f"'{field}' value {value!r} is not a number")
    if isinstance(value, (int, float)):
        return value
    try:
        return _FLOAT.validate_python(value)
    except ValidationError:
        raise BrowseValidationError(facet, f"'{field}' value {value!r} is not a number") from None


class PredicateEngine:
    """
    Compiles FilterSpecs into predicates over one entity type.

    Usage:
        engine = PredicateEngine(CAMERA_FIELDS)
        matched = engine.apply(snapshot, FilterSpec(search="fx"))
    """

    def __init__(self, fields: EntityFields):
        self.fields = fields

    def _field(self, name: str, facet: str) -> EntityField:
        entity_field = self.fields.get(name)
        if entity_field is None:
            raise BrowseValidationError(facet, f"unknown field '{name}'")
        return entity_field

    def compile(self, spec: FilterSpec) -> List[Facet]:
        """Per-facet predicates for spec. Empty list means everything matches."""
        facets: List[Facet] = []

        search = self._compile_search(spec)
        if search:
            facets.append(search)

        for categorical in spec.categorical:
            facet = self._compile_categorical(categorical)
            if facet:
                facets.append(facet)

        if spec.flags is not None:
            facet = self._compile_flags(spec.flags)
            if facet:
                facets.append(facet)

        for range_filter in spec.ranges:
            facet = self._compile_range(range_filter)
            if facet:
                facets.append(facet)

        return facets

    def predicate(self, spec: FilterSpec) -> Callable[[Any], bool]:
        """Single predicate: AND of every compiled facet."""
        tests = [facet.test for facet in self.compile(spec)]

        def matches(entity: Any) -> bool:
            return all(test(entity) for test in tests)

        return matches

    def matches(self, entity: Any, spec: FilterSpec) -> bool:
        return self.predicate(spec)(entity)

    def apply(self, snapshot: Iterable[Any], spec: FilterSpec) -> List[Any]:
        """Entities of snapshot matching spec, in their original order."""
        matches = self.predicate(spec)
        return [entity for entity in snapshot if matches(entity)]

    def _compile_search(self, spec: FilterSpec) -> Optional[Facet]:
        text = spec.search_text
        if not text:
            return None

        names: Sequence[str] = spec.search_fields or self.fields.search_fields
        if not names:
            raise BrowseValidationError("search", "no searchable fields registered")
        selectors = [self._field(name, "search").get for name in names]
        needle = text.casefold()

        def test(entity: Any) -> bool:
            for select in selectors:
                value = select(entity)
                if value is not None and needle in str(value).casefold():
                    return True
            return False

        return Facet("search", test)

    def _compile_categorical(self, categorical: CategoricalFilter) -> Optional[Facet]:
        entity_field = self._field(categorical.field, "categorical")
        select = entity_field.get
        if not categorical.values:
            return None

        values = categorical.values
        # Query strings carry ids as text; "3" must select 3
        if entity_field.kind == ValueKind.NUMBER:
            values = tuple(_number_bound(v, categorical.field, "categorical") for v in values)
        try:
            allowed = frozenset(values)
        except TypeError:
            raise BrowseValidationError(
                "categorical", f"'{categorical.field}' values must be hashable"
            ) from None

        def test(entity: Any) -> bool:
            return select(entity) in allowed

        return Facet(f"categorical:{categorical.field}", test)

    def _compile_flags(self, flag_filter: FlagFilter) -> Optional[Facet]:
        entity_field = self._field(flag_filter.field, "flags")
        if entity_field.kind != ValueKind.FLAGS:
            raise BrowseValidationError("flags", f"'{flag_filter.field}' is not a flag field")
        if not flag_filter.required:
            return None

        select = entity_field.get
        name = f"flags:{flag_filter.field}"

        if flag_filter.wants_no_flags:
            ignored = [n for n in flag_filter.required if n != NONE_OPTION]
            if ignored:
                logger.warning(
                    "Flag filter 'none' overrides other selected flags",
                    extra={"field": flag_filter.field, "ignored": ignored},
                )

            def no_flags(entity: Any) -> bool:
                return (select(entity) or 0) == 0

            return Facet(name, no_flags)

        registry = entity_field.registry
        bits = set()
        unknown = []
        for flag_name in flag_filter.required:
            bit = registry.get_bit(flag_name)
            if bit is None:
                unknown.append(flag_name)
            else:
                bits.add(bit)
        if unknown:
            logger.warning(
                "Ignoring unknown flag names",
                extra={"field": flag_filter.field, "unknown": unknown, "domain": registry.domain},
            )
        if not bits:
            return None

        frozen_bits = frozenset(bits)
        if flag_filter.match_mode == MatchMode.ALL:
            def test(entity: Any) -> bool:
                return match_all(select(entity) or 0, frozen_bits)
        else:
            def test(entity: Any) -> bool:
                return match_any(select(entity) or 0, frozen_bits)

        return Facet(name, test)

    def _compile_range(self, range_filter: RangeFilter) -> Optional[Facet]:
        entity_field = self._field(range_filter.field, "range")
        if entity_field.kind == ValueKind.DATE:
            start = _date_bound(range_filter.start, range_filter.field, end=False)
            end = _date_bound(range_filter.end, range_filter.field, end=True)
            normalize: Callable[[Any], Any] = _entity_date(range_filter.field)
        elif entity_field.kind == ValueKind.NUMBER:
            start = _number_bound(range_filter.start, range_filter.field)
            end = _number_bound(range_filter.end, range_filter.field)
            normalize = lambda value: value
        else:
            raise BrowseValidationError(
                "range", f"'{range_filter.field}' is not a number or date field"
            )

        if start is None and end is None:
            return None

        select = entity_field.get

        def test(entity: Any) -> bool:
            value = select(entity)
            if value is None:
                return False
            value = normalize(value)
            if start is not None and value < start:
                return False
            if end is not None and value > end:
                return False
            return True

        return Facet(f"range:{range_filter.field}", test)
