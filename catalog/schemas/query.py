"""
Browse query schemas - the request shape clients send.

Parsing here is deliberately permissive: page/limit are kept raw so the
engine can apply its defaults, unknown keys are ignored, and camelCase keys
are accepted. Semantic checks (unknown fields, match modes, sort kinds)
happen when the query is turned into engine specs.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from catalog.engines.browse.errors import BrowseValidationError
from catalog.engines.browse.filters import CategoricalFilter, FilterSpec, FlagFilter, RangeFilter
from catalog.engines.browse.sorting import SortKey, SortSpec


class _QueryModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


def _null_as_empty(value: Any) -> Any:
    return [] if value is None else value


class CategoricalQuery(_QueryModel):
    """Selected options for one categorical field."""

    field: str
    values: List[Any] = Field(default_factory=list)

    @field_validator("values", mode="before")
    @classmethod
    def null_values_as_empty(cls, value: Any) -> Any:
        return _null_as_empty(value)


class FlagQuery(_QueryModel):
    """Required flag names over a flag field."""

    field: str
    required: List[str] = Field(default_factory=list)
    match_mode: Optional[str] = Field(None, alias="matchMode")

    @field_validator("required", mode="before")
    @classmethod
    def null_required_as_empty(cls, value: Any) -> Any:
        return _null_as_empty(value)


class RangeQuery(_QueryModel):
    """Inclusive bounds on a number or date field."""

    field: str
    start: Any = None
    end: Any = None


class SortQuery(_QueryModel):
    field: str
    direction: Optional[str] = None


class PaginationQuery(_QueryModel):
    page: Any = None
    limit: Any = None


class BrowseQuery(_QueryModel):
    """Browse request: search, facets, sort and pagination."""

    search: Optional[str] = None
    categorical: List[CategoricalQuery] = Field(default_factory=list)
    flags: Optional[FlagQuery] = None
    ranges: List[RangeQuery] = Field(default_factory=list, alias="range")
    sort: Union[List[SortQuery], Dict[str, Optional[str]], None] = None
    pagination: Optional[PaginationQuery] = None

    @field_validator("categorical", "ranges", mode="before")
    @classmethod
    def null_lists_as_empty(cls, value: Any) -> Any:
        return _null_as_empty(value)

    @classmethod
    def parse(cls, data: Any) -> "BrowseQuery":
        """
        Validate request data, reporting malformed input as a BrowseValidationError.

        The error's facet is the top-level key that failed ("search",
        "categorical", "range", ...).
        """
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            first = exc.errors()[0]
            facet = str(first["loc"][0]) if first["loc"] else "query"
            raise BrowseValidationError(facet, first["msg"]) from exc

    @property
    def page(self) -> Any:
        return self.pagination.page if self.pagination else None

    @property
    def limit(self) -> Any:
        return self.pagination.limit if self.pagination else None

    def to_filter_spec(self) -> FilterSpec:
        return FilterSpec(
            search=self.search,
            categorical=tuple(
                CategoricalFilter(c.field, tuple(c.values)) for c in self.categorical
            ),
            flags=(
                FlagFilter(self.flags.field, tuple(self.flags.required), self.flags.match_mode)
                if self.flags
                else None
            ),
            ranges=tuple(RangeFilter(r.field, r.start, r.end) for r in self.ranges),
        )

    def to_sort_spec(self) -> SortSpec:
        if self.sort is None:
            return SortSpec()
        if isinstance(self.sort, dict):
            return SortSpec.parse(self.sort)
        return SortSpec(tuple(SortKey(s.field, s.direction or "asc") for s in self.sort))
