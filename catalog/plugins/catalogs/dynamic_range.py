"""
Dynamic Range Catalog Pack - uploaded dynamic-range measurements.

Characteristics:
- Searchable across brand, camera, codec, log profile and uploader
- Filterable by camera and uploader ids taken from query strings
"""

from typing import Any, Iterable, List, Sequence, Union

from catalog.engines.browse.fields import EntityField, EntityFields, SortKind, ValueKind, attr
from catalog.engines.browse.sorting import SortKey, SortSpec
from catalog.kernel.permissions.permission_service import ADMIN_CAPABILITY
from catalog.plugins.catalogs.base import CatalogPack


def parse_id_param(raw: Union[str, Iterable[Any], None]) -> List[int]:
    """
    Positive integer ids from a comma-separated string (or a list of parts).

    Blank, non-numeric and non-positive parts are dropped; order and
    duplicates are kept.
    """
    if raw is None:
        return []
    parts = raw.split(",") if isinstance(raw, str) else raw

    ids = []
    for part in parts:
        if isinstance(part, bool):
            continue
        try:
            value = int(str(part).strip())
        except ValueError:
            continue
        if value > 0:
            ids.append(value)
    return ids


DYNAMIC_RANGE_FIELDS = EntityFields.of(
    EntityField("id", attr("id"), ValueKind.NUMBER),
    EntityField("camera_id", attr("camera_id"), ValueKind.NUMBER),
    EntityField("user_id", attr("user_id")),
    EntityField("brand", attr("brand_name"), sort_kind=SortKind.NATURAL),
    EntityField("camera", attr("camera_name"), sort_kind=SortKind.NATURAL),
    EntityField("uploader", attr("user_nickname"), sort_kind=SortKind.NATURAL),
    EntityField("codec", attr("codec")),
    EntityField("log", attr("log")),
    EntityField("ei", attr("ei"), ValueKind.NUMBER),
    EntityField("iso", attr("iso"), ValueKind.NUMBER),
    EntityField("bit_depth", attr("bit_depth"), ValueKind.NUMBER),
    EntityField("framerate", attr("framerate"), ValueKind.NUMBER),
    EntityField("slope_based", attr("slope_based"), ValueKind.NUMBER),
    search=("brand", "camera", "codec", "log", "uploader"),
)


class DynamicRangePack(CatalogPack):
    """Measurements ordered by camera, then by ISO within a camera."""

    @property
    def name(self) -> str:
        return "dynamic_range"

    @property
    def fields(self) -> EntityFields:
        return DYNAMIC_RANGE_FIELDS

    @property
    def default_sort(self) -> SortSpec:
        return SortSpec.of(SortKey("brand"), SortKey("camera"), SortKey("iso"))

    @property
    def required_capabilities(self) -> Sequence[str]:
        return ("camera", ADMIN_CAPABILITY)
