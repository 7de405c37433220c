"""
Cameras Catalog Pack - camera products with their brand.

Characteristics:
- Brand and model names sorted naturally ("FX3" before "FX30")
- Cinema bodies distinguished by a derived "type" category
"""

from typing import Any, Sequence

from catalog.engines.browse.fields import EntityField, EntityFields, SortKind, ValueKind, attr
from catalog.engines.browse.sorting import SortKey, SortSpec
from catalog.kernel.permissions.permission_service import ADMIN_CAPABILITY
from catalog.plugins.catalogs.base import CatalogPack


def camera_type(entity: Any) -> str:
    return "cinema" if attr("cinema")(entity) else "camera"


CAMERA_FIELDS = EntityFields.of(
    EntityField("id", attr("id"), ValueKind.NUMBER),
    EntityField("brand_id", attr("brand_id"), ValueKind.NUMBER),
    EntityField("brand", attr("brand_name"), sort_kind=SortKind.NATURAL),
    EntityField("name", attr("name"), sort_kind=SortKind.NATURAL),
    EntityField("year", attr("release_year"), ValueKind.NUMBER),
    EntityField("release_year", attr("release_year"), ValueKind.NUMBER),
    EntityField("type", camera_type),
    EntityField("created_at", attr("created_at"), ValueKind.DATE),
    search=("name", "brand"),
)


class CamerasPack(CatalogPack):
    """Camera bodies, grouped by brand then model."""

    @property
    def name(self) -> str:
        return "cameras"

    @property
    def fields(self) -> EntityFields:
        return CAMERA_FIELDS

    @property
    def default_sort(self) -> SortSpec:
        return SortSpec.of(SortKey("brand"), SortKey("name"))

    @property
    def required_capabilities(self) -> Sequence[str]:
        return ("camera", ADMIN_CAPABILITY)
