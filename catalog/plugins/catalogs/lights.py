"""
Lights Catalog Pack - light products with brand and series.

Characteristics:
- Supported modes (tungsten, daylight, curves, silent...) stored as flag bits
- Power draw filterable as a numeric range
"""

from typing import Sequence

from catalog.engines.browse.fields import EntityField, EntityFields, SortKind, ValueKind, attr
from catalog.engines.browse.sorting import SortKey, SortSpec
from catalog.kernel.flags.registry import EQUIPMENT_MODES
from catalog.kernel.permissions.permission_service import ADMIN_CAPABILITY
from catalog.plugins.catalogs.base import CatalogPack

LIGHT_FIELDS = EntityFields.of(
    EntityField("id", attr("id"), ValueKind.NUMBER),
    EntityField("brand", attr("brand_name"), sort_kind=SortKind.NATURAL),
    EntityField("series", attr("series_name"), sort_kind=SortKind.NATURAL),
    EntityField("name", attr("name"), sort_kind=SortKind.NATURAL),
    EntityField("modes", attr("modes_available"), ValueKind.FLAGS, registry=EQUIPMENT_MODES),
    EntityField("power_w", attr("design_power_input"), ValueKind.NUMBER),
    EntityField("min_cct", attr("min_cct"), ValueKind.NUMBER),
    EntityField("max_cct", attr("max_cct"), ValueKind.NUMBER),
    EntityField("weight", attr("weight"), ValueKind.NUMBER),
    search=("brand", "name"),
)


class LightsPack(CatalogPack):
    """Lights, grouped by brand then model."""

    @property
    def name(self) -> str:
        return "lights"

    @property
    def fields(self) -> EntityFields:
        return LIGHT_FIELDS

    @property
    def default_sort(self) -> SortSpec:
        return SortSpec.of(SortKey("brand"), SortKey("name"))

    @property
    def required_capabilities(self) -> Sequence[str]:
        return ("light", ADMIN_CAPABILITY)
