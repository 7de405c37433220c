"""Spectrometers Catalog Pack - measurement devices for the light database."""

from typing import Sequence

from catalog.engines.browse.fields import EntityField, EntityFields, ValueKind, attr
from catalog.engines.browse.sorting import SortKey, SortSpec
from catalog.plugins.catalogs.base import CatalogPack

SPECTROMETER_FIELDS = EntityFields.of(
    EntityField("id", attr("id"), ValueKind.NUMBER),
    EntityField("name", attr("name")),
    search=("name",),
)


class SpectrometersPack(CatalogPack):

    @property
    def name(self) -> str:
        return "spectrometers"

    @property
    def fields(self) -> EntityFields:
        return SPECTROMETER_FIELDS

    @property
    def default_sort(self) -> SortSpec:
        return SortSpec.of(SortKey("name"))

    @property
    def required_capabilities(self) -> Sequence[str]:
        return ("light",)
