"""
Catalog Packs - one per browse/manage screen.

Each catalog defines:
- Field selectors over its records, and which are searchable
- Its default sort chain
- The account capabilities that may open it
"""

from catalog.plugins.catalogs.base import CatalogPack
from catalog.plugins.catalogs.users import UsersPack
from catalog.plugins.catalogs.cameras import CamerasPack
from catalog.plugins.catalogs.dynamic_range import DynamicRangePack, parse_id_param
from catalog.plugins.catalogs.spectrometers import SpectrometersPack
from catalog.plugins.catalogs.lights import LightsPack

__all__ = [
    "CatalogPack",
    "UsersPack",
    "CamerasPack",
    "DynamicRangePack",
    "SpectrometersPack",
    "LightsPack",
    "parse_id_param",
]
