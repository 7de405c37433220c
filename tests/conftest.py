"""
Pytest fixtures for catalog browse tests.
"""

from datetime import datetime

import pytest

from catalog.config import Settings
from catalog.engines.browse import (
    BrowseEngine,
    EntityField,
    EntityFields,
    SortKey,
    SortKind,
    SortSpec,
    ValueKind,
    attr,
)
from catalog.kernel.flags import ACCOUNT_CAPABILITIES
from catalog.schemas.records import CameraRecord, LightRecord, UserRecord


# Flag values by capability name, for readable fixtures
LIGHT = 0b0001
CAMERA = 0b0010
LENS = 0b0100
ADMIN = 0b1000


@pytest.fixture
def settings() -> Settings:
    """Settings with the stock pagination defaults, independent of the environment."""
    return Settings(default_page=1, default_limit=10, environment="test")


@pytest.fixture
def item_fields() -> EntityFields:
    """Fields over plain dict items used by engine-level tests."""
    return EntityFields.of(
        EntityField("id", attr("id"), ValueKind.NUMBER),
        EntityField("name", attr("name"), sort_kind=SortKind.NATURAL),
        EntityField("code", attr("code")),
        EntityField("group", attr("group")),
        EntityField("flags", attr("flags"), ValueKind.FLAGS, registry=ACCOUNT_CAPABILITIES),
        EntityField("price", attr("price"), ValueKind.NUMBER),
        EntityField("added", attr("added"), ValueKind.DATE),
        search=("name", "code"),
    )


@pytest.fixture
def item_engine(item_fields, settings) -> BrowseEngine:
    return BrowseEngine(item_fields, SortSpec.of(SortKey("id")), settings)


@pytest.fixture
def items():
    """Twenty-five items; the twelve with even ids are tagged "match"."""
    return [
        {
            "id": i,
            "name": f"Item {i}",
            "code": f"match-{i}" if i % 2 == 0 else f"other-{i}",
            "group": "even" if i % 2 == 0 else "odd",
            "flags": i % 16,
            "price": float(i * 10),
            "added": datetime(2024, 1, i),
        }
        for i in range(1, 26)
    ]


@pytest.fixture
def cameras():
    """Camera snapshot mixing brands, cinema bodies and missing years."""
    return [
        CameraRecord(id=1, name="FX30", brand_id=1, brand_name="Sony", release_year=2022, cinema=True),
        CameraRecord(id=2, name="A7S III", brand_id=1, brand_name="Sony", release_year=2020),
        CameraRecord(id=3, name="FX3", brand_id=1, brand_name="Sony", release_year=2021, cinema=True),
        CameraRecord(id=4, name="EOS R5", brand_id=2, brand_name="Canon", release_year=2020),
        CameraRecord(id=5, name="C70", brand_id=2, brand_name="Canon", release_year=2020, cinema=True),
        CameraRecord(id=6, name="S1H", brand_id=3, brand_name="Panasonic", release_year=None),
        CameraRecord(id=7, name="A7 IV", brand_id=1, brand_name="Sony", release_year=2021),
    ]


@pytest.fixture
def users():
    return [
        UserRecord(id="u1", username="user10", nickname="Ten", email="ten@example.com",
                   permission=ADMIN | CAMERA, created_at=datetime(2023, 5, 1, 12, 0)),
        UserRecord(id="u2", username="user2", nickname="Two", email="two@example.com",
                   permission=LIGHT, created_at=datetime(2023, 6, 15, 9, 30)),
        UserRecord(id="u3", username="User1", nickname="One", email="one@example.com",
                   permission=0, disabled=1, created_at=datetime(2024, 1, 2, 8, 0)),
        UserRecord(id="u4", username="guest", nickname="Guest", email="guest@example.org",
                   permission=CAMERA | LENS, created_at=None),
    ]


@pytest.fixture
def lights():
    return [
        LightRecord(id=1, name="600d", brand_name="Aputure", modes_available=0b0000011, design_power_input=720),
        LightRecord(id=2, name="60x", brand_name="Aputure", modes_available=0b1000010, design_power_input=80),
        LightRecord(id=3, name="Forza 60", brand_name="Nanlite", modes_available=0, design_power_input=None),
        LightRecord(id=4, name="Mini 20", brand_name="Amaran", modes_available=0b0100001, design_power_input=20),
    ]
