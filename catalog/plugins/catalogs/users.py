"""
Users Catalog Pack - the admin user-management screen.

Characteristics:
- Admin only
- Account status (enabled/disabled) is a plain category, not a flag bit
- Permission column filtered by capability names
"""

from typing import Any, Sequence

from catalog.engines.browse.fields import EntityField, EntityFields, SortKind, ValueKind, attr
from catalog.engines.browse.sorting import SortKey, SortSpec
from catalog.kernel.flags.registry import ACCOUNT_CAPABILITIES
from catalog.kernel.permissions.permission_service import ADMIN_CAPABILITY
from catalog.plugins.catalogs.base import CatalogPack


def user_status(entity: Any) -> str:
    disabled = attr("disabled")(entity)
    return "disabled" if disabled else "enabled"


USER_FIELDS = EntityFields.of(
    EntityField("id", attr("id")),
    EntityField("username", attr("username"), sort_kind=SortKind.NATURAL),
    EntityField("nickname", attr("nickname"), sort_kind=SortKind.NATURAL),
    EntityField("email", attr("email")),
    EntityField("status", user_status),
    EntityField("permission", attr("permission"), ValueKind.FLAGS, registry=ACCOUNT_CAPABILITIES),
    EntityField("created_at", attr("created_at"), ValueKind.DATE),
    EntityField("updated_at", attr("updated_at"), ValueKind.DATE),
    search=("username", "nickname", "email"),
)


class UsersPack(CatalogPack):
    """User accounts, sorted by username in natural order."""

    @property
    def name(self) -> str:
        return "users"

    @property
    def fields(self) -> EntityFields:
        return USER_FIELDS

    @property
    def default_sort(self) -> SortSpec:
        return SortSpec.of(SortKey("username"))

    @property
    def required_capabilities(self) -> Sequence[str]:
        return (ADMIN_CAPABILITY,)
