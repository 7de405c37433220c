"""
Permission Core - capability-flag access control.
"""

from catalog.kernel.permissions.permission_service import (
    ADMIN_CAPABILITY,
    PermissionDenied,
    PermissionService,
    require_capability,
)

__all__ = [
    "ADMIN_CAPABILITY",
    "PermissionDenied",
    "PermissionService",
    "require_capability",
]
