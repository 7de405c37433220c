"""Unit tests for capability checks."""

import pytest

from catalog.kernel.flags import EQUIPMENT_MODES
from catalog.kernel.permissions import (
    ADMIN_CAPABILITY,
    PermissionDenied,
    PermissionService,
    require_capability,
)

LIGHT, CAMERA, LENS, ADMIN = 0b0001, 0b0010, 0b0100, 0b1000


@pytest.fixture
def service() -> PermissionService:
    return PermissionService()


class TestCapabilityChecks:
    """Tests for gate checks."""

    def test_has_capability(self, service):
        assert service.has_capability(CAMERA | LENS, "lens") is True
        assert service.has_capability(CAMERA, "admin") is False

    def test_any_of_gate(self, service):
        assert service.has_any(CAMERA, ["camera", ADMIN_CAPABILITY]) is True
        assert service.has_any(ADMIN, ["camera", ADMIN_CAPABILITY]) is True
        assert service.has_any(LIGHT, ["camera", ADMIN_CAPABILITY]) is False

    def test_empty_gate_is_open(self, service):
        assert service.has_any(0, []) is True

    def test_check_raises_with_required_names(self, service):
        with pytest.raises(PermissionDenied) as exc_info:
            service.check(LIGHT | LENS, ["camera", "admin"])
        assert exc_info.value.required == ("camera", "admin")
        assert isinstance(exc_info.value, PermissionError)

    def test_unknown_capability(self, service):
        with pytest.raises(KeyError):
            service.has_capability(ADMIN, "superuser")

    def test_other_registry(self):
        modes = PermissionService(EQUIPMENT_MODES)
        assert modes.has_capability(0b1000000, "silent") is True


class TestGrantRevoke:
    """Tests for changing single capabilities."""

    def test_grant_revoke_toggle(self, service):
        flags = service.grant(0, "camera")
        assert flags == CAMERA
        assert service.revoke(flags, "camera") == 0
        assert service.toggle(service.toggle(flags, "admin"), "admin") == flags

    def test_describe(self, service):
        assert service.describe(ADMIN | LIGHT) == ["light", "admin"]


class TestChangePermissions:
    """Tests for the admin-only permission editor."""

    def test_admin_changes_other_user(self, service):
        assert service.change_permissions(ADMIN, LIGHT, CAMERA | LENS) == CAMERA | LENS

    def test_non_admin_rejected(self, service):
        with pytest.raises(PermissionDenied):
            service.change_permissions(CAMERA, LIGHT, CAMERA)

    def test_unregistered_bits_rejected(self, service):
        with pytest.raises(ValueError):
            service.change_permissions(ADMIN, 0, 1 << 10)

    def test_admin_cannot_drop_own_admin(self, service):
        with pytest.raises(PermissionDenied) as exc_info:
            service.change_permissions(ADMIN, ADMIN | CAMERA, CAMERA, is_self=True)
        assert "own administrator" in str(exc_info.value)

    def test_admin_may_edit_own_other_bits(self, service):
        assert service.change_permissions(ADMIN, ADMIN, ADMIN | LIGHT, is_self=True) == ADMIN | LIGHT

    def test_admin_may_demote_other_admin(self, service):
        assert service.change_permissions(ADMIN, ADMIN, LIGHT) == LIGHT


class TestRequireCapability:
    """Tests for the gating decorator."""

    def test_allows_and_denies(self):
        @require_capability("camera", "admin")
        def open_cameras(query, actor_flags: int):
            return query

        assert open_cameras("q", actor_flags=CAMERA) == "q"
        assert open_cameras("q", ADMIN) == "q"
        with pytest.raises(PermissionDenied):
            open_cameras("q", actor_flags=LIGHT)

    def test_records_requirements(self):
        @require_capability("light")
        def open_lights(actor_flags):
            return True

        assert open_lights._required_capabilities == ("light",)

    def test_function_without_actor_flags(self):
        with pytest.raises(TypeError):
            @require_capability("admin")
            def broken(query):
                return query
