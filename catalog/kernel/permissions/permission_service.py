"""
Permission service for capability-flag access control.
"""

import inspect
from functools import wraps
from typing import Callable, Iterable, List, Sequence, Tuple

from catalog.kernel.flags.bitflags import (
    clear_flag,
    has_flag,
    names_for,
    set_flag,
    toggle_flag,
)
from catalog.kernel.flags.registry import ACCOUNT_CAPABILITIES, FlagRegistry
from catalog.logging_config import get_logger

logger = get_logger(__name__)


ADMIN_CAPABILITY = "admin"


class PermissionDenied(PermissionError):
    """Raised when an actor lacks every capability a gate accepts."""

    def __init__(self, required: Sequence[str], message: str = ""):
        self.required: Tuple[str, ...] = tuple(required)
        super().__init__(message or f"Access denied. Requires one of: {', '.join(self.required)}")


class PermissionService:
    """
    Service for checking and changing capability flags.

    Capabilities are bits in a FlagRegistry (account capabilities by default).
    Gates accept a list of capability names and pass when the actor holds
    any one of them, e.g. camera pages accept ``("camera", "admin")``.
    """

    def __init__(self, registry: FlagRegistry = ACCOUNT_CAPABILITIES):
        self.registry = registry

    def has_capability(self, flags: int, name: str) -> bool:
        return has_flag(flags, self.registry.bit_for(name))

    def has_any(self, flags: int, names: Iterable[str]) -> bool:
        """True if flags hold at least one of names. An empty gate is open."""
        names = list(names)
        if not names:
            return True
        return any(self.has_capability(flags, name) for name in names)

    def check(self, flags: int, names: Iterable[str]) -> None:
        """Raise PermissionDenied unless flags pass the gate."""
        names = list(names)
        if not self.has_any(flags, names):
            logger.info("Capability check failed", extra={"required": names, "flags": flags})
            raise PermissionDenied(names)

    def grant(self, flags: int, name: str) -> int:
        return set_flag(flags, self.registry.bit_for(name))

    def revoke(self, flags: int, name: str) -> int:
        return clear_flag(flags, self.registry.bit_for(name))

    def toggle(self, flags: int, name: str) -> int:
        return toggle_flag(flags, self.registry.bit_for(name))

    def describe(self, flags: int) -> List[str]:
        """Capability names held, in registry order."""
        return list(names_for(flags, self.registry))

    def change_permissions(
        self,
        actor_flags: int,
        current_flags: int,
        new_flags: int,
        is_self: bool = False,
    ) -> int:
        """
        Replace a user's capability flags.

        Rules:
        1. Only an admin may change capabilities
        2. The new value may only use registered bits
        3. An admin cannot drop their own admin capability

        Args:
            actor_flags: Capabilities of the user making the change
            current_flags: The target's capabilities before the change
            new_flags: The requested capabilities
            is_self: Whether the actor is changing their own account

        Returns:
            The accepted new flag value
        """
        self.check(actor_flags, [ADMIN_CAPABILITY])

        if not self.registry.is_registered_value(new_flags):
            raise ValueError(
                f"Flags {new_flags:#x} use bits outside {self.registry.domain}"
            )

        if (
            is_self
            and self.has_capability(current_flags, ADMIN_CAPABILITY)
            and not self.has_capability(new_flags, ADMIN_CAPABILITY)
        ):
            raise PermissionDenied(
                [ADMIN_CAPABILITY],
                "Administrators cannot remove their own administrator capability",
            )

        logger.info(
            "Capabilities changed",
            extra={"old": self.describe(current_flags), "new": self.describe(new_flags)},
        )
        return new_flags


def require_capability(*names: str, registry: FlagRegistry = ACCOUNT_CAPABILITIES):
    """
    Decorator gating a function on the capabilities in its ``actor_flags`` argument.

    Usage:
        @require_capability("camera", "admin")
        def browse_cameras(snapshot, query, actor_flags: int):
            ...
    """
    service = PermissionService(registry)

    def decorator(func: Callable) -> Callable:
        signature = inspect.signature(func)
        if "actor_flags" not in signature.parameters:
            raise TypeError(f"{func.__qualname__} must accept an 'actor_flags' argument")

        @wraps(func)
        def wrapper(*args, **kwargs):
            bound = signature.bind(*args, **kwargs)
            bound.apply_defaults()
            service.check(bound.arguments["actor_flags"], names)
            return func(*args, **kwargs)

        wrapper._required_capabilities = names
        return wrapper

    return decorator
