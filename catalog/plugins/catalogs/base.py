"""
Base Catalog Pack - Abstract interface for every browse/manage screen.
"""

from abc import ABC, abstractmethod
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from catalog.config import Settings
from catalog.engines.browse.browse_engine import BrowseEngine
from catalog.engines.browse.fields import EntityFields
from catalog.engines.browse.sorting import SortSpec
from catalog.kernel.permissions.permission_service import PermissionService
from catalog.logging_config import get_logger
from catalog.schemas.common import Page
from catalog.schemas.query import BrowseQuery

logger = get_logger(__name__)


class CatalogPack(ABC):
    """
    Abstract base class for a browsable catalog.

    Each catalog pack defines:
    - Which fields its records expose, and which of them are searchable
    - The sort chain used when a request gives none (or an unusable one)
    - Which account capabilities may open the screen
    """

    def __init__(self, settings: Optional[Settings] = None):
        self._engine = BrowseEngine(self.fields, self.default_sort, settings)
        self._permissions = PermissionService()

    @property
    @abstractmethod
    def name(self) -> str:
        """Catalog name."""
        pass

    @property
    @abstractmethod
    def fields(self) -> EntityFields:
        """Registered field selectors."""
        pass

    @property
    @abstractmethod
    def default_sort(self) -> SortSpec:
        """Sort chain used when the request has none."""
        pass

    @property
    def required_capabilities(self) -> Sequence[str]:
        """Capabilities of which the actor needs at least one. Empty means open."""
        return ()

    @property
    def engine(self) -> BrowseEngine:
        return self._engine

    def can_access(self, actor_flags: int) -> bool:
        return self._permissions.has_any(actor_flags, self.required_capabilities)

    def browse(
        self,
        snapshot: Iterable[Any],
        query: Union[BrowseQuery, Mapping[str, Any], None] = None,
        actor_flags: Optional[int] = None,
    ) -> Page:
        """
        Gate on the actor's capabilities, then browse.

        Args:
            snapshot: Records fetched by the host
            query: Request-shaped query
            actor_flags: Capability flags of the requesting user; None skips the gate

        Raises:
            PermissionDenied: Actor lacks every required capability
            BrowseValidationError: Query is malformed
        """
        if actor_flags is not None:
            self._permissions.check(actor_flags, self.required_capabilities)

        page = self._engine.browse_query(snapshot, query)
        logger.debug(
            "Catalog browsed",
            extra={"catalog": self.name, "total": page.total, "page": page.page},
        )
        return page

    def facet_values(self, snapshot: Iterable[Any], field: str) -> list:
        return self._engine.facet_values(snapshot, field)
