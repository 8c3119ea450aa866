"""
Host collaborators used by the reconciler.

The reconciler never talks to the media server directly. It needs a catalog
of collection entities and a sink for refresh requests; jellyfin.client
provides both over HTTP, tests provide mocks.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class RefreshMode(Enum):
    FULL_IMAGE_REFRESH = "FullImageRefresh"


class RefreshPriority(Enum):
    HIGH = "High"
    NORMAL = "Normal"
    LOW = "Low"


@dataclass(frozen=True)
class CatalogCollection:
    """A collection (box set) entity known to the host catalog."""
    id: str
    name: str


class CollectionCatalog(Protocol):
    def list_collections(self) -> list[CatalogCollection]:
        """Return every collection entity in the library."""
        ...


class RefreshSink(Protocol):
    def request_refresh(
        self,
        collection_id: str,
        mode: RefreshMode = RefreshMode.FULL_IMAGE_REFRESH,
        priority: RefreshPriority = RefreshPriority.HIGH,
    ) -> None:
        """Queue a metadata/image refresh for one entity."""
        ...
