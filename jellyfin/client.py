"""
jellyfin.client — Jellyfin HTTP client for collection lookup and refresh.

Design notes:
- Synchronous: the reconciler runs sequentially, so httpx.Client is enough.
- Implements both host collaborators the reconciler needs
  (CollectionCatalog.list_collections and RefreshSink.request_refresh).
- Jellyfin's /Items/{id}/Refresh endpoint always queues at high priority;
  the priority argument is accepted for interface parity and logged.

Exports:
    JellyfinClient          -- HTTP client
    JellyfinItem            -- typed Pydantic model for a catalog item
    JellyfinError           -- base error
    JellyfinConnectionError -- server unreachable or timed out
    JellyfinRequestError    -- server answered with an HTTP error status
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field

from reconciliation.catalog import CatalogCollection, RefreshMode, RefreshPriority

log = logging.getLogger("CollectionArtworkSync.jellyfin")


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class JellyfinError(Exception):
    """Base class for Jellyfin client errors."""


class JellyfinConnectionError(JellyfinError):
    """
    Jellyfin server is unreachable or the request timed out.
    """


class JellyfinRequestError(JellyfinError):
    """
    Jellyfin answered with an HTTP error status.

    Attributes:
        status_code: HTTP status code of the response
    """

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


# ---------------------------------------------------------------------------
# Pydantic models
# ---------------------------------------------------------------------------


class JellyfinItem(BaseModel):
    """Subset of a Jellyfin BaseItemDto used for collections."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(alias="Id")
    name: str = Field(alias="Name")


# Map our refresh modes to Jellyfin's MetadataRefreshMode query values
_IMAGE_REFRESH_MODES = {
    RefreshMode.FULL_IMAGE_REFRESH: "FullRefresh",
}


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class JellyfinClient:
    """
    HTTP client for a Jellyfin server.

    Usage::

        with JellyfinClient("http://localhost:8096", api_key="my-key") as client:
            for collection in client.list_collections():
                client.request_refresh(collection.id)
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
    ) -> None:
        """
        Create the Jellyfin client.

        Args:
            base_url: Base URL of the Jellyfin server, e.g. ``http://localhost:8096``.
                      Trailing slashes are stripped automatically.
            api_key:  Optional API key. Sent as ``X-Emby-Token`` header when provided.
            timeout:  Total request timeout in seconds (default 10). Connect
                      timeout is fixed at 5 seconds.
        """
        self._base_url = base_url.rstrip("/")

        headers: dict[str, str] = {"Accept": "application/json"}
        if api_key:
            headers["X-Emby-Token"] = api_key

        self._client = httpx.Client(
            base_url=self._base_url,
            headers=headers,
            timeout=httpx.Timeout(timeout, connect=5.0),
        )
        log.debug("JellyfinClient initialised: url=%s api_key=%s", self._base_url, bool(api_key))

    def close(self) -> None:
        """Close the underlying httpx client and release connections."""
        self._client.close()

    def __enter__(self) -> "JellyfinClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _request(self, method: str, path: str, params: Optional[dict] = None) -> httpx.Response:
        """
        Send one request to Jellyfin.

        Raises:
            JellyfinConnectionError: Server unreachable or request timed out.
            JellyfinRequestError:    Response had a 4xx/5xx status.
        """
        try:
            resp = self._client.request(method, path, params=params)
        except httpx.ConnectError as exc:
            raise JellyfinConnectionError(f"Cannot connect to Jellyfin: {exc}") from exc
        except httpx.TimeoutException as exc:
            raise JellyfinConnectionError(f"Jellyfin request timed out: {exc}") from exc

        if resp.is_error:
            raise JellyfinRequestError(
                f"Jellyfin {method} {path} returned HTTP {resp.status_code}",
                status_code=resp.status_code,
            )
        return resp

    def list_collections(self) -> list[CatalogCollection]:
        """
        List every box-set (collection) entity in the library.

        Returns:
            CatalogCollection per box set, in server order.
        """
        resp = self._request(
            "GET",
            "/Items",
            params={"IncludeItemTypes": "BoxSet", "Recursive": "true"},
        )
        body = resp.json()
        items = [JellyfinItem.model_validate(raw) for raw in body.get("Items", [])]
        log.debug("Jellyfin returned %d collections", len(items))
        return [CatalogCollection(id=item.id, name=item.name) for item in items]

    def request_refresh(
        self,
        collection_id: str,
        mode: RefreshMode = RefreshMode.FULL_IMAGE_REFRESH,
        priority: RefreshPriority = RefreshPriority.HIGH,
    ) -> None:
        """
        Queue a refresh for one item.

        Args:
            collection_id: Jellyfin item id
            mode:          Refresh mode; FULL_IMAGE_REFRESH re-reads all images
            priority:      Jellyfin always queues at high priority
        """
        if priority != RefreshPriority.HIGH:
            log.debug("Jellyfin queues refreshes at high priority; requested %s", priority.value)
        self._request(
            "POST",
            f"/Items/{collection_id}/Refresh",
            params={
                "MetadataRefreshMode": "Default",
                "ImageRefreshMode": _IMAGE_REFRESH_MODES[mode],
                "ReplaceAllMetadata": "false",
                "ReplaceAllImages": "false",
            },
        )
        log.debug("Refresh queued for %s", collection_id)
