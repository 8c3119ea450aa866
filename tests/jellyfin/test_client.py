"""
Tests for jellyfin.client — Jellyfin HTTP client.

Uses respx to mock httpx requests so no live Jellyfin instance is required.
"""

import httpx
import pytest
import respx

from jellyfin.client import (
    JellyfinClient,
    JellyfinConnectionError,
    JellyfinItem,
    JellyfinRequestError,
)
from reconciliation.catalog import CatalogCollection, RefreshMode, RefreshPriority

# ---------------------------------------------------------------------------
# Shared test data
# ---------------------------------------------------------------------------

JELLYFIN_URL = "http://jellyfin:8096"
ITEMS_URL = "http://jellyfin:8096/Items"

BOXSETS_RESPONSE = {
    "Items": [
        {"Id": "a1b2", "Name": "Alien", "Type": "BoxSet", "Path": "/config/data/collections/Alien [boxset]"},
        {"Id": "c3d4", "Name": "Predator", "Type": "BoxSet"},
    ],
    "TotalRecordCount": 2,
    "StartIndex": 0,
}


# ---------------------------------------------------------------------------
# list_collections
# ---------------------------------------------------------------------------


def test_list_collections_success():
    """list_collections returns CatalogCollection entries in server order."""
    with respx.mock:
        route = respx.get(ITEMS_URL).mock(return_value=httpx.Response(200, json=BOXSETS_RESPONSE))
        with JellyfinClient(JELLYFIN_URL) as client:
            collections = client.list_collections()

    assert collections == [
        CatalogCollection(id="a1b2", name="Alien"),
        CatalogCollection(id="c3d4", name="Predator"),
    ]
    params = route.calls[0].request.url.params
    assert params["IncludeItemTypes"] == "BoxSet"
    assert params["Recursive"] == "true"
    assert "Fields" not in params


def test_list_collections_empty():
    with respx.mock:
        respx.get(ITEMS_URL).mock(return_value=httpx.Response(200, json={"Items": []}))
        with JellyfinClient(JELLYFIN_URL) as client:
            assert client.list_collections() == []


def test_api_key_header_sent():
    with respx.mock:
        route = respx.get(ITEMS_URL).mock(return_value=httpx.Response(200, json={"Items": []}))
        with JellyfinClient(JELLYFIN_URL + "/", api_key="secret-key") as client:
            client.list_collections()

    assert route.calls[0].request.headers["X-Emby-Token"] == "secret-key"


def test_no_api_key_header_without_key():
    with respx.mock:
        route = respx.get(ITEMS_URL).mock(return_value=httpx.Response(200, json={"Items": []}))
        with JellyfinClient(JELLYFIN_URL) as client:
            client.list_collections()

    assert "X-Emby-Token" not in route.calls[0].request.headers


def test_jellyfin_item_model_aliases():
    item = JellyfinItem.model_validate({"Id": "x", "Name": "Alien", "Extra": 1})
    assert item.id == "x"
    assert item.name == "Alien"
    assert item.model_dump() == {"id": "x", "name": "Alien"}


# ---------------------------------------------------------------------------
# request_refresh
# ---------------------------------------------------------------------------


def test_request_refresh_posts_full_image_refresh():
    with respx.mock:
        route = respx.post(f"{JELLYFIN_URL}/Items/a1b2/Refresh").mock(
            return_value=httpx.Response(204)
        )
        with JellyfinClient(JELLYFIN_URL) as client:
            client.request_refresh("a1b2", RefreshMode.FULL_IMAGE_REFRESH, RefreshPriority.HIGH)

    params = route.calls[0].request.url.params
    assert params["ImageRefreshMode"] == "FullRefresh"
    assert params["MetadataRefreshMode"] == "Default"
    assert params["ReplaceAllImages"] == "false"


def test_request_refresh_non_high_priority_still_sent():
    with respx.mock:
        route = respx.post(f"{JELLYFIN_URL}/Items/a1b2/Refresh").mock(
            return_value=httpx.Response(204)
        )
        with JellyfinClient(JELLYFIN_URL) as client:
            client.request_refresh("a1b2", priority=RefreshPriority.LOW)

    assert route.called


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


def test_http_error_status():
    with respx.mock:
        respx.post(f"{JELLYFIN_URL}/Items/missing/Refresh").mock(return_value=httpx.Response(404))
        with JellyfinClient(JELLYFIN_URL) as client:
            with pytest.raises(JellyfinRequestError) as exc_info:
                client.request_refresh("missing")

    assert exc_info.value.status_code == 404


def test_unauthorized():
    with respx.mock:
        respx.get(ITEMS_URL).mock(return_value=httpx.Response(401))
        with JellyfinClient(JELLYFIN_URL, api_key="bad") as client:
            with pytest.raises(JellyfinRequestError) as exc_info:
                client.list_collections()

    assert exc_info.value.status_code == 401


def test_connection_error():
    with respx.mock:
        respx.get(ITEMS_URL).mock(side_effect=httpx.ConnectError("Connection refused"))
        with JellyfinClient(JELLYFIN_URL) as client:
            with pytest.raises(JellyfinConnectionError):
                client.list_collections()


def test_timeout_error():
    with respx.mock:
        respx.get(ITEMS_URL).mock(side_effect=httpx.ReadTimeout("timed out"))
        with JellyfinClient(JELLYFIN_URL) as client:
            with pytest.raises(JellyfinConnectionError, match="timed out"):
                client.list_collections()
