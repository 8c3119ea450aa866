"""
Shared pytest fixtures for CollectionArtworkSync tests.

Provides reusable fixtures for:
- Real on-disk artwork trees (Jellyfin collections root + external root)
- Configuration objects
- Mock host collaborators (collection catalog, refresh sink)

Filesystem tests use pytest's tmp_path so every test gets a fresh tree.
"""

import os
from unittest.mock import MagicMock

import pytest

from reconciliation.catalog import CatalogCollection
from validation.config import ArtworkSyncConfig, ChangeDetectionPolicy


# =============================================================================
# Environment isolation
# =============================================================================

@pytest.fixture(autouse=True)
def isolated_config_env(monkeypatch, tmp_path):
    """Keep CAS_ environment variables and stray config.yml files out of tests."""
    for key in list(os.environ):
        if key.startswith("CAS_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("CAS_CONFIG_FILE", str(tmp_path / "no-such-config.yml"))


# =============================================================================
# Filesystem helpers
# =============================================================================

def write_file(path, data: bytes, mtime: float = None) -> str:
    """Write ``data`` to ``path`` (creating parents) and optionally set its mtime."""
    path = str(path)
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "wb") as f:
        f.write(data)
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path


def read_file(path) -> bytes:
    with open(str(path), "rb") as f:
        return f.read()


@pytest.fixture
def artwork_tree(tmp_path):
    """
    Empty collections root and external artwork root.

    Returns:
        Tuple of (collections_root, external_root) as pathlib.Path

    Usage:
        def test_sync(artwork_tree):
            collections_root, external_root = artwork_tree
            write_file(external_root / "Alien" / "poster.jpg", b"...")
    """
    collections_root = tmp_path / "data" / "collections"
    external_root = tmp_path / "external"
    collections_root.mkdir(parents=True)
    external_root.mkdir()
    return collections_root, external_root


# =============================================================================
# Configuration Fixtures
# =============================================================================

@pytest.fixture
def make_config(artwork_tree, tmp_path):
    """
    Factory for ArtworkSyncConfig pointing at the artwork_tree fixture.

    Usage:
        def test_policy(make_config):
            config = make_config(change_detection_policy="Timestamp")
    """
    collections_root, external_root = artwork_tree

    def _make(**overrides):
        values = {
            "external_artwork_directory_path": str(external_root),
            "collections_path": str(collections_root),
            "data_dir": str(tmp_path / "state"),
            "change_detection_policy": ChangeDetectionPolicy.CONTENT_HASH,
        }
        values.update(overrides)
        return ArtworkSyncConfig(**values)

    return _make


@pytest.fixture
def valid_config_dict(tmp_path):
    """Dictionary with valid configuration values for ArtworkSyncConfig."""
    return {
        "external_artwork_directory_path": str(tmp_path / "external"),
        "change_detection_policy": "ContentHash",
        "collections_path": "data/collections",
        "jellyfin_url": "http://localhost:8096",
        "jellyfin_api_key": "0123456789abcdef",
    }


# =============================================================================
# Host collaborator mocks
# =============================================================================

@pytest.fixture
def mock_catalog():
    """
    Mock collection catalog.

    list_collections() returns an empty list by default; tests assign
    CatalogCollection entries as needed.
    """
    catalog = MagicMock()
    catalog.list_collections.return_value = []
    return catalog


@pytest.fixture
def mock_refresh_sink():
    """Mock refresh sink recording request_refresh calls."""
    return MagicMock()


@pytest.fixture
def alien_catalog(mock_catalog):
    """Catalog with the Alien and Predator collections."""
    mock_catalog.list_collections.return_value = [
        CatalogCollection(id="alien-id", name="Alien"),
        CatalogCollection(id="predator-id", name="Predator"),
    ]
    return mock_catalog
