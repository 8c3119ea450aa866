"""
Jellyfin API client module for CollectionArtworkSync.

Classes:
    JellyfinClient: httpx-based client implementing the collection catalog
                    and the refresh sink used by the reconciler
    JellyfinItem: Typed catalog item

Exceptions:
    JellyfinError: Base class
    JellyfinConnectionError: Server unreachable or timed out
    JellyfinRequestError: HTTP error status
"""

from jellyfin.client import (
    JellyfinClient,
    JellyfinConnectionError,
    JellyfinError,
    JellyfinItem,
    JellyfinRequestError,
)

__all__ = [
    'JellyfinClient',
    'JellyfinItem',
    'JellyfinError',
    'JellyfinConnectionError',
    'JellyfinRequestError',
]
