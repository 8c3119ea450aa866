"""
Validation module for CollectionArtworkSync.

Provides configuration validation.
"""

from validation.config import ArtworkSyncConfig, ChangeDetectionPolicy, validate_config

__all__ = [
    'ArtworkSyncConfig',
    'ChangeDetectionPolicy',
    'validate_config',
]
