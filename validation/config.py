"""
Configuration validation for CollectionArtworkSync.

Provides a pydantic-settings model for validating configuration with
fail-fast behavior and sensible defaults.

Precedence (highest to lowest):
1. Explicit keyword arguments (e.g. a dict handed to validate_config)
2. CAS_-prefixed environment variables
3. YAML config file (validate_config's config_file, else CAS_CONFIG_FILE, default ./config.yml)
4. Defaults defined below
"""

import hashlib
import logging
import os
from enum import Enum
from typing import Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

log = logging.getLogger('CollectionArtworkSync.config')

DEFAULT_CONFIG_FILE = 'config.yml'


class ChangeDetectionPolicy(str, Enum):
    """How to decide whether a same-size existing artwork file is stale."""
    CONTENT_HASH = 'ContentHash'
    TIMESTAMP = 'Timestamp'
    ALWAYS_WRITE = 'AlwaysWrite'


# Accepted spellings, lowercased. Hash/TimeStamp are the names used by
# older plugin configuration pages.
_POLICY_NAMES = {
    'contenthash': ChangeDetectionPolicy.CONTENT_HASH,
    'hash': ChangeDetectionPolicy.CONTENT_HASH,
    'timestamp': ChangeDetectionPolicy.TIMESTAMP,
    'alwayswrite': ChangeDetectionPolicy.ALWAYS_WRITE,
}


class ArtworkSyncConfig(BaseSettings):
    """
    CollectionArtworkSync configuration with validation.

    Required:
        external_artwork_directory_path: Root of the user-curated artwork tree

    Optional tunables:
        change_detection_policy: ContentHash, Timestamp or AlwaysWrite (default: ContentHash)
        collections_path: Jellyfin collections root (default: data/collections)
        hash_algorithm: hashlib algorithm for ContentHash (default: md5)
        jellyfin_url: Jellyfin server URL (default: http://localhost:8096)
        jellyfin_api_key: Jellyfin API key (default: None)
        jellyfin_timeout: HTTP timeout in seconds (default: 10.0, range: 1.0-120.0)
        sync_interval_hours: Scheduled run interval (default: 24.0, range: 0.1-720.0)
        enabled: Master on/off switch (default: True)
        debug_logging: Verbose per-file trace logging (default: False)
        log_level: Root log level (default: info)
        data_dir: Directory holding the run-lock file (default: .)
    """

    model_config = SettingsConfigDict(
        env_prefix='CAS_',
        yaml_file_encoding='utf-8',
        extra='ignore',
    )

    # Required
    external_artwork_directory_path: str

    change_detection_policy: ChangeDetectionPolicy = ChangeDetectionPolicy.CONTENT_HASH
    collections_path: str = 'data/collections'
    hash_algorithm: str = 'md5'

    # Jellyfin connection
    jellyfin_url: str = 'http://localhost:8096'
    jellyfin_api_key: Optional[str] = None
    jellyfin_timeout: float = Field(default=10.0, ge=1.0, le=120.0)

    # Scheduling
    sync_interval_hours: float = Field(default=24.0, ge=0.1, le=720.0)

    enabled: bool = True
    debug_logging: bool = Field(
        default=False,
        description="Enable verbose per-file trace logging (for troubleshooting only)"
    )
    log_level: str = 'info'
    data_dir: str = '.'

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Return sources in priority order: init > env > YAML."""
        yaml_path = (settings_cls.model_config.get('yaml_file')
                     or os.environ.get('CAS_CONFIG_FILE', DEFAULT_CONFIG_FILE))
        yaml_source = YamlConfigSettingsSource(settings_cls, yaml_file=yaml_path)
        return (init_settings, env_settings, yaml_source)

    @field_validator('external_artwork_directory_path', mode='after')
    @classmethod
    def validate_external_path(cls, v: str) -> str:
        """Reject empty paths; existence is checked when a run starts."""
        if not v or not v.strip():
            raise ValueError('external_artwork_directory_path is required')
        return v

    @field_validator('change_detection_policy', mode='before')
    @classmethod
    def validate_policy(cls, v):
        """Accept policy names case-insensitively, including legacy names."""
        if isinstance(v, ChangeDetectionPolicy):
            return v
        if isinstance(v, str) and v.strip().lower() in _POLICY_NAMES:
            return _POLICY_NAMES[v.strip().lower()]
        valid = [p.value for p in ChangeDetectionPolicy]
        raise ValueError(f"change_detection_policy must be one of {valid}, got: {v}")

    @field_validator('hash_algorithm', mode='after')
    @classmethod
    def validate_hash_algorithm(cls, v: str) -> str:
        """Ensure hashlib can build the requested digest."""
        name = v.lower()
        # shake_* digests need an explicit length
        if name not in hashlib.algorithms_available or name.startswith('shake_'):
            raise ValueError(f"Unknown hash algorithm: {v}")
        return name

    @field_validator('jellyfin_url', mode='after')
    @classmethod
    def validate_jellyfin_url(cls, v: str) -> str:
        """Validate jellyfin_url is a valid HTTP/HTTPS URL."""
        if not v.startswith(('http://', 'https://')):
            raise ValueError('jellyfin_url must start with http:// or https://')
        return v.rstrip('/')

    @field_validator('log_level', mode='before')
    @classmethod
    def validate_log_level(cls, v):
        """Validate log_level is one of: trace, debug, info, warning, error."""
        valid = ('trace', 'debug', 'info', 'warning', 'error')
        if isinstance(v, str) and v.lower() in valid:
            return v.lower()
        raise ValueError(f"log_level must be one of {valid}, got: {v}")

    @field_validator('enabled', 'debug_logging', mode='before')
    @classmethod
    def validate_booleans(cls, v):
        """Ensure boolean fields are actual booleans, not truthy strings."""
        if isinstance(v, bool):
            return v
        if isinstance(v, str):
            lower = v.lower()
            if lower in ('true', '1', 'yes'):
                return True
            if lower in ('false', '0', 'no'):
                return False
            raise ValueError(f"Invalid boolean value: {v}")
        raise ValueError(f"Expected boolean, got {type(v).__name__}")

    def log_config(self) -> None:
        """Log configuration with masked API key."""
        if not self.jellyfin_api_key:
            masked = 'none'
        elif len(self.jellyfin_api_key) > 8:
            masked = self.jellyfin_api_key[:4] + '****' + self.jellyfin_api_key[-4:]
        else:
            masked = '****'
        log.info(
            f"CollectionArtworkSync config: "
            f"external={self.external_artwork_directory_path}, "
            f"collections={self.collections_path}, "
            f"policy={self.change_detection_policy.value}, "
            f"hash={self.hash_algorithm}, "
            f"jellyfin={self.jellyfin_url}, api_key={masked}, "
            f"interval={self.sync_interval_hours}h, enabled={self.enabled}"
        )
        if self.debug_logging:
            log.warning(
                "DEBUG LOGGING ENABLED: every artwork file is traced. "
                "Disable once the troubleshooting log has been captured."
            )


def config_class_for_file(config_file: str) -> type[ArtworkSyncConfig]:
    """ArtworkSyncConfig variant that reads YAML from ``config_file``."""
    return type(
        ArtworkSyncConfig.__name__,
        (ArtworkSyncConfig,),
        {'model_config': SettingsConfigDict(yaml_file=config_file)},
    )


def validate_config(
    config_dict: dict,
    config_file: Optional[str] = None,
) -> tuple[Optional[ArtworkSyncConfig], Optional[str]]:
    """
    Validate configuration dictionary and return ArtworkSyncConfig or error message.

    Args:
        config_dict: Dictionary containing configuration values (may be empty
                     when everything comes from the environment or YAML)
        config_file: YAML file to read instead of CAS_CONFIG_FILE / config.yml

    Returns:
        Tuple of (ArtworkSyncConfig, None) on success,
        or (None, error_message) on validation failure
    """
    try:
        settings_cls = config_class_for_file(config_file) if config_file else ArtworkSyncConfig
        config = settings_cls(**config_dict)
        return (config, None)
    except ValidationError as e:
        # Extract user-friendly error messages
        errors = []
        for error in e.errors():
            field = '.'.join(str(loc) for loc in error['loc'])
            msg = error['msg']
            errors.append(f"{field}: {msg}")
        error_message = '; '.join(errors)
        return (None, error_message)


# Re-export ValidationError for external use
__all__ = ['ArtworkSyncConfig', 'ChangeDetectionPolicy', 'validate_config', 'ValidationError']
