"""
Centralized Configuration for cachekit

This module provides the construction-time settings used by the cache
factory and the module-level cache manager. Settings come from defaults,
an optional YAML or JSON config file, and environment variables (highest
priority, prefixed with CACHEKIT_), with type checking and validation.
"""

import os
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseSettings, Field, ValidationError, validator

from cachekit.common.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

VALID_POLICIES = ('none', 'ttl', 'fifo', 'lru', 'lfu')
VALID_LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')
VALID_LOG_FORMATS = ('text', 'json')


class CacheSettings(BaseSettings):
    """Cache configuration"""
    policy: str = Field(default="lru", description="Eviction policy of the default cache")
    capacity: int = Field(default=10000, description="Maximum entry count, 0 means unbounded")
    default_ttl: float = Field(default=0, description="Default time-to-live in seconds, 0 means none")
    prune_interval: float = Field(default=0, description="Seconds between scheduled prunes, 0 disables")
    file_cache_max_bytes: int = Field(default=64 * 1024 * 1024)
    file_cache_max_file_size: Optional[int] = Field(
        default=None,
        description="Largest cacheable file in bytes, None means half of file_cache_max_bytes"
    )
    log_level: str = Field(default="INFO", description="Level of the cachekit logger")
    log_format: str = Field(default="text", description="Format of installed log handlers: text or json")
    log_file: Optional[str] = Field(default=None, description="Append library logs to this file")
    log_console: bool = Field(default=False, description="Write library logs to stderr")

    class Config:
        """Pydantic settings config."""
        env_prefix = "CACHEKIT_"
        env_file = ".env"

        @classmethod
        def customise_sources(cls, init_settings, env_settings, file_secret_settings):
            # Environment variables override values loaded from a config file
            return env_settings, init_settings, file_secret_settings

    @validator('policy')
    def validate_policy(cls, v):
        """Validate eviction policy name"""
        if v.lower() not in VALID_POLICIES:
            raise ValueError(f"Invalid cache policy: {v}. Must be one of {list(VALID_POLICIES)}")
        return v.lower()

    @validator('capacity', 'file_cache_max_bytes')
    def validate_non_negative_int(cls, v):
        """Validate sizes are not negative"""
        if v < 0:
            raise ValueError(f"Size must not be negative, got {v}")
        return v

    @validator('file_cache_max_file_size')
    def validate_max_file_size(cls, v):
        """Validate per-file ceiling"""
        if v is not None and v < 0:
            raise ValueError(f"Max file size must not be negative, got {v}")
        return v

    @validator('default_ttl', 'prune_interval')
    def validate_duration(cls, v):
        """Validate durations are not negative"""
        if v < 0:
            raise ValueError(f"Duration must not be negative, got {v}")
        return v

    @validator('log_level')
    def validate_level(cls, v):
        """Validate log level"""
        if v.upper() not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level: {v}. Must be one of {list(VALID_LOG_LEVELS)}")
        return v.upper()

    @validator('log_format')
    def validate_log_format(cls, v):
        """Validate log format"""
        if v.lower() not in VALID_LOG_FORMATS:
            raise ValueError(f"Invalid log format: {v}. Must be one of {list(VALID_LOG_FORMATS)}")
        return v.lower()


class ConfigLoader:
    """
    Configuration loader for cachekit.

    Loads configuration from:
    1. Default values
    2. Config file
    3. Environment variables (highest priority)
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize the config loader.

        Args:
            config_path: Path to config file (YAML or JSON)
        """
        self.config_path = config_path or os.environ.get("CACHEKIT_CONFIG_PATH")
        self._settings = None

    def load(self) -> CacheSettings:
        """
        Load configuration from all sources.

        Returns:
            Loaded settings
        """
        if self._settings is not None:
            return self._settings

        file_config = {}
        if self.config_path:
            file_config = self._load_from_file(self.config_path)

        try:
            self._settings = CacheSettings(**file_config)
        except ValidationError as e:
            fields = ", ".join(".".join(str(part) for part in error["loc"]) for error in e.errors())
            source = self.config_path or "environment"
            raise ConfigurationError(f"Invalid settings from {source}: {e}", config_key=fields) from e
        return self._settings

    def _load_from_file(self, path: str) -> Dict[str, Any]:
        """
        Load configuration from a file.

        Args:
            path: Path to config file

        Returns:
            Loaded configuration dictionary
        """
        path = Path(path)
        if not path.exists():
            logger.warning(f"Config file not found: {path}")
            return {}

        try:
            if path.suffix.lower() in ['.yaml', '.yml']:
                with open(path, 'r') as f:
                    data = yaml.safe_load(f)
            elif path.suffix.lower() == '.json':
                with open(path, 'r') as f:
                    data = json.load(f)
            else:
                logger.warning(f"Unsupported config file format: {path.suffix}")
                return {}
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.error(f"Error loading config file: {e}")
            return {}

        # A file may nest the settings under a top-level "cache" key
        if isinstance(data, dict) and isinstance(data.get("cache"), dict):
            data = data["cache"]
        return data if isinstance(data, dict) else {}


_config_loader: Optional[ConfigLoader] = None
_settings: Optional[CacheSettings] = None


def get_settings() -> CacheSettings:
    """
    Get the loaded settings, loading them on first use.

    Returns:
        Loaded settings
    """
    global _config_loader, _settings
    if _settings is None:
        _config_loader = ConfigLoader()
        _settings = _config_loader.load()
    return _settings


def reload_settings(config_path: Optional[str] = None) -> CacheSettings:
    """
    Reload the settings.

    Args:
        config_path: Path to config file

    Returns:
        Reloaded settings
    """
    global _config_loader, _settings
    _config_loader = ConfigLoader(config_path)
    _settings = _config_loader.load()
    return _settings
