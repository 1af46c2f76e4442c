"""
Configuration settings for lanemerge

Configuration is an explicit object passed to the components that need it
(Overpass client, way processor, pipeline). Defaults can be overridden from
environment variables or a .env file.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

from dotenv import load_dotenv
from loguru import logger

from .errors import ConfigError


@dataclass
class APIConfig:
    """Overpass API endpoint and request settings"""
    # Options: overpass-api.de (main), lz4.overpass-api.de, z.overpass-api.de
    overpass_url: str = "https://overpass-api.de/api/interpreter"
    overpass_timeout: int = 90

    # Request settings
    max_retries: int = 3
    retry_delay: float = 5.0
    min_request_interval: float = 2.0

    # User agent for API requests
    user_agent: str = "lanemerge/1.0"


@dataclass
class CacheConfig:
    """Disk cache for raw Overpass responses"""
    cache_dir: Optional[str] = None
    # Skip reading the cache for the next request (responses are still saved)
    ignore_cache: bool = False


@dataclass
class ProcessingConfig:
    """Way processing settings"""
    # Traffic drives on the left (UK, Australia, Japan, ...); affects lane layout
    left_hand_traffic: bool = False


@dataclass
class LaneMergeConfig:
    """Top-level configuration"""
    api: APIConfig = field(default_factory=APIConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    processing: ProcessingConfig = field(default_factory=ProcessingConfig)


_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off", "")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean, got '{raw}'")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got '{raw}'") from e


def load_config(env_file: Optional[str] = None) -> LaneMergeConfig:
    """
    Build configuration from defaults and environment variables

    Environment variables (a .env file is loaded first, without overriding
    variables that are already set):
        LANEMERGE_OVERPASS_URL
        LANEMERGE_TIMEOUT
        LANEMERGE_CACHE_DIR
        LANEMERGE_IGNORE_CACHE
        LANEMERGE_LEFT_HAND_TRAFFIC

    Args:
        env_file: Explicit .env path (default: search the working directory)

    Returns:
        Validated LaneMergeConfig
    """
    if env_file:
        if Path(env_file).exists():
            load_dotenv(env_file, override=False)
            logger.debug(f"Loaded .env file from {env_file}")
        else:
            logger.warning(f".env file not found: {env_file}")
    else:
        load_dotenv(override=False)

    config = LaneMergeConfig()
    config.api.overpass_url = os.getenv("LANEMERGE_OVERPASS_URL", config.api.overpass_url)
    config.api.overpass_timeout = _env_int("LANEMERGE_TIMEOUT", config.api.overpass_timeout)
    config.cache.cache_dir = os.getenv("LANEMERGE_CACHE_DIR", config.cache.cache_dir)
    config.cache.ignore_cache = _env_bool("LANEMERGE_IGNORE_CACHE", config.cache.ignore_cache)
    config.processing.left_hand_traffic = _env_bool(
        "LANEMERGE_LEFT_HAND_TRAFFIC", config.processing.left_hand_traffic
    )

    validate_config(config)
    return config


def validate_config(config: LaneMergeConfig) -> None:
    """
    Validate that all required configuration values are set.
    Raises ConfigError listing every problem found.
    """
    errors = []

    url = urlparse(config.api.overpass_url or "")
    if url.scheme not in ("http", "https") or not url.netloc:
        errors.append(f"api.overpass_url must be an http(s) URL, got '{config.api.overpass_url}'")

    if config.api.overpass_timeout <= 0:
        errors.append(f"api.overpass_timeout must be positive, got {config.api.overpass_timeout}")

    if config.api.max_retries < 1:
        errors.append(f"api.max_retries must be at least 1, got {config.api.max_retries}")

    if config.api.retry_delay < 0 or config.api.min_request_interval < 0:
        errors.append("api.retry_delay and api.min_request_interval must not be negative")

    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ConfigError(error_msg)
