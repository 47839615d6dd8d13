"""Resolver configuration.

Settings come from three layers, later ones winning:

1. defaults in ``common.constants``
2. an optional YAML file (top-level ``resolver:`` mapping)
3. environment variables

Example YAML:

    resolver:
      list_url: https://publicsuffix.org/list/public_suffix_list.dat
      cache_dir: ~/.cache/netident
      ttl_hours: 24
      include_private_domains: true
      http:
        timeout: 30
        retries: 3
        backoff: 5.0
"""

import os
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict, Optional
import structlog
import yaml
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError
from common import ConfigurationError, get_env, get_env_bool
from common.constants import (
    DEFAULT_CACHE_DIR,
    DEFAULT_HTTP_BACKOFF,
    DEFAULT_HTTP_RETRIES,
    DEFAULT_HTTP_TIMEOUT,
    MAX_HTTP_TIMEOUT,
    MIN_HTTP_TIMEOUT,
    PSL_STORAGE_KEY,
    PSL_UPDATE_INTERVAL_HOURS,
    PUBLIC_SUFFIX_LIST_URL,
)

logger = structlog.get_logger()

# Environment variable -> (section, field)
ENV_OVERRIDES = {
    "PSL_URL": (None, "list_url"),
    "PSL_CACHE_DIR": (None, "cache_dir"),
    "PSL_STORAGE_KEY": (None, "storage_key"),
    "PSL_TTL_HOURS": (None, "ttl_hours"),
    "HTTP_TIMEOUT": ("http", "timeout"),
    "HTTP_RETRIES": ("http", "retries"),
    "HTTP_BACKOFF": ("http", "backoff"),
}


class HTTPSettings(BaseModel):
    """Transport settings for fetching the rule list."""

    timeout: int = Field(
        default=DEFAULT_HTTP_TIMEOUT, ge=MIN_HTTP_TIMEOUT, le=MAX_HTTP_TIMEOUT
    )
    retries: int = Field(default=DEFAULT_HTTP_RETRIES, ge=1)
    backoff: float = Field(default=DEFAULT_HTTP_BACKOFF, ge=0)


class ResolverSettings(BaseModel):
    """Validated resolver settings."""

    list_url: str = PUBLIC_SUFFIX_LIST_URL
    cache_dir: str = DEFAULT_CACHE_DIR
    storage_key: str = PSL_STORAGE_KEY
    ttl_hours: float = Field(default=PSL_UPDATE_INTERVAL_HOURS, gt=0)
    include_private_domains: bool = True
    http: HTTPSettings = Field(default_factory=HTTPSettings)

    @property
    def ttl(self) -> timedelta:
        return timedelta(hours=self.ttl_hours)

    @property
    def cache_path(self) -> Path:
        return Path(self.cache_dir).expanduser()


def _read_yaml(config_path: str) -> Dict[str, Any]:
    config_file = Path(config_path)

    if not config_file.exists():
        raise ConfigurationError(
            "Configuration file not found", context={"config_path": config_path}
        )

    logger.info("Loading configuration", config_path=config_path)

    try:
        with open(config_file, "r") as f:
            config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(
            "Invalid YAML in configuration file",
            context={"config_path": config_path},
            original_error=e,
        )

    if not isinstance(config, dict):
        raise ConfigurationError(
            "Configuration file must contain a mapping",
            context={"config_path": config_path},
        )
    section = config.get("resolver", {})
    if not isinstance(section, dict):
        raise ConfigurationError(
            "'resolver' section must be a mapping",
            context={"config_path": config_path, "field": "resolver"},
        )
    return section


def load_settings(config_path: Optional[str] = None) -> ResolverSettings:
    """
    Load resolver settings from an optional YAML file and the environment.

    Args:
        config_path: Path to a YAML settings file

    Returns:
        Validated ResolverSettings

    Raises:
        ConfigurationError: If the file is missing or invalid, or a value
            fails validation
    """
    raw: Dict[str, Any] = _read_yaml(config_path) if config_path else {}
    raw = {**raw, "http": dict(raw.get("http") or {})}

    for env_key, (section, field) in ENV_OVERRIDES.items():
        if os.getenv(env_key) is None:
            continue
        target = raw[section] if section else raw
        target[field] = get_env(env_key)

    if os.getenv("PSL_INCLUDE_PRIVATE") is not None:
        raw["include_private_domains"] = get_env_bool("PSL_INCLUDE_PRIVATE", True)

    try:
        settings = ResolverSettings.model_validate(raw)
    except PydanticValidationError as e:
        raise ConfigurationError(
            "Invalid resolver settings",
            context={"config_path": config_path or "<env>"},
            original_error=e,
        )

    logger.debug(
        "Configuration loaded",
        list_url=settings.list_url,
        cache_dir=settings.cache_dir,
        ttl_hours=settings.ttl_hours,
        include_private_domains=settings.include_private_domains,
    )
    return settings
