"""Utility functions."""

import os
from typing import Optional
import structlog

logger = structlog.get_logger()

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def get_env(key: str, default: Optional[str] = None, required: bool = False) -> str:
    """
    Get environment variable with optional default and required flag.

    Args:
        key: Environment variable name
        default: Default value if not found
        required: If True, raise error if not found and no default

    Returns:
        Environment variable value

    Raises:
        ValueError: If required=True and variable not found
    """
    value = os.getenv(key, default)

    if required and value is None:
        raise ValueError(f"Required environment variable '{key}' not found")

    return value or ""


def get_env_bool(key: str, default: bool = False) -> bool:
    """
    Get a boolean environment variable.

    Accepts 1/0, true/false, yes/no and on/off (case-insensitive). Unknown
    values fall back to the default with a warning.
    """
    raw = os.getenv(key)
    if raw is None:
        return default

    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False

    logger.warning("Ignoring unrecognised boolean env value", key=key, value=raw)
    return default
