"""Common utilities package."""

from common.logging import setup_logging
from common.exceptions import (
    NetidentError,
    AddressError,
    InvalidHostError,
    UninitializedError,
    FetchError,
    ParseError,
    StoreError,
    ConfigurationError,
)
from common.utils import get_env, get_env_bool
from common import constants

__all__ = [
    "setup_logging",
    "NetidentError",
    "AddressError",
    "InvalidHostError",
    "UninitializedError",
    "FetchError",
    "ParseError",
    "StoreError",
    "ConfigurationError",
    "get_env",
    "get_env_bool",
    "constants",
]
