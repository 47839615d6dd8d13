"""Rule-set stores package."""

from .base_store import BaseStore
from .memory_store import MemoryStore
from .json_store import JsonFileStore

__all__ = ["BaseStore", "MemoryStore", "JsonFileStore"]
