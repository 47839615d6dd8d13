"""In-process store, mostly for tests and one-shot runs."""

from typing import Dict
from schemas import PublicSuffixRuleSet
from .base_store import BaseStore


class MemoryStore(BaseStore):
    """Keeps rule sets in a dict; nothing survives the process."""

    def __init__(self):
        self._data: Dict[str, PublicSuffixRuleSet] = {}

    async def get(self, key: str) -> PublicSuffixRuleSet:
        return self._data.get(key, PublicSuffixRuleSet())

    async def set(self, key: str, value: PublicSuffixRuleSet) -> None:
        self._data[key] = value
