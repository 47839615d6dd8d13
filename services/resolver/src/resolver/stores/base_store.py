"""Base store abstract class."""

from abc import ABC, abstractmethod
from schemas import PublicSuffixRuleSet


class BaseStore(ABC):
    """Abstract key-value store for persisted rule sets."""

    @abstractmethod
    async def get(self, key: str) -> PublicSuffixRuleSet:
        """
        Read the rule set stored under ``key``.

        Returns:
            The stored rule set, or an uninitialized default when absent

        Raises:
            StoreError: If the store cannot be read
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: PublicSuffixRuleSet) -> None:
        """
        Replace the rule set stored under ``key``.

        Raises:
            StoreError: If the store cannot be written
        """
        pass
