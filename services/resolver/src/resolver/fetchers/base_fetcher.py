"""Base fetcher abstract class."""

from abc import ABC, abstractmethod
from typing import Dict, Any


class BaseFetcher(ABC):
    """Abstract base class for rule-list document fetchers."""

    def __init__(self, source_name: str):
        """
        Initialize fetcher.

        Args:
            source_name: Name of the data source (used in logs and errors)
        """
        self.source_name = source_name

    @abstractmethod
    async def fetch(self, url: str) -> Dict[str, Any]:
        """
        Fetch a document.

        Args:
            url: URL to fetch from

        Returns:
            Dictionary containing:
                - content: The fetched content as string
                - metadata: Metadata about the fetch (status, size, etc.)

        Raises:
            FetchError: If fetching fails
        """
        pass

    async def fetch_text(self, url: str) -> str:
        """Fetch a document and return only its text."""
        result = await self.fetch(url)
        return result["content"]
