"""Base parser abstract class."""

from abc import ABC, abstractmethod
from typing import Any


class BaseParser(ABC):
    """Abstract base class for rule-list parsers."""

    def __init__(self, source_name: str, source_format: str):
        """
        Initialize parser.

        Args:
            source_name: Name of the data source
            source_format: Document format (e.g. psl)
        """
        self.source_name = source_name
        self.source_format = source_format

    @abstractmethod
    def parse(self, content: str) -> Any:
        """
        Parse document content.

        Args:
            content: Raw content to parse

        Raises:
            ParseError: If parsing fails
        """
        pass
