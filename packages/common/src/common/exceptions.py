"""Custom exceptions for netident."""

from typing import Optional, Dict, Any


class NetidentError(Exception):
    """Base exception for all netident errors.

    Attributes:
        message: Error message
        context: Additional context about the error
        original_error: Original exception if this wraps another error
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None,
    ):
        """Initialize exception with context.

        Args:
            message: Error message
            context: Additional context (e.g., url, key)
            original_error: Original exception if wrapping
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.original_error = original_error

    def __str__(self) -> str:
        """String representation with context."""
        base = self.message
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base = f"{base} ({ctx_str})"
        if self.original_error:
            base = f"{base} [caused by: {type(self.original_error).__name__}: {self.original_error}]"
        return base


class AddressError(NetidentError, ValueError):
    """Raised when an IPv4/IPv6 address has an invalid format.

    Common context fields:
        - address: The offending text (or byte length)
        - version: Address family being parsed (4 or 6)
    """

    pass


class InvalidHostError(NetidentError, ValueError):
    """Raised when a URL authority or hostname cannot be parsed.

    Common context fields:
        - host: The offending host or URL
    """

    pass


class UninitializedError(NetidentError):
    """Raised when the resolver is used before it is ready.

    This indicates a lifecycle-ordering bug, not a data problem.
    """

    pass


class FetchError(NetidentError):
    """Raised when fetching the rule list over HTTP fails.

    Common context fields:
        - url: URL that failed
        - attempts: Retry attempt count
        - timeout: Request timeout in seconds
    """

    pass


class ParseError(NetidentError):
    """Raised when parsing the rule list fails.

    Common context fields:
        - source_name: Name of the source
        - line_number: Line number where parsing failed
    """

    pass


class StoreError(NetidentError):
    """Raised when the rule-set cache store cannot be read or written.

    Common context fields:
        - key: Store key
        - path: Backing file (for file stores)
    """

    pass


class ConfigurationError(NetidentError):
    """Raised when configuration is invalid.

    Common context fields:
        - config_path: Path to config file
        - field: Invalid field name
    """

    pass
