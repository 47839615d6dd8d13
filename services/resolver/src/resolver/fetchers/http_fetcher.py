"""HTTP fetcher for the public suffix list."""

import asyncio
from typing import Any, Dict

import aiohttp
import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from common import FetchError
from common.constants import (
    DEFAULT_HTTP_BACKOFF,
    DEFAULT_HTTP_RETRIES,
    DEFAULT_HTTP_TIMEOUT,
)
from .base_fetcher import BaseFetcher

logger = structlog.get_logger()

# Transport failures worth another attempt; HTTP error statuses surface as
# aiohttp.ClientResponseError, a ClientError subclass.
RETRYABLE_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError)


class HTTPFetcher(BaseFetcher):
    """Fetches a document with one GET per attempt, retrying transport errors.

    All attempts of one ``fetch`` share a single ``aiohttp.ClientSession``.
    Waits between attempts grow exponentially from ``backoff`` seconds.
    """

    def __init__(
        self,
        source_name: str = "public_suffix_list",
        timeout: int = DEFAULT_HTTP_TIMEOUT,
        retries: int = DEFAULT_HTTP_RETRIES,
        backoff: float = DEFAULT_HTTP_BACKOFF,
    ):
        """
        Initialize HTTP fetcher.

        Args:
            source_name: Name of the data source
            timeout: Total timeout of one attempt, in seconds
            retries: Attempts per fetch (1 disables retrying)
            backoff: Wait before the second attempt, in seconds
        """
        super().__init__(source_name)
        self.timeout = timeout
        self.retries = retries
        self.backoff = backoff

    def _log_retry(self, retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            "Retrying HTTP fetch",
            source=self.source_name,
            attempt=retry_state.attempt_number,
            max_attempts=self.retries,
            error=str(error),
            error_type=type(error).__name__,
        )

    async def _get(self, session: aiohttp.ClientSession, url: str) -> Dict[str, Any]:
        async with session.get(
            url, timeout=aiohttp.ClientTimeout(total=self.timeout)
        ) as response:
            response.raise_for_status()
            try:
                content = await response.text(encoding="utf-8")
            except UnicodeDecodeError as e:
                raise FetchError(
                    f"Response from {url} is not valid UTF-8",
                    context={
                        "source_name": self.source_name,
                        "url": url,
                        "http_status": response.status,
                    },
                    original_error=e,
                )
            return {
                "content": content,
                "metadata": {
                    "http_status": response.status,
                    "content_length": len(content),
                    "content_type": response.headers.get("Content-Type", ""),
                    "source_url": url,
                },
            }

    async def fetch(self, url: str) -> Dict[str, Any]:
        """
        GET a document, retrying transport failures.

        The body is always decoded as UTF-8, the encoding of the public
        suffix list.

        Args:
            url: URL to fetch from

        Returns:
            Dictionary containing:
                - content: Response body as text
                - metadata: http_status, content_length, content_type,
                  source_url and attempts

        Raises:
            FetchError: If every attempt fails, or the body is not UTF-8
        """
        logger.info(
            "Starting HTTP fetch",
            source=self.source_name,
            url=url,
            timeout=self.timeout,
        )

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.retries),
            wait=wait_exponential(multiplier=self.backoff, min=self.backoff),
            retry=retry_if_exception_type(RETRYABLE_ERRORS),
            before_sleep=self._log_retry,
            reraise=True,
        )

        try:
            async with aiohttp.ClientSession() as session:
                async for attempt in retrying:
                    with attempt:
                        result = await self._get(session, url)
                        result["metadata"]["attempts"] = attempt.retry_state.attempt_number
        except RETRYABLE_ERRORS as e:
            logger.error(
                "HTTP fetch failed",
                source=self.source_name,
                url=url,
                attempts=self.retries,
                error=str(e),
            )
            raise FetchError(
                f"Failed to fetch {url} after {self.retries} attempts",
                context={
                    "source_name": self.source_name,
                    "url": url,
                    "attempts": self.retries,
                    "timeout": self.timeout,
                },
                original_error=e,
            )

        logger.info(
            "HTTP fetch successful",
            source=self.source_name,
            status=result["metadata"]["http_status"],
            content_length=result["metadata"]["content_length"],
            attempts=result["metadata"]["attempts"],
        )
        return result
