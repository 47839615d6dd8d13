"""Tests for HTTP fetchers."""

import asyncio

import pytest
from unittest.mock import AsyncMock, patch, MagicMock
from aiohttp import ClientError, ServerTimeoutError
from common import FetchError
from resolver.fetchers import HTTPFetcher

PSL_URL = "https://publicsuffix.org/list/public_suffix_list.dat"


def make_response(text: str = "com\n", status: int = 200) -> MagicMock:
    response = MagicMock()
    response.status = status
    response.headers.get.return_value = "text/plain; charset=utf-8"
    response.text = AsyncMock(return_value=text)
    response.raise_for_status = MagicMock()
    return response


@pytest.mark.asyncio
async def test_http_fetcher_success():
    """Test successful HTTP fetch."""
    fetcher = HTTPFetcher(source_name="psl", timeout=30, retries=3)

    with patch("aiohttp.ClientSession.get") as mock_get:
        mock_get.return_value.__aenter__.return_value = make_response("com\nnet\n")

        result = await fetcher.fetch(PSL_URL)

    assert result["content"] == "com\nnet\n"
    assert result["metadata"]["http_status"] == 200
    assert result["metadata"]["content_type"] == "text/plain; charset=utf-8"
    assert result["metadata"]["content_length"] == 8
    assert result["metadata"]["source_url"] == PSL_URL
    assert result["metadata"]["attempts"] == 1
    assert mock_get.call_args.args[0] == PSL_URL
    assert mock_get.return_value.__aenter__.return_value.text.call_args.kwargs == {
        "encoding": "utf-8"
    }


@pytest.mark.asyncio
async def test_http_fetcher_fetch_text():
    """Test fetch_text returns only the body."""
    fetcher = HTTPFetcher()

    with patch("aiohttp.ClientSession.get") as mock_get:
        mock_get.return_value.__aenter__.return_value = make_response("org\n")

        assert await fetcher.fetch_text(PSL_URL) == "org\n"


@pytest.mark.asyncio
async def test_http_fetcher_retry_on_failure():
    """Test HTTP fetcher retry logic on failure."""
    fetcher = HTTPFetcher(retries=3, backoff=0.01)

    with patch("aiohttp.ClientSession.get") as mock_get:
        mock_get.return_value.__aenter__.side_effect = [
            ClientError("Network error"),
            ClientError("Network error"),
            make_response("success"),
        ]

        result = await fetcher.fetch(PSL_URL)

    assert result["content"] == "success"
    assert result["metadata"]["attempts"] == 3
    assert mock_get.call_count == 3


@pytest.mark.asyncio
async def test_http_fetcher_max_retries_exceeded():
    """Test HTTP fetcher when max retries exceeded."""
    fetcher = HTTPFetcher(retries=3, backoff=0.01)

    with patch("aiohttp.ClientSession.get") as mock_get:
        mock_get.return_value.__aenter__.side_effect = ClientError("Network error")

        with pytest.raises(FetchError) as exc_info:
            await fetcher.fetch(PSL_URL)

    assert "Failed to fetch" in str(exc_info.value)
    assert exc_info.value.context["url"] == PSL_URL
    assert isinstance(exc_info.value.original_error, ClientError)
    assert mock_get.call_count == 3


@pytest.mark.asyncio
async def test_http_fetcher_timeout():
    """Test HTTP fetcher timeout handling."""
    fetcher = HTTPFetcher(retries=2, backoff=0.01)

    with patch("aiohttp.ClientSession.get") as mock_get:
        mock_get.return_value.__aenter__.side_effect = ServerTimeoutError("Timeout")

        with pytest.raises(FetchError):
            await fetcher.fetch(PSL_URL)

    assert mock_get.call_count == 2


@pytest.mark.asyncio
async def test_http_fetcher_asyncio_timeout():
    """Test a total-timeout expiry is retried and wrapped."""
    fetcher = HTTPFetcher(retries=2, backoff=0.01)

    with patch("aiohttp.ClientSession.get") as mock_get:
        mock_get.return_value.__aenter__.side_effect = asyncio.TimeoutError()

        with pytest.raises(FetchError):
            await fetcher.fetch(PSL_URL)

    assert mock_get.call_count == 2


@pytest.mark.asyncio
async def test_http_fetcher_http_error():
    """Test HTTP fetcher handling HTTP errors."""
    fetcher = HTTPFetcher(retries=1)

    response = make_response(status=404)
    response.raise_for_status.side_effect = ClientError("404 Not Found")

    with patch("aiohttp.ClientSession.get") as mock_get:
        mock_get.return_value.__aenter__.return_value = response

        with pytest.raises(FetchError):
            await fetcher.fetch(PSL_URL)

    assert mock_get.call_count == 1


@pytest.mark.asyncio
async def test_http_fetcher_invalid_utf8_body():
    """Test an undecodable body raises FetchError without retrying."""
    fetcher = HTTPFetcher(retries=3, backoff=0.01)

    response = make_response()
    response.text = AsyncMock(
        side_effect=UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")
    )

    with patch("aiohttp.ClientSession.get") as mock_get:
        mock_get.return_value.__aenter__.return_value = response

        with pytest.raises(FetchError) as exc_info:
            await fetcher.fetch(PSL_URL)

    assert exc_info.value.context["url"] == PSL_URL
    assert isinstance(exc_info.value.original_error, UnicodeDecodeError)
    assert mock_get.call_count == 1


def test_http_fetcher_initialization():
    """Test HTTP fetcher initialization."""
    fetcher = HTTPFetcher(source_name="test", timeout=60, retries=5, backoff=10.0)

    assert fetcher.source_name == "test"
    assert fetcher.timeout == 60
    assert fetcher.retries == 5
    assert fetcher.backoff == 10.0


def test_http_fetcher_default_values():
    """Test HTTP fetcher default values."""
    fetcher = HTTPFetcher()

    assert fetcher.source_name == "public_suffix_list"
    assert fetcher.timeout == 30
    assert fetcher.retries == 3
    assert fetcher.backoff == 5.0
