"""Tests for shared errors, logging and environment helpers."""

import io
import json
import os
from unittest.mock import patch

import pytest

from common import (
    AddressError,
    FetchError,
    NetidentError,
    get_env,
    get_env_bool,
    setup_logging,
)


class TestErrors:
    def test_str_includes_context_and_cause(self):
        error = FetchError(
            "Fetch failed",
            context={"url": "https://example.com"},
            original_error=TimeoutError("slow"),
        )

        assert str(error) == (
            "Fetch failed (url=https://example.com) [caused by: TimeoutError: slow]"
        )
        assert isinstance(error, NetidentError)

    def test_address_error_is_value_error(self):
        with pytest.raises(ValueError):
            raise AddressError("Invalid IPv4 address", context={"address": "1.2.3"})


class TestSetupLogging:
    def test_json_lines_with_service(self):
        stream = io.StringIO()
        logger = setup_logging(
            level="INFO", service_name="netident-test", json_format=True, stream=stream
        )

        logger.info("Rules loaded", rules=3)
        logger.debug("Hidden")

        lines = stream.getvalue().splitlines()
        assert len(lines) == 1
        event = json.loads(lines[0])
        assert event["event"] == "Rules loaded"
        assert event["rules"] == 3
        assert event["service"] == "netident-test"
        assert event["level"] == "info"
        assert "timestamp" in event
        assert event["func_name"] == "test_json_lines_with_service"

    def test_unknown_level(self):
        with pytest.raises(ValueError):
            setup_logging(level="LOUD", stream=io.StringIO())


class TestEnv:
    def test_get_env_default(self):
        with patch.dict(os.environ, {}, clear=True):
            assert get_env("PSL_URL", "https://example.com/list") == "https://example.com/list"
            assert get_env("PSL_URL") == ""

    def test_get_env_required(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValueError):
                get_env("PSL_URL", required=True)

    @pytest.mark.parametrize(
        "raw, expected",
        [("1", True), ("Yes", True), ("on", True), ("0", False), ("FALSE", False)],
    )
    def test_get_env_bool(self, raw, expected):
        with patch.dict(os.environ, {"PSL_INCLUDE_PRIVATE": raw}):
            assert get_env_bool("PSL_INCLUDE_PRIVATE", not expected) is expected

    def test_get_env_bool_unknown_falls_back(self):
        with patch.dict(os.environ, {"PSL_INCLUDE_PRIVATE": "maybe"}):
            assert get_env_bool("PSL_INCLUDE_PRIVATE", True) is True
