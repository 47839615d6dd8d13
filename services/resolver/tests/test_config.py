"""Tests for resolver settings."""

import os
from datetime import timedelta
from pathlib import Path
from unittest.mock import patch

import pytest
from common import ConfigurationError
from resolver.config import ENV_OVERRIDES, load_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in [*ENV_OVERRIDES, "PSL_INCLUDE_PRIVATE"]:
        monkeypatch.delenv(key, raising=False)


def write_config(tmp_path, text: str) -> str:
    config_file = tmp_path / "config.yaml"
    config_file.write_text(text)
    return str(config_file)


def test_defaults():
    """Test settings without a file or environment."""
    settings = load_settings()

    assert settings.list_url == "https://publicsuffix.org/list/public_suffix_list.dat"
    assert settings.storage_key == "netident.dns.publicSuffixList"
    assert settings.ttl == timedelta(hours=24)
    assert settings.include_private_domains is True
    assert settings.http.timeout == 30
    assert settings.http.retries == 3
    assert settings.cache_path == Path("~/.cache/netident").expanduser()


def test_yaml_file(tmp_path):
    """Test values from the resolver section of a YAML file."""
    config_path = write_config(
        tmp_path,
        """
resolver:
  list_url: https://mirror.example/psl.dat
  cache_dir: /var/cache/psl
  ttl_hours: 6
  include_private_domains: false
  http:
    timeout: 10
    retries: 5
""",
    )

    settings = load_settings(config_path)

    assert settings.list_url == "https://mirror.example/psl.dat"
    assert settings.cache_path == Path("/var/cache/psl")
    assert settings.ttl == timedelta(hours=6)
    assert settings.include_private_domains is False
    assert settings.http.timeout == 10
    assert settings.http.retries == 5
    assert settings.http.backoff == 5.0


def test_env_overrides_yaml(tmp_path):
    """Test environment variables win over the file."""
    config_path = write_config(
        tmp_path, "resolver:\n  ttl_hours: 6\n  http:\n    timeout: 10\n"
    )

    with patch.dict(
        os.environ,
        {"PSL_TTL_HOURS": "12", "HTTP_TIMEOUT": "60", "PSL_INCLUDE_PRIVATE": "no"},
    ):
        settings = load_settings(config_path)

    assert settings.ttl_hours == 12
    assert settings.http.timeout == 60
    assert settings.include_private_domains is False


def test_empty_file_uses_defaults(tmp_path):
    """Test an empty YAML file is treated as no settings."""
    settings = load_settings(write_config(tmp_path, ""))

    assert settings.ttl_hours == 24


def test_missing_file_raises(tmp_path):
    """Test a missing file raises ConfigurationError."""
    with pytest.raises(ConfigurationError) as exc_info:
        load_settings(str(tmp_path / "missing.yaml"))

    assert "not found" in str(exc_info.value)


def test_invalid_yaml_raises(tmp_path):
    """Test malformed YAML raises ConfigurationError."""
    with pytest.raises(ConfigurationError):
        load_settings(write_config(tmp_path, "resolver: [unclosed\n"))


def test_non_mapping_section_raises(tmp_path):
    """Test a resolver section that is not a mapping is rejected."""
    with pytest.raises(ConfigurationError):
        load_settings(write_config(tmp_path, "resolver:\n  - a\n  - b\n"))


@pytest.mark.parametrize(
    "env",
    [
        {"HTTP_TIMEOUT": "1"},
        {"HTTP_TIMEOUT": "abc"},
        {"HTTP_RETRIES": "0"},
        {"PSL_TTL_HOURS": "0"},
    ],
)
def test_invalid_values_raise(env):
    """Test out-of-range or malformed values raise ConfigurationError."""
    with patch.dict(os.environ, env):
        with pytest.raises(ConfigurationError) as exc_info:
            load_settings()

    assert exc_info.value.original_error is not None
