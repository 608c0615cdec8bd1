"""Configuration settings behaviour tests."""

from __future__ import annotations

import pytest

from app.config import PROXY_PATHS, Settings


def test_defaults_use_proxy_routes() -> None:
    """The proxy deployment is the default and uses the proxy's route table."""

    settings = Settings(_env_file=None)
    endpoints = settings.endpoints

    assert endpoints.proxied is True
    assert endpoints.origin == "http://localhost:8787"
    assert endpoints.home == PROXY_PATHS["home"]
    assert endpoints.video == "/api/video"
    assert endpoints.label == "Proxy mode"


def test_direct_mode_uses_versioned_paths() -> None:
    """Direct deployments combine the API origin with the versioned prefixes."""

    settings = Settings(
        _env_file=None,
        USE_PROXY=False,
        API_BASE_URL="https://api.example.com/",
    )
    endpoints = settings.endpoints

    assert endpoints.proxied is False
    assert endpoints.origin == "https://api.example.com"
    assert endpoints.search == "/api/v1/search"
    assert endpoints.detail == "/api/v1/detail"
    assert endpoints.label == "Direct mode"


def test_custom_paths_gain_leading_slash() -> None:
    """Path prefixes are normalised so URL composition stays predictable."""

    settings = Settings(
        _env_file=None,
        USE_PROXY="false",
        API_BASE_URL="https://api.example.com",
        API_HOME_PATH="v2/feed/",
    )

    assert settings.endpoints.home == "/v2/feed"


def test_direct_mode_requires_origin() -> None:
    """Disabling the proxy without an API origin is a configuration error."""

    with pytest.raises(ValueError, match="API_BASE_URL is required"):
        Settings(_env_file=None, USE_PROXY=False)


def test_log_level_is_case_insensitive() -> None:
    settings = Settings(_env_file=None, LOG_LEVEL="debug")
    assert settings.log_level == "DEBUG"


def test_share_origin_trailing_slash_removed() -> None:
    settings = Settings(_env_file=None, SHARE_ORIGIN="https://melulu.example/")
    assert settings.share_origin == "https://melulu.example"
