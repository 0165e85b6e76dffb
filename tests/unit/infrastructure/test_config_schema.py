"""Tests for the pydantic configuration models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from streambridge.infrastructure.config.schema import (
    AddonConfig,
    AppConfig,
    JellyfinConfig,
)


class TestJellyfinConfig:
    def test_trailing_slash_stripped(self) -> None:
        assert JellyfinConfig(url="http://jf:8096/").url == "http://jf:8096"

    def test_blank_url_is_none(self) -> None:
        assert JellyfinConfig(url="  ").url is None

    def test_configured_requires_all_three(self) -> None:
        assert JellyfinConfig(url="http://jf", user_id="u").configured is False
        assert JellyfinConfig(url="http://jf", user_id="u", api_key="k").configured

    def test_search_limit_positive(self) -> None:
        with pytest.raises(ValidationError):
            JellyfinConfig(search_limit=0)


class TestAddonConfig:
    def test_page_size_positive(self) -> None:
        with pytest.raises(ValidationError):
            AddonConfig(catalog_page_size=0)


class TestAppConfig:
    def test_sectioned_aliases(self) -> None:
        config = AppConfig.model_validate(
            {
                "http": {"timeout_seconds": 3.5, "retry_max_attempts": 0},
                "logging": {"level": "WARNING", "format": "json"},
            }
        )
        assert config.http_timeout_seconds == 3.5
        assert config.http_retry_max_attempts == 0
        assert config.log_level == "WARNING"
        assert config.log_format == "json"

    def test_negative_retries_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AppConfig(http_retry_max_attempts=-1)

    def test_non_positive_timeout_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AppConfig(http_timeout_seconds=0)

    def test_to_sectioned_dict_masks_api_key(self) -> None:
        config = AppConfig(jellyfin=JellyfinConfig(url="http://jf", api_key="secret"))
        dumped = config.to_sectioned_dict()
        assert dumped["jellyfin"]["api_key"] == "***"
        assert dumped["jellyfin"]["url"] == "http://jf"
        assert dumped["http"]["timeout_seconds"] == 10.0
