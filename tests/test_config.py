"""Tests for environment-driven settings."""
import logging

import pytest

from linear_mcp import config


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch, tmp_path):
    # Keep a developer's .env out of the tests
    monkeypatch.chdir(tmp_path)
    config.get_settings.cache_clear()
    yield
    config.get_settings.cache_clear()


class TestSettings:

    def test_defaults(self, monkeypatch):
        monkeypatch.setenv("LINEAR_API_KEY", "lin_api_abc")

        settings = config.get_settings()

        assert settings.linear_api_key == "lin_api_abc"
        assert settings.linear_api_url == "https://api.linear.app/graphql"
        assert settings.linear_rate_limit_per_minute == 80
        assert settings.linear_cache_ttl_seconds == 300.0

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("LINEAR_API_KEY", "lin_api_abc")
        monkeypatch.setenv("LINEAR_RATE_LIMIT_PER_MINUTE", "10")

        assert config.get_settings().linear_rate_limit_per_minute == 10

    def test_missing_key_exits(self, monkeypatch):
        monkeypatch.delenv("LINEAR_API_KEY", raising=False)

        with pytest.raises(SystemExit) as exc_info:
            config.load_settings()
        assert exc_info.value.code == 1

    def test_empty_key_exits(self, monkeypatch):
        monkeypatch.setenv("LINEAR_API_KEY", "")

        with pytest.raises(SystemExit):
            config.load_settings()

    def test_unexpected_prefix_warns(self, monkeypatch, caplog):
        monkeypatch.setenv("LINEAR_API_KEY", "oauth-token")

        with caplog.at_level(logging.WARNING, logger="linear-mcp.config"):
            settings = config.load_settings()

        assert settings.linear_api_key == "oauth-token"
        assert "does not start with 'lin_api_'" in caplog.text

    def test_expected_prefix_does_not_warn(self, monkeypatch, caplog):
        monkeypatch.setenv("LINEAR_API_KEY", "lin_api_abc")

        with caplog.at_level(logging.WARNING, logger="linear-mcp.config"):
            config.load_settings()

        assert caplog.text == ""
