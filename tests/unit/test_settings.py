"""Tests for configuration settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from luidgpt.config.settings import LuidSettings, get_settings


class TestLuidSettings:
    """Test cases for LuidSettings."""

    def test_default_values(self) -> None:
        """Test that default values are set correctly."""
        settings = LuidSettings()

        assert settings.api_base_url == "http://localhost:3001/api"
        assert settings.luidhub_base_url == "http://localhost:4000"
        assert settings.request_timeout == 30
        assert settings.resource_timeout == 60
        assert settings.max_retries == 0
        assert settings.low_credits_threshold == 10
        assert settings.keyring_service == "com.luidgpt"
        assert settings.use_keyring is True
        assert settings.log_level == "INFO"

    def test_values_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test loading from LUIDGPT_ environment variables."""
        monkeypatch.setenv("LUIDGPT_API_BASE_URL", "https://api.luidgpt.com/api")
        monkeypatch.setenv("LUIDGPT_USE_KEYRING", "false")
        monkeypatch.setenv("LUIDGPT_MAX_RETRIES", "3")

        settings = LuidSettings()
        assert settings.api_base_url == "https://api.luidgpt.com/api"
        assert settings.use_keyring is False
        assert settings.max_retries == 3

    def test_base_url_trailing_slash_removed(self) -> None:
        settings = LuidSettings(api_base_url="https://api.luidgpt.com/api/")
        assert settings.api_base_url == "https://api.luidgpt.com/api"

    def test_invalid_base_url(self) -> None:
        """Test validation of a base URL without scheme."""
        with pytest.raises(ValidationError):
            LuidSettings(api_base_url="api.luidgpt.com")
        with pytest.raises(ValidationError):
            LuidSettings(luidhub_base_url="ftp://hub")

    def test_invalid_log_level(self) -> None:
        """Test validation of invalid log level."""
        with pytest.raises(ValidationError):
            LuidSettings(log_level="INVALID")

    def test_log_level_is_uppercased(self) -> None:
        for level in ["debug", "Info", "WARNING", "error", "critical"]:
            settings = LuidSettings(log_level=level)
            assert settings.log_level == level.upper()

    def test_timeout_validation(self) -> None:
        """Test timeouts must be positive and ordered."""
        LuidSettings(request_timeout=10, resource_timeout=10)

        with pytest.raises(ValidationError):
            LuidSettings(request_timeout=0)
        with pytest.raises(ValidationError):
            LuidSettings(request_timeout=30, resource_timeout=20)

    def test_max_retries_validation(self) -> None:
        LuidSettings(max_retries=0)
        LuidSettings(max_retries=10)

        with pytest.raises(ValidationError):
            LuidSettings(max_retries=-1)
        with pytest.raises(ValidationError):
            LuidSettings(max_retries=11)

    def test_credentials_file_path(self, tmp_path: Path) -> None:
        settings = LuidSettings(config_dir=tmp_path / "cfg")
        assert settings.credentials_file_path == tmp_path / "cfg" / "credentials.json"

        settings.ensure_directories()
        assert (tmp_path / "cfg").is_dir()

    def test_api_url(self) -> None:
        settings = LuidSettings(api_base_url="https://api.luidgpt.com/api")
        assert settings.api_url("/models") == "https://api.luidgpt.com/api/models"
        assert settings.api_url("models") == "https://api.luidgpt.com/api/models"

    def test_to_dict(self, tmp_path: Path) -> None:
        data = LuidSettings(config_dir=tmp_path).to_dict()
        assert data["config_dir"] == str(tmp_path)
        assert data["keyring_service"] == "com.luidgpt"

    def test_get_settings_overrides(self) -> None:
        settings = get_settings(low_credits_threshold=25)
        assert settings.low_credits_threshold == 25
