"""Tests for config module."""

from pathlib import Path

import pytest

from notesend.config import Settings, get_settings
from notesend.storage import PluginState


class TestSettings:
    """Tests for Settings class."""

    def test_defaults(self, tmp_vault: Path, monkeypatch):
        """Test default endpoint settings."""
        monkeypatch.setenv("VAULT_PATH", str(tmp_vault))
        monkeypatch.delenv("ENDPOINT_URL", raising=False)
        monkeypatch.delenv("ENDPOINT_TOKEN", raising=False)
        monkeypatch.delenv("REQUEST_TIMEOUT", raising=False)

        settings = Settings(_env_file=None)
        assert settings.vault_path == tmp_vault.resolve()
        assert settings.endpoint_url == ""
        assert settings.endpoint_token == ""
        assert settings.request_timeout == 10.0

    def test_endpoint_from_env(self, tmp_vault: Path, monkeypatch):
        monkeypatch.setenv("VAULT_PATH", str(tmp_vault))
        monkeypatch.setenv("ENDPOINT_URL", "https://x.com/iwh/1/")
        monkeypatch.setenv("ENDPOINT_TOKEN", "secret")
        monkeypatch.setenv("REQUEST_TIMEOUT", "2.5")

        settings = Settings(_env_file=None)
        assert settings.endpoint_url == "https://x.com/iwh/1/"
        assert settings.endpoint_token == "secret"
        assert settings.request_timeout == 2.5

    def test_vault_path_validation_not_exists(self, tmp_path: Path, monkeypatch):
        """Test vault path validation when path doesn't exist."""
        monkeypatch.setenv("VAULT_PATH", str(tmp_path / "nonexistent"))

        with pytest.raises(ValueError, match="does not exist"):
            Settings(_env_file=None)

    def test_vault_path_validation_not_directory(self, tmp_path: Path, monkeypatch):
        """Test vault path validation when path is not a directory."""
        file_path = tmp_path / "file.txt"
        file_path.touch()
        monkeypatch.setenv("VAULT_PATH", str(file_path))

        with pytest.raises(ValueError, match="not a directory"):
            Settings(_env_file=None)

    def test_timeout_must_be_positive(self, tmp_vault: Path, monkeypatch):
        monkeypatch.setenv("VAULT_PATH", str(tmp_vault))
        monkeypatch.setenv("REQUEST_TIMEOUT", "0")

        with pytest.raises(ValueError, match="positive"):
            Settings(_env_file=None)

    def test_get_settings_override(self, tmp_vault: Path, tmp_path: Path, monkeypatch):
        other = tmp_path / "other"
        other.mkdir()
        monkeypatch.setenv("VAULT_PATH", str(tmp_vault))

        assert get_settings(vault_path=str(other)).vault_path == other.resolve()
        assert get_settings(vault_path=None).vault_path == tmp_vault.resolve()


class TestResolveEndpoint:
    def test_stored_endpoint_wins(self, tmp_vault: Path, monkeypatch):
        monkeypatch.setenv("VAULT_PATH", str(tmp_vault))
        monkeypatch.setenv("ENDPOINT_URL", "https://env.example.com/")
        settings = Settings(_env_file=None)

        assert settings.resolve_endpoint(PluginState()) == "https://env.example.com/"
        stored = PluginState(endpoint_url=" https://stored.example.com/ ")
        assert settings.resolve_endpoint(stored) == "https://stored.example.com/"
