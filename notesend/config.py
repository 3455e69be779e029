"""Configuration management using pydantic-settings."""

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from notesend.storage import PluginState


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Vault
    vault_path: Path

    # Endpoint - may already carry the token as a query parameter
    endpoint_url: str = ""
    endpoint_token: str = ""
    request_timeout: float = 10.0

    @field_validator("vault_path")
    @classmethod
    def validate_vault_path(cls, v: Path) -> Path:
        """Ensure vault path exists and is a directory."""
        if not v.exists():
            raise ValueError(f"Vault path does not exist: {v}")
        if not v.is_dir():
            raise ValueError(f"Vault path is not a directory: {v}")
        return v.resolve()

    @field_validator("request_timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Request timeout must be positive")
        return v

    def resolve_endpoint(self, state: PluginState) -> str:
        """Endpoint stored in the vault state wins over the environment."""
        return state.endpoint_url.strip() or self.endpoint_url.strip()


def get_settings(**overrides) -> Settings:
    """Load settings from environment, with explicit overrides."""
    return Settings(**{k: v for k, v in overrides.items() if v is not None})
