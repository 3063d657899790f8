"""Configuration management for the Foundry Agents client."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from foundry_agents.core.constants import AuthMethod, Limits, Paths


class AppSettings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="FOUNDRY_AGENTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Paths
    config_dir: Path = Field(
        default_factory=lambda: Path.home() / Paths.CONFIG_DIR_NAME,
        description="Directory holding the context cache",
    )

    # Authentication
    auth_method: AuthMethod = Field(
        default=AuthMethod.DEFAULT, description="Azure authentication method"
    )
    tenant_id: str | None = Field(default=None, description="Azure AD tenant ID")
    client_id: str | None = Field(
        default=None, description="Service principal or managed identity client ID"
    )
    client_secret: str | None = Field(default=None, description="Service principal secret")

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Logging level"
    )
    log_file: Path | None = Field(
        default=None, description="Optional log file path"
    )

    # Display
    no_color: bool = Field(default=False, description="Disable colored output")
    verbose: bool = Field(default=False, description="Enable verbose output")

    # Requests
    request_timeout: float = Field(
        default=Limits.REQUEST_TIMEOUT_SECONDS,
        gt=0,
        description="Per-request timeout in seconds",
    )
    poll_interval: float = Field(
        default=Limits.POLL_INTERVAL_SECONDS,
        ge=0,
        description="Seconds between run status polls",
    )
    max_polls: int = Field(
        default=Limits.MAX_POLLS,
        gt=0,
        description="Maximum run status polls before timing out",
    )

    @property
    def context_file(self) -> Path:
        """Path of the persisted context cache."""
        return self.config_dir / Paths.CONTEXT_FILE


@lru_cache
def get_settings() -> AppSettings:
    """Get cached application settings."""
    return AppSettings()
