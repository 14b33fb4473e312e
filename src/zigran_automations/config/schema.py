"""Pydantic models for the client configuration.

Section models are plain ``BaseModel``; only the top-level
:class:`ZigranConfig` reads the environment (``ZIGRAN_API__TOKEN`` etc.).
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ApiSection(BaseModel):
    """Backend connection settings."""

    base_url: str = "https://api.zigran.com/api"
    token: str = ""
    timeout: float = 10.0


class LoggingSection(BaseModel):
    """Log output settings."""

    level: str = "info"
    file: str = "~/.local/share/zigran/automations.log"
    log_to_file: bool = False


class ZigranConfig(BaseSettings):
    """Top-level configuration model.

    Maps to the TOML structure ``[api]`` / ``[logging]``. Config file lives
    at ``~/.config/zigran/config.toml``.
    """

    model_config = SettingsConfigDict(env_prefix="ZIGRAN_", env_nested_delimiter="__")

    api: ApiSection = Field(default_factory=ApiSection)
    logging: LoggingSection = Field(default_factory=LoggingSection)

    def get_log_path(self) -> Path:
        """Return the resolved log file path."""
        return Path(self.logging.file).expanduser()
