"""Configuration management for shortcut-input."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from shortcut_input.logging_utils import LogProfile

DEFAULT_SHELL = "/bin/bash"


def _default_shell() -> str:
    return os.environ.get("SHELL") or DEFAULT_SHELL


def _default_temp_root() -> Path:
    return Path(tempfile.gettempdir())


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="SHORTCUT_INPUT_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Process Configuration
    shell: str = Field(default_factory=_default_shell, description="Shell used to launch the shortcut runner")
    runner_executable: str = Field(default="shortcuts", description="Automation runner invoked inside the shell")
    working_directory: Path = Field(default=Path("/"), description="Working directory of the spawned shell")
    terminate_grace: float = Field(default=5.0, ge=0, description="Seconds between SIGTERM and SIGKILL")

    # Exchange Configuration
    temp_root: Path = Field(default_factory=_default_temp_root, description="Root directory for exchange files")
    keep_files: bool = Field(default=False, description="Keep exchange files after the invocation ends")

    # Output settling: a heuristic for runners whose output flush lands after exit.
    settle_attempts: int = Field(default=3, ge=0, description="Extra checks for a late output file")
    settle_interval: float = Field(default=0.05, ge=0, description="Seconds between output file checks")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Log level")
    log_profile: LogProfile = Field(default="default", description="Log output profile: plain stderr or rich console")


def get_settings(**overrides: object) -> Settings:
    """Get application settings.

    Args:
        **overrides: Explicit values that win over the environment

    Returns:
        Settings instance
    """
    return Settings(**overrides)  # type: ignore[arg-type]
