"""CLI settings, argument parsers and validators."""

from __future__ import annotations

from pathlib import Path

import typer
from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.models import DEFAULT_CONFIG_FILE

SHELLS = ("bash", "zsh", "fish")


class Settings(BaseSettings):
    """Defaults for the global options, overridable via ``SAMS_*`` variables."""

    model_config = SettingsConfigDict(env_prefix="SAMS_", case_sensitive=False)

    config: Path = Path(DEFAULT_CONFIG_FILE)
    root: Path = Path(".")
    log_level: str = "INFO"


class GlobalOptions(BaseModel):
    """Options shared by every command."""

    config_path: Path
    root: Path
    verbose: bool = False


def parse_shell(value: str) -> str:
    """Validate a shell name for completion scripts."""
    shell = value.strip().lower()
    if shell not in SHELLS:
        raise typer.BadParameter(
            f"Unsupported shell {value!r}; choose one of: {', '.join(SHELLS)}"
        )
    return shell


def parse_log_level(value: str) -> str:
    """Validate a logging level name."""
    level = value.strip().upper()
    if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        raise typer.BadParameter(f"Invalid log level: {value!r}")
    return level
