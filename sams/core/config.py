"""Loading ``sams.toml`` from disk."""

from __future__ import annotations

import json
import logging
import tomllib
from pathlib import Path

import tomli_w
from pydantic import ValidationError

from ..rendering.io import atomic_write_text
from .errors import ConfigError
from .models import Config

logger = logging.getLogger(__name__)


def resolve_path(root: Path, path: Path) -> Path:
    """Resolve ``path`` against ``root`` unless it is already absolute."""
    path = path.expanduser()
    if path.is_absolute():
        return path
    return root / path


def load_config(path: Path) -> Config:
    """Load and validate a config file.

    Every omitted key is filled with its default. Any structural violation
    is fatal.

    Args:
        path: Path to the TOML config file

    Returns:
        Fully populated configuration
    """
    logger.debug(f"Loading config: {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ConfigError("Failed to open config file", path) from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError("Failed to read config file", path) from exc

    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError("Failed to parse config file", path) from exc

    try:
        config = Config.model_validate(data)
    except ValidationError as exc:
        raise ConfigError("Invalid config file", path) from exc

    logger.debug(
        f"Config: {len(config.parameters)} parameter(s), {len(config.tasks)} task(s)"
    )
    return config


def load_root_config(root: Path, config_path: Path) -> Config:
    """Load the config file located relative to the root directory."""
    return load_config(resolve_path(root, config_path))


def dump_config(config: Config) -> str:
    """Serialize a config to TOML, omitting unset optional keys."""
    data = config.model_dump(mode="json", by_alias=True, exclude_none=True)
    return tomli_w.dumps(data)


def write_config(path: Path, config: Config, *, force: bool = False) -> None:
    """Write ``config`` to ``path``, refusing to overwrite unless forced."""
    if path.exists() and not force:
        raise ConfigError("File already exists", path)
    try:
        atomic_write_text(path, dump_config(config))
    except OSError as exc:
        raise ConfigError("Failed to write config", path) from exc
    logger.info(f"Wrote config → {path}")


def write_json_schema(path: Path) -> None:
    """Export the JSON schema of the config file for editor validation."""
    schema = Config.model_json_schema(by_alias=True)
    try:
        path.write_text(json.dumps(schema, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        raise ConfigError("Failed to write json schema", path) from exc
    logger.info(f"Wrote json schema → {path}")
