"""Shared fixtures for sams tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Callable

import pytest


@pytest.fixture
def root(tmp_path: Path) -> Path:
    """An empty dotfiles root directory."""
    directory = tmp_path / "dotfiles"
    directory.mkdir()
    return directory


@pytest.fixture
def write_file(root: Path) -> Callable[..., Path]:
    """Write a file relative to the root, creating parent directories."""

    def _write(relative: str, content: str = "") -> Path:
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_config(write_file: Callable[..., Path]) -> Callable[[str], Path]:
    """Write ``sams.toml`` into the root."""

    def _write(content: str = "") -> Path:
        return write_file("sams.toml", content)

    return _write
