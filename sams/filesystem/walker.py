"""Directory traversal with exclude globs and gitignore filtering.

Yield order follows ``os.scandir`` and is not sorted.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator

import pathspec

from ..core.errors import WalkError
from ..core.models import Config

logger = logging.getLogger(__name__)

VCS_DIR = ".git"
GITIGNORE = ".gitignore"


def compile_spec(patterns: Iterable[str], source: Path | str) -> pathspec.PathSpec:
    """Compile gitignore-style patterns, reporting invalid globs as ``WalkError``."""
    patterns = list(patterns)
    try:
        return pathspec.GitIgnoreSpec.from_lines(patterns)
    except ValueError as exc:
        raise WalkError(f"Invalid glob pattern ({exc})", source) from exc


def _read_ignore_file(path: Path) -> list[str]:
    try:
        return path.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as exc:
        raise WalkError("Failed to read ignore file", path) from exc


@dataclass(frozen=True)
class _IgnoreLevel:
    base: str
    spec: pathspec.PathSpec

    def matches(self, rel: str) -> bool:
        if self.base:
            rel = rel[len(self.base) + 1 :]
        return self.spec.match_file(rel)


@dataclass
class WalkOptions:
    """Walk parameters.

    Attributes:
        excludes: Gitwildmatch globs pruned from the walk
        respect_gitignore: Honour ``.gitignore`` files found while walking
        hidden_allowed: Visit entries whose name starts with a dot
        extension: Only yield files with exactly this final extension
    """

    excludes: list[str] = field(default_factory=list)
    respect_gitignore: bool = True
    hidden_allowed: bool = True
    extension: str | None = None

    @classmethod
    def from_config(cls, config: Config, extension: str | None = None) -> WalkOptions:
        return cls(
            excludes=list(config.exclude),
            respect_gitignore=config.respect_gitignore,
            hidden_allowed=True,
            extension=extension,
        )

    def walk(self, root: Path) -> Iterator[Path]:
        """Lazily yield regular files under ``root``."""
        overrides = compile_spec([f"/{VCS_DIR}/", *self.excludes], "exclude")
        levels: list[_IgnoreLevel] = []
        if self.respect_gitignore:
            info_exclude = root / VCS_DIR / "info" / "exclude"
            if info_exclude.is_file():
                levels.append(
                    _IgnoreLevel("", compile_spec(_read_ignore_file(info_exclude), info_exclude))
                )

        suffix = f".{self.extension}" if self.extension is not None else None
        logger.debug(f"Walking {root} (extension={self.extension}, excludes={self.excludes})")
        return self._walk_dir(root, "", overrides, levels, suffix)

    def _walk_dir(
        self,
        directory: Path,
        rel_dir: str,
        overrides: pathspec.PathSpec,
        levels: list[_IgnoreLevel],
        suffix: str | None,
    ) -> Iterator[Path]:
        if self.respect_gitignore:
            gitignore = directory / GITIGNORE
            if gitignore.is_file():
                spec = compile_spec(_read_ignore_file(gitignore), gitignore)
                levels = [*levels, _IgnoreLevel(rel_dir, spec)]

        try:
            with os.scandir(directory) as it:
                entries = list(it)
        except OSError as exc:
            raise WalkError("Failed to read directory", directory) from exc

        for entry in entries:
            if not self.hidden_allowed and entry.name.startswith("."):
                continue

            rel = f"{rel_dir}/{entry.name}" if rel_dir else entry.name
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
                is_file = entry.is_file(follow_symlinks=False)
            except OSError as exc:
                raise WalkError("Failed to stat entry", entry.path) from exc

            if is_dir:
                if entry.name == VCS_DIR or self._ignored(f"{rel}/", overrides, levels):
                    logger.debug(f"Pruned directory: {rel}")
                    continue
                yield from self._walk_dir(
                    Path(entry.path), rel, overrides, levels, suffix
                )
            elif is_file:
                if self._ignored(rel, overrides, levels):
                    continue
                if suffix is not None and Path(entry.name).suffix != suffix:
                    continue
                yield Path(entry.path)

    @staticmethod
    def _ignored(
        rel: str, overrides: pathspec.PathSpec, levels: list[_IgnoreLevel]
    ) -> bool:
        if overrides.match_file(rel):
            return True
        return any(level.matches(rel) for level in levels)


def walk(
    root: Path,
    excludes: Iterable[str] = (),
    *,
    respect_gitignore: bool = True,
    hidden_allowed: bool = True,
    extension: str | None = None,
) -> Iterator[Path]:
    """Yield regular files under ``root`` that survive every filter."""
    options = WalkOptions(
        excludes=list(excludes),
        respect_gitignore=respect_gitignore,
        hidden_allowed=hidden_allowed,
        extension=extension,
    )
    return options.walk(root)
