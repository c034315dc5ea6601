"""Thin wrappers around the ``git`` executable."""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Iterable

from ..core.errors import GitError

logger = logging.getLogger(__name__)


def ensure(commands: Iterable[str]) -> None:
    for name in commands:
        if shutil.which(name) is None:
            raise GitError(f"missing dependency: {name}")


def run_git(args: Iterable[str], *, cwd: Path | None = None, quiet: bool = False) -> None:
    """Run ``git`` with ``args``, raising ``GitError`` on a non-zero exit.

    Output is passed through to the terminal unless ``quiet`` is set, in which
    case it is captured and included in the error.
    """
    ensure(["git"])
    cmd = ["git", *args]
    logger.debug(f"Running: {' '.join(cmd)} (cwd={cwd or Path.cwd()})")
    try:
        result = subprocess.run(cmd, cwd=cwd, capture_output=quiet, text=True)
    except OSError as exc:
        raise GitError(f"Failed to execute `{' '.join(cmd)}`") from exc
    if result.returncode != 0:
        message = f"`{' '.join(cmd)}` exited with status {result.returncode}"
        if quiet and result.stderr:
            message += f"\nSTDERR: {result.stderr.strip()}"
        raise GitError(message)


def init_repo(directory: Path) -> bool:
    """Initialize a repository unless one already exists.

    Returns:
        True when a new repository was created
    """
    if (directory / ".git").exists():
        logger.debug(f"Git repository already present in {directory}")
        return False
    run_git(["init"], cwd=directory, quiet=True)
    logger.info(f"Initialized empty Git repository in {directory}")
    return True


def clone(url: str, dest: Path) -> None:
    run_git(["clone", url, str(dest)])
    logger.info(f"Cloned {url} → {dest}")


def pull(root: Path) -> None:
    run_git(["pull"], cwd=root)
