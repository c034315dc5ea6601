"""Sync: Ask → Link → Render → Install, aborting at the first failure."""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path

from rich.console import Console

from ..answers.prompter import Prompter, ask
from ..core.errors import SamsError
from ..install.runner import install
from ..rendering.link import link
from ..rendering.render import render

logger = logging.getLogger(__name__)


class Stage(str, Enum):
    ASK = "ask"
    LINK = "link"
    RENDER = "render"
    INSTALL = "install"


class SyncError(SamsError):
    """Raised when a stage fails; the remaining stages are skipped."""

    def __init__(self, stage: Stage, cause: SamsError) -> None:
        super().__init__(f"Sync failed during {stage.value} stage: {cause}")
        self.stage = stage
        self.cause = cause


def sync(
    root: Path,
    config_path: Path,
    prompter: Prompter,
    *,
    ask_again: bool = False,
    console: Console | None = None,
) -> None:
    """Run every stage in order.

    Each stage reloads config and answers from disk.

    Args:
        root: Dotfiles root directory
        config_path: Config file, relative to ``root`` unless absolute
        prompter: Source of answers for the Ask stage
        ask_again: Prompt even when the answer file already exists
        console: Console for install progress
    """
    stages = (
        (Stage.ASK, lambda: ask(root, config_path, prompter, force=ask_again)),
        (Stage.LINK, lambda: link(root, config_path)),
        (Stage.RENDER, lambda: render(root, config_path)),
        (Stage.INSTALL, lambda: install(root, config_path, console)),
    )

    for stage, run in stages:
        logger.info(f"Stage: {stage.value}")
        try:
            run()
        except SamsError as exc:
            raise SyncError(stage, exc) from exc

    logger.info("Sync complete")
