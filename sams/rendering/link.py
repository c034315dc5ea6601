"""Link stage: symlink files to a destination computed from their path."""

from __future__ import annotations

import logging
from pathlib import Path

from ..answers.store import answers_path, load_answers
from ..core.config import load_root_config
from ..core.errors import LinkError
from ..core.models import AnswerMap, Config
from ..filesystem.walker import WalkOptions
from .engine import render_link_destination
from .io import replace_with_symlink

logger = logging.getLogger(__name__)


def link_file(root: Path, source: Path, answers: AnswerMap, suffix: str) -> Path:
    """(Re)create the symlink for one link file.

    Args:
        root: Absolute dotfiles root
        source: Suffixed link file under ``root``
        answers: Rendering context for the path
        suffix: Link suffix without the leading dot

    Returns:
        Path of the created symlink
    """
    destination = render_link_destination(root, source, answers, suffix)
    try:
        replace_with_symlink(source, destination)
    except OSError as exc:
        raise LinkError(f"Failed to link {source}", destination) from exc

    logger.info(f"Linked {destination} → {source}")
    return destination


def link_all(root: Path, config: Config, answers: AnswerMap) -> list[Path]:
    """Link every link file under ``root``, stopping at the first failure."""
    root = root.resolve()
    options = WalkOptions.from_config(config, extension=config.link_suffix)
    links = [
        link_file(root, source, answers, config.link_suffix)
        for source in options.walk(root)
    ]
    logger.info(f"Successfully linked {len(links)} file(s)")
    return links


def link(root: Path, config_path: Path) -> list[Path]:
    """Run the Link stage with config and answers loaded fresh from disk."""
    config = load_root_config(root, config_path)
    answers = load_answers(answers_path(root, config))
    return link_all(root, config, answers)
