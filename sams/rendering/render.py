"""Render stage: materialize every template file next to its source."""

from __future__ import annotations

import logging
import stat
from pathlib import Path

from ..answers.store import answers_path, load_answers
from ..core.config import load_root_config
from ..core.errors import RenderError
from ..core.models import AnswerMap, Config
from ..filesystem.walker import WalkOptions
from .engine import render_content
from .io import atomic_write_text

logger = logging.getLogger(__name__)


def render_file(template_path: Path, answers: AnswerMap, suffix: str) -> Path:
    """Render one template and overwrite its output.

    Args:
        template_path: Suffixed template file
        answers: Rendering context
        suffix: Template suffix without the leading dot

    Returns:
        Output file path
    """
    try:
        mode = stat.S_IMODE(template_path.stat().st_mode)
        output_path, rendered_text = render_content(template_path, answers, suffix)
    except (OSError, UnicodeDecodeError) as exc:
        raise RenderError("Failed to read template", template_path) from exc

    try:
        atomic_write_text(output_path, rendered_text, mode=mode)
    except OSError as exc:
        raise RenderError("Failed to write output", output_path) from exc

    logger.info(f"Rendered {template_path} → {output_path}")
    return output_path


def render_all(root: Path, config: Config, answers: AnswerMap) -> list[Path]:
    """Render every template under ``root``, stopping at the first failure."""
    options = WalkOptions.from_config(config, extension=config.template_suffix)
    outputs = [
        render_file(path, answers, config.template_suffix)
        for path in options.walk(root)
    ]
    logger.info(f"Successfully rendered {len(outputs)} file(s)")
    return outputs


def render(root: Path, config_path: Path) -> list[Path]:
    """Run the Render stage with config and answers loaded fresh from disk."""
    config = load_root_config(root, config_path)
    answers = load_answers(answers_path(root, config))
    return render_all(root, config, answers)
