"""Answer file persistence."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path

import tomli_w
from pydantic import TypeAdapter, ValidationError

from ..core.config import resolve_path
from ..core.errors import AnswerFileError
from ..core.models import AnswerMap, Config
from ..rendering.io import atomic_write_text

logger = logging.getLogger(__name__)

_ANSWERS = TypeAdapter(AnswerMap)


def answers_path(root: Path, config: Config) -> Path:
    """Location of the answer file for a config rooted at ``root``."""
    return resolve_path(root, config.answer_file)


def load_answers(path: Path) -> AnswerMap:
    """Read the answer file.

    Args:
        path: Answer file path

    Returns:
        Mapping of parameter name to value
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise AnswerFileError(
            "Answer file not found (run 'sams ask' first)", path
        ) from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise AnswerFileError("Failed to read answer file", path) from exc

    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise AnswerFileError("Failed to parse answer file", path) from exc

    try:
        return _ANSWERS.validate_python(data)
    except ValidationError as exc:
        raise AnswerFileError("Answer file must map names to scalar values", path) from exc


def save_answers(path: Path, answers: AnswerMap) -> None:
    """Overwrite the answer file with the full answer map."""
    text = tomli_w.dumps(answers)
    try:
        atomic_write_text(path, text)
    except OSError as exc:
        raise AnswerFileError("Failed to write answers to file", path) from exc
    logger.info(f"Saved {len(answers)} answer(s) → {path}")
