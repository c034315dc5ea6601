"""Template rendering engine."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

import jinja2
from jinja2 import Environment, StrictUndefined

from ..core.errors import TemplateError

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def template_environment() -> Environment:
    """Jinja2 environment shared by content and path rendering.

    Undefined names raise instead of rendering as empty strings.
    """
    return Environment(
        undefined=StrictUndefined,
        autoescape=False,
        keep_trailing_newline=True,
    )


def render_string(
    template_text: str, context: Mapping[str, Any], source: Path | str = "<string>"
) -> str:
    """Substitute ``{{ name }}`` placeholders from ``context``.

    Args:
        template_text: Template source
        context: Answer map used for substitution
        source: Template origin, used in error messages

    Returns:
        Rendered text
    """
    env = template_environment()
    try:
        template = env.from_string(template_text)
        return template.render(dict(context))
    except jinja2.TemplateError as exc:
        raise TemplateError(exc.message or type(exc).__name__, source) from exc
    except (TypeError, ValueError, ArithmeticError, LookupError, AttributeError) as exc:
        raise TemplateError(f"{type(exc).__name__}: {exc}", source) from exc


def strip_suffix(path: Path, suffix: str) -> Path:
    """Drop the final ``.suffix`` extension from ``path``."""
    if path.suffix != f".{suffix}":
        raise ValueError(f"{path} does not end with .{suffix}")
    return path.with_name(path.name[: -len(suffix) - 1])


def render_content(
    template_path: Path, context: Mapping[str, Any], suffix: str
) -> tuple[Path, str]:
    """Content mode: render the whole file.

    Returns:
        Output path (suffix stripped) and rendered text
    """
    logger.debug(f"Rendering template: {template_path}")
    text = template_path.read_text(encoding="utf-8")
    return strip_suffix(template_path, suffix), render_string(
        text, context, template_path
    )


def render_link_destination(
    root: Path, source: Path, context: Mapping[str, Any], suffix: str
) -> Path:
    """Path mode: render the root-relative, suffix-stripped path of ``source``.

    ``~`` is expanded; a relative result is placed under ``root``.
    """
    relative = strip_suffix(source, suffix).relative_to(root)
    rendered = render_string(relative.as_posix(), context, source)
    destination = Path(rendered).expanduser()
    if destination.is_absolute():
        return destination
    return root / destination
