"""Collecting answers for the declared parameters (the Ask stage)."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Mapping, Protocol, Sequence

import click
import typer

from ..core.config import load_root_config
from ..core.errors import ParseError, PromptError
from ..core.models import (
    AnswerMap,
    DataType,
    SelectParameter,
    TextParameter,
    Value,
    format_value,
)
from .store import answers_path, save_answers

logger = logging.getLogger(__name__)

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_INT_MIN = -(2**63)
_INT_MAX = 2**63 - 1


class Prompter(Protocol):
    """Capability for collecting one answer at a time."""

    def select_one(self, message: str, options: Sequence[Value]) -> Value: ...

    def read_text(
        self, message: str, default: str | None, placeholder: str | None
    ) -> str: ...


class TerminalPrompter:
    """Interactive prompts on the controlling terminal."""

    def select_one(self, message: str, options: Sequence[Value]) -> Value:
        typer.echo(message)
        for index, option in enumerate(options, start=1):
            typer.echo(f"  {index}) {format_value(option)}")
        choice = typer.prompt(
            "Choose an option",
            default=1,
            type=click.IntRange(1, len(options)),
        )
        return options[choice - 1]

    def read_text(
        self, message: str, default: str | None, placeholder: str | None
    ) -> str:
        if placeholder and default is None:
            message = f"{message} (e.g. {placeholder})"
        return typer.prompt(
            message,
            default="" if default is None else default,
            show_default=default is not None,
        )


class ScriptedPrompter:
    """Replays canned answers keyed by prompt message.

    Select answers may be given either as the option value or its display form.
    """

    def __init__(self, answers: Mapping[str, Value]) -> None:
        self._answers = dict(answers)
        self.asked: list[str] = []

    def _next(self, message: str) -> Value:
        self.asked.append(message)
        if message not in self._answers:
            raise click.exceptions.Abort()
        return self._answers[message]

    def select_one(self, message: str, options: Sequence[Value]) -> Value:
        wanted = self._next(message)
        for option in options:
            if option == wanted or format_value(option) == format_value(wanted):
                return option
        raise click.exceptions.Abort()

    def read_text(
        self, message: str, default: str | None, placeholder: str | None
    ) -> str:
        answer = format_value(self._next(message))
        if answer == "" and default is not None:
            return default
        return answer


def parse_answer(raw: str, data_type: DataType) -> Value:
    """Coerce raw text to the declared data type.

    Integers are signed 64-bit with ASCII digits only; neither integers nor
    floats may carry surrounding whitespace or digit separators.
    """
    if data_type is DataType.INT:
        if not _INT_PATTERN.fullmatch(raw):
            raise ParseError(raw, "integer")
        value = int(raw)
        if not _INT_MIN <= value <= _INT_MAX:
            raise ParseError(raw, "integer")
        return value
    if data_type is DataType.FLOAT:
        if not raw.isascii() or raw != raw.strip() or "_" in raw:
            raise ParseError(raw, "float")
        try:
            return float(raw)
        except ValueError as exc:
            raise ParseError(raw, "float") from exc
    return raw


def collect_answers(
    parameters: Iterable[SelectParameter | TextParameter], prompter: Prompter
) -> AnswerMap:
    """Prompt for every parameter in declaration order.

    Duplicate names overwrite earlier answers.
    """
    answers: AnswerMap = {}
    for parameter in parameters:
        try:
            if isinstance(parameter, SelectParameter):
                value = prompter.select_one(parameter.message, parameter.options)
            else:
                raw = prompter.read_text(
                    parameter.message, parameter.default, parameter.placeholder
                )
                value = parse_answer(raw, parameter.data_type)
        except (click.exceptions.Abort, EOFError, KeyboardInterrupt) as exc:
            raise PromptError(parameter.name, "input aborted") from exc

        logger.debug(f"Answer for {parameter.name}: {value!r}")
        answers[parameter.name] = value

    return answers


def ask(root: Path, config_path: Path, prompter: Prompter, *, force: bool = False) -> bool:
    """Run the Ask stage.

    Args:
        root: Dotfiles root directory
        config_path: Config file, relative to ``root`` unless absolute
        prompter: Source of answers
        force: Prompt even when the answer file already exists

    Returns:
        True when answers were collected and written
    """
    config = load_root_config(root, config_path)
    path = answers_path(root, config)

    if not force and path.exists():
        logger.info(f"Answer file exists, skipping prompts: {path}")
        return False

    answers = collect_answers(config.parameters, prompter)
    save_answers(path, answers)
    return True
