"""Error taxonomy shared by every stage.

Each error names the path or task that caused it. Stages never recover
locally; errors propagate to the CLI which prints the causal chain.
"""

from __future__ import annotations

from pathlib import Path


class SamsError(Exception):
    """Base class for all errors surfaced to the user."""


class ConfigError(SamsError):
    """Raised when the config file cannot be opened, read or parsed."""

    def __init__(self, message: str, path: Path) -> None:
        super().__init__(f"{message}: '{path}'")
        self.path = path


class AnswerFileError(ConfigError):
    """Raised when the answer file cannot be read, parsed or written."""


class PromptError(SamsError):
    """Raised when interactive input is interrupted or unavailable."""

    def __init__(self, parameter: str, reason: str) -> None:
        super().__init__(f"Failed to read answer for '{parameter}': {reason}")
        self.parameter = parameter


class ParseError(SamsError):
    """Raised when raw text cannot be coerced to the declared data type."""

    def __init__(self, raw: str, data_type: str) -> None:
        super().__init__(f"Failed to parse '{raw}' as {data_type}")
        self.raw = raw
        self.data_type = data_type


class WalkError(SamsError):
    """Raised on unreadable directories or invalid exclude globs."""

    def __init__(self, message: str, path: Path | str) -> None:
        super().__init__(f"{message}: '{path}'")
        self.path = path


class TemplateError(SamsError):
    """Raised on template syntax errors or undefined variables."""

    def __init__(self, message: str, source: Path | str) -> None:
        super().__init__(f"Failed to render template '{source}': {message}")
        self.source = source


class RenderError(SamsError):
    """Raised when a template cannot be read or its output cannot be written."""

    def __init__(self, message: str, path: Path) -> None:
        super().__init__(f"{message}: '{path}'")
        self.path = path


class LinkError(SamsError):
    """Raised when a link destination cannot be cleared or created."""

    def __init__(self, message: str, path: Path) -> None:
        super().__init__(f"{message}: '{path}'")
        self.path = path


class TaskError(SamsError):
    """Raised when an install task fails to start or exits non-zero."""

    def __init__(
        self,
        name: str,
        *,
        returncode: int | None = None,
        stderr: str = "",
        reason: str | None = None,
    ) -> None:
        if reason is None:
            reason = f"exited with status {returncode}"
        message = f"Task '{name}' failed: {reason}"
        if stderr.strip():
            message += f"\nSTDERR: {stderr.strip()}"
        super().__init__(message)
        self.name = name
        self.returncode = returncode
        self.stderr = stderr


class GitError(SamsError):
    """Raised when a git command is missing or fails."""
