"""Domain models for the ``sams.toml`` configuration."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr

Value = Union[StrictInt, StrictFloat, StrictStr]
"""A scalar answer: integer, float or string."""

AnswerMap = dict[str, Value]

DEFAULT_CONFIG_FILE = "sams.toml"
DEFAULT_ANSWER_FILE = ".sams-answers.toml"
DEFAULT_SCHEMA_FILE = "sams.schema.json"


def format_value(value: Value) -> str:
    """Return the canonical textual form of a value."""
    return str(value)


class DataType(str, Enum):
    """Type a free-text answer is coerced to."""

    INT = "int"
    FLOAT = "float"
    STR = "str"


class _Model(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)


class SelectParameter(_Model):
    """Pick one value from a fixed list of options."""

    kind: Literal["select"] = "select"
    name: str = Field(..., description="The name of the parameter")
    description: str | None = Field(
        default=None, description="The description which will be displayed in the prompt"
    )
    options: list[Value] = Field(
        ..., min_length=1, description="A list of options to choose from"
    )

    @property
    def message(self) -> str:
        return self.description or self.name


class TextParameter(_Model):
    """Free-text answer coerced to ``data_type``."""

    kind: Literal["text"] = "text"
    name: str = Field(..., description="The name of the parameter")
    description: str | None = Field(
        default=None, description="The description which will be displayed in the prompt"
    )
    default: str | None = Field(
        default=None,
        description="The default value which will be used if the user does not provide any input",
    )
    placeholder: str | None = Field(
        default=None, description="A placeholder value which will be displayed in the prompt"
    )
    data_type: DataType = Field(
        default=DataType.STR, alias="type", description="The type of the user parameter"
    )

    @property
    def message(self) -> str:
        return self.description or self.name


Parameter = Annotated[
    Union[SelectParameter, TextParameter], Field(discriminator="kind")
]


class Task(_Model):
    """A single install script."""

    script: Path = Field(..., description="The script to run")
    name: str | None = Field(default=None, description="The name of the task")
    workdir: Path = Field(
        default=Path("."),
        description="The working directory in which the command will be executed",
    )
    shell: str = Field(default="sh", description="The shell to use to run the command")

    @property
    def display_name(self) -> str:
        return self.name or str(self.script)


class Config(_Model):
    """The configuration of the application."""

    answer_file: Path = Field(
        default=Path(DEFAULT_ANSWER_FILE),
        description="The file in which user parameters will be stored",
    )
    exclude: list[str] = Field(
        default_factory=list, description="Glob patterns excluded from every walk"
    )
    template_suffix: str = Field(
        default="tpl", min_length=1, description="The suffix of the template files"
    )
    link_suffix: str = Field(
        default="ln", min_length=1, description="The suffix of the link files"
    )
    respect_gitignore: bool = Field(
        default=True, description="Whether to respect `.gitignore` files while walking"
    )
    parameters: list[Parameter] = Field(
        default_factory=list, description="The list of parameters to ask the user"
    )
    tasks: list[Task] = Field(
        default_factory=list, description="List of install tasks to run"
    )


def default_config() -> Config:
    """Starter config written by ``sams init``."""
    return Config(
        parameters=[
            TextParameter(
                name="user",
                description="Enter username",
                placeholder="username",
            )
        ]
    )
