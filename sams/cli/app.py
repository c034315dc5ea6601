"""Main CLI application."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import typer
from click.shell_completion import get_completion_class
from typing_extensions import Annotated

from ..answers import prompter as prompting
from ..core import config as config_store
from ..core.errors import SamsError
from ..core.models import DEFAULT_CONFIG_FILE, DEFAULT_SCHEMA_FILE, default_config
from ..install import runner
from ..rendering import link as linking
from ..rendering import render as rendering
from ..sync import pipeline
from ..vcs import git
from .parsers import GlobalOptions, Settings, parse_log_level, parse_shell

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="sams",
    help="Template-driven dotfile manager: ask, link, render and install.",
    add_completion=False,
    no_args_is_help=True,
)


def _format_chain(exc: BaseException) -> str:
    lines = [str(exc)]
    cause = exc.__cause__
    while cause is not None:
        lines.append(f"  caused by: {cause}")
        cause = cause.__cause__
    return "\n".join(lines)


@contextmanager
def _reported() -> Iterator[None]:
    """Print ``SamsError`` chains and exit non-zero."""
    try:
        yield
    except SamsError as exc:
        logger.debug("Command failed", exc_info=True)
        typer.secho("error: ", fg=typer.colors.RED, bold=True, err=True, nl=False)
        typer.echo(_format_chain(exc), err=True)
        raise typer.Exit(code=1) from exc


def _options(ctx: typer.Context) -> GlobalOptions:
    return ctx.obj


@app.callback()
def main_callback(
    ctx: typer.Context,
    config_path: Annotated[
        Optional[Path],
        typer.Option(
            "--config",
            "-c",
            help=f"Config file, relative to the root directory (default: {DEFAULT_CONFIG_FILE}).",
            metavar="FILE",
        ),
    ] = None,
    root: Annotated[
        Optional[Path],
        typer.Option(
            "--root",
            "-r",
            help="Root directory (default: cwd).",
            metavar="DIR",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose logging.",
        ),
    ] = False,
) -> None:
    """Sync dotfiles from templates driven by sams.toml."""
    settings = Settings()
    level = "DEBUG" if verbose else parse_log_level(settings.log_level)
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")

    ctx.obj = GlobalOptions(
        config_path=config_path or settings.config,
        root=root or settings.root,
        verbose=verbose,
    )
    logger.debug(f"Options: {ctx.obj}")


@app.command()
def sync(
    ctx: typer.Context,
    ask: Annotated[
        bool,
        typer.Option("--ask", help="Overwrite the existing answers file."),
    ] = False,
) -> None:
    """Sync dotfiles."""
    opts = _options(ctx)
    with _reported():
        pipeline.sync(
            opts.root, opts.config_path, prompting.TerminalPrompter(), ask_again=ask
        )


@app.command()
def init(
    directory: Annotated[
        Path, typer.Argument(help="Directory to initialize.", metavar="DIR")
    ] = Path("."),
    no_git: Annotated[
        bool, typer.Option("--no-git", help="Do not initialize a git repository.")
    ] = False,
    file: Annotated[
        Path, typer.Option("--file", "-f", help="Config file.", metavar="FILE")
    ] = Path(DEFAULT_CONFIG_FILE),
    force: Annotated[
        bool, typer.Option("--force", help="Overwrite existing config file.")
    ] = False,
) -> None:
    """Initialize a new dotfile configuration."""
    with _reported():
        if not no_git:
            git.init_repo(directory)
        config_store.write_config(
            config_store.resolve_path(directory, file), default_config(), force=force
        )


@app.command()
def clone(
    ctx: typer.Context,
    url: Annotated[str, typer.Argument(help="Git repository URL.")],
    dest: Annotated[
        Path,
        typer.Option("--dest", "-d", help="Destination directory.", metavar="DIR"),
    ] = Path("~/.config"),
) -> None:
    """Clone a dotfile configuration and sync it."""
    opts = _options(ctx)
    destination = dest.expanduser()
    with _reported():
        git.clone(url, destination)
        pipeline.sync(
            destination,
            opts.config_path,
            prompting.TerminalPrompter(),
            ask_again=True,
        )


@app.command()
def ask(
    ctx: typer.Context,
    force: Annotated[
        bool, typer.Option("--force", help="Overwrite existing answers file.")
    ] = False,
) -> None:
    """(Plumbing) Interactively ask for dotfile configurations."""
    opts = _options(ctx)
    with _reported():
        prompting.ask(
            opts.root, opts.config_path, prompting.TerminalPrompter(), force=force
        )


@app.command()
def render(ctx: typer.Context) -> None:
    """(Plumbing) Render dotfile templates."""
    opts = _options(ctx)
    with _reported():
        rendering.render(opts.root, opts.config_path)


@app.command()
def link(ctx: typer.Context) -> None:
    """(Plumbing) Link files."""
    opts = _options(ctx)
    with _reported():
        linking.link(opts.root, opts.config_path)


@app.command()
def install(ctx: typer.Context) -> None:
    """(Plumbing) Run install scripts."""
    opts = _options(ctx)
    with _reported():
        runner.install(opts.root, opts.config_path)


@app.command()
def pull(ctx: typer.Context) -> None:
    """(Plumbing) Pull the dotfiles repository."""
    opts = _options(ctx)
    with _reported():
        git.pull(opts.root)


@app.command()
def completions(
    shell: Annotated[
        str,
        typer.Argument(
            help="The shell to generate the completions for (bash, zsh, fish).",
            parser=parse_shell,
        ),
    ],
) -> None:
    """(Plumbing) Generate shell completions."""
    completion_class = get_completion_class(shell)
    if completion_class is None:
        raise typer.BadParameter(f"Unsupported shell: {shell}")
    command = typer.main.get_command(app)
    completion = completion_class(command, {}, "sams", "_SAMS_COMPLETE")
    typer.echo(completion.source())


@app.command(name="json-schema", hidden=True)
def json_schema(
    file: Annotated[
        Path, typer.Option("--file", "-f", help="Output file.", metavar="FILE")
    ] = Path(DEFAULT_SCHEMA_FILE),
) -> None:
    """Generate json schema for the `sams.toml` config file."""
    with _reported():
        config_store.write_json_schema(file)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
