"""Install stage: run the configured tasks in order, failing fast."""

from __future__ import annotations

import logging
import subprocess
import tempfile
from pathlib import Path
from typing import Sequence

from rich.console import Console
from rich.markup import escape
from rich.progress import (
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
)

from ..core.config import load_root_config
from ..core.errors import TaskError
from ..core.models import Task

logger = logging.getLogger(__name__)


def progress_display(console: Console | None = None) -> Progress:
    """Spinner, task name, position and the latest output line.

    Refreshed from the read loop only; no background refresh thread.
    """
    return Progress(
        SpinnerColumn(style="cyan bold"),
        TextColumn("[yellow bold]Running[/] [bold]{task.description}"),
        MofNCompleteColumn(),
        TextColumn("{task.fields[line]}", markup=False),
        console=console,
        transient=True,
        auto_refresh=False,
    )


def run_task(
    task: Task, root: Path, progress: Progress, progress_id: TaskID
) -> None:
    """Run one task, streaming stdout lines into the progress display.

    stderr is spooled to a temporary file and reported on failure.
    """
    name = task.display_name
    workdir = root / task.workdir
    logger.debug(f"Starting task {name}: {task.shell} {task.script} (cwd={workdir})")

    with tempfile.TemporaryFile(mode="w+", encoding="utf-8", errors="replace") as stderr_buf:
        try:
            proc = subprocess.Popen(
                [task.shell, str(task.script)],
                cwd=workdir,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=stderr_buf,
                text=True,
                errors="replace",
            )
        except OSError as exc:
            raise TaskError(name, reason=f"failed to start command ({exc})") from exc

        try:
            with proc.stdout:
                for line in proc.stdout:
                    line = line.rstrip("\n")
                    logger.debug(f"[{name}] {line}")
                    progress.update(progress_id, line=line, refresh=True)
        except BaseException:
            logger.debug(f"Killing task {name} (pid {proc.pid})")
            proc.kill()
            proc.wait()
            raise

        returncode = proc.wait()
        stderr_buf.seek(0)
        stderr = stderr_buf.read()

    if returncode != 0:
        raise TaskError(name, returncode=returncode, stderr=stderr)


def run_tasks(
    tasks: Sequence[Task], root: Path, console: Console | None = None
) -> int:
    """Run every task in declaration order.

    Args:
        tasks: Tasks to run
        root: Directory that task workdirs are relative to
        console: Console for progress output (default: stderr)

    Returns:
        Number of tasks run
    """
    total = len(tasks)
    logger.info(f"Running {total} install task(s)")
    console = console or Console(stderr=True)

    with progress_display(console) as progress:
        progress_id = progress.add_task("", total=total, line="")
        for index, task in enumerate(tasks, start=1):
            name = task.display_name
            progress.update(progress_id, description=escape(name), line="", refresh=True)

            run_task(task, root, progress, progress_id)

            progress.advance(progress_id)
            progress.console.print(
                f"[green bold]✓ Finished[/] [bold]{escape(name)}[/] ({index}/{total})",
                highlight=False,
            )
            logger.info(f"Finished task {name} ({index}/{total})")

    return total


def install(root: Path, config_path: Path, console: Console | None = None) -> int:
    """Run the Install stage with the config loaded fresh from disk."""
    config = load_root_config(root, config_path)
    return run_tasks(config.tasks, root, console)
