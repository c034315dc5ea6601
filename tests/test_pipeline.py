import io
import os
from pathlib import Path

import pytest
from rich.console import Console

from sams.answers.prompter import ScriptedPrompter
from sams.core.errors import AnswerFileError, TaskError
from sams.sync.pipeline import Stage, SyncError, sync

CONFIG = """
template_suffix = "tpl"

[[parameters]]
kind = "text"
name = "name"

[[tasks]]
name = "first"
script = "first.sh"

[[tasks]]
name = "second"
script = "second.sh"
"""


@pytest.fixture
def console():
    return Console(file=io.StringIO(), force_terminal=False)


@pytest.fixture
def dotfiles(root, write_config, write_file):
    write_config(CONFIG)
    write_file("{{name}}.conf.ln", "linked")
    write_file("greeting.txt.tpl", "hello {{ name }}")
    write_file("first.sh", "cat app.conf greeting.txt > seen.txt\n")
    write_file("second.sh", "touch second-ran\n")
    return root


def test_sync_runs_every_stage_in_order(dotfiles, console):
    prompter = ScriptedPrompter({"name": "app"})

    sync(dotfiles, Path("sams.toml"), prompter, console=console)

    assert prompter.asked == ["name"]
    assert (dotfiles / "app.conf").is_symlink()
    assert (dotfiles / "greeting.txt").read_text() == "hello app"
    # install sees the outputs of link and render
    assert (dotfiles / "seen.txt").read_text() == "linkedhello app"
    assert (dotfiles / "second-ran").exists()


def test_sync_does_not_reprompt(dotfiles, console):
    sync(dotfiles, Path("sams.toml"), ScriptedPrompter({"name": "app"}), console=console)
    answers = (dotfiles / ".sams-answers.toml").read_bytes()

    prompter = ScriptedPrompter({})
    sync(dotfiles, Path("sams.toml"), prompter, console=console)

    assert prompter.asked == []
    assert (dotfiles / ".sams-answers.toml").read_bytes() == answers
    assert os.readlink(dotfiles / "app.conf") == str((dotfiles / "{{name}}.conf.ln").resolve())


def test_ask_again_overwrites_answers(dotfiles, console):
    sync(dotfiles, Path("sams.toml"), ScriptedPrompter({"name": "app"}), console=console)

    sync(
        dotfiles,
        Path("sams.toml"),
        ScriptedPrompter({"name": "other"}),
        ask_again=True,
        console=console,
    )

    assert (dotfiles / "greeting.txt").read_text() == "hello other"
    assert (dotfiles / "other.conf").is_symlink()


def test_failed_task_stops_sync(dotfiles, write_file, console):
    write_file("first.sh", "exit 2\n")

    with pytest.raises(SyncError) as info:
        sync(dotfiles, Path("sams.toml"), ScriptedPrompter({"name": "app"}), console=console)

    assert info.value.stage is Stage.INSTALL
    assert isinstance(info.value.__cause__, TaskError)
    assert "first" in str(info.value)
    assert "status 2" in str(info.value)
    assert not (dotfiles / "second-ran").exists()


def test_failed_stage_skips_later_stages(root, write_config, write_file, console):
    write_config('answer_file = "missing-dir/answers.toml"\n[[tasks]]\nscript = "t.sh"\n')
    write_file("t.sh", "touch ran\n")
    write_file("a.txt.tpl", "x")
    (root / "missing-dir").mkdir()
    (root / "missing-dir/answers.toml").write_text("broken = = toml")

    with pytest.raises(SyncError) as info:
        sync(root, Path("sams.toml"), ScriptedPrompter({}), console=console)

    assert info.value.stage is Stage.LINK
    assert isinstance(info.value.cause, AnswerFileError)
    assert not (root / "a.txt").exists()
    assert not (root / "ran").exists()
