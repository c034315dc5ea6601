import os
from pathlib import Path

import pytest

from sams.core.errors import WalkError
from sams.filesystem.walker import WalkOptions, walk


def relative(root: Path, paths) -> set[str]:
    return {path.relative_to(root).as_posix() for path in paths}


def test_yields_regular_files_recursively(root, write_file):
    write_file("a.txt")
    write_file("nested/deeper/b.txt")
    (root / "empty").mkdir()

    assert relative(root, walk(root)) == {"a.txt", "nested/deeper/b.txt"}


def test_vcs_directory_is_always_skipped(root, write_file):
    write_file(".git/config.tpl")
    write_file(".git/objects/x.tpl")
    write_file("sub/.git/HEAD")
    write_file("keep.tpl")

    for respect_gitignore in (True, False):
        found = relative(root, walk(root, respect_gitignore=respect_gitignore))
        assert found == {"keep.tpl"}


def test_exclude_globs_prune_files_and_directories(root, write_file):
    write_file("keep.tpl")
    write_file("notes.bak")
    write_file("excluded_dir/file.tpl")
    write_file("excluded_dir/inner/other.tpl")
    write_file("other/excluded_dir.tpl")

    found = relative(root, walk(root, ["excluded_dir/", "*.bak"]))

    assert found == {"keep.tpl", "other/excluded_dir.tpl"}


def test_excluded_directory_is_not_descended(root, write_file):
    write_file("keep.txt")
    locked = root / "locked"
    locked.mkdir()
    (locked / "secret.txt").write_text("x")
    os.chmod(locked, 0)
    try:
        found = relative(root, walk(root, ["locked/"]))
    finally:
        os.chmod(locked, 0o755)

    assert found == {"keep.txt"}


def test_extension_filter_matches_final_extension_exactly(root, write_file):
    write_file("a.txt.tpl")
    write_file("b.tpl.bak")
    write_file("c.xtpl")
    write_file("tpl")
    write_file("dir.tpl/d.conf")

    assert relative(root, walk(root, extension="tpl")) == {"a.txt.tpl"}


def test_hidden_files(root, write_file):
    write_file(".bashrc.tpl")
    write_file(".config/app.tpl")
    write_file("visible.tpl")

    assert relative(root, walk(root, hidden_allowed=True)) == {
        ".bashrc.tpl",
        ".config/app.tpl",
        "visible.tpl",
    }
    assert relative(root, walk(root, hidden_allowed=False)) == {"visible.tpl"}


def test_gitignore_is_honoured_when_enabled(root, write_file):
    write_file(".gitignore", "build/\n*.log\n")
    write_file("build/out.txt")
    write_file("debug.log")
    write_file("sub/.gitignore", "local.txt\n")
    write_file("sub/local.txt")
    write_file("local.txt")
    write_file("main.txt")

    assert relative(root, walk(root, respect_gitignore=True)) == {
        ".gitignore",
        "sub/.gitignore",
        "local.txt",
        "main.txt",
    }
    assert relative(root, walk(root, respect_gitignore=False)) == {
        ".gitignore",
        "sub/.gitignore",
        "build/out.txt",
        "debug.log",
        "sub/local.txt",
        "local.txt",
        "main.txt",
    }


def test_symlinks_are_not_yielded(root, write_file):
    target = write_file("real.txt")
    (root / "alias.txt").symlink_to(target)
    (root / "linked_dir").symlink_to(root)

    assert relative(root, walk(root)) == {"real.txt"}


@pytest.mark.filterwarnings("error::DeprecationWarning")
def test_globs_compile_without_deprecation_warnings(root, write_file):
    write_file("keep.txt")
    write_file("build/out.txt")
    write_file(".gitignore", "*.log\n")
    write_file("debug.log")

    found = relative(root, walk(root, ["build/"], respect_gitignore=True))

    assert found == {"keep.txt", ".gitignore"}


def test_invalid_glob_is_a_walk_error(root):
    with pytest.raises(WalkError, match="Invalid glob pattern"):
        list(walk(root, ["foo\\"]))


def test_unreadable_root_is_a_walk_error(tmp_path):
    with pytest.raises(WalkError, match="Failed to read directory"):
        list(walk(tmp_path / "missing"))


def test_options_from_config(write_config):
    from sams.core.config import load_config

    config = load_config(
        write_config('exclude = ["a/"]\nrespect_gitignore = false\n')
    )

    options = WalkOptions.from_config(config, extension="ln")

    assert options.excludes == ["a/"]
    assert options.respect_gitignore is False
    assert options.hidden_allowed is True
    assert options.extension == "ln"
