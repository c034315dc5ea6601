"""File I/O operations for rendering and linking."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path


def ensure_parent(path: Path) -> None:
    """Ensure parent directories exist for the given path.

    Args:
        path: Path whose parent directories should be created
    """
    path.parent.mkdir(parents=True, exist_ok=True)


def atomic_write_text(path: Path, text: str, mode: int = 0o644) -> None:
    """Write text to a file atomically using a temporary file.

    An existing file or symlink at ``path`` is replaced in a single step.

    Args:
        path: Destination file path
        text: Text content to write
        mode: File permissions (octal)
    """
    ensure_parent(path)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as tmp:
            tmp.write(text)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def remove_entry(path: Path) -> bool:
    """Remove a file, symlink or empty directory at ``path``.

    Non-empty directories are left alone and raise ``OSError``.

    Returns:
        True when something was removed
    """
    if path.is_symlink() or path.is_file():
        path.unlink()
        return True
    if path.is_dir():
        path.rmdir()
        return True
    if os.path.lexists(path):
        path.unlink()
        return True
    return False


def replace_with_symlink(target: Path, link: Path) -> None:
    """Point ``link`` at ``target``, clearing whatever is at ``link`` first."""
    ensure_parent(link)
    remove_entry(link)
    link.symlink_to(target)
