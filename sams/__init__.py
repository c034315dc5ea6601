"""Sams - template-driven dotfile manager.

Collects user answers, renders templates, links files and runs install tasks
from a single declarative ``sams.toml``.
"""

__version__ = "0.1.0"

# Configure logging for library use
import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Re-export main CLI entry point
from .cli import main

__all__ = ["main"]
