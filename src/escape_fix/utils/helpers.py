"""Helper utility functions for escape-fix."""

import shlex
import shutil
from typing import Optional


def is_tool_available(tool_name):
    """Check if a command-line tool is available.

    Args:
        tool_name (str): Name of the tool to check.

    Returns:
        bool: True if the tool is available, False otherwise.
    """
    return shutil.which(tool_name) is not None


def command_executable(command: str) -> Optional[str]:
    """Return the executable a shell command line starts with.

    Leading ``NAME=value`` environment assignments are skipped.

    Args:
        command (str): Shell command line, e.g. ``bundle exec jekyll build``.

    Returns:
        Optional[str]: The program name, or None if it cannot be determined.
    """
    try:
        parts = shlex.split(command)
    except ValueError:
        return None

    for part in parts:
        if '=' in part and not part.startswith(('/', '.')) and part.split('=', 1)[0].isidentifier():
            continue
        return part
    return None


def pluralize(count: int, word: str) -> str:
    """Format ``count word`` with a naive plural suffix."""
    return f"{count} {word}{'' if count == 1 else 's'}"
