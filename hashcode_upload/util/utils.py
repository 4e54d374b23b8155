"""
Utility functions for project path management and log-safe formatting.
"""

import os
from pathlib import Path
from typing import Optional

manifest_name = "pyproject.toml"


def get_root_dir(start: Optional[Path] = None, marker: str = manifest_name) -> Path:
    """
    Get the root directory of the project by searching for the folder holding the given marker file.
    Falls back to the starting directory when no marker is found.

    :param start: Directory to start from, defaults to the current working directory.
    :param marker: File name identifying the project root.
    :return: Path to the project root directory.
    """
    current_dir = Path(start or Path.cwd()).resolve()

    # Walk up the directory tree until we find the project root
    for parent in [current_dir] + list(current_dir.parents):
        if (parent / marker).is_file():
            return parent

    return current_dir


def newest_build(builds_dir: str | Path) -> Optional[Path]:
    """Return the lexicographically last entry of the builds directory, or None if it is empty."""
    entries = sorted(os.listdir(builds_dir))
    if not entries:
        return None
    return Path(builds_dir) / entries[-1]


def shorten(value, length: int = 20) -> str:
    """Truncate tokens, URLs and blob keys before they reach the logs. At most half of the value is kept."""
    value = str(value)
    return f"{value[:min(length, len(value) // 2)]}..."
