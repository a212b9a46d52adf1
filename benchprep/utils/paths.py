# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""Path utilities for benchprep."""

from pathlib import Path


def ensure_directory(path: Path) -> Path:
    """Create a directory (and parents) if it doesn't exist. Returns the path for chaining."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def is_local_path(locator: str) -> bool:
    """True when a repository locator names a directory that exists on this machine."""
    try:
        return Path(locator).expanduser().is_dir()
    except OSError:
        return False
