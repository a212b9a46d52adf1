# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Environment checks for benchprep.

The pipeline shells out to git, sbt and scalac, so `info` reports which
of them resolve on PATH alongside the interpreter and platform.
"""

import platform
import shutil
import sys
from typing import NamedTuple, Optional, Sequence

MINIMUM_PYTHON = (3, 11)


class SystemInfo(NamedTuple):
    python_version: str
    platform: str
    architecture: str
    hostname: str


def check_minimum_python() -> None:
    """
    Raises:
        RuntimeError: If the interpreter is older than MINIMUM_PYTHON.
    """
    if sys.version_info[:2] < MINIMUM_PYTHON:
        required = ".".join(str(part) for part in MINIMUM_PYTHON)
        raise RuntimeError(
            f"benchprep requires Python >= {required}, running {platform.python_version()}"
        )


def get_system_info() -> SystemInfo:
    return SystemInfo(
        python_version=platform.python_version(),
        platform=platform.system(),
        architecture=platform.machine(),
        hostname=platform.node(),
    )


def locate_tools(executables: Sequence[str]) -> dict[str, Optional[str]]:
    """Map each executable name to its resolved path, or None when it isn't on PATH."""
    return {name: shutil.which(name) for name in executables}
