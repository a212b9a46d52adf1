# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Build tool capability: put a task into a project's build, then run it.

The probe only needs two things from a build tool, so that's all the
interface has. SbtBuildTool implements injection by appending text to the
build description. It doesn't parse build.sbt and has no idea whether the
file tolerates an extra definition at the end; if it doesn't, sbt fails to
load the project and the run surfaces as a BuildToolInvocationError or an
OutputFormatError. A structured mechanism (an sbt plugin, a BSP
connection) can replace it without touching the probe.
"""

import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import NamedTuple, Optional, Sequence

from benchprep.logging.logger import get_logger
from benchprep.pipeline.errors import BuildFileAppendError, BuildToolInvocationError
from benchprep.utils.filesystem import append_text

logger = get_logger(__name__)


class InjectedTask(NamedTuple):
    """A task that has been added to a project's build and can now be run."""

    name: str
    project_root: Path


class BuildTool(ABC):
    """What the metadata probe needs from a build tool."""

    @abstractmethod
    def inject_task(self, project_root: Path, name: str, body: str) -> InjectedTask:
        """
        Make `body` (a definition of task `name`) part of the project's build.

        Injecting a name the build already defines is a no-op.
        """

    @abstractmethod
    def run_task(self, task: InjectedTask) -> None:
        """Evaluate a previously injected task. Returns only if the tool succeeded."""


def _output_tail(text: Optional[str], limit: int = 4000) -> str:
    if not text:
        return ""
    return text.strip()[-limit:]


class SbtBuildTool(BuildTool):
    """
    sbt driven through its command line.

    `command` is the launcher prefix, e.g. ["sbt"] or
    ["sbt", "-Dsbt.log.noformat=true"]. When `scala_version` is set the
    task runs after `++<version>`, which switches the build's Scala
    version for that invocation.
    """

    def __init__(
        self,
        command: Sequence[str] = ("sbt",),
        scala_version: Optional[str] = None,
        build_file: str = "build.sbt",
        timeout_seconds: Optional[int] = None,
    ) -> None:
        if not command:
            raise ValueError("sbt command must not be empty")
        self._command = tuple(command)
        self._scala_version = scala_version
        self._build_file = build_file
        self._timeout_seconds = timeout_seconds

    def build_file_path(self, project_root: Path) -> Path:
        return project_root / self._build_file

    def command_for(self, task_name: str) -> list[str]:
        command = list(self._command)
        if self._scala_version:
            command.append(f"++{self._scala_version}")
        command.append(task_name)
        return command

    @staticmethod
    def _defines(build_file: Path, name: str) -> bool:
        if not build_file.exists():
            return False
        try:
            existing = build_file.read_text(encoding="utf-8", errors="replace")
        except OSError as err:
            raise BuildFileAppendError(f"Cannot read build file {build_file}: {err}") from err
        return f"lazy val `{name}`" in existing

    def inject_task(self, project_root: Path, name: str, body: str) -> InjectedTask:
        build_file = self.build_file_path(project_root)
        if self._defines(build_file, name):
            # sbt refuses to load a build that defines the same val twice.
            logger.debug(
                "Probe task already defined",
                extra={"task": name, "build_file": str(build_file)},
            )
            return InjectedTask(name=name, project_root=project_root)

        try:
            append_text(build_file, body)
        except OSError as err:
            raise BuildFileAppendError(f"Cannot append probe task to {build_file}: {err}") from err

        logger.debug(
            "Probe task appended",
            extra={"task": name, "build_file": str(build_file), "bytes": len(body)},
        )
        return InjectedTask(name=name, project_root=project_root)

    def run_task(self, task: InjectedTask) -> None:
        command = self.command_for(task.name)
        logger.info(
            "Running build tool",
            extra={"command": command, "cwd": str(task.project_root)},
        )

        try:
            # stdin closed so sbt's "(r)etry, (q)uit" prompt on a broken
            # build fails fast instead of waiting for input.
            completed = subprocess.run(
                command,
                cwd=str(task.project_root),
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                timeout=self._timeout_seconds,
            )
        except FileNotFoundError as err:
            raise BuildToolInvocationError(
                f"Build tool executable not found: {command[0]}"
            ) from err
        except subprocess.TimeoutExpired as err:
            raise BuildToolInvocationError(
                f"Build tool timed out after {self._timeout_seconds} seconds running {task.name}"
            ) from err
        except OSError as err:
            raise BuildToolInvocationError(f"Build tool could not be started: {err}") from err

        if completed.returncode != 0:
            # sbt reports most failures on stdout.
            details = _output_tail(completed.stderr) or _output_tail(completed.stdout)
            raise BuildToolInvocationError(
                f"Build tool exited with code {completed.returncode} running {task.name}: {details}"
            )

        logger.debug(
            "Build tool finished",
            extra={"task": task.name, "exit_code": completed.returncode},
        )
