# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Shared pytest fixtures for benchprep tests.

Most pipeline tests don't need git, sbt or scalac. They use the stand-ins
below: a compiler that records configure() calls, a build tool that writes
canned probe output, and an acquirer that hands out a prepared directory.
"""

import os
import textwrap
from pathlib import Path
from typing import Optional, Sequence, Union

import pytest

from benchprep.compiler.interfaces import (
    AnalysisCallback,
    CompileResult,
    Compiler,
    CompilerHandle,
    Reporter,
)
from benchprep.pipeline.build_tool import BuildTool, InjectedTask
from benchprep.pipeline.errors import PipelineError
from benchprep.pipeline.models import WorkingTree
from benchprep.utils.filesystem import append_text


class FakeHandle(CompilerHandle):
    def __init__(
        self,
        options: tuple[str, ...],
        classpath: str,
        output_dir: Path,
        callback: AnalysisCallback,
        reporter: Reporter,
    ) -> None:
        self._options = options
        self.classpath = classpath
        self._output_dir = output_dir
        self.callback = callback
        self.reporter = reporter
        self.runs: list[tuple[str, ...]] = []

    @property
    def options(self) -> tuple[str, ...]:
        return self._options

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    def run(self, sources: Sequence[str]) -> CompileResult:
        sources = tuple(sources)
        self.runs.append(sources)
        result = CompileResult(
            success=True, exit_code=0, stdout="", stderr="", elapsed_seconds=0.0
        )
        self.callback.on_result(sources, result)
        return result


class FakeCompiler(Compiler):
    """Records every configure() call and hands back a FakeHandle."""

    def __init__(self) -> None:
        self.handles: list[FakeHandle] = []

    def configure(
        self,
        options: Sequence[str],
        classpath: str,
        output_dir: Path,
        callback: AnalysisCallback,
        reporter: Reporter,
    ) -> FakeHandle:
        handle = FakeHandle(tuple(options), classpath, Path(output_dir), callback, reporter)
        self.handles.append(handle)
        return handle


class ScriptedBuildTool(BuildTool):
    """
    Build tool whose task runs write canned output.

    `outputs` maps a task name to the text (or raw bytes) its output file
    should contain; a task missing from `outputs` runs fine but writes
    nothing. `failures` maps a task name to an exception run_task raises
    instead.
    """

    def __init__(
        self,
        outputs: Optional[dict[str, Union[str, bytes]]] = None,
        failures: Optional[dict[str, PipelineError]] = None,
    ) -> None:
        self.outputs = outputs or {}
        self.failures = failures or {}
        self.injected: list[str] = []
        self.ran: list[str] = []

    def inject_task(self, project_root: Path, name: str, body: str) -> InjectedTask:
        append_text(project_root / "build.sbt", body)
        self.injected.append(name)
        return InjectedTask(name=name, project_root=project_root)

    def run_task(self, task: InjectedTask) -> None:
        self.ran.append(task.name)
        if task.name in self.failures:
            raise self.failures[task.name]
        output = self.outputs.get(task.name)
        target = task.project_root / f"{task.name}.out"
        if isinstance(output, bytes):
            target.write_bytes(output)
        elif output is not None:
            target.write_text(output, encoding="utf-8")


class FakeAcquirer:
    """Stands in for SourceAcquirer: returns `root` as the clone, or raises `error`."""

    def __init__(self, root: Path, error: Optional[PipelineError] = None) -> None:
        self.root = root
        self.error = error
        self.calls: list[tuple[str, str]] = []

    def acquire(self, repository: str, revision: str) -> WorkingTree:
        self.calls.append((repository, revision))
        if self.error is not None:
            raise self.error
        self.root.mkdir(parents=True, exist_ok=True)
        return WorkingTree(root=self.root, repository=repository, revision=revision)


def probe_output(sources: Sequence[str], classpath: Sequence[str], options: Sequence[str]) -> str:
    """Render probe output the way the sbt task writes it."""
    return "\n".join([" ".join(sources), os.pathsep.join(classpath), " ".join(options)]) + "\n"


@pytest.fixture()
def fake_compiler() -> FakeCompiler:
    return FakeCompiler()


@pytest.fixture()
def working_tree(tmp_path: Path) -> WorkingTree:
    """A directory shaped like a freshly cloned sbt project."""
    root = tmp_path / "clone"
    root.mkdir()
    (root / "build.sbt").write_text('name := "demo"\n', encoding="utf-8")
    return WorkingTree(root=root, repository="acme/demo", revision="abc123")


@pytest.fixture()
def tmp_config_file(tmp_path: Path) -> Path:
    """The smallest config that passes schema validation."""
    config_content = textwrap.dedent("""\
        global:
          config_version: "1.0.0"
          project_name: "benchprep-test"
          log_level: "DEBUG"
    """)
    config_file = tmp_path / "test_config.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def invalid_config_file(tmp_path: Path) -> Path:
    """Valid YAML, but the required config_version is missing."""
    config_content = textwrap.dedent("""\
        global:
          project_name: "benchprep-test"
    """)
    config_file = tmp_path / "invalid_config.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def broken_yaml_file(tmp_path: Path) -> Path:
    config_file = tmp_path / "broken.yaml"
    config_file.write_text("{{not: yaml: at: all:::", encoding="utf-8")
    return config_file
