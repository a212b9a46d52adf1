# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Data models for the setup pipeline.

Everything here is a frozen dataclass. A ProjectReference is what the
caller asks for, a WorkingTree is the pinned clone, SubprojectMetadata is
what sbt told us about one subproject, and a CompileJob is the end
product the benchmark harness consumes. PipelineResult wraps the whole
run: either every job, or the first error.
"""

import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence

from benchprep.compiler.interfaces import CompileResult, CompilerHandle
from benchprep.logging.logger import get_logger
from benchprep.pipeline.errors import PipelineError

logger = get_logger(__name__)


@dataclass(frozen=True)
class ProjectReference:
    """
    What to benchmark: a repository pinned to a revision, and the sbt
    subprojects to turn into compile jobs (in the order given).
    """

    repository: str
    revision: str
    subprojects: tuple[str, ...]
    use_host_classpath: bool = True
    name: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "subprojects", tuple(self.subprojects))
        if not self.name:
            object.__setattr__(self, "name", self.repository)


@dataclass(frozen=True)
class WorkingTree:
    """A revision-pinned clone in its own temporary directory."""

    root: Path
    repository: str
    revision: str

    def cleanup(self) -> None:
        """Remove the clone and everything in it. Safe to call twice."""
        if self.root.is_dir():
            shutil.rmtree(self.root, ignore_errors=True)
            logger.debug("Working tree removed", extra={"path": str(self.root)})


@dataclass(frozen=True)
class SubprojectMetadata:
    """
    Classpath, sources and scalac options of one subproject.

    The classpath stays a single string joined with the platform path
    separator, exactly as scalac's -classpath wants it.
    """

    classpath: str
    sources: tuple[str, ...]
    options: tuple[str, ...]

    @classmethod
    def from_lines(cls, sources_line: str, classpath_line: str, options_line: str) -> "SubprojectMetadata":
        """Build from the three probe output lines, trimming each one."""
        return cls(
            classpath=classpath_line.strip(),
            sources=_split_words(sources_line),
            options=_split_words(options_line),
        )

    @property
    def classpath_entries(self) -> tuple[str, ...]:
        if not self.classpath:
            return ()
        return tuple(self.classpath.split(os.pathsep))

    def with_options(self, options: Sequence[str]) -> "SubprojectMetadata":
        return SubprojectMetadata(
            classpath=self.classpath,
            sources=self.sources,
            options=tuple(options),
        )


def _split_words(line: str) -> tuple[str, ...]:
    stripped = line.strip()
    if not stripped:
        return ()
    return tuple(part for part in stripped.split(" ") if part)


@dataclass(frozen=True)
class CompileJob:
    """
    One subproject, ready to be compiled over and over.

    `metadata.options` is the option list the compiler was configured
    with, host-classpath flag included.
    """

    subproject: str
    working_directory: Path
    metadata: SubprojectMetadata
    compiler: CompilerHandle

    def compile(self) -> CompileResult:
        """Run the primed compiler over this subproject's sources once."""
        return self.compiler.run(self.metadata.sources)


@dataclass(frozen=True)
class PipelineResult:
    """
    The outcome of one pipeline run.

    Either `jobs` holds one CompileJob per requested subproject in request
    order and `error` is None, or `error` holds the first failure and
    `jobs` is empty. There is no partial success.
    """

    project: ProjectReference
    jobs: tuple[CompileJob, ...] = ()
    error: Optional[PipelineError] = None
    working_tree: Optional[WorkingTree] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "jobs", tuple(self.jobs))
        if self.error is not None and self.jobs:
            raise ValueError("A failed PipelineResult cannot carry jobs")

    @property
    def ok(self) -> bool:
        return self.error is None

    def get_or_raise(self) -> tuple[CompileJob, ...]:
        """Return the jobs, or raise the error that stopped the run."""
        if self.error is not None:
            raise self.error
        return self.jobs

    def cleanup(self) -> None:
        """Dispose of the working tree, if one was created. Jobs are unusable afterwards."""
        if self.working_tree is not None:
            self.working_tree.cleanup()
