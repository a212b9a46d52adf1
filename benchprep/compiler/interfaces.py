# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Abstract base classes and result types for pluggable compilers.

Any compiler backend has to honour these contracts:

- Compiler.configure(options, classpath, output_dir, callback, reporter)
  returns a CompilerHandle. No compilation happens here, and bad options or
  missing classpath entries are NOT reported here. They show up on the
  first run.
- CompilerHandle.run(sources) compiles the given files into the single
  output directory fixed at configure time, reports each diagnostic to the
  reporter, hands the result to the callback, and returns it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence


@dataclass(frozen=True)
class Diagnostic:
    """One message the compiler emitted: an error, a warning, or an info line."""

    severity: str
    message: str
    path: Optional[str] = None
    line: Optional[int] = None


@dataclass(frozen=True)
class CompileResult:
    """Outcome of a single compiler run."""

    success: bool
    exit_code: int
    stdout: str
    stderr: str
    elapsed_seconds: float
    diagnostics: tuple[Diagnostic, ...] = ()


class Reporter(ABC):
    """
    Decides what happens with compiler diagnostics.

    A reporter sees every diagnostic of every run. `is_fatal` is how it
    turns a diagnostic into a failed run even when the compiler itself
    exited cleanly.
    """

    @abstractmethod
    def log(self, diagnostic: Diagnostic) -> None:
        ...

    @abstractmethod
    def is_fatal(self, diagnostic: Diagnostic) -> bool:
        ...

    def reset(self) -> None:
        """Forget per-run state. Called at the start of every run."""


class AnalysisCallback(ABC):
    """Receives the result of every run, in order."""

    @abstractmethod
    def on_result(self, sources: tuple[str, ...], result: CompileResult) -> None:
        ...


class CompilerHandle(ABC):
    """A configured compiler, ready for repeated runs."""

    @property
    @abstractmethod
    def options(self) -> tuple[str, ...]:
        """The exact option list the handle was configured with."""

    @property
    @abstractmethod
    def output_dir(self) -> Path:
        ...

    @abstractmethod
    def run(self, sources: Sequence[str]) -> CompileResult:
        ...


class Compiler(ABC):
    """Factory for compiler handles. `configure` is the expensive part."""

    @abstractmethod
    def configure(
        self,
        options: Sequence[str],
        classpath: str,
        output_dir: Path,
        callback: AnalysisCallback,
        reporter: Reporter,
    ) -> CompilerHandle:
        """Raises OSError when the output directory or other setup files can't be written."""
