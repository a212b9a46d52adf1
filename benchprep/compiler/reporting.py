# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Default reporter and callback used by provisioned benchmark jobs.

Benchmark runs compile third-party code with whatever flags the project
ships, which often means a wall of deprecation warnings. None of that may
abort a run, so the default reporter logs and moves on. The default
callback just keeps results in memory; it never touches the filesystem.
"""

from benchprep.compiler.interfaces import AnalysisCallback, CompileResult, Diagnostic, Reporter
from benchprep.logging.logger import get_logger

logger = get_logger(__name__)


class NonFatalReporter(Reporter):
    """Logs every diagnostic at DEBUG and never treats one as fatal."""

    def __init__(self) -> None:
        self.warning_count = 0
        self.error_count = 0

    def log(self, diagnostic: Diagnostic) -> None:
        if diagnostic.severity == "error":
            self.error_count += 1
        elif diagnostic.severity == "warning":
            self.warning_count += 1
        logger.debug(
            "Compiler diagnostic",
            extra={
                "severity": diagnostic.severity,
                "path": diagnostic.path,
                "line": diagnostic.line,
                "diagnostic": diagnostic.message,
            },
        )

    def is_fatal(self, diagnostic: Diagnostic) -> bool:
        return False

    def reset(self) -> None:
        self.warning_count = 0
        self.error_count = 0


class RecordingCallback(AnalysisCallback):
    """Keeps every (sources, result) pair it's given, oldest first."""

    def __init__(self) -> None:
        self.results: list[tuple[tuple[str, ...], CompileResult]] = []

    def on_result(self, sources: tuple[str, ...], result: CompileResult) -> None:
        self.results.append((sources, result))

    @property
    def last_result(self) -> CompileResult | None:
        if not self.results:
            return None
        return self.results[-1][1]
