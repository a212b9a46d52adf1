# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
scalac backend for the compiler capability.

configure() does everything that only has to happen once per subproject:
resolve the scalac binary, create the output directory, and write an
@argfile holding the output directory, classpath and options. Real-world
classpaths run to hundreds of jars, so putting them in a file keeps each
run's command line down to `scalac @argfile <sources>`.

run() shells out to scalac with capture_output, parses diagnostics from
the captured text, and hands the result to the reporter and callback.
No shell=True anywhere.
"""

import os
import re
import shutil
import subprocess
import tempfile
import time
from pathlib import Path
from typing import Optional, Sequence

from benchprep.compiler.interfaces import (
    AnalysisCallback,
    CompileResult,
    Compiler,
    CompilerHandle,
    Diagnostic,
    Reporter,
)
from benchprep.logging.logger import get_logger
from benchprep.utils.paths import ensure_directory

logger = get_logger(__name__)

# scalac 2.x prints "path/File.scala:12: warning: message", and summary
# lines without a position ("warning: there were 3 deprecation warnings").
_DIAGNOSTIC_PATTERN = re.compile(
    r"^(?:(?P<path>[^:\n]+):(?P<line>\d+): )?(?P<severity>error|warning): (?P<message>.*)$"
)


def parse_diagnostics(output: str) -> tuple[Diagnostic, ...]:
    """Pull error/warning lines out of scalac's console output."""
    diagnostics: list[Diagnostic] = []
    for raw_line in output.splitlines():
        match = _DIAGNOSTIC_PATTERN.match(raw_line.strip())
        if match is None:
            continue
        line = match.group("line")
        diagnostics.append(
            Diagnostic(
                severity=match.group("severity"),
                message=match.group("message"),
                path=match.group("path"),
                line=int(line) if line is not None else None,
            )
        )
    return tuple(diagnostics)


def _quote_arg(arg: str) -> str:
    """Quote an argument for a scalac @argfile if it contains whitespace."""
    if not arg or any(ch.isspace() for ch in arg):
        escaped = arg.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return arg


def render_args_file(options: Sequence[str], classpath: str, output_dir: Path) -> str:
    """One argument per line: -d, the output directory, the classpath, then options."""
    args = ["-d", str(output_dir)]
    if classpath:
        args.extend(["-classpath", classpath])
    args.extend(options)
    return "\n".join(_quote_arg(arg) for arg in args) + "\n"


class ScalacHandle(CompilerHandle):
    """A scalac invocation frozen at configure time. Each run() only adds sources."""

    def __init__(
        self,
        executable: str,
        args_file: Path,
        options: tuple[str, ...],
        classpath: str,
        output_dir: Path,
        callback: AnalysisCallback,
        reporter: Reporter,
        timeout_seconds: Optional[int] = None,
    ) -> None:
        self._executable = executable
        self._args_file = args_file
        self._options = options
        self._classpath = classpath
        self._output_dir = output_dir
        self._callback = callback
        self._reporter = reporter
        self._timeout_seconds = timeout_seconds
        self.run_count = 0

    @property
    def options(self) -> tuple[str, ...]:
        return self._options

    @property
    def classpath(self) -> str:
        return self._classpath

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    @property
    def args_file(self) -> Path:
        return self._args_file

    def command(self, sources: Sequence[str]) -> list[str]:
        return [self._executable, f"@{self._args_file}", *sources]

    def run(self, sources: Sequence[str]) -> CompileResult:
        """
        Compile `sources` once.

        A missing scalac or a timeout comes back as a failed CompileResult,
        the same way a compile error does, so the harness never has to
        special-case the environment.
        """
        self.run_count += 1
        self._reporter.reset()
        sources = tuple(sources)
        start = time.monotonic()

        try:
            completed = subprocess.run(
                self.command(sources),
                capture_output=True,
                text=True,
                timeout=self._timeout_seconds,
                cwd=str(self._output_dir),
            )
        except FileNotFoundError:
            result = CompileResult(
                success=False,
                exit_code=-1,
                stdout="",
                stderr=f"scalac executable not found: {self._executable}",
                elapsed_seconds=time.monotonic() - start,
            )
            logger.error(
                "scalac not found",
                extra={"executable": self._executable},
            )
            self._callback.on_result(sources, result)
            return result
        except subprocess.TimeoutExpired:
            result = CompileResult(
                success=False,
                exit_code=-1,
                stdout="",
                stderr=f"Compilation timed out after {self._timeout_seconds}s",
                elapsed_seconds=time.monotonic() - start,
            )
            logger.warning(
                "Compilation timed out",
                extra={"timeout_seconds": self._timeout_seconds, "run": self.run_count},
            )
            self._callback.on_result(sources, result)
            return result

        elapsed = time.monotonic() - start
        diagnostics = parse_diagnostics(completed.stdout + "\n" + completed.stderr)
        fatal = False
        for diagnostic in diagnostics:
            self._reporter.log(diagnostic)
            if self._reporter.is_fatal(diagnostic):
                fatal = True

        result = CompileResult(
            success=completed.returncode == 0 and not fatal,
            exit_code=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
            elapsed_seconds=elapsed,
            diagnostics=diagnostics,
        )

        logger.debug(
            "Compilation finished",
            extra={
                "success": result.success,
                "exit_code": result.exit_code,
                "elapsed_seconds": round(elapsed, 3),
                "sources": len(sources),
                "run": self.run_count,
            },
        )
        self._callback.on_result(sources, result)
        return result


class ScalacCompiler(Compiler):
    """Creates ScalacHandles. One instance can configure any number of jobs."""

    def __init__(self, executable: str = "scalac", timeout_seconds: Optional[int] = None) -> None:
        self._executable = executable
        self._timeout_seconds = timeout_seconds

    def configure(
        self,
        options: Sequence[str],
        classpath: str,
        output_dir: Path,
        callback: AnalysisCallback,
        reporter: Reporter,
    ) -> ScalacHandle:
        output_dir = ensure_directory(Path(output_dir).resolve())
        # Unresolvable executables are left as-is; the first run reports them.
        executable = shutil.which(self._executable) or self._executable

        options = tuple(options)
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=str(output_dir),
            prefix=".benchprep_scalac_",
            suffix=".args",
            delete=False,
        ) as handle:
            handle.write(render_args_file(options, classpath, output_dir))
            args_file = Path(handle.name)

        logger.debug(
            "scalac configured",
            extra={
                "executable": executable,
                "args_file": str(args_file),
                "options": list(options),
                "classpath_entries": len(classpath.split(os.pathsep)) if classpath else 0,
            },
        )

        return ScalacHandle(
            executable=executable,
            args_file=args_file,
            options=options,
            classpath=classpath,
            output_dir=output_dir,
            callback=callback,
            reporter=reporter,
            timeout_seconds=self._timeout_seconds,
        )
