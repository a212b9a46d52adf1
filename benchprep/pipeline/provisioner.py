# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Compiler provisioning: turn SubprojectMetadata into a primed CompileJob.

Configuring a compiler is the expensive part of a compile (for scalac,
everything up to reading the first source), and the benchmark wants to
measure compiles, not setup. So each subproject gets exactly one
configure() here, and the harness reuses the handle for every run.

Options scalac doesn't know, or classpath entries that don't exist, are
the compiler's problem on its first run. The only failure here is the
filesystem refusing the compiler's setup (ProvisionError).
"""

from pathlib import Path
from typing import Callable, Sequence

from benchprep.compiler.interfaces import AnalysisCallback, Compiler, Reporter
from benchprep.compiler.reporting import NonFatalReporter, RecordingCallback
from benchprep.logging.logger import get_logger
from benchprep.pipeline.errors import ProvisionError
from benchprep.pipeline.models import CompileJob, SubprojectMetadata

logger = get_logger(__name__)

# Makes scalac add the JVM's own classpath (java.class.path) to the
# project classpath. Needed when the extracted classpath leaves out jars
# that only the host environment has, e.g. scala-library itself.
HOST_CLASSPATH_FLAG = "-usejavacp"


def with_host_classpath(options: Sequence[str]) -> tuple[str, ...]:
    """Append the host-classpath flag after `options`, unless it's already there."""
    options = tuple(options)
    if HOST_CLASSPATH_FLAG in options:
        return options
    return options + (HOST_CLASSPATH_FLAG,)


class CompilerProvisioner:
    """
    Configures one compiler handle per subproject.

    Every job gets its own reporter and callback, built by the given
    factories, so results from different subprojects never mix.
    """

    def __init__(
        self,
        compiler: Compiler,
        reporter_factory: Callable[[], Reporter] = NonFatalReporter,
        callback_factory: Callable[[], AnalysisCallback] = RecordingCallback,
    ) -> None:
        self._compiler = compiler
        self._reporter_factory = reporter_factory
        self._callback_factory = callback_factory

    def provision(
        self,
        metadata: SubprojectMetadata,
        target_directory: Path,
        use_host_classpath: bool,
        subproject: str = "",
    ) -> CompileJob:
        if use_host_classpath:
            metadata = metadata.with_options(with_host_classpath(metadata.options))

        try:
            handle = self._compiler.configure(
                options=metadata.options,
                classpath=metadata.classpath,
                output_dir=target_directory,
                callback=self._callback_factory(),
                reporter=self._reporter_factory(),
            )
        except OSError as err:
            raise ProvisionError(
                f"Cannot configure compiler in {target_directory}: {err}",
                subproject=subproject or None,
            ) from err

        logger.info(
            "Compiler provisioned",
            extra={
                "subproject": subproject,
                "output_dir": str(target_directory),
                "options": list(metadata.options),
                "sources": len(metadata.sources),
            },
        )

        return CompileJob(
            subproject=subproject,
            working_directory=target_directory,
            metadata=metadata,
            compiler=handle,
        )
