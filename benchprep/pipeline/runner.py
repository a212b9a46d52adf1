# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
The setup pipeline for one benchmark project.

    acquire ──► extract(0) ──► provision(0) ──► ... ──► extract(n-1) ──► provision(n-1) ──► done

One clone is shared by every subproject. Subprojects are handled strictly
in request order, and the first failure ends the run: the caller gets that
error and nothing else. A suite with one broken subproject is a broken
suite; we never hand back a partial job list.

Stages raise PipelineError subclasses. This is the one place that catches
them and turns them into a PipelineResult.
"""

import shutil
from pathlib import Path
from typing import Optional

from benchprep.compiler.interfaces import Compiler
from benchprep.compiler.scalac import ScalacCompiler
from benchprep.config.schema import ProjectConfig, ToolchainConfig
from benchprep.logging.logger import get_logger
from benchprep.pipeline.build_tool import SbtBuildTool
from benchprep.pipeline.errors import PipelineError
from benchprep.pipeline.models import CompileJob, PipelineResult, ProjectReference, WorkingTree
from benchprep.pipeline.probe import BuildMetadataProbe
from benchprep.pipeline.provisioner import CompilerProvisioner
from benchprep.pipeline.source import SourceAcquirer

logger = get_logger(__name__)


def project_reference(project: ProjectConfig) -> ProjectReference:
    """Convert a configured project into the pipeline's input type."""
    return ProjectReference(
        repository=project.repository,
        revision=project.revision,
        subprojects=tuple(project.subprojects),
        use_host_classpath=project.use_host_classpath,
        name=project.name,
    )


class BenchmarkProjectPipeline:
    """
    Runs acquire → extract → provision for one project.

    By default nothing is deleted, even on failure, so a broken run can be
    inspected afterwards. With `cleanup_on_failure` the clone is removed
    whenever the run fails. Successful clones are always kept: the jobs
    compile out of them. Dispose of those with PipelineResult.cleanup().
    """

    def __init__(
        self,
        acquirer: SourceAcquirer,
        probe: BuildMetadataProbe,
        provisioner: CompilerProvisioner,
        cleanup_on_failure: bool = False,
    ) -> None:
        self._acquirer = acquirer
        self._probe = probe
        self._provisioner = provisioner
        self._cleanup_on_failure = cleanup_on_failure

    @classmethod
    def from_toolchain(
        cls,
        toolchain: ToolchainConfig,
        compiler: Optional[Compiler] = None,
    ) -> "BenchmarkProjectPipeline":
        """Wire up the default git / sbt / scalac stack from config."""
        workspace = Path(toolchain.workspace_directory) if toolchain.workspace_directory else None
        acquirer = SourceAcquirer(
            git_executable=toolchain.git_executable,
            timeout_seconds=toolchain.clone_timeout_seconds,
            base_dir=workspace,
        )
        build_tool = SbtBuildTool(
            command=toolchain.sbt_command,
            scala_version=toolchain.scala_version,
            build_file=toolchain.build_file,
            timeout_seconds=toolchain.build_timeout_seconds,
        )
        if compiler is None:
            compiler = ScalacCompiler(executable=toolchain.scalac_executable)
        return cls(
            acquirer=acquirer,
            probe=BuildMetadataProbe(build_tool),
            provisioner=CompilerProvisioner(compiler),
            cleanup_on_failure=toolchain.cleanup_on_failure,
        )

    def run(self, project: ProjectReference) -> PipelineResult:
        logger.info(
            "Pipeline started",
            extra={
                "project": project.name,
                "repository": project.repository,
                "revision": project.revision,
                "subprojects": list(project.subprojects),
            },
        )

        working_tree: Optional[WorkingTree] = None
        jobs: list[CompileJob] = []
        try:
            working_tree = self._acquirer.acquire(project.repository, project.revision)
            for subproject in project.subprojects:
                metadata = self._probe.extract(working_tree, subproject)
                job = self._provisioner.provision(
                    metadata,
                    working_tree.root,
                    project.use_host_classpath,
                    subproject=subproject,
                )
                jobs.append(job)
        except PipelineError as err:
            logger.error(
                "Pipeline failed",
                extra={
                    "project": project.name,
                    "stage": err.stage,
                    "error_type": type(err).__name__,
                    "subproject": err.subproject,
                    "error": err.message,
                    "completed_subprojects": len(jobs),
                },
            )
            if self._cleanup_on_failure:
                self._discard(working_tree, err)
            return PipelineResult(project=project, error=err, working_tree=working_tree)

        logger.info(
            "Pipeline finished",
            extra={
                "project": project.name,
                "jobs": len(jobs),
                "working_tree": str(working_tree.root),
            },
        )
        return PipelineResult(project=project, jobs=tuple(jobs), working_tree=working_tree)

    def _discard(self, working_tree: Optional[WorkingTree], err: PipelineError) -> None:
        if working_tree is not None:
            working_tree.cleanup()
        elif err.path is not None and err.path.is_dir():
            shutil.rmtree(err.path, ignore_errors=True)
            logger.debug("Failed clone removed", extra={"path": str(err.path)})
