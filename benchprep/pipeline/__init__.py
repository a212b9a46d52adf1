# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
The benchmark setup pipeline.

  - source: clone and pin a repository
  - probe / build_tool: ask sbt for a subproject's classpath, sources and options
  - provisioner: configure one compiler per subproject
  - runner: chain the stages, first failure wins
"""

from benchprep.pipeline.errors import (
    BuildFileAppendError,
    BuildToolInvocationError,
    CheckoutError,
    CloneError,
    OutputFormatError,
    PipelineError,
    ProvisionError,
)
from benchprep.pipeline.models import (
    CompileJob,
    PipelineResult,
    ProjectReference,
    SubprojectMetadata,
    WorkingTree,
)
from benchprep.pipeline.runner import BenchmarkProjectPipeline

__all__ = [
    "BenchmarkProjectPipeline",
    "BuildFileAppendError",
    "BuildToolInvocationError",
    "CheckoutError",
    "CloneError",
    "CompileJob",
    "OutputFormatError",
    "PipelineError",
    "PipelineResult",
    "ProvisionError",
    "ProjectReference",
    "SubprojectMetadata",
    "WorkingTree",
]
