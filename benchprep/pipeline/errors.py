# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Error taxonomy for the setup pipeline.

Every failure a stage can hit maps to exactly one of these classes, so a
failed run tells you *where* it broke without reading a traceback:

  acquire:   CloneError, CheckoutError
  extract:   BuildFileAppendError, BuildToolInvocationError, OutputFormatError
  provision: ProvisionError

The split between BuildFileAppendError and OutputFormatError matters in
practice. The first means the clone itself is unusable; the second usually
means the project's build file doesn't tolerate the appended probe (or
sbt printed something unexpected), which is how you find repositories the
benchmark can't support.

None of these are retried.
"""

from pathlib import Path
from typing import Optional


class PipelineError(Exception):
    """Base for every setup failure. Carries the stage and, where known, the subproject."""

    stage: str = "unknown"

    def __init__(
        self,
        message: str,
        subproject: Optional[str] = None,
        path: Optional[Path] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.subproject = subproject
        # Directory the failing stage left behind, if any.
        self.path = path

    def with_subproject(self, subproject: str) -> "PipelineError":
        """Tag this error with the subproject it happened on, unless already tagged."""
        if self.subproject is None:
            self.subproject = subproject
        return self

    def __str__(self) -> str:
        if self.subproject is None:
            return f"[{self.stage}] {self.message}"
        return f"[{self.stage}:{self.subproject}] {self.message}"


class CloneError(PipelineError):
    """Remote unreachable, bad locator, missing git, or a non-zero `git clone`."""

    stage = "acquire"


class CheckoutError(PipelineError):
    """The requested revision doesn't exist in the cloned history."""

    stage = "acquire"


class BuildFileAppendError(PipelineError):
    """The probe fragment could not be written to the build description."""

    stage = "extract"


class BuildToolInvocationError(PipelineError):
    """sbt could not be started, exited non-zero, or timed out."""

    stage = "extract"


class OutputFormatError(PipelineError):
    """The probe output file is missing or doesn't hold exactly three lines."""

    stage = "extract"


class ProvisionError(PipelineError):
    """The compiler could not be configured, e.g. its output directory isn't writable."""

    stage = "provision"
