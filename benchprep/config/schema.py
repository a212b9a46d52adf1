# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Type-safe configuration schemas for benchprep.

Every config section gets its own frozen pydantic model:
  - frozen=True: immutability after construction
  - extra="forbid": unknown fields cause immediate failure (typos in a
    benchmark config otherwise go unnoticed until the numbers look odd)
  - validate_default=True: even defaults get type-checked

A config file looks like:

    global:
      config_version: "1.0.0"
    toolchain:
      scala_version: "2.12.1"
    projects:
      - name: scala-library
        repository: scala/scala
        revision: 4d0ae5e
        subprojects: [library]
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class GlobalConfig(BaseModel):
    """Cross-cutting settings: identity and observability."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    config_version: str = Field(
        description="Schema version for compatibility tracking, e.g. '1.0.0'"
    )
    project_name: str = Field(
        default="benchprep", description="Human-readable identifier for this benchmark suite"
    )
    log_level: str = Field(
        default="INFO",
        description="One of DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Optional path for file-based log output",
    )


class ToolchainConfig(BaseModel):
    """
    External tools the setup pipeline shells out to, and how long to wait
    for them. Timeouts default to None: a hung clone or sbt run blocks until
    someone kills it, same as running the commands by hand.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    git_executable: str = Field(default="git", description="git binary used for clone/checkout")
    sbt_command: list[str] = Field(
        default_factory=lambda: ["sbt"],
        description="Command prefix that launches sbt; the probe task name is appended",
    )
    scala_version: Optional[str] = Field(
        default=None,
        description="If set, sbt is invoked with ++<version> before the probe task",
    )
    build_file: str = Field(
        default="build.sbt",
        description="Build description the probe fragment gets appended to, relative to the clone",
    )
    scalac_executable: str = Field(
        default="scalac", description="Compiler binary that provisioned jobs run"
    )
    clone_timeout_seconds: Optional[int] = Field(default=None, ge=1)
    build_timeout_seconds: Optional[int] = Field(default=None, ge=1)
    workspace_directory: Optional[str] = Field(
        default=None,
        description="Parent directory for temporary clones; system temp dir when unset",
    )
    cleanup_on_failure: bool = Field(
        default=False,
        description="Delete the clone when setup fails. Off by default so failed runs can be inspected",
    )

    @field_validator("sbt_command")
    @classmethod
    def _sbt_command_not_empty(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("sbt_command must contain at least the executable")
        return value


class ProjectConfig(BaseModel):
    """One repository to benchmark, pinned to a revision."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    name: str = Field(description="Short identifier, used in logs and manifests")
    repository: str = Field(
        description="GitHub 'owner/repo' shorthand, a clone URL, or a local path"
    )
    revision: str = Field(description="Commit hash, tag or branch to check out")
    subprojects: list[str] = Field(
        min_length=1,
        description="sbt subprojects to extract, in the order jobs are produced",
    )
    use_host_classpath: bool = Field(
        default=True,
        description="Append -usejavacp so scalac also trusts the harness's own classpath",
    )

    @field_validator("subprojects")
    @classmethod
    def _subprojects_unique(cls, value: list[str]) -> list[str]:
        seen: set[str] = set()
        for subproject in value:
            if subproject in seen:
                raise ValueError(f"Duplicate subproject: {subproject}")
            seen.add(subproject)
        return value


class BenchprepConfig(BaseModel):
    """Top-level config container."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    global_config: GlobalConfig = Field(alias="global")
    toolchain: ToolchainConfig = Field(default_factory=ToolchainConfig)
    projects: list[ProjectConfig] = Field(default_factory=list)

    @model_validator(mode="after")
    def _project_names_unique(self) -> "BenchprepConfig":
        seen: set[str] = set()
        for project in self.projects:
            if project.name in seen:
                raise ValueError(f"Duplicate project name: {project.name}")
            seen.add(project.name)
        return self

    def find_project(self, name: str) -> Optional[ProjectConfig]:
        for project in self.projects:
            if project.name == name:
                return project
        return None
