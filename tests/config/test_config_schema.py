# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Schema-level validation tests.

These focus on the pydantic models themselves: boundary values, constraint
enforcement, and structural correctness.
"""

import pytest
from pydantic import ValidationError

from benchprep.config.schema import BenchprepConfig, GlobalConfig, ProjectConfig, ToolchainConfig


def _project(**overrides) -> dict:
    data = {"name": "demo", "repository": "acme/demo", "revision": "abc123", "subprojects": ["core"]}
    data.update(overrides)
    return data


class TestGlobalConfigSchema:
    def test_default_log_level_is_info(self) -> None:
        config = GlobalConfig(config_version="1.0.0")
        assert config.log_level == "INFO"

    def test_default_project_name(self) -> None:
        config = GlobalConfig(config_version="1.0.0")
        assert config.project_name == "benchprep"

    def test_config_version_is_required(self) -> None:
        with pytest.raises(ValidationError):
            GlobalConfig()  # type: ignore[call-arg]


class TestToolchainConfigSchema:
    def test_defaults_are_populated(self) -> None:
        toolchain = ToolchainConfig()
        assert toolchain.git_executable == "git"
        assert toolchain.sbt_command == ["sbt"]
        assert toolchain.scala_version is None
        assert toolchain.build_file == "build.sbt"
        assert toolchain.scalac_executable == "scalac"
        assert toolchain.clone_timeout_seconds is None
        assert toolchain.build_timeout_seconds is None
        assert toolchain.workspace_directory is None
        assert toolchain.cleanup_on_failure is False

    def test_empty_sbt_command_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ToolchainConfig(sbt_command=[])

    @pytest.mark.parametrize("field", ["clone_timeout_seconds", "build_timeout_seconds"])
    def test_timeouts_must_be_positive(self, field: str) -> None:
        with pytest.raises(ValidationError):
            ToolchainConfig(**{field: 0})

    def test_unknown_field_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ToolchainConfig(maven_command=["mvn"])  # type: ignore[call-arg]


class TestProjectConfigSchema:
    def test_host_classpath_on_by_default(self) -> None:
        assert ProjectConfig(**_project()).use_host_classpath is True

    def test_subprojects_cannot_be_empty(self) -> None:
        with pytest.raises(ValidationError):
            ProjectConfig(**_project(subprojects=[]))

    def test_subprojects_must_be_unique(self) -> None:
        with pytest.raises(ValidationError, match="Duplicate subproject"):
            ProjectConfig(**_project(subprojects=["core", "util", "core"]))

    @pytest.mark.parametrize("field", ["name", "repository", "revision", "subprojects"])
    def test_required_fields(self, field: str) -> None:
        data = _project()
        del data[field]
        with pytest.raises(ValidationError):
            ProjectConfig(**data)


class TestBenchprepConfigSchema:
    def test_requires_global_section(self) -> None:
        with pytest.raises(ValidationError):
            BenchprepConfig()  # type: ignore[call-arg]

    def test_rejects_top_level_unknown_fields(self) -> None:
        with pytest.raises(ValidationError):
            BenchprepConfig.model_validate({
                "global": {"config_version": "1.0.0"},
                "unknown_section": {"something": True},
            })

    def test_rejects_duplicate_project_names(self) -> None:
        with pytest.raises(ValidationError):
            BenchprepConfig.model_validate({
                "global": {"config_version": "1.0.0"},
                "projects": [_project(), _project(revision="def456")],
            })

    def test_find_project(self) -> None:
        config = BenchprepConfig.model_validate({
            "global": {"config_version": "1.0.0"},
            "projects": [_project(), _project(name="other")],
        })
        assert config.find_project("other").name == "other"
        assert config.find_project("missing") is None
