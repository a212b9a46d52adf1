# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""Tests for the pipeline data models."""

import os
from pathlib import Path

import pytest

from conftest import FakeCompiler
from benchprep.compiler.reporting import NonFatalReporter, RecordingCallback
from benchprep.pipeline.errors import CloneError, OutputFormatError
from benchprep.pipeline.models import (
    CompileJob,
    PipelineResult,
    ProjectReference,
    SubprojectMetadata,
    WorkingTree,
)


class TestProjectReference:
    def test_subprojects_become_tuple(self) -> None:
        reference = ProjectReference("acme/demo", "abc123", ["core", "util"])  # type: ignore[arg-type]
        assert reference.subprojects == ("core", "util")

    def test_name_defaults_to_repository(self) -> None:
        assert ProjectReference("acme/demo", "abc123", ()).name == "acme/demo"

    def test_is_frozen(self) -> None:
        reference = ProjectReference("acme/demo", "abc123", ())
        with pytest.raises(Exception):
            reference.revision = "other"  # type: ignore[misc]


class TestSubprojectMetadata:
    def test_from_lines_round_trip(self) -> None:
        metadata = SubprojectMetadata.from_lines(" /a.scala /b.scala ", " /x.jar ", " -feature ")
        assert metadata.sources == ("/a.scala", "/b.scala")
        assert metadata.classpath == "/x.jar"
        assert metadata.options == ("-feature",)

    def test_classpath_entries(self) -> None:
        metadata = SubprojectMetadata(os.pathsep.join(["/x.jar", "/y.jar"]), (), ())
        assert metadata.classpath_entries == ("/x.jar", "/y.jar")

    def test_empty_classpath_has_no_entries(self) -> None:
        assert SubprojectMetadata("", (), ()).classpath_entries == ()

    def test_with_options_leaves_original_alone(self) -> None:
        original = SubprojectMetadata("/x.jar", ("/a.scala",), ("-feature",))
        changed = original.with_options(["-feature", "-usejavacp"])

        assert original.options == ("-feature",)
        assert changed.options == ("-feature", "-usejavacp")
        assert changed.sources == original.sources


class TestWorkingTree:
    def test_cleanup_removes_directory(self, tmp_path: Path) -> None:
        root = tmp_path / "clone"
        (root / "src").mkdir(parents=True)
        tree = WorkingTree(root=root, repository="acme/demo", revision="abc123")

        tree.cleanup()
        tree.cleanup()

        assert not root.exists()


class TestCompileJob:
    def test_compile_runs_handle_over_sources(self, tmp_path: Path) -> None:
        compiler = FakeCompiler()
        handle = compiler.configure((), "", tmp_path, RecordingCallback(), NonFatalReporter())
        metadata = SubprojectMetadata("", ("/a.scala",), ())
        job = CompileJob("core", tmp_path, metadata, handle)

        result = job.compile()

        assert result.success
        assert handle.runs == [("/a.scala",)]


class TestPipelineResult:
    def test_success(self) -> None:
        result = PipelineResult(project=ProjectReference("acme/demo", "abc123", ()))
        assert result.ok
        assert result.get_or_raise() == ()

    def test_failure_raises_its_error(self) -> None:
        error = OutputFormatError("two lines", subproject="core")
        result = PipelineResult(project=ProjectReference("acme/demo", "abc123", ("core",)), error=error)

        assert not result.ok
        with pytest.raises(OutputFormatError) as excinfo:
            result.get_or_raise()
        assert excinfo.value is error

    def test_failure_cannot_carry_jobs(self, tmp_path: Path) -> None:
        compiler = FakeCompiler()
        handle = compiler.configure((), "", tmp_path, RecordingCallback(), NonFatalReporter())
        job = CompileJob("core", tmp_path, SubprojectMetadata("", (), ()), handle)

        with pytest.raises(ValueError):
            PipelineResult(
                project=ProjectReference("acme/demo", "abc123", ("core",)),
                jobs=(job,),
                error=CloneError("nope"),
            )

    def test_cleanup_without_tree_is_noop(self) -> None:
        PipelineResult(project=ProjectReference("acme/demo", "abc123", ())).cleanup()

    def test_cleanup_removes_tree(self, tmp_path: Path) -> None:
        root = tmp_path / "clone"
        root.mkdir()
        result = PipelineResult(
            project=ProjectReference("acme/demo", "abc123", ()),
            working_tree=WorkingTree(root=root, repository="acme/demo", revision="abc123"),
        )

        result.cleanup()

        assert not root.exists()
