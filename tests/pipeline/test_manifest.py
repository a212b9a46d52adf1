# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""Tests for JSON manifests of pipeline results."""

import json
from pathlib import Path

from conftest import FakeAcquirer, FakeCompiler, ScriptedBuildTool, probe_output
from benchprep.pipeline.errors import BuildToolInvocationError
from benchprep.pipeline.manifest import MANIFEST_VERSION, write_manifest
from benchprep.pipeline.models import ProjectReference
from benchprep.pipeline.probe import BuildMetadataProbe, task_name
from benchprep.pipeline.provisioner import CompilerProvisioner
from benchprep.pipeline.runner import BenchmarkProjectPipeline


def _run(tmp_path: Path, tool: ScriptedBuildTool, name: str):
    pipeline = BenchmarkProjectPipeline(
        acquirer=FakeAcquirer(tmp_path / name),  # type: ignore[arg-type]
        probe=BuildMetadataProbe(tool),
        provisioner=CompilerProvisioner(FakeCompiler()),
    )
    return pipeline.run(ProjectReference("acme/demo", "abc123", ("core",), name=name))


class TestWriteManifest:
    def test_records_jobs_and_errors(self, tmp_path: Path) -> None:
        good = _run(
            tmp_path,
            ScriptedBuildTool(outputs={task_name("core"): probe_output(["/a.scala"], ["/x.jar"], ["-feature"])}),
            "good",
        )
        bad = _run(
            tmp_path,
            ScriptedBuildTool(failures={task_name("core"): BuildToolInvocationError("exit 1")}),
            "bad",
        )
        target = tmp_path / "out" / "manifest.json"

        write_manifest([good, bad], target)

        payload = json.loads(target.read_text(encoding="utf-8"))
        assert payload["manifest_version"] == MANIFEST_VERSION
        good_entry, bad_entry = payload["projects"]

        assert good_entry["ok"] is True
        assert good_entry["jobs"][0]["subproject"] == "core"
        assert good_entry["jobs"][0]["sources"] == ["/a.scala"]
        assert good_entry["jobs"][0]["classpath"] == ["/x.jar"]
        assert good_entry["jobs"][0]["options"] == ["-feature", "-usejavacp"]

        assert bad_entry["ok"] is False
        assert bad_entry["jobs"] == []
        assert bad_entry["error"] == {
            "type": "BuildToolInvocationError",
            "stage": "extract",
            "subproject": "core",
            "message": "exit 1",
        }
