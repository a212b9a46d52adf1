# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
JSON manifests of pipeline results.

A manifest records what `prepare` produced: for every project either the
prepared jobs (where the clone lives, what each compile will be fed) or
the error that stopped it. Benchmark drivers in other processes read it
to find the clones; people read it to see which repositories broke.
"""

import json
from pathlib import Path
from typing import Any, Sequence

from benchprep.pipeline.models import CompileJob, PipelineResult
from benchprep.utils.filesystem import atomic_write

MANIFEST_VERSION = 1


def job_to_dict(job: CompileJob) -> dict[str, Any]:
    return {
        "subproject": job.subproject,
        "working_directory": str(job.working_directory),
        "output_directory": str(job.compiler.output_dir),
        "sources": list(job.metadata.sources),
        "classpath": list(job.metadata.classpath_entries),
        "options": list(job.metadata.options),
    }


def result_to_dict(result: PipelineResult) -> dict[str, Any]:
    project = result.project
    entry: dict[str, Any] = {
        "name": project.name,
        "repository": project.repository,
        "revision": project.revision,
        "subprojects": list(project.subprojects),
        "ok": result.ok,
        "working_tree": str(result.working_tree.root) if result.working_tree else None,
    }
    if result.error is not None:
        entry["error"] = {
            "type": type(result.error).__name__,
            "stage": result.error.stage,
            "subproject": result.error.subproject,
            "message": result.error.message,
        }
        entry["jobs"] = []
    else:
        entry["jobs"] = [job_to_dict(job) for job in result.jobs]
    return entry


def write_manifest(results: Sequence[PipelineResult], target: Path) -> None:
    """Write every result to `target` as one JSON document, atomically."""
    payload = {
        "manifest_version": MANIFEST_VERSION,
        "projects": [result_to_dict(result) for result in results],
    }
    atomic_write(target, json.dumps(payload, indent=2, sort_keys=True))
