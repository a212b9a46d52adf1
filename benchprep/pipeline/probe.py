# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Build metadata probe.

To find out how a subproject really compiles, we don't try to understand
its build. We add a small task to it that writes the answer to a file:

  line 1: absolute paths of all compile sources, space-separated
  line 2: the compile classpath, joined with the platform path separator
  line 3: scalac options, space-separated

then ask sbt to run that task and read the file back. Step by step:
  1. Derive the task name and output file name from the subproject name
  2. Render the sbt fragment for that subproject
  3. Append it to the build (BuildFileAppendError on failure)
  4. Run the task (BuildToolInvocationError on failure)
  5. Read and split the output (OutputFormatError unless exactly 3 lines)
  6. Trim and wrap into SubprojectMetadata

Names depend on the subproject name only, so probing two subprojects in
the same clone never collides and probing the same one twice produces the
same names.
"""

import re
from pathlib import Path

from benchprep.logging.logger import get_logger
from benchprep.pipeline.build_tool import BuildTool
from benchprep.pipeline.errors import BuildFileAppendError, OutputFormatError, PipelineError
from benchprep.pipeline.models import SubprojectMetadata, WorkingTree

logger = get_logger(__name__)

TASK_NAME_PREFIX = "getAllSourcesAndClasspath"
OUTPUT_FILE_EXTENSION = "out"
EXPECTED_LINE_COUNT = 3

# sbt project ids: letters, digits, dashes and underscores.
_SUBPROJECT_NAME = re.compile(r"^[A-Za-z0-9_\-]+$")


def task_name(subproject: str) -> str:
    return f"{TASK_NAME_PREFIX}-{subproject}"


def output_file_name(subproject: str) -> str:
    return f"{task_name(subproject)}.{OUTPUT_FILE_EXTENSION}"


def _scala_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def render_probe(subproject: str, output_file: Path) -> str:
    """
    Render the sbt definition of the probe task for `subproject`.

    Uses the `key in Config in project` scoping, which both sbt 0.13 and
    sbt 1.x accept. The blank lines around it keep old sbt versions happy,
    where settings in build.sbt must be separated by a blank line.
    """
    if not _SUBPROJECT_NAME.match(subproject):
        raise BuildFileAppendError(
            f"Subproject name {subproject!r} cannot be used in a build definition",
            subproject=subproject,
        )
    name = task_name(subproject)
    return f"""

lazy val `{name}` =
  taskKey[Unit]("Write sources, classpath and scalac options of {subproject}")

`{name}` in ThisBuild := {{
  val file = new File({_scala_string(str(output_file))})
  val rawSources = (sources in Compile in `{subproject}`).value
  val sourcesLine = rawSources.map(_.getAbsolutePath).mkString(" ")
  val rawClasspath = (dependencyClasspath in Compile in `{subproject}`).value
  val classpathLine = rawClasspath.map(_.data.getAbsolutePath).mkString(java.io.File.pathSeparator)
  val optionsLine = (scalacOptions in Compile in `{subproject}`).value.mkString(" ")
  IO.writeLines(file, Seq(sourcesLine, classpathLine, optionsLine))
}}

"""


def parse_probe_output(text: str) -> SubprojectMetadata:
    """
    Parse the probe's output file contents.

    Exactly three lines or nothing: sources, classpath, options. A trailing
    newline after the third line is fine; a fourth line of any kind is not.
    """
    lines = text.splitlines()
    if len(lines) != EXPECTED_LINE_COUNT:
        raise OutputFormatError(
            f"Expected {EXPECTED_LINE_COUNT} lines in probe output, found {len(lines)}"
        )
    sources_line, classpath_line, options_line = lines
    return SubprojectMetadata.from_lines(sources_line, classpath_line, options_line)


class BuildMetadataProbe:
    """Extracts SubprojectMetadata from a working tree through a BuildTool."""

    def __init__(self, build_tool: BuildTool) -> None:
        self._build_tool = build_tool

    def extract(self, working_tree: WorkingTree, subproject: str) -> SubprojectMetadata:
        """
        Run the full probe for one subproject.

        Raises:
            BuildFileAppendError, BuildToolInvocationError, OutputFormatError,
            each tagged with `subproject`.
        """
        root = working_tree.root
        output_file = (root / output_file_name(subproject)).resolve()

        logger.info(
            "Probing subproject",
            extra={"subproject": subproject, "task": task_name(subproject), "root": str(root)},
        )

        try:
            # A leftover file would let a task that silently did nothing
            # look like a success.
            output_file.unlink(missing_ok=True)
        except OSError as err:
            raise BuildFileAppendError(
                f"Cannot remove stale probe output {output_file}: {err}", subproject=subproject
            ) from err

        try:
            fragment = render_probe(subproject, output_file)
            task = self._build_tool.inject_task(root, task_name(subproject), fragment)
            self._build_tool.run_task(task)
            metadata = self._read_output(output_file)
        except PipelineError as err:
            raise err.with_subproject(subproject)

        logger.info(
            "Probe finished",
            extra={
                "subproject": subproject,
                "sources": len(metadata.sources),
                "classpath_entries": len(metadata.classpath_entries),
                "options": len(metadata.options),
            },
        )
        return metadata

    def _read_output(self, output_file: Path) -> SubprojectMetadata:
        try:
            contents = output_file.read_text(encoding="utf-8")
        except FileNotFoundError as err:
            raise OutputFormatError(f"Probe output file was not written: {output_file}") from err
        except UnicodeDecodeError as err:
            raise OutputFormatError(f"Probe output {output_file} is not valid UTF-8: {err}") from err
        except OSError as err:
            raise OutputFormatError(f"Cannot read probe output {output_file}: {err}") from err
        return parse_probe_output(contents)
