# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
benchprep: reproducible compile workloads for compiler benchmarks.

Given a repository, a revision and a list of sbt subprojects, benchprep
clones the project, asks sbt for each subproject's sources, classpath and
scalac options, and hands back one primed compiler per subproject.

Subsystems:
  - pipeline: clone, probe, provision, orchestrate
  - compiler: the configure-once / run-many compiler capability
  - config: YAML + pydantic configuration
  - cli: the `benchprep` command
"""

__version__ = "0.1.0"
