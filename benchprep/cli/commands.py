# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Subcommand handlers for the benchprep CLI.

Each function here corresponds to one subcommand and returns an exit code.
No print() calls. Everything goes through the structured logger.
"""

import argparse
import logging
from pathlib import Path

from benchprep.cli.exit_codes import CONFIG_ERROR, RUNTIME_ERROR, SUCCESS, USER_ERROR
from benchprep.config.exceptions import ConfigError
from benchprep.config.loader import load_config
from benchprep.config.schema import BenchprepConfig
from benchprep.logging.logger import get_logger
from benchprep.runtime.bootstrap import bootstrap


def _log_level(args: argparse.Namespace) -> str:
    return args.log_level or "INFO"


def _load_and_bootstrap(
    args: argparse.Namespace,
    command_name: str,
) -> tuple[int, BenchprepConfig | None, logging.Logger]:
    """
    Shared setup for commands that need a config: load it, run bootstrap.

    Returns (exit_code, config, logger). If exit_code is not SUCCESS, the
    caller should return it immediately.
    """
    logger = get_logger(f"benchprep.cli.{command_name}", log_level=_log_level(args))

    if args.config is None:
        logger.error("--config is required", extra={"command": command_name})
        return USER_ERROR, None, logger

    try:
        config = load_config(Path(args.config))
    except ConfigError as err:
        logger.error(
            "Configuration error",
            extra={"command": command_name, "error": str(err)},
        )
        return CONFIG_ERROR, None, logger

    bootstrap(config.global_config, log_level=args.log_level)
    logger = get_logger(
        f"benchprep.cli.{command_name}",
        log_level=args.log_level or config.global_config.log_level,
    )
    return SUCCESS, config, logger


def handle_prepare(args: argparse.Namespace) -> int:
    """Clone, probe and provision every configured project (or the one named by --project)."""
    exit_code, config, logger = _load_and_bootstrap(args, "prepare")
    if exit_code != SUCCESS or config is None:
        return exit_code

    projects = list(config.projects)
    if args.project is not None:
        selected = config.find_project(args.project)
        if selected is None:
            logger.error(
                "Unknown project",
                extra={
                    "project": args.project,
                    "available": [project.name for project in config.projects],
                },
            )
            return USER_ERROR
        projects = [selected]

    if not projects:
        logger.info("No projects configured, nothing to prepare", extra={"command": "prepare"})
        return SUCCESS

    if args.dry_run:
        for project in projects:
            logger.info(
                "Dry run, would prepare project",
                extra={
                    "project": project.name,
                    "repository": project.repository,
                    "revision": project.revision,
                    "subprojects": project.subprojects,
                },
            )
        return SUCCESS

    from benchprep.pipeline.manifest import write_manifest
    from benchprep.pipeline.runner import BenchmarkProjectPipeline, project_reference

    try:
        pipeline = BenchmarkProjectPipeline.from_toolchain(config.toolchain)
        results = [pipeline.run(project_reference(project)) for project in projects]

        if args.manifest is not None:
            manifest_path = Path(args.manifest)
            write_manifest(results, manifest_path)
            logger.info("Manifest written", extra={"path": str(manifest_path)})
    except Exception as err:
        logger.error("Prepare failed", extra={"error": str(err)}, exc_info=True)
        return RUNTIME_ERROR

    failed = [result.project.name for result in results if not result.ok]
    logger.info(
        "Prepare finished",
        extra={
            "projects": len(results),
            "failed": failed,
            "jobs": sum(len(result.jobs) for result in results),
        },
    )
    return RUNTIME_ERROR if failed else SUCCESS


def handle_info(args: argparse.Namespace) -> int:
    """Display environment information and which external tools are available."""
    logger = get_logger("benchprep.cli.info", log_level=_log_level(args))

    from benchprep import __version__
    from benchprep.config.schema import ToolchainConfig
    from benchprep.runtime.environment import get_system_info, locate_tools

    toolchain = ToolchainConfig()
    if args.config is not None:
        try:
            toolchain = load_config(Path(args.config)).toolchain
        except ConfigError as err:
            logger.error("Configuration error", extra={"command": "info", "error": str(err)})
            return CONFIG_ERROR

    system_info = get_system_info()
    tools = locate_tools(
        [toolchain.git_executable, toolchain.sbt_command[0], toolchain.scalac_executable]
    )

    logger.info(
        "System information",
        extra={
            "benchprep_version": __version__,
            "python_version": system_info.python_version,
            "platform": system_info.platform,
            "architecture": system_info.architecture,
            "hostname": system_info.hostname,
            "tools": tools,
            "config": args.config,
        },
    )
    return SUCCESS
