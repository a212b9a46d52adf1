# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI entrypoint for benchprep.

Usage:
    benchprep prepare --config benchmarks.yaml
    benchprep prepare --config benchmarks.yaml --project scala-library --manifest jobs.json
    benchprep info
"""

import argparse
import sys
from typing import Any, Optional, Sequence

from benchprep.cli.commands import handle_info, handle_prepare
from benchprep.cli.exit_codes import USER_ERROR


def _build_global_parser(default: Any = None) -> argparse.ArgumentParser:
    """
    Options accepted both before and after the subcommand.

    The subcommand copy is built with default=argparse.SUPPRESS so it only
    sets a value when the option is actually given after the subcommand;
    otherwise the value parsed by the root parser stands.
    """
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "--config",
        type=str,
        default=default,
        help="Path to YAML configuration file.",
    )
    parent.add_argument(
        "--log-level",
        type=str,
        default=default,
        dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging verbosity level (overrides the config).",
    )
    return parent


def _register_subcommands(
    subparsers: argparse._SubParsersAction,  # type: ignore[type-arg]
    parent: argparse.ArgumentParser,
) -> None:
    prepare = subparsers.add_parser(
        "prepare",
        parents=[parent],
        help="Clone projects and provision one compile job per subproject.",
    )
    prepare.add_argument(
        "--project",
        type=str,
        default=None,
        help="Only prepare the configured project with this name.",
    )
    prepare.add_argument(
        "--manifest",
        type=str,
        default=None,
        help="Write a JSON manifest of the prepared jobs to this path.",
    )
    prepare.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        dest="dry_run",
        help="Log what would be prepared without cloning anything.",
    )
    prepare.set_defaults(func=handle_prepare)

    info = subparsers.add_parser(
        "info",
        parents=[parent],
        help="Display environment info and external tool availability.",
    )
    info.set_defaults(func=handle_info)


def main(argv: Optional[Sequence[str]] = None) -> None:
    """
    Main CLI entrypoint, referenced by [project.scripts] in pyproject.toml.

    With no subcommand we show help and exit with USER_ERROR.
    """
    parent = _build_global_parser()
    sub_parent = _build_global_parser(default=argparse.SUPPRESS)

    root_parser = argparse.ArgumentParser(
        prog="benchprep",
        description="benchprep: prepare reproducible compile jobs for compiler benchmarks.",
        parents=[parent],
    )
    subparsers = root_parser.add_subparsers(dest="command")
    _register_subcommands(subparsers, sub_parent)

    args = root_parser.parse_args(argv)

    if not hasattr(args, "func") or args.func is None:
        root_parser.print_help()
        sys.exit(USER_ERROR)

    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
