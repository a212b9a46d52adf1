# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Runtime bootstrap for benchprep.

The one-time setup before any command does real work:
  1. Validate the Python version
  2. Configure logging for the whole `benchprep` logger tree
  3. Log what we're running on

Module loggers are created at import time with default settings; bootstrap
re-levels them so `--log-level DEBUG` reaches every stage.
"""

import logging
from pathlib import Path

from benchprep.config.schema import GlobalConfig
from benchprep.logging.logger import get_logger
from benchprep.runtime.environment import check_minimum_python, get_system_info


def configure_logging(log_level: str, log_file: Path | None = None) -> logging.Logger:
    """Apply `log_level` to every benchprep logger created so far and return the runtime logger."""
    for name in list(logging.Logger.manager.loggerDict):
        if name == "benchprep" or name.startswith("benchprep."):
            get_logger(name, log_level=log_level)
    return get_logger("benchprep.runtime", log_level=log_level, log_file=log_file)


def bootstrap(config: GlobalConfig, log_level: str | None = None) -> None:
    """
    Run the bootstrap sequence.

    Args:
        config: The validated global configuration.
        log_level: Overrides config.log_level when given (the CLI flag wins).
    """
    check_minimum_python()

    log_file = Path(config.log_file) if config.log_file is not None else None
    logger = configure_logging(log_level or config.log_level, log_file)

    system_info = get_system_info()
    logger.info(
        "benchprep bootstrap complete",
        extra={
            "suite": config.project_name,
            "python_version": system_info.python_version,
            "platform": system_info.platform,
            "architecture": system_info.architecture,
        },
    )
