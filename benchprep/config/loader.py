# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Reads a benchmark suite config from YAML into a frozen BenchprepConfig.

Any failure here stops the run before a single repository is cloned.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from benchprep.config.exceptions import ConfigLoadError, ConfigValidationError
from benchprep.config.schema import BenchprepConfig


def _read_yaml_mapping(config_path: Path) -> dict[str, Any]:
    """
    Raises:
        ConfigLoadError: The path is missing, unreadable, not YAML, or not a mapping.
    """
    if not config_path.is_file():
        raise ConfigLoadError(f"Config file not found: {config_path}")

    try:
        parsed = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as err:
        raise ConfigLoadError(f"Cannot read config file {config_path}: {err}") from err
    except yaml.YAMLError as err:
        raise ConfigLoadError(f"Invalid YAML in {config_path}: {err}") from err

    if not isinstance(parsed, dict):
        raise ConfigLoadError(
            f"Config file {config_path} must hold a YAML mapping, got {type(parsed).__name__}"
        )
    return parsed


def load_config(config_path: Path) -> BenchprepConfig:
    """
    Load and validate a suite config.

    Raises:
        ConfigLoadError: File I/O or YAML parse failures.
        ConfigValidationError: Schema violations, including duplicate
            project or subproject names.
    """
    raw_data = _read_yaml_mapping(config_path)
    try:
        return BenchprepConfig.model_validate(raw_data)
    except ValidationError as err:
        raise ConfigValidationError(f"Invalid config {config_path}:\n{err}") from err
