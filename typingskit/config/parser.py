"""YAML configuration parser for typingskit.

This module provides parsing and validation for typingskit.yaml configuration files.
"""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from typingskit.core.exceptions import ConfigError

CONFIG_FILE_NAME = "typingskit.yaml"
SUPPORTED_VERSION = 1

DEFAULT_TOOL_NAME = "typings"
# Lock to a stable release of the 'typings' tool with known behavior.
DEFAULT_TOOL_VERSION = "1.0.5"


@dataclass
class AcquisitionConfig:
    """Settings for typings acquisition."""

    save_to_config_file: bool = False  # pass --save so typings.json is updated
    tool_name: str = DEFAULT_TOOL_NAME
    tool_version: str = DEFAULT_TOOL_VERSION
    tools_dir: Optional[str] = None  # overrides the shared ExternalTools directory

    @property
    def tools_dir_path(self) -> Optional[Path]:
        return Path(self.tools_dir).expanduser() if self.tools_dir else None


def load_config(
    project_root: Path, config_path: Optional[Path] = None
) -> AcquisitionConfig:
    """
    Load configuration for a project.

    Args:
        project_root: Project root directory
        config_path: Explicit configuration file (default: <project_root>/typingskit.yaml)

    Returns:
        Parsed configuration, or defaults when no default file exists

    Raises:
        ConfigError: If an explicit file is missing or any file is invalid
    """
    if config_path is not None:
        return parse_config(Path(config_path))

    default_path = Path(project_root) / CONFIG_FILE_NAME
    if not default_path.exists():
        return AcquisitionConfig()
    return parse_config(default_path)


def parse_config(config_path: Path) -> AcquisitionConfig:
    """
    Parse typingskit.yaml configuration file.

    Args:
        config_path: Path to typingskit.yaml

    Returns:
        Parsed and validated configuration

    Raises:
        ConfigError: If configuration is invalid
    """
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax: {e}")

    if data is None:
        raise ConfigError("Configuration file is empty")

    return _parse_and_validate(data)


def _parse_and_validate(data: Any) -> AcquisitionConfig:
    """Parse and validate configuration data."""
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a mapping")

    if "version" not in data:
        raise ConfigError("Missing required field: version")

    if data["version"] != SUPPORTED_VERSION:
        raise ConfigError(
            f"Unsupported version: {data['version']} (expected {SUPPORTED_VERSION})"
        )

    section = data.get("typings") or {}
    if not isinstance(section, dict):
        raise ConfigError("'typings' must be a mapping")

    return _parse_typings_section(section)


def _parse_typings_section(section: Dict[str, Any]) -> AcquisitionConfig:
    known = {f.name for f in fields(AcquisitionConfig)}
    unknown = sorted(set(section) - known)
    if unknown:
        raise ConfigError(f"Unknown field(s) in 'typings': {', '.join(unknown)}")

    save = section.get("save_to_config_file", False)
    if not isinstance(save, bool):
        raise ConfigError("'typings.save_to_config_file' must be a boolean")

    tool_name = section.get("tool_name", DEFAULT_TOOL_NAME)
    if not isinstance(tool_name, str) or not tool_name:
        raise ConfigError("'typings.tool_name' must be a non-empty string")

    # YAML reads unquoted versions like 1.0 as floats
    tool_version = section.get("tool_version", DEFAULT_TOOL_VERSION)
    if isinstance(tool_version, (int, float)) and not isinstance(tool_version, bool):
        tool_version = str(tool_version)
    if not isinstance(tool_version, str) or not tool_version:
        raise ConfigError("'typings.tool_version' must be a non-empty string")

    tools_dir = section.get("tools_dir")
    if tools_dir is not None and not isinstance(tools_dir, str):
        raise ConfigError("'typings.tools_dir' must be a string")

    return AcquisitionConfig(
        save_to_config_file=save,
        tool_name=tool_name,
        tool_version=tool_version,
        tools_dir=tools_dir,
    )
