"""Configuration loading for typingskit."""

from typingskit.config.parser import (
    CONFIG_FILE_NAME,
    DEFAULT_TOOL_NAME,
    DEFAULT_TOOL_VERSION,
    AcquisitionConfig,
    load_config,
    parse_config,
)
from typingskit.core.exceptions import ConfigError

__all__ = [
    "CONFIG_FILE_NAME",
    "DEFAULT_TOOL_NAME",
    "DEFAULT_TOOL_VERSION",
    "AcquisitionConfig",
    "ConfigError",
    "load_config",
    "parse_config",
]
