"""
Shared utilities for CLI commands.
"""

import logging
import sys
from pathlib import Path

from typingskit.config.parser import AcquisitionConfig, load_config

logger = logging.getLogger(__name__)


class ConsoleSink:
    """OutputSink printing tool output to stdout and errors to stderr."""

    def __init__(self, quiet: bool = False):
        self.quiet = quiet

    def write_line(self, line: str) -> None:
        if not self.quiet:
            print(line, file=sys.stdout)

    def write_error_line(self, line: str) -> None:
        print(line, file=sys.stderr)


def resolve_project_root(args) -> Path:
    """Get the absolute project root from parsed arguments."""
    return Path(getattr(args, "project_root", None) or Path.cwd()).resolve()


def load_cli_config(args) -> AcquisitionConfig:
    """
    Load configuration honoring --config and --project-root.

    Raises:
        ConfigError: If the configuration file is invalid
    """
    project_root = resolve_project_root(args)
    config_path = getattr(args, "config", None)
    config = load_config(project_root, config_path)
    logger.debug(f"Loaded configuration: {config}")
    return config
