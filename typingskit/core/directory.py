"""
Directory layout for typingskit.

Resolves the per-user application-data directory and the shared
ExternalTools directory where the acquisition tool is installed.

Directory Structure:
    Shared tools (<app-data>/Microsoft/Node.js Tools/ExternalTools/):
        - node_modules/.bin/  : Installed tool executables
        - install.lock        : Cross-process install lock

    Project-Local (<project-root>/):
        - typings/            : Declaration files written by the tool
        - typingskit.yaml     : Optional configuration
"""

import os
from pathlib import Path
from typing import Optional

from typingskit.core.exceptions import TypingsKitError

VENDOR_NAME = "Microsoft"
PRODUCT_NAME = "Node.js Tools"
EXTERNAL_TOOLS_DIR_NAME = "ExternalTools"
TYPINGS_DIR_NAME = "typings"

TOOLS_DIR_ENV_VAR = "TYPINGSKIT_TOOLS_DIR"


class DirectoryError(TypingsKitError):
    """Raised when a required directory cannot be determined."""

    pass


def get_app_data_dir() -> Path:
    """
    Get the platform-specific per-user application-data directory.

    Returns:
        Path: The application-data directory.
            - Windows: %LOCALAPPDATA%
            - Linux/macOS: $XDG_DATA_HOME or ~/.local/share

    Raises:
        DirectoryError: If LOCALAPPDATA is not set on Windows
    """
    if os.name == "nt":
        local_app_data = os.environ.get("LOCALAPPDATA")
        if not local_app_data:
            raise DirectoryError(
                "LOCALAPPDATA environment variable is not set. "
                "Cannot determine application data directory."
            )
        return Path(local_app_data)

    xdg_data_home = os.environ.get("XDG_DATA_HOME")
    if xdg_data_home:
        return Path(xdg_data_home)
    return Path.home() / ".local" / "share"


def get_external_tools_dir(override: Optional[Path] = None) -> Path:
    """
    Get the shared directory the acquisition tool is installed into.

    Resolution order: explicit override, TYPINGSKIT_TOOLS_DIR, then
    <app-data>/Microsoft/Node.js Tools/ExternalTools.

    Args:
        override: Explicit tools directory (e.g. from configuration)

    Returns:
        Path: The ExternalTools directory (not created)

    Example:
        >>> get_external_tools_dir()
        PosixPath('/home/user/.local/share/Microsoft/Node.js Tools/ExternalTools')
    """
    if override is not None:
        return Path(override)

    env_dir = os.environ.get(TOOLS_DIR_ENV_VAR)
    if env_dir:
        return Path(env_dir)

    return get_app_data_dir() / VENDOR_NAME / PRODUCT_NAME / EXTERNAL_TOOLS_DIR_NAME


def get_typings_dir(project_root: Path) -> Path:
    """Get the project's declaration output directory."""
    return Path(project_root) / TYPINGS_DIR_NAME


def get_tool_bin_dir(tools_dir: Path) -> Path:
    """Get the directory npm links installed executables into."""
    return Path(tools_dir) / "node_modules" / ".bin"
