"""
Provision the typings acquisition tool.

The tool is installed once into a shared per-user directory
(<app-data>/Microsoft/Node.js Tools/ExternalTools) and reused by every
project. Installation is attempted at most once per process lifetime: after
one attempt, success or failure, later callers only check whether the
executable exists.

Classes:
    ToolSpec: Name and pinned version of the acquisition tool
    ToolInstallationState: Install bookkeeping for one tools directory
    ToolProvisioner: Ensures the tool is installed
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple

from typingskit.config.parser import DEFAULT_TOOL_NAME, DEFAULT_TOOL_VERSION
from typingskit.core.directory import get_external_tools_dir, get_tool_bin_dir
from typingskit.core.locking import tools_install_lock
from typingskit.core.process import OutputSink
from typingskit.packages.base import PackageInstaller

logger = logging.getLogger(__name__)

# Check, install, check again. Never more.
MAX_INSTALL_CHECKS = 2


@dataclass(frozen=True)
class ToolSpec:
    """Identity of the acquisition tool."""

    name: str = DEFAULT_TOOL_NAME
    version: str = DEFAULT_TOOL_VERSION

    @property
    def executable_name(self) -> str:
        """npm links package binaries as .cmd scripts on Windows."""
        return f"{self.name}.cmd" if os.name == "nt" else self.name


@dataclass
class ToolInstallationState:
    """
    Install bookkeeping.

    Attributes:
        installed_path: Executable path once it has been seen on disk
        attempted: Set on the first install attempt and never reset
    """

    installed_path: Optional[Path] = None
    attempted: bool = False


class ToolProvisioner:
    """
    Ensures the acquisition tool is installed in the shared tools directory.

    Callers must hold the acquisition gate while calling ensure_installed();
    that is what makes the single-attempt guarantee race-free within a
    process. Installs from other processes are kept apart by a file lock.

    Attributes:
        spec: Tool name and pinned version
        tools_dir: Shared ExternalTools directory
        state: Install bookkeeping
    """

    def __init__(self, spec: Optional[ToolSpec] = None, tools_dir: Optional[Path] = None):
        self.spec = spec or ToolSpec()
        self.tools_dir = get_external_tools_dir(tools_dir)
        self.state = ToolInstallationState()

    @property
    def tool_path(self) -> Path:
        """Where the installed executable is expected."""
        return get_tool_bin_dir(self.tools_dir) / self.spec.executable_name

    def is_installed(self) -> bool:
        return self.tool_path.exists()

    async def ensure_installed(
        self, installer: PackageInstaller, sink: Optional[OutputSink] = None
    ) -> Optional[Path]:
        """
        Return the tool path, installing the tool first if needed.

        Args:
            installer: Package manager used for the install
            sink: Optional receiver of installer output

        Returns:
            Path to the tool executable, or None if it is unavailable

        Raises:
            OSError: If the tools directory cannot be created
        """
        for _ in range(MAX_INSTALL_CHECKS):
            if self.is_installed():
                self.state.installed_path = self.tool_path
                return self.tool_path

            if self.state.attempted:
                logger.debug(
                    f"{self.spec.name} not found and install already attempted"
                )
                return None

            if not await self._install(installer, sink):
                return None

        return None

    async def _install(
        self, installer: PackageInstaller, sink: Optional[OutputSink]
    ) -> bool:
        self.state.attempted = True

        self.tools_dir.mkdir(parents=True, exist_ok=True)

        logger.info(
            f"Installing {self.spec.name}@{self.spec.version} to {self.tools_dir}"
        )
        try:
            async with tools_install_lock(self.tools_dir):
                if self.is_installed():
                    logger.debug(f"{self.spec.name} installed by another process")
                    return True
                return await installer.install_package_to_folder_by_version(
                    self.tools_dir,
                    self.spec.name,
                    self.spec.version,
                    save_to_package_json=False,
                    sink=sink,
                )
        except Exception as e:
            logger.error(
                f"Failed to install {self.spec.name}@{self.spec.version} "
                f"with {installer.get_name()}: {e}"
            )
            return False


_shared_provisioners: Dict[Tuple[ToolSpec, Path], ToolProvisioner] = {}


def get_shared_provisioner(
    spec: Optional[ToolSpec] = None, tools_dir: Optional[Path] = None
) -> ToolProvisioner:
    """
    Get the process-wide provisioner for a tool and tools directory.

    Sharing the provisioner makes the install attempt once per process
    rather than once per coordinator.
    """
    spec = spec or ToolSpec()
    resolved_dir = get_external_tools_dir(tools_dir)
    key = (spec, resolved_dir)
    provisioner = _shared_provisioners.get(key)
    if provisioner is None:
        provisioner = ToolProvisioner(spec, resolved_dir)
        _shared_provisioners[key] = provisioner
    return provisioner


def reset_shared_provisioners() -> None:
    """Forget all shared provisioners and their install attempts."""
    _shared_provisioners.clear()
