"""
Typings acquisition coordinator.

Entry point used by the surrounding application: one coroutine,
`acquire(packages, sink)`, that fetches whatever declaration packages the
project does not have yet.

All acquisition work in the process is serialized through one
AcquisitionGate. The shared tools directory and the typings tool are
process-global resources, so two projects acquiring at the same time still
take turns.

Usage:
    from typingskit.acquisition import AcquisitionCoordinator

    coordinator = AcquisitionCoordinator(Path('/path/to/project'))
    ok = await coordinator.acquire(['lodash', 'express'], sink=LoggingSink())
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Set

from typingskit.acquisition.provisioner import (
    ToolProvisioner,
    ToolSpec,
    get_shared_provisioner,
)
from typingskit.acquisition.runner import ProcessRunner
from typingskit.acquisition.scanner import PackageScanner
from typingskit.config.parser import AcquisitionConfig
from typingskit.core.locking import AcquisitionGate, get_shared_gate
from typingskit.core.process import OutputSink
from typingskit.packages.base import PackageInstaller
from typingskit.packages.npm import NpmInstaller

logger = logging.getLogger(__name__)

TOOL_NOT_INSTALLED_MESSAGE = (
    "The typings acquisition tool is not installed and could not be installed. "
    "Make sure npm is available and the network is reachable."
)


class AcquisitionCoordinator:
    """
    Acquires typings packages for one project.

    The set of acquired packages is seeded from the project's typings
    directory on first use and only grows afterwards. A package is added
    only after the typings tool exited with code 0.

    Attributes:
        project_root: Root directory of the project
        config: Acquisition settings
        installer: Package manager used to install the typings tool
        gate: Exclusion gate (process-wide shared gate by default)
        provisioner: Tool provisioner (process-wide shared one by default)
        scanner: Scanner used to seed the cache
        runner: Runs the typings tool
    """

    def __init__(
        self,
        project_root: Path,
        installer: Optional[PackageInstaller] = None,
        config: Optional[AcquisitionConfig] = None,
        gate: Optional[AcquisitionGate] = None,
        provisioner: Optional[ToolProvisioner] = None,
        scanner: Optional[PackageScanner] = None,
        runner: Optional[ProcessRunner] = None,
    ):
        self.project_root = Path(project_root)
        self.config = config or AcquisitionConfig()
        self.installer = installer or NpmInstaller()
        self.gate = gate or get_shared_gate()
        self.provisioner = provisioner or get_shared_provisioner(
            ToolSpec(self.config.tool_name, self.config.tool_version),
            self.config.tools_dir_path,
        )
        self.scanner = scanner or PackageScanner()
        self.runner = runner or ProcessRunner(
            self.project_root, self.config.save_to_config_file
        )

        self._acquired: Optional[Set[str]] = None

    @property
    def acquired_packages(self) -> frozenset:
        """Snapshot of the packages known to be acquired (empty before first use)."""
        return frozenset(self._acquired or ())

    async def acquire(
        self, packages: Iterable[str], sink: Optional[OutputSink] = None
    ) -> bool:
        """
        Acquire typings for every requested package not yet acquired.

        Waits for the acquisition gate without blocking the event loop and
        holds it until this call finishes, whatever the outcome.

        Args:
            packages: Requested package names
            sink: Optional receiver of progress and error lines

        Returns:
            True if every requested package is now acquired

        Raises:
            OSError: If the shared tools directory cannot be created
        """
        if isinstance(packages, str):
            packages = [packages]
        requested = list(dict.fromkeys(packages))

        async with self.gate:
            acquired = self._get_acquired()
            missing = [name for name in requested if name not in acquired]
            if not missing:
                logger.debug(f"All requested typings already acquired: {requested}")
                return True

            logger.info(f"Acquiring typings: {', '.join(missing)}")
            success = await self._download(missing, sink)
            if success:
                acquired.update(missing)
            return success

    def _get_acquired(self) -> Set[str]:
        # Only called with the gate held, so the scan happens once.
        if self._acquired is None:
            result = self.scanner.scan(self.project_root)
            if not result.complete:
                logger.debug(
                    f"Typings scan of {self.project_root} incomplete: {result.error}"
                )
            self._acquired = set(result.packages)
        return self._acquired

    async def _download(self, packages: List[str], sink: Optional[OutputSink]) -> bool:
        tool_path = await self.provisioner.ensure_installed(self.installer, sink)
        if tool_path is None:
            logger.error(f"{self.provisioner.spec.name} tool is not available")
            if sink is not None:
                sink.write_error_line(TOOL_NOT_INSTALLED_MESSAGE)
            return False

        return await self.runner.run(tool_path, packages, sink)
