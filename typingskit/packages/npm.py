"""
npm package manager integration for typingskit.

Installs npm packages into a private folder, which is how the acquisition
tool is provisioned into the shared ExternalTools directory.

Example:
    from pathlib import Path
    from typingskit.packages.npm import NpmInstaller

    npm = NpmInstaller()
    ok = await npm.install_package_to_folder_by_version(
        Path('/tools'), 'typings', '1.0.5'
    )
"""

import logging
import os
import shutil
from pathlib import Path
from typing import List, Optional

from typingskit.core.exceptions import PackageManagerNotFoundError
from typingskit.core.process import OutputSink, ProcessOutput
from typingskit.packages.base import PackageInstaller

logger = logging.getLogger(__name__)


def get_npm_executable_name() -> str:
    """npm ships as a .cmd script on Windows."""
    return "npm.cmd" if os.name == "nt" else "npm"


def get_system_npm_path() -> Optional[Path]:
    """
    Get path to system-installed npm.

    Returns:
        Path to npm executable, or None if not found on PATH
    """
    npm_path = shutil.which(get_npm_executable_name())
    return Path(npm_path) if npm_path else None


def build_install_arguments(
    package_name: str, version: str, save_to_package_json: bool = False
) -> List[str]:
    """
    Build the npm argument list for an exact-version install.

    Example:
        >>> build_install_arguments('typings', '1.0.5')
        ['install', 'typings@1.0.5', '--no-save']
    """
    arguments = ["install", f"{package_name}@{version}"]
    if not save_to_package_json:
        arguments.append("--no-save")
    return arguments


class NpmInstaller(PackageInstaller):
    """
    npm-backed PackageInstaller.

    Attributes:
        npm_path: Explicit npm executable, or None to search PATH
    """

    def __init__(self, npm_path: Optional[Path] = None):
        self.npm_path = Path(npm_path) if npm_path else None

    def find_npm(self) -> Path:
        """
        Locate the npm executable.

        Returns:
            Path to npm

        Raises:
            PackageManagerNotFoundError: If npm cannot be found
        """
        if self.npm_path is not None:
            if self.npm_path.exists():
                return self.npm_path
            raise PackageManagerNotFoundError(
                f"npm executable not found at {self.npm_path}"
            )

        system_npm = get_system_npm_path()
        if system_npm is None:
            raise PackageManagerNotFoundError(
                "npm not found. Install Node.js and make sure npm is on PATH.\n"
                "Installation: https://nodejs.org/"
            )
        return system_npm

    async def install_package_to_folder_by_version(
        self,
        folder: Path,
        package_name: str,
        version: str,
        save_to_package_json: bool = False,
        sink: Optional[OutputSink] = None,
    ) -> bool:
        try:
            npm = self.find_npm()
        except PackageManagerNotFoundError as e:
            logger.error(str(e))
            if sink is not None:
                sink.write_error_line(str(e))
            return False

        arguments = build_install_arguments(
            package_name, version, save_to_package_json
        )
        logger.info(f"Installing {package_name}@{version} into {folder}")

        async with ProcessOutput(npm, arguments, cwd=folder, sink=sink) as process:
            if not process.is_started:
                return False
            exit_code = await process.wait()

        if exit_code != 0:
            logger.error(
                f"npm install {package_name}@{version} failed with exit code {exit_code}"
            )
            return False

        logger.info(f"Installed {package_name}@{version} into {folder}")
        return True

    def get_name(self) -> str:
        return "npm"
