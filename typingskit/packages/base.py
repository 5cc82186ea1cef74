"""
Package manager capability for typingskit.

The acquisition tool itself is distributed as an npm package. Installing it
is delegated to a PackageInstaller so the coordinator does not depend on a
particular package manager.

Classes:
    PackageInstaller: Abstract capability "install package X at version V into folder F"
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from typingskit.core.process import OutputSink


class PackageInstaller(ABC):
    """
    Abstract base class for package manager implementations.

    Example:
        class MyInstaller(PackageInstaller):
            async def install_package_to_folder_by_version(
                self, folder, package_name, version, save_to_package_json=False, sink=None
            ) -> bool:
                # Run the package manager
                return True

            def get_name(self) -> str:
                return 'mypm'
    """

    @abstractmethod
    async def install_package_to_folder_by_version(
        self,
        folder: Path,
        package_name: str,
        version: str,
        save_to_package_json: bool = False,
        sink: Optional[OutputSink] = None,
    ) -> bool:
        """
        Install a package at an exact version into a folder.

        Args:
            folder: Directory the package is installed into
            package_name: Package to install (e.g., 'typings')
            version: Exact version to install (e.g., '1.0.5')
            save_to_package_json: Record the package in folder's package.json
            sink: Optional receiver of the package manager's output

        Returns:
            True if the install succeeded, False otherwise
        """
        pass

    @abstractmethod
    def get_name(self) -> str:
        """
        Get the package manager name.

        Returns:
            Package manager name (e.g., 'npm')
        """
        pass
