"""
Scan a project's typings directory for already-acquired packages.

The typings tool writes declaration files to
<project>/typings/<packageDir>/**/*.d.ts. A package counts as acquired when
some *.d.ts file lives directly inside a directory of that name. The name
reported is the file's immediate parent directory, so
typings/bar/sub/other.d.ts yields "sub", not "bar"; the acquisition cache
relies on that rule staying exactly as it is.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Set

from typingskit.core.directory import get_typings_dir

logger = logging.getLogger(__name__)

DECLARATION_FILE_PATTERN = "*.d.ts"


@dataclass(frozen=True)
class ScanResult:
    """
    Best-effort result of scanning the typings directory.

    Attributes:
        packages: Package names found before the scan ended
        complete: False if a filesystem error cut the scan short
        error: The error that stopped the scan, if any
    """

    packages: frozenset
    complete: bool = True
    error: Optional[OSError] = None


class PackageScanner:
    """Reports which declaration packages are present in a project."""

    def scan(self, project_root: Path) -> ScanResult:
        """
        Scan <project_root>/typings for declaration packages.

        Never raises: an OSError (including permission errors) stops the
        scan and whatever was collected so far is returned.

        Args:
            project_root: Root directory of the project

        Returns:
            ScanResult with the names of the immediate parent directories of
            every *.d.ts file, excluding files directly in typings/
        """
        typings_dir = get_typings_dir(project_root)
        packages: Set[str] = set()

        try:
            if not typings_dir.is_dir():
                return ScanResult(packages=frozenset())

            typings_root = typings_dir.resolve()
            for file in typings_dir.rglob(DECLARATION_FILE_PATTERN):
                name = self.package_name(file, typings_dir, typings_root)
                if name is not None:
                    packages.add(name)
        except OSError as e:
            logger.debug(f"Stopped scanning {typings_dir}: {e}")
            return ScanResult(packages=frozenset(packages), complete=False, error=e)

        logger.debug(f"Found {len(packages)} typings package(s) in {typings_dir}")
        return ScanResult(packages=frozenset(packages))

    def package_name(
        self, file: Path, typings_dir: Path, typings_root: Path
    ) -> Optional[str]:
        """
        Name of the package a declaration file belongs to.

        Args:
            file: Candidate *.d.ts path found under typings_dir
            typings_dir: The project's typings directory
            typings_root: typings_dir with symlinks resolved

        Returns:
            The immediate parent directory name, or None for directories,
            files directly in typings/ and files whose directory resolves
            outside typings/
        """
        if not file.is_file():
            return None
        directory = file.parent
        if directory == typings_dir:
            return None
        # Symlinks and junctions must not pull in names from outside typings/
        if not directory.resolve().is_relative_to(typings_root):
            logger.debug(f"Skipping declaration outside typings: {file}")
            return None
        return directory.name


def scan_packages(project_root: Path) -> Set[str]:
    """Convenience wrapper returning just the package names."""
    return set(PackageScanner().scan(project_root).packages)
