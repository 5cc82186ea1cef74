"""
Typings acquisition for typingskit.

Available Components:
--------------------
- AcquisitionCoordinator: Entry point; serializes and caches acquisitions
- ToolProvisioner: Installs the pinned typings tool once per process
- ProcessRunner: Runs the typings tool
- PackageScanner: Finds packages already present in typings/
"""

from typingskit.acquisition.coordinator import AcquisitionCoordinator
from typingskit.acquisition.provisioner import (
    ToolInstallationState,
    ToolProvisioner,
    ToolSpec,
    get_shared_provisioner,
    reset_shared_provisioners,
)
from typingskit.acquisition.runner import ProcessRunner, build_install_arguments
from typingskit.acquisition.scanner import PackageScanner, ScanResult, scan_packages

__all__ = [
    "AcquisitionCoordinator",
    "PackageScanner",
    "ProcessRunner",
    "ScanResult",
    "ToolInstallationState",
    "ToolProvisioner",
    "ToolSpec",
    "build_install_arguments",
    "get_shared_provisioner",
    "reset_shared_provisioners",
    "scan_packages",
]
