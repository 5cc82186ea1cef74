"""
Package manager integrations for typingskit.

Available Components:
--------------------
- PackageInstaller: Abstract capability used to install the acquisition tool
- NpmInstaller: npm implementation of PackageInstaller
"""

from typingskit.packages.base import PackageInstaller
from typingskit.packages.npm import NpmInstaller

__all__ = [
    "PackageInstaller",
    "NpmInstaller",
]
