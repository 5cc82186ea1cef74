"""
List command implementation.

Prints packages that already have declaration files in typings/.
"""

import logging

from typingskit.acquisition.scanner import PackageScanner
from typingskit.cli.utils import resolve_project_root

logger = logging.getLogger(__name__)


def run(args) -> int:
    project_root = resolve_project_root(args)
    result = PackageScanner().scan(project_root)

    for name in sorted(result.packages):
        print(name)

    if not result.complete:
        logger.warning(f"Scan of typings/ stopped early: {result.error}")
    return 0
