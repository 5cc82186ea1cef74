"""
Acquire command implementation.

Fetches typings for the given packages into the project's typings/ directory.
"""

import asyncio
import logging
from dataclasses import replace

from typingskit.acquisition.coordinator import AcquisitionCoordinator
from typingskit.cli.utils import ConsoleSink, load_cli_config, resolve_project_root
from typingskit.packages.npm import NpmInstaller

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the acquire command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    project_root = resolve_project_root(args)
    if not project_root.is_dir():
        logger.error(f"Project root does not exist: {project_root}")
        return 1

    config = load_cli_config(args)
    if args.save:
        config = replace(config, save_to_config_file=True)

    coordinator = AcquisitionCoordinator(
        project_root,
        installer=NpmInstaller(args.npm),
        config=config,
    )
    sink = ConsoleSink(quiet=args.quiet)

    success = asyncio.run(coordinator.acquire(args.packages, sink))
    if not success:
        logger.error("Typings acquisition failed")
        return 1
    return 0
