"""
Run the typings tool to fetch declaration packages.

Each package is requested from the DefinitelyTyped registry with the
`dt~<name>` source prefix and installed globally, i.e. into
<project>/typings/globals.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional

from typingskit.core.process import OutputSink, ProcessOutput

logger = logging.getLogger(__name__)

DEFINITELY_TYPED_PREFIX = "dt~"

INSTALL_COMPLETED_MESSAGE = "Typings acquisition completed."
INSTALL_FAILED_MESSAGE = "An error occurred while acquiring typings."


def build_install_arguments(
    packages: Iterable[str], save_to_config_file: bool = False
) -> List[str]:
    """
    Build the typings tool argument list.

    Args:
        packages: Package names, in the order they should be passed
        save_to_config_file: Persist the packages to typings.json

    Returns:
        ['install', 'dt~<pkg>'..., ('--save'), '--global']

    Example:
        >>> build_install_arguments(['lodash'], save_to_config_file=True)
        ['install', 'dt~lodash', '--save', '--global']
    """
    arguments = ["install"]
    arguments.extend(f"{DEFINITELY_TYPED_PREFIX}{name}" for name in packages)
    if save_to_config_file:
        arguments.append("--save")
    arguments.append("--global")
    return arguments


class ProcessRunner:
    """
    Invokes the typings tool for a project.

    Attributes:
        project_root: Working directory for the tool
        save_to_config_file: Whether to pass --save
    """

    def __init__(self, project_root: Path, save_to_config_file: bool = False):
        self.project_root = Path(project_root)
        self.save_to_config_file = save_to_config_file

    async def run(
        self,
        tool_path: Path,
        packages: Iterable[str],
        sink: Optional[OutputSink] = None,
    ) -> bool:
        """
        Install packages with the typings tool.

        The caller guarantees packages is non-empty. Never raises for a
        failed launch or a failed run; both are reported to the sink.

        Args:
            tool_path: Path to the typings executable
            packages: Package names to install
            sink: Optional receiver of tool output and status lines

        Returns:
            True if the tool exited with code 0
        """
        arguments = build_install_arguments(packages, self.save_to_config_file)

        async with ProcessOutput(
            tool_path, arguments, cwd=self.project_root, sink=sink, quote_args=True
        ) as process:
            if not process.result.started:
                # The launch error itself has already gone to the sink
                if sink is not None:
                    sink.write_error_line(f"could not start '{Path(tool_path).name}'")
                return False

            await process.wait()
            result = process.result
            if result.succeeded:
                logger.info(f"typings install succeeded in {self.project_root}")
                if sink is not None:
                    sink.write_line(INSTALL_COMPLETED_MESSAGE)
                return True

            process.kill()
            logger.warning(f"typings install failed with exit code {result.exit_code}")
            if sink is not None:
                sink.write_error_line(INSTALL_FAILED_MESSAGE)
            return False
