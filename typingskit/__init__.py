"""
typingskit - on-demand acquisition of TypeScript declaration packages.

Fetches DefinitelyTyped declarations for a project with the `typings` tool,
installing a pinned version of the tool on first use.
"""

from typingskit.acquisition import AcquisitionCoordinator
from typingskit.config import AcquisitionConfig, load_config
from typingskit.core.process import LoggingSink, OutputSink

__version__ = "0.1.0"

__all__ = [
    "AcquisitionConfig",
    "AcquisitionCoordinator",
    "LoggingSink",
    "OutputSink",
    "load_config",
]
