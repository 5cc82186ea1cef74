"""
Core infrastructure for typingskit.

Provides directory resolution, locking, the asynchronous process primitive
and the exception hierarchy shared by the rest of the package.
"""

from typingskit.core.exceptions import (
    ConfigError,
    PackageManagerNotFoundError,
    ProcessStartError,
    TypingsKitError,
)
from typingskit.core.locking import AcquisitionGate, get_shared_gate
from typingskit.core.process import (
    LoggingSink,
    OutputSink,
    ProcessInvocationResult,
    ProcessOutput,
)

__all__ = [
    "AcquisitionGate",
    "ConfigError",
    "LoggingSink",
    "OutputSink",
    "PackageManagerNotFoundError",
    "ProcessInvocationResult",
    "ProcessOutput",
    "ProcessStartError",
    "TypingsKitError",
    "get_shared_gate",
]
