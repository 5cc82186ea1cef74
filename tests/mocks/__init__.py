"""
Test doubles for typingskit components.

This package provides stand-ins for the package manager, the typings tool
and output sinks to enable isolated, deterministic testing.
"""

from .acquisition import (
    CountingScanner,
    FakeInstaller,
    FakeRunner,
    RecordingSink,
    make_tool_script,
    write_declaration,
)

__all__ = [
    "CountingScanner",
    "FakeInstaller",
    "FakeRunner",
    "RecordingSink",
    "make_tool_script",
    "write_declaration",
]
