"""Command-line interface for typingskit."""

from typingskit.cli.parser import CLI, main

__all__ = ["CLI", "main"]
