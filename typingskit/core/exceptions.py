"""
Centralized exception hierarchy for typingskit.

Acquisition failures never cross the public boundary as exceptions; these
types are used by the configuration layer, the package-manager capability
and the CLI.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class TypingsKitError(Exception):
    """Base exception for all typingskit errors."""

    pass


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigError(TypingsKitError):
    """Configuration parsing or validation error."""

    pass


# ============================================================================
# Package Manager Exceptions
# ============================================================================


class PackageManagerNotFoundError(TypingsKitError):
    """Package manager executable not found."""

    pass


# ============================================================================
# Process Exceptions
# ============================================================================


class ProcessStartError(TypingsKitError):
    """Raised when an external process cannot be launched."""

    def __init__(self, executable: str, reason: str = ""):
        self.executable = executable
        msg = f"Could not start '{executable}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)
