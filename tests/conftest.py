"""
Pytest configuration and shared fixtures for typingskit tests.
"""

import os

import pytest
from pathlib import Path

from typingskit.acquisition.provisioner import (
    ToolProvisioner,
    reset_shared_provisioners,
)
from typingskit.core.directory import TOOLS_DIR_ENV_VAR
from typingskit.core.locking import reset_shared_gate
from tests.mocks.acquisition import RecordingSink


def pytest_collection_modifyitems(config, items):
    """Skip tests that run shell scripts on Windows."""
    if os.name != "nt":
        return
    skip_posix = pytest.mark.skip(reason="requires a POSIX shell")
    for item in items:
        if "posix_only" in item.keywords:
            item.add_marker(skip_posix)


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def isolated_process_state(tmp_path, monkeypatch):
    """
    Give every test a fresh shared gate and provisioner registry, and keep
    the default tools directory inside the test's temporary directory.
    """
    monkeypatch.setenv(TOOLS_DIR_ENV_VAR, str(tmp_path / "default-tools"))
    reset_shared_gate()
    reset_shared_provisioners()
    yield
    reset_shared_gate()
    reset_shared_provisioners()


@pytest.fixture
def sink() -> RecordingSink:
    """Output sink recording all lines."""
    return RecordingSink()


@pytest.fixture
def project_root(tmp_path) -> Path:
    """Empty project directory."""
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def tools_dir(tmp_path) -> Path:
    """Shared tools directory (not created)."""
    return tmp_path / "ExternalTools"


@pytest.fixture
def provisioner(tools_dir) -> ToolProvisioner:
    """Provisioner bound to the test tools directory."""
    return ToolProvisioner(tools_dir=tools_dir)


@pytest.fixture
def installed_provisioner(provisioner) -> ToolProvisioner:
    """Provisioner whose tool executable already exists."""
    provisioner.tool_path.parent.mkdir(parents=True, exist_ok=True)
    provisioner.tool_path.write_text("#!/bin/sh\nexit 0\n")
    provisioner.tool_path.chmod(0o755)
    return provisioner
