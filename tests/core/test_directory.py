"""
Unit tests for typingskit.core.directory module.

Tests cover:
- Application-data directory resolution
- ExternalTools directory overrides
- Project-relative directories
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from typingskit.core.directory import (
    TOOLS_DIR_ENV_VAR,
    get_app_data_dir,
    get_external_tools_dir,
    get_tool_bin_dir,
    get_typings_dir,
)


@pytest.mark.skipif(os.name == "nt", reason="POSIX path resolution")
class TestGetAppDataDir:
    """Tests for get_app_data_dir function."""

    def test_xdg_data_home(self, tmp_path):
        """Test that XDG_DATA_HOME wins when set."""
        with patch.dict(os.environ, {"XDG_DATA_HOME": str(tmp_path)}):
            assert get_app_data_dir() == tmp_path

    def test_home_fallback(self, monkeypatch):
        """Test the ~/.local/share fallback."""
        monkeypatch.delenv("XDG_DATA_HOME", raising=False)
        with patch("pathlib.Path.home", return_value=Path("/home/testuser")):
            assert get_app_data_dir() == Path("/home/testuser/.local/share")


class TestGetExternalToolsDir:
    """Tests for get_external_tools_dir function."""

    def test_explicit_override(self, tmp_path):
        """Test that an explicit directory is returned as-is."""
        assert get_external_tools_dir(tmp_path / "tools") == tmp_path / "tools"

    def test_environment_override(self, tmp_path, monkeypatch):
        """Test that TYPINGSKIT_TOOLS_DIR is honored."""
        monkeypatch.setenv(TOOLS_DIR_ENV_VAR, str(tmp_path / "env-tools"))
        assert get_external_tools_dir() == tmp_path / "env-tools"

    def test_default_layout(self, tmp_path, monkeypatch):
        """Test the vendor/product/ExternalTools layout."""
        monkeypatch.delenv(TOOLS_DIR_ENV_VAR, raising=False)
        with patch(
            "typingskit.core.directory.get_app_data_dir", return_value=tmp_path
        ):
            assert get_external_tools_dir() == (
                tmp_path / "Microsoft" / "Node.js Tools" / "ExternalTools"
            )

    def test_does_not_create_directory(self, tmp_path):
        tools = get_external_tools_dir(tmp_path / "tools")
        assert not tools.exists()


class TestProjectDirectories:
    """Tests for project-relative helpers."""

    def test_typings_dir(self, tmp_path):
        assert get_typings_dir(tmp_path) == tmp_path / "typings"

    def test_tool_bin_dir(self, tmp_path):
        assert get_tool_bin_dir(tmp_path) == tmp_path / "node_modules" / ".bin"
