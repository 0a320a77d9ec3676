"""
Unit tests for store directory resolution.
"""

import os
import sys
import pytest
from pathlib import Path
from unittest.mock import patch

from nimswitch.core.directory import (
    DirectoryCreationError,
    DirectoryError,
    ensure_store_structure,
    get_data_dir,
    get_store_dir,
    verify_directory_writable,
)


class TestGetStoreDir:
    """Tests for get_store_dir."""

    def test_env_override(self, tmp_path):
        assert get_store_dir({"NIMSWITCH_DIR": str(tmp_path)}) == tmp_path

    def test_env_override_expands_user(self):
        result = get_store_dir({"NIMSWITCH_DIR": "~/nim-versions"})
        assert result == Path.home() / "nim-versions"

    def test_empty_env_falls_back(self, tmp_path):
        env = {"NIMSWITCH_DIR": "", "XDG_DATA_HOME": str(tmp_path)}
        assert get_store_dir(env) == get_data_dir(env)

    @pytest.mark.skipif(
        os.name == "nt" or sys.platform == "darwin", reason="Linux layout"
    )
    def test_xdg_data_home(self, tmp_path):
        assert get_store_dir({"XDG_DATA_HOME": str(tmp_path)}) == tmp_path / "nimswitch"

    @pytest.mark.skipif(
        os.name == "nt" or sys.platform == "darwin", reason="Linux layout"
    )
    def test_default_linux_location(self):
        assert get_store_dir({}) == Path.home() / ".local" / "share" / "nimswitch"

    @pytest.mark.skipif(os.name != "nt", reason="Windows layout")
    def test_windows_requires_localappdata(self):
        with pytest.raises(DirectoryError, match="LOCALAPPDATA"):
            get_data_dir({})


class TestEnsureStoreStructure:
    """Tests for ensure_store_structure."""

    def test_creates_missing_root(self, tmp_path):
        root = tmp_path / "a" / "b" / "store"

        result = ensure_store_structure(root)

        assert root.is_dir()
        assert result == root.resolve()

    def test_existing_root(self, tmp_path):
        assert ensure_store_structure(tmp_path) == tmp_path.resolve()

    def test_creation_failure(self, tmp_path):
        with patch.object(Path, "mkdir", side_effect=OSError("read-only")):
            with pytest.raises(DirectoryCreationError, match="read-only"):
                ensure_store_structure(tmp_path / "store")

    def test_not_writable(self, tmp_path):
        with patch(
            "nimswitch.core.directory.verify_directory_writable", return_value=False
        ):
            with pytest.raises(DirectoryError, match="not writable"):
                ensure_store_structure(tmp_path)


class TestVerifyDirectoryWritable:
    def test_writable(self, tmp_path):
        assert verify_directory_writable(tmp_path) is True
        assert not (tmp_path / ".write_test").exists()

    def test_missing(self, tmp_path):
        assert verify_directory_writable(tmp_path / "missing") is False

    def test_file(self, tmp_path):
        (tmp_path / "file").write_text("x")
        assert verify_directory_writable(tmp_path / "file") is False
