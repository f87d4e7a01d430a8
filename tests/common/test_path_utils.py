"""Tests for path utilities."""

import os

import pytest
from checksum_verifier.common import path_utils
from checksum_verifier.common.path_utils import (
    LONG_PATH_PREFIX,
    absolute_path,
    dir_exists_long,
    exists_long,
    long_path,
    to_storage_separators,
    volume_prefix,
)


class TestAbsolutePath:
    """Tests for absolute_path function."""
    
    def test_relative_resolves_against_base(self, tmp_path):
        """Test relative paths are anchored to the base, not the working directory."""
        result = absolute_path(os.path.join("sub", "file.txt"), tmp_path)
        assert result == os.path.join(str(tmp_path), "sub", "file.txt")
    
    def test_absolute_path_unchanged(self, tmp_path):
        """Test absolute paths ignore the base."""
        target = str(tmp_path / "file.txt")
        assert absolute_path(target, "/somewhere/else") == target
    
    def test_normalizes_dot_segments(self, tmp_path):
        """Test that '.' and '..' segments are collapsed."""
        result = absolute_path(os.path.join("a", "..", ".", "file.txt"), tmp_path)
        assert result == os.path.join(str(tmp_path), "file.txt")
    
    def test_working_directory_untouched(self, tmp_path):
        """Test the process working directory does not change."""
        before = os.getcwd()
        absolute_path("file.txt", tmp_path)
        assert os.getcwd() == before


class TestStorageSeparators:
    """Tests for to_storage_separators function."""
    
    def test_forward_slashes(self):
        """Test result uses forward slashes."""
        result = to_storage_separators(os.path.join("photos", "2023", "image.jpg"))
        assert result == "photos/2023/image.jpg"
    
    def test_already_normalized(self):
        """Test that already normalized paths are unchanged."""
        assert to_storage_separators("photos/2023/image.jpg") == "photos/2023/image.jpg"


class TestVolumePrefix:
    """Tests for volume_prefix function."""
    
    @pytest.mark.skipif(os.name == "nt", reason="POSIX paths")
    def test_posix_root(self):
        """Test POSIX anchor is the root slash."""
        assert volume_prefix("/home/user/file") == "/"
    
    def test_relative_has_no_anchor(self):
        """Test relative paths have an empty anchor."""
        assert volume_prefix("relative/file") == ""


class TestLongPath:
    """Tests for long-path helpers."""
    
    @pytest.mark.skipif(os.name == "nt", reason="Long paths only exist on Windows")
    def test_none_on_posix(self, tmp_path):
        """Test there is no long-path form outside Windows."""
        assert long_path(tmp_path) is None
    
    def test_prefixed_on_windows(self, monkeypatch):
        """Test the extended-length prefix is added on Windows."""
        monkeypatch.setattr(path_utils.os, "name", "nt")
        result = long_path("/data/file.txt")
        assert result.startswith(LONG_PATH_PREFIX)
    
    def test_already_prefixed(self, monkeypatch):
        """Test no alternate form for an already prefixed path."""
        monkeypatch.setattr(path_utils.os, "name", "nt")
        assert long_path(LONG_PATH_PREFIX + "C:\\data") is None
    
    def test_exists_long(self, tmp_path):
        """Test file existence checks."""
        file_path = tmp_path / "file.txt"
        file_path.write_text("x", encoding='utf-8')
        
        assert exists_long(file_path)
        assert not exists_long(tmp_path / "missing.txt")
        assert not exists_long(tmp_path)
    
    def test_dir_exists_long(self, tmp_path):
        """Test directory existence checks."""
        file_path = tmp_path / "file.txt"
        file_path.write_text("x", encoding='utf-8')
        
        assert dir_exists_long(tmp_path)
        assert not dir_exists_long(file_path)
        assert not dir_exists_long(tmp_path / "missing")
