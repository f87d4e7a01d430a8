"""Tests for database key conversion."""

import os

import pytest
from checksum_verifier.verifier.paths import PathStoragePolicy, to_canonical, to_filesystem_path


class TestToCanonical:
    """Tests for to_canonical function."""
    
    def test_relative_inside_base(self, tmp_path):
        """Test relative keys use forward slashes."""
        file_path = tmp_path / "sub" / "file.txt"
        
        assert to_canonical(file_path, tmp_path, PathStoragePolicy.RELATIVE_PATH) == "sub/file.txt"
    
    def test_relative_input_resolves_against_base(self, tmp_path):
        """Test relative input is anchored to the base path."""
        result = to_canonical(os.path.join("sub", "file.txt"), tmp_path, PathStoragePolicy.RELATIVE_PATH)
        
        assert result == "sub/file.txt"
    
    def test_relative_outside_base_keeps_absolute(self, tmp_path):
        """Test files outside the base keep their absolute path."""
        base = tmp_path / "base"
        outside = tmp_path / "other" / "file.txt"
        
        assert to_canonical(outside, base, PathStoragePolicy.RELATIVE_PATH) == str(outside)
    
    def test_sibling_with_common_prefix_is_outside(self, tmp_path):
        """Test 'base2' is not treated as inside 'base'."""
        base = tmp_path / "base"
        sibling = tmp_path / "base2" / "file.txt"
        
        assert to_canonical(sibling, base, PathStoragePolicy.RELATIVE_PATH) == str(sibling)
    
    def test_full_path(self, tmp_path):
        """Test full keys are absolute."""
        file_path = tmp_path / "file.txt"
        
        assert to_canonical("file.txt", tmp_path, PathStoragePolicy.FULL_PATH) == str(file_path)
    
    def test_full_path_no_drive(self, tmp_path):
        """Test the volume anchor is stripped."""
        file_path = tmp_path / "file.txt"
        
        result = to_canonical(file_path, tmp_path, PathStoragePolicy.FULL_PATH_NO_DRIVE)
        
        assert result == str(file_path)[len(file_path.anchor):]
        assert not os.path.isabs(result)


class TestRoundTrip:
    """Tests that keys map back to the same file."""
    
    @pytest.mark.parametrize("policy", list(PathStoragePolicy))
    def test_round_trip(self, tmp_path, policy):
        """Test to_filesystem_path(to_canonical(p)) names the same file."""
        file_path = tmp_path / "a" / "b.txt"
        file_path.parent.mkdir()
        file_path.write_text("b", encoding='utf-8')
        
        name = to_canonical(file_path, tmp_path, policy)
        restored = to_filesystem_path(name, tmp_path, policy)
        
        assert os.path.samefile(restored, file_path)
    
    def test_relative_outside_base_round_trip(self, tmp_path):
        """Test absolute keys survive the relative policy."""
        base = tmp_path / "base"
        outside = tmp_path / "other.txt"
        
        name = to_canonical(outside, base, PathStoragePolicy.RELATIVE_PATH)
        
        assert to_filesystem_path(name, base, PathStoragePolicy.RELATIVE_PATH) == str(outside)
    
    def test_stored_key_with_forward_slashes(self, tmp_path):
        """Test stored relative keys resolve on the current platform."""
        restored = to_filesystem_path("sub/file.txt", tmp_path, PathStoragePolicy.RELATIVE_PATH)
        
        assert restored == os.path.join(str(tmp_path), "sub", "file.txt")
