"""Tests for the XML database document."""

import xml.etree.ElementTree as ET

import pytest
from checksum_verifier.verifier import document
from checksum_verifier.verifier.document import is_storable_name, read_document, write_document
from checksum_verifier.verifier.errors import DatabaseLoadError


class TestWriteDocument:
    """Tests for write_document function."""
    
    def test_layout(self, tmp_path):
        """Test the element layout and attribute names."""
        path = tmp_path / "db.xml"
        write_document(path, [("a/1", "x1"), ("2", "x2")])
        
        root = ET.parse(path).getroot()
        files = root.findall("files/file")
        
        assert root.tag == "db"
        assert [(f.get("name"), f.get("checksum")) for f in files] == [("a/1", "x1"), ("2", "x2")]
    
    def test_xml_declaration(self, tmp_path):
        """Test the document starts with a UTF-8 declaration."""
        path = tmp_path / "db.xml"
        write_document(path, [])
        
        assert path.read_bytes().startswith(b"<?xml version='1.0' encoding='utf-8'?>")
    
    def test_creates_parent_directories(self, tmp_path):
        """Test missing parent directories are created."""
        path = tmp_path / "a" / "b" / "db.xml"
        write_document(path, [("1", "x")])
        
        assert path.exists()
    
    def test_special_characters(self, tmp_path):
        """Test names with XML metacharacters survive."""
        path = tmp_path / "db.xml"
        entries = [('a&b <"c">.txt', "x"), ("café.jpg", "y")]
        write_document(path, entries)
        
        assert read_document(path) == entries


class TestReadDocument:
    """Tests for read_document function."""
    
    def test_preserves_order(self, tmp_path):
        """Test entries come back in document order."""
        path = tmp_path / "db.xml"
        entries = [("z", "1"), ("a", "2"), ("m", "3")]
        write_document(path, entries)
        
        assert read_document(path) == entries
    
    def test_missing_attributes_are_empty(self, tmp_path):
        """Test missing attributes read as empty strings."""
        path = tmp_path / "db.xml"
        path.write_text('<db><files><file name="a"/><file checksum="x"/></files></db>', encoding='utf-8')
        
        assert read_document(path) == [("a", ""), ("", "x")]
    
    def test_empty_database(self, tmp_path):
        """Test a database without files section."""
        path = tmp_path / "db.xml"
        path.write_text("<db/>", encoding='utf-8')
        
        assert read_document(path) == []
    
    def test_malformed_xml(self, tmp_path):
        """Test malformed XML raises DatabaseLoadError."""
        path = tmp_path / "db.xml"
        path.write_text("<db><files>", encoding='utf-8')
        
        with pytest.raises(DatabaseLoadError) as exc_info:
            read_document(path)
        
        assert exc_info.value.context["path"] == str(path)
    
    def test_wrong_root(self, tmp_path):
        """Test an unrelated XML document is rejected."""
        path = tmp_path / "db.xml"
        path.write_text("<html><body/></html>", encoding='utf-8')
        
        with pytest.raises(DatabaseLoadError):
            read_document(path)


class TestStorableNames:
    """Tests for names that cannot go into the document."""
    
    @pytest.mark.parametrize("name", ["a\x01b", "tab\there", "line\nbreak", "bad\udcff"])
    def test_rejected(self, name):
        """Test control characters and undecodable bytes are not storable."""
        assert not is_storable_name(name)
    
    @pytest.mark.parametrize("name", ["photos/1.jpg", "café.jpg", "日本/写真.png", "emoji\U0001F600.txt", 'a&b <"c">'])
    def test_accepted(self, name):
        """Test ordinary Unicode names are storable."""
        assert is_storable_name(name)
    
    def test_write_refuses_unstorable_name(self, tmp_path):
        """Test the previous document survives a refused write."""
        path = tmp_path / "db.xml"
        write_document(path, [("1", "x")])
        
        with pytest.raises(ValueError):
            write_document(path, [("1", "x"), ("a\x01b", "y")])
        
        assert read_document(path) == [("1", "x")]


class TestAtomicWrite:
    """Tests that a failed write keeps the previous document."""
    
    def test_failed_replace_keeps_document(self, tmp_path, monkeypatch):
        """Test the old document is intact and no temporary file is left."""
        path = tmp_path / "db.xml"
        write_document(path, [("1", "x")])
        
        def fail_replace(src, dst):
            raise OSError("disk full")
        
        monkeypatch.setattr(document.os, "replace", fail_replace)
        
        with pytest.raises(OSError):
            write_document(path, [("2", "y")])
        
        assert read_document(path) == [("1", "x")]
        assert sorted(p.name for p in tmp_path.iterdir()) == ["db.xml"]
    
    def test_overwrites_existing(self, tmp_path):
        """Test a successful write replaces the document."""
        path = tmp_path / "db.xml"
        write_document(path, [("1", "x")])
        write_document(path, [("2", "y")])
        
        assert read_document(path) == [("2", "y")]
        assert sorted(p.name for p in tmp_path.iterdir()) == ["db.xml"]
