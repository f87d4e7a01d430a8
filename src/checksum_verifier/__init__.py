"""File integrity checker: checksum databases for file trees."""

__version__ = "0.1.0"
