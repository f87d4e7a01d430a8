"""Configuration models for the checksum verifier."""

from typing import Literal
from pydantic import BaseModel, Field, ConfigDict, field_validator
from checksum_verifier.common import LoggingConfig
from checksum_verifier.common.config_utils import expand_path_variables


class VerifierSettings(BaseModel):
    """Database location and scan settings."""
    
    model_config = ConfigDict(extra='forbid')
    
    database_path: str = Field(
        default="",
        description="Path to the XML checksum database"
    )
    base_path: str = Field(
        default="",
        description="Directory to scan (default: current directory, or the directory of --match)"
    )
    match_pattern: str = Field(
        default="*",
        description="File name glob, file or directory to check"
    )
    exclude_pattern: str = Field(
        default="",
        description="Glob of paths to exclude"
    )
    path_storage: Literal["relative", "full", "full-no-drive"] = Field(
        default="relative",
        description="How file paths are stored in the database"
    )
    checksum: Literal["md5", "sha1", "sha256", "sha512"] = Field(
        default="md5",
        description="Checksum algorithm"
    )
    recurse: bool = Field(
        default=False,
        description="Scan subdirectories"
    )
    
    @field_validator('database_path', 'base_path')
    @classmethod
    def expand_paths(cls, v: str) -> str:
        """Expand ${VAR} variables in paths."""
        return expand_path_variables(v)
    
    @field_validator('path_storage', 'checksum', mode='before')
    @classmethod
    def normalize_choice(cls, v: str) -> str:
        """Normalize choices to lowercase for case-insensitive input."""
        if isinstance(v, str):
            return v.lower()
        return v


class ChecksumVerifierConfig(BaseModel):
    """Root configuration for the checksum verifier."""
    
    model_config = ConfigDict(extra='forbid')
    
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    verifier: VerifierSettings = Field(default_factory=VerifierSettings)
