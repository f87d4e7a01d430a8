"""Logging configuration model."""

from typing import Literal
from pydantic import BaseModel, Field, ConfigDict, ValidationInfo, field_validator


class LoggingConfig(BaseModel):
    """[logging] section of the configuration."""
    
    model_config = ConfigDict(extra='forbid')
    
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Log level; progress goes to stdout regardless"
    )
    format: Literal["simple", "detailed", "json"] = Field(
        default="simple",
        description="Format of log records on stderr"
    )
    file: str | None = Field(
        default=None,
        description="Optional log file, written as JSON lines"
    )
    max_file_size_mb: int = Field(
        default=10,
        ge=1,
        description="Size at which the log file is rotated"
    )
    backup_count: int = Field(
        default=5,
        ge=0,
        description="Rotated log files to keep"
    )
    
    @field_validator('level', 'format', mode='before')
    @classmethod
    def normalize_case(cls, v: str, info: ValidationInfo) -> str:
        """Accept level and format in any case."""
        if not isinstance(v, str):
            return v
        return v.upper() if info.field_name == 'level' else v.lower()
