"""Checksum database update and verification."""

from .engine import Engine
from .database import ChecksumDatabase, FileChecksum
from .discovery import MatchSpec, MatchType
from .paths import PathStoragePolicy
from .reporter import EngineReporter, NullReporter
from .results import BadFile, BadFileType, UpdateResult, VerifyResult
from .config import ChecksumVerifierConfig, VerifierSettings

__all__ = [
    'Engine',
    'ChecksumDatabase',
    'FileChecksum',
    'MatchSpec',
    'MatchType',
    'PathStoragePolicy',
    'EngineReporter',
    'NullReporter',
    'BadFile',
    'BadFileType',
    'UpdateResult',
    'VerifyResult',
    'ChecksumVerifierConfig',
    'VerifierSettings',
]
