"""Layered TOML configuration for the checksum verifier."""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Generic, List, Optional, Tuple, Type, TypeVar

import platformdirs
import toml
from pydantic import BaseModel

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

T = TypeVar('T', bound=BaseModel)

CONFIG_FILE_NAME = "config.toml"
DEFAULTS_FILE_NAME = "defaults.toml"


class ConfigLoader(Generic[T]):
    """Builds a configuration model from layered sources.

    Later layers win, key by key:

    1. defaults file (explicit path, or ./config/defaults.toml)
    2. system config (/etc/<app>/config.toml, %PROGRAMDATA%\\<app>\\config.toml)
    3. user config (platformdirs user config dir)
    4. environment variables, <APP>_<SECTION>_<KEY>=value
    """

    def __init__(self, app_name: str = "checksum-verifier", config_class: Optional[Type[T]] = None) -> None:
        self.app_name = app_name
        self.config_class = config_class

    def load(self, defaults_path: Optional[Path] = None) -> T:
        """Merge all layers and validate the result.
        
        Args:
            defaults_path: TOML file to use as the lowest layer
            
        Returns:
            Configuration model (a plain dict without config_class)

        Raises:
            ConfigurationError: If a config file is not valid TOML
            pydantic.ValidationError: If the merged values do not fit the model
        """
        layers: List[Tuple[str, Optional[Dict[str, Any]]]] = [
            ("defaults", self._load_defaults(defaults_path)),
            ("system", self._load_system_config()),
            ("user", self._load_user_config()),
        ]

        merged: Dict[str, Any] = {}
        for name, values in layers:
            if values:
                logger.debug(f"Config layer applied: {{'layer': {name!r}, 'sections': {sorted(values)}}}")
                merged = self._deep_merge(merged, values)

        merged = self._apply_env_overrides(merged)

        return self.config_class(**merged) if self.config_class else merged

    def _read_toml(self, path: Path) -> Dict[str, Any]:
        try:
            return toml.load(path)
        except toml.TomlDecodeError as e:
            raise ConfigurationError(f"Invalid TOML in {path}: {e}", path=str(path)) from e

    def _load_defaults(self, defaults_path: Optional[Path] = None) -> Dict[str, Any]:
        """Read the defaults layer; an explicit path that does not exist is an error."""
        if defaults_path is not None:
            if not defaults_path.is_file():
                raise ConfigurationError(f"Config file not found: {defaults_path}", path=str(defaults_path))
            return self._read_toml(defaults_path)

        local_defaults = Path.cwd() / "config" / DEFAULTS_FILE_NAME
        if local_defaults.is_file():
            return self._read_toml(local_defaults)

        return {}

    def system_config_path(self) -> Path:
        if os.name == "nt":
            program_data = os.environ.get("PROGRAMDATA", "C:\\ProgramData")
            return Path(program_data) / self.app_name / CONFIG_FILE_NAME
        return Path("/etc") / self.app_name / CONFIG_FILE_NAME

    def user_config_path(self) -> Path:
        return Path(platformdirs.user_config_dir(appname=self.app_name, appauthor=False)) / CONFIG_FILE_NAME

    def _load_system_config(self) -> Optional[Dict[str, Any]]:
        path = self.system_config_path()
        return self._read_toml(path) if path.is_file() else None

    def _load_user_config(self) -> Optional[Dict[str, Any]]:
        path = self.user_config_path()
        return self._read_toml(path) if path.is_file() else None

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Return base updated with override, merging nested tables."""
        merged = dict(base)
        for key, value in override.items():
            current = merged.get(key)
            if isinstance(current, dict) and isinstance(value, dict):
                merged[key] = self._deep_merge(current, value)
            else:
                merged[key] = value
        return merged

    def env_prefix(self) -> str:
        """Prefix of environment variables read by this loader."""
        return self.app_name.upper().replace('-', '_') + "_"

    def _apply_env_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Apply <PREFIX><SECTION>_<KEY> variables.

        CHECKSUM_VERIFIER_VERIFIER_MATCH_PATTERN=*.jpg sets verifier.match_pattern.
        Values stay strings; the config model converts them to its field types,
        so "0123" reaches a string field unchanged.
        """
        prefix = self.env_prefix()
        overrides = {
            name[len(prefix):].lower(): value
            for name, value in os.environ.items()
            if name.startswith(prefix)
        }

        for name, value in sorted(overrides.items()):
            section, _, key = name.partition("_")
            if not section or not key:
                logger.warning(f"Ignoring config variable without section and key: {{'variable': {prefix + name.upper()!r}}}")
                continue

            target = config.setdefault(section, {})
            if not isinstance(target, dict):
                logger.warning(f"Ignoring config variable for a non-table key: {{'variable': {prefix + name.upper()!r}}}")
                continue

            target[key] = value

        return config
