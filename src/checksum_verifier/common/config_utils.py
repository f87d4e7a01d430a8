"""Configuration utilities."""

import re
import tempfile
from pathlib import Path
from typing import Callable, Dict

import platformdirs

_VARIABLE = re.compile(r"\$\{(\w+)\}")

PATH_VARIABLES: Dict[str, Callable[[], str]] = {
    "USER_HOME": lambda: str(Path.home()),
    "USER_DATA": platformdirs.user_data_dir,
    "USER_CONFIG": platformdirs.user_config_dir,
    "USER_CACHE": platformdirs.user_cache_dir,
    "TEMP": tempfile.gettempdir,
}


def expand_path_variables(path: str) -> str:
    """Replace ${NAME} placeholders in a configured path.

    Known names are the keys of PATH_VARIABLES, e.g.
    "${USER_HOME}/checksums.xml". Unknown placeholders are left as
    written so the resulting path error names them.
    """
    if not isinstance(path, str):
        return path

    def replace(match: re.Match) -> str:
        resolver = PATH_VARIABLES.get(match.group(1))
        return resolver() if resolver else match.group(0)

    return _VARIABLE.sub(replace, path)
