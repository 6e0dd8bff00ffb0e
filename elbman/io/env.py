"""
Helpers for locating and loading the elbman environment file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

ELBMAN_ENV_FILENAME = "elbman.env"


def default_env_path() -> Path:
    """Path of the per-user environment file (``~/elbman.env``)."""
    return Path.home() / ELBMAN_ENV_FILENAME


def load_env(path: Optional[Path] = None, override: bool = False) -> bool:
    """
    Load ``RS_*`` variables from an env file into ``os.environ``.

    Looks at ``path`` if given, otherwise ``./elbman.env`` and then
    ``~/elbman.env``. Returns True if a file was loaded.
    """
    if path is not None:
        candidates = [Path(path)]
    else:
        candidates = [Path.cwd() / ELBMAN_ENV_FILENAME, default_env_path()]

    for candidate in candidates:
        if candidate.is_file():
            return load_dotenv(candidate, override=override)
    return False
