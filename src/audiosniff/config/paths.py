"""Locations of the configuration and log files.

Both files live under the repository root unless an environment variable
points elsewhere:

- ``AUDIOSNIFF_CONFIG`` replaces ``<repo_root>/config/config.toml``.
- ``AUDIOSNIFF_LOG_FILE`` replaces ``<repo_root>/logs/audiosniff.log``.

Blank environment values are ignored.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Final


CONFIG_ENV_VAR: Final[str] = "AUDIOSNIFF_CONFIG"
LOG_FILE_ENV_VAR: Final[str] = "AUDIOSNIFF_LOG_FILE"

_ROOT_MARKERS: Final[tuple[str, ...]] = ("pyproject.toml", ".git")
_CONFIG_RELATIVE: Final[Path] = Path("config") / "config.toml"
_LOG_DIR_NAME: Final[str] = "logs"
_LOG_FILE_NAME: Final[str] = "audiosniff.log"


def env_override(env_var: str, env: Mapping[str, str] | None = None) -> Path | None:
    """Return the path named by ``env_var``, or ``None`` when unset or blank."""

    mapping = env if env is not None else os.environ
    raw = (mapping.get(env_var) or "").strip()
    if not raw:
        return None
    return Path(raw).expanduser().resolve()


def resolve_path(
    explicit_path: Path | str | None,
    *,
    env_var: str,
    default: Path,
    env: Mapping[str, str] | None = None,
) -> Path:
    """Pick the explicit path, then the environment override, then ``default``."""

    if explicit_path is not None:
        return Path(explicit_path).expanduser().resolve()
    return env_override(env_var, env) or default.expanduser().resolve()


def _detect_repo_root(start: Path | None = None) -> Path:
    """Walk up from ``start`` (this module by default) to the first root marker.

    Falls back to the current working directory when nothing matches.
    """
    here = (start or Path(__file__).resolve()).parent
    for candidate in (here, *here.parents):
        if any((candidate / marker).exists() for marker in _ROOT_MARKERS):
            return candidate
    return Path.cwd()


def default_config_path(env: Mapping[str, str] | None = None) -> Path:
    """Path of the TOML configuration file."""

    return resolve_path(None, env_var=CONFIG_ENV_VAR, default=_detect_repo_root() / _CONFIG_RELATIVE, env=env)


def default_log_dir() -> Path:
    return (_detect_repo_root() / _LOG_DIR_NAME).resolve()


def default_log_file(env: Mapping[str, str] | None = None) -> Path:
    """Path of the rotating log file."""

    return resolve_path(None, env_var=LOG_FILE_ENV_VAR, default=default_log_dir() / _LOG_FILE_NAME, env=env)


__all__ = [
    "CONFIG_ENV_VAR",
    "LOG_FILE_ENV_VAR",
    "default_config_path",
    "default_log_dir",
    "default_log_file",
    "env_override",
    "resolve_path",
]
