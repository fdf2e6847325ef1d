"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for cmdschemas:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.cmdschemas/`` on macOS and Windows. See :func:`get_config_dir`,
  :func:`get_cache_dir`, :func:`get_data_dir`.
* **Global config** -- A single :class:`~cmdschemas.models.GlobalConfig`
  JSON file storing defaults (data path, output directory, workers, cache).
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project-local config, and global config into the
  final effective configuration.

All file writes use an atomic temp-file-then-rename strategy
(:func:`atomic_write`), which the corpus writer reuses so that a crashed
extraction never leaves half-written JSON behind.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from cmdschemas.exceptions import ConfigError
from cmdschemas.models import GlobalConfig

_APP_NAME = "cmdschemas"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "cmdschemas.json"

# Environment variables, highest precedence first within each setting.
_ENV_DATA_PATH = ("CMDSCHEMAS_DATA_PATH", "BOTOCORE_DATA_PATH")
_ENV_OUTPUT_DIR = ("CMDSCHEMAS_OUTPUT_DIR", "SCHEMAS_PATH")
_ENV_WORKERS = "CMDSCHEMAS_WORKERS"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/cmdschemas/`` (default ``~/.config/cmdschemas/``).
    On macOS/Windows: ``~/.cmdschemas/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_cache_dir() -> Path:
    """Return the cache directory (remote service models), creating it if necessary.

    On Linux/BSD: ``$XDG_CACHE_HOME/cmdschemas/`` (default ``~/.cache/cmdschemas/``).
    On macOS/Windows: ``~/.cmdschemas/cache/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CACHE_HOME", (".cache",)) / _APP_NAME
    else:
        path = _fallback_base_dir() / "cache"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/cmdschemas/`` (default ``~/.local/share/cmdschemas/``).
    On macOS/Windows: ``~/.cmdschemas/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems.  On any failure the
    temp file is removed and the exception propagates.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Global config ---


def _global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the XDG config directory.

    Returns:
        The deserialised :class:`~cmdschemas.models.GlobalConfig`. If the
        file does not exist, a default instance is returned.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    atomic_write(_global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./cmdschemas.json``.

    Project-local config sits between global config and environment
    variables in the precedence chain.  It may set any
    :class:`~cmdschemas.models.GlobalConfig` field, typically
    ``data_path`` and ``output_dir`` for a checked-out botocore tree.

    Returns:
        The parsed JSON as a dict, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


# --- Precedence resolution ---


def _first_env(names: tuple[str, ...]) -> Optional[str]:
    for name in names:
        value = os.environ.get(name)
        if value:
            return value
    return None


def resolve_config(
    cli_data_path: Optional[str] = None,
    cli_output_dir: Optional[str] = None,
    cli_workers: Optional[int] = None,
    cli_format: Optional[str] = None,
) -> GlobalConfig:
    """Resolve the effective configuration with the full precedence chain.

    Precedence (high to low):
        1. CLI flags
        2. Environment variables (``CMDSCHEMAS_DATA_PATH`` / ``BOTOCORE_DATA_PATH``,
           ``CMDSCHEMAS_OUTPUT_DIR`` / ``SCHEMAS_PATH``, ``CMDSCHEMAS_WORKERS``)
        3. Project config (``./cmdschemas.json``)
        4. User config (``~/.config/cmdschemas/config.json``)
        5. Defaults

    Returns:
        A new :class:`~cmdschemas.models.GlobalConfig`; the persisted user
        config is never modified.

    Raises:
        ConfigError: If any layer holds an invalid value.
    """
    # 5 + 4. User config (fills in defaults automatically)
    data = load_global_config().model_dump(mode="json")

    # 3. Project-local overrides
    project = load_project_config()
    if project:
        for key, value in project.items():
            if isinstance(value, dict) and isinstance(data.get(key), dict):
                data[key] = {**data[key], **value}
            else:
                data[key] = value

    # 2. Environment
    env_data_path = _first_env(_ENV_DATA_PATH)
    if env_data_path:
        data["data_path"] = env_data_path
    env_output_dir = _first_env(_ENV_OUTPUT_DIR)
    if env_output_dir:
        data["output_dir"] = env_output_dir
    env_workers = os.environ.get(_ENV_WORKERS)
    if env_workers:
        data["workers"] = env_workers

    # 1. CLI flags
    if cli_data_path is not None:
        data["data_path"] = cli_data_path
    if cli_output_dir is not None:
        data["output_dir"] = cli_output_dir
    if cli_workers is not None:
        data["workers"] = cli_workers
    if cli_format is not None:
        data["output"]["format"] = cli_format

    try:
        return GlobalConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
