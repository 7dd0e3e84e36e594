"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for reqguard:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.reqguard/`` on macOS and Windows. See :func:`get_config_dir`,
  :func:`get_cache_dir`, :func:`get_data_dir`.
* **Global config** -- A single :class:`~reqguard.models.GlobalConfig`
  JSON file storing the base URL, login path, default call options, and
  transport/network/cache settings.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project-local config, and global config into the
  final effective configuration.

All file writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`) to prevent data loss on crash or power failure.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from reqguard.exceptions import ConfigError
from reqguard.models import GlobalConfig

_APP_NAME = "reqguard"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "reqguard.json"

ENV_BASE_URL = "REQGUARD_BASE_URL"
ENV_LOGIN_PATH = "REQGUARD_LOGIN_PATH"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _app_dir(env_var: str, xdg_default: tuple[str, ...], fallback: tuple[str, ...]) -> Path:
    """Resolve and create one of the application directories.

    On XDG platforms the base is ``$env_var`` or ``~/<xdg_default...>``, with
    ``reqguard`` appended. Elsewhere everything lives under ``~/.reqguard``.
    """
    if _is_xdg_platform():
        env_value = os.environ.get(env_var, "")
        base = Path(env_value) if env_value else Path.home().joinpath(*xdg_default)
        path = base / _APP_NAME
    else:
        path = Path.home().joinpath(f".{_APP_NAME}", *fallback)
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """Configuration directory: ``~/.config/reqguard/`` or ``~/.reqguard/``."""
    return _app_dir("XDG_CONFIG_HOME", (".config",), ())


def get_cache_dir() -> Path:
    """User-info cache directory: ``~/.cache/reqguard/`` or ``~/.reqguard/cache/``."""
    return _app_dir("XDG_CACHE_HOME", (".cache",), ("cache",))


def get_data_dir() -> Path:
    """Crash-log directory: ``~/.local/share/reqguard/`` or ``~/.reqguard/logs/``."""
    return _app_dir("XDG_DATA_HOME", (".local", "share"), ("logs",))


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On any failure the
    temp file is cleaned up.
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
        fd = None  # prevent double-close below
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
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


def _read_json(path: Path, what: str) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid {what} at {path}: {exc}") from exc


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the XDG config directory.

    Returns:
        The deserialised :class:`~reqguard.models.GlobalConfig`. If the
        file does not exist, a default instance is returned.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    data = _read_json(path, "global config")
    try:
        return GlobalConfig.model_validate(data)
    except ValueError as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    _atomic_write(_global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./reqguard.json``.

    Project-local config sits between global config and environment variables
    in the precedence chain. Its top-level keys replace those of the global
    config (e.g. a repository can pin ``base_url`` or ``defaults``).

    Returns:
        The parsed JSON object, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    data = _read_json(path, "project config")
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


# --- Precedence resolution ---


def resolve_config(
    cli_base_url: Optional[str] = None,
    cli_login_path: Optional[str] = None,
) -> GlobalConfig:
    """Resolve config with full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_base_url``, ``cli_login_path``)
        2. Environment variables (``REQGUARD_BASE_URL``, ``REQGUARD_LOGIN_PATH``)
        3. Project config (``./reqguard.json``)
        4. User config (``~/.config/reqguard/config.json``)
        5. Defaults

    An empty ``REQGUARD_LOGIN_PATH`` disables the login redirect.

    Returns:
        The effective :class:`~reqguard.models.GlobalConfig`.

    Raises:
        ConfigError: If any config file is invalid.
    """
    # 5 + 4. Defaults filled in by the model
    global_cfg = load_global_config()

    # 3. Project-local config replaces top-level keys
    project = load_project_config()
    if project:
        data = global_cfg.model_dump(mode="json")
        data.update(project)
        try:
            global_cfg = GlobalConfig.model_validate(data)
        except ValueError as exc:
            raise ConfigError(f"Invalid project config: {exc}") from exc

    # 2. Environment variables
    env_base_url = os.environ.get(ENV_BASE_URL)
    if env_base_url:
        global_cfg.base_url = env_base_url
    env_login_path = os.environ.get(ENV_LOGIN_PATH)
    if env_login_path is not None:
        global_cfg.login_path = env_login_path or None

    # 1. CLI flags
    if cli_base_url is not None:
        global_cfg.base_url = cli_base_url
    if cli_login_path is not None:
        global_cfg.login_path = cli_login_path

    return global_cfg
