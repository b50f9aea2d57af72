"""Configuration management with XDG paths, atomic writes, and source resolution.

This module handles all persistent configuration for openapi-explorer:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.openapi-explorer/`` on macOS and Windows. See :func:`get_config_dir`
  and :func:`get_data_dir`.
* **User config** -- A single :class:`~openapi_explorer.models.ExplorerConfig`
  JSON file storing the default document source, output format and
  validation switches.
* **Source resolution** -- :func:`resolve_source` picks the document to open
  from the CLI flag, the environment, project-local config, user config and
  the bundled example, in that order.

All file writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`).
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from openapi_explorer.exceptions import ConfigError, InvalidUsageError
from openapi_explorer.models import ExplorerConfig

_APP_NAME = "openapi-explorer"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "openapi-explorer.json"

SPEC_ENV_VAR = "OPENAPI_EXPLORER_SPEC"
EXAMPLE_SPEC = Path("examples") / "petstore.json"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
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

    On Linux/BSD: ``$XDG_CONFIG_HOME/openapi-explorer/`` (default
    ``~/.config/openapi-explorer/``). On macOS/Windows: ``~/.openapi-explorer/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/openapi-explorer/`` (default
    ``~/.local/share/openapi-explorer/``). On macOS/Windows:
    ``~/.openapi-explorer/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file lives next to *path* so that ``os.replace`` is an
    atomic rename on POSIX. On failure the temp file is removed.
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


# --- User config ---


def config_path() -> Path:
    """Path to the user config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_config() -> ExplorerConfig:
    """Load the user configuration.

    Returns:
        The deserialised :class:`~openapi_explorer.models.ExplorerConfig`, or
        a default instance when the file does not exist.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = config_path()
    if not path.is_file():
        return ExplorerConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return ExplorerConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc


def save_config(config: ExplorerConfig) -> None:
    """Persist the user configuration atomically to disk."""
    data = config.model_dump(mode="json")
    _atomic_write(config_path(), json.dumps(data, indent=2) + "\n")


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./openapi-explorer.json``.

    A repository can pin the document to explore with a ``default_spec`` key.

    Returns:
        The parsed JSON object, or ``None`` if the file does not exist.

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


def resolve_source(
    cli_spec: Optional[str] = None,
    config: Optional[ExplorerConfig] = None,
) -> str:
    """Pick the document source to open.

    Precedence (high to low):
        1. CLI flag (``--spec``)
        2. Environment variable ``OPENAPI_EXPLORER_SPEC``
        3. Project config (``./openapi-explorer.json``, key ``default_spec``)
        4. User config (``default_spec``)
        5. ``examples/petstore.json`` relative to the working directory

    Args:
        cli_spec: Value of the ``--spec`` option, if given.
        config: Already loaded user config; loaded from disk when omitted.

    Returns:
        A file path, URL or ``-``.

    Raises:
        InvalidUsageError: If no source is configured anywhere.
    """
    if cli_spec:
        return cli_spec

    env_spec = os.environ.get(SPEC_ENV_VAR)
    if env_spec:
        return env_spec

    project = load_project_config()
    if project is not None and project.get("default_spec"):
        return str(project["default_spec"])

    if config is None:
        config = load_config()
    if config.default_spec:
        return config.default_spec

    if EXAMPLE_SPEC.is_file():
        return str(EXAMPLE_SPEC)

    raise InvalidUsageError(
        "No OpenAPI document given. Pass --spec, set "
        f"{SPEC_ENV_VAR}, or run 'openapi-explorer config set-spec <source>'."
    )
