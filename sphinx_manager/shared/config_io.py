"""Settings I/O utilities for reading and writing the manager's TOML file.

This module handles serialization/deserialization of ManagerConfig to/from
TOML. The settings file holds a single [manager] table whose keys mirror the
ManagerConfig fields.
"""

import os
import tomllib
from dataclasses import replace
from pathlib import Path
from typing import Any

import tomli_w

from sphinx_manager.domain.config import ManagerConfig

SECTION = "manager"
_PATH_KEYS = ("config_file", "pid_file", "bindir")
_ARG_KEYS = ("searchd_args", "indexer_args")
_KNOWN_KEYS = (*_PATH_KEYS, *_ARG_KEYS, "process_timeout", "debug")


def get_settings_path() -> Path:
    """Get the path to the user settings file.

    Respects $XDG_CONFIG_HOME, falling back to ~/.config.

    Returns:
        Path to the settings file (may not exist)
    """
    xdg_config = os.environ.get("XDG_CONFIG_HOME", "")
    if xdg_config:
        return Path(xdg_config) / "sphinx-manager" / "config.toml"
    return Path.home() / ".config" / "sphinx-manager" / "config.toml"


def load_settings_data(path: Path) -> dict[str, Any]:
    """Load the [manager] table from a settings file.

    Args:
        path: Path to the TOML settings file

    Returns:
        Dictionary of settings (empty if the file has no [manager] table)

    Raises:
        FileNotFoundError: If the settings file doesn't exist
        ValueError: If the file is malformed or has unknown keys
    """
    if not path.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")

    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in settings file: {e}") from e

    section = data.get(SECTION, {})
    if not isinstance(section, dict):
        raise ValueError(f"[{SECTION}] must be a table in {path}")

    unknown = sorted(set(section) - set(_KNOWN_KEYS))
    if unknown:
        raise ValueError(f"Unknown settings in {path}: {', '.join(unknown)}")
    return section


def settings_data_to_config(
    data: dict[str, Any], base: ManagerConfig | None = None
) -> ManagerConfig:
    """Apply raw settings over a base config.

    Args:
        data: Settings dictionary ([manager] table contents)
        base: Config providing values for missing keys (default: built-in defaults)

    Returns:
        New validated ManagerConfig

    Raises:
        ValueError: If a value has the wrong type or fails validation
    """
    base = base or ManagerConfig()
    overrides: dict[str, Any] = {}

    for key in _PATH_KEYS:
        if key in data:
            value = data[key]
            if not isinstance(value, str):
                raise ValueError(f"{key} must be a string, got {value!r}")
            overrides[key] = Path(value) if value else None
    for key in _ARG_KEYS:
        if key in data:
            value = data[key]
            if not isinstance(value, list):
                raise ValueError(f"{key} must be a list of strings, got {value!r}")
            overrides[key] = tuple(str(v) for v in value)
    if "process_timeout" in data:
        value = data["process_timeout"]
        # bool is an int subclass
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"process_timeout must be a number, got {value!r}")
        overrides["process_timeout"] = value
    if "debug" in data:
        value = data["debug"]
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"debug must be an integer, got {value!r}")
        overrides["debug"] = value

    if overrides.get("config_file", base.config_file) is None:
        raise ValueError("config_file must not be empty")
    return replace(base, **overrides)


def load_settings(path: Path, base: ManagerConfig | None = None) -> ManagerConfig:
    """Load a ManagerConfig from a settings file.

    Raises:
        FileNotFoundError: If the settings file doesn't exist
        ValueError: If the settings file is malformed
    """
    return settings_data_to_config(load_settings_data(path), base)


def config_to_settings_data(config: ManagerConfig) -> dict[str, Any]:
    """Convert a ManagerConfig to its [manager] table, omitting unset paths."""
    data: dict[str, Any] = {"config_file": str(config.config_file)}
    if config.pid_file is not None:
        data["pid_file"] = str(config.pid_file)
    if config.bindir is not None:
        data["bindir"] = str(config.bindir)
    data["searchd_args"] = list(config.searchd_args)
    data["indexer_args"] = list(config.indexer_args)
    data["process_timeout"] = config.process_timeout
    data["debug"] = config.debug
    return data


def save_settings(config: ManagerConfig, path: Path) -> None:
    """Save a ManagerConfig to a TOML settings file.

    Args:
        config: Config to save
        path: Destination path
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as f:
        tomli_w.dump({SECTION: config_to_settings_data(config)}, f)
