"""Configuration I/O utilities for reading and writing TOML config files.

This module handles serialization/deserialization of BgitConfig to/from TOML format.
"""

import os
import platform
import tomllib
from dataclasses import asdict
from pathlib import Path
from typing import Any

import tomli_w

from bgit.domain.config import BgitConfig

LOCAL_CONFIG_NAME = "bgit.toml"


def get_global_config_path() -> Path:
    """Get the path to the global config file.

    The location is platform-dependent:
    - Linux/macOS: $XDG_CONFIG_HOME/bgit/config.toml or ~/.config/bgit/config.toml
    - Windows: %APPDATA%/bgit/config.toml

    Returns:
        Path to the global config file (may not exist)
    """
    if platform.system() == "Windows":
        appdata = os.environ.get("APPDATA", "")
        if appdata:
            return Path(appdata) / "bgit" / "config.toml"
        return Path.home() / ".config" / "bgit" / "config.toml"
    else:
        xdg_config = os.environ.get("XDG_CONFIG_HOME", "")
        if xdg_config:
            return Path(xdg_config) / "bgit" / "config.toml"
        return Path.home() / ".config" / "bgit" / "config.toml"


def get_local_config_path(git_dir: Path) -> Path:
    """Repository-local config lives inside the git directory, so ship never stages it."""
    return git_dir / LOCAL_CONFIG_NAME


def load_config_data(path: Path) -> dict[str, Any]:
    """Load raw TOML data from a config file.

    Args:
        path: Path to a TOML config file

    Returns:
        Dictionary with parsed TOML data

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file is malformed
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in config file: {e}") from e


def config_to_data(config: BgitConfig) -> dict[str, Any]:
    return {
        "ship": asdict(config.ship),
        "safety": asdict(config.safety),
        "log": asdict(config.log),
        "output": asdict(config.output),
    }


def save_config(config: BgitConfig, path: Path) -> None:
    """Save configuration to a TOML file.

    Args:
        config: BgitConfig to save
        path: Destination path
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as f:
        tomli_w.dump(config_to_data(config), f)
