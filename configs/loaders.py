"""YAML configuration loaders for ibc_monitor."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict

import yaml

_BASE_DIR = Path(__file__).resolve().parent


def config_dir() -> Path:
    """Directory holding the YAML files; ``IBC_CONFIG_DIR`` overrides configs/."""
    override = os.environ.get("IBC_CONFIG_DIR")
    return Path(override) if override else _BASE_DIR


def load_yaml(path: str | Path) -> Dict[str, Any]:
    """Load a YAML file and return its content as a dictionary.

    If *path* is relative it is resolved against the configuration
    directory.  Returns an empty dict on any error so the caller can always
    proceed with safe defaults.
    """
    p = Path(path)
    if not p.is_absolute():
        p = config_dir() / p
    try:
        with open(p, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError):
        return {}
    return data if isinstance(data, dict) else {}


def load_boiler_config() -> Dict[str, Any]:
    return load_yaml("boiler.yaml")


def load_runtime_config() -> Dict[str, Any]:
    return load_yaml("runtime.yaml")


def load_monitor_config() -> Dict[str, Any]:
    return load_yaml("monitor.yaml")
