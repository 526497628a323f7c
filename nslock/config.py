"""Namespace configuration — strict mode, warnings, and the lockfile path.

Values are layered, later layers winning:
1. Defaults
2. A YAML config file (``.nslock.yaml`` or an explicit path)
3. ``NSLOCK_*`` environment variables
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

import yaml

from nslock import DEFAULT_LOCKFILE
from nslock.errors import ConfigError

CONFIG_FILE = ".nslock.yaml"
ENV_PREFIX = "NSLOCK_"

_TRUE = {"true", "1", "yes", "on"}
_FALSE = {"false", "0", "no", "off"}


@dataclass
class NamespaceConfig:
    """Settings consumed by the namespace subsystem."""

    strict_mode: bool = False  # Namespace conflicts are fatal instead of advisory
    warn_on_missing: bool = True  # Surface advisory warnings to the user
    lockfile_path: str = DEFAULT_LOCKFILE

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def load_config(path: str | Path | None = None, environ: Mapping[str, str] | None = None) -> NamespaceConfig:
    """Load the effective configuration.

    Args:
        path: Explicit config file. When omitted, ``.nslock.yaml`` in the
            working directory is used if present.
        environ: Environment to read overrides from (defaults to os.environ).
    """
    config = NamespaceConfig()
    environ = os.environ if environ is None else environ

    config_path = Path(path) if path else Path(CONFIG_FILE)
    if path or config_path.exists():
        _apply(config, _read_file(config_path), origin=str(config_path))

    overrides = {}
    for key in ("strict_mode", "warn_on_missing", "lockfile_path"):
        env_key = ENV_PREFIX + key.upper()
        if env_key in environ:
            overrides[key] = environ[env_key]
    _apply(config, overrides, origin="environment")

    return config


def _read_file(path: Path) -> dict[str, Any]:
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    # Settings may be nested under a 'namespace' key
    section = data.get("namespace", data)
    if not isinstance(section, dict):
        raise ConfigError(f"'namespace' section in {path} must be a mapping")
    return section


def _apply(config: NamespaceConfig, values: Mapping[str, Any], origin: str):
    for key in ("strict_mode", "warn_on_missing"):
        if key in values:
            setattr(config, key, _to_bool(values[key], key, origin))

    if "lockfile_path" in values:
        value = values["lockfile_path"]
        if not value:
            raise ConfigError(f"{origin}: lockfile_path must not be empty")
        config.lockfile_path = str(value)


def _to_bool(value: Any, key: str, origin: str) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ConfigError(f"{origin}: '{key}' must be a boolean, got {value!r}")
