"""YAML configuration for nimswitch.

The configuration file is optional. It is looked up at ``--config`` or at
``<store>/nimswitch.yaml`` and only overrides the defaults it names.

Example nimswitch.yaml:

    repository: https://github.com/nim-lang/Nim.git
    build_command: [sh, build_all.sh]
    lock_timeout: 60
"""

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from nimswitch.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "nimswitch.yaml"

DEFAULT_REPOSITORY = "https://github.com/nim-lang/Nim.git"
DEFAULT_STABLE_URL = "https://nim-lang.org/channels/stable"


def _default_build_command() -> List[str]:
    if os.name == "nt":
        return ["cmd", "/c", "build_all.bat"]
    return ["sh", "build_all.sh"]


@dataclass
class SwitchConfig:
    """Settings for fetching, building and locking."""

    repository: str = DEFAULT_REPOSITORY
    stable_url: str = DEFAULT_STABLE_URL
    stable_timeout: Optional[float] = None  # None = wait forever
    release_tag: str = "v{version}"
    git: str = "git"
    build_command: List[str] = field(default_factory=_default_build_command)
    prune: List[str] = field(
        default_factory=lambda: [".git", "csources_v*", "nimcache"]
    )
    large_binaries: List[str] = field(
        default_factory=lambda: ["bin/nim_csources_*", "compiler/nim"]
    )
    lock_timeout: float = 30

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SwitchConfig":
        """
        Build configuration from a parsed YAML mapping.

        Raises:
            ConfigError: If a value has the wrong type
        """
        if not isinstance(data, dict):
            raise ConfigError(
                f"Configuration must be a mapping, got {type(data).__name__}"
            )

        known = {f.name for f in fields(cls)}
        for key in data:
            if key not in known:
                logger.warning(f"Ignoring unknown configuration key: {key}")

        values = {key: value for key, value in data.items() if key in known}

        for key in ("repository", "stable_url", "release_tag", "git"):
            if key in values and not isinstance(values[key], str):
                raise ConfigError(f"'{key}' must be a string")

        for key in ("build_command", "prune", "large_binaries"):
            if key in values:
                values[key] = _string_list(key, values[key])

        if "build_command" in values and not values["build_command"]:
            raise ConfigError("'build_command' must not be empty")

        if "stable_timeout" in values and values["stable_timeout"] is not None:
            values["stable_timeout"] = _positive_number(
                "stable_timeout", values["stable_timeout"]
            )
        if "lock_timeout" in values:
            values["lock_timeout"] = _positive_number(
                "lock_timeout", values["lock_timeout"]
            )

        if "release_tag" in values and "{version}" not in values["release_tag"]:
            raise ConfigError("'release_tag' must contain '{version}'")

        return cls(**values)


def _string_list(key: str, value: Any) -> List[str]:
    if isinstance(value, str):
        return value.split()
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"'{key}' must be a list of strings")
    return list(value)


def _positive_number(key: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(f"'{key}' must be a positive number")
    return value


def load_config(config_file: Optional[Path], required: bool = False) -> SwitchConfig:
    """
    Load configuration from a YAML file.

    Args:
        config_file: Path to the YAML file (None for defaults)
        required: If True, a missing file is an error

    Returns:
        Parsed configuration (defaults if the file doesn't exist)

    Raises:
        ConfigError: If the file is required but missing, or invalid
    """
    if config_file is None or not config_file.exists():
        if required:
            raise ConfigError(f"Configuration file not found: {config_file}")
        logger.debug(f"Config file not found (optional): {config_file}")
        return SwitchConfig()

    logger.debug(f"Loading configuration from {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_file}: {e}") from e

    return SwitchConfig.from_dict(data or {})


def default_config_path(store_root: Path) -> Path:
    """Path of the configuration file kept in the store root."""
    return store_root / CONFIG_FILE_NAME
