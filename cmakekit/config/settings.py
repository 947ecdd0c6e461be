"""YAML settings for cmakekit.

Settings are read from ``cmakekit.yaml``::

    cache_dir: ~/.cmakekit
    catalog: https://updates.jenkins.io/updates/hudson.plugins.cmake.CmakeInstaller.json
    lock: file
    lock_timeout: 300
    download_timeout: 30
    tool_name: CMake

Every key is optional. Command-line flags override file values.
"""

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from cmakekit.core.directory import (
    get_downloads_dir,
    get_global_cache_dir,
    get_lock_dir,
    get_tools_dir,
)
from cmakekit.core.exceptions import ConfigError
from cmakekit.core.locking import LOCK_STRATEGIES
from cmakekit.installer.catalog import DEFAULT_CATALOG_URL

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "cmakekit.yaml"


@dataclass(frozen=True)
class Settings:
    """Effective cmakekit settings."""

    cache_dir: Path
    catalog: str = DEFAULT_CATALOG_URL
    lock: str = "none"  # 'none', 'file'
    lock_timeout: float = 300
    download_timeout: float = 30
    tool_name: str = "CMake"

    @property
    def tools_dir(self) -> Path:
        return get_tools_dir(self.cache_dir)

    @property
    def downloads_dir(self) -> Path:
        return get_downloads_dir(self.cache_dir)

    @property
    def lock_dir(self) -> Path:
        return get_lock_dir(self.cache_dir)

    def with_overrides(self, **overrides: Any) -> "Settings":
        """Copy with the given values replaced; None values are ignored."""
        values = {k: v for k, v in overrides.items() if v is not None}
        if not values:
            return self
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data.update(values)
        return _validate(data, "overrides")


def default_settings() -> Settings:
    return Settings(cache_dir=get_global_cache_dir())


def _positive_number(value: Any, key: str, where: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{where}: '{key}' must be a number, got {value!r}")
    if value <= 0:
        raise ConfigError(f"{where}: '{key}' must be positive, got {value}")
    return value


def _string(value: Any, key: str, where: str) -> str:
    if not isinstance(value, (str, Path)) or not str(value).strip():
        raise ConfigError(f"{where}: '{key}' must be a non-empty string, got {value!r}")
    return str(value)


def _validate(data: Dict[str, Any], where: str) -> Settings:
    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"{where}: unknown key '{unknown[0]}'")

    values: Dict[str, Any] = {}
    if "cache_dir" in data:
        values["cache_dir"] = Path(_string(data["cache_dir"], "cache_dir", where)).expanduser()
    else:
        values["cache_dir"] = get_global_cache_dir()
    if "catalog" in data:
        values["catalog"] = _string(data["catalog"], "catalog", where)
    if "lock" in data:
        lock = data["lock"]
        if lock not in LOCK_STRATEGIES:
            raise ConfigError(
                f"{where}: 'lock' must be one of {', '.join(LOCK_STRATEGIES)}, got {lock!r}"
            )
        values["lock"] = lock
    for key in ("lock_timeout", "download_timeout"):
        if key in data:
            values[key] = _positive_number(data[key], key, where)
    if "tool_name" in data:
        values["tool_name"] = _string(data["tool_name"], "tool_name", where)

    return Settings(**values)


def parse_settings(data: Any, where: str = "settings") -> Settings:
    """
    Build settings from a decoded YAML document.

    Raises:
        ConfigError: On unknown keys or values of the wrong type
    """
    if data is None:
        return default_settings()
    if not isinstance(data, dict):
        raise ConfigError(f"{where}: expected a mapping, got {type(data).__name__}")
    return _validate(data, where)


def load_settings(config_path: Optional[Union[str, Path]] = None) -> Settings:
    """
    Load settings from a YAML file.

    Args:
        config_path: Settings file. If None, uses ./cmakekit.yaml when it
            exists and the defaults otherwise

    Returns:
        Validated settings

    Raises:
        ConfigError: If an explicit file is missing or the file is invalid
    """
    if config_path is None:
        config_path = Path.cwd() / DEFAULT_CONFIG_NAME
        if not config_path.exists():
            logger.debug(f"No {DEFAULT_CONFIG_NAME} found, using defaults")
            return default_settings()

    config_path = Path(config_path)
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    logger.debug(f"Loading settings from {config_path}")
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    return parse_settings(data, str(config_path))
