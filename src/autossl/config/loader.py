"""Configuration file loading.

Sources, first match wins:
- ``--config PATH`` (must exist and validate)
- ``$XDG_CONFIG_HOME/autossl/config.yml`` (ignored with a warning if broken)
- built-in defaults

String values may reference ``${VAR}`` or ``${VAR:-default}``.
"""

from __future__ import annotations

import os
import re
import sys
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from autossl.config.models import AutosslConfig, DumpConfig, RuntimeConfig
from autossl.config.validation import ValidationSeverity, validate_config
from autossl.core.logging import get_logger

LOGGER = get_logger(__name__)

# Config file name under the user config directory
USER_CONFIG_DIR_NAME = "autossl"
USER_CONFIG_NAME = "config.yml"

# Environment variable pattern: ${VAR} or ${VAR:-default}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")


class ConfigError(Exception):
    """Configuration loading or parsing error."""

    pass


def load_config(config_path: Optional[Path] = None) -> AutosslConfig:
    """Load configuration.

    An explicit ``config_path`` must exist and be valid. Otherwise the user
    config is used when present; problems with it are logged and the
    built-in defaults apply.

    Args:
        config_path: Optional path to a config file (--config flag).

    Returns:
        AutosslConfig instance.

    Raises:
        ConfigError: If the explicit config file is missing or invalid.
    """
    if config_path is not None:
        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")
        config = _load_checked(config_path)
        LOGGER.debug(f"Loaded config from {config_path}")
        return config

    user_path = find_user_config()
    if user_path is None:
        return AutosslConfig()

    try:
        config = _load_checked(user_path)
    except ConfigError as e:
        LOGGER.warning(f"Ignoring user config: {e}")
        return AutosslConfig()
    LOGGER.debug(f"Loaded user config from {user_path}")
    return config


def _load_checked(path: Path) -> AutosslConfig:
    try:
        data = load_yaml_file(path)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read {path}: {e}") from e

    errors = [
        issue for issue in validate_config(data, source=str(path))
        if issue.severity == ValidationSeverity.ERROR
    ]
    if errors:
        raise ConfigError("; ".join(f"{issue.message} in {issue.source}" for issue in errors))

    config = dict_to_config(data)
    config.sources.append(str(path))
    return config


def user_config_dir() -> Optional[Path]:
    """Return the per-user configuration directory, or None if unknown."""
    if sys.platform.startswith("win"):
        appdata = os.environ.get("APPDATA")
        return Path(appdata) if appdata else None
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg and os.path.isabs(xdg):
        return Path(xdg)
    try:
        return Path.home() / ".config"
    except (RuntimeError, KeyError):
        return None


def find_user_config() -> Optional[Path]:
    """Find the user config file.

    Returns:
        Path to the config file if it exists, None otherwise.
    """
    base = user_config_dir()
    if base is None:
        return None
    config_path = base / USER_CONFIG_DIR_NAME / USER_CONFIG_NAME
    if config_path.exists():
        return config_path
    return None


def load_yaml_file(path: Path) -> Dict[str, Any]:
    """Parse a config file into a mapping with ``${VAR}`` references expanded.

    Raises:
        OSError: If the file cannot be read.
        yaml.YAMLError: If the file is not valid YAML.
        ConfigError: If the document is not a mapping.
    """
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file must be a YAML mapping, got {type(data).__name__}")

    unset: List[str] = []
    expanded = expand_env_vars(data, unset=unset)
    if unset:
        names = ", ".join(sorted(set(unset)))
        LOGGER.warning(f"Unset environment variable(s) in {path} expanded to '': {names}")
    return expanded


def expand_env_vars(
    data: Any,
    environ: Optional[Mapping[str, str]] = None,
    unset: Optional[List[str]] = None,
) -> Any:
    """Expand ``${VAR}`` and ``${VAR:-default}`` in every string of ``data``.

    Args:
        data: Parsed YAML value; mappings and lists are walked recursively.
        environ: Variables to use instead of ``os.environ``.
        unset: Collects names that had neither a value nor a default.
    """
    env = os.environ if environ is None else environ

    def substitute(match: "re.Match[str]") -> str:
        name, default = match.group(1), match.group(2)
        if name in env:
            return env[name]
        if default is not None:
            return default
        if unset is not None:
            unset.append(name)
        return ""

    def walk(value: Any) -> Any:
        if isinstance(value, dict):
            return {key: walk(item) for key, item in value.items()}
        if isinstance(value, list):
            return [walk(item) for item in value]
        if isinstance(value, str):
            return ENV_VAR_PATTERN.sub(substitute, value)
        return value

    return walk(data)


def dict_to_config(data: Dict[str, Any]) -> AutosslConfig:
    """Convert a validated dict to a typed AutosslConfig."""
    runtime_data = data.get("runtime") or {}
    cache_dir = runtime_data.get("cache_dir")
    runtime = RuntimeConfig(
        cache_dir=Path(cache_dir).expanduser() if cache_dir else None,
        retention=runtime_data.get("retention", RuntimeConfig.retention),
    )

    dump_data = data.get("dump") or {}
    dump = DumpConfig(
        output=dump_data.get("output") or DumpConfig.output,
        checksum=dump_data.get("checksum", DumpConfig.checksum),
    )

    return AutosslConfig(runtime=runtime, dump=dump)
