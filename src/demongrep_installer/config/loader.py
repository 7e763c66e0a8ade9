"""Configuration loading.

Builds an :class:`InstallerConfig` once at process entry from:
- Environment variables (VERSION, INSTALL_DIR, INSTALLER_DEBUG)
- An optional YAML policy file (DEMONGREP_INSTALLER_CONFIG)
- Built-in defaults

Environment variable references (${VAR}, ${VAR:-default}) inside the YAML
file are expanded from the same environment snapshot.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from demongrep_installer.config.models import (
    BinaryConfig,
    DownloadConfig,
    InstallConfig,
    InstallerConfig,
    ReleaseConfig,
)
from demongrep_installer.config.validation import validate_config
from demongrep_installer.core.logging import get_logger

LOGGER = get_logger(__name__)

VERSION_ENV = "VERSION"
INSTALL_DIR_ENV = "INSTALL_DIR"
CONFIG_FILE_ENV = "DEMONGREP_INSTALLER_CONFIG"
DEBUG_ENV = "INSTALLER_DEBUG"

TRUTHY_VALUES = {"1", "true", "yes", "on"}

# Numeric keys and their types; string values (from ${VAR} expansion) are converted
NUMERIC_KEYS: Dict[str, Dict[str, type]] = {
    "download": {"max_attempts": int, "retry_delay": float, "timeout": float},
    "binary": {"search_depth": int},
}

# Environment variable pattern: ${VAR} or ${VAR:-default}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")


class ConfigError(Exception):
    """Configuration loading or parsing error."""

    pass


def load_config(
    environ: Optional[Mapping[str, str]] = None,
    config_path: Optional[Path] = None,
) -> InstallerConfig:
    """Load configuration from the environment and optional YAML file.

    Args:
        environ: Environment mapping (default: ``os.environ``). Read once.
        config_path: Explicit policy file; overrides DEMONGREP_INSTALLER_CONFIG.

    Returns:
        Populated InstallerConfig.

    Raises:
        ConfigError: If the policy file is missing, unparsable or invalid.
    """
    env: Dict[str, str] = dict(os.environ if environ is None else environ)
    sources = ["defaults"]
    data: Dict[str, Any] = {}

    if config_path is None and env.get(CONFIG_FILE_ENV):
        config_path = Path(env[CONFIG_FILE_ENV]).expanduser()

    if config_path is not None:
        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")
        try:
            data = load_yaml_file(config_path, env)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError(f"Cannot read config file {config_path}: {e}") from e

        issues = validate_config(data, source=str(config_path))
        errors = [issue for issue in issues if issue.is_error]
        if errors:
            details = "; ".join(issue.message for issue in errors)
            raise ConfigError(f"Invalid config in {config_path}: {details}")
        sources.append(f"file:{config_path}")
        LOGGER.debug(f"Loaded policy config from {config_path}")

    config = dict_to_config(data)

    version = env.get(VERSION_ENV, "").strip()
    if version:
        config.version = version
        sources.append(f"env:{VERSION_ENV}")

    install_dir = env.get(INSTALL_DIR_ENV, "").strip()
    if install_dir:
        config.install_dir = Path(install_dir).expanduser()
        sources.append(f"env:{INSTALL_DIR_ENV}")

    config.debug = env.get(DEBUG_ENV, "").strip().lower() in TRUTHY_VALUES
    config.search_path = env.get("PATH", "")

    config.sources = sources
    LOGGER.debug(f"Config loaded from sources: {sources}")
    return config


def load_yaml_file(path: Path, environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Load and parse a YAML config file.

    Args:
        path: Path to YAML file.
        environ: Mapping used for ${VAR} expansion (default: ``os.environ``).

    Returns:
        Parsed dictionary with environment variables expanded.

    Raises:
        yaml.YAMLError: If YAML parsing fails.
        ConfigError: If the document is not a mapping.
    """
    with open(path, "r", encoding="utf-8") as f:
        content = f.read()

    data = yaml.safe_load(content)

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ConfigError(f"Config file must be a YAML mapping, got {type(data).__name__}")

    data = expand_env_vars(data, os.environ if environ is None else environ)
    return coerce_numeric_values(data)


def expand_env_vars(data: Any, environ: Mapping[str, str]) -> Any:
    """Recursively expand environment variables in config values.

    Supports ${VAR} and ${VAR:-default} syntax.

    Args:
        data: Config data (dict, list, or scalar).
        environ: Mapping to resolve variables from.

    Returns:
        Data with environment variables expanded.
    """
    if isinstance(data, dict):
        return {k: expand_env_vars(v, environ) for k, v in data.items()}
    elif isinstance(data, list):
        return [expand_env_vars(item, environ) for item in data]
    elif isinstance(data, str):
        return ENV_VAR_PATTERN.sub(lambda m: _env_var_replacer(m, environ), data)
    else:
        return data


def coerce_numeric_values(data: Dict[str, Any]) -> Dict[str, Any]:
    """Convert numeric strings under known numeric keys to numbers.

    Values that do not parse are left unchanged for validation to report.
    """
    for section, keys in NUMERIC_KEYS.items():
        values = data.get(section)
        if not isinstance(values, dict):
            continue
        for key, convert in keys.items():
            value = values.get(key)
            if isinstance(value, str):
                try:
                    values[key] = convert(value.strip())
                except ValueError:
                    pass
    return data


def _env_var_replacer(match: re.Match[str], environ: Mapping[str, str]) -> str:
    """Replace environment variable reference with its value."""
    var_name = match.group(1)
    default_value = match.group(2)

    value = environ.get(var_name)
    if value is not None:
        return value
    if default_value is not None:
        return default_value

    LOGGER.warning(f"Environment variable ${var_name} is not set and has no default")
    return ""


def dict_to_config(data: Dict[str, Any]) -> InstallerConfig:
    """Convert a validated dict to a typed InstallerConfig.

    Args:
        data: Configuration dictionary.

    Returns:
        InstallerConfig with unspecified values left at their defaults.
    """
    release_data = data.get("release") or {}
    release = ReleaseConfig()
    for key in ("owner", "repo", "binary_name", "base_url", "metadata_url"):
        if release_data.get(key) is not None:
            setattr(release, key, release_data[key])

    download_data = data.get("download") or {}
    download = DownloadConfig()
    if download_data.get("max_attempts") is not None:
        download.max_attempts = int(download_data["max_attempts"])
    if download_data.get("retry_delay") is not None:
        download.retry_delay = float(download_data["retry_delay"])
    if download_data.get("timeout") is not None:
        download.timeout = float(download_data["timeout"])

    binary_data = data.get("binary") or {}
    binary = BinaryConfig()
    if binary_data.get("search_depth") is not None:
        binary.search_depth = int(binary_data["search_depth"])

    install_data = data.get("install") or {}
    install = InstallConfig()
    if install_data.get("system_dir"):
        install.system_dir = Path(install_data["system_dir"])
    if install_data.get("user_dir"):
        install.user_dir = Path(install_data["user_dir"])

    return InstallerConfig(
        release=release,
        download=download,
        binary=binary,
        install=install,
    )
