"""
Configuration loading with multi-layer merging.

Implements the configuration precedence chain:
    defaults < user config < project config < env vars

Env vars may themselves come from .env files kept next to the user and
project config; a variable already exported in the shell always wins.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from dotenv import dotenv_values

from .models import DashSyncConfig

logger = logging.getLogger(__name__)

# Global cache to avoid reloading config multiple times per invocation
_config_cache: DashSyncConfig | None = None

_TRUE_VALUES = ("1", "true", "yes", "on")


def get_xdg_config_home() -> Path:
    """
    Get XDG config home directory.

    Returns:
        Path to config directory (defaults to ~/.config)
    """
    if xdg_home := os.environ.get("XDG_CONFIG_HOME"):
        return Path(xdg_home)
    return Path.home() / ".config"


def get_user_config_path() -> Path:
    """Path to ~/.config/dashsync/config.json (or XDG equivalent)."""
    return get_xdg_config_home() / "dashsync" / "config.json"


def get_project_config_path(cwd: Path | None = None) -> Path:
    """Path to .dashsync.json in the project root."""
    if cwd is None:
        cwd = Path.cwd()
    return cwd / ".dashsync.json"


def get_env_file_paths(project_dir: Path | None = None) -> list[Path]:
    """
    The .env files read for a project, lowest precedence first.

    The project .env sits in the same directory as .dashsync.json.
    """
    return [
        get_xdg_config_home() / "dashsync" / ".env",
        get_project_config_path(project_dir).with_name(".env"),
    ]


def load_env_files(
    project_dir: Path | None = None,
    paths: list[Path] | None = None,
) -> dict[str, str]:
    """
    Export variables from .env files into ``os.environ``.

    Later files override earlier ones; variables already present in the
    environment are never replaced.

    Args:
        project_dir: Project directory (defaults to cwd)
        paths: Explicit .env files, replacing :func:`get_env_file_paths`

    Returns:
        The variables that were exported
    """
    if paths is None:
        paths = get_env_file_paths(project_dir)

    values: dict[str, str] = {}
    for path in paths:
        if path.is_file():
            values.update({k: v for k, v in dotenv_values(path).items() if v is not None})

    exported = {k: v for k, v in values.items() if k not in os.environ}
    os.environ.update(exported)
    if exported:
        logger.debug(f"Exported {', '.join(sorted(exported))} from .env files")
    return exported


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two dictionaries.

    Values in `override` take precedence over values in `base`. Nested
    dicts are merged, not replaced.

    Example:
        >>> deep_merge({"a": 1, "b": {"x": 10}}, {"b": {"y": 20}})
        {'a': 1, 'b': {'x': 10, 'y': 20}}
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def load_json_file(path: Path) -> dict[str, Any] | None:
    """
    Load a JSON file, returning None if it doesn't exist or is invalid.

    Args:
        path: Path to JSON file

    Returns:
        Parsed JSON as dict, or None if file doesn't exist or can't be parsed
    """
    if not path.exists():
        return None

    try:
        with path.open() as f:
            data = json.load(f)
            if isinstance(data, dict):
                return data
            return None
    except (json.JSONDecodeError, OSError) as e:
        # Config system should be resilient to a broken file
        logger.warning(f"Failed to parse config at {path}: {e}")
        return None


def _set(result: dict[str, Any], section: str, key: str, value: Any) -> None:
    result.setdefault(section, {})
    result[section][key] = value


def apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    Env vars have the highest precedence and override all config files.

    Supported env vars:
        GRAFANA_URL - overrides grafana.url
        GRAFANA_TOKEN - overrides grafana.token
        GRAFANA_USER - overrides grafana.user
        GRAFANA_INSECURE_SKIP_VERIFY - overrides grafana.insecure_skip_verify
        GRAFANA_TLS_HOST - overrides grafana.tls_host
        DASHSYNC_POLL_INTERVAL - overrides sync.poll_interval
        DASHSYNC_OUTPUT_FORMAT - overrides sync.output_format

    Args:
        config_dict: Configuration dictionary to override

    Returns:
        Configuration dictionary with env var overrides applied
    """
    result = {k: (dict(v) if isinstance(v, dict) else v) for k, v in config_dict.items()}

    for env_name, key in (
        ("GRAFANA_URL", "url"),
        ("GRAFANA_TOKEN", "token"),
        ("GRAFANA_USER", "user"),
        ("GRAFANA_TLS_HOST", "tls_host"),
    ):
        if value := os.environ.get(env_name):
            _set(result, "grafana", key, value)

    if skip_str := os.environ.get("GRAFANA_INSECURE_SKIP_VERIFY"):
        _set(result, "grafana", "insecure_skip_verify", skip_str.lower() in _TRUE_VALUES)

    if interval_str := os.environ.get("DASHSYNC_POLL_INTERVAL"):
        try:
            interval = float(interval_str)
            if interval <= 0:
                logger.warning(
                    f"DASHSYNC_POLL_INTERVAL must be > 0, got {interval}, ignoring"
                )
            else:
                _set(result, "sync", "poll_interval", interval)
        except ValueError:
            logger.warning(f"Invalid DASHSYNC_POLL_INTERVAL value '{interval_str}', ignoring")

    if fmt := os.environ.get("DASHSYNC_OUTPUT_FORMAT"):
        _set(result, "sync", "output_format", fmt.lower())

    return result


def get_default_config() -> dict[str, Any]:
    """Hardcoded default configuration."""
    return {
        "grafana": {
            "url": "",
            "insecure_skip_verify": False,
            "timeout": 30.0,
            "max_retries": 3,
        },
        "sync": {
            "resources_dir": ".",
            "output_format": "json",
            "poll_interval": 2.0,
            "max_watch_failures": 3,
            "snapshot_expires": 0,
        },
    }


def load_config(project_dir: Path | None = None, use_cache: bool = True) -> DashSyncConfig:
    """
    Load configuration with multi-layer merging.

    Configuration precedence (highest to lowest):
        1. Environment variables (GRAFANA_*, DASHSYNC_*), including ones
           exported from the user and project .env files
        2. Project config (.dashsync.json)
        3. User config (~/.config/dashsync/config.json)
        4. Hardcoded defaults

    Args:
        project_dir: Project directory holding .dashsync.json and .env (defaults to cwd)
        use_cache: If True, return cached config from previous load

    Returns:
        Validated DashSyncConfig instance

    Raises:
        ValidationError: If the merged config fails Pydantic validation
    """
    global _config_cache

    if use_cache and _config_cache is not None:
        return _config_cache

    merged = get_default_config()

    if user_config := load_json_file(get_user_config_path()):
        merged = deep_merge(merged, user_config)

    if project_config := load_json_file(get_project_config_path(project_dir)):
        merged = deep_merge(merged, project_config)

    load_env_files(project_dir)
    merged = apply_env_overrides(merged)

    config = DashSyncConfig(**merged)
    _config_cache = config

    return config


def clear_cache() -> None:
    """
    Clear the cached configuration.

    Useful for testing or when config files change during execution.
    """
    global _config_cache
    _config_cache = None
