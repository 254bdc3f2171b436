"""
Configuration models and loading.

This module provides Pydantic models for dashsync configuration
with multi-layer merging: defaults < user < project < env vars.
"""

from .loader import (
    clear_cache,
    get_env_file_paths,
    get_project_config_path,
    get_user_config_path,
    get_xdg_config_home,
    load_config,
    load_env_files,
)
from .models import DashSyncConfig, GrafanaConfig, SyncConfig

__all__ = [
    # Models
    "DashSyncConfig",
    "GrafanaConfig",
    "SyncConfig",
    # Loader functions
    "clear_cache",
    "get_env_file_paths",
    "get_project_config_path",
    "get_user_config_path",
    "get_xdg_config_home",
    "load_config",
    "load_env_files",
]
