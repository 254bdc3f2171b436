"""
dashsync - keep Grafana dashboards in sync with files on disk.

A CLI tool that pulls, pushes, renames and watches dashboards as
addressable, versioned resource files.
"""

__version__ = "0.3.0-dev"

# Re-export core models for convenience
from dashsync.core.config.models import DashSyncConfig
from dashsync.core.resources.models import Resource

__all__ = ["DashSyncConfig", "Resource", "__version__"]
