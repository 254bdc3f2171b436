"""
Helpers shared by CLI commands.
"""

import logging
import sys
from pathlib import Path

from dashsync.core.config import load_config
from dashsync.core.config.models import DashSyncConfig
from dashsync.core.provider import Provider


def setup_logging(debug: bool = False) -> None:
    """
    Configure logging for CLI commands.

    Args:
        debug: If True, enable DEBUG level logging
    """
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def get_config() -> DashSyncConfig:
    return load_config()


def get_provider() -> Provider:
    return Provider(get_config())


def resolve_root(directory: Path | None) -> Path:
    """The directory argument, or ``sync.resources_dir`` from config."""
    if directory is not None:
        return directory
    return Path(get_config().sync.resources_dir)
