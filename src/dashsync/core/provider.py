"""
Grafana provider: configuration checks, connectivity status and wiring.

The provider owns the HTTP client for a configuration and builds the
dashboard handler on top of it.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel

from dashsync.core.config.models import DashSyncConfig
from dashsync.core.dashboards.handler import DashboardHandler
from dashsync.core.exceptions import ConfigError, DashSyncError
from dashsync.core.grafana.client import GrafanaClient

logger = logging.getLogger(__name__)

GROUP = "grizzly.grafana.com"
VERSION = "v1alpha1"


class ProviderStatus(BaseModel):
    """Whether the provider is configured (active) and reachable (online)."""

    active: bool = False
    active_reason: str = ""
    online: bool = False
    online_reason: str = ""


class Provider:
    """
    Entry point for talking to one Grafana instance.

    Example:
        >>> provider = Provider(load_config())
        >>> status = provider.status()
        >>> if status.online:
        ...     handler = provider.dashboard_handler()
    """

    def __init__(self, config: DashSyncConfig) -> None:
        self.config = config
        self._client: GrafanaClient | None = None

    @property
    def name(self) -> str:
        return "Grafana"

    @property
    def api_version(self) -> str:
        return f"{GROUP}/{VERSION}"

    def validate(self) -> None:
        """
        Raises:
            ConfigError: If the Grafana URL is not set or not http(s)
        """
        url = self.config.grafana.url
        if not url:
            raise ConfigError("grafana URL is not set", hint="set GRAFANA_URL")
        if not url.startswith(("http://", "https://")):
            raise ConfigError(f"invalid Grafana URL '{url}'", url=url)

    def client(self) -> GrafanaClient:
        """The provider's HTTP client, built on first use."""
        if self._client is None:
            self.validate()
            self._client = GrafanaClient(self.config.grafana)
        return self._client

    def status(self) -> ProviderStatus:
        status = ProviderStatus()
        try:
            self.validate()
        except ConfigError as e:
            status.active_reason = str(e)
            return status
        status.active = True

        try:
            self.client().health()
        except DashSyncError as e:
            logger.debug(f"Health check failed: {e}")
            status.online_reason = str(e)
            return status
        status.online = True
        return status

    def dashboard_handler(self) -> DashboardHandler:
        return DashboardHandler(
            self.client(),
            self.api_version,
            poll_interval=self.config.sync.poll_interval,
            max_watch_failures=self.config.sync.max_watch_failures,
        )

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
