"""
Tests for Provider.
"""

from unittest.mock import Mock, patch

import pytest

from dashsync.core.config.models import DashSyncConfig, GrafanaConfig, SyncConfig
from dashsync.core.dashboards.handler import DashboardHandler
from dashsync.core.exceptions import ConfigError, TransportError
from dashsync.core.grafana.client import GrafanaClient
from dashsync.core.provider import Provider


def make_provider(url: str = "http://grafana.test", **sync) -> Provider:
    return Provider(DashSyncConfig(grafana=GrafanaConfig(url=url), sync=SyncConfig(**sync)))


class TestProvider:
    """Tests for Provider configuration and wiring."""

    def test_identity(self):
        provider = make_provider()

        assert provider.name == "Grafana"
        assert provider.api_version == "grizzly.grafana.com/v1alpha1"

    @pytest.mark.parametrize("url", ["", "grafana.test", "ftp://grafana.test"])
    def test_validate_rejects_bad_url(self, url):
        with pytest.raises(ConfigError):
            make_provider(url).validate()

    def test_client_is_cached(self):
        provider = make_provider()

        client = provider.client()

        assert isinstance(client, GrafanaClient)
        assert provider.client() is client
        provider.close()

    def test_client_requires_valid_config(self):
        with pytest.raises(ConfigError):
            make_provider("").client()

    def test_close_resets_client(self):
        provider = make_provider()
        client = provider.client()

        provider.close()

        assert provider.client() is not client
        provider.close()

    def test_dashboard_handler_uses_sync_settings(self):
        provider = make_provider(poll_interval=0.5, max_watch_failures=7)

        handler = provider.dashboard_handler()

        assert isinstance(handler, DashboardHandler)
        assert handler.api_version == "grizzly.grafana.com/v1alpha1"
        assert handler.poll_interval == 0.5
        assert handler.max_watch_failures == 7
        provider.close()


class TestProviderStatus:
    """Tests for Provider.status()."""

    def test_inactive_without_url(self):
        status = make_provider("").status()

        assert not status.active
        assert not status.online
        assert "not set" in status.active_reason

    def test_online(self):
        provider = make_provider()
        with patch.object(GrafanaClient, "health", Mock(return_value={"database": "ok"})):
            status = provider.status()

        assert status.active
        assert status.online
        provider.close()

    def test_offline(self):
        provider = make_provider()
        error = TransportError("Health check failed: connection refused")
        with patch.object(GrafanaClient, "health", Mock(side_effect=error)):
            status = provider.status()

        assert status.active
        assert not status.online
        assert "connection refused" in status.online_reason
        provider.close()
