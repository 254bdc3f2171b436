"""
Grafana API gateway.

Provides the HTTP client used by every remote operation and the retry
policy it applies to transient failures.
"""

from dashsync.core.grafana.client import GrafanaClient
from dashsync.core.grafana.gateway import RemoteGateway
from dashsync.core.grafana.http import RetryConfig, is_retryable_error, with_retry

__all__ = ["GrafanaClient", "RemoteGateway", "RetryConfig", "is_retryable_error", "with_retry"]
