"""
Configuration data models for dashsync.

These models define the structure of .dashsync.json and
~/.config/dashsync/config.json files, with validation via Pydantic.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class GrafanaConfig(BaseModel):
    """
    Connection settings for the remote Grafana instance.

    ``token`` alone is sent as a bearer token; ``user`` plus ``token`` is
    sent as basic auth.
    """
    url: str = Field(
        default="",
        description="Base URL of the Grafana instance (e.g. https://grafana.example.com)"
    )
    token: Optional[str] = Field(
        default=None,
        description="API token, or password when 'user' is set"
    )
    user: Optional[str] = Field(
        default=None,
        description="Username for basic auth"
    )
    insecure_skip_verify: bool = Field(
        default=False,
        description="Skip TLS certificate verification"
    )
    tls_host: Optional[str] = Field(
        default=None,
        description="TLS server name to send over https when insecure_skip_verify is set"
    )
    timeout: float = Field(
        default=30.0,
        gt=0,
        description="Request timeout in seconds"
    )
    max_retries: int = Field(
        default=3,
        ge=0,
        description="Retries for transient request failures (5xx, timeouts)"
    )

    @field_validator('url')
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the base URL so path joins stay predictable."""
        return v.rstrip("/")


class SyncConfig(BaseModel):
    """
    Local sync behavior.

    Controls where resources live on disk and how the watcher polls.
    """
    resources_dir: str = Field(
        default=".",
        description="Root directory holding the dashboards/ tree"
    )
    output_format: str = Field(
        default="json",
        pattern="^(json|yaml)$",
        description="File format used when pulling resources: 'json' or 'yaml'"
    )
    poll_interval: float = Field(
        default=2.0,
        gt=0,
        description="Seconds between polls when watching a dashboard"
    )
    max_watch_failures: int = Field(
        default=3,
        ge=1,
        description="Consecutive transient fetch errors before a watch gives up"
    )
    snapshot_expires: int = Field(
        default=0,
        ge=0,
        description="Preview snapshot lifetime in seconds (0 = never expires)"
    )


class DashSyncConfig(BaseModel):
    """
    Top-level dashsync configuration.

    Loaded from defaults, user config, project config, and env vars.

    Example:
        >>> config = DashSyncConfig(
        ...     grafana=GrafanaConfig(url="http://localhost:3000"),
        ...     sync=SyncConfig(output_format="yaml"),
        ... )
        >>> config.sync.poll_interval
        2.0
    """
    grafana: GrafanaConfig = Field(
        default_factory=GrafanaConfig,
        description="Remote Grafana connection"
    )
    sync: SyncConfig = Field(
        default_factory=SyncConfig,
        description="Local sync behavior"
    )

    model_config = ConfigDict(
        extra="ignore",
    )
