"""
Tests for the dashsync CLI.

Commands run through typer's CliRunner with the provider patched to hand
out a handler backed by the in-memory gateway.
"""

from __future__ import annotations

import json
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from dashsync import __version__
from dashsync.cli import app
from dashsync.cli.errors import ExitCode
from dashsync.core.exceptions import ConfigError, NotFoundError, TransportError
from dashsync.core.provider import ProviderStatus

runner = CliRunner()


@pytest.fixture(autouse=True)
def in_tmp_dir(tmp_path, monkeypatch):
    """Run every command from an empty directory so no .env is picked up."""
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def provider(handler):
    mock_provider = MagicMock()
    mock_provider.dashboard_handler.return_value = handler
    with patch("dashsync.cli.common.get_provider", return_value=mock_provider):
        yield mock_provider


class TestApp:
    def test_version(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self):
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for command in ("pull", "push", "diff", "rename", "watch", "status"):
            assert command in result.output


class TestSyncCommands:
    """Tests for pull/push/diff."""

    def test_pull(self, provider, gateway, sales_dashboard, tmp_path):
        gateway.seed_dashboard(sales_dashboard, folder_uid="team-x")

        result = runner.invoke(app, ["pull", str(tmp_path / "out")])

        assert result.exit_code == 0, result.output
        assert "1 written" in result.output
        assert (tmp_path / "out/dashboards/team-x/dashboard-abc.json").exists()
        provider.close.assert_called_once()

    def test_pull_yaml(self, provider, gateway, sales_dashboard, tmp_path):
        gateway.seed_dashboard(sales_dashboard, folder_uid="team-x")

        result = runner.invoke(app, ["pull", str(tmp_path), "--format", "yaml"])

        assert result.exit_code == 0, result.output
        assert (tmp_path / "dashboards/team-x/dashboard-abc.yaml").exists()

    def test_pull_rejects_unknown_format(self, provider, tmp_path):
        result = runner.invoke(app, ["pull", str(tmp_path), "-f", "toml"])

        assert result.exit_code == ExitCode.USER_ERROR
        assert "Unknown format" in result.output

    def test_pull_uses_configured_format(self, provider, gateway, sales_dashboard, tmp_path):
        (tmp_path / ".dashsync.json").write_text(json.dumps({"sync": {"output_format": "yaml"}}))
        gateway.seed_dashboard(sales_dashboard, folder_uid="team-x")

        result = runner.invoke(app, ["pull", str(tmp_path)])

        assert result.exit_code == 0, result.output
        assert (tmp_path / "dashboards/team-x/dashboard-abc.yaml").exists()

    def test_pull_partial_failure_exits_1(self, provider, gateway, sales_dashboard, tmp_path):
        gateway.seed_dashboard(sales_dashboard, folder_uid="team-x")
        gateway.fail_on["get_dashboard"] = TransportError("HTTP 500", status_code=500)

        result = runner.invoke(app, ["pull", str(tmp_path)])

        assert result.exit_code == ExitCode.GENERAL_ERROR
        assert "1 failed" in result.output

    def test_push(self, provider, gateway, sales_dashboard, tmp_path):
        path = tmp_path / "dashboards" / "team-x" / "dashboard-abc.json"
        path.parent.mkdir(parents=True)
        path.write_text(json.dumps(sales_dashboard))

        result = runner.invoke(app, ["push", str(tmp_path)])

        assert result.exit_code == 0, result.output
        assert gateway.titles() == {"abc": "Sales"}
        assert "1 added" in result.output

    def test_diff(self, provider, gateway, sales_dashboard, tmp_path):
        path = tmp_path / "dashboards" / "team-x" / "dashboard-abc.json"
        path.parent.mkdir(parents=True)
        path.write_text(json.dumps(sales_dashboard))

        result = runner.invoke(app, ["diff", str(tmp_path)])

        assert result.exit_code == 0, result.output
        assert "added" in result.output
        assert gateway.dashboards == {}

    def test_config_error_exits_2(self, tmp_path):
        with patch("dashsync.cli.common.get_provider") as get_provider:
            get_provider.return_value.dashboard_handler.side_effect = ConfigError(
                "grafana URL is not set"
            )
            result = runner.invoke(app, ["pull", str(tmp_path)])

        assert result.exit_code == ExitCode.USER_ERROR
        assert "grafana URL is not set" in result.output
        get_provider.return_value.close.assert_called_once()


class TestDashboardCommands:
    """Tests for single-dashboard commands."""

    def test_get(self, provider, gateway, sales_dashboard):
        gateway.seed_dashboard(sales_dashboard, folder_uid="team-x")

        result = runner.invoke(app, ["get", "abc"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["metadata"]["folder"] == "team-x"

    def test_get_missing(self, provider):
        result = runner.invoke(app, ["get", "missing"])

        assert result.exit_code == ExitCode.GENERAL_ERROR
        assert "not found" in result.output

    def test_list(self, provider, gateway, sales_dashboard):
        gateway.seed_dashboard(sales_dashboard)

        result = runner.invoke(app, ["list"])

        assert result.exit_code == 0
        assert "abc" in result.output
        assert "1 dashboards" in result.output

    def test_delete(self, provider, gateway, sales_dashboard):
        gateway.seed_dashboard(sales_dashboard)

        result = runner.invoke(app, ["delete", "abc"])

        assert result.exit_code == 0
        assert gateway.dashboards == {}

    def test_rename(self, provider, gateway, sales_dashboard):
        gateway.seed_dashboard(sales_dashboard, folder_uid="team-x")

        result = runner.invoke(app, ["rename", "abc", "xyz"])

        assert result.exit_code == 0, result.output
        assert gateway.titles() == {"xyz": "Sales"}
        assert "renamed to xyz" in result.output

    def test_rename_failure_suggests_resume(self, provider, gateway, sales_dashboard):
        gateway.seed_dashboard(sales_dashboard, folder_uid="team-x")
        gateway.fail_on["delete_dashboard"] = TransportError("connection reset")

        result = runner.invoke(app, ["rename", "abc", "xyz"])

        assert result.exit_code == ExitCode.GENERAL_ERROR
        assert "delete" in result.output
        assert set(gateway.titles()) == {"abc", "xyz"}
        provider.close.assert_called_once()

    def test_preview(self, provider, gateway, sales_dashboard, tmp_path):
        path = tmp_path / "dash.json"
        path.write_text(json.dumps(sales_dashboard))

        result = runner.invoke(app, ["preview", str(path), "--expires", "60"])

        assert result.exit_code == 0, result.output
        assert "view:" in result.output
        assert "delete:" in result.output
        method, (_, expires) = gateway.calls[-1]
        assert method == "create_snapshot"
        assert expires == 60

    @pytest.mark.parametrize(
        "args",
        [["get", "missing"], ["list"], ["delete", "missing"], ["push", "."], ["diff", "."]],
    )
    def test_provider_closed(self, provider, args):
        runner.invoke(app, args)

        provider.close.assert_called_once()

    def test_watch_interrupted(self, tmp_path):
        with patch("dashsync.cli.common.get_provider") as get_provider:
            handler = get_provider.return_value.dashboard_handler.return_value
            handler.listen.side_effect = KeyboardInterrupt
            result = runner.invoke(app, ["watch", "abc", str(tmp_path / "dash.yaml")])

        assert result.exit_code == ExitCode.SIGINT
        assert handler.listen.call_args.kwargs["fmt"] == "yaml"
        get_provider.return_value.close.assert_called_once()

    def test_watch_dashboard_deleted(self, tmp_path):
        with patch("dashsync.cli.common.get_provider") as get_provider:
            handler = get_provider.return_value.dashboard_handler.return_value
            handler.listen.side_effect = NotFoundError("Dashboard abc not found")
            result = runner.invoke(app, ["watch", "abc", str(tmp_path / "dash.json")])

        assert result.exit_code == ExitCode.GENERAL_ERROR
        assert "not found" in result.output


class TestStatusCommand:
    """Tests for dashsync status."""

    def make_provider(self, **status):
        provider = MagicMock()
        provider.name = "Grafana"
        provider.api_version = "grizzly.grafana.com/v1alpha1"
        provider.config.grafana.url = "http://grafana.test"
        provider.status.return_value = ProviderStatus(**status)
        return provider

    def test_online(self):
        provider = self.make_provider(active=True, online=True)
        with patch("dashsync.cli.common.get_provider", return_value=provider):
            result = runner.invoke(app, ["status"])

        assert result.exit_code == 0, result.output
        assert "yes" in result.output
        provider.close.assert_called_once()

    def test_inactive_exits_2(self):
        provider = self.make_provider(active=False, active_reason="grafana URL is not set")
        with patch("dashsync.cli.common.get_provider", return_value=provider):
            result = runner.invoke(app, ["status"])

        assert result.exit_code == ExitCode.USER_ERROR

    def test_offline_exits_1(self):
        provider = self.make_provider(active=True, online=False, online_reason="refused")
        with patch("dashsync.cli.common.get_provider", return_value=provider):
            result = runner.invoke(app, ["status"])

        assert result.exit_code == ExitCode.GENERAL_ERROR
