"""Tests for the probe command."""

from __future__ import annotations

import json

from click.testing import CliRunner

from clamav_exporter.cli import cli


class TestProbeCommand:
    def test_help(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["probe", "--help"])
        assert result.exit_code == 0
        assert "--clamd-address" in result.output
        assert "--network" in result.output

    def test_examples(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["probe", "--examples"])
        assert result.exit_code == 0
        assert "clamav-exporter probe" in result.output

    def test_against_fake_clamd(self, cli_runner: CliRunner, clamd_tcp) -> None:
        port = str(clamd_tcp.server_address[1])
        result = cli_runner.invoke(
            cli, ["--json", "probe", "--clamd-address", "127.0.0.1", "--clamd-port", port]
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["ok"] is True
        assert data["data"]["stats"]["threads_live"] == 10
        assert data["data"]["version"]["engine_version"] == "0.102.4"

    def test_unix_socket(self, cli_runner: CliRunner, clamd_unix) -> None:
        _, path = clamd_unix
        result = cli_runner.invoke(
            cli, ["probe", "--network", "unix", "--clamd-address", path]
        )
        assert result.exit_code == 0, result.output
        assert "pools_total_mb" in result.output

    def test_daemon_down_exits_1(self, cli_runner: CliRunner, tmp_path) -> None:
        result = cli_runner.invoke(
            cli,
            ["probe", "--network", "unix", "--clamd-address", str(tmp_path / "none.sock")],
        )
        assert result.exit_code == 1
        assert "did not answer PING" in result.output

    def test_invalid_timeout_is_usage_error(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["probe", "--timeout", "0"])
        assert result.exit_code == 2
        assert "Invalid clamd option" in result.output
