"""Tests for the serve command."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

from click.testing import CliRunner
from prometheus_client import CollectorRegistry

from clamav_exporter.cli import cli
from clamav_exporter.services.collector import build_registry


def _invoke_serve(cli_runner: CliRunner, args: list[str], *, config: str | None = None):
    server, thread = MagicMock(), MagicMock()
    root = ["-c", config] if config else []
    with (
        patch(
            "prometheus_client.start_http_server", return_value=(server, thread)
        ) as start,
        patch("clamav_exporter.commands.serve._wait_for_shutdown") as wait,
    ):
        result = cli_runner.invoke(cli, [*root, "serve", *args])
    return result, start, wait, server, thread


class TestServeCommand:
    def test_help_shows_options(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["serve", "--help"])
        assert "--host" in result.output
        assert "--port" in result.output
        assert "--clamd-port" in result.output

    def test_defaults(self, cli_runner: CliRunner) -> None:
        result, start, wait, server, thread = _invoke_serve(cli_runner, [])
        assert result.exit_code == 0, result.output
        args, kwargs = start.call_args
        assert args == (9090,)
        assert kwargs["addr"] == "0.0.0.0"
        assert isinstance(kwargs["registry"], CollectorRegistry)
        wait.assert_called_once()
        server.shutdown.assert_called_once()
        thread.join.assert_called_once()

    def test_cli_overrides(self, cli_runner: CliRunner) -> None:
        result, start, *_ = _invoke_serve(
            cli_runner, ["--host", "127.0.0.1", "--port", "9810", "--clamd-port", "3311"]
        )
        assert result.exit_code == 0, result.output
        args, kwargs = start.call_args
        assert args == (9810,)
        assert kwargs["addr"] == "127.0.0.1"

    def test_config_file(self, cli_runner: CliRunner, tmp_path) -> None:
        config = tmp_path / "exporter.toml"
        config.write_text('[exporter]\nport = 9200\nnamespace = "av"\nprocess_metrics = false\n')
        with patch(
            "clamav_exporter.services.collector.build_registry", wraps=build_registry
        ) as build:
            result, start, *_ = _invoke_serve(cli_runner, [], config=str(config))
        assert result.exit_code == 0, result.output
        args, _ = start.call_args
        assert args == (9200,)
        _, kwargs = build.call_args
        assert kwargs == {"namespace": "av", "process_metrics": False}

    def test_invalid_port(self, cli_runner: CliRunner) -> None:
        result, start, *_ = _invoke_serve(cli_runner, ["--port", "0"])
        assert result.exit_code == 2
        start.assert_not_called()

    def test_bind_failure(self, cli_runner: CliRunner) -> None:
        with patch("prometheus_client.start_http_server", side_effect=OSError("in use")):
            result = cli_runner.invoke(cli, ["serve"])
        assert result.exit_code == 1
        assert "Cannot listen" in result.output

    def test_shuts_down_when_wait_is_interrupted(self, cli_runner: CliRunner) -> None:
        server, thread = MagicMock(), MagicMock()
        with (
            patch("prometheus_client.start_http_server", return_value=(server, thread)),
            patch(
                "clamav_exporter.commands.serve._wait_for_shutdown",
                side_effect=KeyboardInterrupt,
            ),
        ):
            cli_runner.invoke(cli, ["serve"])
        server.shutdown.assert_called_once()
        thread.join.assert_called_once()

    def test_binds_clamd_target_to_logs(self, cli_runner: CliRunner) -> None:
        with patch("clamav_exporter.commands.serve.bind_process_context") as bind:
            result, *_ = _invoke_serve(
                cli_runner, ["--clamd-address", "clamav.internal", "--clamd-port", "3311"]
            )
        assert result.exit_code == 0, result.output
        bind.assert_called_once_with(clamd="tcp://clamav.internal:3311")
