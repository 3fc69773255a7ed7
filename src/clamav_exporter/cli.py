"""Root CLI group for clamav-exporter with global flags and command registration."""

from __future__ import annotations

import click
from pydantic import ValidationError

from clamav_exporter import __version__
from clamav_exporter.commands import register_commands
from clamav_exporter.commands._context import AppContext
from clamav_exporter.config.settings import ExporterSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="clamav-exporter")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging and detailed output.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """clamav-exporter: Prometheus exporter for the ClamAV daemon."""
    # Only flags that were given override env vars and the config file.
    flags = {
        name: value
        for name, value in (
            ("json_output", json_output),
            ("verbose", verbose),
            ("log_json", log_json),
        )
        if value
    }
    try:
        settings = ExporterSettings.from_cli(config_path=config_path, **flags)
    except ValidationError as exc:
        raise click.ClickException(f"Invalid configuration: {exc}") from exc
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
