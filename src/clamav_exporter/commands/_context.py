"""AppContext: shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Configures logging, builds clamd clients from
settings plus per-command overrides, and centralizes result emission
(stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click
from pydantic import ValidationError

from clamav_exporter.config.logging import configure_logging
from clamav_exporter.config.models import ClamdConfig
from clamav_exporter.infrastructure.client import ClamdClient
from clamav_exporter.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from clamav_exporter.config.settings import ExporterSettings
    from clamav_exporter.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: ExporterSettings) -> None:
        self.settings = settings
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    def clamd_config(
        self,
        *,
        network: str | None = None,
        clamd_address: str | None = None,
        clamd_port: int | None = None,
        timeout: float | None = None,
    ) -> ClamdConfig:
        """Return the ``[clamd]`` section with CLI overrides applied."""
        overrides: dict[str, Any] = {
            key: value
            for key, value in (
                ("network", network),
                ("address", clamd_address),
                ("port", clamd_port),
                ("timeout", timeout),
            )
            if value is not None
        }
        if not overrides:
            return self.settings.clamd
        try:
            return ClamdConfig.model_validate({**self.settings.clamd.model_dump(), **overrides})
        except ValidationError as exc:
            raise click.UsageError(f"Invalid clamd option: {exc}") from exc

    def client(self, **overrides: Any) -> ClamdClient:
        """Build a clamd client from settings plus CLI overrides."""
        return ClamdClient.from_config(self.clamd_config(**overrides))

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
        else:
            click.echo(output, err=True)
            raise SystemExit(result.exit_code)
