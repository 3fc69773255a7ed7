"""probe: run one collection pass and print what a scrape would export."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from clamav_exporter.commands._base import ExporterCommand, clamd_options

if TYPE_CHECKING:
    from clamav_exporter.commands._context import AppContext


@click.command(
    cls=ExporterCommand,
    examples="""\
  clamav-exporter probe
  clamav-exporter --json probe
  clamav-exporter probe --clamd-address 10.0.0.5 --timeout 2""",
)
@clamd_options
@click.pass_obj
def probe(app: AppContext, **clamd_overrides: Any) -> None:
    """Query clamd once; exit 1 if it does not answer PING."""
    from clamav_exporter.services.probe import ProbeService

    app.emit(ProbeService(app.client(**clamd_overrides)).probe())
