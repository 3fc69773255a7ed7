"""Subcommand modules for clamav-exporter.

Provides register_commands() which uses deferred imports to keep
``clamav-exporter --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the standalone commands on the root CLI group."""
    from clamav_exporter.commands.probe import probe
    from clamav_exporter.commands.serve import serve

    cli.add_command(serve)
    cli.add_command(probe)
