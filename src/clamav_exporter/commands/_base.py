"""Custom Click base class and shared options.

ExporterCommand accepts an ``examples`` parameter. When ``--examples`` is
passed, the command prints usage examples and exits. This keeps ``--help``
concise while making examples available on demand.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

import click

F = TypeVar("F", bound=Callable[..., Any])


def _add_examples_option(cmd: click.Command, examples: str) -> None:
    """Attach an eager ``--examples`` flag to a Click command."""

    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    cmd.params.append(
        click.Option(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=show_examples,
            help="Show usage examples.",
        )
    )


class ExporterCommand(click.Command):
    """Click Command subclass that supports an ``--examples`` flag."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


def clamd_options(func: F) -> F:
    """Add the per-command clamd connection overrides.

    Unset options fall back to the ``[clamd]`` settings section.
    """
    options = [
        click.option(
            "--network",
            type=click.Choice(["tcp", "unix"]),
            default=None,
            help="How to reach clamd.",
        ),
        click.option(
            "--clamd-address",
            default=None,
            help="clamd host (tcp) or socket path (unix).",
        ),
        click.option("--clamd-port", type=int, default=None, help="clamd TCP port."),
        click.option(
            "--timeout",
            type=float,
            default=None,
            help="Connect/read timeout per command, in seconds.",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func
