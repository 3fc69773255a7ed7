"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from clamav_exporter.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from clamav_exporter.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="clam.ok")
    op = Text(f"  {result.op}", style="clam.op")
    console.print(label, op, end="")
    console.print()


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print the meta block (verbose only)."""
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        console.print(f"    {k}: {v}")


def _format_value(value: float) -> str:
    return str(int(value)) if value.is_integer() else str(value)


def _observation_table(observations: list[dict[str, Any]]) -> Table:
    """Build a Rich Table with one row per exported sample."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Metric", style="clam.metric", no_wrap=True)
    table.add_column("Value", style="clam.value", justify="right")
    table.add_column("Labels")
    for obs in observations:
        labels = ", ".join(f'{k}="{v}"' for k, v in obs.get("labels", {}).items())
        table.add_row(str(obs["name"]), _format_value(float(obs["value"])), labels)
    return table


def _render_warnings(console: Console, result: ServiceResult) -> None:
    for warning in result.warnings:
        console.print(Text("WARNING", style="clam.warning"), f" {warning}")


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="clam.error")
    op = Text(f"  {result.op}", style="clam.op")
    sep = Text(" - ")
    console.print(label, op, sep, msg)
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Op renderers ──────────────────────────────────────────────────────


def _render_probe(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a probe: version line, then the samples a scrape would export."""
    _status_line(console, result)
    version = result.data.get("version")
    if version:
        console.print(
            Text("  clamav:", style="clam.key"),
            f"{version['engine_version']} (database {version['database_version']})",
        )
    observations = result.data.get("observations", [])
    if observations:
        console.print(_observation_table(observations))
    _render_warnings(console, result)
    if verbose:
        _render_meta(console, result)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback: status line plus indented key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        console.print(Text(f"  {key}:", style="clam.key"), str(value))
    _render_warnings(console, result)
    if verbose:
        _render_meta(console, result)


_OP_RENDERERS: dict[str, Any] = {
    "probe": _render_probe,
}
