"""Rich/JSON output dispatch.

The CLI renders ServiceResult for humans (Rich tables and colors) or
machines (--json). This module picks the mode; the Rich side lives in
:mod:`clamav_exporter.output.renderers`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel

from clamav_exporter.output.renderers import render_result

if TYPE_CHECKING:
    from clamav_exporter.services.result import ServiceResult


class OutputSettings(BaseModel):
    """Output-related CLI flags, frozen after construction."""

    model_config = {"frozen": True}

    json_output: bool = False
    verbose: bool = False


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display.

    Args:
        result: The service result to format.
        settings: Output mode; defaults to human-readable text.
    """
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)
    return render_result(result, verbose=settings.verbose)
