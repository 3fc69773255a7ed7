"""ServiceResult and ServiceError: what a service hands back to the CLI.

Services report outcomes instead of raising. The CLI renders the result as
Rich text or JSON and turns ``exit_code`` into the process exit status.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class ErrorCode(StrEnum):
    """Machine-readable failure codes carried by ServiceError."""

    DAEMON_DOWN = "DAEMON_DOWN"


class ServiceError(BaseModel):
    """Why an operation failed; ``detail`` is only shown with --verbose."""

    model_config = {"frozen": True}

    code: ErrorCode
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one service operation.

    Attributes:
        ok: False when the operation could not produce its main answer.
        op: Operation name, used to pick a renderer (e.g. ``"probe"``).
        data: Operation payload; also populated on failure when partial
            data is still useful.
        warnings: Degraded but non-fatal conditions.
        error: Set when ``ok`` is False.
        meta: Diagnostics such as the clamd target and pass duration.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1
