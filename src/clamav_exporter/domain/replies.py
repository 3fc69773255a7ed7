"""Parsed reply records.

Each record is produced fresh by one collection pass and never mutated.
A field set to ``None`` is absent: its source text did not match, or
the daemon printed a placeholder instead of a value.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class StatsSnapshot(BaseModel):
    """Parsed result of one ``STATS`` reply."""

    model_config = {"frozen": True}

    threads_live: int | None = Field(default=None, ge=0)
    threads_idle: int | None = Field(default=None, ge=0)
    threads_max: int | None = Field(default=None, ge=0)
    queue_length: int | None = Field(default=None, ge=0)
    mem_heap: float | None = Field(default=None, ge=0)
    mem_mmap: float | None = Field(default=None, ge=0)
    mem_used: float | None = Field(default=None, ge=0)
    pools_used: float | None = Field(default=None, ge=0)
    pools_total: float | None = Field(default=None, ge=0)

    def present(self) -> dict[str, int | float]:
        """Return only the fields that carry a value."""
        return self.model_dump(exclude_none=True)


class VersionInfo(BaseModel):
    """Parsed result of one ``VERSION`` reply."""

    model_config = {"frozen": True}

    engine_version: str
    database_version: str
