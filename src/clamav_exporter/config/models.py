"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, clamav-exporter.toml only
contains overrides. A local clamd on the default port needs no file at all.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

# --- clamav-exporter.toml sections ---


class ClamdConfig(BaseModel):
    """[clamd] section: where and how to reach the daemon."""

    model_config = {"frozen": True}

    network: Literal["tcp", "unix"] = "tcp"
    address: str = "localhost"
    port: int = Field(default=3310, ge=1, le=65535)
    timeout: float = Field(default=5.0, gt=0)


class ExporterConfig(BaseModel):
    """[exporter] section: the metrics endpoint."""

    model_config = {"frozen": True}

    host: str = "0.0.0.0"
    port: int = Field(default=9090, ge=1, le=65535)
    namespace: str = Field(default="clamav", pattern=r"^[a-zA-Z_][a-zA-Z0-9_]*$")
    process_metrics: bool = True

