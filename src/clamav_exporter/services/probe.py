"""ProbeService: one collection pass reported as a ServiceResult.

Used by ``clamav-exporter probe`` to check connectivity and show what a
scrape would export, without starting the HTTP server.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from clamav_exporter.services.collector import run_pass
from clamav_exporter.services.result import ErrorCode, ServiceError, ServiceResult

if TYPE_CHECKING:
    from clamav_exporter.services.collector import Dialer


class ProbeService:
    """Runs a single pass against clamd and summarises it."""

    def __init__(self, client: Dialer) -> None:
        self._client = client

    def probe(self) -> ServiceResult:
        """Probe the daemon once.

        Fails with ``DAEMON_DOWN`` when PING is not answered; missing
        STATS or VERSION sections are reported as warnings.
        """
        target = self._client.target
        start = time.perf_counter()
        result = run_pass(self._client)
        meta = {
            "target": target,
            "duration_ms": round((time.perf_counter() - start) * 1000, 2),
        }

        data = {
            "up": result.up,
            "stats": result.stats.present(),
            "version": result.version.model_dump() if result.version else None,
            "observations": [
                {"name": obs.name, "value": obs.value, "labels": obs.labels}
                for obs in result.observations()
            ],
        }

        if not result.up:
            return ServiceResult(
                ok=False,
                op="probe",
                data=data,
                error=ServiceError(
                    code=ErrorCode.DAEMON_DOWN,
                    message=f"clamd at {target} did not answer PING",
                    detail={"target": target},
                ),
                meta=meta,
            )

        warnings: list[str] = []
        if not data["stats"]:
            warnings.append("STATS reply contained no recognised fields")
        if result.version is None:
            warnings.append("VERSION reply did not match 'ClamAV <engine>/<database>'")

        return ServiceResult(ok=True, op="probe", data=data, warnings=warnings, meta=meta)
