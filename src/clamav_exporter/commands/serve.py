"""serve: expose clamd metrics on an HTTP endpoint for Prometheus."""

from __future__ import annotations

import logging
import signal
import threading
from typing import TYPE_CHECKING, Any

import click

from clamav_exporter.commands._base import ExporterCommand, clamd_options
from clamav_exporter.config.logging import bind_process_context

if TYPE_CHECKING:
    from clamav_exporter.commands._context import AppContext

logger = logging.getLogger(__name__)


def _wait_for_shutdown() -> None:
    """Block until SIGINT or SIGTERM."""
    stop = threading.Event()

    def _handle(signum: int, _frame: Any) -> None:
        logger.info("Received %s, shutting down", signal.Signals(signum).name)
        stop.set()

    signal.signal(signal.SIGTERM, _handle)
    signal.signal(signal.SIGINT, _handle)
    stop.wait()


@click.command(
    cls=ExporterCommand,
    examples="""\
  # Poll clamd on localhost:3310, serve metrics on 0.0.0.0:9090
  clamav-exporter serve

  # Remote daemon, custom listen port
  clamav-exporter serve --clamd-address clamav.internal --port 9810

  # Local UNIX socket
  clamav-exporter serve --network unix --clamd-address /run/clamav/clamd.ctl""",
)
@click.option("--host", default=None, help="Listen address for the metrics endpoint.")
@click.option("--port", default=None, type=int, help="Listen port for the metrics endpoint.")
@clamd_options
@click.pass_obj
def serve(
    app: AppContext,
    host: str | None,
    port: int | None,
    **clamd_overrides: Any,
) -> None:
    """Serve clamd metrics at /metrics until interrupted."""
    from prometheus_client import start_http_server

    from clamav_exporter.services.collector import build_registry

    exporter = app.settings.exporter
    listen_host = host or exporter.host
    listen_port = port if port is not None else exporter.port
    if not 1 <= listen_port <= 65535:
        raise click.BadParameter(f"{listen_port} is not a valid port", param_hint="--port")

    client = app.client(**clamd_overrides)
    bind_process_context(clamd=client.target)
    registry = build_registry(
        client,
        namespace=exporter.namespace,
        process_metrics=exporter.process_metrics,
    )

    try:
        server, thread = start_http_server(listen_port, addr=listen_host, registry=registry)
    except OSError as exc:
        raise click.ClickException(f"Cannot listen on {listen_host}:{listen_port}: {exc}") from exc

    logger.info(
        "Serving metrics on http://%s:%d/metrics for clamd at %s",
        listen_host,
        listen_port,
        client.target,
    )
    try:
        _wait_for_shutdown()
    finally:
        server.shutdown()
        thread.join()
