"""Shared pytest fixtures and test helpers for clamav-exporter tests."""

from __future__ import annotations

import logging
import shutil
import socketserver
import tempfile
import threading
from collections.abc import Generator, Iterator
from contextlib import contextmanager
from pathlib import Path

import pytest
import structlog
from click.testing import CliRunner

from clamav_exporter.config import discovery
from clamav_exporter.config.logging import bind_process_context
from clamav_exporter.domain.commands import Command

# Reply captured from a busy clamd 0.102 (worker lines trimmed).
STATS_REPLY = (
    b"POOLS: 1\n"
    b"\n"
    b"STATE: VALID PRIMARY\n"
    b"THREADS: live 10  idle 2 max 10 idle-timeout 30\n"
    b"QUEUE: 0 items\n"
    b"\tINSTREAM 1.249366 instream(10.42.174.58@41938)\n"
    b"\tIDLE -0.021568 \n"
    b"\tINSTREAM 11.672077 instream(10.42.174.58@35486)\n"
    b"\tSTATS 0.000276 \n"
    b"\n"
    b"MEMSTATS: heap N/A mmap N/A used N/A free N/A releasable N/A pools 1 "
    b"pools_used 1143.596M pools_total 1143.632M\n"
    b"END\n"
)

VERSION_REPLY = b"ClamAV 0.102.4/26168/Wed Jun 17 08:24:58 2020\n"

HEALTHY_REPLIES: dict[Command, bytes] = {
    Command.LIVENESS_PROBE: b"PONG\n",
    Command.STATS: STATS_REPLY,
    Command.VERSION: VERSION_REPLY,
}


class FakeClient:
    """In-memory stand-in for ClamdClient; unknown commands reply empty."""

    target = "tcp://fake:3310"

    def __init__(self, replies: dict[Command, bytes] | None = None) -> None:
        self.replies = dict(HEALTHY_REPLIES if replies is None else replies)
        self.calls: list[Command] = []

    def dial(self, command: Command) -> bytes:
        self.calls.append(command)
        return self.replies.get(command, b"")


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def fake_client() -> FakeClient:
    """A fake client that answers like a healthy daemon."""
    return FakeClient()


@pytest.fixture
def down_client() -> FakeClient:
    """A fake client for an unreachable daemon (every reply empty)."""
    return FakeClient({})


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep settings discovery away from the developer's real environment."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("CLAMAV_EXPORTER_CONFIG", raising=False)
    monkeypatch.setattr(discovery, "SYSTEM_CONFIG_PATHS", ())


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Undo configure_logging() side effects from CLI invocations."""
    root = logging.getLogger()
    original_level = root.level
    exporter = logging.getLogger("clamav_exporter")
    exporter_level = exporter.level
    yield
    for handler in root.handlers[:]:
        if isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter):
            root.removeHandler(handler)
    root.setLevel(original_level)
    exporter.setLevel(exporter_level)
    bind_process_context()


# ---------------------------------------------------------------------------
# Fake clamd served over real sockets
# ---------------------------------------------------------------------------


class _ClamdHandler(socketserver.BaseRequestHandler):
    def handle(self) -> None:
        data = b""
        while not data.endswith(b"\n"):
            chunk = self.request.recv(1024)
            if not chunk:
                break
            data += chunk
        self.server.received.append(data)  # type: ignore[attr-defined]
        reply = self.server.replies.get(data)  # type: ignore[attr-defined]
        if reply is not None:
            self.request.sendall(reply)


class _TCPClamd(socketserver.ThreadingTCPServer):
    daemon_threads = True
    allow_reuse_address = True


class _UnixClamd(socketserver.ThreadingUnixStreamServer):
    daemon_threads = True


@contextmanager
def _serving(server: socketserver.BaseServer, replies: dict[Command, bytes]) -> Iterator[None]:
    server.replies = {cmd.token: reply for cmd, reply in replies.items()}  # type: ignore[attr-defined]
    server.received = []  # type: ignore[attr-defined]
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield
    finally:
        server.shutdown()
        server.server_close()
        thread.join()


@pytest.fixture
def clamd_tcp() -> Generator[_TCPClamd]:
    """A fake clamd on 127.0.0.1 with an ephemeral port."""
    server = _TCPClamd(("127.0.0.1", 0), _ClamdHandler)
    with _serving(server, HEALTHY_REPLIES):
        yield server


@pytest.fixture
def clamd_unix() -> Generator[tuple[_UnixClamd, str]]:
    """A fake clamd on a UNIX socket; yields ``(server, socket_path)``."""
    # Short directory: AF_UNIX paths are limited to ~108 bytes.
    sock_dir = tempfile.mkdtemp(prefix="clamd")
    path = str(Path(sock_dir) / "clamd.sock")
    server = _UnixClamd(path, _ClamdHandler)
    try:
        with _serving(server, HEALTHY_REPLIES):
            yield server, path
    finally:
        shutil.rmtree(sock_dir, ignore_errors=True)
