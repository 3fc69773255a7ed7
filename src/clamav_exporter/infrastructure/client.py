"""clamd socket client.

One connection per command: connect, write the command token, read until
the daemon closes the stream. The configured timeout is a deadline for the
whole exchange, so a daemon trickling bytes cannot stall a scrape.

Transport failures never propagate. A refused connection, a reset, or a
timeout is logged and reported as an empty reply, which the parser treats
as "no data" for that command.
"""

from __future__ import annotations

import logging
import socket
import time
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from clamav_exporter.config.models import ClamdConfig
    from clamav_exporter.domain.commands import Command

logger = logging.getLogger(__name__)

RECV_BUFFER_SIZE = 4096
MAX_REPLY_BYTES = 1024 * 1024


def _remaining(deadline: float) -> float:
    """Seconds left before *deadline*; raises TimeoutError once it has passed."""
    left = deadline - time.monotonic()
    if left <= 0:
        raise TimeoutError("deadline exceeded")
    return left


class ClamdClient:
    """Sends single control commands to clamd over TCP or a UNIX socket.

    Holds only immutable connection parameters, so one instance can be
    shared by concurrent collection passes.
    """

    def __init__(
        self,
        address: str = "localhost",
        port: int = 3310,
        *,
        network: str = "tcp",
        timeout: float = 5.0,
    ) -> None:
        if network not in ("tcp", "unix"):
            msg = f"Unsupported network {network!r}; expected 'tcp' or 'unix'"
            raise ValueError(msg)
        self.address = address
        self.port = port
        self.network = network
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: ClamdConfig) -> ClamdClient:
        return cls(
            config.address,
            config.port,
            network=config.network,
            timeout=config.timeout,
        )

    @property
    def target(self) -> str:
        """Human-readable daemon address, used in log events."""
        if self.network == "unix":
            return f"unix://{self.address}"
        return f"tcp://{self.address}:{self.port}"

    def _connect(self) -> socket.socket:
        if self.network == "unix":
            sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
            sock.settimeout(self.timeout)
            try:
                sock.connect(self.address)
            except OSError:
                sock.close()
                raise
            return sock
        return socket.create_connection((self.address, self.port), timeout=self.timeout)

    def dial(self, command: Command) -> bytes:
        """Send *command* and return the full reply, or ``b""`` on failure."""
        deadline = time.monotonic() + self.timeout
        try:
            with self._connect() as sock:
                sock.settimeout(_remaining(deadline))
                sock.sendall(command.token)
                chunks: list[bytes] = []
                received = 0
                while received < MAX_REPLY_BYTES:
                    sock.settimeout(_remaining(deadline))
                    data = sock.recv(RECV_BUFFER_SIZE)
                    if not data:
                        break
                    chunks.append(data)
                    received += len(data)
                else:
                    logger.warning(
                        "Reply to %s from %s exceeded %d bytes; truncated",
                        command.value,
                        self.target,
                        MAX_REPLY_BYTES,
                    )
        except OSError as exc:
            logger.warning("%s to %s failed: %s", command.value, self.target, exc)
            return b""

        reply = b"".join(chunks)[:MAX_REPLY_BYTES]
        logger.debug("%s reply from %s: %d bytes", command.value, self.target, len(reply))
        return reply
