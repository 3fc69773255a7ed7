"""clamd control commands and their wire tokens.

Commands are sent in clamd's newline-delimited form (``n<COMMAND>\\n``):
the daemon terminates each reply with a newline and closes the
connection after answering a single command.
"""

from __future__ import annotations

from enum import StrEnum


class Command(StrEnum):
    """Control commands polled on every collection pass."""

    LIVENESS_PROBE = "PING"
    STATS = "STATS"
    VERSION = "VERSION"

    @property
    def token(self) -> bytes:
        """The exact bytes written to the daemon for this command."""
        return f"n{self.value}\n".encode("ascii")


PONG_REPLY = b"PONG\n"
