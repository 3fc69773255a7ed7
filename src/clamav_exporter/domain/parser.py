"""Tolerant parsing of clamd replies.

clamd answers ``STATS`` with free-form text: header lines, one line per
busy or idle worker, then a memory summary. Field groups appear in no
guaranteed order and may be interleaved with unrelated lines, so every
group is searched for independently instead of being read by position.

A group that does not match leaves its fields absent (``None``). Nothing
in this module raises on malformed input; a captured substring that
still fails numeric conversion is logged and only that field is dropped.

Example ``STATS`` reply::

    POOLS: 1

    STATE: VALID PRIMARY
    THREADS: live 10  idle 2 max 10 idle-timeout 30
    QUEUE: 0 items
        STATS 0.000276
        IDLE 0.013437

    MEMSTATS: heap N/A mmap N/A used N/A free N/A releasable N/A pools 1 ...
    END
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from typing import TypeVar

from clamav_exporter.domain.commands import PONG_REPLY
from clamav_exporter.domain.replies import StatsSnapshot, VersionInfo

logger = logging.getLogger(__name__)

T = TypeVar("T", int, float)

PLACEHOLDER = "N/A"

THREADS_RE = re.compile(r"THREADS: live (\d+)  idle (\d+) max (\d+)\b")
QUEUE_RE = re.compile(r"QUEUE: (\d+) items")

# <V> is either the N/A placeholder or a number; builds with mallinfo
# support print megabytes with an ``M`` suffix.
_MEM_VALUE = r"(N/A|\d+(?:\.\d+)?)M?"
MEMSTATS_RE = re.compile(
    rf"MEMSTATS: heap {_MEM_VALUE} mmap {_MEM_VALUE} used {_MEM_VALUE}"
    rf" free {_MEM_VALUE} releasable {_MEM_VALUE} pools (\d+)"
    r" pools_used ([0-9.]+)M pools_total ([0-9.]+)M"
)

VERSION_RE = re.compile(r"ClamAV\s+([0-9.]+)/([0-9.]+)")


def _decode(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace")


def _convert(field: str, text: str, cast: Callable[[str], T]) -> T | None:
    """Convert *text* with *cast*, or log and return None."""
    try:
        return cast(text)
    except ValueError:
        logger.warning("Could not parse %s value %r", field, text)
        return None


def _optional_mem(field: str, text: str) -> float | None:
    if text == PLACEHOLDER:
        return None
    return _convert(field, text, float)


def parse_liveness(raw: bytes) -> bool:
    """Return True iff *raw* is exactly the ``PONG`` acknowledgement."""
    return raw == PONG_REPLY


def parse_stats(raw: bytes) -> StatsSnapshot:
    """Extract a :class:`StatsSnapshot` from a ``STATS`` reply.

    Always returns a snapshot; sections that are missing from *raw* (or
    all of them, for an empty or garbage reply) are left absent.
    """
    text = _decode(raw)
    fields: dict[str, int | float | None] = {}

    threads = THREADS_RE.search(text)
    if threads:
        fields["threads_live"] = _convert("threads_live", threads.group(1), int)
        fields["threads_idle"] = _convert("threads_idle", threads.group(2), int)
        fields["threads_max"] = _convert("threads_max", threads.group(3), int)
    else:
        logger.debug("No THREADS line in STATS reply")

    queue = QUEUE_RE.search(text)
    if queue:
        fields["queue_length"] = _convert("queue_length", queue.group(1), int)
    else:
        logger.debug("No QUEUE line in STATS reply")

    mem = MEMSTATS_RE.search(text)
    if mem:
        fields["mem_heap"] = _optional_mem("mem_heap", mem.group(1))
        fields["mem_mmap"] = _optional_mem("mem_mmap", mem.group(2))
        fields["mem_used"] = _optional_mem("mem_used", mem.group(3))
        fields["pools_used"] = _convert("pools_used", mem.group(7), float)
        fields["pools_total"] = _convert("pools_total", mem.group(8), float)
    else:
        logger.debug("No MEMSTATS line in STATS reply")

    return StatsSnapshot(**fields)


def parse_version(raw: bytes) -> VersionInfo | None:
    """Extract engine and signature database versions from a ``VERSION`` reply.

    ``ClamAV 0.102.4/26168/Wed Jun 17 08:24:58 2020`` yields
    ``VersionInfo(engine_version="0.102.4", database_version="26168")``.
    Returns None when the reply does not have that shape.
    """
    match = VERSION_RE.search(_decode(raw))
    if match is None:
        logger.debug("VERSION reply did not match: %r", raw[:120])
        return None
    return VersionInfo(engine_version=match.group(1), database_version=match.group(2))
