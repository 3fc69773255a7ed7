"""Collection pass and the Prometheus collector built on it.

One pass is strictly sequential::

    START -> LIVENESS -> STATS -> VERSION -> DONE

Each step dials one command, parses the reply, and contributes the fields
that are present. A failed step only removes its own metrics; the pass
always runs to DONE and never retries.

INVARIANT: ``up`` is emitted only as 1. A scrape without ``up`` is the
signal that the daemon did not answer.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Protocol

from prometheus_client import GCCollector, PlatformCollector, ProcessCollector
from prometheus_client.core import GaugeMetricFamily
from prometheus_client.registry import Collector, CollectorRegistry

from clamav_exporter.domain.commands import Command
from clamav_exporter.domain.parser import parse_liveness, parse_stats, parse_version
from clamav_exporter.domain.replies import StatsSnapshot, VersionInfo

logger = logging.getLogger(__name__)


class Dialer(Protocol):
    """Anything that can send one clamd command and return the raw reply."""

    @property
    def target(self) -> str: ...

    def dial(self, command: Command) -> bytes: ...


@dataclass(frozen=True)
class MetricSpec:
    """Static description of one exported metric."""

    name: str
    documentation: str
    labels: tuple[str, ...] = ()


METRICS: tuple[MetricSpec, ...] = (
    MetricSpec("up", "Whether clamd answered PING with PONG (1 when up, absent otherwise)"),
    MetricSpec("threads_live", "Live clamd worker threads"),
    MetricSpec("threads_idle", "Idle clamd worker threads"),
    MetricSpec("threads_max", "Maximum clamd worker threads"),
    MetricSpec("queue_length", "Items waiting in the clamd queue"),
    MetricSpec("mem_heap", "clamd heap memory usage"),
    MetricSpec("mem_mmap", "clamd mmap memory usage"),
    MetricSpec("mem_used", "clamd used memory"),
    MetricSpec("pools_used_mb", "clamd memory pool usage in megabytes"),
    MetricSpec("pools_total_mb", "clamd memory pool total in megabytes"),
    MetricSpec(
        "build_info",
        "ClamAV engine and signature database versions",
        labels=("clamav_version", "database_version"),
    ),
)

# StatsSnapshot field -> metric name
STATS_METRICS: dict[str, str] = {
    "threads_live": "threads_live",
    "threads_idle": "threads_idle",
    "threads_max": "threads_max",
    "queue_length": "queue_length",
    "mem_heap": "mem_heap",
    "mem_mmap": "mem_mmap",
    "mem_used": "mem_used",
    "pools_used": "pools_used_mb",
    "pools_total": "pools_total_mb",
}


@dataclass(frozen=True)
class Observation:
    """One ``(metric, value, labels)`` sample handed to the metric sink."""

    name: str
    value: float
    labels: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class PassResult:
    """Everything one collection pass learned about the daemon."""

    up: bool
    stats: StatsSnapshot
    version: VersionInfo | None

    def observations(self) -> list[Observation]:
        """Translate present fields into observations; absent ones emit nothing."""
        batch: list[Observation] = []
        if self.up:
            batch.append(Observation("up", 1.0))
        for field_name, value in self.stats.present().items():
            batch.append(Observation(STATS_METRICS[field_name], float(value)))
        if self.version is not None:
            batch.append(
                Observation(
                    "build_info",
                    1.0,
                    {
                        "clamav_version": self.version.engine_version,
                        "database_version": self.version.database_version,
                    },
                )
            )
        return batch


def run_pass(client: Dialer) -> PassResult:
    """Run one LIVENESS -> STATS -> VERSION pass against *client*."""
    start = time.perf_counter()
    up = parse_liveness(client.dial(Command.LIVENESS_PROBE))
    if not up:
        logger.info("clamd did not answer PING")
    stats = parse_stats(client.dial(Command.STATS))
    version = parse_version(client.dial(Command.VERSION))
    logger.debug(
        "Collection pass finished in %.1f ms (up=%s, stats_fields=%d, version=%s)",
        (time.perf_counter() - start) * 1000,
        up,
        len(stats.present()),
        version is not None,
    )
    return PassResult(up=up, stats=stats, version=version)


def collect_observations(client: Dialer) -> list[Observation]:
    """Run one pass and return its observations as a single batch."""
    return run_pass(client).observations()


class ClamavCollector(Collector):
    """Custom ``prometheus_client`` collector polling clamd on every scrape.

    The metric table is fixed at construction; ``collect`` runs a fresh
    pass per scrape and shares no mutable state between scrapes.
    """

    def __init__(self, client: Dialer, *, namespace: str = "clamav") -> None:
        self._client = client
        self._namespace = namespace
        self._specs = {spec.name: spec for spec in METRICS}

    def _metric_name(self, name: str) -> str:
        return f"{self._namespace}_{name}" if self._namespace else name

    def _family(self, spec: MetricSpec) -> GaugeMetricFamily:
        return GaugeMetricFamily(
            self._metric_name(spec.name),
            spec.documentation,
            labels=list(spec.labels),
        )

    def describe(self) -> list[GaugeMetricFamily]:
        return [self._family(spec) for spec in self._specs.values()]

    def collect(self) -> Iterator[GaugeMetricFamily]:
        families: dict[str, GaugeMetricFamily] = {}
        for obs in collect_observations(self._client):
            spec = self._specs[obs.name]
            family = families.get(obs.name)
            if family is None:
                family = families[obs.name] = self._family(spec)
            family.add_metric([obs.labels[label] for label in spec.labels], obs.value)
        yield from families.values()


def build_registry(
    client: Dialer,
    *,
    namespace: str = "clamav",
    process_metrics: bool = True,
) -> CollectorRegistry:
    """Create a registry holding the clamd collector.

    With *process_metrics* the exporter's own process, platform and GC
    metrics are exposed alongside, as on the default registry.
    """
    registry = CollectorRegistry()
    if process_metrics:
        ProcessCollector(registry=registry)
        PlatformCollector(registry=registry)
        GCCollector(registry=registry)
    registry.register(ClamavCollector(client, namespace=namespace))
    return registry
