"""
Prometheus integration for nut-exporter.

NUTMetricsCollector is a custom prometheus_client collector: each scrape
runs one collection pass against the configured NUT servers and returns
the observations as gauge families.
"""

import asyncio
import logging
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence

from prometheus_client.core import GaugeMetricFamily
from prometheus_client.registry import Collector

from .config import settings
from .nut.collector import CollectionReport, NUTCollector, describe_all
from .nut.models import LABEL_NAMES, MetricDescriptor, Observation

logger = logging.getLogger(__name__)


class ObservationBuffer:
    """A metrics sink that keeps observations in memory, in arrival order."""

    def __init__(self) -> None:
        self.observations: List[Observation] = []

    def observe(self, name: str, value: float, labels: Mapping[str, str], kind: str = "gauge") -> None:
        self.observations.append(Observation(name=name, value=value, labels=dict(labels), kind=kind))

    def __len__(self) -> int:
        return len(self.observations)

    def __iter__(self) -> Iterator[Observation]:
        return iter(self.observations)


def build_name(namespace: str, name: str) -> str:
    return f"{namespace}_{name}" if namespace else name


class NUTMetricsCollector(Collector):
    """
    Exposes UPS variables from NUT servers as Prometheus gauges.
    """

    def __init__(
        self,
        hosts: Sequence[str],
        timeout: float = settings.TIMEOUT,
        namespace: str = settings.NAMESPACE,
        collector: Optional[NUTCollector] = None,
    ):
        """
        Args:
            hosts: NUT server addresses to poll on every scrape.
            timeout: Deadline in seconds for each NUT connection.
            namespace: Prefix for all metric names.
            collector: Collector to use instead of a new NUTCollector.
        """
        self.hosts = list(hosts)
        self.namespace = namespace
        self.collector = collector or NUTCollector(timeout=timeout)
        self.descriptors = {d.name: d for d in describe_all()}
        self.last_report: Optional[CollectionReport] = None

    def describe(self) -> Iterable[GaugeMetricFamily]:
        """Return the metric families without polling, for registration."""
        return [self._family(d) for d in sorted(self.descriptors.values(), key=lambda d: d.name)]

    def collect(self) -> Iterable[GaugeMetricFamily]:
        buffer = ObservationBuffer()
        self.last_report = asyncio.run(self.collector.collect(self.hosts, buffer))
        logger.debug(f"Scrape produced {len(buffer)} observations: {self.last_report}")

        families: Dict[str, GaugeMetricFamily] = {}
        for observation in buffer:
            descriptor = self.descriptors.get(observation.name)
            if descriptor is None:
                logger.warning(f"Dropping observation for unregistered metric '{observation.name}'")
                continue
            family = families.get(observation.name)
            if family is None:
                family = families[observation.name] = self._family(descriptor)
            family.add_metric([observation.labels[label] for label in LABEL_NAMES], observation.value)
        return list(families.values())

    def _family(self, descriptor: MetricDescriptor) -> GaugeMetricFamily:
        return GaugeMetricFamily(
            build_name(self.namespace, descriptor.name),
            descriptor.description,
            labels=LABEL_NAMES,
        )
