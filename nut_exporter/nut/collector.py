"""
Collection pass over NUT servers.

This module contains the NUTCollector class, which connects to each
configured NUT server, reads the variables of every UPS it serves and
pushes the translated observations to a metrics sink.
"""

import logging
from dataclasses import dataclass
from typing import FrozenSet, Iterable, Mapping, Protocol

from ..config import settings
from .client import NUTClient, NUTError, NUTProtocolError
from .models import MetricDescriptor
from .registry import DESCRIPTORS
from .translate import translate

logger = logging.getLogger(__name__)


class MetricSink(Protocol):
    """
    Protocol for the consumer of observations.
    """
    def observe(self, name: str, value: float, labels: Mapping[str, str], kind: str = "gauge") -> None:
        """
        Records one labeled value for the metric called ``name``.
        """
        ...


@dataclass
class CollectionReport:
    """Outcome counters of one collection pass."""

    hosts_polled: int = 0
    hosts_failed: int = 0
    ups_polled: int = 0
    ups_failed: int = 0

    @property
    def ok(self) -> bool:
        return self.hosts_failed < self.hosts_polled or self.hosts_polled == 0


def describe_all() -> FrozenSet[MetricDescriptor]:
    """Return the descriptors of every metric the collector can emit."""
    return frozenset(DESCRIPTORS.values())


class NUTCollector:
    """
    Polls NUT servers and emits one observation per registered variable and UPS.

    A failure on one host or one UPS is logged and skipped; it never aborts
    the rest of the pass.
    """

    def __init__(self, timeout: float = settings.TIMEOUT):
        """
        Initialize the collector.

        Args:
            timeout: Deadline in seconds for each NUT connection.
        """
        self.timeout = timeout

    async def collect(self, hosts: Iterable[str], sink: MetricSink) -> CollectionReport:
        """
        Run one collection pass.

        Args:
            hosts: NUT server addresses, polled one after the other.
            sink: Receives the observations.

        Returns:
            Counters describing what was polled and what failed.
        """
        report = CollectionReport()
        for host in hosts:
            report.hosts_polled += 1
            client = NUTClient(host, timeout=self.timeout)
            try:
                await client.open()
            except NUTError as e:
                logger.error(f"Error connecting to NUT server {host}: {e}")
                report.hosts_failed += 1
                continue

            try:
                await self._collect_host(client, host, sink, report)
            finally:
                await client.close()
        return report

    async def _collect_host(self, client: NUTClient, host: str, sink: MetricSink, report: CollectionReport) -> None:
        try:
            ups_names = await client.list_ups()
        except NUTError as e:
            logger.error(f"Error getting list of UPSs from {host}: {e}")
            report.hosts_failed += 1
            return

        for ups_name in ups_names:
            report.ups_polled += 1
            try:
                variables = await client.list_vars(ups_name)
            except NUTProtocolError as e:
                logger.error(f"Error reading UPS '{ups_name}' on {host}: {e}")
                report.ups_failed += 1
                continue
            except NUTError as e:
                logger.error(f"Connection to {host} lost while reading UPS '{ups_name}': {e}")
                report.ups_failed += 1
                return

            observations = translate(variables)
            for observation in observations:
                sink.observe(observation.name, observation.value, observation.labels, kind=observation.kind)
            logger.debug(f"Collected {len(observations)} metrics for UPS '{ups_name}' on {host}")
