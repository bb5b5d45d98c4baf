import logging
import threading
from typing import Optional, Tuple

import click
from prometheus_client import REGISTRY, start_http_server

from nut_exporter.config import settings
from nut_exporter.metrics import NUTMetricsCollector

from .utils import console, host_option, resolve_hosts, timeout_option

logger = logging.getLogger(__name__)


def parse_listen_address(address: str) -> Tuple[str, int]:
    """Split '[addr]:port' into an address and port; an empty address listens on all interfaces."""
    host, sep, port = address.rpartition(":")
    if not sep or not port.isdigit():
        raise click.BadParameter(f"expected [address]:port, got {address!r}")
    host = host.strip("[]") or "0.0.0.0"
    return host, int(port)


@click.command()
@host_option
@timeout_option
@click.option('--listen-address', default=None, help='Address to serve metrics on. Defaults to NUT_EXPORTER_LISTEN_ADDRESS (:9230).')
@click.option('--namespace', default=None, help='Metric name prefix. Defaults to NUT_EXPORTER_NAMESPACE (nut).')
def serve(hosts: tuple, timeout: float, listen_address: Optional[str], namespace: Optional[str]) -> None:
    """Serves UPS metrics for Prometheus until interrupted."""
    addr, port = parse_listen_address(listen_address or settings.LISTEN_ADDRESS)
    targets = resolve_hosts(hosts)

    collector = NUTMetricsCollector(
        targets,
        timeout=timeout,
        namespace=settings.NAMESPACE if namespace is None else namespace,
    )
    REGISTRY.register(collector)
    start_http_server(port, addr=addr)
    logger.info(f"Serving metrics on {addr}:{port} for {len(targets)} NUT server(s)")
    console.print(f"[bold blue]Serving metrics on {addr}:{port}[/bold blue] for {', '.join(targets)}")

    try:
        threading.Event().wait()
    except KeyboardInterrupt:
        console.print("\n[yellow]Stopped[/yellow]")
