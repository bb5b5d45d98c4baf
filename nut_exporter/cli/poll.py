import json
import sys

import click
from rich.table import Table

from nut_exporter.metrics import ObservationBuffer
from nut_exporter.nut.collector import NUTCollector, describe_all

from .utils import console, handle_async_command, host_option, resolve_hosts, timeout_option


@click.command()
@host_option
@timeout_option
@click.option('--json', 'json_output', is_flag=True, help='Output in JSON format.')
@handle_async_command
async def poll(hosts: tuple, timeout: float, json_output: bool) -> None:
    """Runs one collection pass and prints the observations."""
    targets = resolve_hosts(hosts)
    buffer = ObservationBuffer()
    report = await NUTCollector(timeout=timeout).collect(targets, buffer)

    if json_output:
        click.echo(json.dumps({
            "observations": [o.model_dump() for o in buffer],
            "report": {
                "hosts_polled": report.hosts_polled,
                "hosts_failed": report.hosts_failed,
                "ups_polled": report.ups_polled,
                "ups_failed": report.ups_failed,
            },
        }, indent=2))
    else:
        table = Table(title=f"NUT observations ({', '.join(targets)})")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="green", justify="right")
        table.add_column("Model", style="magenta")
        table.add_column("Serial", style="yellow")
        for observation in buffer:
            table.add_row(
                observation.name,
                f"{observation.value:g}",
                observation.labels["model"],
                observation.labels["serial"],
            )
        console.print(table)
        console.print(
            f"Hosts: {report.hosts_polled} polled, {report.hosts_failed} failed; "
            f"UPSs: {report.ups_polled} polled, {report.ups_failed} failed"
        )

    if not report.ok:
        sys.exit(1)


@click.command()
@click.option('--json', 'json_output', is_flag=True, help='Output in JSON format.')
def metrics(json_output: bool) -> None:
    """Lists the metrics the exporter can emit."""
    descriptors = sorted(describe_all(), key=lambda d: d.key)
    if json_output:
        click.echo(json.dumps([d.model_dump() for d in descriptors], indent=2))
        return

    table = Table(title="Exported metrics")
    table.add_column("Variable", style="cyan")
    table.add_column("Metric", style="magenta")
    table.add_column("Description")
    for descriptor in descriptors:
        table.add_row(descriptor.key, descriptor.name, descriptor.description)
    console.print(table)
