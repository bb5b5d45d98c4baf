import asyncio
import functools
import sys
from typing import Optional

import click
from rich.console import Console

from nut_exporter.config import settings
from nut_exporter.utils.timeparse import parse_duration

console = Console()


def handle_async_command(async_func):
    """Decorator to handle async CLI commands."""
    @functools.wraps(async_func)
    def wrapper(*args, **kwargs):
        try:
            return asyncio.run(async_func(*args, **kwargs))
        except KeyboardInterrupt:
            console.print("\n[yellow]Operation cancelled by user[/yellow]")
            sys.exit(1)
        except Exception as e:
            console.print(f"[red]Error: {e}[/red]")
            sys.exit(1)
    return wrapper


def parse_timeout(ctx: click.Context, param: click.Parameter, value: Optional[str]) -> float:
    """Click callback turning '--timeout 15s' into seconds, defaulting to the configured timeout."""
    if value is None:
        return settings.TIMEOUT
    try:
        return parse_duration(value)
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


def resolve_hosts(hosts: tuple) -> list:
    """Return the hosts given on the command line, or the configured ones."""
    return list(hosts) or list(settings.HOSTS)


host_option = click.option(
    '--host', 'hosts', multiple=True,
    help='NUT server as host[:port]; repeat for several servers. Defaults to NUT_EXPORTER_HOSTS.',
)
timeout_option = click.option(
    '--timeout', callback=parse_timeout,
    help='Deadline per NUT connection, e.g. 10s or 500ms. Defaults to NUT_EXPORTER_TIMEOUT.',
)
