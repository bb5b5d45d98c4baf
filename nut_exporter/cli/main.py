import click
import logging

from nut_exporter.utils.logging import setup_logging

from .poll import metrics, poll
from .serve import serve


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enables verbose mode.')
@click.option('--quiet', '-q', is_flag=True, help='Enables quiet mode.')
@click.pass_context
def app(ctx, verbose, quiet):
    """
    Prometheus exporter for Network UPS Tools.
    """
    ctx.ensure_object(dict)
    ctx.obj['VERBOSE'] = verbose
    ctx.obj['QUIET'] = quiet

    if verbose:
        setup_logging(force=True, level=logging.DEBUG)
    elif quiet:
        setup_logging(force=True, level=logging.ERROR)
    else:
        setup_logging()

# Add subcommands
app.add_command(serve, name='serve')
app.add_command(poll, name='poll')
app.add_command(metrics, name='metrics')

if __name__ == '__main__':
    app()
