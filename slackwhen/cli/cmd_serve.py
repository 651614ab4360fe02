"""Serve command."""

import click

from . import cli
from .shared import console


@cli.command()
@click.option("--host", default=None, help="Bind host (default from SLACKWHEN_HOST)")
@click.option("--port", type=int, default=None, help="Port (default from SLACKWHEN_PORT)")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def serve(host, port, debug):
    """Start the slackwhen HTTP API."""
    from slackwhen.config import load_settings
    from slackwhen.main import run

    settings = load_settings()
    if host:
        settings.host = host
    if port:
        settings.port = port
    if debug:
        settings.debug = True

    console.print(f"[bold blue]Starting slackwhen on {settings.host}:{settings.port}...[/bold blue]")
    run(settings)
