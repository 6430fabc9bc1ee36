"""Start command."""

import asyncio
import click

from . import cli
from .shared import console


@cli.command()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def start(debug):
    """Start the Telegram bot."""
    from playbot.main import run, setup_logging
    setup_logging(debug=debug)

    console.print("[bold blue]Starting Playbot...[/bold blue]")
    asyncio.run(run())
