"""Run a snippet through a playground tool from the terminal."""

import asyncio
import sys

import click

from . import cli
from .shared import console


@cli.command(name="run")
@click.argument("tool", type=click.Choice(["play", "eval", "miri", "expand", "clippy", "fmt", "microbench"]))
@click.argument("source", type=click.File("r"), default="-")
@click.option("--channel", help="stable, beta or nightly")
@click.option("--mode", help="debug or release")
@click.option("--edition", help="2015 or 2018")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def run_cmd(tool, source, channel, mode, edition, debug):
    """Run SOURCE (default: stdin) through TOOL and print the reply the bot would send."""
    from playbot.commands import CommandArgs, PlaygroundCommands
    from playbot.communication.errors import classify_error
    from playbot.config import load_settings
    from playbot.main import build_services, setup_logging

    setup_logging(debug=debug)

    params = {
        key: value
        for key, value in (("channel", channel), ("mode", mode), ("edition", edition))
        if value is not None
    }

    async def reply(text: str):
        console.print(text, markup=False, highlight=False)

    async def send(result):
        console.print(result.to_text(), markup=False, highlight=False)

    # an empty source asks for the tool's help, like a bare chat command
    code = source.read()
    args = CommandArgs(
        body="", reply=reply, send=send, params=params, code=code if code.strip() else None,
    )
    commands = PlaygroundCommands(build_services(load_settings()))

    try:
        asyncio.run(commands.handlers()[tool](args))
    except Exception as e:
        console.print(f"[red]{classify_error(e)}[/red]")
        sys.exit(1)
