"""Playbot CLI — command line interface."""

import click
from playbot import __version__
from .shared import console


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="playbot")
@click.pass_context
def cli(ctx):
    """Playbot — Rust Playground bot for Telegram"""
    if ctx.invoked_subcommand is None:
        _show_help()


def _show_help():
    """Show all available commands."""
    console.print(f"[bold]Playbot v{__version__}[/bold] — Rust Playground bot for Telegram\n")

    commands = [
        ("start", "Start the Telegram bot"),
        ("run TOOL FILE", "Run a snippet through a playground tool and print the reply"),
    ]
    for name, desc in commands:
        console.print(f"    [bold]playbot {name:16s}[/bold] {desc}")
    console.print()

    console.print("[dim]Run 'playbot <command> --help' for details on a specific command.[/dim]")


# Import all command modules (registers commands onto cli group)
from . import cmd_start  # noqa: E402, F401
from . import cmd_run  # noqa: E402, F401


@cli.command(name="help", hidden=True)
def help_cmd():
    """Show all available commands."""
    _show_help()
