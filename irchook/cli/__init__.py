"""irchook CLI — command line interface."""

import click
from irchook import __version__
from .shared import console


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="irc-hook")
@click.pass_context
def cli(ctx):
    """Joins IRC channels and POSTs webhooks based on regex matching."""
    if ctx.invoked_subcommand is None:
        _show_help()


def _show_help():
    """Show all available commands."""
    console.print(f"[bold]irc-hook v{__version__}[/bold] — IRC to webhook relay\n")

    commands = [
        ("start", "Connect to IRC and relay matching messages"),
        ("check", "Validate configuration and show effective settings"),
        ("match", "Dry run: show what raw lines would dispatch"),
    ]
    for name, desc in commands:
        console.print(f"    [bold]irc-hook {name:8s}[/bold] {desc}")
    console.print()
    console.print("[dim]Run 'irc-hook <command> --help' for details on a specific command.[/dim]")


# Import all command modules (registers commands onto cli group)
from . import cmd_start  # noqa: E402, F401
from . import cmd_check  # noqa: E402, F401
