"""Start command."""

import click

from . import cli
from .shared import config_file_option, console, load_or_exit

_LEVELS = ["debug", "info", "warning", "error", "critical"]


@cli.command()
@config_file_option
@click.option(
    "--log-level", "-l",
    type=click.Choice(_LEVELS, case_sensitive=False),
    default="warning",
    show_default=True,
    help="Logging level",
)
def start(config_file, log_level):
    """Connect to IRC and relay matching messages to the webhook."""
    import asyncio
    from irchook.main import run, setup_logging

    setup_logging(log_level)
    settings = load_or_exit(config_file)
    console.print(f"[bold blue]Starting irc-hook as {settings.nick} on {settings.server}...[/bold blue]")
    try:
        asyncio.run(run(settings))
    except KeyboardInterrupt:
        console.print("[dim]Stopped.[/dim]")
