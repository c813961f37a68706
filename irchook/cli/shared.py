"""Shared utilities for irchook CLI commands."""

import click
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

console = Console()

config_file_option = click.option(
    "--config-file", "-c",
    envvar="IRC_HOOK_CONFIG_FILE",
    type=click.Path(exists=True, dir_okay=False),
    help="TOML config file (env: IRC_HOOK_CONFIG_FILE)",
)


def load_or_exit(config_file):
    """Load settings, printing validation errors and exiting on failure."""
    from irchook.config import load_settings

    try:
        return load_settings(config_file)
    except ValidationError as e:
        console.print("[red]Invalid configuration:[/red]")
        for err in e.errors():
            loc = ".".join(str(p) for p in err["loc"]) or "config"
            console.print(f"  [bold]{escape(loc)}[/bold]: {escape(err['msg'])}")
        raise SystemExit(1)
