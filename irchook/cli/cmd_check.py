"""Config check and dry-run match commands."""

import sys

import click
from rich.markup import escape
from rich.table import Table

from . import cli
from .shared import config_file_option, console, load_or_exit


@cli.command()
@config_file_option
def check(config_file):
    """Validate configuration and show effective settings."""
    from irchook.errors import HookError
    from irchook.matching import MatchEngine

    settings = load_or_exit(config_file)
    try:
        MatchEngine.from_settings(settings)
    except (HookError, ValueError) as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)

    table = Table(title="irc-hook configuration", show_header=False, padding=(0, 2))
    table.add_column("Key", style="bold")
    table.add_column("Value")

    table.add_row("Server", f"{settings.server}:{settings.port} (tls={settings.use_tls})")
    table.add_row("Nick", settings.nick)
    table.add_row("Password", "********" if settings.password else "[dim]not set[/dim]")
    table.add_row("Channels", escape(", ".join(settings.channels)) or "[dim]none[/dim]")
    table.add_row("Search pattern", escape(settings.search_pattern))
    if settings.multi_line:
        table.add_row("Mode", f"multi-line (limit {settings.line_limit})")
        table.add_row("Init pattern", escape(settings.line_init_pattern))
        table.add_row("Conclude pattern", escape(settings.line_conclude_pattern or "") or "[dim]none[/dim]")
    else:
        table.add_row("Mode", "single-line")
    table.add_row("Webhook", settings.webhook_url)
    for name, tmpl in settings.headers.items():
        table.add_row(f"Header {escape(name)}", escape(tmpl))
    table.add_row("Body template", escape(settings.body_template))

    console.print(table)
    console.print("[green]✓ Configuration OK[/green]")


@cli.command()
@config_file_option
@click.argument("lines", nargs=-1)
def match(config_file, lines):
    """Dry run: feed raw IRC LINES (or stdin) through the matcher without sending.

    Multi-line buffering carries across lines in the order given.
    """
    from irchook.dispatch import DispatchTarget
    from irchook.extract import extract_content
    from irchook.matching import MatchEngine

    settings = load_or_exit(config_file)
    engine = MatchEngine.from_settings(settings)
    target = DispatchTarget.from_settings(settings)

    if not lines:
        lines = [line for line in sys.stdin.read().splitlines() if line]

    total = 0
    for raw in lines:
        content = extract_content(raw)
        if content is None:
            console.print(f"[dim]no payload: {escape(raw)}[/dim]")
            continue
        for groups in engine.classify(content):
            total += 1
            body, headers = target.render(groups)
            console.print(f"[bold]match {total}:[/bold] {escape(repr(groups))}")
            for name, value in headers.items():
                console.print(f"  {escape(name)}: {escape(value)}")
            console.print(f"  body: {body}", markup=False, highlight=False)

    if engine.accumulating:
        console.print(f"[yellow]{len(engine.buffer)} line(s) still buffered, waiting for conclusion[/yellow]")
    console.print(f"{total} request(s) would be sent.")
