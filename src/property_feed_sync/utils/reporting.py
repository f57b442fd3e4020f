"""
Terminal report of a sync run.

Renders SyncResults with rich: a panel holding the outcome counts, followed
by the message list (debug lines dimmed, errors in red).

Author: Leonardo Pacciani-Mori
License: MIT
"""

from typing import Optional

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from property_feed_sync.sync.results import SyncResults


def _message_style(message: str) -> str:
    if message.startswith("Error"):
        return "red"
    if message.startswith("Debug") or message.startswith("Duplicate Filter"):
        return "dim"
    if message.startswith("Successfully"):
        return "green"
    return "yellow"


def build_summary_table(results: SyncResults) -> Table:
    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 1))
    table.add_column("Outcome", style="bold", width=12)
    table.add_column("Items", justify="right", width=8)

    table.add_row("[green]Synced[/green]", str(results.success))
    table.add_row("[yellow]Skipped[/yellow]", str(results.skipped))
    table.add_row("[red]Errors[/red]", str(results.error))
    table.add_row("Total", str(results.total))
    return table


def build_report(results: SyncResults, title: str = "Property Feed Sync") -> Panel:
    """
    Build the rich panel describing a sync run.

    Args:
        results: The results of the run.
        title: Panel title.

    Returns:
        Panel: The renderable report.
    """
    lines = [Text(message, style=_message_style(message)) for message in results.messages]
    if results.suppressed_messages:
        lines.append(Text(f"... {results.suppressed_messages} more messages not shown", style="dim"))

    if results.error:
        border_style = "red"
    elif results.success:
        border_style = "green"
    else:
        border_style = "yellow"

    return Panel(
        Group(build_summary_table(results), Text(""), *lines),
        title=f"[bold]{title}[/bold]",
        border_style=border_style,
    )


def print_report(results: SyncResults, console: Optional[Console] = None) -> None:
    """Print the report of a sync run to the console."""
    console = console or Console()
    console.print(build_report(results))
