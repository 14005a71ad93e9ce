"""Console rendering helpers for the drive-up CLI."""
from __future__ import annotations

from typing import Any, Dict, Iterable

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .orchestrator.models import BatchResult
from .utils.formatting import format_file_size

console = Console()


def render_configuration_summary(config: Dict[str, Any]) -> None:
    """Render startup configuration summary."""
    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold cyan", justify="right")
    table.add_column(style="white")

    for key, value in config.items():
        rendered = "-" if value is None else escape(str(value))
        table.add_row(key, rendered)

    panel = Panel(
        table,
        title="[bold green]drive-up[/bold green]",
        subtitle="[dim]driveuploader CLI[/dim]",
        border_style="blue",
    )
    console.print(panel)


def render_models(models: Iterable[str]) -> None:
    models = list(models)
    if not models:
        console.print("[yellow]No model folders found[/yellow]")
        return
    for name in models:
        console.print(f"  [cyan]•[/cyan] {escape(name)}")


def render_batch_result(result: BatchResult) -> None:
    """Per-file outcome table followed by the batch summary line."""
    table = Table(title=f"Upload to {escape(result.folder_id)}", show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("File", style="bold")
    table.add_column("Size", justify="right")
    table.add_column("Status")
    table.add_column("Remote id / error", overflow="fold")

    for index, outcome in enumerate(result.results, start=1):
        # names, ids and errors come from clients and the remote store, never markup
        name = escape(outcome.file_name)
        if outcome.renamed:
            name = f"{escape(outcome.original_name)} → {name}"
        if outcome.success:
            status = "[green]uploaded[/green]"
            detail = escape(outcome.file_id or "-")
        else:
            status = "[red]failed[/red]"
            detail = escape(outcome.error or "-")
        table.add_row(str(index), name, format_file_size(outcome.size), status, detail)

    console.print(table)
    style = "bold green" if result.success else "bold red"
    console.print(f"[{style}]{escape(result.message)}[/{style}]")
