"""CLI output formatters for schema browser tables.

Console output renders rich tables; JSON output emits one document per
command on stdout so it can be piped into other tools.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import Any

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from portal_schema.views import ColumnName, ViewTable

# Long cell lists are cut to this many entries in console output.
MAX_CONSOLE_VALUES = 10


def _truncate(values: Sequence[str], limit: int = MAX_CONSOLE_VALUES) -> str:
    if len(values) <= limit:
        return ", ".join(values)
    return ", ".join(values[:limit]) + f", … (+{len(values) - limit} more)"


def print_view_console(view: ViewTable, *, console: Console | None = None) -> None:
    """Render a view as a rich table on stdout."""
    console = console or Console()
    table = Table(title=f"{view.title} ({len(view.rows)})", show_lines=False, expand=False)
    for column in view.columns:
        table.add_column(column.value, overflow="fold")
    for row in view.rows:
        cells: list[str] = []
        for column in view.columns:
            match column:
                case ColumnName.VALID_VALUES:
                    cells.append(_truncate(row.valid_values))
                case ColumnName.CONDITIONAL_IF:
                    cells.append(_truncate(row.conditional_if))
                case ColumnName.MANIFEST_NAME:
                    cells.append(_truncate(row.manifest_names))
                case _:
                    cells.append(row.cell(column))
        table.add_row(*cells)
    console.print(table)


def view_to_json(view: ViewTable) -> dict[str, Any]:
    return {
        "view": view.view_id,
        "title": view.title,
        "columns": [column.value for column in view.columns],
        "rows": [row.to_dict() for row in view.rows],
    }


def print_json(payload: Mapping[str, Any]) -> None:
    typer.echo(json.dumps(payload, indent=2))


def format_error(
    title: str,
    message: str,
    hint: str | None = None,
    details: list[str] | None = None,
) -> None:
    """Display a formatted error with optional hint and details on stderr."""
    console = Console(stderr=True)

    content = Text()
    content.append(message, style="white")

    if details:
        content.append("\n\n")
        for detail in details:
            content.append(f"  • {detail}\n", style="dim")

    if hint:
        content.append("\n")
        content.append("Hint: ", style="yellow bold")
        content.append(hint, style="yellow")

    panel = Panel(
        content,
        title=f"[red bold]❌ {title}[/]",
        border_style="red",
        padding=(0, 1),
    )
    console.print(panel)
