"""Response rendering for the CLI layer.

This module is responsible for:

* Printing a one-line status summary for a :class:`~haile.response.Response`.
* Rendering response headers as a Rich table.
* Printing the body, pretty-printed when it is JSON.

All display-related logic lives here. No request building, no
transport handling.
"""

from __future__ import annotations

import json
from typing import Any

from haile.cli.console import console, escape
from haile.exceptions import DependencyMissingError
from haile.response import Response


def _import_rich_table() -> type[Any]:
    """Import rich table lazily for header rendering."""
    try:
        from rich.table import Table
    except ModuleNotFoundError as exc:
        raise DependencyMissingError("rich is not installed.", package="rich") from exc
    return Table


# ---------------------------------------------------------------------------
# Presentation helpers (pure transforms, no I/O)
# ---------------------------------------------------------------------------

def _format_size(size: int) -> str:
    """Render a byte count as ``"512 B"``, ``"1.5 KB"`` or ``"2.0 MB"``."""
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def _status_style(response: Response) -> str:
    if response.status_code is None:
        return "bold red"
    if response.success:
        return "bold green"
    if response.status_code < 400:
        return "bold yellow"
    return "bold red"


def _status_line(response: Response) -> str:
    """Build the single-line summary, e.g. ``"200 OK  http://host/v2/apps  (12 ms, 1.2 KB)"``."""
    if response.status_code is None:
        return f"ERROR  {escape(response.url)}"
    size = _format_size(len(response.content))
    return (
        f"{response}  {escape(response.url)}  "
        f"({response.elapsed_ms:.0f} ms, {size})"
    )


def _format_body(response: Response) -> str:
    """Pretty-print JSON bodies; return other bodies as text."""
    parsed = response.parsed_response
    if parsed is None:
        return ""
    if isinstance(parsed, (dict, list)):
        return json.dumps(parsed, indent=2, ensure_ascii=False)
    return str(parsed)


# ---------------------------------------------------------------------------
# Public rendering function
# ---------------------------------------------------------------------------

def render_response(response: Response, *, show_headers: bool = True) -> None:
    """Print *response* to the console.

    Raises
    ------
    DependencyMissingError
        If Rich is not installed and headers are requested.
    """
    style = _status_style(response)
    console.print(f"[{style}]{_status_line(response)}[/{style}]")

    if response.status_code is None:
        console.print(f"[red]{escape(response.error or '')}[/red]")
        return

    if show_headers and response.headers:
        table_class = _import_rich_table()
        table = table_class(
            show_header=True,
            header_style="bold magenta",
            border_style="dim",
        )
        table.add_column("Header", style="bold", min_width=16)
        table.add_column("Value")
        for name, value in sorted(response.headers.items()):
            table.add_row(name, value)
        console.print(table)

    body = _format_body(response)
    if body:
        # Body goes to stdout so it can be piped.
        print(body)

    if not response.success:
        console.print(f"[red]Error:[/red] {escape(response.error or '')}")
