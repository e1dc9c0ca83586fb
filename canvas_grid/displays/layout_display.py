"""
Layout Display Module

Rich-formatted display for grid layouts and window rectangles.
"""

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from typing import Optional

from ..models.grid import Rect
from ..notation import format_cell
from ..services.reporter import LayoutSummary


def display_layout(summary: LayoutSummary, grid_text: str, console: Console = None) -> None:
    """
    Display a grid layout as an ASCII grid plus assignment tables.

    Args:
        summary: Layout summary from the reporter
        grid_text: ASCII rendering of the grid
        console: Rich console (optional, creates new if not provided)
    """
    if console is None:
        console = Console()

    dims = summary.dimensions
    monitor = summary.monitor
    console.print(
        f"\n[bold cyan]Grid {dims.rows}x{dims.columns}[/bold cyan] "
        f"[dim](cells {dims.cell_width}x{dims.cell_height}px, "
        f"monitor {monitor.index} at {monitor.width}x{monitor.height}+{monitor.x}+{monitor.y})[/dim]\n"
    )
    console.print(Panel(Text(grid_text), title="Layout", expand=False))
    console.print()

    if summary.assignments:
        table = Table(title="Assignments")
        table.add_column("Window", style="cyan")
        table.add_column("Position")
        table.add_column("Span", style="dim")
        table.add_column("Canvas")

        for info in summary.assignments:
            span = info.cell_span
            table.add_row(
                info.window_id,
                info.position,
                f"{span.row_span}x{span.column_span}",
                info.canvas_kind or "[dim](none)[/dim]",
            )
        console.print(table)
    else:
        console.print("[dim]No windows assigned[/dim]")

    console.print()
    if summary.available_cells:
        free = ", ".join(format_cell(c.row, c.column) for c in summary.available_cells)
        console.print(f"[green]Free cells:[/green] {free}")
    else:
        console.print("[yellow]Grid is full[/yellow]")


def display_rect(window_id: str, position: Optional[str], rect: Rect, console: Console = None) -> None:
    """
    Display the pixel rectangle resolved for one window.

    Args:
        window_id: Window identifier
        position: Position notation of the window's span
        rect: Resolved rectangle
        console: Rich console
    """
    if console is None:
        console = Console()

    table = Table(title=f"Window {window_id}", show_header=False)
    table.add_column("Property", style="dim")
    table.add_column("Value")

    table.add_row("Position", position or "[dim](unassigned)[/dim]")
    table.add_row("X", str(rect.x))
    table.add_row("Y", str(rect.y))
    table.add_row("Width", str(rect.width))
    table.add_row("Height", str(rect.height))

    console.print(table)


def format_layout_json(summary: LayoutSummary) -> str:
    """Format a layout summary as a JSON string."""
    return summary.model_dump_json(indent=2)
