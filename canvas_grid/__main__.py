"""
Canvas Grid CLI

Main entry point for grid layout commands. Every command operates on the
persisted canvas session (CANVAS_SESSION_DIR/canvas-session.json).

Usage:
    canvas-grid init [--rows N] [--columns N] [--gap PX] [--margin PX] [--desktop N]
    canvas-grid assign WINDOW POSITION
    canvas-grid auto WINDOW [--rows N] [--columns N]
    canvas-grid remove WINDOW
    canvas-grid swap WINDOW_A WINDOW_B
    canvas-grid find [--rows N] [--columns N]
    canvas-grid show
    canvas-grid layout [--json]
    canvas-grid rect WINDOW
    canvas-grid reset
"""

import functools
import logging
import sys
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape

from .config import GridSettings, parse_work_area
from .displays import layout_display
from .errors import GridError
from .logging_config import log_timing, setup_logging
from .models.grid import GridConfig
from .notation import format_position
from .session import GridSession, SessionStore, StaticWindowHost

logger = logging.getLogger(__name__)

console = Console()


class CliContext:
    """Objects shared by all commands."""

    def __init__(self, settings: GridSettings, work_area: Optional[str] = None):
        self.settings = settings
        area = parse_work_area(work_area) if work_area else settings.default_work_area()
        self.host = StaticWindowHost(area)
        self.session = GridSession(SessionStore(settings.session_file), self.host, settings)


def handle_errors(func):
    """Print GridErrors in red and exit 1."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except GridError as e:
            console.print(f"[red]Error: {escape(e.message)}[/red]")
            if e.suggestion:
                console.print(f"[dim]{escape(e.suggestion)}[/dim]")
            logger.debug(f"{e.formatted()} ({e.code.name})")
            sys.exit(1)

    return wrapper


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.option('--work-area', metavar='WxH+X+Y', help='Override the monitor work area')
@click.pass_context
def cli(ctx: click.Context, verbose: bool, debug: bool, work_area: Optional[str]):
    """Canvas grid layout commands for tiling canvas windows."""
    setup_logging(verbose=verbose, debug=debug)

    try:
        settings = GridSettings.from_environment()
        ctx.obj = CliContext(settings, work_area)
    except ValueError as e:
        raise click.UsageError(str(e))


@cli.command()
@click.option('--rows', type=click.IntRange(min=1), help='Grid rows (default: CANVAS_GRID_ROWS)')
@click.option('--columns', type=click.IntRange(min=1), help='Grid columns (default: CANVAS_GRID_COLUMNS)')
@click.option('--gap', type=click.IntRange(min=0), help='Gap between cells in pixels')
@click.option('--margin', type=click.IntRange(min=0), help='Margin around the grid in pixels')
@click.option('--desktop', type=click.IntRange(min=0), default=1, show_default=True, help='Canvas desktop index')
@click.pass_obj
@handle_errors
def init(obj: CliContext, rows: Optional[int], columns: Optional[int], gap: Optional[int],
         margin: Optional[int], desktop: int):
    """Start a session with an empty grid."""
    overrides = {}
    if rows is not None:
        overrides["rows"] = rows
    if columns is not None:
        overrides["columns"] = columns
    if gap is not None:
        overrides["cell_gap_horizontal"] = gap
        overrides["cell_gap_vertical"] = gap
    if margin is not None:
        for side in ("top", "bottom", "left", "right"):
            overrides[f"margin_{side}"] = margin

    config = GridConfig(**{**obj.settings.grid_config().model_dump(), **overrides})

    session = obj.session.start(desktop_index=desktop, config=config)
    grid = session.grid_state.config
    console.print(
        f"[green]✓[/green] Session started on desktop {session.desktop_index} "
        f"with a {grid.rows}x{grid.columns} grid"
    )


@cli.command()
@click.argument('window_id')
@click.argument('position')
@click.pass_obj
@handle_errors
def assign(obj: CliContext, window_id: str, position: str):
    """
    Assign WINDOW to POSITION (A1, A1:B2, 0,0 or 0,0:2x1).
    """
    rect = obj.session.place(window_id, position)
    console.print(
        f"[green]✓[/green] {escape(window_id)} -> {format_position(obj.session.position(window_id))} "
        f"[dim]({rect.width}x{rect.height}+{rect.x}+{rect.y})[/dim]"
    )


@cli.command()
@click.argument('window_id')
@click.option('--rows', 'row_span', type=click.IntRange(min=1), default=1, show_default=True, help='Rows to span')
@click.option('--columns', 'column_span', type=click.IntRange(min=1), default=1, show_default=True,
              help='Columns to span')
@click.pass_obj
@handle_errors
def auto(obj: CliContext, window_id: str, row_span: int, column_span: int):
    """Place WINDOW in the first free span."""
    span = obj.session.auto_place(window_id, row_span, column_span)
    console.print(f"[green]✓[/green] {escape(window_id)} -> {format_position(span)}")


@cli.command()
@click.argument('window_id')
@click.pass_obj
@handle_errors
def remove(obj: CliContext, window_id: str):
    """Remove WINDOW from the grid."""
    obj.session.unplace(window_id)
    console.print(f"[green]✓[/green] {escape(window_id)} removed from grid")


@cli.command()
@click.argument('window_a')
@click.argument('window_b')
@click.pass_obj
@handle_errors
def swap(obj: CliContext, window_a: str, window_b: str):
    """Exchange the cells of two windows."""
    obj.session.swap(window_a, window_b)
    console.print(f"[green]✓[/green] Swapped {escape(window_a)} and {escape(window_b)}")


@cli.command()
@click.option('--rows', 'row_span', type=click.IntRange(min=1), default=1, show_default=True, help='Rows to span')
@click.option('--columns', 'column_span', type=click.IntRange(min=1), default=1, show_default=True,
              help='Columns to span')
@click.pass_obj
@handle_errors
def find(obj: CliContext, row_span: int, column_span: int):
    """Print the first free span of the given size."""
    span = obj.session.find_available(row_span, column_span)
    if span is None:
        console.print(f"[yellow]No free {row_span}x{column_span} span[/yellow]")
        sys.exit(1)
    click.echo(format_position(span))


@cli.command()
@click.pass_obj
@handle_errors
def show(obj: CliContext):
    """Draw the grid as ASCII."""
    click.echo(obj.session.visualize())


@cli.command()
@click.option('--json', 'output_json', is_flag=True, help='Output JSON instead of formatted tables')
@click.pass_obj
@handle_errors
def layout(obj: CliContext, output_json: bool):
    """Show the layout summary."""
    with log_timing("Layout summary", logger):
        summary = obj.session.layout()

    if output_json:
        click.echo(layout_display.format_layout_json(summary))
    else:
        layout_display.display_layout(summary, obj.session.visualize(), console)


@cli.command()
@click.argument('window_id')
@click.pass_obj
@handle_errors
def rect(obj: CliContext, window_id: str):
    """Show the pixel rectangle for WINDOW."""
    window_rect = obj.session.window_rect(window_id)
    span = obj.session.position(window_id)
    layout_display.display_rect(window_id, format_position(span) if span else None, window_rect, console)


@cli.command()
@click.pass_obj
@handle_errors
def reset(obj: CliContext):
    """Stop the session and discard its layout."""
    obj.session.stop()
    console.print("[green]✓[/green] Session reset")


if __name__ == '__main__':
    cli()
