"""
Grid Layout Reporter

Read-only views over a GridState: free cells, a serialisable layout summary
and an ASCII rendering. Window kinds and names come from caller-supplied
lookups; the grid itself does not know what a window displays.
"""

from typing import Dict, List, Mapping, Optional

from pydantic import BaseModel, Field

from ..models.grid import CellAddress, CellSpan, GridConfig, GridState, WorkArea
from ..notation import format_cell, format_position
from .geometry import cell_dimensions

# Interior width of one rendered cell and the longest label that fits in it
CELL_WIDTH = 10
LABEL_WIDTH = CELL_WIDTH - 2


class LayoutDimensions(BaseModel):
    rows: int
    columns: int
    cell_width: int
    cell_height: int


class AssignmentInfo(BaseModel):
    window_id: str
    position: str = Field(..., description="Spreadsheet notation, e.g. A1:B2")
    cell_span: CellSpan
    canvas_kind: Optional[str] = None


class MonitorInfo(BaseModel):
    index: int
    x: int
    y: int
    width: int
    height: int


class LayoutSummary(BaseModel):
    """Composite layout report for external consumers."""

    config: GridConfig
    dimensions: LayoutDimensions
    assignments: List[AssignmentInfo]
    available_cells: List[CellAddress]
    monitor: MonitorInfo


def available_cells(state: GridState) -> List[CellAddress]:
    """Unit cells not covered by any assignment, row-major."""
    occupied = {
        (cell.row, cell.column)
        for assignment in state.assignments
        for cell in assignment.cell_span.cells()
    }
    return [
        CellAddress(row=row, column=column)
        for row in range(state.config.rows)
        for column in range(state.config.columns)
        if (row, column) not in occupied
    ]


def layout_summary(
    state: GridState,
    work_area: WorkArea,
    window_kinds: Optional[Mapping[str, Optional[str]]] = None,
) -> LayoutSummary:
    """
    Build the layout report for a grid.

    Args:
        state: Grid state
        work_area: Work area of the grid's monitor
        window_kinds: window id -> canvas kind (or None) lookup

    Returns:
        LayoutSummary
    """
    window_kinds = window_kinds or {}
    cell_width, cell_height = cell_dimensions(state.config, work_area)

    return LayoutSummary(
        config=state.config,
        dimensions=LayoutDimensions(
            rows=state.config.rows,
            columns=state.config.columns,
            cell_width=cell_width,
            cell_height=cell_height,
        ),
        assignments=[
            AssignmentInfo(
                window_id=a.window_id,
                position=format_position(a.cell_span),
                cell_span=a.cell_span,
                canvas_kind=window_kinds.get(a.window_id),
            )
            for a in state.assignments
        ],
        available_cells=available_cells(state),
        monitor=MonitorInfo(
            index=state.config.monitor_index,
            x=work_area.x,
            y=work_area.y,
            width=work_area.width,
            height=work_area.height,
        ),
    )


def _owner_grid(state: GridState) -> List[List[Optional[str]]]:
    owners: List[List[Optional[str]]] = [
        [None] * state.config.columns for _ in range(state.config.rows)
    ]
    for assignment in state.assignments:
        for cell in assignment.cell_span.cells():
            if cell.row < state.config.rows and cell.column < state.config.columns:
                owners[cell.row][cell.column] = assignment.window_id
    return owners


def _label(window_id: str, window_names: Mapping[str, Optional[str]]) -> str:
    name = window_names.get(window_id) or window_id
    # Control characters would break the fixed-width rows
    printable = "".join(c if c.isprintable() else " " for c in name)
    return printable[:LABEL_WIDTH]


def visualize(
    state: GridState,
    window_names: Optional[Mapping[str, Optional[str]]] = None,
) -> str:
    """
    Render the grid as fixed-width ASCII.

    Each window's label appears in the top-left cell of its span; borders
    inside a multi-cell span are left open. Empty cells show their address,
    e.g. "[B2]".
    """
    window_names = window_names or {}
    owners = _owner_grid(state)
    rows, columns = state.config.rows, state.config.columns

    top_left: Dict[str, CellSpan] = {a.window_id: a.cell_span for a in state.assignments}

    def border(row: int) -> str:
        # Horizontal border above `row`; row == rows is the bottom edge
        parts = []
        for column in range(columns):
            above = owners[row - 1][column] if row > 0 else None
            below = owners[row][column] if row < rows else None
            merged = above is not None and above == below
            parts.append(" " * CELL_WIDTH if merged else "-" * CELL_WIDTH)
        return "+" + "+".join(parts) + "+"

    def content(row: int, column: int) -> str:
        owner = owners[row][column]
        if owner is None:
            text = f"[{format_cell(row, column)}]"
        else:
            span = top_left[owner]
            text = _label(owner, window_names) if (span.start_row, span.start_column) == (row, column) else ""
        return f" {text}".ljust(CELL_WIDTH)[:CELL_WIDTH]

    lines = []
    for row in range(rows):
        lines.append(border(row))
        line = "|"
        for column in range(columns):
            line += content(row, column)
            if column < columns - 1:
                left, right = owners[row][column], owners[row][column + 1]
                line += " " if left is not None and left == right else "|"
        lines.append(line + "|")
    lines.append(border(rows))

    return "\n".join(lines)
