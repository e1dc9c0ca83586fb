"""
Grid Layout Models

Pydantic value types for the canvas grid:
- CellSpan / CellAddress: rectangular regions and unit cells
- GridConfig: grid shape, target monitor, gaps and margins
- Assignment / GridState: window-to-span bindings for one desktop
- WorkArea / Rect: monitor work area and resolved pixel rectangles

All models are frozen. Operations in canvas_grid.services return new
instances instead of mutating these.
"""

from datetime import datetime, timezone
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


# ============================================================================
# Cells
# ============================================================================

class CellSpan(BaseModel):
    """Rectangular, axis-aligned region of the grid (zero-based).

    Bounds against a GridConfig are checked by the placement engine, not here.
    """

    model_config = ConfigDict(frozen=True)

    start_row: int = Field(..., ge=0, description="First row (zero-based)")
    start_column: int = Field(..., ge=0, description="First column (zero-based)")
    row_span: int = Field(1, ge=1, description="Number of rows covered")
    column_span: int = Field(1, ge=1, description="Number of columns covered")

    @property
    def end_row(self) -> int:
        """Row index one past the last covered row."""
        return self.start_row + self.row_span

    @property
    def end_column(self) -> int:
        """Column index one past the last covered column."""
        return self.start_column + self.column_span

    def overlaps(self, other: "CellSpan") -> bool:
        """Check if the two spans share at least one cell."""
        return (
            self.start_row < other.end_row
            and other.start_row < self.end_row
            and self.start_column < other.end_column
            and other.start_column < self.end_column
        )

    def contains(self, row: int, column: int) -> bool:
        """Check if a unit cell lies inside this span."""
        return (
            self.start_row <= row < self.end_row
            and self.start_column <= column < self.end_column
        )

    def cells(self) -> Tuple["CellAddress", ...]:
        """Unit cells covered by this span, row-major."""
        return tuple(
            CellAddress(row=row, column=column)
            for row in range(self.start_row, self.end_row)
            for column in range(self.start_column, self.end_column)
        )


class CellAddress(BaseModel):
    """A single unit cell."""

    model_config = ConfigDict(frozen=True)

    row: int = Field(..., ge=0)
    column: int = Field(..., ge=0)


# ============================================================================
# Configuration
# ============================================================================

class GridConfig(BaseModel):
    """Fixed shape of a grid and its spacing on the target monitor."""

    model_config = ConfigDict(frozen=True)

    rows: int = Field(2, ge=1, description="Number of rows")
    columns: int = Field(2, ge=1, description="Number of columns")
    monitor_index: int = Field(0, ge=0, description="Monitor the grid is laid out on")
    cell_gap_horizontal: int = Field(8, ge=0, description="Gap between columns (pixels)")
    cell_gap_vertical: int = Field(8, ge=0, description="Gap between rows (pixels)")
    margin_top: int = Field(8, ge=0, description="Top margin (pixels)")
    margin_bottom: int = Field(8, ge=0, description="Bottom margin (pixels)")
    margin_left: int = Field(8, ge=0, description="Left margin (pixels)")
    margin_right: int = Field(8, ge=0, description="Right margin (pixels)")

    @property
    def cell_count(self) -> int:
        return self.rows * self.columns

    def fits(self, span: CellSpan) -> bool:
        """Check if a span lies entirely inside this grid."""
        return span.end_row <= self.rows and span.end_column <= self.columns


DEFAULT_GRID_CONFIG = GridConfig()


# ============================================================================
# State
# ============================================================================

class Assignment(BaseModel):
    """Binding of one window to one cell span."""

    model_config = ConfigDict(frozen=True)

    window_id: str = Field(..., description="Opaque window identifier")
    cell_span: CellSpan

    @field_validator("window_id")
    @classmethod
    def validate_window_id(cls, v: str) -> str:
        """Validate window id is non-empty."""
        if not v or v.strip() == "":
            raise ValueError("window_id cannot be empty")
        return v


class GridState(BaseModel):
    """Immutable snapshot of one desktop's grid.

    Assignment order is insertion order. Window ids are unique; overlap is
    enforced by the placement engine when assignments are made.
    """

    model_config = ConfigDict(frozen=True)

    desktop_index: int = Field(0, description="Virtual desktop hosting the grid")
    config: GridConfig = Field(default_factory=GridConfig)
    assignments: Tuple[Assignment, ...] = Field(default_factory=tuple)
    last_updated: datetime = Field(default_factory=utc_now)

    @field_validator("assignments")
    @classmethod
    def validate_unique_windows(cls, v: Tuple[Assignment, ...]) -> Tuple[Assignment, ...]:
        """Reject duplicate window ids."""
        seen = set()
        for assignment in v:
            if assignment.window_id in seen:
                raise ValueError(f"Duplicate assignment for window '{assignment.window_id}'")
            seen.add(assignment.window_id)
        return v

    def find(self, window_id: str) -> Optional[Assignment]:
        """Assignment for a window, or None."""
        for assignment in self.assignments:
            if assignment.window_id == window_id:
                return assignment
        return None

    @property
    def window_ids(self) -> Tuple[str, ...]:
        return tuple(a.window_id for a in self.assignments)


# ============================================================================
# Geometry
# ============================================================================

class WorkArea(BaseModel):
    """Usable pixel region of a monitor (excludes panels and docks)."""

    model_config = ConfigDict(frozen=True)

    x: int = Field(0, description="Left edge (absolute, pixels)")
    y: int = Field(0, description="Top edge (absolute, pixels)")
    width: int = Field(..., gt=0, description="Width (pixels)")
    height: int = Field(..., gt=0, description="Height (pixels)")


class Rect(BaseModel):
    """Absolute pixel rectangle for a window."""

    model_config = ConfigDict(frozen=True)

    x: int
    y: int
    width: int
    height: int

    @property
    def geometry_dict(self) -> dict:
        """Return geometry as dict for host commands."""
        return {
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
        }
