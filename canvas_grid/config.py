"""
Environment-driven settings for the canvas grid.

Variables:
    CANVAS_SESSION_DIR   directory holding canvas-session.json (default: temp dir)
    CANVAS_GRID_ROWS     default row count (2)
    CANVAS_GRID_COLUMNS  default column count (2)
    CANVAS_GRID_GAP      gap between cells in pixels (8)
    CANVAS_GRID_MARGIN   margin around the grid in pixels (8)
    CANVAS_WORK_AREA     work area as WxH+X+Y (1920x1080+0+0)
"""

import os
import re
import tempfile
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from .models.grid import GridConfig, WorkArea

SESSION_FILENAME = "canvas-session.json"

_WORK_AREA_PATTERN = re.compile(r"^(\d+)x(\d+)(?:([+-]\d+)([+-]\d+))?$")


def parse_work_area(text: str) -> WorkArea:
    """
    Parse "WxH+X+Y" (offsets optional) into a WorkArea.

    Raises:
        ValueError: If text is not in WxH+X+Y form
    """
    match = _WORK_AREA_PATTERN.match(text.strip())
    if not match:
        raise ValueError(f"Invalid work area '{text}': expected WxH+X+Y (e.g. 1920x1080+0+0)")

    width, height, x, y = match.groups()
    return WorkArea(
        x=int(x or 0),
        y=int(y or 0),
        width=int(width),
        height=int(height),
    )


class GridSettings(BaseModel):
    """Defaults used when creating grids and sessions."""

    session_dir: Path = Field(default_factory=lambda: Path(tempfile.gettempdir()))
    rows: int = Field(default=2, ge=1, le=26 * 26, description="Default row count")
    columns: int = Field(default=2, ge=1, le=26 * 26, description="Default column count")
    gap: int = Field(default=8, ge=0, le=500, description="Cell gap (pixels)")
    margin: int = Field(default=8, ge=0, le=500, description="Grid margin (pixels)")
    work_area: str = Field(default="1920x1080+0+0", description="Work area (WxH+X+Y)")

    @field_validator("work_area")
    @classmethod
    def validate_work_area(cls, v: str) -> str:
        """Validate work area notation."""
        parse_work_area(v)
        return v.strip()

    @classmethod
    def from_environment(cls) -> "GridSettings":
        """Load settings from environment variables."""
        return cls(
            session_dir=Path(os.getenv("CANVAS_SESSION_DIR", tempfile.gettempdir())),
            rows=int(os.getenv("CANVAS_GRID_ROWS", "2")),
            columns=int(os.getenv("CANVAS_GRID_COLUMNS", "2")),
            gap=int(os.getenv("CANVAS_GRID_GAP", "8")),
            margin=int(os.getenv("CANVAS_GRID_MARGIN", "8")),
            work_area=os.getenv("CANVAS_WORK_AREA", "1920x1080+0+0"),
        )

    @property
    def session_file(self) -> Path:
        return self.session_dir / SESSION_FILENAME

    def grid_config(self, monitor_index: int = 0) -> GridConfig:
        """Default GridConfig built from these settings."""
        return GridConfig(
            rows=self.rows,
            columns=self.columns,
            monitor_index=monitor_index,
            cell_gap_horizontal=self.gap,
            cell_gap_vertical=self.gap,
            margin_top=self.margin,
            margin_bottom=self.margin,
            margin_left=self.margin,
            margin_right=self.margin,
        )

    def default_work_area(self) -> WorkArea:
        return parse_work_area(self.work_area)
