"""Data models for canvas grid layouts."""

from .grid import (
    Assignment,
    CellAddress,
    CellSpan,
    DEFAULT_GRID_CONFIG,
    GridConfig,
    GridState,
    Rect,
    WorkArea,
    utc_now,
)

__all__ = [
    "Assignment",
    "CellAddress",
    "CellSpan",
    "DEFAULT_GRID_CONFIG",
    "GridConfig",
    "GridState",
    "Rect",
    "WorkArea",
    "utc_now",
]
