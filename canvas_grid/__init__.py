"""
Canvas Grid

Grid layout engine for tiling canvas terminal windows on a virtual desktop.
"""

__version__ = "1.0.0"

from .errors import (
    BoundsError,
    ConfigurationError,
    ErrorCode,
    GridError,
    NotFoundError,
    OverlapError,
    ParseError,
    WindowIdError,
)
from .models.grid import CellSpan, GridConfig, GridState, Rect, WorkArea
from .notation import format_position, parse_position

__all__ = [
    "BoundsError",
    "CellSpan",
    "ConfigurationError",
    "ErrorCode",
    "GridConfig",
    "GridError",
    "GridState",
    "NotFoundError",
    "OverlapError",
    "ParseError",
    "Rect",
    "WindowIdError",
    "WorkArea",
    "format_position",
    "parse_position",
]
