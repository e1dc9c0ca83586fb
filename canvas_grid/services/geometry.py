"""
Grid Geometry Resolver

Converts cell spans into absolute pixel rectangles on a monitor work area.

Cell size is derived from the full grid dimensions, so every unit cell has
the same integer size:

    cell_width  = (area.width  - margin_left - margin_right  - (columns - 1) * gap_h) // columns
    cell_height = (area.height - margin_top  - margin_bottom - (rows - 1)    * gap_v) // rows

A span covering N columns is N * cell_width plus the N - 1 gaps inside it.
"""

import logging
from typing import Optional, Tuple

from ..errors import ConfigurationError, ErrorCode
from ..models.grid import CellSpan, GridConfig, GridState, Rect, WorkArea
from .placement import ValidationResult

logger = logging.getLogger(__name__)


def cell_dimensions(config: GridConfig, work_area: WorkArea) -> Tuple[int, int]:
    """
    Size of one unit cell in pixels.

    Returns:
        (cell_width, cell_height); values may be <= 0 for configurations that
        validate_config rejects
    """
    usable_width = (
        work_area.width
        - config.margin_left
        - config.margin_right
        - (config.columns - 1) * config.cell_gap_horizontal
    )
    usable_height = (
        work_area.height
        - config.margin_top
        - config.margin_bottom
        - (config.rows - 1) * config.cell_gap_vertical
    )
    return usable_width // config.columns, usable_height // config.rows


def validate_config(config: GridConfig, work_area: WorkArea) -> ValidationResult:
    """
    Check that a configuration leaves a positive cell size on a work area.

    Must pass before span_rect/calculate_rect are used with this pair.
    """
    cell_width, cell_height = cell_dimensions(config, work_area)

    if cell_width <= 0:
        logger.error(
            f"Grid has no cell width on {work_area.width}px work area "
            f"(columns={config.columns}, gap={config.cell_gap_horizontal}, "
            f"margins={config.margin_left}+{config.margin_right})"
        )
        return ValidationResult(
            valid=False,
            error=ConfigurationError(
                f"cell width would be {cell_width}px", code=ErrorCode.DEGENERATE_GEOMETRY
            ),
        )

    if cell_height <= 0:
        logger.error(
            f"Grid has no cell height on {work_area.height}px work area "
            f"(rows={config.rows}, gap={config.cell_gap_vertical}, "
            f"margins={config.margin_top}+{config.margin_bottom})"
        )
        return ValidationResult(
            valid=False,
            error=ConfigurationError(
                f"cell height would be {cell_height}px", code=ErrorCode.DEGENERATE_GEOMETRY
            ),
        )

    return ValidationResult(valid=True)


def span_rect(span: CellSpan, config: GridConfig, work_area: WorkArea) -> Rect:
    """Pixel rectangle for a span on a work area."""
    cell_width, cell_height = cell_dimensions(config, work_area)
    gap_h = config.cell_gap_horizontal
    gap_v = config.cell_gap_vertical

    return Rect(
        x=work_area.x + config.margin_left + span.start_column * (cell_width + gap_h),
        y=work_area.y + config.margin_top + span.start_row * (cell_height + gap_v),
        width=span.column_span * cell_width + (span.column_span - 1) * gap_h,
        height=span.row_span * cell_height + (span.row_span - 1) * gap_v,
    )


def calculate_rect(window_id: str, state: GridState, work_area: WorkArea) -> Optional[Rect]:
    """
    Pixel rectangle for an assigned window.

    Args:
        window_id: Window identifier
        state: Grid state holding the assignment
        work_area: Work area of the grid's monitor

    Returns:
        Rect, or None if the window has no assignment
    """
    assignment = state.find(window_id)
    if assignment is None:
        return None

    rect = span_rect(assignment.cell_span, state.config, work_area)
    logger.debug(f"Rect for {window_id}: {rect.width}x{rect.height}+{rect.x}+{rect.y}")
    return rect
