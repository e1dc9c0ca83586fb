"""
Grid Placement Engine

Pure operations over GridState: validation, assignment, removal, swapping,
first-fit search and reconfiguration. Every operation returns a new
GridState; the state passed in is never modified.

The no-overlap invariant is enforced here, at assignment time only. Swap
exchanges two existing, already-valid spans, so it cannot introduce overlap.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from ..errors import BoundsError, GridError, NotFoundError, OverlapError, WindowIdError
from ..models.grid import Assignment, CellSpan, GridConfig, GridState, utc_now
from ..notation import format_position, parse_position

logger = logging.getLogger(__name__)

Position = Union[str, CellSpan]


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a span or configuration check."""

    valid: bool
    error: Optional[GridError] = None


@dataclass(frozen=True)
class PlacementResult:
    """Outcome of a mutating operation.

    state is always set: the new state on success, the input state on failure.
    """

    success: bool
    state: GridState
    error: Optional[GridError] = None


@dataclass(frozen=True)
class ReconfigureResult:
    """New state after a dimension change plus the windows that no longer fit."""

    state: GridState
    dropped: Tuple[str, ...] = field(default_factory=tuple)


def create_grid_state(
    desktop_index: int = 0,
    config: Optional[GridConfig] = None,
    **overrides,
) -> GridState:
    """
    Create an empty grid state.

    Args:
        desktop_index: Virtual desktop hosting the grid
        config: Base configuration (default: GridConfig defaults)
        **overrides: Individual GridConfig fields to override (rows=4, ...)

    Returns:
        GridState with no assignments
    """
    base = config or GridConfig()
    if overrides:
        base = GridConfig(**{**base.model_dump(), **overrides})
    return GridState(desktop_index=desktop_index, config=base)


def _with_assignments(state: GridState, assignments) -> GridState:
    return state.model_copy(
        update={"assignments": tuple(assignments), "last_updated": utc_now()}
    )


def _check_bounds(span: CellSpan, config: GridConfig) -> Optional[GridError]:
    if span.start_row >= config.rows:
        return BoundsError(f"row {span.start_row} is outside [0, {config.rows})", config.rows, config.columns)
    if span.start_column >= config.columns:
        return BoundsError(
            f"column {span.start_column} is outside [0, {config.columns})", config.rows, config.columns
        )
    if not config.fits(span):
        return BoundsError(
            f"{format_position(span)} extends past the grid edge", config.rows, config.columns
        )
    return None


def _find_overlap(
    span: CellSpan,
    assignments: Tuple[Assignment, ...],
    exclude_window_id: Optional[str] = None,
) -> Optional[Assignment]:
    for assignment in assignments:
        if assignment.window_id == exclude_window_id:
            continue
        if assignment.cell_span.overlaps(span):
            return assignment
    return None


def validate_span(
    span: CellSpan,
    state: GridState,
    exclude_window_id: Optional[str] = None,
) -> ValidationResult:
    """
    Check a span against the grid bounds and existing assignments.

    Args:
        span: Candidate cell span
        state: Current grid state
        exclude_window_id: Window whose own assignment is ignored in the
            overlap check (used when moving that window)

    Returns:
        ValidationResult with a BoundsError or OverlapError on failure
    """
    bounds_error = _check_bounds(span, state.config)
    if bounds_error:
        return ValidationResult(valid=False, error=bounds_error)

    other = _find_overlap(span, state.assignments, exclude_window_id)
    if other:
        return ValidationResult(
            valid=False,
            error=OverlapError(format_position(span), other.window_id),
        )

    return ValidationResult(valid=True)


def resolve_position(position: Position) -> Tuple[Optional[CellSpan], Optional[GridError]]:
    """Turn position text or a CellSpan into a CellSpan."""
    if isinstance(position, CellSpan):
        return position, None
    parsed = parse_position(position)
    return parsed.span, parsed.error


def assign(window_id: str, position: Position, state: GridState) -> PlacementResult:
    """
    Assign (or move) a window to a position.

    The window's current assignment is excluded from the overlap check, then
    replaced; new assignments are appended.

    Args:
        window_id: Window identifier
        position: Position text (either notation) or CellSpan
        state: Current grid state

    Returns:
        PlacementResult with the new state, or the input state and an error
    """
    if not isinstance(window_id, str) or not window_id.strip():
        logger.debug(f"Rejected assignment for invalid window id {window_id!r}")
        return PlacementResult(success=False, state=state, error=WindowIdError(window_id))

    span, error = resolve_position(position)
    if error:
        logger.debug(f"Rejected assignment for {window_id}: {error.message}")
        return PlacementResult(success=False, state=state, error=error)

    validation = validate_span(span, state, exclude_window_id=window_id)
    if not validation.valid:
        logger.debug(f"Rejected assignment for {window_id}: {validation.error.message}")
        return PlacementResult(success=False, state=state, error=validation.error)

    remaining = [a for a in state.assignments if a.window_id != window_id]
    remaining.append(Assignment(window_id=window_id, cell_span=span))

    logger.debug(f"Assigned {window_id} to {format_position(span)}")
    return PlacementResult(success=True, state=_with_assignments(state, remaining))


def remove(window_id: str, state: GridState) -> GridState:
    """Drop a window's assignment. Removing an unassigned window is a no-op."""
    if state.find(window_id) is None:
        return state

    logger.debug(f"Removed {window_id} from grid")
    return _with_assignments(
        state, (a for a in state.assignments if a.window_id != window_id)
    )


def swap(window_id_1: str, window_id_2: str, state: GridState) -> PlacementResult:
    """
    Exchange the cell spans of two assigned windows.

    Fails atomically with NotFoundError if either window is unassigned; the
    input state is returned unchanged. Swapping a window with itself succeeds
    without changes.
    """
    first = state.find(window_id_1)
    second = state.find(window_id_2)

    for window_id, assignment in ((window_id_1, first), (window_id_2, second)):
        if assignment is None:
            logger.debug(f"Swap {window_id_1} <-> {window_id_2} failed: {window_id} unassigned")
            return PlacementResult(success=False, state=state, error=NotFoundError(window_id))

    if window_id_1 == window_id_2:
        return PlacementResult(success=True, state=state)

    swapped = []
    for assignment in state.assignments:
        if assignment.window_id == window_id_1:
            swapped.append(Assignment(window_id=window_id_1, cell_span=second.cell_span))
        elif assignment.window_id == window_id_2:
            swapped.append(Assignment(window_id=window_id_2, cell_span=first.cell_span))
        else:
            swapped.append(assignment)

    logger.debug(
        f"Swapped {window_id_1} ({format_position(first.cell_span)}) "
        f"with {window_id_2} ({format_position(second.cell_span)})"
    )
    return PlacementResult(success=True, state=_with_assignments(state, swapped))


def find_available(
    state: GridState,
    row_span: int = 1,
    column_span: int = 1,
) -> Optional[CellSpan]:
    """
    First-fit search for a free span of the requested size.

    Candidate top-left cells are scanned row-major (row 0 first, then
    increasing column).

    Returns:
        The first free CellSpan, or None if the size does not fit anywhere
    """
    config = state.config
    if row_span < 1 or column_span < 1:
        return None
    if row_span > config.rows or column_span > config.columns:
        return None

    for row in range(config.rows - row_span + 1):
        for column in range(config.columns - column_span + 1):
            candidate = CellSpan(
                start_row=row,
                start_column=column,
                row_span=row_span,
                column_span=column_span,
            )
            if _find_overlap(candidate, state.assignments) is None:
                logger.debug(f"First free {row_span}x{column_span} span: {format_position(candidate)}")
                return candidate

    return None


def get_position(window_id: str, state: GridState) -> Optional[CellSpan]:
    """Cell span assigned to a window, or None."""
    assignment = state.find(window_id)
    return assignment.cell_span if assignment else None


def reconfigure(state: GridState, config: GridConfig) -> ReconfigureResult:
    """
    Rebuild a state for a new configuration.

    Each existing assignment is re-checked in order against the new bounds and
    the assignments kept before it; ones that no longer fit are dropped.
    """
    kept: List[Assignment] = []
    dropped: List[str] = []

    for assignment in state.assignments:
        span = assignment.cell_span
        if _check_bounds(span, config) or _find_overlap(span, tuple(kept)):
            dropped.append(assignment.window_id)
            continue
        kept.append(assignment)

    if dropped:
        logger.info(
            f"Grid resized to {config.rows}x{config.columns}; "
            f"dropped {len(dropped)} assignment(s): {', '.join(dropped)}"
        )

    new_state = state.model_copy(
        update={"config": config, "assignments": tuple(kept), "last_updated": utc_now()}
    )
    return ReconfigureResult(state=new_state, dropped=tuple(dropped))
