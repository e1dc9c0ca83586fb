"""Tests for the grid placement engine."""

import pytest
from pydantic import ValidationError

from canvas_grid.errors import (
    BoundsError,
    ErrorCode,
    NotFoundError,
    OverlapError,
    ParseError,
    WindowIdError,
)
from canvas_grid.models.grid import Assignment, CellSpan, GridConfig, GridState
from canvas_grid.services import placement


def span(start_row, start_column, row_span=1, column_span=1):
    return CellSpan(
        start_row=start_row,
        start_column=start_column,
        row_span=row_span,
        column_span=column_span,
    )


def place_all(state, *pairs):
    for window_id, position in pairs:
        result = placement.assign(window_id, position, state)
        assert result.success, result.error
        state = result.state
    return state


class TestCreateGridState:
    """Tests for create_grid_state."""

    def test_defaults(self):
        state = placement.create_grid_state()

        assert state.desktop_index == 0
        assert state.config.rows == 2
        assert state.config.columns == 2
        assert state.config.cell_gap_horizontal == 8
        assert state.config.margin_left == 8
        assert state.assignments == ()

    def test_overrides(self):
        state = placement.create_grid_state(desktop_index=3, rows=4, columns=5)

        assert state.desktop_index == 3
        assert state.config.rows == 4
        assert state.config.columns == 5
        assert state.config.cell_gap_vertical == 8

    def test_invalid_override_rejected(self):
        with pytest.raises(ValidationError):
            placement.create_grid_state(rows=0)


class TestValidateSpan:
    """Tests for bounds and overlap validation."""

    def test_valid_span(self, grid_3x3):
        assert placement.validate_span(span(1, 1, 2, 2), grid_3x3).valid

    def test_row_out_of_bounds(self, grid_3x3):
        result = placement.validate_span(span(3, 0), grid_3x3)

        assert not result.valid
        assert isinstance(result.error, BoundsError)
        assert result.error.code == ErrorCode.OUT_OF_BOUNDS

    def test_column_out_of_bounds(self, grid_3x3):
        result = placement.validate_span(span(0, 3), grid_3x3)

        assert isinstance(result.error, BoundsError)

    def test_span_past_edge(self, grid_3x3):
        result = placement.validate_span(span(1, 1, 3, 1), grid_3x3)

        assert isinstance(result.error, BoundsError)
        assert "edge" in result.error.message

    def test_overlap_names_other_window(self, grid_3x3):
        state = place_all(grid_3x3, ("w1", "A1:B2"))
        result = placement.validate_span(span(1, 1), state)

        assert isinstance(result.error, OverlapError)
        assert "overlap" in result.error.message
        assert result.error.context["window_id"] == "w1"

    def test_excluded_window_ignored(self, grid_3x3):
        state = place_all(grid_3x3, ("w1", "A1:B2"))

        assert placement.validate_span(span(1, 1), state, exclude_window_id="w1").valid

    def test_adjacent_spans_do_not_overlap(self, grid_3x3):
        state = place_all(grid_3x3, ("w1", "A1:B2"))

        assert placement.validate_span(span(0, 2, 3, 1), state).valid
        assert placement.validate_span(span(2, 0, 1, 2), state).valid


class TestAssign:
    """Tests for assign."""

    def test_assign_appends(self, grid_3x3):
        state = place_all(grid_3x3, ("w1", "A1"), ("w2", "B1"))

        assert state.window_ids == ("w1", "w2")
        assert placement.get_position("w2", state) == span(0, 1)

    def test_assign_accepts_cell_span(self, grid_3x3):
        result = placement.assign("w1", span(2, 2), grid_3x3)

        assert result.success
        assert placement.get_position("w1", result.state) == span(2, 2)

    def test_assign_accepts_coordinates(self, grid_3x3):
        result = placement.assign("w1", "0,1:2x2", grid_3x3)

        assert placement.get_position("w1", result.state) == span(0, 1, 2, 2)

    def test_input_state_unchanged(self, grid_3x3):
        result = placement.assign("w1", "A1", grid_3x3)

        assert result.success
        assert grid_3x3.assignments == ()
        assert result.state is not grid_3x3

    def test_overlap_rejected(self, grid_3x3):
        state = place_all(grid_3x3, ("w1", "A1:B2"))
        result = placement.assign("w2", "B2", state)

        assert not result.success
        assert isinstance(result.error, OverlapError)
        assert result.state is state

    def test_parse_error_returned(self, grid_3x3):
        result = placement.assign("w1", "not-a-cell", grid_3x3)

        assert not result.success
        assert isinstance(result.error, ParseError)
        assert result.state is grid_3x3

    def test_out_of_bounds_returned(self, grid_3x3):
        result = placement.assign("w1", "D1", grid_3x3)

        assert isinstance(result.error, BoundsError)

    def test_move_excludes_own_assignment(self, grid_3x3):
        """Test that a window can move onto cells it already covers."""
        state = place_all(grid_3x3, ("w1", "A1:B2"))
        result = placement.assign("w1", "B2:C3", state)

        assert result.success
        assert placement.get_position("w1", result.state) == span(1, 1, 2, 2)
        assert len(result.state.assignments) == 1

    def test_move_goes_to_end(self, grid_3x3):
        state = place_all(grid_3x3, ("w1", "A1"), ("w2", "B1"))
        state = placement.assign("w1", "C1", state).state

        assert state.window_ids == ("w2", "w1")

    @pytest.mark.parametrize("window_id", ["", "   "])
    def test_blank_window_id_returned_as_error(self, grid_3x3, window_id):
        """Test that a blank window id fails as a result instead of raising."""
        result = placement.assign(window_id, "A1", grid_3x3)

        assert not result.success
        assert isinstance(result.error, WindowIdError)
        assert result.error.code == ErrorCode.INVALID_WINDOW_ID
        assert result.state is grid_3x3

    def test_blank_window_id_model_still_rejected(self):
        with pytest.raises(ValidationError):
            Assignment(window_id="", cell_span=span(0, 0))


class TestRemove:
    """Tests for remove."""

    def test_remove(self, grid_3x3):
        state = place_all(grid_3x3, ("w1", "A1"), ("w2", "B1"))
        new_state = placement.remove("w1", state)

        assert new_state.window_ids == ("w2",)
        assert state.window_ids == ("w1", "w2")

    def test_remove_unknown_is_noop(self, grid_3x3):
        state = place_all(grid_3x3, ("w1", "A1"))

        assert placement.remove("ghost", state) is state

    def test_removed_cells_reusable(self, grid_3x3):
        state = place_all(grid_3x3, ("w1", "A1:C3"))
        state = placement.remove("w1", state)

        assert placement.assign("w2", "B2", state).success


class TestSwap:
    """Tests for swap."""

    def test_swap_exchanges_spans(self, grid_3x3):
        state = place_all(grid_3x3, ("w1", "A1:B2"), ("w2", "C3"))
        result = placement.swap("w1", "w2", state)

        assert result.success
        assert placement.get_position("w1", result.state) == span(2, 2)
        assert placement.get_position("w2", result.state) == span(0, 0, 2, 2)

    def test_swap_keeps_order(self, grid_3x3):
        state = place_all(grid_3x3, ("w1", "A1"), ("w2", "B1"), ("w3", "C1"))
        result = placement.swap("w1", "w3", state)

        assert result.state.window_ids == ("w1", "w2", "w3")

    def test_swap_with_unassigned_fails_atomically(self, grid_3x3):
        state = place_all(grid_3x3, ("w1", "A1"))
        result = placement.swap("w1", "ghost", state)

        assert not result.success
        assert isinstance(result.error, NotFoundError)
        assert result.error.context["window_id"] == "ghost"
        assert result.state is state
        assert placement.get_position("w1", state) == span(0, 0)

    def test_swap_both_unassigned(self, grid_3x3):
        result = placement.swap("a", "b", grid_3x3)

        assert not result.success
        assert result.error.context["window_id"] == "a"

    def test_swap_with_self(self, grid_3x3):
        state = place_all(grid_3x3, ("w1", "A1"))
        result = placement.swap("w1", "w1", state)

        assert result.success
        assert result.state is state


class TestFindAvailable:
    """Tests for first-fit search."""

    def test_empty_grid(self, grid_3x3):
        assert placement.find_available(grid_3x3) == span(0, 0)

    def test_row_major_order(self, grid_3x3):
        state = place_all(grid_3x3, ("w1", "A1"))

        assert placement.find_available(state) == span(0, 1)

    def test_exhausts_2x2(self, grid_2x2):
        state = grid_2x2
        found = []
        for i in range(4):
            free = placement.find_available(state)
            found.append(free)
            state = placement.assign(f"w{i}", free, state).state

        assert found == [span(0, 0), span(0, 1), span(1, 0), span(1, 1)]
        assert placement.find_available(state) is None

    def test_multi_cell_span(self, grid_3x3):
        state = place_all(grid_3x3, ("w1", "A1"))

        assert placement.find_available(state, 2, 2) == span(0, 1, 2, 2)

    def test_span_larger_than_grid(self, grid_3x3):
        assert placement.find_available(grid_3x3, 4, 1) is None
        assert placement.find_available(grid_3x3, 1, 4) is None

    def test_non_positive_size(self, grid_3x3):
        assert placement.find_available(grid_3x3, 0, 1) is None

    def test_no_room_for_size(self, grid_3x3):
        state = place_all(grid_3x3, ("w1", "B2"))

        assert placement.find_available(state, 2, 2) is None
        assert placement.find_available(state, 1, 3) == span(0, 0, 1, 3)


class TestReconfigure:
    """Tests for reconfigure."""

    def test_grow_keeps_everything(self, grid_2x2):
        state = place_all(grid_2x2, ("w1", "A1"), ("w2", "B2"))
        result = placement.reconfigure(state, GridConfig(rows=3, columns=3))

        assert result.dropped == ()
        assert result.state.window_ids == ("w1", "w2")
        assert result.state.config.rows == 3

    def test_shrink_drops_out_of_bounds(self, grid_3x3):
        state = place_all(grid_3x3, ("w1", "A1"), ("w2", "C3"), ("w3", "A2:B3"))
        result = placement.reconfigure(state, GridConfig(rows=2, columns=2))

        assert result.dropped == ("w2", "w3")
        assert result.state.window_ids == ("w1",)

    def test_input_state_unchanged(self, grid_3x3):
        state = place_all(grid_3x3, ("w1", "C3"))
        placement.reconfigure(state, GridConfig(rows=1, columns=1))

        assert state.window_ids == ("w1",)
        assert state.config.rows == 3


class TestGridStateModel:
    """Tests for GridState invariants."""

    def test_duplicate_window_rejected(self):
        with pytest.raises(ValidationError):
            GridState(
                assignments=(
                    Assignment(window_id="w1", cell_span=span(0, 0)),
                    Assignment(window_id="w1", cell_span=span(1, 1)),
                )
            )

    def test_frozen(self, grid_2x2):
        with pytest.raises(ValidationError):
            grid_2x2.desktop_index = 5

    def test_span_overlap(self):
        assert span(0, 0, 2, 2).overlaps(span(1, 1))
        assert not span(0, 0, 2, 2).overlaps(span(0, 2))

    def test_span_cells(self):
        cells = span(0, 1, 2, 1).cells()

        assert [(c.row, c.column) for c in cells] == [(0, 1), (1, 1)]
