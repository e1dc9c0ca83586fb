"""Pytest configuration for canvas grid tests."""

import pytest

from canvas_grid.config import GridSettings
from canvas_grid.models.grid import GridConfig, WorkArea
from canvas_grid.services.placement import create_grid_state
from canvas_grid.session import GridSession, SessionStore, StaticWindowHost


@pytest.fixture
def work_area():
    """1920x1080 monitor at the origin."""
    return WorkArea(x=0, y=0, width=1920, height=1080)


@pytest.fixture
def grid_2x2():
    """Empty grid with default configuration (2x2, 8px gaps and margins)."""
    return create_grid_state()


@pytest.fixture
def grid_3x3():
    """Empty 3x3 grid with 10px gaps and no margins."""
    return create_grid_state(
        config=GridConfig(
            rows=3,
            columns=3,
            cell_gap_horizontal=10,
            cell_gap_vertical=10,
            margin_top=0,
            margin_bottom=0,
            margin_left=0,
            margin_right=0,
        )
    )


@pytest.fixture
def settings(tmp_path):
    """Settings writing the session file into a temp dir."""
    return GridSettings(session_dir=tmp_path)


@pytest.fixture
def host(work_area):
    return StaticWindowHost(work_area)


@pytest.fixture
def store(settings):
    return SessionStore(settings.session_file)


@pytest.fixture
def session(store, host, settings):
    """Grid session with a started 2x2 session."""
    grid_session = GridSession(store, host, settings)
    grid_session.start()
    return grid_session
