"""
Canvas Grid Session

Owns the load-mutate-persist cycle around the pure placement engine and
pushes resolved rectangles to the window host. Every mutation runs under one
lock so concurrent callers in the same process cannot interleave a read with
another caller's write.

Engine failures are raised here as GridError subclasses; nothing is persisted
when an operation fails.
"""

import logging
import threading
from typing import Callable, Dict, List, Optional, Protocol, Tuple

from ..config import GridSettings
from ..errors import ErrorCode, GridError, NotFoundError, SessionError
from ..models.grid import CellSpan, GridConfig, GridState, Rect, WorkArea
from ..notation import format_position
from ..services import geometry, placement, reporter
from ..services.reporter import LayoutSummary
from .models import CanvasWindow, SessionState, generate_canvas_id, generate_window_id
from .persistence import SessionStore

logger = logging.getLogger(__name__)

DEFAULT_DESKTOP_NAME = "Canvas Session"


class WindowHost(Protocol):
    """Platform window host (virtual desktops, terminal windows)."""

    def get_work_area(self, monitor_index: int) -> WorkArea:
        """Usable region of a monitor."""
        ...

    def set_window_rect(self, window_id: str, rect: Rect) -> None:
        """Move and resize a window."""
        ...


class StaticWindowHost:
    """Window host with one fixed work area that records applied rectangles."""

    def __init__(self, work_area: WorkArea):
        self.work_area = work_area
        self.applied: Dict[str, Rect] = {}

    def get_work_area(self, monitor_index: int) -> WorkArea:
        return self.work_area

    def set_window_rect(self, window_id: str, rect: Rect) -> None:
        self.applied[window_id] = rect


class GridSession:
    """Serialized access to the persisted session and its grid."""

    def __init__(
        self,
        store: SessionStore,
        host: WindowHost,
        settings: Optional[GridSettings] = None,
    ):
        """
        Initialize grid session.

        Args:
            store: Session file store
            host: Window host used for work areas and window placement
            settings: Defaults for new grids (default: from environment)
        """
        self.store = store
        self.host = host
        self.settings = settings or GridSettings.from_environment()
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(
        self,
        name: str = DEFAULT_DESKTOP_NAME,
        desktop_index: int = 1,
        main_desktop_index: int = 0,
        config: Optional[GridConfig] = None,
    ) -> SessionState:
        """
        Create a new session record with an empty grid.

        Raises:
            SessionError: If a session is already running
        """
        with self._lock:
            if self.store.load() is not None:
                raise SessionError(
                    ErrorCode.SESSION_ALREADY_RUNNING,
                    "A canvas session is already running",
                    suggestion="Stop it first with 'canvas-grid reset'",
                )

            grid_config = config or self.settings.grid_config()
            self._require_valid_config(grid_config)

            session = SessionState(
                desktop_index=desktop_index,
                desktop_name=name,
                main_desktop_index=main_desktop_index,
                grid_state=placement.create_grid_state(desktop_index, grid_config),
            )
            logger.info(
                f"Started session '{name}' on desktop {desktop_index} "
                f"with {grid_config.rows}x{grid_config.columns} grid"
            )
            return self.store.save(session)

    def stop(self) -> None:
        """Discard the session record."""
        with self._lock:
            self.store.delete()
            logger.info("Session stopped")

    def current(self) -> SessionState:
        """Load the session or raise SessionError."""
        session = self.store.load()
        if session is None:
            raise SessionError(
                ErrorCode.NO_ACTIVE_SESSION,
                "No active session",
                suggestion="Start one with 'canvas-grid init'",
            )
        return session

    # ------------------------------------------------------------------
    # Windows
    # ------------------------------------------------------------------

    def add_window(
        self,
        canvas_kind: Optional[str] = None,
        window_id: Optional[str] = None,
        window_handle: int = 0,
        auto_place: bool = True,
    ) -> CanvasWindow:
        """
        Register a spawned window and optionally give it the first free cell.

        A full grid leaves the window registered but unplaced.
        """
        window_id = window_id or generate_window_id()

        def mutate(session: SessionState) -> SessionState:
            if session.find_window(window_id):
                raise SessionError(ErrorCode.DUPLICATE_WINDOW, f"Window already registered: {window_id}")

            window = CanvasWindow(
                id=window_id,
                canvas_id=generate_canvas_id(canvas_kind) if canvas_kind else None,
                canvas_kind=canvas_kind,
                window_handle=window_handle,
                title=f"Canvas: {window_id}",
                desktop_index=session.desktop_index,
            )
            session = session.model_copy(update={"windows": [*session.windows, window]})

            if auto_place:
                grid = self._grid(session)
                span = placement.find_available(grid)
                if span is None:
                    logger.warning(f"Grid is full; window {window_id} left unplaced")
                else:
                    session = self._with_grid(session, self._checked(placement.assign(window_id, span, grid)))
            return session

        session = self._update(mutate)
        self._apply_rect(session, window_id)
        return session.find_window(window_id)

    def close_window(self, window_id: str) -> None:
        """Forget a window and free its grid cells."""

        def mutate(session: SessionState) -> SessionState:
            if session.find_window(window_id) is None:
                raise NotFoundError(window_id, resource="Window")
            session = session.model_copy(
                update={"windows": [w for w in session.windows if w.id != window_id]}
            )
            return self._with_grid(session, placement.remove(window_id, self._grid(session)))

        self._update(mutate)

    def assign_canvas(self, window_id: str, canvas_kind: str) -> CanvasWindow:
        """Record that a window now hosts a canvas of the given kind."""

        def mutate(session: SessionState) -> SessionState:
            window = session.find_window(window_id)
            if window is None:
                raise NotFoundError(window_id, resource="Window")
            updated = window.model_copy(
                update={"canvas_kind": canvas_kind, "canvas_id": generate_canvas_id(canvas_kind)}
            )
            return session.model_copy(
                update={"windows": [updated if w.id == window_id else w for w in session.windows]}
            )

        return self._update(mutate).find_window(window_id)

    # ------------------------------------------------------------------
    # Grid
    # ------------------------------------------------------------------

    def configure_grid(self, config: GridConfig) -> Tuple[str, ...]:
        """
        Replace the grid configuration, keeping assignments that still fit.

        Returns:
            Window ids whose assignments were dropped
        """
        self._require_valid_config(config)
        dropped: Tuple[str, ...] = ()

        def mutate(session: SessionState) -> SessionState:
            nonlocal dropped
            result = placement.reconfigure(self._grid(session), config)
            dropped = result.dropped
            return self._with_grid(session, result.state)

        session = self._update(mutate)
        self._apply_all(session)
        return dropped

    def place(self, window_id: str, position: placement.Position) -> Rect:
        """
        Assign a window to a position and move it there.

        Args:
            window_id: Window identifier
            position: Position text or CellSpan

        Returns:
            Pixel rectangle applied to the window
        """

        def mutate(session: SessionState) -> SessionState:
            grid = self._grid(session)
            self._require_valid_config(grid.config)
            return self._with_grid(session, self._checked(placement.assign(window_id, position, grid)))

        session = self._update(mutate)
        return self._apply_rect(session, window_id)

    def auto_place(self, window_id: str, row_span: int = 1, column_span: int = 1) -> CellSpan:
        """Place a window in the first free span of the given size."""
        with self._lock:
            grid = self._grid(self.current())
            span = placement.find_available(grid, row_span, column_span)
            if span is None:
                raise GridError(
                    ErrorCode.NO_SPACE,
                    f"No free {row_span}x{column_span} span in {grid.config.rows}x{grid.config.columns} grid",
                    suggestion="Remove a window or enlarge the grid",
                )
            self.place(window_id, span)
            return span

    def unplace(self, window_id: str) -> None:
        """Drop a window's grid assignment (no-op if it has none)."""
        self._update(lambda session: self._with_grid(session, placement.remove(window_id, self._grid(session))))

    def swap(self, window_id_1: str, window_id_2: str) -> None:
        """Exchange two windows' cells and move both."""

        def mutate(session: SessionState) -> SessionState:
            grid = self._grid(session)
            return self._with_grid(session, self._checked(placement.swap(window_id_1, window_id_2, grid)))

        session = self._update(mutate)
        self._apply_rect(session, window_id_1)
        self._apply_rect(session, window_id_2)

    def position(self, window_id: str) -> Optional[CellSpan]:
        return placement.get_position(window_id, self._grid(self.current()))

    def find_available(self, row_span: int = 1, column_span: int = 1) -> Optional[CellSpan]:
        return placement.find_available(self._grid(self.current()), row_span, column_span)

    def window_rect(self, window_id: str) -> Rect:
        """Pixel rectangle for an assigned window."""
        grid = self._grid(self.current())
        rect = geometry.calculate_rect(window_id, grid, self._work_area(grid))
        if rect is None:
            raise NotFoundError(window_id)
        return rect

    def apply_layout(self) -> Dict[str, Rect]:
        """Move every assigned window to its cell."""
        return self._apply_all(self.current())

    def layout(self) -> LayoutSummary:
        session = self.current()
        grid = self._grid(session)
        return reporter.layout_summary(grid, self._work_area(grid), session.window_kinds())

    def visualize(self) -> str:
        session = self.current()
        return reporter.visualize(self._grid(session), session.window_names())

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _update(self, mutate: Callable[[SessionState], SessionState]) -> SessionState:
        with self._lock:
            session = self.current()
            return self.store.save(mutate(session))

    def _grid(self, session: SessionState) -> GridState:
        if session.grid_state is not None:
            return session.grid_state
        return placement.create_grid_state(session.desktop_index, self.settings.grid_config())

    @staticmethod
    def _with_grid(session: SessionState, grid: GridState) -> SessionState:
        return session.model_copy(update={"grid_state": grid})

    @staticmethod
    def _checked(result: placement.PlacementResult) -> GridState:
        if not result.success:
            raise result.error
        return result.state

    def _work_area(self, grid: GridState) -> WorkArea:
        return self.host.get_work_area(grid.config.monitor_index)

    def _require_valid_config(self, config: GridConfig) -> None:
        validation = geometry.validate_config(config, self.host.get_work_area(config.monitor_index))
        if not validation.valid:
            raise validation.error

    def _apply_rect(self, session: SessionState, window_id: str) -> Optional[Rect]:
        grid = self._grid(session)
        rect = geometry.calculate_rect(window_id, grid, self._work_area(grid))
        if rect is None:
            return None

        try:
            self.host.set_window_rect(window_id, rect)
        except Exception as e:
            logger.warning(f"Failed to move window {window_id} to {format_position(grid.find(window_id).cell_span)}: {e}")
        return rect

    def _apply_all(self, session: SessionState) -> Dict[str, Rect]:
        grid = self._grid(session)
        self._require_valid_config(grid.config)

        applied: Dict[str, Rect] = {}
        failed: List[str] = []
        for window_id in grid.window_ids:
            rect = geometry.calculate_rect(window_id, grid, self._work_area(grid))
            try:
                self.host.set_window_rect(window_id, rect)
                applied[window_id] = rect
            except Exception as e:
                logger.warning(f"Failed to move window {window_id}: {e}")
                failed.append(window_id)

        if failed:
            logger.warning(f"Layout applied with {len(failed)} failure(s): {', '.join(failed)}")
        else:
            logger.info(f"Layout applied to {len(applied)} window(s)")
        return applied
