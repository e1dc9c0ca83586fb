"""Canvas session record, persistence and grid session manager."""

from .manager import GridSession, StaticWindowHost, WindowHost
from .models import CanvasWindow, SessionState, generate_canvas_id, generate_window_id
from .persistence import SessionStore

__all__ = [
    "CanvasWindow",
    "GridSession",
    "SessionState",
    "SessionStore",
    "StaticWindowHost",
    "WindowHost",
    "generate_canvas_id",
    "generate_window_id",
]
