"""
Canvas Session Models

Persisted record of a canvas session: the virtual desktop it owns, the
terminal windows spawned on it, and the grid layout those windows follow.
"""

import random
import string
import time
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ..models.grid import GridState, utc_now

_BASE36 = string.digits + string.ascii_lowercase


def _base36(n: int) -> str:
    if n == 0:
        return "0"
    digits = []
    while n:
        n, remainder = divmod(n, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits))


def _random_suffix(length: int) -> str:
    return "".join(random.choices(_BASE36, k=length))


def generate_window_id() -> str:
    """Unique window id, e.g. "win-lq3x8k2a-4f9z"."""
    return f"win-{_base36(int(time.time() * 1000))}-{_random_suffix(4)}"


def generate_canvas_id(kind: str) -> str:
    """Unique canvas instance id, e.g. "calendar-lq3x8k2a-abc123"."""
    return f"{kind}-{_base36(int(time.time() * 1000))}-{_random_suffix(6)}"


class CanvasWindow(BaseModel):
    """Terminal window hosting (at most) one canvas."""

    id: str = Field(..., description="Session-unique window id")
    canvas_id: Optional[str] = Field(None, description="Canvas instance id")
    canvas_kind: Optional[str] = Field(None, description="calendar, document, flight, ...")
    window_handle: int = Field(0, description="Host window handle")
    title: str = Field(..., description="Window title used for handle lookup")
    desktop_index: int = Field(-1, description="Virtual desktop index (-1 = not moved yet)")


class SessionState(BaseModel):
    """Durable session record."""

    desktop_index: int = Field(..., description="Canvas desktop index")
    desktop_name: str = Field("Canvas Session", description="Canvas desktop name")
    main_desktop_index: int = Field(0, description="Desktop to return to on stop")
    windows: List[CanvasWindow] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    grid_state: Optional[GridState] = Field(None, description="Grid layout, once configured")

    def find_window(self, window_id: str) -> Optional[CanvasWindow]:
        for window in self.windows:
            if window.id == window_id:
                return window
        return None

    def window_kinds(self) -> Dict[str, Optional[str]]:
        """window id -> canvas kind lookup for layout reports."""
        return {w.id: w.canvas_kind for w in self.windows}

    def window_names(self) -> Dict[str, Optional[str]]:
        """window id -> short display name (canvas kind when hosting one)."""
        return {w.id: w.canvas_kind for w in self.windows if w.canvas_kind}
