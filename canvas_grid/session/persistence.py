"""
Session Persistence

Saves and loads the canvas session record as JSON. The file lives in the
session directory from GridSettings (default: the system temp dir).
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from ..errors import ErrorCode, SessionError
from ..models.grid import utc_now
from .models import SessionState

logger = logging.getLogger(__name__)


class SessionStore:
    """
    Reads and writes one session file.

    A missing file means no session. An unreadable or corrupted file is
    logged and also treated as no session.
    """

    def __init__(self, path: Path):
        """
        Initialize session store.

        Args:
            path: Session file path (e.g. /tmp/canvas-session.json)
        """
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> Optional[SessionState]:
        """
        Load the session record.

        Returns:
            SessionState or None if there is no usable session file
        """
        if not self.path.exists():
            return None

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            return SessionState.model_validate(data)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Failed to load session from {self.path}: {e}")
            return None

    def save(self, state: SessionState) -> SessionState:
        """
        Persist the session record, stamping updated_at.

        The file is written to a temporary sibling and renamed into place.

        Returns:
            The stamped SessionState that was written

        Raises:
            SessionError: If the file cannot be written
        """
        stamped = state.model_copy(update={"updated_at": utc_now()})
        payload = stamped.model_dump_json(indent=2)

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, 'w', encoding='utf-8') as f:
                    f.write(payload)
                os.replace(tmp_path, self.path)
            except BaseException:
                Path(tmp_path).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise SessionError(
                ErrorCode.SESSION_WRITE_FAILED,
                f"Failed to save session ({self.path}): {e}",
                suggestion="Check CANVAS_SESSION_DIR exists and is writable",
            ) from e

        logger.info(
            f"Saved session: {self.path} "
            f"({len(stamped.windows)} windows, "
            f"{len(stamped.grid_state.assignments) if stamped.grid_state else 0} grid assignments)"
        )
        return stamped

    def delete(self) -> None:
        """Remove the session file if present."""
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Failed to delete session file {self.path}: {e}")
