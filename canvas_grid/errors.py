"""
Error handling for the canvas grid.

Placement and parsing operations return these errors as values inside their
result objects. The session layer and CLI raise them.
"""

from enum import Enum
from typing import Any, Dict, Literal, Optional


ErrorCategory = Literal[
    "config",
    "connection",
    "ipc",
    "session",
    "grid",
    "validation",
    "canvas",
]


class ErrorCode(Enum):
    """
    Error codes for the canvas grid.

    - 1000-1099: Position and layout errors
    - 1100-1199: Configuration errors
    - 1200-1299: Session errors
    - 1300-1399: Message transport errors
    """

    # Position and layout errors (1000-1099)
    PARSE_ERROR = 1000
    OUT_OF_BOUNDS = 1001
    OVERLAP = 1002
    WINDOW_NOT_FOUND = 1003
    NO_SPACE = 1004
    INVALID_WINDOW_ID = 1005

    # Configuration errors (1100-1199)
    INVALID_CONFIG = 1100
    DEGENERATE_GEOMETRY = 1101

    # Session errors (1200-1299)
    NO_ACTIVE_SESSION = 1200
    SESSION_ALREADY_RUNNING = 1201
    SESSION_WRITE_FAILED = 1202
    DUPLICATE_WINDOW = 1203

    # Message transport errors (1300-1399)
    INVALID_MESSAGE = 1300


def format_error(category: ErrorCategory, message: str) -> str:
    """Format: "[Canvas:<category>] <message>"."""
    return f"[Canvas:{category}] {message}"


class GridError(Exception):
    """Base exception for canvas grid errors."""

    category: ErrorCategory = "grid"

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        suggestion: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize grid error.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            suggestion: Suggested recovery action
            context: Additional context for debugging
        """
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.context = context or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert error to dictionary for JSON output.

        Returns:
            Error dictionary with code, message, suggestion, and context
        """
        result = {
            "code": self.code.value,
            "message": self.message
        }

        if self.suggestion:
            result["suggestion"] = self.suggestion

        if self.context:
            result["context"] = self.context

        return result

    def formatted(self) -> str:
        """Message with the "[Canvas:<category>]" prefix."""
        return format_error(self.category, self.message)


class ParseError(GridError):
    """Malformed position text."""

    def __init__(self, text: str, reason: str):
        super().__init__(
            code=ErrorCode.PARSE_ERROR,
            message=f"Invalid position '{text}': {reason}",
            suggestion="Use spreadsheet notation (A1, A1:B2) or coordinates (0,0 or 0,0:2x1)",
            context={"text": text, "reason": reason}
        )


class BoundsError(GridError):
    """Cell span extends outside the grid."""

    def __init__(self, reason: str, rows: int, columns: int):
        super().__init__(
            code=ErrorCode.OUT_OF_BOUNDS,
            message=f"Position out of bounds: {reason} (grid is {rows}x{columns})",
            suggestion="Choose a position inside the grid or enlarge the grid",
            context={"rows": rows, "columns": columns}
        )


class OverlapError(GridError):
    """Cell span collides with another window's assignment."""

    def __init__(self, position: str, other_window_id: str):
        super().__init__(
            code=ErrorCode.OVERLAP,
            message=f"Position {position} would overlap with window '{other_window_id}'",
            suggestion="Remove or move the other window first, or pick a free cell",
            context={"position": position, "window_id": other_window_id}
        )


class NotFoundError(GridError):
    """Operation referenced a window without an assignment or session entry."""

    def __init__(self, window_id: str, resource: str = "Grid assignment"):
        super().__init__(
            code=ErrorCode.WINDOW_NOT_FOUND,
            message=f"{resource} not found: {window_id}",
            context={"window_id": window_id}
        )


class WindowIdError(GridError):
    """Window identifier the grid cannot store."""

    def __init__(self, window_id: str):
        super().__init__(
            code=ErrorCode.INVALID_WINDOW_ID,
            message=f"Invalid window id {window_id!r}: must be a non-empty string",
            context={"window_id": window_id}
        )


class ConfigurationError(GridError):
    """Grid configuration cannot be laid out."""

    category: ErrorCategory = "config"

    def __init__(self, reason: str, code: ErrorCode = ErrorCode.INVALID_CONFIG):
        super().__init__(
            code=code,
            message=f"Invalid grid configuration: {reason}",
            suggestion="Reduce rows/columns, gaps or margins",
            context={"reason": reason}
        )


class SessionError(GridError):
    """Session lifecycle or persistence failure."""

    category: ErrorCategory = "session"

    def __init__(self, code: ErrorCode, message: str, suggestion: Optional[str] = None):
        super().__init__(code=code, message=message, suggestion=suggestion)


class MessageError(GridError):
    """Malformed controller/canvas message."""

    category: ErrorCategory = "ipc"

    def __init__(self, reason: str, line: Optional[str] = None):
        context = {"reason": reason}
        if line is not None:
            context["line"] = line[:200]
        super().__init__(
            code=ErrorCode.INVALID_MESSAGE,
            message=f"Invalid message: {reason}",
            context=context
        )
