"""
Controller <-> Canvas Messages

Line-delimited JSON messages exchanged over a canvas's local socket:
one JSON object per line, discriminated by "type".

Controller -> canvas: close, update, ping, getSelection, getContent
Canvas -> controller: ready, selected, cancelled, error, pong, selection, content
"""

import json
import tempfile
from pathlib import Path
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from ..errors import MessageError


# ============================================================================
# Controller -> Canvas
# ============================================================================

class CloseMessage(BaseModel):
    type: Literal["close"] = "close"


class UpdateMessage(BaseModel):
    type: Literal["update"] = "update"
    config: Any = None


class PingMessage(BaseModel):
    type: Literal["ping"] = "ping"


class GetSelectionMessage(BaseModel):
    type: Literal["getSelection"] = "getSelection"


class GetContentMessage(BaseModel):
    type: Literal["getContent"] = "getContent"


ControllerMessage = Annotated[
    Union[CloseMessage, UpdateMessage, PingMessage, GetSelectionMessage, GetContentMessage],
    Field(discriminator="type"),
]


# ============================================================================
# Canvas -> Controller
# ============================================================================

class ReadyMessage(BaseModel):
    type: Literal["ready"] = "ready"
    scenario: str


class SelectedMessage(BaseModel):
    type: Literal["selected"] = "selected"
    data: Any = None


class CancelledMessage(BaseModel):
    type: Literal["cancelled"] = "cancelled"
    reason: Optional[str] = None


class ErrorMessage(BaseModel):
    type: Literal["error"] = "error"
    message: str


class PongMessage(BaseModel):
    type: Literal["pong"] = "pong"


class TextSelection(BaseModel):
    selected_text: str = Field(..., alias="selectedText")
    start_offset: int = Field(..., ge=0, alias="startOffset")
    end_offset: int = Field(..., ge=0, alias="endOffset")

    model_config = {"populate_by_name": True}


class SelectionMessage(BaseModel):
    type: Literal["selection"] = "selection"
    data: Optional[TextSelection] = None


class DocumentContent(BaseModel):
    content: str
    cursor_position: int = Field(..., ge=0, alias="cursorPosition")

    model_config = {"populate_by_name": True}


class ContentMessage(BaseModel):
    type: Literal["content"] = "content"
    data: DocumentContent


CanvasMessage = Annotated[
    Union[
        ReadyMessage,
        SelectedMessage,
        CancelledMessage,
        ErrorMessage,
        PongMessage,
        SelectionMessage,
        ContentMessage,
    ],
    Field(discriminator="type"),
]

_controller_adapter = TypeAdapter(ControllerMessage)
_canvas_adapter = TypeAdapter(CanvasMessage)

# Messages that end a canvas interaction
TERMINAL_MESSAGE_TYPES = frozenset({"selected", "cancelled", "error"})


def socket_path(canvas_id: str) -> Path:
    """Socket path for a canvas instance."""
    return Path(tempfile.gettempdir()) / f"canvas-{canvas_id}.sock"


def encode_message(message: BaseModel) -> bytes:
    """Serialise a message as one JSON line."""
    return message.model_dump_json(by_alias=True).encode() + b"\n"


def _decode(adapter: TypeAdapter, line: Union[str, bytes]):
    text = line.decode() if isinstance(line, bytes) else line
    text = text.strip()
    if not text:
        raise MessageError("empty line")

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise MessageError(f"not JSON ({e.msg})", text) from e

    if not isinstance(payload, dict) or "type" not in payload:
        raise MessageError("missing 'type' field", text)

    try:
        return adapter.validate_python(payload)
    except ValidationError as e:
        raise MessageError(f"unexpected {payload['type']!r} message: {e.error_count()} error(s)", text) from e


def decode_canvas_message(line: Union[str, bytes]):
    """
    Parse one line sent by a canvas.

    Raises:
        MessageError: If the line is not a known canvas message
    """
    return _decode(_canvas_adapter, line)


def decode_controller_message(line: Union[str, bytes]):
    """
    Parse one line sent by the controller.

    Raises:
        MessageError: If the line is not a known controller message
    """
    return _decode(_controller_adapter, line)
