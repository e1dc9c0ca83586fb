"""Tests for controller/canvas line-delimited JSON messages."""

import json
import tempfile
from pathlib import Path

import pytest

from canvas_grid.errors import ErrorCode, MessageError
from canvas_grid.ipc.messages import (
    CancelledMessage,
    CloseMessage,
    ContentMessage,
    DocumentContent,
    ReadyMessage,
    SelectedMessage,
    SelectionMessage,
    TERMINAL_MESSAGE_TYPES,
    UpdateMessage,
    decode_canvas_message,
    decode_controller_message,
    encode_message,
    socket_path,
)


class TestEncode:
    """Tests for encode_message."""

    def test_one_line(self):
        data = encode_message(CloseMessage())

        assert data.endswith(b"\n")
        assert data.count(b"\n") == 1
        assert json.loads(data) == {"type": "close"}

    def test_camel_case_fields(self):
        message = ContentMessage(data=DocumentContent(content="hello", cursor_position=3))

        assert json.loads(encode_message(message)) == {
            "type": "content",
            "data": {"content": "hello", "cursorPosition": 3},
        }

    def test_update_carries_config(self):
        data = json.loads(encode_message(UpdateMessage(config={"theme": "dark"})))

        assert data == {"type": "update", "config": {"theme": "dark"}}


class TestDecodeCanvasMessage:
    """Tests for messages sent by canvases."""

    def test_ready(self):
        message = decode_canvas_message('{"type": "ready", "scenario": "display"}\n')

        assert isinstance(message, ReadyMessage)
        assert message.scenario == "display"

    def test_selected_any_payload(self):
        message = decode_canvas_message(b'{"type": "selected", "data": {"slot": "10:00"}}')

        assert isinstance(message, SelectedMessage)
        assert message.data == {"slot": "10:00"}

    def test_cancelled_reason_optional(self):
        message = decode_canvas_message('{"type": "cancelled"}')

        assert isinstance(message, CancelledMessage)
        assert message.reason is None

    def test_selection_camel_case(self):
        message = decode_canvas_message(
            '{"type": "selection", "data": {"selectedText": "abc", "startOffset": 1, "endOffset": 4}}'
        )

        assert isinstance(message, SelectionMessage)
        assert message.data.selected_text == "abc"
        assert message.data.end_offset == 4

    def test_selection_empty(self):
        assert decode_canvas_message('{"type": "selection", "data": null}').data is None

    def test_controller_message_rejected(self):
        with pytest.raises(MessageError):
            decode_canvas_message('{"type": "close"}')

    @pytest.mark.parametrize("line", [
        "",
        "   \n",
        "not json",
        "[1, 2]",
        '{"scenario": "display"}',
        '{"type": "unknown"}',
        '{"type": "ready"}',
        '{"type": "content", "data": {"content": "x", "cursorPosition": -1}}',
    ])
    def test_invalid(self, line):
        with pytest.raises(MessageError) as exc_info:
            decode_canvas_message(line)
        assert exc_info.value.code == ErrorCode.INVALID_MESSAGE

    def test_terminal_types(self):
        assert TERMINAL_MESSAGE_TYPES == {"selected", "cancelled", "error"}


class TestDecodeControllerMessage:
    """Tests for messages sent by the controller."""

    @pytest.mark.parametrize("message_type", ["close", "ping", "getSelection", "getContent"])
    def test_simple_messages(self, message_type):
        assert decode_controller_message(json.dumps({"type": message_type})).type == message_type

    def test_round_trip(self):
        original = UpdateMessage(config={"rows": 3})

        assert decode_controller_message(encode_message(original)) == original

    def test_canvas_message_rejected(self):
        with pytest.raises(MessageError):
            decode_controller_message('{"type": "pong"}')


def test_socket_path():
    assert socket_path("calendar-1") == Path(tempfile.gettempdir()) / "canvas-calendar-1.sock"
