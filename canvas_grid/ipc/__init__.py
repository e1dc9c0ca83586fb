"""Line-delimited JSON messages between the controller and canvases."""

from .messages import (
    CanvasMessage,
    ControllerMessage,
    TERMINAL_MESSAGE_TYPES,
    decode_canvas_message,
    decode_controller_message,
    encode_message,
    socket_path,
)

__all__ = [
    "CanvasMessage",
    "ControllerMessage",
    "TERMINAL_MESSAGE_TYPES",
    "decode_canvas_message",
    "decode_controller_message",
    "encode_message",
    "socket_path",
]
