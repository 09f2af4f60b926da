"""
Frame Framing
=============

Turns rendered frames into the bytes written to the open response.

Two wire formats are supported:

    sse (default):
        id: 3
        event: frame
        data: {"value": "...", "time": "...", "width": 600, "height": 300,
               "mime": "image/png", "image": "<base64 PNG>"}

    legacy:
        HTTP/1.1 200 OK\\r\\n
        Content-Type: image/png\\r\\n
        Content-Length: <n>\\r\\n
        \\r\\n
        <PNG bytes>

The legacy format reproduces the original dashboard's behaviour of writing a
complete image response per tick under a text/event-stream header. It is
not valid SSE and exists only for clients built against that behaviour.
"""

import base64
import json
from typing import Dict, Protocol, Type

from framecast.models.frame import Frame


STREAM_MEDIA_TYPE = "text/event-stream"

# Content-Type is set explicitly so no charset suffix is appended
STREAM_HEADERS: Dict[str, str] = {
    "Content-Type": STREAM_MEDIA_TYPE,
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


class Framing(Protocol):
    """Protocol for wire encoders."""

    name: str

    def encode(self, frame: Frame) -> bytes:
        """Encode a frame as a chunk of the response body."""
        ...


class SSEFraming:
    """Server-Sent Events framing with a base64 PNG payload."""

    name = "sse"
    event_name = "frame"

    def encode(self, frame: Frame) -> bytes:
        payload = {
            "value": frame.event.value,
            "time": frame.event.time,
            "width": frame.width,
            "height": frame.height,
            "mime": "image/png",
            "image": base64.b64encode(frame.png).decode("ascii"),
        }
        chunk = (
            f"id: {frame.sequence}\n"
            f"event: {self.event_name}\n"
            f"data: {json.dumps(payload, separators=(',', ':'))}\n\n"
        )
        return chunk.encode("utf-8")


class LegacyFraming:
    """Per-tick embedded `200 image/png` response, as the original server wrote."""

    name = "legacy"

    def encode(self, frame: Frame) -> bytes:
        head = (
            "HTTP/1.1 200 OK\r\n"
            "Content-Type: image/png\r\n"
            f"Content-Length: {len(frame.png)}\r\n"
            "\r\n"
        )
        return head.encode("ascii") + frame.png


_FRAMINGS: Dict[str, Type] = {
    SSEFraming.name: SSEFraming,
    LegacyFraming.name: LegacyFraming,
}


def get_framing(name: str) -> Framing:
    """
    Look up a framing by name.

    Raises:
        ValueError: Unknown framing name
    """
    try:
        return _FRAMINGS[name]()
    except KeyError:
        raise ValueError(
            f"Unknown framing: {name!r} (expected one of {sorted(_FRAMINGS)})"
        )
