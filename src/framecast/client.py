"""
Stream Probe Client
===================

Minimal blocking client for the event stream.

Opens the stream endpoint, parses SSE messages and decodes each frame's
PNG so callers can check what a dashboard actually receives. Only the
'sse' framing is understood.

Example:
    from framecast.client import iter_frames

    for frame in iter_frames("http://localhost:3000/events"):
        print(frame.sequence, frame.value, frame.width, frame.height)
"""

import json
import logging
import time
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Tuple

import requests

from framecast.render.decoder import ImageDecodeError, decode_png_b64


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SSEMessage:
    """One dispatched Server-Sent Events message."""

    event: str
    data: str
    id: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ReceivedFrame:
    """
    A frame as decoded on the client side.

    Attributes:
        sequence: SSE id of the frame
        value: Event token
        time: Event time label
        width: Decoded image width
        height: Decoded image height
        received_at: Local UNIX time the frame was parsed
    """

    sequence: int
    value: str
    time: str
    width: int
    height: int
    received_at: float


class StreamProtocolError(Exception):
    """Raised when the server response is not a usable event stream."""
    pass


def parse_sse(lines: Iterable[str]) -> Iterator[SSEMessage]:
    """
    Parse SSE lines into messages.

    Follows the EventSource rules that matter here: fields are
    `name: value`, comment lines start with ':', multiple data lines are
    joined with newlines, and a blank line dispatches the message.
    """
    event = "message"
    data_lines = []
    last_id: Optional[str] = None

    for raw in lines:
        line = raw.rstrip("\r")

        if line == "":
            if data_lines:
                yield SSEMessage(event=event, data="\n".join(data_lines), id=last_id)
            event = "message"
            data_lines = []
            continue

        if line.startswith(":"):
            continue

        name, _, value = line.partition(":")
        if value.startswith(" "):
            value = value[1:]

        if name == "event":
            event = value
        elif name == "data":
            data_lines.append(value)
        elif name == "id":
            last_id = value


def decode_message(message: SSEMessage) -> ReceivedFrame:
    """
    Decode a 'frame' message into a ReceivedFrame.

    Raises:
        StreamProtocolError: Malformed JSON or image payload
    """
    try:
        payload = json.loads(message.data)
        image = decode_png_b64(payload["image"])
        height, width = image.shape[:2]
        return ReceivedFrame(
            sequence=int(message.id) if message.id is not None else -1,
            value=str(payload["value"]),
            time=str(payload["time"]),
            width=width,
            height=height,
            received_at=time.time(),
        )
    except (json.JSONDecodeError, KeyError, TypeError, ValueError, ImageDecodeError) as e:
        raise StreamProtocolError(f"Invalid frame message (id={message.id}): {e}")


def iter_frames(
    url: str,
    session: Optional[requests.Session] = None,
    timeout: Tuple[float, float] = (5.0, 30.0),
) -> Iterator[ReceivedFrame]:
    """
    Connect to the stream and yield decoded frames until it ends.

    Args:
        url: Full URL of the stream endpoint
        session: Optional requests session to reuse
        timeout: (connect, read) timeouts; read must exceed the max interval

    Raises:
        requests.RequestException: Connection or HTTP errors
        StreamProtocolError: Not an event stream, or a malformed frame
    """
    http = session or requests.Session()
    with http.get(url, stream=True, timeout=timeout) as response:
        response.raise_for_status()

        content_type = response.headers.get("Content-Type", "")
        if not content_type.startswith("text/event-stream"):
            raise StreamProtocolError(f"Unexpected Content-Type: {content_type!r}")

        logger.info(f"Connected to {url}")
        for message in parse_sse(response.iter_lines(decode_unicode=True)):
            if message.event != "frame":
                logger.debug(f"Ignoring SSE event {message.event!r}")
                continue
            yield decode_message(message)
