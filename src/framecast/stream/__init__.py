"""
Stream Module
=============

Per-connection event streaming.

This module provides the delivery loop of the dashboard:
    - StreamSession: IDLE → STREAMING → CLOSED state machine with a
      jittered, self re-arming timer
    - FrameChannel: Bounded queue between the timer and the response body
    - JitterInterval: Fresh uniform delay per tick
    - SSEFraming / LegacyFraming: Wire encoders
    - SessionRegistry: Live session bookkeeping for metrics and shutdown

Example:
    from framecast.stream import StreamSession

    session = StreamSession()
    session.start()
    async for chunk in session:
        await send(chunk)
"""

from framecast.stream.channel import FrameChannel
from framecast.stream.framing import (
    STREAM_HEADERS,
    STREAM_MEDIA_TYPE,
    Framing,
    LegacyFraming,
    SSEFraming,
    get_framing,
)
from framecast.stream.jitter import JitterInterval
from framecast.stream.registry import SessionRegistry
from framecast.stream.session import SessionMetrics, StreamSession


__all__ = [
    "FrameChannel",
    "STREAM_HEADERS",
    "STREAM_MEDIA_TYPE",
    "Framing",
    "LegacyFraming",
    "SSEFraming",
    "get_framing",
    "JitterInterval",
    "SessionRegistry",
    "SessionMetrics",
    "StreamSession",
]
