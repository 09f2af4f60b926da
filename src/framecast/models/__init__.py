"""
Data Models
===========

Typed models shared across the Framecast server.

Models:
    Event:
        - Event: One synthetic data point (token + wall-clock time)

    Frame:
        - Frame: Rendered PNG plus the metadata it was rendered from

    State:
        - SessionState: Lifecycle of a stream session (IDLE, STREAMING, CLOSED)
"""

from framecast.models.event import Event, TIME_PATTERN, VALUE_PATTERN
from framecast.models.frame import Frame
from framecast.models.state import SessionState

__all__ = [
    # Event
    "Event",
    "VALUE_PATTERN",
    "TIME_PATTERN",
    # Frame
    "Frame",
    # State
    "SessionState",
]
