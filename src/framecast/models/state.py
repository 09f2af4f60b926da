"""
Session State Model
===================

Lifecycle states for a stream session.

Transitions:
    IDLE → STREAMING:  start() arms the first tick
    STREAMING → CLOSED: client disconnect, transport failure or shutdown
    IDLE → CLOSED:      session torn down before it ever started

CLOSED is terminal. No transition leaves it.
"""

from enum import Enum


class SessionState(str, Enum):
    """
    Discrete states of a stream session.

    Attributes:
        IDLE: Created, no tick armed yet
        STREAMING: A tick is pending or running
        CLOSED: Timer cancelled, channel released, no further writes
    """

    IDLE = "IDLE"
    STREAMING = "STREAMING"
    CLOSED = "CLOSED"
