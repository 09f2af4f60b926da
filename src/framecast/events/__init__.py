"""
Events Module
=============

Synthetic event generation for the dashboard stream.

This module provides:
    - generate_event: Build a fresh Event (token + current time)
    - generate_token: Random 11-character token
    - current_time: Wall-clock time as HH:MM:SS
"""

from framecast.events.generator import current_time, generate_event, generate_token


__all__ = [
    "generate_event",
    "generate_token",
    "current_time",
]
