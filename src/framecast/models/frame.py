"""
Frame Data Model
================

Rendered frame representation passed from the renderer to a stream session.

Design Rules:
    - Produced by FrameRenderer, consumed once by the session that owns it
    - Never cached or reused
    - Carries the event it was rendered from for SSE metadata
"""

from dataclasses import dataclass

from framecast.models.event import Event


@dataclass(frozen=True, slots=True)
class Frame:
    """
    One rendered dashboard frame.

    Attributes:
        sequence: Per-session tick counter (1-based)
        event: Event drawn into the image
        width: Image width in pixels
        height: Image height in pixels
        background: Sampled grayscale background intensity [0, 255]
        png: Encoded PNG bytes
    """

    sequence: int
    event: Event
    width: int
    height: int
    background: int
    png: bytes

    def __repr__(self) -> str:
        """Compact repr that doesn't dump the full image."""
        return (
            f"Frame(sequence={self.sequence}, "
            f"event={self.event}, "
            f"size={self.width}x{self.height}, "
            f"bytes={len(self.png)})"
        )
