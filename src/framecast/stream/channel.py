"""
Frame Channel
=============

Bounded async queue between a session's timer callback and the
response body that drains it.

Design Rules:
    - Fixed maximum size (drops oldest on overflow)
    - Non-blocking put, callable from loop callbacks
    - close() releases pending chunks and wakes the reader with end-of-stream
    - Nothing is accepted once closed
"""

import asyncio
import logging
from typing import Optional


logger = logging.getLogger(__name__)


# End-of-stream marker, never exposed to callers
_EOS = object()


class FrameChannel:
    """
    Async-safe bounded queue for framed chunks.

    Uses a drop-oldest policy when full so a slow client cannot grow
    memory without bound.

    Attributes:
        maxsize: Maximum number of chunks to hold
        dropped_count: Number of chunks dropped due to overflow
        closed: Whether the channel has been released

    Example:
        channel = FrameChannel(maxsize=8)

        # Producer (timer callback)
        channel.put_nowait(chunk)

        # Consumer (response body)
        chunk = await channel.get()   # None once closed
    """

    def __init__(self, maxsize: int = 8) -> None:
        """
        Initialize frame channel.

        Args:
            maxsize: Maximum chunks to hold. Must be >= 1.
        """
        if maxsize < 1:
            raise ValueError("maxsize must be >= 1")

        self._maxsize = maxsize
        # One extra slot so the end-of-stream marker always fits
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize + 1)
        self._closed: bool = False
        self._dropped_count: int = 0
        self._total_put: int = 0

    @property
    def maxsize(self) -> int:
        """Maximum channel size."""
        return self._maxsize

    @property
    def size(self) -> int:
        """Current number of chunks waiting."""
        if self._closed:
            return 0
        return self._queue.qsize()

    @property
    def closed(self) -> bool:
        """Whether the channel has been released."""
        return self._closed

    @property
    def dropped_count(self) -> int:
        """Number of chunks dropped due to overflow."""
        return self._dropped_count

    @property
    def total_put(self) -> int:
        """Total chunks ever accepted."""
        return self._total_put

    def put_nowait(self, chunk: bytes) -> bool:
        """
        Add a chunk, dropping the oldest if full.

        Args:
            chunk: Framed bytes to deliver

        Returns:
            True if added without dropping, False if the channel is
            closed or the oldest chunk was dropped to make room.
        """
        if self._closed:
            logger.debug("Channel closed, chunk discarded")
            return False

        self._total_put += 1
        dropped = False

        if self._queue.qsize() >= self._maxsize:
            try:
                self._queue.get_nowait()
                self._dropped_count += 1
                dropped = True
                logger.warning(
                    f"Channel full, dropped oldest frame. "
                    f"Total dropped: {self._dropped_count}"
                )
            except asyncio.QueueEmpty:
                pass

        self._queue.put_nowait(chunk)
        return not dropped

    async def get(self) -> Optional[bytes]:
        """
        Wait for the next chunk.

        Returns:
            Next chunk, or None once the channel is closed.
        """
        if self._closed:
            return None

        item = await self._queue.get()
        if item is _EOS:
            return None
        return item

    def close(self) -> int:
        """
        Release the channel.

        Discards pending chunks and wakes any waiting reader.
        Safe to call more than once.

        Returns:
            Number of chunks discarded.
        """
        if self._closed:
            return 0

        self._closed = True
        cleared = 0
        while True:
            try:
                self._queue.get_nowait()
                cleared += 1
            except asyncio.QueueEmpty:
                break

        self._queue.put_nowait(_EOS)
        return cleared

    def metrics(self) -> dict:
        """
        Get channel metrics for observability.

        Returns:
            Dict with size, maxsize, dropped_count, total_put, closed
        """
        return {
            "size": self.size,
            "maxsize": self._maxsize,
            "dropped_count": self._dropped_count,
            "total_put": self._total_put,
            "closed": self._closed,
        }
