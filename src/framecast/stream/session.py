"""
Stream Session
==============

Per-connection state machine driving periodic frame delivery.

Lifecycle:
    IDLE ──start()──> STREAMING ──close()──> CLOSED

Each tick:
    1. Generate a fresh Event
    2. Render it into a Frame
    3. Frame it and push the bytes into the session channel
    4. Re-arm with a newly sampled jittered delay

Design Rules:
    - At most one pending tick (one TimerHandle) per session
    - Ticks and close() run on the same event loop, so cancelling the
      timer and marking CLOSED happen in one step; no tick can fire after
    - A RenderError skips that tick only; the session keeps streaming
    - close() is idempotent
    - Sessions share no mutable state
"""

import asyncio
import itertools
import logging
from typing import AsyncIterator, Callable, Optional

from framecast.events import generate_event
from framecast.models.event import Event
from framecast.models.state import SessionState
from framecast.render import FrameRenderer, RenderError
from framecast.stream.channel import FrameChannel
from framecast.stream.framing import Framing, SSEFraming
from framecast.stream.jitter import JitterInterval


logger = logging.getLogger(__name__)


_session_ids = itertools.count(1)


class SessionMetrics:
    """Per-session counters."""

    __slots__ = (
        "ticks",
        "frames_queued",
        "frames_sent",
        "bytes_sent",
        "render_errors",
    )

    def __init__(self) -> None:
        self.ticks: int = 0
        self.frames_queued: int = 0
        self.frames_sent: int = 0
        self.bytes_sent: int = 0
        self.render_errors: int = 0

    def to_dict(self) -> dict:
        """Export metrics as dict."""
        return {
            "ticks": self.ticks,
            "frames_queued": self.frames_queued,
            "frames_sent": self.frames_sent,
            "bytes_sent": self.bytes_sent,
            "render_errors": self.render_errors,
        }


class StreamSession:
    """
    One client's event stream.

    Owns its timer handle and its output channel exclusively. The
    dispatcher drains the session with `async for chunk in session`
    and calls close() when the connection goes away.

    Attributes:
        session_id: Process-unique session number
        renderer: Renderer producing frames for this session
        framing: Wire encoder for rendered frames
        interval: Jittered delay source
        metrics: Per-session counters
        last_delay_ms: Most recently sampled tick delay

    Example:
        session = StreamSession(
            renderer=FrameRenderer(600, 300),
            framing=SSEFraming(),
            interval=JitterInterval(3000, 10000),
        )
        session.start()
        try:
            async for chunk in session:
                await write(chunk)
        finally:
            session.close()
    """

    def __init__(
        self,
        renderer: Optional[FrameRenderer] = None,
        framing: Optional[Framing] = None,
        interval: Optional[JitterInterval] = None,
        channel_size: int = 8,
        event_factory: Callable[[], Event] = generate_event,
    ) -> None:
        """
        Initialize stream session.

        Args:
            renderer: Frame renderer (defaults to 600x300)
            framing: Wire encoder (defaults to SSE)
            interval: Delay source (defaults to 3000..10000 ms)
            channel_size: Frames buffered before dropping oldest
            event_factory: Callable producing the event for each tick
        """
        self.session_id = next(_session_ids)
        self.renderer = renderer or FrameRenderer()
        self.framing = framing or SSEFraming()
        self.interval = interval or JitterInterval()
        self._event_factory = event_factory

        self._state = SessionState.IDLE
        self._channel = FrameChannel(maxsize=channel_size)
        self._timer: Optional[asyncio.TimerHandle] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None

        self.metrics = SessionMetrics()
        self.last_delay_ms: Optional[int] = None

    @property
    def state(self) -> SessionState:
        """Current lifecycle state."""
        return self._state

    @property
    def closed(self) -> bool:
        return self._state is SessionState.CLOSED

    @property
    def pending(self) -> bool:
        """Whether a tick is currently scheduled."""
        return self._timer is not None

    @property
    def next_fire_time(self) -> Optional[float]:
        """Loop time at which the pending tick fires, if any."""
        if self._timer is None:
            return None
        return self._timer.when()

    @property
    def channel(self) -> FrameChannel:
        return self._channel

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def start(self) -> None:
        """
        Begin streaming and arm the first tick.

        Must be called from within the running event loop.

        Raises:
            RuntimeError: If the session is not IDLE
        """
        if self._state is not SessionState.IDLE:
            raise RuntimeError(
                f"Session {self.session_id} cannot start from {self._state.value}"
            )

        self._loop = asyncio.get_running_loop()
        self._state = SessionState.STREAMING
        logger.info(
            f"Session {self.session_id} streaming: "
            f"{self.renderer.width}x{self.renderer.height}, "
            f"framing={self.framing.name}, interval={self.interval}"
        )
        self._arm()

    def close(self, reason: str = "closed") -> bool:
        """
        Tear the session down.

        Cancels the pending tick and releases the channel in one step.
        Calling close() on a CLOSED session is a no-op.

        Args:
            reason: Short description for the log line

        Returns:
            True if this call closed the session, False if already closed.
        """
        if self._state is SessionState.CLOSED:
            return False

        self._state = SessionState.CLOSED
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        discarded = self._channel.close()

        logger.info(
            f"Session {self.session_id} closed ({reason}): "
            f"ticks={self.metrics.ticks}, "
            f"sent={self.metrics.frames_sent}, "
            f"render_errors={self.metrics.render_errors}, "
            f"discarded={discarded}"
        )
        return True

    # -------------------------------------------------------------------------
    # Scheduling
    # -------------------------------------------------------------------------

    def _arm(self) -> None:
        """Schedule the next tick with a freshly sampled delay."""
        delay_ms = self.interval.sample()
        self.last_delay_ms = delay_ms
        self._timer = self._loop.call_later(delay_ms / 1000.0, self._tick)

    def _tick(self) -> None:
        """Generate, render, frame, enqueue, re-arm."""
        self._timer = None
        if self._state is not SessionState.STREAMING:
            return

        self.metrics.ticks += 1
        try:
            event = self._event_factory()
            frame = self.renderer.render(event, sequence=self.metrics.ticks)
        except RenderError as e:
            self.metrics.render_errors += 1
            logger.error(
                f"Render error (session={self.session_id}, "
                f"tick={self.metrics.ticks}): {e}"
            )
        except Exception as e:
            logger.exception(
                f"Tick failed (session={self.session_id}, "
                f"tick={self.metrics.ticks}): {e}"
            )
            self.close("tick failure")
            return
        else:
            self._channel.put_nowait(self.framing.encode(frame))
            self.metrics.frames_queued += 1
            logger.debug(f"Session {self.session_id} queued {frame!r}")

        self._arm()

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------

    async def next_chunk(self) -> Optional[bytes]:
        """
        Wait for the next framed chunk.

        Returns:
            Chunk bytes, or None once the session is closed.
        """
        return await self._channel.get()

    async def __aiter__(self) -> AsyncIterator[bytes]:
        while True:
            chunk = await self._channel.get()
            if chunk is None:
                return
            yield chunk
            self.metrics.frames_sent += 1
            self.metrics.bytes_sent += len(chunk)

    def to_dict(self) -> dict:
        """Export session snapshot for the metrics endpoint."""
        return {
            "session_id": self.session_id,
            "state": self._state.value,
            "last_delay_ms": self.last_delay_ms,
            "channel": self._channel.metrics(),
            **self.metrics.to_dict(),
        }
