"""
Framecast Main Application
==========================

FastAPI entry point for the live-dashboard server.

Endpoints:
    GET  /events  - Event stream (one StreamSession per connection)
    GET  /health  - Liveness probe
    GET  /metrics - Session counters
    GET  /{path}  - Static assets ('/' serves index.html), 404 on miss
"""

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.responses import (
    JSONResponse,
    Response,
    StreamingResponse,
)

from framecast.assets import NOT_FOUND_BODY, content_type_for, resolve_asset
from framecast.config import Settings, settings as default_settings
from framecast.render import FrameRenderer
from framecast.stream import (
    STREAM_HEADERS,
    JitterInterval,
    SessionRegistry,
    StreamSession,
    get_framing,
)


logger = logging.getLogger(__name__)


def _not_found() -> Response:
    return Response(
        content=NOT_FOUND_BODY,
        status_code=404,
        headers={"Content-Type": "text/plain"},
    )


# =============================================================================
# Session Factory
# =============================================================================

def create_session(config: Settings) -> StreamSession:
    """Build a stream session from settings."""
    renderer = FrameRenderer(
        width=config.stream.width,
        height=config.stream.height,
        font_scale=config.render.font_scale,
        thickness=config.render.thickness,
        max_dimension=config.render.max_dimension,
    )
    return StreamSession(
        renderer=renderer,
        framing=get_framing(config.stream.framing),
        interval=JitterInterval(
            config.stream.min_interval_ms,
            config.stream.max_interval_ms,
        ),
        channel_size=config.stream.channel_size,
    )


async def _close_on_disconnect(request: Request, session: StreamSession) -> None:
    """Close the session as soon as the client goes away."""
    while not session.closed:
        message = await request.receive()
        if message["type"] == "http.disconnect":
            session.close("client disconnected")
            return


async def stream_body(
    request: Request,
    session: StreamSession,
    registry: SessionRegistry,
) -> AsyncIterator[bytes]:
    """
    Response body for one streaming connection.

    Headers are already on the wire when the first iteration runs,
    so starting the session here arms the first tick after them.
    """
    session.start()
    watcher = asyncio.create_task(
        _close_on_disconnect(request, session),
        name=f"session-{session.session_id}-disconnect",
    )
    try:
        async for chunk in session:
            yield chunk
    finally:
        session.close("stream ended")
        watcher.cancel()
        registry.release(session)


# =============================================================================
# Application Factory
# =============================================================================

def create_app(config: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Settings to use. Defaults to the global settings.
    """
    config = config or default_settings
    static_root = Path(config.static.root)
    registry = SessionRegistry()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Application lifespan: close live sessions on shutdown."""
        app.state.startup_time = time.time()
        logger.info(f"Starting {config.app.name} {config.app.version}")
        logger.info(f"Static root: {static_root}")
        logger.info(
            f"Stream path: {config.stream.path} "
            f"({config.stream.width}x{config.stream.height}, "
            f"{config.stream.min_interval_ms}-{config.stream.max_interval_ms}ms, "
            f"framing={config.stream.framing})"
        )

        yield

        logger.info("Shutting down gracefully...")
        registry.close_all("shutdown")
        logger.info("Shutdown complete")

    app = FastAPI(
        title="Framecast",
        description="Live dashboard server streaming rendered event frames",
        version=config.app.version,
        lifespan=lifespan,
    )
    app.state.settings = config
    app.state.sessions = registry
    app.state.startup_time = time.time()

    # -------------------------------------------------------------------------
    # Stream endpoint
    # -------------------------------------------------------------------------

    @app.get(config.stream.path)
    async def events(request: Request) -> StreamingResponse:
        """Open a stream session for this client."""
        session = create_session(config)
        registry.add(session)
        logger.info(
            f"Session {session.session_id} opened "
            f"(client={request.client.host if request.client else 'unknown'}, "
            f"active={len(registry)})"
        )
        return StreamingResponse(
            stream_body(request, session, registry),
            headers=STREAM_HEADERS,
        )

    # -------------------------------------------------------------------------
    # Operational endpoints
    # -------------------------------------------------------------------------

    @app.get("/health")
    async def health() -> JSONResponse:
        """Liveness probe. Always 200 while the process is serving."""
        return JSONResponse({
            "status": "healthy",
            "uptime_seconds": round(time.time() - app.state.startup_time, 1),
        })

    @app.get("/metrics")
    async def metrics() -> JSONResponse:
        """Session counters for observability."""
        return JSONResponse({
            "uptime_seconds": round(time.time() - app.state.startup_time, 1),
            "framing": config.stream.framing,
            **registry.metrics(),
            "sessions": [s.to_dict() for s in registry.active],
        })

    # -------------------------------------------------------------------------
    # Static assets (catch-all, registered last)
    # -------------------------------------------------------------------------

    @app.get("/{asset_path:path}")
    def static_asset(asset_path: str) -> Response:
        """Serve a file from the static root, or 404."""
        path = resolve_asset(static_root, asset_path, index=config.static.index)
        if path is None:
            logger.debug(f"Static miss: /{asset_path}")
            return _not_found()

        try:
            data = path.read_bytes()
        except OSError as e:
            logger.warning(f"Failed to read {path}: {e}")
            return _not_found()

        return Response(
            content=data,
            headers={"Content-Type": content_type_for(path.name)},
        )

    return app


# =============================================================================
# Module-level application
# =============================================================================

app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    uvicorn.run(
        "framecast.main:app",
        host=default_settings.server.host,
        port=default_settings.server.port,
        reload=False,
    )


if __name__ == "__main__":
    run()
