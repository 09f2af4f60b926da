"""
Framecast
=========

Live-dashboard server that streams freshly rendered event frames.

Each client connected to the stream endpoint gets its own session that,
at jittered intervals, generates a synthetic event, rasterizes it into a
PNG and pushes it down the open response. Everything else is served from
a static asset directory.

Components:
    - events: Synthetic event generation
    - render: Frame rasterization (OpenCV) and decoding
    - stream: Stream sessions, framing, jitter and session bookkeeping
    - assets: Static file resolution and MIME lookup
    - client: Probe client for the event stream

Example:
    from framecast.main import create_app

    app = create_app()
    # Served with uvicorn; see main.py for entry point
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
