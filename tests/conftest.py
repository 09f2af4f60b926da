"""
Test Configuration
==================

Pytest fixtures and test configuration for Framecast.
"""

import asyncio
import random
from datetime import datetime

import pytest


@pytest.fixture
def rng():
    """Seeded random source for reproducible tests."""
    return random.Random(1234)


@pytest.fixture
def fixed_clock():
    """Clock pinned to 07:05:09."""
    return lambda: datetime(2024, 3, 1, 7, 5, 9)


@pytest.fixture
def sample_event():
    """Provide a sample Event for testing."""
    from framecast.models.event import Event

    return Event(value="ABCDEFG12Hi", time="13:37:00")


@pytest.fixture
def static_root(tmp_path):
    """Static asset directory with a page and a stylesheet."""
    root = tmp_path / "static"
    root.mkdir()
    (root / "index.html").write_text("<html><body>dashboard</body></html>")
    (root / "style.css").write_text("body { color: black; }")
    (root / "data.json").write_text('{"ok": true}')
    (root / "notes").write_text("plain")
    (tmp_path / "secret.txt").write_text("outside the root")
    return root


@pytest.fixture
def fast_settings(static_root):
    """Settings with millisecond-scale tick intervals."""
    from framecast.config import Settings

    return Settings.model_validate({
        "stream": {"min_interval_ms": 10, "max_interval_ms": 30},
        "static": {"root": str(static_root)},
    })


class ASGIStream:
    """
    Drives a streaming request through an ASGI app directly.

    receive() hands out the request once, then blocks until disconnect()
    is called. send() records every message.
    """

    def __init__(self, app, path: str = "/events") -> None:
        self.app = app
        self.path = path
        self.messages = []
        self._request_sent = False
        self._disconnected = asyncio.Event()
        self._body_arrived = asyncio.Event()
        self._task = None

    @property
    def scope(self) -> dict:
        return {
            "type": "http",
            "asgi": {"version": "3.0"},
            "http_version": "1.1",
            "method": "GET",
            "scheme": "http",
            "path": self.path,
            "raw_path": self.path.encode(),
            "root_path": "",
            "query_string": b"",
            "headers": [(b"host", b"testserver")],
            "client": ("127.0.0.1", 50000),
            "server": ("testserver", 80),
        }

    async def _receive(self) -> dict:
        if not self._request_sent:
            self._request_sent = True
            return {"type": "http.request", "body": b"", "more_body": False}
        await self._disconnected.wait()
        return {"type": "http.disconnect"}

    async def _send(self, message: dict) -> None:
        self.messages.append(message)
        if message["type"] == "http.response.body" and message.get("body"):
            self._body_arrived.set()

    def open(self) -> None:
        self._task = asyncio.create_task(self.app(self.scope, self._receive, self._send))

    async def wait_for_bodies(self, count: int, timeout: float = 5.0) -> None:
        async def _wait():
            while len(self.bodies) < count:
                self._body_arrived.clear()
                await self._body_arrived.wait()
        await asyncio.wait_for(_wait(), timeout=timeout)

    async def disconnect(self, timeout: float = 5.0) -> None:
        self._disconnected.set()
        await asyncio.wait_for(self._task, timeout=timeout)

    @property
    def starts(self) -> list:
        return [m for m in self.messages if m["type"] == "http.response.start"]

    @property
    def bodies(self) -> list:
        return [
            m["body"] for m in self.messages
            if m["type"] == "http.response.body" and m.get("body")
        ]

    def header(self, name: str) -> str:
        start = self.starts[0]
        for key, value in start["headers"]:
            if key.decode().lower() == name.lower():
                return value.decode()
        raise KeyError(name)


@pytest.fixture
def asgi_stream():
    """Factory for ASGIStream harnesses."""
    return ASGIStream
