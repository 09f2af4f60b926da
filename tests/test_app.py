"""
Application Tests
=================

HTTP dispatch: static assets, operational endpoints and the event stream.
"""

import asyncio

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def client(fast_settings):
    from framecast.main import create_app

    return TestClient(create_app(fast_settings))


class TestStaticDispatch:
    """Static asset routing."""

    def test_missing_file_is_404(self, client):
        response = client.get("/missing.html")

        assert response.status_code == 404
        assert response.text == "404 Not Found"
        assert response.headers["content-type"] == "text/plain"

    def test_stylesheet_content_type(self, client):
        response = client.get("/style.css")

        assert response.status_code == 200
        assert response.headers["content-type"] == "text/css"
        assert "color: black" in response.text

    def test_root_serves_index(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.headers["content-type"] == "text/html"
        assert "dashboard" in response.text

    def test_json_and_default_types(self, client):
        assert client.get("/data.json").headers["content-type"] == "application/json"
        assert client.get("/notes").headers["content-type"] == "text/plain"

    def test_traversal_is_404(self, client):
        response = client.get("/%2e%2e/secret.txt")

        assert response.status_code == 404
        assert response.text == "404 Not Found"

    def test_packaged_assets(self):
        """Default settings serve the bundled dashboard page."""
        from framecast.config import Settings
        from framecast.main import create_app

        response = TestClient(create_app(Settings())).get("/style.css")
        assert response.status_code == 200
        assert response.headers["content-type"] == "text/css"


class TestOperationalEndpoints:
    """Health and metrics."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_metrics_without_sessions(self, client):
        body = client.get("/metrics").json()

        assert body["active_sessions"] == 0
        assert body["sessions_opened"] == 0
        assert body["framing"] == "sse"
        assert body["sessions"] == []


class TestEventStream:
    """End-to-end tests of /events through the ASGI interface."""

    @pytest.fixture
    def captured_sessions(self, monkeypatch):
        """Record every session the dispatcher creates."""
        import framecast.main as main

        sessions = []
        original = main.create_session

        def recording(config):
            session = original(config)
            sessions.append(session)
            return session

        monkeypatch.setattr(main, "create_session", recording)
        return sessions

    def test_headers_then_decodable_frame(self, fast_settings, asgi_stream, captured_sessions):
        from framecast.client import decode_message, parse_sse
        from framecast.main import create_app

        async def scenario():
            stream = asgi_stream(create_app(fast_settings))
            stream.open()
            await stream.wait_for_bodies(1)
            await stream.disconnect()
            return stream

        stream = asyncio.run(scenario())

        assert len(stream.starts) == 1
        assert stream.starts[0]["status"] == 200
        assert stream.header("content-type") == "text/event-stream"
        assert stream.header("cache-control") == "no-cache"
        assert stream.header("connection") == "keep-alive"

        (message,) = list(parse_sse(stream.bodies[0].decode("utf-8").split("\n")))
        assert message.event == "frame"
        frame = decode_message(message)
        assert (frame.width, frame.height) == (600, 300)

    def test_disconnect_stops_frames_and_cancels_timer(
        self, fast_settings, asgi_stream, captured_sessions
    ):
        from framecast.main import create_app

        async def scenario():
            app = create_app(fast_settings)
            stream = asgi_stream(app)
            stream.open()
            await stream.wait_for_bodies(2)
            await stream.disconnect()
            sent_at_disconnect = len(stream.bodies)
            # Several max intervals
            await asyncio.sleep(0.2)
            return app, stream, sent_at_disconnect

        app, stream, sent_at_disconnect = asyncio.run(scenario())
        (session,) = captured_sessions

        assert len(stream.bodies) == sent_at_disconnect
        assert session.closed
        assert not session.pending
        assert len(app.state.sessions) == 0
        assert app.state.sessions.metrics()["sessions_closed"] == 1

    def test_legacy_framing(self, fast_settings, asgi_stream, captured_sessions):
        from framecast.main import create_app
        from framecast.render import frame_dimensions

        fast_settings.stream.framing = "legacy"

        async def scenario():
            stream = asgi_stream(create_app(fast_settings))
            stream.open()
            await stream.wait_for_bodies(1)
            await stream.disconnect()
            return stream

        stream = asyncio.run(scenario())

        assert stream.header("content-type") == "text/event-stream"
        head, _, png = stream.bodies[0].partition(b"\r\n\r\n")
        assert head.startswith(b"HTTP/1.1 200 OK\r\nContent-Type: image/png")
        assert frame_dimensions(png) == (600, 300)

    def test_sessions_are_independent(self, fast_settings, asgi_stream, captured_sessions):
        from framecast.main import create_app

        async def scenario():
            app = create_app(fast_settings)
            first, second = asgi_stream(app), asgi_stream(app)
            first.open()
            second.open()
            await first.wait_for_bodies(1)
            await second.wait_for_bodies(1)
            await first.disconnect()
            active_after_first = len(app.state.sessions)
            await second.wait_for_bodies(len(second.bodies) + 1)
            await second.disconnect()
            return active_after_first

        active_after_first = asyncio.run(scenario())

        assert active_after_first == 1
        assert len(captured_sessions) == 2
        assert all(s.closed for s in captured_sessions)
