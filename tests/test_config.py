"""
Configuration Tests
===================

Defaults, YAML loading, environment overrides and validation.
"""

import logging

import pytest
from pydantic import ValidationError


ENV_VARS = [
    "PORT",
    "FRAMECAST_CONFIG",
    "FRAMECAST_HOST",
    "FRAMECAST_PORT",
    "FRAMECAST_STREAM_PATH",
    "FRAMECAST_MIN_INTERVAL_MS",
    "FRAMECAST_MAX_INTERVAL_MS",
    "FRAMECAST_FRAMING",
    "FRAMECAST_STATIC_ROOT",
    "FRAMECAST_LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettings:
    """Tests for the settings model."""

    def test_defaults(self):
        from framecast.config import PACKAGE_STATIC_ROOT, Settings

        settings = Settings()
        assert settings.server.port == 3000
        assert settings.stream.path == "/events"
        assert (settings.stream.width, settings.stream.height) == (600, 300)
        assert settings.stream.min_interval_ms == 3000
        assert settings.stream.max_interval_ms == 10000
        assert settings.stream.framing == "sse"
        assert settings.static.root == str(PACKAGE_STATIC_ROOT)

    def test_interval_order_enforced(self):
        from framecast.config import Settings

        with pytest.raises(ValidationError):
            Settings.model_validate({
                "stream": {"min_interval_ms": 5000, "max_interval_ms": 4000},
            })

    def test_unknown_framing_rejected(self):
        from framecast.config import Settings

        with pytest.raises(ValidationError):
            Settings.model_validate({"stream": {"framing": "websocket"}})

    def test_port_range_enforced(self):
        from framecast.config import Settings

        with pytest.raises(ValidationError):
            Settings.model_validate({"server": {"port": 70000}})


class TestLoadConfig:
    """Tests for load_config."""

    def test_yaml_file(self, tmp_path, clean_env):
        from framecast.config import load_config

        path = tmp_path / "config.yaml"
        path.write_text(
            "server:\n"
            "  port: 8080\n"
            "stream:\n"
            "  framing: legacy\n"
            "  min_interval_ms: 100\n"
            "  max_interval_ms: 200\n"
        )

        settings = load_config(str(path))
        assert settings.server.port == 8080
        assert settings.stream.framing == "legacy"
        assert settings.stream.max_interval_ms == 200

    def test_env_overrides_file(self, tmp_path, clean_env):
        from framecast.config import load_config

        path = tmp_path / "config.yaml"
        path.write_text("server:\n  port: 8080\n")
        clean_env.setenv("FRAMECAST_PORT", "9090")
        clean_env.setenv("FRAMECAST_MIN_INTERVAL_MS", "10")
        clean_env.setenv("FRAMECAST_MAX_INTERVAL_MS", "20")
        clean_env.setenv("FRAMECAST_FRAMING", "legacy")
        clean_env.setenv("FRAMECAST_LOG_LEVEL", "DEBUG")

        settings = load_config(str(path))
        assert settings.server.port == 9090
        assert settings.stream.min_interval_ms == 10
        assert settings.stream.max_interval_ms == 20
        assert settings.stream.framing == "legacy"
        assert settings.logging.level == "DEBUG"

    def test_platform_port_wins(self, tmp_path, clean_env):
        from framecast.config import load_config

        clean_env.setenv("PORT", "5555")
        clean_env.setenv("FRAMECAST_PORT", "9090")

        assert load_config(str(tmp_path / "absent.yaml")).server.port == 5555

    def test_missing_file_uses_defaults(self, tmp_path, clean_env):
        from framecast.config import load_config

        settings = load_config(str(tmp_path / "absent.yaml"))
        assert settings.server.port == 3000

    def test_empty_file(self, tmp_path, clean_env):
        from framecast.config import load_config

        path = tmp_path / "config.yaml"
        path.write_text("")
        assert load_config(str(path)).stream.path == "/events"


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_applies_level(self, monkeypatch):
        from framecast.config import Settings, setup_logging

        calls = {}
        monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.update(kw))

        setup_logging(Settings.model_validate({"logging": {"level": "debug", "format": "json"}}))

        assert calls["level"] == logging.DEBUG
        assert calls["format"].startswith('{"time"')

    def test_unknown_level_falls_back_to_info(self, monkeypatch):
        from framecast.config import Settings, setup_logging

        calls = {}
        monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.update(kw))

        setup_logging(Settings.model_validate({"logging": {"level": "chatty"}}))

        assert calls["level"] == logging.INFO
