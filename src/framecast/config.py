"""
Framecast Configuration
=======================

This module handles configuration loading for the dashboard server.

Configuration Sources (in order of precedence):
    1. Environment variables (highest priority)
    2. config.yaml file
    3. Default values (lowest priority)

Environment Variable Mapping:
    FRAMECAST_HOST             -> server.host
    FRAMECAST_PORT             -> server.port
    FRAMECAST_STREAM_PATH      -> stream.path
    FRAMECAST_MIN_INTERVAL_MS  -> stream.min_interval_ms
    FRAMECAST_MAX_INTERVAL_MS  -> stream.max_interval_ms
    FRAMECAST_FRAMING          -> stream.framing
    FRAMECAST_STATIC_ROOT      -> static.root
    FRAMECAST_LOG_LEVEL        -> logging.level
    PORT                       -> server.port (container platforms)

Example:
    from framecast.config import settings

    print(settings.server.port)
    print(settings.stream.min_interval_ms)
"""

import os
import logging
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, model_validator


logger = logging.getLogger(__name__)


PACKAGE_STATIC_ROOT = Path(__file__).parent / "static"


# =============================================================================
# Configuration Models
# =============================================================================

class AppConfig(BaseModel):
    """Application identification."""

    name: str = Field(default="framecast", description="Service name")
    version: str = Field(default="0.1.0", description="Service version")


class ServerConfig(BaseModel):
    """Server configuration."""

    host: str = Field(default="0.0.0.0", description="Bind host")
    port: int = Field(default=3000, ge=1, le=65535, description="Bind port")


class StreamConfig(BaseModel):
    """Event stream configuration."""

    path: str = Field(
        default="/events",
        description="Request path served by the stream session",
    )
    width: int = Field(default=600, gt=0, description="Frame width in pixels")
    height: int = Field(default=300, gt=0, description="Frame height in pixels")
    min_interval_ms: int = Field(
        default=3000,
        ge=0,
        description="Lower bound of the jittered tick delay (inclusive)",
    )
    max_interval_ms: int = Field(
        default=10000,
        ge=0,
        description="Upper bound of the jittered tick delay (inclusive)",
    )
    framing: Literal["sse", "legacy"] = Field(
        default="sse",
        description="Wire framing: 'sse' data frames or 'legacy' per-tick image responses",
    )
    channel_size: int = Field(
        default=8,
        ge=1,
        description="Maximum frames queued per session before dropping oldest",
    )

    @model_validator(mode="after")
    def _check_interval(self) -> "StreamConfig":
        if self.min_interval_ms > self.max_interval_ms:
            raise ValueError(
                f"min_interval_ms ({self.min_interval_ms}) exceeds "
                f"max_interval_ms ({self.max_interval_ms})"
            )
        return self


class RenderConfig(BaseModel):
    """Frame rasterization configuration."""

    max_dimension: int = Field(
        default=8192,
        ge=1,
        description="Largest accepted width or height",
    )
    font_scale: float = Field(default=1.0, gt=0, description="Label font scale")
    thickness: int = Field(default=2, ge=1, description="Stroke thickness (2 = bold)")


class StaticConfig(BaseModel):
    """Static asset configuration."""

    root: str = Field(
        default=str(PACKAGE_STATIC_ROOT),
        description="Directory static paths are resolved against",
    )
    index: str = Field(default="index.html", description="File served for '/'")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="text", description="Log format: json or text")


class Settings(BaseModel):
    """
    Main settings class for Framecast.

    Loads configuration from YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    app: AppConfig = Field(default_factory=AppConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    stream: StreamConfig = Field(default_factory=StreamConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)
    static: StaticConfig = Field(default_factory=StaticConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file and environment variables.

    Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values

    Args:
        config_path: Path to config.yaml. If None, searches common locations.

    Returns:
        Settings: Loaded configuration

    Raises:
        pydantic.ValidationError: If the merged configuration is invalid
    """
    if config_path is None:
        config_path = os.environ.get("FRAMECAST_CONFIG")

    if config_path is None:
        search_paths = [
            Path("config.yaml"),
            Path("config.yml"),
            Path(__file__).parent.parent.parent / "config.yaml",
        ]
        for path in search_paths:
            if path.exists():
                config_path = str(path)
                break

    config_data = {}
    if config_path and Path(config_path).exists():
        logger.info(f"Loading config from: {config_path}")
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}
    else:
        logger.warning("No config file found, using defaults and environment variables")

    _apply_env_overrides(config_data)

    return Settings.model_validate(config_data)


def _apply_env_overrides(config_data: dict) -> None:
    """Apply environment variable overrides to config data."""

    # Server settings (container platforms use PORT)
    if env_host := os.environ.get("FRAMECAST_HOST"):
        config_data.setdefault("server", {})["host"] = env_host
    if env_port := os.environ.get("PORT"):
        config_data.setdefault("server", {})["port"] = int(env_port)
    elif env_port := os.environ.get("FRAMECAST_PORT"):
        config_data.setdefault("server", {})["port"] = int(env_port)

    # Stream settings
    if env_path := os.environ.get("FRAMECAST_STREAM_PATH"):
        config_data.setdefault("stream", {})["path"] = env_path
    if env_min := os.environ.get("FRAMECAST_MIN_INTERVAL_MS"):
        config_data.setdefault("stream", {})["min_interval_ms"] = int(env_min)
    if env_max := os.environ.get("FRAMECAST_MAX_INTERVAL_MS"):
        config_data.setdefault("stream", {})["max_interval_ms"] = int(env_max)
    if env_framing := os.environ.get("FRAMECAST_FRAMING"):
        config_data.setdefault("stream", {})["framing"] = env_framing

    # Static settings
    if env_root := os.environ.get("FRAMECAST_STATIC_ROOT"):
        config_data.setdefault("static", {})["root"] = env_root

    # Logging settings
    if env_log := os.environ.get("FRAMECAST_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log


def setup_logging(settings: Settings) -> None:
    """Configure logging based on settings."""
    log_level = getattr(logging, settings.logging.level.upper(), logging.INFO)

    if settings.logging.format == "json":
        log_format = '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}'
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
    )


# =============================================================================
# Global Settings Instance
# =============================================================================

# Global settings instance - loaded on import
settings = load_config()
setup_logging(settings)
