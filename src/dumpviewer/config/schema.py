"""Configuration schema dataclasses.

Every field has a default so that partial config files merge cleanly.

Example config.yaml:
    server:
      host: 127.0.0.1
      port: 3000
      max_dumps: 500
    refresh:
      interval: 2.0
      cooldown: 5.0
    client:
      url: http://127.0.0.1:3000
    logging:
      level: DEBUG
      file: ~/dumpviewer.log
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ServerConfig:
    """Collector and dashboard server settings."""

    host: str = "127.0.0.1"
    port: int = 3000
    max_dumps: int | None = None  # Oldest dumps dropped past this count


@dataclass
class RefreshConfig:
    """Polling cadence and interaction cool-down, in seconds."""

    interval: float = 2.0
    cooldown: float = 5.0


@dataclass
class ClientConfig:
    """Where the terminal front end finds a running server."""

    url: str = "http://127.0.0.1:3000"
    timeout: float = 5.0


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str | None = None  # DEBUG, INFO, WARNING, ERROR
    verbose: int | None = None  # 0-4, overrides level
    file: str | None = None  # Log file path


@dataclass
class Config:
    """Root configuration object."""

    server: ServerConfig = field(default_factory=ServerConfig)
    refresh: RefreshConfig = field(default_factory=RefreshConfig)
    client: ClientConfig = field(default_factory=ClientConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Unknown top-level sections, kept for extensions
    extra: dict[str, Any] = field(default_factory=dict)
