"""Config loading: YAML files, environment overrides and caching."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from dumpviewer.config.paths import get_config_paths
from dumpviewer.config.schema import (
    ClientConfig,
    Config,
    LoggingConfig,
    RefreshConfig,
    ServerConfig,
)

_log = logging.getLogger("dumpviewer.config")

_cached_config: Config | None = None


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML mapping; missing, unreadable or invalid files give ``{}``."""
    if not path.exists():
        return {}
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        _log.warning("Invalid YAML in %s: %s", path, e)
        return {}
    except OSError as e:
        _log.warning("Error reading %s: %s", path, e)
        return {}
    return data if isinstance(data, dict) else {}


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge ``override`` into a copy of ``base``.

    Nested mappings merge recursively, anything else (lists included) is
    replaced, and None in ``override`` leaves the base value alone.
    """
    merged = dict(base)
    for key, value in override.items():
        if value is None:
            continue
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def env_overrides() -> dict[str, Any]:
    """Config values from DUMPVIEWER_* environment variables."""
    overrides: dict[str, Any] = {}

    log_path = os.environ.get("DUMPVIEWER_LOG")
    if log_path:
        overrides.setdefault("logging", {})["file"] = log_path

    port = os.environ.get("DUMPVIEWER_PORT")
    if port:
        try:
            overrides.setdefault("server", {})["port"] = int(port)
        except ValueError:
            _log.warning("Ignoring non-numeric DUMPVIEWER_PORT=%r", port)

    url = os.environ.get("DUMPVIEWER_URL")
    if url:
        overrides.setdefault("client", {})["url"] = url

    return overrides


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name)
    return section if isinstance(section, dict) else {}


def dict_to_config(data: dict[str, Any]) -> Config:
    """Convert a merged config mapping to the typed Config."""
    server_data = _section(data, "server")
    defaults = ServerConfig()
    server = ServerConfig(
        host=server_data.get("host", defaults.host),
        port=int(server_data.get("port", defaults.port)),
        max_dumps=server_data.get("max_dumps"),
    )

    refresh_data = _section(data, "refresh")
    refresh = RefreshConfig(
        interval=float(refresh_data.get("interval", RefreshConfig.interval)),
        cooldown=float(refresh_data.get("cooldown", RefreshConfig.cooldown)),
    )

    client_data = _section(data, "client")
    client = ClientConfig(
        url=client_data.get("url", ClientConfig.url),
        timeout=float(client_data.get("timeout", ClientConfig.timeout)),
    )

    log_data = _section(data, "logging")
    logging_config = LoggingConfig(
        level=log_data.get("level"),
        verbose=log_data.get("verbose"),
        file=log_data.get("file"),
    )

    known = {"server", "refresh", "client", "logging"}
    return Config(
        server=server,
        refresh=refresh,
        client=client,
        logging=logging_config,
        extra={k: v for k, v in data.items() if k not in known},
    )


def load_config(project_root: str | Path | None = None, reload: bool = False) -> Config:
    """Load and merge config from all sources.

    Priority (highest first): environment, project file, user file, system
    file. Only the global config (no ``project_root``) is cached.
    """
    global _cached_config

    if _cached_config is not None and not reload and project_root is None:
        return _cached_config

    merged: dict[str, Any] = {}
    for path in get_config_paths(project_root):
        data = load_yaml_file(path)
        if data:
            _log.debug("Loaded config from %s", path)
            merged = deep_merge(merged, data)
    merged = deep_merge(merged, env_overrides())

    config = dict_to_config(merged)
    if project_root is None:
        _cached_config = config
    return config


def get_config() -> Config:
    """Get the cached global config, loading it on first use."""
    if _cached_config is None:
        return load_config()
    return _cached_config


def reset_config() -> None:
    """Forget the cached config (tests, forced reload)."""
    global _cached_config
    _cached_config = None
