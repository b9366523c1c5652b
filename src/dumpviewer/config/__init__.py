"""Configuration management for dumpviewer.

YAML config merged from system, user and project files, with DUMPVIEWER_*
environment variables on top.

Example usage:
    from dumpviewer.config import load_config

    config = load_config(project_root=".")
    print(config.server.port)
    print(config.refresh.cooldown)
"""

from dumpviewer.config.loader import (
    deep_merge,
    get_config,
    load_config,
    reset_config,
)
from dumpviewer.config.paths import (
    get_config_paths,
    get_project_config_path,
    get_system_config_path,
    get_user_config_path,
)
from dumpviewer.config.schema import (
    ClientConfig,
    Config,
    LoggingConfig,
    RefreshConfig,
    ServerConfig,
)

__all__ = [
    # Main API
    "Config",
    "load_config",
    "get_config",
    "reset_config",
    "deep_merge",
    # Schema types
    "ServerConfig",
    "RefreshConfig",
    "ClientConfig",
    "LoggingConfig",
    # Path utilities
    "get_config_paths",
    "get_system_config_path",
    "get_user_config_path",
    "get_project_config_path",
]
