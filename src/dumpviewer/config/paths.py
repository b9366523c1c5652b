"""Config file locations.

Lowest to highest priority:
- System: /etc/dumpviewer/config.yaml or %PROGRAMDATA%\\dumpviewer\\config.yaml
- User: $XDG_CONFIG_HOME/dumpviewer, ~/.config/dumpviewer or %APPDATA%\\dumpviewer
- Project: <project_root>/.dumpviewer/config.yaml
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

CONFIG_FILENAME = "config.yaml"
APP_NAME = "dumpviewer"
PROJECT_DIR = ".dumpviewer"


def get_system_config_path() -> Path | None:
    if sys.platform == "win32":
        program_data = os.environ.get("PROGRAMDATA")
        return Path(program_data) / APP_NAME / CONFIG_FILENAME if program_data else None
    return Path("/etc") / APP_NAME / CONFIG_FILENAME


def get_user_config_path() -> Path | None:
    if sys.platform == "win32":
        app_data = os.environ.get("APPDATA")
        return Path(app_data) / APP_NAME / CONFIG_FILENAME if app_data else None
    base = os.environ.get("XDG_CONFIG_HOME")
    config_home = Path(base) if base else Path.home() / ".config"
    return config_home / APP_NAME / CONFIG_FILENAME


def get_project_config_path(project_root: str | Path) -> Path:
    return Path(project_root) / PROJECT_DIR / CONFIG_FILENAME


def get_config_paths(project_root: str | Path | None = None) -> list[Path]:
    """All candidate config files, lowest priority first. Files may not exist."""
    candidates = [get_system_config_path(), get_user_config_path()]
    if project_root:
        candidates.append(get_project_config_path(project_root))
    return [path for path in candidates if path is not None]
