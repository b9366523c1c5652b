"""Tests for the configuration module."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from dumpviewer.config import (
    Config,
    deep_merge,
    get_config,
    get_config_paths,
    get_project_config_path,
    get_user_config_path,
    load_config,
    reset_config,
)
from dumpviewer.config.loader import dict_to_config, env_overrides, load_yaml_file


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Point user config at an empty temp dir and clear env overrides."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.setenv("APPDATA", str(tmp_path / "appdata"))
    monkeypatch.setattr(
        "dumpviewer.config.loader.get_config_paths",
        lambda project_root=None: [
            path for path in get_config_paths(project_root) if not str(path).startswith("/etc")
        ],
    )
    for name in ("DUMPVIEWER_LOG", "DUMPVIEWER_PORT", "DUMPVIEWER_URL"):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


class TestDeepMerge:
    def test_simple_override(self) -> None:
        assert deep_merge({"a": 1, "b": 2}, {"b": 3, "c": 4}) == {"a": 1, "b": 3, "c": 4}

    def test_nested_merge(self) -> None:
        base = {"server": {"host": "127.0.0.1", "port": 3000}}
        result = deep_merge(base, {"server": {"port": 4000}})
        assert result == {"server": {"host": "127.0.0.1", "port": 4000}}

    def test_none_does_not_override(self) -> None:
        assert deep_merge({"a": 1}, {"a": None}) == {"a": 1}

    def test_list_replaced(self) -> None:
        assert deep_merge({"items": [1, 2]}, {"items": [3]}) == {"items": [3]}

    def test_base_not_mutated(self) -> None:
        base = {"a": {"b": 1}}
        deep_merge(base, {"a": {"b": 2}})
        assert base == {"a": {"b": 1}}


class TestPaths:
    def test_project_path(self, tmp_path: Path) -> None:
        assert get_project_config_path(tmp_path) == tmp_path / ".dumpviewer" / "config.yaml"

    @pytest.mark.skipif(sys.platform == "win32", reason="XDG layout")
    def test_user_path_uses_xdg(self, tmp_path: Path) -> None:
        assert get_user_config_path() == tmp_path / "xdg" / "dumpviewer" / "config.yaml"

    def test_project_path_last(self, tmp_path: Path) -> None:
        paths = get_config_paths(tmp_path)
        assert paths[-1] == get_project_config_path(tmp_path)


class TestLoadYaml:
    def test_missing_file(self, tmp_path: Path) -> None:
        assert load_yaml_file(tmp_path / "nope.yaml") == {}

    def test_invalid_yaml_ignored(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("server: [unclosed\n", encoding="utf-8")
        assert load_yaml_file(path) == {}

    def test_non_mapping_ignored(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n", encoding="utf-8")
        assert load_yaml_file(path) == {}


class TestLoadConfig:
    def test_defaults(self) -> None:
        config = load_config()
        assert isinstance(config, Config)
        assert config.server.port == 3000
        assert config.server.host == "127.0.0.1"
        assert config.refresh.interval == 2.0
        assert config.refresh.cooldown == 5.0
        assert config.client.url == "http://127.0.0.1:3000"

    def test_project_file(self, tmp_path: Path) -> None:
        project = tmp_path / "project"
        path = get_project_config_path(project)
        path.parent.mkdir(parents=True)
        path.write_text(
            "server:\n  port: 4000\n  max_dumps: 50\nrefresh:\n  cooldown: 1.5\nplugins:\n  x: 1\n",
            encoding="utf-8",
        )
        config = load_config(project_root=project)
        assert config.server.port == 4000
        assert config.server.max_dumps == 50
        assert config.refresh.cooldown == 1.5
        assert config.refresh.interval == 2.0
        assert config.extra == {"plugins": {"x": 1}}

    @pytest.mark.skipif(sys.platform == "win32", reason="XDG layout")
    def test_project_overrides_user(self, tmp_path: Path) -> None:
        user = get_user_config_path()
        assert user is not None
        user.parent.mkdir(parents=True)
        user.write_text("server:\n  port: 4000\n  host: 0.0.0.0\n", encoding="utf-8")

        project = tmp_path / "project"
        path = get_project_config_path(project)
        path.parent.mkdir(parents=True)
        path.write_text("server:\n  port: 5000\n", encoding="utf-8")

        config = load_config(project_root=project)
        assert config.server.port == 5000
        assert config.server.host == "0.0.0.0"

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DUMPVIEWER_PORT", "3100")
        monkeypatch.setenv("DUMPVIEWER_URL", "http://remote:3100")
        monkeypatch.setenv("DUMPVIEWER_LOG", "/tmp/dv.log")
        config = load_config(reload=True)
        assert config.server.port == 3100
        assert config.client.url == "http://remote:3100"
        assert config.logging.file == "/tmp/dv.log"

    def test_bad_port_env_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DUMPVIEWER_PORT", "abc")
        assert env_overrides() == {}

    def test_cached(self) -> None:
        first = get_config()
        assert get_config() is first
        reset_config()
        assert get_config() is not first


def test_dict_to_config_ignores_bad_sections() -> None:
    config = dict_to_config({"server": "oops", "logging": {"level": "DEBUG"}})
    assert config.server.port == 3000
    assert config.logging.level == "DEBUG"
