"""Root pytest configuration for all tests."""

from __future__ import annotations

import json

import pytest

from dumpviewer.models import Dump
from tests.utils import INDENTED_SAMPLE, WIDGET_SAMPLE, FakeClock, make_dump

# Redundant with pyproject.toml but ensures the plugin is loaded
pytest_plugins = ("pytest_asyncio",)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def json_dump() -> Dump:
    return make_dump(json.dumps({"a": {"b": 1, "c": 2, "d": 3}}), file="app.php", line=12)


@pytest.fixture
def indented_dump() -> Dump:
    return make_dump(INDENTED_SAMPLE, timestamp="2024-05-01T10:00:01")


@pytest.fixture
def widget_dump() -> Dump:
    return make_dump(WIDGET_SAMPLE, timestamp="2024-05-01T10:00:02")


@pytest.fixture
def text_dump() -> Dump:
    return make_dump("hello world", timestamp="2024-05-01T10:00:03")
