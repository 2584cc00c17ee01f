from pathlib import Path

import pytest

from jokelist.config import CATEGORIES, Settings


def test_defaults(monkeypatch):
    for name in ("JOKELIST_API_URL", "JOKELIST_AMOUNT", "JOKELIST_CACHE_PATH",
                 "JOKELIST_REQUEST_TIMEOUT", "JOKELIST_DEFAULT_CATEGORY"):
        monkeypatch.delenv(name, raising=False)
    s = Settings.from_env()
    assert s.api_url == "https://v2.jokeapi.dev"
    assert s.amount == 50
    assert s.list_height == 500 and s.row_height == 150
    assert s.default_category == CATEGORIES[0] == "Programming"


def test_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("JOKELIST_API_URL", "http://localhost:9000/")
    monkeypatch.setenv("JOKELIST_CACHE_PATH", str(tmp_path / "c.json"))
    monkeypatch.setenv("JOKELIST_REQUEST_TIMEOUT", "0")
    monkeypatch.setenv("JOKELIST_DEFAULT_CATEGORY", "Spooky")
    s = Settings.from_env()
    assert s.api_url == "http://localhost:9000"
    assert s.cache_path == Path(tmp_path / "c.json")
    assert s.request_timeout is None
    assert s.default_category == "Spooky"


def test_bad_values(monkeypatch):
    monkeypatch.setenv("JOKELIST_AMOUNT", "many")
    with pytest.raises(ValueError, match="JOKELIST_AMOUNT"):
        Settings.from_env()
    monkeypatch.delenv("JOKELIST_AMOUNT")
    monkeypatch.setenv("JOKELIST_DEFAULT_CATEGORY", "Knock")
    with pytest.raises(ValueError, match="JOKELIST_DEFAULT_CATEGORY"):
        Settings.from_env()
