"""Tests for conf.json loading and Settings integration."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from flowise_core.config import BASE_DIR, CoreConfig, Settings, get_core_dir, load_conf, save_conf


@pytest.fixture(autouse=True)
def _isolate_core_dir(tmp_path, monkeypatch):
    """Point FLOWISE_CORE_DIR to tmp_path so tests never touch the real config."""
    monkeypatch.setenv("FLOWISE_CORE_DIR", str(tmp_path / "flowise-core"))


# ---------------------------------------------------------------------------
# get_core_dir
# ---------------------------------------------------------------------------


def test_get_core_dir_default(monkeypatch):
    monkeypatch.delenv("FLOWISE_CORE_DIR", raising=False)
    assert get_core_dir() == Path.home() / ".config" / "flowise-core"


def test_get_core_dir_env_override(monkeypatch, tmp_path):
    custom = tmp_path / "custom_dir"
    monkeypatch.setenv("FLOWISE_CORE_DIR", str(custom))
    assert get_core_dir() == custom


# ---------------------------------------------------------------------------
# load_conf / save_conf
# ---------------------------------------------------------------------------


def test_load_conf_defaults():
    """No conf.json file → CoreConfig uses built-in defaults."""
    conf = load_conf()
    assert conf == CoreConfig()
    assert conf.providers == []


def test_load_conf_from_file(tmp_path):
    core_dir = tmp_path / "flowise-core"
    core_dir.mkdir()
    data = {
        "log_level": "DEBUG",
        "node_catalog_path": "/srv/nodes.json",
        "default_provider": "z-ai",
        "providers": [{"id": "local", "baseUrl": "http://localhost:11434"}],
    }
    (core_dir / "conf.json").write_text(json.dumps(data))

    conf = load_conf()
    assert conf.log_level == "DEBUG"
    assert conf.node_catalog_path == "/srv/nodes.json"
    assert conf.default_provider == "z-ai"
    assert conf.providers[0]["id"] == "local"


def test_load_conf_invalid_json(tmp_path, caplog):
    """Malformed JSON → falls back to defaults and logs a warning."""
    core_dir = tmp_path / "flowise-core"
    core_dir.mkdir()
    (core_dir / "conf.json").write_text("{not valid json!!!")

    with caplog.at_level("WARNING", logger="flowise_core.config"):
        conf = load_conf()
    assert conf == CoreConfig()
    assert "Failed to parse" in caplog.text


def test_save_conf_roundtrip(tmp_path):
    original = CoreConfig(log_level="WARNING", default_provider="z-ai")
    save_conf(original)
    assert (tmp_path / "flowise-core" / "conf.json").exists()
    assert load_conf() == original


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


def test_settings_defaults(monkeypatch):
    for name in ("VALIDATION_ERROR_PENALTY", "VALIDATION_WARNING_PENALTY", "MAX_EXECUTION_PATHS"):
        monkeypatch.delenv(name, raising=False)
    s = Settings()
    assert s.VALIDATION_ERROR_PENALTY == 20
    assert s.VALIDATION_WARNING_PENALTY == 5
    assert s.MAX_EXECUTION_PATHS == 256
    assert s.NODE_CATALOG_PATH == str(BASE_DIR / "data" / "flowise_nodes.json")


def test_settings_env_override(monkeypatch):
    monkeypatch.setenv("VALIDATION_ERROR_PENALTY", "25")
    monkeypatch.setenv("DEFAULT_PROVIDER", "z-ai")
    s = Settings()
    assert s.VALIDATION_ERROR_PENALTY == 25
    assert s.DEFAULT_PROVIDER == "z-ai"
