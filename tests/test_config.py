# tests/test_config.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from todo_api.config import Settings, load_settings
from todo_api.logging_setup import setup_logging


def test_defaults_without_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("DATABASE_URL", "SQL_ECHO", "API_PREFIX", "FRONTEND_ORIGIN", "LOG_LEVEL", "LOG_DIR", "HOST", "PORT"):
        monkeypatch.delenv(name, raising=False)

    assert load_settings() == Settings()


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "sqlite:///./other.db")
    monkeypatch.setenv("SQL_ECHO", "true")
    monkeypatch.setenv("API_PREFIX", "/v2/")
    monkeypatch.setenv("FRONTEND_ORIGIN", "http://example.test")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("PORT", "8080")

    settings = load_settings()
    assert settings.database_url == "sqlite:///./other.db"
    assert settings.sql_echo is True
    assert settings.api_prefix == "/v2"
    assert settings.frontend_origin == "http://example.test"
    assert settings.log_level == "DEBUG"
    assert settings.port == 8080


def test_setup_logging_writes_file(tmp_path: Path) -> None:
    root = logging.getLogger()
    saved = list(root.handlers)
    saved_level = root.level
    try:
        setup_logging(level="INFO", log_dir=tmp_path)
        setup_logging(level="INFO", log_dir=tmp_path)
        # second call replaces handlers instead of stacking them
        assert len(root.handlers) == 2

        logging.getLogger("todo_api.test").info("hello_log")
        for h in root.handlers:
            h.flush()

        assert "hello_log" in (tmp_path / "todo_api.log").read_text(encoding="utf-8")
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved:
            root.addHandler(h)
        root.setLevel(saved_level)
        logging.captureWarnings(False)
