import logging
import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from rankconsole.core.log import get_logger, set_level
from rankconsole.core.messages import load_messages
from rankconsole.core.settings import DEFAULT_API_BASE, load_settings


def test_settings_defaults(monkeypatch):
    for name in ("RANKING_API_BASE", "RANKING_API_TIMEOUT", "API_CORS_ORIGINS", "CONSOLE_LOCALE", "CONSOLE_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    settings = load_settings()

    assert settings.api_base == DEFAULT_API_BASE
    assert settings.api_timeout == 30.0
    assert "http://localhost:3000" in settings.cors_origins
    assert settings.locale == "zh"
    assert settings.log_level == "INFO"


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("RANKING_API_BASE", "https://rank.example.com/api/")
    monkeypatch.setenv("RANKING_API_TIMEOUT", "5")
    monkeypatch.setenv("API_CORS_ORIGINS", "https://a.example.com, https://b.example.com")
    monkeypatch.setenv("CONSOLE_LOG_LEVEL", "debug")

    settings = load_settings()

    assert settings.api_base == "https://rank.example.com/api"
    assert settings.api_timeout == 5.0
    assert settings.cors_origins == ["https://a.example.com", "https://b.example.com"]
    assert settings.log_level == "DEBUG"


def test_log_level_comes_from_settings(monkeypatch):
    monkeypatch.setenv("CONSOLE_LOG_LEVEL", "warning")
    existing = get_logger("tests.existing")

    try:
        set_level(load_settings().log_level)
        created = get_logger("tests.created")

        assert existing.level == logging.WARNING
        assert created.level == logging.WARNING
    finally:
        set_level("INFO")

    assert existing.level == logging.INFO


def test_invalid_timeout(monkeypatch):
    monkeypatch.setenv("RANKING_API_TIMEOUT", "soon")
    with pytest.raises(ValueError):
        load_settings()


def test_messages_by_locale():
    zh = load_messages("zh")
    en = load_messages("en")

    assert zh.boards["weekly"] == "周刊"
    assert zh.issue_label(87) == "第 87 期"
    assert en.issue_label(87) == "Issue #87"
    assert en.failure("process") == "Processing failed"


def test_unknown_locale_falls_back_to_defaults():
    messages = load_messages("xx")

    assert messages.parts == {"main": "主榜", "new": "新曲榜"}
    assert messages.failure("upload") == "上传失败"
