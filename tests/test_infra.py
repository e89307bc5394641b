import logging

import pytest
from pydantic import ValidationError

from infra.logger import configure_logging, get_logger
from infra.settings import Settings


def test_settings_defaults():
    settings = Settings()
    assert settings.narrator == "fallback"
    assert settings.tick_interval_seconds == 12 * 60 * 60


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("MERIDIAN_NARRATOR", "llm")
    monkeypatch.setenv("MERIDIAN_NARRATOR_TIMEOUT", "2.5")
    monkeypatch.setenv("MERIDIAN_LOG_JSON", "true")

    settings = Settings(_env_file=None)
    assert settings.narrator == "llm"
    assert settings.narrator_timeout == 2.5
    assert settings.log_json is True


def test_settings_reject_unknown_narrator(monkeypatch):
    monkeypatch.setenv("MERIDIAN_NARRATOR", "oracle")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_settings_read_env_file(tmp_path, monkeypatch):
    monkeypatch.delenv("MERIDIAN_LOG_LEVEL", raising=False)
    monkeypatch.delenv("MERIDIAN_TICK_INTERVAL_SECONDS", raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text(
        "MERIDIAN_LOG_LEVEL=DEBUG\nMERIDIAN_TICK_INTERVAL_SECONDS=60\nGEMINI_API_KEY=unused\n",
        encoding="utf-8",
    )

    settings = Settings(_env_file=env_file)
    assert settings.log_level == "DEBUG"
    assert settings.tick_interval_seconds == 60


def test_configure_logging_writes_logfile(tmp_path):
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    logfile = tmp_path / "logs" / "engine.log"
    try:
        configure_logging("DEBUG", json=True, logfile=logfile)
        get_logger("engine.test").debug("tick resolved")
        for handler in root.handlers:
            handler.flush()
    finally:
        for handler in root.handlers:
            if isinstance(handler, logging.FileHandler):
                handler.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)

    line = logfile.read_text(encoding="utf-8").strip()
    assert '"level":"DEBUG"' in line
    assert '"msg":"tick resolved"' in line
