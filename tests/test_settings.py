from __future__ import annotations

import logging
from pathlib import Path

from courtside_core.log import PACKAGE_LOGGERS, configure_logging
from courtside_web import settings as settings_module


def test_load_settings_defaults(monkeypatch):
    monkeypatch.setattr(settings_module, "_secret", lambda name: None)
    monkeypatch.delenv("COURTSIDE_DB_PATH", raising=False)
    monkeypatch.delenv("COURTSIDE_LOG_LEVEL", raising=False)
    monkeypatch.delenv("COURTSIDE_ALLOW_SIGNUP", raising=False)

    loaded = settings_module.load_settings()

    assert loaded.db_path.name == "courtside.db"
    assert loaded.log_level == "INFO"
    assert loaded.allow_signup is True


def test_load_settings_from_environment(monkeypatch, tmp_path):
    monkeypatch.setattr(settings_module, "_secret", lambda name: None)
    monkeypatch.setenv("COURTSIDE_DB_PATH", str(tmp_path / "team.db"))
    monkeypatch.setenv("COURTSIDE_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("COURTSIDE_ALLOW_SIGNUP", "off")

    loaded = settings_module.load_settings()

    assert loaded.db_path == Path(tmp_path / "team.db")
    assert loaded.log_level == "DEBUG"
    assert loaded.allow_signup is False


def test_secret_overrides_environment(monkeypatch):
    monkeypatch.setattr(settings_module, "_secret", lambda name: "/data/secret.db" if name == "DB_PATH" else None)
    monkeypatch.setenv("COURTSIDE_DB_PATH", "/tmp/env.db")

    assert settings_module.load_settings().db_path == Path("/data/secret.db")


def test_configure_logging_sets_package_levels():
    configure_logging("debug")
    configure_logging("WARNING")

    for name in PACKAGE_LOGGERS:
        package_logger = logging.getLogger(name)
        assert package_logger.level == logging.WARNING
        assert len(package_logger.handlers) == 1


def test_configure_logging_falls_back_to_info():
    configure_logging("chatty")

    assert logging.getLogger("courtside_store").level == logging.INFO

