"""Tests for environment-driven settings and logging setup."""
from __future__ import annotations

import logging
import os
from pathlib import Path

import pytest

from preprod_engine.config import (
    DEFAULT_API_BASE_URL,
    DEFAULT_HTTP_TIMEOUT,
    get_env_flag,
    load_settings,
)
from preprod_engine.logging_utils import setup_logging

_VARS = (
    "PREPROD_API_BASE_URL",
    "PREPROD_HTTP_TIMEOUT",
    "PREPROD_DATA_DIR",
    "PREPROD_LOG_LEVEL",
    "PREPROD_VERIFY_TLS",
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)
    # keep load_dotenv from picking up a developer's .env
    monkeypatch.chdir(tmp_path)
    return monkeypatch


class TestLoadSettings:

    def test_defaults(self, clean_env):
        settings = load_settings()
        assert settings.api_base_url == DEFAULT_API_BASE_URL
        assert settings.http_timeout == DEFAULT_HTTP_TIMEOUT
        assert settings.data_dir == Path("data")
        assert settings.log_level == "INFO"
        assert settings.verify_tls is True

    def test_environment_overrides(self, clean_env):
        clean_env.setenv("PREPROD_API_BASE_URL", "https://studio.example/")
        clean_env.setenv("PREPROD_HTTP_TIMEOUT", "30")
        clean_env.setenv("PREPROD_DATA_DIR", "/srv/preprod")
        clean_env.setenv("PREPROD_LOG_LEVEL", "debug")
        clean_env.setenv("PREPROD_VERIFY_TLS", "no")
        settings = load_settings()
        assert settings.api_base_url == "https://studio.example"
        assert settings.http_timeout == 30.0
        assert settings.inventory_dir == Path("/srv/preprod/inventory")
        assert settings.documents_dir == Path("/srv/preprod/projects")
        assert settings.log_level == "DEBUG"
        assert settings.verify_tls is False

    def test_dotenv_file_is_read(self, clean_env, tmp_path):
        (tmp_path / ".env").write_text("PREPROD_HTTP_TIMEOUT=7\n", encoding="utf-8")
        try:
            assert load_settings().http_timeout == 7.0
        finally:
            os.environ.pop("PREPROD_HTTP_TIMEOUT", None)

    def test_bad_timeout(self, clean_env):
        clean_env.setenv("PREPROD_HTTP_TIMEOUT", "soon")
        with pytest.raises(ValueError, match="PREPROD_HTTP_TIMEOUT"):
            load_settings()


class TestGetEnvFlag:

    @pytest.mark.parametrize("value", ["1", "true", "YES", " on "])
    def test_truthy(self, monkeypatch, value):
        monkeypatch.setenv("PREPROD_FLAG", value)
        assert get_env_flag("PREPROD_FLAG") is True

    def test_falsy(self, monkeypatch):
        monkeypatch.setenv("PREPROD_FLAG", "0")
        assert get_env_flag("PREPROD_FLAG", default=True) is False

    def test_default(self, monkeypatch):
        monkeypatch.delenv("PREPROD_FLAG", raising=False)
        assert get_env_flag("PREPROD_FLAG", default=True) is True


class TestSetupLogging:

    def test_file_handler_added_once(self, tmp_path):
        log_file = tmp_path / "logs" / "preprod.log"
        root = logging.getLogger()
        before = list(root.handlers)
        level = root.level
        try:
            setup_logging(log_file=log_file, level="WARNING")
            setup_logging(log_file=log_file, level="WARNING")
            file_handlers = [
                h for h in root.handlers
                if isinstance(h, logging.FileHandler) and Path(h.baseFilename) == log_file.resolve()
            ]
            assert len(file_handlers) == 1
            logging.getLogger("preprod_engine.test").warning("hello file")
            file_handlers[0].flush()
            assert "[WARNING] preprod_engine.test | hello file" in log_file.read_text(encoding="utf-8")
        finally:
            for handler in list(root.handlers):
                if handler not in before:
                    root.removeHandler(handler)
                    handler.close()
            root.setLevel(level)
