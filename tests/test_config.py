"""
Tests for settings and logging configuration.
"""
import io
import json
import logging
import os

from veer.config import Settings, ensure_database_directory
from veer.logging_config import JSONFormatter, setup_logging


class TestSettings:
    def test_memory_database_kept(self, settings):
        assert settings.database_path == ":memory:"

    def test_default_database_path_is_absolute(self, monkeypatch):
        monkeypatch.delenv("VEER_DB_PATH", raising=False)
        monkeypatch.delenv("DATABASE_PATH", raising=False)
        settings = Settings(_env_file=None)
        assert os.path.isabs(settings.database_path)
        assert settings.database_path.endswith(os.path.join("data", "veer.db"))

    def test_env_aliases(self, monkeypatch, tmp_path):
        monkeypatch.delenv("DATABASE_PATH", raising=False)
        monkeypatch.delenv("AGENT_PORT", raising=False)
        monkeypatch.delenv("VEER_AGENT_PORT", raising=False)
        monkeypatch.setenv("VEER_DB_PATH", str(tmp_path / "x.db"))
        monkeypatch.setenv("PORT", "4321")
        monkeypatch.setenv("SYSTEM_AGENT_TOKEN", "  tok  ")
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        settings = Settings(_env_file=None)
        assert settings.database_path == str(tmp_path / "x.db")
        assert settings.agent_port == 4321
        assert settings.system_agent_token == "tok"
        assert settings.openai_api_key == "sk-env"

    def test_defaults(self, settings_factory):
        settings = settings_factory()
        assert settings.agent_host == "127.0.0.1"
        assert settings.history_max_points == 60
        assert settings.history_interval_seconds == 30.0

    def test_ensure_database_directory(self, tmp_path):
        db_path = tmp_path / "a" / "b" / "veer.db"
        ensure_database_directory(str(db_path))
        assert db_path.parent.is_dir()
        # No-op for in-memory databases
        ensure_database_directory(":memory:")


class TestLogging:
    def test_json_formatter_includes_extra(self):
        record = logging.LogRecord("veer.test", logging.INFO, __file__, 1, "hello %s", ("world",), None)
        record.command = "df -h /"
        payload = json.loads(JSONFormatter().format(record))
        assert payload["message"] == "hello world"
        assert payload["level"] == "INFO"
        assert payload["logger"] == "veer.test"
        assert payload["command"] == "df -h /"

    def test_setup_logging_replaces_handler(self):
        root = logging.getLogger()
        before = list(root.handlers)
        stream = io.StringIO()
        try:
            setup_logging("INFO", "json", stream=io.StringIO())
            setup_logging("INFO", "json", stream=stream)
            ours = [h for h in root.handlers if getattr(h, "_veer_handler", False)]
            assert len(ours) == 1
            logging.getLogger("veer.test").info("ready", extra={"port": 4000})
            line = json.loads(stream.getvalue().strip().splitlines()[-1])
            assert line["message"] == "ready"
            assert line["port"] == 4000
        finally:
            for handler in list(root.handlers):
                if handler not in before:
                    root.removeHandler(handler)

    def test_text_format(self):
        root = logging.getLogger()
        before = list(root.handlers)
        stream = io.StringIO()
        try:
            setup_logging("WARNING", "text", stream=stream)
            logging.getLogger("veer.test").warning("careful")
            assert " - veer.test - WARNING - careful" in stream.getvalue()
        finally:
            for handler in list(root.handlers):
                if handler not in before:
                    root.removeHandler(handler)
