"""
Tests for config and the command line entry point.
"""

import argparse
import json
import logging

import pytest

from config import Environment, PortalConfig, StoreBackend
from main import build_parser, run
from utils.logger import setup_logger


class TestPortalConfig:

    def test_loaded_from_environment(self, portal_config, tmp_path):
        assert portal_config.environment == Environment.TESTING
        assert portal_config.store.backend == StoreBackend.JSON
        assert portal_config.store.path == tmp_path / "data" / "portal_store.json"
        assert portal_config.store.lock_timeout_seconds == 0.3
        assert portal_config.sheets.monitor_sheets[0] == "M1"
        assert portal_config.sheets.monitor_sheets[-1] == "M10"
        assert portal_config.sheets.legacy == ""

    def test_monitor_sheet_naming(self, portal_config, monkeypatch):
        monkeypatch.setenv("MONITOR_SHEET_PREFIX", "Monitor ")
        monkeypatch.setenv("MONITOR_SHEET_COUNT", "2")
        assert PortalConfig().sheets.monitor_sheets == ["Monitor 1", "Monitor 2"]

    @pytest.mark.parametrize("env", [
        {"LOCK_TIMEOUT": "0"},
        {"STORE_BACKEND": "sheets"},
        {"ADMIN_CREDENTIAL": ""},
        {"MONITOR_SHEET_COUNT": "-1"},
    ])
    def test_validation_errors(self, portal_config, monkeypatch, env):
        monkeypatch.delenv("GOOGLE_SHEET_ID", raising=False)
        for key, value in env.items():
            monkeypatch.setenv(key, value)
        with pytest.raises(ValueError, match="Ошибки конфигурации"):
            PortalConfig()

    def test_secrets_masked(self, portal_config):
        data = portal_config.to_dict()
        assert data["admin_credential"] == "***"
        assert data["admin_enabled"] is True
        assert "ADMIN-TOKEN" not in json.dumps(data)

    def test_logging_config(self, portal_config, monkeypatch):
        console_only = portal_config.get_logging_config()
        assert console_only["loggers"][""]["handlers"] == ["console"]
        assert "file" not in console_only["handlers"]

        monkeypatch.setenv("LOG_TO_FILE", "true")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        file_config = PortalConfig()
        logging_config = file_config.get_logging_config()
        assert logging_config["loggers"][""]["handlers"] == ["console", "file"]
        assert logging_config["loggers"][""]["level"] == "DEBUG"
        assert logging_config["handlers"]["file"]["filename"].endswith("portal_testing.log")

    def test_setup_logger_without_file(self, portal_config):
        root = setup_logger(portal_config)
        assert root is logging.getLogger()
        assert root.level == logging.INFO
        assert not portal_config.log_dir.exists()

    def test_setup_logger_with_file(self, portal_config, monkeypatch):
        monkeypatch.setenv("LOG_TO_FILE", "true")
        file_config = PortalConfig()
        setup_logger(file_config)
        logging.getLogger("portal.test").info("ok")
        assert (file_config.log_dir / "portal_testing.log").exists()
        setup_logger(portal_config)


class TestCommandLine:

    def _run(self, argv, service=None):
        args = build_parser().parse_args(argv)
        return run(args, service_factory=(lambda: service) if service else None)

    def test_match(self, capsys):
        assert self._run(["match", "Shiva", "Shiva Rama Krishna Boga"]) == 0
        assert json.loads(capsys.readouterr().out) == {"equivalent": True}

    def test_date(self, capsys):
        assert self._run(["date", "23-01-2026 • 21:30"]) == 0
        assert json.loads(capsys.readouterr().out) == {"day_key": "2026-01-23", "time": "09:30 PM"}

    def test_history(self, service, capsys):
        assert self._run(["history", "Anita Sharma", "--id", "CIAL-003"], service) == 0
        history = json.loads(capsys.readouterr().out)
        assert [h["day_key"] for h in history] == ["2026-02-13"]

    def test_stats(self, service, capsys):
        assert self._run(["stats"], service) == 0
        stats = json.loads(capsys.readouterr().out)
        assert stats["Kanishk"]["days_completed"] == 1
        assert list(stats) == sorted(stats)

    def test_submit(self, service, capsys):
        argv = ["submit", "Anita Sharma", "--id", "CIAL-003", "--date", "2026-03-05", "--category", "SQL"]
        assert self._run(argv, service) == 0
        assert json.loads(capsys.readouterr().out) == {"success": True}

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_namespace_without_service_for_pure_commands(self, capsys):
        args = argparse.Namespace(command="match", name_a="A B", name_b="A C")
        assert run(args) == 0
        assert json.loads(capsys.readouterr().out) == {"equivalent": False}
