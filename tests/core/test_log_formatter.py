"""
Unit tests for console log formatting and file logging setup.
"""

import logging

import pytest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "../..")))

from core.log_formatter import EnhancedLogFormatter, configure_file_logging


def make_record(name, level, message):
    return logging.LogRecord(name, level, __file__, 1, message, None, None)


class TestEnhancedLogFormatter:
    def test_service_prefix_from_logger_name(self):
        formatter = EnhancedLogFormatter(use_colors=False)
        record = make_record("gsheets.sheets_tools", logging.INFO, "[insert_table] Invoked.")

        assert formatter.format(record) == "[SHEETS] [insert_table] Invoked."

    def test_warning_adds_level_suffix(self):
        formatter = EnhancedLogFormatter(use_colors=False)
        record = make_record("gdrive.drive_tools", logging.WARNING, "slow")

        assert formatter.format(record) == "[DRIVE] WARNING: slow"

    def test_unknown_logger_uses_uppercased_root(self):
        formatter = EnhancedLogFormatter(use_colors=False)

        assert formatter.format(make_record("urllib3.pool", logging.INFO, "x")) == "[URLLIB3] x"

    def test_colors_wrap_prefix(self):
        formatter = EnhancedLogFormatter(use_colors=True)
        formatted = formatter.format(make_record("gmail.gmail_tools", logging.ERROR, "boom"))

        assert formatted.startswith("\033[31m[GMAIL] ERROR:")
        assert formatted.endswith(" boom")


@pytest.fixture
def restore_root_handlers():
    root_logger = logging.getLogger()
    before = list(root_logger.handlers)
    yield root_logger
    for handler in list(root_logger.handlers):
        if handler not in before:
            root_logger.removeHandler(handler)
            handler.close()


class TestConfigureFileLogging:
    def test_disabled_without_env(self, monkeypatch):
        monkeypatch.delenv("SHEET_REPORT_LOG_FILE", raising=False)

        assert configure_file_logging() is None

    def test_attaches_file_handler_from_env(self, tmp_path, monkeypatch, restore_root_handlers):
        log_path = tmp_path / "logs" / "report.log"
        monkeypatch.setenv("SHEET_REPORT_LOG_FILE", str(log_path))

        assert configure_file_logging() == str(log_path)
        assert log_path.parent.is_dir()

        file_handlers = [
            handler
            for handler in restore_root_handlers.handlers
            if isinstance(handler, logging.FileHandler)
            and handler.baseFilename == str(log_path)
        ]
        assert len(file_handlers) == 1

    def test_repeated_call_does_not_duplicate_handler(self, tmp_path, restore_root_handlers):
        log_path = str(tmp_path / "report.log")

        configure_file_logging(log_path)
        configure_file_logging(log_path)

        matching = [
            handler
            for handler in restore_root_handlers.handlers
            if isinstance(handler, logging.FileHandler) and handler.baseFilename == log_path
        ]
        assert len(matching) == 1
