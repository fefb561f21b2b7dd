"""
Tests for logging setup.
"""

import logging
from pathlib import Path

import pytest

from relpull.core.observability.logging_config import resolve_level, setup_logging


@pytest.fixture(autouse=True)
def _restore_logging():
    root = logging.getLogger()
    app = logging.getLogger("relpull")
    handlers, level, app_level = list(root.handlers), root.level, app.level
    yield
    for h in root.handlers:
        if h not in handlers:
            h.close()
    root.handlers[:] = handlers
    root.setLevel(level)
    app.setLevel(app_level)


class TestResolveLevel:
    def test_flags_take_precedence(self, monkeypatch):
        monkeypatch.setenv("RELPULL_LOG_LEVEL", "ERROR")
        assert resolve_level(debug=True, verbose=True) == "DEBUG"
        assert resolve_level(verbose=True) == "INFO"
        assert resolve_level(quiet=True) == "ERROR"

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("RELPULL_LOG_LEVEL", "INFO")
        assert resolve_level() == "INFO"

    def test_default(self, monkeypatch):
        monkeypatch.delenv("RELPULL_LOG_LEVEL", raising=False)
        assert resolve_level() == "WARNING"


class TestSetupLogging:
    def test_app_logger_follows_level(self):
        setup_logging("INFO")
        assert logging.getLogger("relpull").level == logging.INFO
        assert logging.getLogger().level == logging.WARNING

    def test_debug_opens_root(self):
        setup_logging("DEBUG")
        assert logging.getLogger().level == logging.DEBUG

    def test_unknown_level_is_warning(self):
        setup_logging("chatty")
        assert logging.getLogger("relpull").level == logging.WARNING

    def test_file_output(self, tmp_path: Path):
        log_file = tmp_path / "relpull.log"
        setup_logging("WARNING", log_file=str(log_file), log_file_level="DEBUG")

        logging.getLogger("relpull.test").debug("written to file only")
        for h in logging.getLogger().handlers:
            h.flush()

        assert "written to file only" in log_file.read_text()
